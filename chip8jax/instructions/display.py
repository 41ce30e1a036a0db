"""CHIP-8 display operations."""

import jax.numpy as jnp
from chip8jax.constants import ADDRESS_MASK, FLAG_REGISTER
from chip8jax.state import EmulatorState
from chip8jax.decode import DecodedInstruction


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N.

    The start position wraps around the screen, the sprite itself is clipped
    at the right and bottom edges. VF is set when any pixel of the sprite
    turns a lit pixel off.
    """
    height, width = state.display.shape
    yy, xx = jnp.meshgrid(jnp.arange(height), jnp.arange(width), indexing='ij')

    sprite_x = jnp.astype(state.V[instruction.x], jnp.int32) % width
    sprite_y = jnp.astype(state.V[instruction.y], jnp.int32) % height

    row_offset = yy - sprite_y
    col_offset = xx - sprite_x
    in_sprite = (col_offset >= 0) & (col_offset < 8) & (row_offset >= 0) & (row_offset < instruction.n)

    addresses = (jnp.astype(state.I, jnp.int32) + jnp.clip(row_offset, 0, 15)) & ADDRESS_MASK
    sprite_bytes = state.memory[addresses]
    bits = (sprite_bytes >> jnp.clip(7 - col_offset, 0, 7)) & 1
    sprite = (bits == 1) & in_sprite

    collision = jnp.any(state.display & sprite)
    return state.replace(
        display=state.display ^ sprite,
        V=state.V.at[FLAG_REGISTER].set(jnp.astype(collision, jnp.uint8))
    )
