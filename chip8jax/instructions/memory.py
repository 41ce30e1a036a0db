"""CHIP-8 register loads and the random byte (6xxx, 7xxx, Axxx, Cxxx).

Operands decoded from a jitted fetch are uint16, so anything written into
the byte registers is cast to uint8 first.
"""

import jax
import jax.numpy as jnp
from chip8jax.state import EmulatorState
from chip8jax.decode import DecodedInstruction


def _as_byte(value) -> jnp.ndarray:
    return jnp.astype(value & 0xFF, jnp.uint8)


def execute_set(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """6XNN - VX = NN."""
    return state.replace(V=state.V.at[instruction.x].set(_as_byte(instruction.nn)))


def execute_add(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """7XNN - VX += NN modulo 256, VF untouched."""
    return state.replace(V=state.V.at[instruction.x].add(_as_byte(instruction.nn)))


def execute_set_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """ANNN - I = NNN."""
    return state.replace(I=jnp.astype(instruction.nnn, jnp.uint16))


def execute_random(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """CXNN - VX = random byte & NN.

    The state's key is split; one half draws the byte, the other replaces
    ``state.rng`` so the next draw differs.
    """
    rng, draw_key = jax.random.split(state.rng)
    byte = jax.random.bits(draw_key, shape=(), dtype=jnp.uint8) & _as_byte(instruction.nn)
    return state.replace(V=state.V.at[instruction.x].set(byte), rng=rng)
