"""CHIP-8 emulator state structures."""

import jax
import jax.numpy as jnp
from flax.struct import dataclass, field, PyTreeNode

from chip8jax.constants import (
    PROGRAM_START, FONT_START, FONT_DATA, MEMORY_SIZE, SCREEN_WIDTH, SCREEN_HEIGHT,
    STACK_SIZE, NUM_REGISTERS, NUM_KEYS,
)


def _zeros(shape, dtype):
    return field(default_factory=lambda: jnp.zeros(shape, dtype=dtype))


@dataclass(frozen=True)
class StackState:
    """Fixed-capacity return address stack."""
    data: jnp.ndarray = _zeros(STACK_SIZE, jnp.uint16)
    pointer: jnp.ndarray = _zeros((), jnp.uint8)


class EmulatorState(PyTreeNode):
    """Main CHIP-8 emulator state.

    The display is stored as a ``(height, width)`` boolean array, so its
    row-major flattening is the framebuffer with ``index = y * width + x``.
    """
    rng: jax.random.PRNGKey
    memory: jnp.ndarray = _zeros(MEMORY_SIZE, jnp.uint8)
    pc: jnp.ndarray = field(default_factory=lambda: jnp.asarray(PROGRAM_START, dtype=jnp.uint16))
    display: jnp.ndarray = _zeros((SCREEN_HEIGHT, SCREEN_WIDTH), jnp.bool_)
    stack: StackState = field(default_factory=StackState)
    delay_timer: jnp.ndarray = _zeros((), jnp.uint8)
    sound_timer: jnp.ndarray = _zeros((), jnp.uint8)
    keypad: jnp.ndarray = _zeros(NUM_KEYS, jnp.bool_)
    V: jnp.ndarray = _zeros(NUM_REGISTERS, jnp.uint8)
    I: jnp.ndarray = _zeros((), jnp.uint16)
    awaiting_key: jnp.ndarray = _zeros((), jnp.bool_)


def create_state(
    rng: jax.random.PRNGKey = jax.random.PRNGKey(0),
    width: int = SCREEN_WIDTH,
    height: int = SCREEN_HEIGHT,
) -> EmulatorState:
    """Create initial emulator state with font data loaded."""
    state = EmulatorState(rng, display=jnp.zeros((height, width), dtype=jnp.bool_))
    return state.replace(memory=state.memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(FONT_DATA))


def framebuffer(state: EmulatorState) -> jnp.ndarray:
    """Row-major flat view of the display (``width * height`` booleans)."""
    return state.display.reshape(-1)
