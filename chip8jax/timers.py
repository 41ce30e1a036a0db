"""CHIP-8 delay and sound timers."""

import jax.numpy as jnp
from chip8jax.state import EmulatorState


def tick_timers(state: EmulatorState) -> EmulatorState:
    """Decrement both timers once (one 60 Hz tick), stopping at zero."""
    return state.replace(
        delay_timer=jnp.where(state.delay_timer > 0, state.delay_timer - 1, state.delay_timer),
        sound_timer=jnp.where(state.sound_timer > 0, state.sound_timer - 1, state.sound_timer),
    )


def sound_active(state: EmulatorState) -> jnp.ndarray:
    """Whether the tone should be playing."""
    return state.sound_timer > 0
