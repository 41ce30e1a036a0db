"""Tests for delay and sound timers."""

import jax.numpy as jnp
from chip8jax import tick_timers, sound_active


def with_timers(state, delay, sound):
    return state.replace(
        delay_timer=jnp.asarray(delay, dtype=jnp.uint8),
        sound_timer=jnp.asarray(sound, dtype=jnp.uint8),
    )


class TestTickTimers:
    """One 60 Hz tick."""

    def test_both_decrement(self, fresh_state):
        state = tick_timers(with_timers(fresh_state, 10, 3))
        assert state.delay_timer == 9
        assert state.sound_timer == 2

    def test_floor_at_zero(self, fresh_state):
        state = tick_timers(with_timers(fresh_state, 0, 0))
        assert state.delay_timer == 0
        assert state.sound_timer == 0

    def test_independent(self, fresh_state):
        """One timer reaching zero does not stop the other."""
        state = with_timers(fresh_state, 1, 4)
        for _ in range(3):
            state = tick_timers(state)
        assert state.delay_timer == 0
        assert state.sound_timer == 1

    def test_keeps_dtype(self, fresh_state):
        state = tick_timers(with_timers(fresh_state, 255, 255))
        assert state.delay_timer.dtype == jnp.uint8
        assert state.sound_timer.dtype == jnp.uint8
        assert state.delay_timer == 254


class TestSoundActive:
    """Tone gating."""

    def test_active_while_nonzero(self, fresh_state):
        state = with_timers(fresh_state, 0, 2)
        assert sound_active(state)
        state = tick_timers(state)
        assert sound_active(state)
        state = tick_timers(state)
        assert not sound_active(state)

    def test_delay_timer_does_not_sound(self, fresh_state):
        assert not sound_active(with_timers(fresh_state, 30, 0))
