"""Tests for memory and register operations."""

import warnings

import jax
import jax.numpy as jnp
import pytest
from chip8jax import EmulatorState, StackState, execute, create_state, step, FONT_START, MEMORY_SIZE, PROGRAM_START
from chip8jax.constants import FONT_DATA
from conftest import state_with_program


class TestInitialState:
    """Test machine construction."""

    def test_font_loaded(self, fresh_state):
        """Glyphs occupy the first 80 bytes."""
        assert jnp.array_equal(fresh_state.memory[FONT_START:FONT_START + 80], FONT_DATA)
        assert fresh_state.memory[0] == 0xF0  # top row of glyph 0
        assert fresh_state.memory[5 * 0xF + 4] == 0x80  # bottom row of glyph F

    def test_everything_else_zeroed(self, fresh_state):
        assert fresh_state.memory.shape == (MEMORY_SIZE,)
        assert not jnp.any(fresh_state.memory[80:])
        assert not jnp.any(fresh_state.V)
        assert fresh_state.I == 0
        assert fresh_state.pc == PROGRAM_START
        assert fresh_state.stack.pointer == 0
        assert fresh_state.delay_timer == 0
        assert fresh_state.sound_timer == 0
        assert not jnp.any(fresh_state.keypad)
        assert not jnp.any(fresh_state.display)
        assert not fresh_state.awaiting_key

    def test_defaults_are_fresh_per_instance(self):
        """Each state gets its own default arrays with the machine dtypes."""
        first = EmulatorState(jax.random.PRNGKey(0))
        second = EmulatorState(jax.random.PRNGKey(1))

        assert first.memory is not second.memory
        assert first.stack is not second.stack
        assert first.pc == PROGRAM_START
        assert first.pc.dtype == jnp.uint16
        assert first.V.dtype == jnp.uint8
        assert StackState().data.shape == (16,)
        assert StackState().pointer.dtype == jnp.uint8


class TestBasicMemory:
    """Test basic memory operations."""

    def test_set_basic(self, fresh_state):
        """6XNN - Set VX = NN."""
        state = execute(fresh_state, 0x600A)  # V0 = 0xA
        assert state.V[0] == 0xA

    def test_add_basic(self, fresh_state):
        """7XNN - Add NN to VX."""
        state = fresh_state.replace(V=fresh_state.V.at[1].set(0x10))
        state = execute(state, 0x7105)  # V1 += 5
        assert state.V[1] == 0x15

    def test_add_wraps_without_flag(self, fresh_state):
        """7XNN - Overflow wraps and VF keeps its value."""
        state = fresh_state.replace(V=fresh_state.V.at[1].set(0xFE).at[15].set(0x07))
        state = execute(state, 0x7105)
        assert state.V[1] == 0x03
        assert state.V[15] == 0x07

    def test_jitted_writes_stay_bytes(self):
        """6XNN, 7XNN, CXNN - traced uint16 operands are stored as bytes."""
        state = state_with_program(0x6AFE, 0x7A03, 0xC1F0)
        jit_step = jax.jit(lambda s: step(s))

        with warnings.catch_warnings():
            warnings.simplefilter("error", FutureWarning)
            for _ in range(3):
                state = jit_step(state)

        assert state.V.dtype == jnp.uint8
        assert state.V[0xA] == 0x01
        assert state.V[1] & 0x0F == 0


class TestIndexRegister:
    """Test I register operations."""

    def test_set_index_basic(self, fresh_state):
        """ANNN - Set I register to NNN."""
        state = execute(fresh_state, 0xA123)  # I = 0x123
        assert state.I == 0x123

    def test_set_index_maximum(self, fresh_state):
        """ANNN - Set I register to maximum 12-bit value."""
        state = execute(fresh_state, 0xAFFF)  # I = 0xFFF
        assert state.I == 0xFFF

    def test_set_index_common_values(self, fresh_state):
        """ANNN - Test common memory addresses."""
        test_values = [0x000, 0x200, 0x300, 0x500, 0xA00, 0xEA0]

        for value in test_values:
            state = execute(fresh_state, 0xA000 | value)
            assert state.I == value, f"Failed to set I to 0x{value:03X}"


class TestRandom:
    """Test random number generation."""

    def test_random_zero_mask(self, fresh_state):
        """CXNN - Random AND with 0x00 should always be 0."""
        state = execute(fresh_state, 0xC000)  # V0 = random & 0x00
        assert state.V[0] == 0

    def test_random_bit_mask(self, seeded_state):
        """CXNN - Result never has bits outside the mask."""
        state = seeded_state
        for _ in range(20):
            state = execute(state, 0xC10F)
            assert state.V[1] & 0xF0 == 0

    def test_random_advances_key(self, fresh_state):
        """CXNN - Consecutive draws use fresh keys."""
        state = execute(fresh_state, 0xC1FF)
        assert not jnp.array_equal(state.rng, fresh_state.rng)

    def test_random_is_reproducible_with_same_key(self):
        """The PRNG key in the state is the only source of randomness."""
        values = []
        for _ in range(2):
            state = create_state(jax.random.PRNGKey(7))
            for _ in range(5):
                state = execute(state, 0xC0FF)
            values.append(int(state.V[0]))
        assert values[0] == values[1]

    def test_random_values_vary(self, seeded_state):
        state = seeded_state
        seen = set()
        for _ in range(16):
            state = execute(state, 0xC0FF)
            seen.add(int(state.V[0]))
        assert len(seen) > 1
