"""Test configuration and fixtures for CHIP-8 emulator tests."""

import pytest
import jax
import jax.numpy as jnp
from chip8jax import create_state, load_program


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test."""
    return create_state()


@pytest.fixture
def seeded_state():
    """State with a non-default random key."""
    return create_state(jax.random.PRNGKey(1234))


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def program(*opcodes):
    """Assemble 16-bit opcodes into a big-endian program image."""
    return b"".join(op.to_bytes(2, "big") for op in opcodes)


def state_with_program(*opcodes, state=None):
    """Fresh state with the given opcodes loaded at the entry point."""
    return load_program(state if state is not None else create_state(), program(*opcodes))
