"""CHIP-8 stack operations.

Pushing onto a full stack and popping an empty one are left to the callers,
which skip the instruction instead (see ``execute_call``/``execute_return``).
"""

import jax.numpy as jnp
from chip8jax.constants import ADDRESS_MASK, STACK_SIZE
from chip8jax.state import StackState


def is_full(stack: StackState) -> jnp.ndarray:
    return stack.pointer >= STACK_SIZE


def is_empty(stack: StackState) -> jnp.ndarray:
    return stack.pointer == 0


def push(stack: StackState, address: jnp.ndarray) -> StackState:
    """Push address onto stack."""
    masked_address = jnp.astype(address & ADDRESS_MASK, jnp.uint16)
    new_data = stack.data.at[stack.pointer].set(masked_address)
    return stack.replace(data=new_data, pointer=stack.pointer + 1)


def pop(stack: StackState) -> tuple[StackState, jnp.ndarray]:
    """Pop address from stack."""
    new_pointer = stack.pointer - 1
    popped_address = stack.data[new_pointer]
    new_data = stack.data.at[new_pointer].set(0)
    return stack.replace(data=new_data, pointer=new_pointer), popped_address
