"""CHIP-8 control flow instructions."""

import jax
import jax.lax
import jax.numpy as jnp
from chip8jax.constants import ADDRESS_MASK
from chip8jax.state import EmulatorState
from chip8jax.decode import DecodedInstruction
from chip8jax.stack import push, is_full


def execute_jump(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """1NNN - Jump to address NNN."""
    return state.replace(pc=jnp.astype(instruction.nnn, jnp.uint16))


def execute_call(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """2NNN - Call subroutine at NNN. Ignored when the stack is full."""
    def _call(state):
        state = state.replace(stack=push(state.stack, state.pc))
        return execute_jump(state, instruction)

    return jax.lax.cond(is_full(state.stack), lambda s: s, _call, state)


def make_skip_instruction(condition_fn):
    """Factory for skip instructions."""
    def skip_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        condition = condition_fn(state, instruction)
        return jax.lax.cond(
            condition,
            lambda s: s.replace(pc=s.pc + 2),
            lambda s: s,
            state
        )
    return skip_instruction


execute_skip_if_equal_immediate = make_skip_instruction(
    lambda state, inst: state.V[inst.x] == inst.nn
)

execute_skip_if_not_equal_immediate = make_skip_instruction(
    lambda state, inst: state.V[inst.x] != inst.nn
)

# 5XY1..5XYF and 9XY1..9XYF are not instructions
execute_skip_if_equal_register = make_skip_instruction(
    lambda state, inst: (inst.n == 0) & (state.V[inst.x] == state.V[inst.y])
)

execute_skip_if_not_equal_register = make_skip_instruction(
    lambda state, inst: (inst.n == 0) & (state.V[inst.x] != state.V[inst.y])
)


def execute_jump_with_offset(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """BNNN - Jump to address NNN + V0."""
    jump_address = (jnp.astype(instruction.nnn, jnp.uint16) + jnp.astype(state.V[0], jnp.uint16)) & ADDRESS_MASK
    return state.replace(pc=jnp.astype(jump_address, jnp.uint16))


execute_skip_if_key = make_skip_instruction(
    # EX9E skips if key VX is down, EXA1 if it is up; anything else never skips
    lambda state, inst: (
        ((inst.nn == 0x9E) & state.keypad[state.V[inst.x] & 0xF])
        | ((inst.nn == 0xA1) & ~state.keypad[state.V[inst.x] & 0xF])
    )
)
