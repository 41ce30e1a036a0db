"""CHIP-8 ALU operations (8xxx).

Every operation maps ``(vx, vy, vf)`` to ``(result, flag)``. The flag is
written to VF first and the result to VX second, so when X is F the result wins.
"""

import jax
import jax.lax
import jax.numpy as jnp
from chip8jax.constants import FLAG_REGISTER
from chip8jax.state import EmulatorState
from chip8jax.decode import DecodedInstruction


def alu_set(vx, vy, vf):
    """8XY0 - Set: VX = VY."""
    return vy, vf


def alu_or(vx, vy, vf):
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, vf


def alu_and(vx, vy, vf):
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, vf


def alu_xor(vx, vy, vf):
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, vf


def alu_add(vx, vy, vf):
    """8XY4 - Add: VX += VY, set carry flag."""
    result = jnp.astype(vx, jnp.int32) + vy
    carry = jnp.astype(result > 255, jnp.uint8)
    return jnp.astype(result & 0xFF, jnp.uint8), carry


def alu_sub_xy(vx, vy, vf):
    """8XY5 - Subtract: VX -= VY, VF = 1 when there is no borrow."""
    no_borrow = jnp.astype(vx >= vy, jnp.uint8)
    result = (vx - vy) & 0xFF
    return result, no_borrow


def alu_shift_right(vx, vy, vf):
    """8XY6 - Shift right: VF = VX bit 0, VX >>= 1."""
    shifted_bit = vx & 1
    result = vx >> 1
    return result, shifted_bit


def alu_sub_yx(vx, vy, vf):
    """8XY7 - Subtract: VX = VY - VX, VF = 1 when there is no borrow."""
    no_borrow = jnp.astype(vy >= vx, jnp.uint8)
    result = (vy - vx) & 0xFF
    return result, no_borrow


def alu_shift_left(vx, vy, vf):
    """8XYE - Shift left: VF = VX bit 7, VX <<= 1."""
    shifted_bit = (vx & 0x80) >> 7
    result = (vx << 1) & 0xFF
    return result, shifted_bit


def alu_undefined(vx, vy, vf):
    """Undefined ALU operation."""
    return vx, vf


def _as_bytes(op):
    """Give every branch the same uint8 output types."""
    def wrapped(vx, vy, vf):
        result, flag = op(vx, vy, vf)
        return jnp.astype(result, jnp.uint8), jnp.astype(flag, jnp.uint8)
    return wrapped


_ALU_OPERATIONS = [
    alu_set, alu_or, alu_and, alu_xor, alu_add,
    alu_sub_xy, alu_shift_right, alu_sub_yx, alu_shift_left, alu_undefined,
]

# Low nibble -> index into _ALU_OPERATIONS
_ALU_TABLE = jnp.array([0, 1, 2, 3, 4, 5, 6, 7, 9, 9, 9, 9, 9, 9, 8, 9], dtype=jnp.int32)


def execute_alu_operation(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """8XYN - ALU operations dispatcher."""
    vx = state.V[instruction.x]
    vy = state.V[instruction.y]
    vf = state.V[FLAG_REGISTER]

    result, flag = jax.lax.switch(
        _ALU_TABLE[instruction.n],
        [_as_bytes(op) for op in _ALU_OPERATIONS],
        vx, vy, vf
    )

    new_V = state.V.at[FLAG_REGISTER].set(flag)
    new_V = new_V.at[instruction.x].set(result)
    return state.replace(V=new_V)
