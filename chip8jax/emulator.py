"""Main CHIP-8 emulator execution engine."""

import jax
import jax.lax
import jax.numpy as jnp
from chip8jax.state import EmulatorState
from chip8jax.decode import decode
from chip8jax.constants import ADDRESS_MASK, MAX_PROGRAM_SIZE, PROGRAM_START
from chip8jax.errors import ROMNotFoundError, ROMTooLargeError
from chip8jax.instructions.system import execute_system_instruction
from chip8jax.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset, execute_skip_if_key
)
from chip8jax.instructions.alu import execute_alu_operation
from chip8jax.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chip8jax.instructions.display import execute_display
from chip8jax.instructions.misc import execute_misc_instruction


def execute(state: EmulatorState, instruction: int) -> EmulatorState:
    """Execute single CHIP-8 instruction."""
    decoded_instruction = decode(instruction)

    return jax.lax.switch(
        decoded_instruction.family,
        [
            execute_system_instruction,
            execute_jump,
            execute_call,
            execute_skip_if_equal_immediate,
            execute_skip_if_not_equal_immediate,
            execute_skip_if_equal_register,
            execute_set,
            execute_add,
            execute_alu_operation,
            execute_skip_if_not_equal_register,
            execute_set_index,
            execute_jump_with_offset,
            execute_random,
            execute_display,
            execute_skip_if_key,
            execute_misc_instruction,
        ],
        state, decoded_instruction
    )


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Pack two bytes into uint16."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)


def fetch(state: EmulatorState) -> tuple[EmulatorState, jnp.uint16]:
    """Fetch next instruction from memory and advance PC past it."""
    instruction = _pack_u16(
        state.memory[state.pc & ADDRESS_MASK],
        state.memory[(state.pc + 1) & ADDRESS_MASK],
    )
    return state.replace(pc=state.pc + 2), instruction


def step(state: EmulatorState) -> EmulatorState:
    """Fetch, decode and execute one instruction."""
    state, instruction = fetch(state)
    return execute(state, instruction)


def load_program(state: EmulatorState, program: bytes, name: str = "program") -> EmulatorState:
    """Copy a program image into memory at 0x200.

    Raises:
        ROMTooLargeError: if the image does not fit in the remaining memory.
    """
    if len(program) > MAX_PROGRAM_SIZE:
        raise ROMTooLargeError(len(program), MAX_PROGRAM_SIZE, name)
    if not program:
        return state
    rom_array = jnp.array(list(program), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(program)].set(rom_array)
    return state.replace(memory=new_memory)


def load_rom(state: EmulatorState, filename: str) -> EmulatorState:
    """Load ROM data into CHIP-8 memory starting at 0x200."""
    try:
        with open(filename, 'rb') as f:
            rom_data = f.read()
    except OSError as e:
        raise ROMNotFoundError(filename) from e
    return load_program(state, rom_data, name=f"ROM file {filename}")
