"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax
import jax.lax
import jax.numpy as jnp
from chip8jax.state import EmulatorState
from chip8jax.decode import DecodedInstruction
from chip8jax.constants import ADDRESS_MASK, FONT_START, GLYPH_SIZE, NUM_REGISTERS
from chip8jax.instructions.system import no_op


def execute_get_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX07 - Set VX to delay timer value."""
    return state.replace(V=state.V.at[instruction.x].set(state.delay_timer))


def execute_set_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX15 - Set delay timer to VX."""
    return state.replace(delay_timer=state.V[instruction.x])


def execute_set_sound_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX18 - Set sound timer to VX."""
    return state.replace(sound_timer=state.V[instruction.x])


def execute_add_to_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX1E - Add VX to I register. No flag."""
    return state.replace(I=jnp.astype(state.I + state.V[instruction.x], jnp.uint16))


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX0A - Wait for key press.

    Without a pressed key the PC is rewound so the same instruction runs
    again on the next step, and the state is flagged as awaiting a key.
    """
    def key_pressed_action(state):
        pressed_key = jnp.argmax(state.keypad)
        return state.replace(
            V=state.V.at[instruction.x].set(jnp.astype(pressed_key, jnp.uint8)),
            awaiting_key=jnp.zeros((), dtype=jnp.bool_),
        )

    def wait_action(state):
        return state.replace(pc=state.pc - 2, awaiting_key=jnp.ones((), dtype=jnp.bool_))

    return jax.lax.cond(jnp.any(state.keypad), key_pressed_action, wait_action, state)


def execute_font_character(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX29 - Set I to location of sprite for digit VX (low nibble)."""
    digit = jnp.astype(state.V[instruction.x] & 0xF, jnp.uint16)
    return state.replace(I=jnp.astype(FONT_START + digit * GLYPH_SIZE, jnp.uint16))


def execute_bcd_conversion(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    value = state.V[instruction.x]

    digits = jnp.array([
        value // 100,
        (value // 10) % 10,
        value % 10
    ], dtype=jnp.uint8)

    indices = (jnp.astype(state.I, jnp.int32) + jnp.arange(3)) & ADDRESS_MASK
    new_memory = state.memory.at[indices].set(digits)
    return state.replace(memory=new_memory)


def execute_store_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX55 - Store V0 through VX in memory starting at I."""
    register_mask = jnp.arange(NUM_REGISTERS) <= instruction.x
    base_indices = (jnp.astype(state.I, jnp.int32) + jnp.arange(NUM_REGISTERS)) & ADDRESS_MASK
    current_memory_values = state.memory[base_indices]
    new_memory_values = jnp.where(register_mask, state.V, current_memory_values)
    return state.replace(memory=state.memory.at[base_indices].set(new_memory_values))


def execute_load_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX65 - Load V0 through VX from memory starting at I."""
    register_mask = jnp.arange(NUM_REGISTERS) <= instruction.x
    base_indices = (jnp.astype(state.I, jnp.int32) + jnp.arange(NUM_REGISTERS)) & ADDRESS_MASK
    memory_values = state.memory[base_indices]
    return state.replace(V=jnp.where(register_mask, memory_values, state.V))


_MISC_OPERATIONS = [
    execute_get_delay_timer,
    execute_wait_for_key,
    execute_set_delay_timer,
    execute_set_sound_timer,
    execute_add_to_index,
    execute_font_character,
    execute_bcd_conversion,
    execute_store_registers,
    execute_load_registers,
    no_op,
]

# Low byte -> index into _MISC_OPERATIONS, everything else is a no-op
_MISC_TABLE = (
    jnp.full(256, len(_MISC_OPERATIONS) - 1, dtype=jnp.int32)
    .at[jnp.array([0x07, 0x0A, 0x15, 0x18, 0x1E, 0x29, 0x33, 0x55, 0x65])]
    .set(jnp.arange(9, dtype=jnp.int32))
)


def execute_misc_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Dispatch misc instructions on the low byte."""
    return jax.lax.switch(_MISC_TABLE[instruction.nn], _MISC_OPERATIONS, state, instruction)
