"""CHIP-8 emulator package."""

from chip8jax.state import EmulatorState, StackState, create_state, framebuffer
from chip8jax.emulator import execute, fetch, step, load_program, load_rom
from chip8jax.decode import DecodedInstruction, decode
from chip8jax.timers import tick_timers, sound_active
from chip8jax.errors import ROMLoadError, ROMNotFoundError, ROMTooLargeError
from chip8jax.constants import *

__all__ = [
    "EmulatorState",
    "StackState",
    "create_state",
    "framebuffer",
    "fetch",
    "execute",
    "step",
    "load_program",
    "load_rom",
    "DecodedInstruction",
    "decode",
    "tick_timers",
    "sound_active",
    "ROMLoadError",
    "ROMNotFoundError",
    "ROMTooLargeError",
    "PROGRAM_START",
    "FONT_START",
    "MEMORY_SIZE",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "STACK_SIZE",
]
