"""Per-instruction debug tracing.

A trace sink is any callable ``sink(address, instruction, state)``; it is
called by the frame driver before each instruction executes, with
``state`` already past the fetch (PC advanced).
"""

from typing import Callable, List, Optional, Tuple

from chip8jax.decode import DecodedInstruction
from chip8jax.logging import ConsoleLogger
from chip8jax.state import EmulatorState

TraceSink = Callable[[int, DecodedInstruction, EmulatorState], None]

_ALU_SYMBOLS = {0x1: "|=", 0x2: "&=", 0x3: "^="}


def describe(state: EmulatorState, instruction: DecodedInstruction) -> str:
    """Describe what an instruction is about to do, using current register values."""
    op = int(instruction.opcode)
    family, x, y = int(instruction.family), int(instruction.x), int(instruction.y)
    n, nn, nnn = int(instruction.n), int(instruction.nn), int(instruction.nnn)
    vx, vy = int(state.V[x]), int(state.V[y])

    if op == 0x00E0:
        return "Clear screen"
    if op == 0x00EE:
        pointer = int(state.stack.pointer)
        if pointer == 0:
            return "Return from subroutine with empty stack (ignored)"
        return f"Return from subroutine to address 0x{int(state.stack.data[pointer - 1]):04X}"
    if family == 0x1:
        return f"Jump to address NNN (0x{nnn:04X})"
    if family == 0x2:
        return f"Call subroutine at NNN (0x{nnn:04X})"
    if family == 0x3:
        return f"Increment PC by two if V{x:X} (0x{vx:02X}) == NN (0x{nn:02X})"
    if family == 0x4:
        return f"Increment PC by two if V{x:X} (0x{vx:02X}) != NN (0x{nn:02X})"
    if family == 0x5 and n == 0:
        return f"Increment PC by two if V{x:X} (0x{vx:02X}) == V{y:X} (0x{vy:02X})"
    if family == 0x6:
        return f"Set register V{x:X} = NN (0x{nn:02X})"
    if family == 0x7:
        return f"Set register V{x:X} (0x{vx:02X}) += NN (0x{nn:02X}), result 0x{(vx + nn) & 0xFF:02X}"
    if family == 0x8:
        return _describe_alu(x, y, n, vx, vy)
    if family == 0x9 and n == 0:
        return f"Increment PC by two if V{x:X} (0x{vx:02X}) != V{y:X} (0x{vy:02X})"
    if family == 0xA:
        return f"Set I to NNN (0x{nnn:04X})"
    if family == 0xB:
        return f"Jump to NNN (0x{nnn:04X}) + V0 (0x{int(state.V[0]):02X})"
    if family == 0xC:
        return f"Set V{x:X} = random byte & NN (0x{nn:02X})"
    if family == 0xD:
        return (
            f"Draw N ({n}) height sprite at coords V{x:X} (0x{vx:02X}), V{y:X} (0x{vy:02X}) "
            f"from memory location I (0x{int(state.I):04X}). Set VF = 1 if any pixels are turned off."
        )
    if family == 0xE and nn == 0x9E:
        return f"Skip next instruction if key in V{x:X} (0x{vx:02X}) is pressed"
    if family == 0xE and nn == 0xA1:
        return f"Skip next instruction if key in V{x:X} (0x{vx:02X}) is not pressed"
    if family == 0xF:
        description = _describe_misc(state, x, nn, vx)
        if description is not None:
            return description
    return "Unimplemented opcode"


def _describe_alu(x: int, y: int, n: int, vx: int, vy: int) -> str:
    if n == 0x0:
        return f"Set register V{x:X} (0x{vx:02X}) = V{y:X} (0x{vy:02X})"
    if n in _ALU_SYMBOLS:
        return f"Set register V{x:X} (0x{vx:02X}) {_ALU_SYMBOLS[n]} V{y:X} (0x{vy:02X})"
    if n == 0x4:
        return f"Set register V{x:X} (0x{vx:02X}) += V{y:X} (0x{vy:02X}), VF = 1 if carry"
    if n == 0x5:
        return f"Set register V{x:X} (0x{vx:02X}) -= V{y:X} (0x{vy:02X}), VF = 1 if no borrow"
    if n == 0x6:
        return f"Set register V{x:X} (0x{vx:02X}) >>= 1, VF = shifted out bit ({vx & 1})"
    if n == 0x7:
        return f"Set register V{x:X} = V{y:X} (0x{vy:02X}) - V{x:X} (0x{vx:02X}), VF = 1 if no borrow"
    if n == 0xE:
        return f"Set register V{x:X} (0x{vx:02X}) <<= 1, VF = shifted out bit ({vx >> 7})"
    return "Unimplemented opcode"


def _describe_misc(state: EmulatorState, x: int, nn: int, vx: int) -> Optional[str]:
    i = int(state.I)
    descriptions = {
        0x07: lambda: f"Set V{x:X} = delay timer (0x{int(state.delay_timer):02X})",
        0x0A: lambda: f"Await key press, store it in V{x:X}",
        0x15: lambda: f"Set delay timer = V{x:X} (0x{vx:02X})",
        0x18: lambda: f"Set sound timer = V{x:X} (0x{vx:02X})",
        0x1E: lambda: f"I (0x{i:04X}) += V{x:X} (0x{vx:02X})",
        0x29: lambda: f"Set I to location of sprite for digit V{x:X} (0x{vx:02X})",
        0x33: lambda: f"Store BCD representation of V{x:X} (0x{vx:02X}) at memory location I (0x{i:04X})",
        0x55: lambda: f"Store registers V0 through V{x:X} in memory starting at location 0x{i:04X}",
        0x65: lambda: f"Read registers V0 through V{x:X} from memory starting at location 0x{i:04X}",
    }
    describe_fn = descriptions.get(nn)
    return describe_fn() if describe_fn else None


class LoggerTraceSink:
    """Writes one DEBUG line per executed instruction."""

    def __init__(self, logger: Optional[ConsoleLogger] = None):
        self.logger = logger or ConsoleLogger(log_level="DEBUG")

    def __call__(self, address: int, instruction: DecodedInstruction, state: EmulatorState):
        self.logger.debug(
            f"Address: 0x{address:04X}, Opcode: 0x{int(instruction.opcode):04X} "
            f"Desc: {describe(state, instruction)}"
        )


class RecordingTraceSink:
    """Keeps ``(address, opcode)`` pairs in memory, mostly for tests and debugging sessions."""

    def __init__(self):
        self.records: List[Tuple[int, int]] = []

    def __call__(self, address: int, instruction: DecodedInstruction, state: EmulatorState):
        self.records.append((address, int(instruction.opcode)))
