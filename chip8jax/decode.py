"""CHIP-8 instruction decoding."""

from chex import dataclass

from chip8jax.constants import ADDRESS_MASK


@dataclass(frozen=True)
class DecodedInstruction:
    """Operand fields of one 16-bit opcode.

    Fields are plain ints when decoding a Python int, and arrays of the
    opcode's dtype when decoding a traced fetch result.
    """
    opcode: int
    family: int  # high nibble, selects the instruction group
    x: int       # register index
    y: int       # register index
    n: int       # low nibble
    nn: int      # low byte
    nnn: int     # 12-bit address


def decode(opcode: int) -> DecodedInstruction:
    """Split an opcode into its fields. Any 16-bit value decodes."""
    return DecodedInstruction(
        opcode=opcode,
        family=opcode >> 12,
        x=(opcode >> 8) & 0xF,
        y=(opcode >> 4) & 0xF,
        n=opcode & 0xF,
        nn=opcode & 0xFF,
        nnn=opcode & ADDRESS_MASK,
    )
