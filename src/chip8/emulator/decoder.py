r"""
CHIP-8 Instruction Decoder
==========================

Every CHIP-8 instruction is one big-endian 16-bit word. The decoder slices
the word into its operand fields and tags it with the operation it encodes:

    15    12 11     8 7      4 3      0
    +-------+--------+--------+--------+
    | family|   x    |   y    |   n    |
    +-------+--------+--------+--------+
             \_______ nnn (12 bits) ___/
                      \__ nn (8 bits) _/

The family nibble selects the operation. Family 0x0 is further
discriminated by the low byte, family 0x8 by n, and families 0xE and 0xF
by nn. Words that match no known encoding decode to Op.NOP, an explicit
tagged no-op, so the executor's match is exhaustive.

Decoding is a pure function; fetch_and_decode() reads memory but never
changes it.

Copyright (c) 2025 chip8-vm Contributors
"""

from dataclasses import dataclass
from enum import Enum
from typing import Protocol, Tuple


class Op(Enum):
    """
    Operation tags, one per instruction shape.

    Values are the canonical encoding pattern for each operation.
    """
    CLS = "00E0"        # Clear screen
    RET = "00EE"        # Return from subroutine
    JP = "1NNN"         # Jump
    CALL = "2NNN"       # Call subroutine
    SE_IMM = "3XNN"     # Skip if Vx == NN
    SNE_IMM = "4XNN"    # Skip if Vx != NN
    SE_REG = "5XY0"     # Skip if Vx == Vy
    LD_IMM = "6XNN"     # Vx = NN
    ADD_IMM = "7XNN"    # Vx += NN (no flag)
    LD_REG = "8XY0"     # Vx = Vy
    OR = "8XY1"         # Vx |= Vy
    AND = "8XY2"        # Vx &= Vy
    XOR = "8XY3"        # Vx ^= Vy
    ADD_REG = "8XY4"    # Vx += Vy, VF = carry
    SUB = "8XY5"        # Vx -= Vy, VF = not borrow
    SHR = "8XY6"        # Vx >>= 1, VF = shifted-out bit
    SUBN = "8XY7"       # Vx = Vy - Vx, VF = not borrow
    SHL = "8XYE"        # Vx <<= 1, VF = shifted-out bit
    SNE_REG = "9XY0"    # Skip if Vx != Vy
    LD_I = "ANNN"       # I = NNN
    JP_V0 = "BNNN"      # Jump to NNN + V0
    RND = "CXNN"        # Vx = random & NN
    DRW = "DXYN"        # Draw sprite
    SKP = "EX9E"        # Skip if key Vx pressed
    SKNP = "EXA1"       # Skip if key Vx not pressed
    LD_VX_DT = "FX07"   # Vx = delay timer
    LD_KEY = "FX0A"     # Wait for key, Vx = key
    LD_DT_VX = "FX15"   # Delay timer = Vx
    LD_ST_VX = "FX18"   # Sound timer = Vx
    ADD_I = "FX1E"      # I += Vx
    LD_FONT = "FX29"    # I = font glyph for Vx
    BCD = "FX33"        # Store BCD of Vx at I..I+2
    STORE = "FX55"      # Store V0..Vx at I
    LOAD = "FX65"       # Load V0..Vx from I
    NOP = "----"        # Unrecognised word


@dataclass(frozen=True)
class Instruction:
    """
    Decoded view of one instruction word.

    Attributes:
        op: Operation tag
        opcode: The full 16-bit word
        nnn: Low 12 bits (address / constant)
        nn: Low 8 bits (immediate byte)
        n: Low 4 bits (immediate nibble)
        x: Bits 8-11 (first register index)
        y: Bits 4-7 (second register index)
    """
    op: Op
    opcode: int
    nnn: int
    nn: int
    n: int
    x: int
    y: int

    @property
    def family(self) -> int:
        """Top nibble of the opcode."""
        return (self.opcode >> 12) & 0xF

    def __str__(self) -> str:
        return f"{self.opcode:04X} {self.op.name}"


class MemoryReader(Protocol):
    """Anything with a byte read interface."""

    def read(self, address: int) -> int:
        ...


# Sub-tables for families discriminated beyond the top nibble
_FAMILY_0 = {0xE0: Op.CLS, 0xEE: Op.RET}

_FAMILY_8 = {
    0x0: Op.LD_REG, 0x1: Op.OR, 0x2: Op.AND, 0x3: Op.XOR,
    0x4: Op.ADD_REG, 0x5: Op.SUB, 0x6: Op.SHR, 0x7: Op.SUBN, 0xE: Op.SHL,
}

_FAMILY_E = {0x9E: Op.SKP, 0xA1: Op.SKNP}

_FAMILY_F = {
    0x07: Op.LD_VX_DT, 0x0A: Op.LD_KEY, 0x15: Op.LD_DT_VX, 0x18: Op.LD_ST_VX,
    0x1E: Op.ADD_I, 0x29: Op.LD_FONT, 0x33: Op.BCD, 0x55: Op.STORE,
    0x65: Op.LOAD,
}

# Families fully identified by the top nibble
_FAMILY_SIMPLE = {
    0x1: Op.JP, 0x2: Op.CALL, 0x3: Op.SE_IMM, 0x4: Op.SNE_IMM,
    0x6: Op.LD_IMM, 0x7: Op.ADD_IMM, 0xA: Op.LD_I, 0xB: Op.JP_V0,
    0xC: Op.RND, 0xD: Op.DRW,
}


def _classify(word: int) -> Op:
    family = (word >> 12) & 0xF
    match family:
        case 0x0:
            # Only the low byte is examined; 0NNN machine-code calls fall to NOP
            return _FAMILY_0.get(word & 0xFF, Op.NOP)
        case 0x5:
            return Op.SE_REG if word & 0xF == 0 else Op.NOP
        case 0x8:
            return _FAMILY_8.get(word & 0xF, Op.NOP)
        case 0x9:
            return Op.SNE_REG if word & 0xF == 0 else Op.NOP
        case 0xE:
            return _FAMILY_E.get(word & 0xFF, Op.NOP)
        case 0xF:
            return _FAMILY_F.get(word & 0xFF, Op.NOP)
        case _:
            return _FAMILY_SIMPLE[family]


def decode(word: int) -> Instruction:
    """
    Decode a 16-bit instruction word.

    Args:
        word: Instruction word (masked to 16 bits)

    Returns:
        Instruction with op tag and all operand fields
    """
    word &= 0xFFFF
    return Instruction(
        op=_classify(word),
        opcode=word,
        nnn=word & 0x0FFF,
        nn=word & 0x00FF,
        n=word & 0x000F,
        x=(word >> 8) & 0xF,
        y=(word >> 4) & 0xF,
    )


def fetch_and_decode(memory: MemoryReader, pc: int) -> Tuple[Instruction, int]:
    """
    Fetch the instruction at pc and decode it.

    The returned next_pc is always pc + 2. The executor installs it as
    the program counter before running the instruction, so every
    instruction sees the post-increment value as its baseline.

    Args:
        memory: Memory to read from
        pc: Address of the instruction

    Returns:
        Tuple of (instruction, next_pc)
    """
    word = (memory.read(pc) << 8) | memory.read(pc + 1)
    return decode(word), (pc + 2) & 0xFFFF
