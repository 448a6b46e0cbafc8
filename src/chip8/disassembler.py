"""
CHIP-8 Disassembler
===================

Turns CHIP-8 program bytes into readable assembly listings using the
conventional mnemonics (Cowgod's technical reference):

    $200: 00 E0  CLS
    $202: 6A 02  LD VA, #02
    $204: A2 2A  LD I, $22A

The disassembler shares the decoder with the executor, so a listing
always shows exactly what the interpreter will execute. It is used by the
chip8disasm command and by the emulator's instruction trace.

Usage:
    from chip8.disassembler import Chip8Disassembler

    disasm = Chip8Disassembler()
    for line in disasm.disassemble(rom_bytes):
        print(line)

Copyright (c) 2025 chip8-vm Contributors
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from chip8.emulator.decoder import Instruction, Op, decode
from chip8.emulator.memory import ENTRY_POINT


@dataclass
class DisassembledInstruction:
    """
    Represents a single disassembled CHIP-8 instruction.

    Attributes:
        address: Memory address of the instruction
        opcode: The 16-bit instruction word
        mnemonic: The instruction mnemonic (e.g., "LD", "DRW")
        operand_str: Formatted operands for display
        comment: Optional annotation (e.g., for unknown words)
    """
    address: int
    opcode: int
    mnemonic: str
    operand_str: str
    comment: str = ""

    @property
    def raw_bytes(self) -> bytes:
        return bytes([(self.opcode >> 8) & 0xFF, self.opcode & 0xFF])

    @property
    def text(self) -> str:
        """Mnemonic and operands only."""
        if self.operand_str:
            return f"{self.mnemonic} {self.operand_str}"
        return self.mnemonic

    def __str__(self) -> str:
        """Format as assembly line: ADDRESS: BYTES  MNEMONIC OPERANDS"""
        hex_bytes = " ".join(f"{b:02X}" for b in self.raw_bytes)
        if self.comment:
            return f"${self.address:03X}: {hex_bytes}  {self.text:<16} ; {self.comment}"
        return f"${self.address:03X}: {hex_bytes}  {self.text}"

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "address": f"${self.address:03X}",
            "address_int": self.address,
            "opcode": f"${self.opcode:04X}",
            "mnemonic": self.mnemonic,
            "operand": self.operand_str,
            "comment": self.comment,
        }


# Operand templates per op. Placeholders: {x} {y} {n} {nn} {nnn}
_FORMATS: Dict[Op, Tuple[str, str]] = {
    Op.CLS: ("CLS", ""),
    Op.RET: ("RET", ""),
    Op.JP: ("JP", "${nnn:03X}"),
    Op.CALL: ("CALL", "${nnn:03X}"),
    Op.SE_IMM: ("SE", "V{x:X}, #{nn:02X}"),
    Op.SNE_IMM: ("SNE", "V{x:X}, #{nn:02X}"),
    Op.SE_REG: ("SE", "V{x:X}, V{y:X}"),
    Op.LD_IMM: ("LD", "V{x:X}, #{nn:02X}"),
    Op.ADD_IMM: ("ADD", "V{x:X}, #{nn:02X}"),
    Op.LD_REG: ("LD", "V{x:X}, V{y:X}"),
    Op.OR: ("OR", "V{x:X}, V{y:X}"),
    Op.AND: ("AND", "V{x:X}, V{y:X}"),
    Op.XOR: ("XOR", "V{x:X}, V{y:X}"),
    Op.ADD_REG: ("ADD", "V{x:X}, V{y:X}"),
    Op.SUB: ("SUB", "V{x:X}, V{y:X}"),
    Op.SHR: ("SHR", "V{x:X}"),
    Op.SUBN: ("SUBN", "V{x:X}, V{y:X}"),
    Op.SHL: ("SHL", "V{x:X}"),
    Op.SNE_REG: ("SNE", "V{x:X}, V{y:X}"),
    Op.LD_I: ("LD", "I, ${nnn:03X}"),
    Op.JP_V0: ("JP", "V0, ${nnn:03X}"),
    Op.RND: ("RND", "V{x:X}, #{nn:02X}"),
    Op.DRW: ("DRW", "V{x:X}, V{y:X}, {n}"),
    Op.SKP: ("SKP", "V{x:X}"),
    Op.SKNP: ("SKNP", "V{x:X}"),
    Op.LD_VX_DT: ("LD", "V{x:X}, DT"),
    Op.LD_KEY: ("LD", "V{x:X}, K"),
    Op.LD_DT_VX: ("LD", "DT, V{x:X}"),
    Op.LD_ST_VX: ("LD", "ST, V{x:X}"),
    Op.ADD_I: ("ADD", "I, V{x:X}"),
    Op.LD_FONT: ("LD", "F, V{x:X}"),
    Op.BCD: ("LD", "B, V{x:X}"),
    Op.STORE: ("LD", "[I], V{x:X}"),
    Op.LOAD: ("LD", "V{x:X}, [I]"),
    Op.NOP: ("DW", "#{opcode:04X}"),
}


class Chip8Disassembler:
    """
    Disassembler for CHIP-8 programs.

    Attributes:
        _symbol_table: Optional address-to-label map used to annotate
                       jump and call targets
    """

    def __init__(self, symbol_table: Optional[Dict[int, str]] = None):
        """
        Initialize the disassembler.

        Args:
            symbol_table: Optional dict mapping addresses to symbol names
        """
        self._symbol_table = symbol_table or {}

    def format_instruction(self, address: int, inst: Instruction) -> DisassembledInstruction:
        """Format one already-decoded instruction."""
        mnemonic, template = _FORMATS[inst.op]
        operand_str = template.format(
            x=inst.x, y=inst.y, n=inst.n, nn=inst.nn, nnn=inst.nnn,
            opcode=inst.opcode,
        )

        comment = ""
        if inst.op is Op.NOP:
            comment = "unrecognised, executes as no-op"
        elif inst.op in (Op.JP, Op.CALL, Op.LD_I) and inst.nnn in self._symbol_table:
            comment = self._symbol_table[inst.nnn]

        return DisassembledInstruction(
            address=address,
            opcode=inst.opcode,
            mnemonic=mnemonic,
            operand_str=operand_str,
            comment=comment,
        )

    def disassemble_one(self, data: bytes, offset: int = 0, start_address: int = ENTRY_POINT) -> DisassembledInstruction:
        """
        Disassemble the instruction at data[offset].

        A trailing odd byte is padded with zero.
        """
        hi = data[offset]
        lo = data[offset + 1] if offset + 1 < len(data) else 0
        return self.format_instruction(start_address + offset, decode((hi << 8) | lo))

    def disassemble(
        self,
        data: bytes,
        start_address: int = ENTRY_POINT,
        count: Optional[int] = None,
    ) -> List[DisassembledInstruction]:
        """
        Disassemble a byte sequence.

        Args:
            data: Program bytes
            start_address: Address of data[0]
            count: Maximum number of instructions (default: all)

        Returns:
            List of DisassembledInstruction, one per 2-byte word
        """
        result = []
        for offset in range(0, len(data), 2):
            if count is not None and len(result) >= count:
                break
            result.append(self.disassemble_one(data, offset, start_address))
        return result

    def disassemble_to_text(
        self,
        data: bytes,
        start_address: int = ENTRY_POINT,
        count: Optional[int] = None,
    ) -> str:
        """Disassemble to a newline-separated listing."""
        return "\n".join(str(i) for i in self.disassemble(data, start_address, count))

    def add_symbol(self, address: int, name: str) -> None:
        """Add a label for an address."""
        self._symbol_table[address] = name
