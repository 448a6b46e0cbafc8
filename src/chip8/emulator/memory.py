"""
Memory Subsystem for the CHIP-8 VM
==================================

Memory Map:
    $000-$04F  Unused (zero)
    $050-$09F  Hex font (16 glyphs x 5 rows)
    $0A0-$1FF  Unused (zero)
    $200-$FFF  Program image and program data

The whole address space is 4KB. Addresses wrap modulo 4096 so that an
index register pointing near the top of memory never reads out of range.

Once a program is loaded nothing below the entry point may be written;
the executor may still read the font glyphs from there.

Copyright (c) 2025 chip8-vm Contributors
"""

import logging

from chip8.errors import ProgramTooLargeError, ProtectedMemoryError

logger = logging.getLogger(__name__)

MEMORY_SIZE = 0x1000
ENTRY_POINT = 0x200
FONT_ADDRESS = 0x050
FONT_GLYPH_SIZE = 5

# =============================================================================
# FONT BITMAP DATA
# =============================================================================
# 4x5 pixel glyphs for hex digits 0-F. Each glyph is 5 bytes, one per row,
# with the pixels in the high nibble (MSB = leftmost pixel).

FONT_DATA = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
])


class Memory:
    """
    Flat 4KB byte-addressable memory with font and program loader.

    Attributes:
        size: Total memory size in bytes
        entry_point: Address where program bytes are loaded
        capacity: Maximum program size in bytes

    Example:
        >>> memory = Memory()
        >>> memory.load(bytes([0x00, 0xE0]))
        >>> hex(memory.read_word(0x200))
        '0xe0'
    """

    def __init__(self, size: int = MEMORY_SIZE, entry_point: int = ENTRY_POINT):
        """
        Initialize memory with the font loaded and no program.

        Args:
            size: Total memory size in bytes (4096 in the reference machine)
            entry_point: Program load address (0x200 in the reference machine)
        """
        self.size = size
        self.entry_point = entry_point
        self._data = bytearray(size)
        self._load_font()

    @property
    def capacity(self) -> int:
        """Maximum program size in bytes."""
        return self.size - self.entry_point

    def _load_font(self) -> None:
        self._data[FONT_ADDRESS:FONT_ADDRESS + len(FONT_DATA)] = FONT_DATA

    def load(self, program: bytes) -> None:
        """
        Load a program image at the entry point.

        All memory is cleared, the font is copied into the low region and
        the program bytes are copied verbatim starting at the entry point.

        Args:
            program: Raw program bytes (no header)

        Raises:
            ProgramTooLargeError: If the program does not fit
        """
        if len(program) > self.capacity:
            raise ProgramTooLargeError(len(program), self.capacity)

        self._data = bytearray(self.size)
        self._load_font()
        self._data[self.entry_point:self.entry_point + len(program)] = program
        logger.info(
            "Loaded %d byte program at $%03X", len(program), self.entry_point
        )

    def read(self, address: int) -> int:
        """
        Read byte from memory.

        Args:
            address: Memory address (wraps modulo memory size)

        Returns:
            Byte value at address
        """
        return self._data[address % self.size]

    def read_word(self, address: int) -> int:
        """Read a big-endian 16-bit word."""
        hi = self.read(address)
        lo = self.read(address + 1)
        return (hi << 8) | lo

    def read_bytes(self, address: int, count: int) -> bytes:
        """
        Read multiple bytes from memory.

        Args:
            address: Starting address
            count: Number of bytes to read

        Returns:
            Bytes object with the data
        """
        return bytes(self.read(address + i) for i in range(count))

    def write(self, address: int, value: int) -> None:
        """
        Write byte to memory.

        Args:
            address: Memory address (wraps modulo memory size)
            value: Byte value to write (masked to 8 bits)

        Raises:
            ProtectedMemoryError: If address is below the entry point
        """
        address %= self.size
        if address < self.entry_point:
            raise ProtectedMemoryError(address)
        self._data[address] = value & 0xFF

    def write_bytes(self, address: int, data: bytes) -> None:
        """
        Write a block of bytes.

        Every target address is checked before the first byte is stored,
        so a rejected block leaves memory untouched.

        Args:
            address: Starting address (each target wraps modulo memory size)
            data: Byte values to write (each masked to 8 bits)

        Raises:
            ProtectedMemoryError: If any target is below the entry point
        """
        targets = [(address + offset) % self.size for offset in range(len(data))]
        for target in targets:
            if target < self.entry_point:
                raise ProtectedMemoryError(target)
        for target, value in zip(targets, data):
            self._data[target] = value & 0xFF

    def font_address(self, digit: int) -> int:
        """Return the address of the font glyph for a hex digit (0-F)."""
        return FONT_ADDRESS + (digit & 0xF) * FONT_GLYPH_SIZE

    def dump(self) -> bytes:
        """Return a copy of the complete memory contents."""
        return bytes(self._data)
