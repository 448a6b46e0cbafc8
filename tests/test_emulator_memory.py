"""
Memory Unit Tests
=================

Tests for the 4KB memory, font placement and program loader.

Copyright (c) 2025 chip8-vm Contributors
"""

import pytest

from chip8.emulator.memory import (
    ENTRY_POINT,
    FONT_ADDRESS,
    FONT_DATA,
    MEMORY_SIZE,
    Memory,
)
from chip8.errors import ProgramTooLargeError, ProtectedMemoryError


@pytest.fixture
def memory():
    """Memory with a two-instruction program loaded."""
    mem = Memory()
    mem.load(bytes([0x12, 0x34, 0xAB, 0xCD]))
    return mem


# =============================================================================
# Layout
# =============================================================================

class TestLayout:
    """Test the memory map constants and font placement."""

    def test_sizes(self):
        assert MEMORY_SIZE == 4096
        assert ENTRY_POINT == 0x200
        assert Memory().capacity == 3584

    def test_font_glyph_zero(self):
        """Glyph for digit 0 sits at $050."""
        mem = Memory()
        assert mem.read_bytes(0x050, 5) == bytes([0xF0, 0x90, 0x90, 0x90, 0xF0])

    def test_font_complete(self):
        mem = Memory()
        assert len(FONT_DATA) == 80
        assert mem.read_bytes(FONT_ADDRESS, 80) == FONT_DATA

    def test_font_address(self):
        mem = Memory()
        assert mem.font_address(0x0) == 0x050
        assert mem.font_address(0xA) == 0x082
        assert mem.font_address(0xF) == 0x09B

    def test_font_address_uses_low_nibble(self):
        mem = Memory()
        assert mem.font_address(0x1F) == mem.font_address(0xF)


# =============================================================================
# Loading
# =============================================================================

class TestLoad:
    """Test program loading."""

    def test_program_at_entry_point(self, memory):
        assert memory.read_word(0x200) == 0x1234
        assert memory.read_word(0x202) == 0xABCD

    def test_rest_of_memory_zero(self, memory):
        assert memory.read(0x204) == 0
        assert memory.read(0x000) == 0
        assert memory.read(0xFFF) == 0

    def test_load_replaces_previous_program(self, memory):
        memory.load(b"")
        assert memory.read_word(0x200) == 0
        # Font survives a reload
        assert memory.read(FONT_ADDRESS) == 0xF0

    def test_largest_program_fits(self):
        mem = Memory()
        program = bytes([0x55]) * 3584
        mem.load(program)
        assert mem.read(0xFFF) == 0x55

    def test_program_too_large(self):
        mem = Memory()
        with pytest.raises(ProgramTooLargeError) as exc_info:
            mem.load(bytes(3585))
        assert exc_info.value.size == 3585
        assert exc_info.value.capacity == 3584
        assert "3585" in str(exc_info.value)


# =============================================================================
# Read / Write
# =============================================================================

class TestAccess:
    """Test byte access, wrapping and protection."""

    def test_read_wraps(self, memory):
        assert memory.read(0x1200) == memory.read(0x200) == 0x12
        assert memory.read(0x1050) == 0xF0

    def test_read_word_big_endian(self, memory):
        assert memory.read_word(0x201) == 0x34AB

    def test_write_and_read(self, memory):
        memory.write(0x300, 0x42)
        assert memory.read(0x300) == 0x42

    def test_write_masks_value(self, memory):
        memory.write(0x300, 0x1FF)
        assert memory.read(0x300) == 0xFF

    def test_write_wraps_into_program_area(self, memory):
        memory.write(0x1300, 0x07)
        assert memory.read(0x300) == 0x07

    def test_write_below_entry_point_rejected(self, memory):
        with pytest.raises(ProtectedMemoryError) as exc_info:
            memory.write(0x050, 0x00)
        assert exc_info.value.address == 0x050
        assert memory.read(0x050) == 0xF0

    def test_write_just_below_entry_point_rejected(self, memory):
        with pytest.raises(ProtectedMemoryError):
            memory.write(0x1FF, 0x00)

    def test_write_bytes(self, memory):
        memory.write_bytes(0x300, bytes([1, 2, 3]))
        assert memory.read_bytes(0x300, 3) == bytes([1, 2, 3])

    def test_write_bytes_rejected_block_untouched(self, memory):
        """A block wrapping past $FFF into the font region is not stored."""
        with pytest.raises(ProtectedMemoryError) as exc_info:
            memory.write_bytes(0xFFE, bytes([1, 2, 3]))
        assert exc_info.value.address == 0x000
        assert memory.read_bytes(0xFFE, 2) == bytes([0, 0])
        assert memory.read(0x000) == 0

    def test_dump_is_copy(self, memory):
        snapshot = memory.dump()
        assert len(snapshot) == MEMORY_SIZE
        memory.write(0x200, 0x00)
        assert snapshot[0x200] == 0x12
