"""
Error Hierarchy Tests
=====================

Copyright (c) 2025 chip8-vm Contributors
"""

from chip8.errors import (
    Chip8Error,
    LoadError,
    MachineError,
    ProgramTooLargeError,
    ProtectedMemoryError,
    RomReadError,
    StackOverflowError,
    StackUnderflowError,
)


class TestHierarchy:
    """Test exception classes and messages."""

    def test_common_base(self):
        for cls in (LoadError, MachineError):
            assert issubclass(cls, Chip8Error)
        assert issubclass(RomReadError, LoadError)
        assert issubclass(ProgramTooLargeError, LoadError)
        for cls in (StackOverflowError, StackUnderflowError, ProtectedMemoryError):
            assert issubclass(cls, MachineError)

    def test_rom_read_message(self):
        error = RomReadError("pong.ch8", "No such file or directory")
        assert str(error) == "cannot read ROM 'pong.ch8': No such file or directory"

    def test_machine_error_without_address(self):
        assert str(StackUnderflowError()) == "call stack underflow (return with empty stack)"

    def test_locate_adds_address(self):
        error = StackOverflowError(12)
        error.locate(0x2A4)
        assert error.pc == 0x2A4
        assert str(error) == "$2A4: call stack overflow (depth 12)"

    def test_protected_message(self):
        assert "$050" in str(ProtectedMemoryError(0x050, pc=0x202))
