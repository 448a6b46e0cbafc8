"""
CHIP-8 VM Error Hierarchy
=========================

This module defines the exception hierarchy for the whole package.
All exceptions inherit from Chip8Error, allowing callers to catch every
VM-related error with a single except clause if desired.

Exception Hierarchy
-------------------
Chip8Error (base)
├── LoadError (program image handling)
│   ├── RomReadError - ROM file cannot be read
│   └── ProgramTooLargeError - program does not fit above the entry point
└── MachineError (fatal runtime errors raised while executing)
    ├── StackOverflowError - subroutine call with a full call stack
    ├── StackUnderflowError - return with an empty call stack
    └── ProtectedMemoryError - store into the font/interpreter region

Design Philosophy
-----------------
Startup errors (LoadError) are raised before a machine exists, so the host
never enters its run loop. Runtime errors (MachineError) carry the program
counter of the offending instruction; the emulator converts them into a
halted machine instead of letting state be corrupted. Unknown opcodes are
not errors at all: they decode to an explicit no-op.

Copyright (c) 2025 chip8-vm Contributors
"""

from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class Chip8Error(Exception):
    """
    Base exception for all CHIP-8 VM errors.

    All exceptions in the package inherit from this class, allowing callers
    to catch every VM-related error with a single except clause:

        try:
            emu = Emulator(rom_bytes)
        except Chip8Error as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Loading Exceptions
# =============================================================================

class LoadError(Chip8Error):
    """Base exception for program image loading errors."""
    pass


class RomReadError(LoadError):
    """
    ROM file could not be read.

    Raised by the host side when the program image path does not exist,
    is a directory, or cannot be opened.
    """

    def __init__(self, path: str, reason: str = ""):
        self.path = path
        self.reason = reason
        message = f"cannot read ROM '{path}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class ProgramTooLargeError(LoadError):
    """
    Program image exceeds the memory available above the entry point.

    Attributes:
        size: Program size in bytes
        capacity: Maximum program size in bytes
    """

    def __init__(self, size: int, capacity: int):
        self.size = size
        self.capacity = capacity
        super().__init__(
            f"program is {size} bytes, maximum is {capacity} bytes"
        )


# =============================================================================
# Runtime Exceptions
# =============================================================================

class MachineError(Chip8Error):
    """
    Base exception for fatal runtime errors.

    Attributes:
        message: The error description
        pc: Address of the instruction that failed (optional)
        instruction: The decoded instruction that failed, once known
    """

    def __init__(self, message: str, pc: Optional[int] = None):
        self.message = message
        self.pc = pc
        self.instruction = None
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format as '$ABC: message' when the address is known."""
        if self.pc is None:
            return self.message
        return f"${self.pc:03X}: {self.message}"

    def locate(self, pc: int) -> None:
        """Attach the address of the failing instruction."""
        self.pc = pc
        self.args = (self._format_message(),)


class StackOverflowError(MachineError):
    """
    Subroutine call attempted with the call stack already full.

    The call is not performed; no slot beyond the stack capacity is written.
    """

    def __init__(self, depth: int, pc: Optional[int] = None):
        self.depth = depth
        super().__init__(f"call stack overflow (depth {depth})", pc)


class StackUnderflowError(MachineError):
    """Return attempted with an empty call stack."""

    def __init__(self, pc: Optional[int] = None):
        super().__init__("call stack underflow (return with empty stack)", pc)


class ProtectedMemoryError(MachineError):
    """
    Store attempted below the program entry point.

    The low region holds the font and is read-only once a program is loaded.
    """

    def __init__(self, address: int, pc: Optional[int] = None):
        self.address = address
        super().__init__(f"write to protected address ${address:03X}", pc)
