"""
chip8-vm - CHIP-8 Virtual Machine
=================================

This package provides a CHIP-8 interpreter together with the tools around
it:

Main Components
---------------
- **emulator**: the interpreter core (memory, CPU, stack, framebuffer,
  keypad, timers and the run-state machine)
- **disassembler**: CHIP-8 listings (chip8disasm)
- **host**: the fixed-rate host loop and a pygame window host (chip8run)

Quick Start
-----------
Run a program headless:
    >>> from chip8 import Emulator
    >>> emu = Emulator(open("maze.ch8", "rb").read())
    >>> event = emu.run(60)
    >>> print(emu.framebuffer.to_text())

Or use the command-line tools:
    $ chip8run maze.ch8 --ipf 10
    $ chip8disasm maze.ch8

Reference Documentation
-----------------------
- Cowgod's CHIP-8 Technical Reference: http://devernay.free.fr/hacks/chip8/C8TECH10.HTM
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from chip8.errors import (
    Chip8Error,
    LoadError,
    RomReadError,
    ProgramTooLargeError,
    MachineError,
    StackOverflowError,
    StackUnderflowError,
    ProtectedMemoryError,
)
from chip8.emulator import (
    Emulator,
    EmulatorConfig,
    RunState,
    TickEvent,
    TickReason,
)
from chip8.disassembler import Chip8Disassembler, DisassembledInstruction

__all__ = [
    "__version__",
    # Errors
    "Chip8Error",
    "LoadError",
    "RomReadError",
    "ProgramTooLargeError",
    "MachineError",
    "StackOverflowError",
    "StackUnderflowError",
    "ProtectedMemoryError",
    # Emulator
    "Emulator",
    "EmulatorConfig",
    "RunState",
    "TickEvent",
    "TickReason",
    # Disassembler
    "Chip8Disassembler",
    "DisassembledInstruction",
]
