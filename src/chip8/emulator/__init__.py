"""
CHIP-8 Virtual Machine
======================

An interpreter for the CHIP-8 virtual machine.

This package provides:

- **Memory**: 4KB address space with the hex font and program loader
- **CPU**: Register file and opcode executor for the standard instruction set
- **Call Stack**: Bounded return-address stack with explicit errors
- **Framebuffer**: 64x32 monochrome grid with XOR sprite compositing
- **Keypad / Timers**: 16-key logical keypad, 60 Hz delay and sound timers
- **Run-State Machine**: Running / Paused / Halted control of the cycle

Quick Start
-----------

Basic usage::

    >>> from chip8.emulator import Emulator, EmulatorConfig
    >>> emu = Emulator(Path("pong.ch8").read_bytes())
    >>> event = emu.tick([False] * 16)
    >>> print(emu.framebuffer.to_text())

Module Structure
----------------

- `emulator.py`: Emulator class and run-state machine (high-level API)
- `cpu.py`: Register file and opcode executor
- `decoder.py`: Instruction word decoding
- `memory.py`: Memory and program loader
- `stack.py`: Call stack
- `display.py`: Framebuffer
- `keyboard.py`: Keypad
- `timers.py`: Delay and sound timers

Copyright (c) 2025 chip8-vm Contributors
"""

# Main entry point
from .emulator import Emulator, EmulatorConfig, RunState, TickEvent, TickReason

# CPU components
from .cpu import Chip8CPU, CPUState, FLAG_REGISTER
from .decoder import Instruction, Op, decode, fetch_and_decode

# Machine components
from .memory import Memory, FONT_DATA, ENTRY_POINT, MEMORY_SIZE
from .stack import CallStack, STACK_DEPTH
from .display import Framebuffer, DrawResult
from .keyboard import Keypad, KEY_TO_INDEX_QWERTY, keys_from_names
from .timers import Timers

__all__ = [
    # Main API
    "Emulator",
    "EmulatorConfig",
    "RunState",
    "TickEvent",
    "TickReason",

    # CPU
    "Chip8CPU",
    "CPUState",
    "FLAG_REGISTER",
    "Instruction",
    "Op",
    "decode",
    "fetch_and_decode",

    # Memory
    "Memory",
    "FONT_DATA",
    "ENTRY_POINT",
    "MEMORY_SIZE",

    # Stack
    "CallStack",
    "STACK_DEPTH",

    # Display
    "Framebuffer",
    "DrawResult",

    # Input / timers
    "Keypad",
    "KEY_TO_INDEX_QWERTY",
    "keys_from_names",
    "Timers",
]
