"""
CHIP-8 VM Command-Line Interface
================================

This package provides the command-line tools:

- **chip8run**: run a ROM in a window (or headless)
- **chip8disasm**: disassemble a ROM

Each tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["chip8run", "chip8disasm"]
