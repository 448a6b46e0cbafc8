"""
CHIP-8 Host Layer
=================

The host owns everything outside the machine: the window, the physical
keyboard, audio and wall-clock pacing. The core never calls into the
host; `run_loop` pulls input from the host, ticks the emulator and pushes
the framebuffer and tone state back out.

- `loop.py`: HostProtocol, HostInput and the fixed-rate run loop
- `pygame_host.py`: PygameHost, a window/keyboard/tone host built on pygame

pygame is only imported by `pygame_host`, so the loop can be driven
headless (tests, scripted runs) without it.

Copyright (c) 2025 chip8-vm Contributors
"""

from .loop import DEFAULT_TICK_RATE, HostInput, HostProtocol, run_loop

__all__ = [
    "DEFAULT_TICK_RATE",
    "HostInput",
    "HostProtocol",
    "run_loop",
]
