"""
Fixed-Rate Host Loop
====================

One iteration of the loop is one host tick:

    poll input -> quit / pause requests -> tick machine ->
    present framebuffer -> drive tone -> wait for next tick

The loop ends when the machine is halted, either because the host asked
to quit or because a fatal runtime error stopped it. The loop is the sole
owner of the emulator for its whole lifetime; nothing else may tick it
concurrently.

Copyright (c) 2025 chip8-vm Contributors
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Protocol

from chip8.emulator import Emulator, RunState, TickReason
from chip8.emulator.display import Framebuffer
from chip8.emulator.keyboard import KEY_COUNT
from chip8.emulator.timers import TIMER_RATE_HZ
from chip8.errors import MachineError

logger = logging.getLogger(__name__)

DEFAULT_TICK_RATE = TIMER_RATE_HZ


@dataclass
class HostInput:
    """
    Input sampled by the host for one tick.

    Attributes:
        keys: 16 logical key states, indexed by keypad key 0x0-0xF
        quit: The user asked to leave (window closed, Escape)
        toggle_pause: The user asked to pause or resume
    """
    keys: List[bool] = field(default_factory=lambda: [False] * KEY_COUNT)
    quit: bool = False
    toggle_pause: bool = False


class HostProtocol(Protocol):
    """
    Interface a host must provide to run_loop().

    Hosts are free to present only when `framebuffer.needs_refresh` is set
    and must call `framebuffer.mark_presented()` when they do.
    """

    def poll(self) -> HostInput:
        """Sample the physical input devices."""
        ...

    def present(self, framebuffer: Framebuffer) -> None:
        """Show the framebuffer."""
        ...

    def set_tone(self, active: bool) -> None:
        """Start or stop the tone."""
        ...

    def wait_for_next_tick(self, tick_rate: int) -> None:
        """Block until the next tick is due."""
        ...


def run_loop(
    emulator: Emulator,
    host: HostProtocol,
    tick_rate: int = DEFAULT_TICK_RATE,
) -> Optional[MachineError]:
    """
    Drive the emulator from the host until it halts.

    Args:
        emulator: The machine to run
        host: Input, presentation, audio and pacing provider
        tick_rate: Host ticks per second (60 for the reference cadence)

    Returns:
        The runtime error that halted the machine, or None if it was quit
    """
    if tick_rate < 1:
        raise ValueError(f"tick_rate must be >= 1, got {tick_rate}")

    logger.info("Host loop started at %d Hz", tick_rate)

    while True:
        host_input = host.poll()
        if host_input.quit:
            emulator.quit()
        if host_input.toggle_pause:
            emulator.toggle_pause()
        if emulator.state is RunState.HALTED:
            break

        event = emulator.tick(host_input.keys)
        host.present(emulator.framebuffer)
        host.set_tone(emulator.sound_active)

        if event.reason is TickReason.FAULT:
            break

        host.wait_for_next_tick(tick_rate)

    host.set_tone(False)
    logger.info(
        "Host loop finished after %d ticks (%d instructions)",
        emulator.tick_count,
        emulator.instruction_count,
    )
    return emulator.fault
