"""
Delay and Sound Timers for the CHIP-8 VM
========================================

Two independent 8-bit countdown registers. Both count down by one per
timer tick (60 Hz) while non-zero and stop at zero. The sound timer
drives the tone: the host should play a tone exactly while it is
non-zero.

Timer ticks are driven by the emulator once per host frame, independently
of how many instructions run in that frame.

Copyright (c) 2025 chip8-vm Contributors
"""

from dataclasses import dataclass

TIMER_RATE_HZ = 60


@dataclass
class TimerState:
    """Timer register values (0-255 each)."""
    delay: int = 0
    sound: int = 0


class Timers:
    """
    Delay and sound countdown timers.

    Example:
        >>> timers = Timers()
        >>> timers.sound = 1
        >>> timers.sound_active
        True
        >>> timers.tick()
        >>> timers.sound_active
        False
    """

    def __init__(self):
        self.state = TimerState()

    @property
    def delay(self) -> int:
        """Delay timer (8-bit)."""
        return self.state.delay

    @delay.setter
    def delay(self, value: int) -> None:
        self.state.delay = value & 0xFF

    @property
    def sound(self) -> int:
        """Sound timer (8-bit)."""
        return self.state.sound

    @sound.setter
    def sound(self, value: int) -> None:
        self.state.sound = value & 0xFF

    @property
    def sound_active(self) -> bool:
        """True while the host should emit a tone."""
        return self.state.sound > 0

    def tick(self) -> None:
        """Decrement each non-zero timer by exactly one."""
        if self.state.delay > 0:
            self.state.delay -= 1
        if self.state.sound > 0:
            self.state.sound -= 1

    def reset(self) -> None:
        self.state = TimerState()
