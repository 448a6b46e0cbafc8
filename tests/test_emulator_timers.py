"""
Timer Unit Tests
================

Copyright (c) 2025 chip8-vm Contributors
"""

from chip8.emulator.timers import Timers


class TestTimers:
    """Test delay and sound countdown."""

    def test_start_at_zero(self):
        timers = Timers()
        assert timers.delay == 0
        assert timers.sound == 0
        assert not timers.sound_active

    def test_tick_decrements_both(self):
        timers = Timers()
        timers.delay = 3
        timers.sound = 2
        timers.tick()
        assert (timers.delay, timers.sound) == (2, 1)

    def test_stop_at_zero(self):
        timers = Timers()
        timers.delay = 1
        timers.tick()
        timers.tick()
        assert timers.delay == 0

    def test_independent(self):
        timers = Timers()
        timers.sound = 1
        timers.tick()
        timers.tick()
        assert timers.sound == 0
        assert timers.delay == 0

    def test_setters_mask(self):
        timers = Timers()
        timers.delay = 0x1FF
        timers.sound = 0x100
        assert timers.delay == 0xFF
        assert timers.sound == 0

    def test_sound_active_follows_timer(self):
        timers = Timers()
        timers.sound = 2
        assert timers.sound_active
        timers.tick()
        assert timers.sound_active
        timers.tick()
        assert not timers.sound_active

    def test_reset(self):
        timers = Timers()
        timers.delay = 9
        timers.reset()
        assert timers.delay == 0
