"""
Emulator Integration Tests
==========================

Tests for the complete emulator, verifying that all components work
together correctly through the run-state machine.

These tests ensure:
- Construction and program loading
- Tick semantics (instructions per tick, one timer tick per tick)
- Pause, resume and quit transitions
- Runtime faults halting the machine
- Trace logging and disassembly helpers

Copyright (c) 2025 chip8-vm Contributors
"""

import logging

import pytest

from chip8.emulator import (
    Emulator,
    EmulatorConfig,
    RunState,
    TickEvent,
    TickReason,
)
from chip8.emulator.decoder import Op
from chip8.errors import (
    ProgramTooLargeError,
    StackOverflowError,
    StackUnderflowError,
)


def assemble(*words: int) -> bytes:
    return b"".join(word.to_bytes(2, "big") for word in words)


# LD V0,5; JP $202
LOOP_PROGRAM = assemble(0x6005, 0x1202)

# Draw font glyph 0 at (0,0) then spin
DRAW_PROGRAM = assemble(0x6000, 0x6100, 0xA050, 0xD015, 0x1208)


@pytest.fixture
def emu():
    return Emulator(LOOP_PROGRAM)


# =============================================================================
# Construction
# =============================================================================

class TestConstruction:
    """Test emulator creation."""

    def test_initial_state(self, emu):
        assert emu.state is RunState.RUNNING
        assert emu.pc == 0x200
        assert emu.fault is None
        assert emu.instruction_count == 0
        assert emu.program == LOOP_PROGRAM

    def test_default_config(self, emu):
        assert emu.config == EmulatorConfig()
        assert emu.config.instructions_per_tick == 1
        assert emu.stack.capacity == 12

    def test_program_too_large(self):
        with pytest.raises(ProgramTooLargeError):
            Emulator(bytes(3585))

    def test_largest_program(self):
        emu = Emulator(bytes(3584))
        assert emu.state is RunState.RUNNING

    def test_invalid_instructions_per_tick(self):
        with pytest.raises(ValueError):
            Emulator(LOOP_PROGRAM, EmulatorConfig(instructions_per_tick=0))

    def test_config_is_frozen(self):
        config = EmulatorConfig()
        with pytest.raises(AttributeError):
            config.seed = 1

    def test_repr(self, emu):
        assert repr(emu) == "Emulator(state=RUNNING, pc=$200, instructions=0)"


# =============================================================================
# Ticking
# =============================================================================

class TestTick:
    """Test one host frame of execution."""

    def test_tick_executes_one_instruction(self, emu):
        event = emu.tick()
        assert event.reason is TickReason.EXECUTED
        assert event.executed == 1
        assert emu.registers["v0"] == 5
        assert emu.pc == 0x202

    def test_tick_decrements_timers_once(self):
        emu = Emulator(assemble(0x6005, 0xF015, 0x1204))
        emu.tick()
        emu.tick()
        assert emu.timers.delay == 4

    def test_instructions_per_tick(self):
        """Ten instructions run per tick; timers still tick once."""
        emu = Emulator(
            assemble(*([0x7001] * 10), 0x1214),
            EmulatorConfig(instructions_per_tick=10),
        )
        emu.timers.delay = 5
        event = emu.tick()
        assert event.executed == 10
        assert emu.registers["v0"] == 10
        assert emu.instruction_count == 10
        assert emu.tick_count == 1
        assert emu.timers.delay == 4

    def test_keys_applied(self):
        emu = Emulator(assemble(0x6005, 0xE09E, 0x1204, 0x1206))
        keys = [False] * 16
        keys[5] = True
        emu.tick(keys)
        emu.tick(keys)
        assert emu.pc == 0x206

    def test_keys_none_keeps_state(self, emu):
        emu.keypad.key_down(3)
        emu.tick()
        assert emu.keypad.is_pressed(3)

    def test_sound_active(self):
        emu = Emulator(assemble(0x6002, 0xF018, 0x1204))
        emu.tick()
        assert not emu.sound_active
        emu.tick()
        assert emu.sound_active
        emu.tick()
        assert not emu.sound_active

    def test_run_headless(self):
        emu = Emulator(DRAW_PROGRAM)
        event = emu.run(5)
        assert event.reason is TickReason.EXECUTED
        assert emu.framebuffer.lit_pixels() == 14
        assert emu.pc == 0x208

    def test_step_ignores_pause(self, emu):
        emu.toggle_pause()
        emu.timers.delay = 2
        event = emu.step()
        assert event.reason is TickReason.EXECUTED
        assert emu.pc == 0x202
        assert emu.timers.delay == 2

    def test_seed_reproducible(self):
        program = assemble(0xC0FF, 0xC1FF, 0x1204)
        first = Emulator(program, EmulatorConfig(seed=7))
        second = Emulator(program, EmulatorConfig(seed=7))
        first.run(2)
        second.run(2)
        assert first.registers == second.registers


# =============================================================================
# Run States
# =============================================================================

class TestRunStates:
    """Test pause, resume and quit."""

    def test_pause_and_resume(self, emu):
        assert emu.toggle_pause() is RunState.PAUSED
        assert emu.toggle_pause() is RunState.RUNNING

    def test_paused_tick_does_nothing(self, emu):
        emu.toggle_pause()
        emu.timers.delay = 3
        event = emu.tick()
        assert event.reason is TickReason.PAUSED
        assert emu.pc == 0x200
        assert emu.timers.delay == 3
        assert emu.instruction_count == 0

    def test_paused_tick_updates_keys(self, emu):
        emu.toggle_pause()
        keys = [False] * 16
        keys[9] = True
        emu.tick(keys)
        assert emu.keypad.is_pressed(9)

    def test_resume_continues(self, emu):
        emu.toggle_pause()
        emu.tick()
        emu.toggle_pause()
        emu.tick()
        assert emu.pc == 0x202

    def test_pause_round_trip_preserves_machine(self):
        """Ticks while paused leave memory, registers, screen and timers alone."""
        emu = Emulator(assemble(0x6A07, 0xA300, 0xFA33, 0x6000, 0xA050, 0xD005, 0xFA15, 0x120E))
        emu.run(7)
        assert emu.framebuffer.lit_pixels() == 14
        assert emu.timers.delay == 6

        memory = emu.memory.dump()
        registers = emu.registers
        screen = emu.framebuffer.rows()
        timers = (emu.timers.delay, emu.timers.sound)

        emu.toggle_pause()
        for _ in range(5):
            assert emu.tick().reason is TickReason.PAUSED
        emu.toggle_pause()

        assert emu.memory.dump() == memory
        assert emu.registers == registers
        assert emu.framebuffer.rows() == screen
        assert (emu.timers.delay, emu.timers.sound) == timers

        assert emu.tick().reason is TickReason.EXECUTED
        assert emu.pc == 0x20E

    @pytest.mark.parametrize("pause_first", [False, True])
    def test_quit_from_any_state(self, emu, pause_first):
        if pause_first:
            emu.toggle_pause()
        emu.quit()
        assert emu.is_halted
        assert emu.tick().reason is TickReason.HALTED

    def test_pause_has_no_effect_when_halted(self, emu):
        emu.quit()
        assert emu.toggle_pause() is RunState.HALTED

    def test_state_changes_logged(self, emu, caplog):
        caplog.set_level(logging.INFO, logger="chip8.emulator.emulator")
        emu.toggle_pause()
        assert "Paused at $200" in caplog.text


# =============================================================================
# Faults
# =============================================================================

class TestFaults:
    """Test that fatal runtime errors halt the machine."""

    def test_underflow_halts(self):
        emu = Emulator(assemble(0x00EE))
        event = emu.tick()
        assert event.reason is TickReason.FAULT
        assert isinstance(event.error, StackUnderflowError)
        assert emu.is_halted
        assert emu.fault is event.error
        assert emu.fault.pc == 0x200
        assert event.instruction.op is Op.RET

    def test_overflow_halts_at_depth_12(self):
        emu = Emulator(assemble(0x2200))
        event = emu.run(20)
        assert event.reason is TickReason.FAULT
        assert isinstance(emu.fault, StackOverflowError)
        assert emu.stack.depth == 12
        assert emu.instruction_count == 12

    def test_halted_after_fault(self):
        emu = Emulator(assemble(0x00EE))
        emu.tick()
        assert emu.tick().reason is TickReason.HALTED
        assert emu.step().reason is TickReason.HALTED

    def test_fault_does_not_tick_timers(self):
        emu = Emulator(assemble(0x00EE))
        emu.timers.delay = 5
        emu.tick()
        assert emu.timers.delay == 5

    def test_fault_logged(self, caplog):
        caplog.set_level(logging.ERROR, logger="chip8.emulator.emulator")
        Emulator(assemble(0x00EE)).tick()
        assert "underflow" in caplog.text

    def test_fault_mid_tick_counts_completed(self):
        emu = Emulator(
            assemble(0x6001, 0x00EE),
            EmulatorConfig(instructions_per_tick=5),
        )
        event = emu.tick()
        assert event.reason is TickReason.FAULT
        assert event.executed == 1


# =============================================================================
# Inspection
# =============================================================================

class TestInspection:
    """Test tracing and disassembly helpers."""

    def test_trace_logs_instructions(self, caplog):
        caplog.set_level(logging.DEBUG, logger="chip8.emulator.emulator")
        emu = Emulator(LOOP_PROGRAM, EmulatorConfig(trace=True))
        emu.tick()
        assert "LD V0, #05" in caplog.text

    def test_disassemble_at(self, emu):
        assert emu.disassemble_at(0x200, 2) == [
            "$200: 60 05  LD V0, #05",
            "$202: 12 02  JP $202",
        ]

    def test_tick_event_str(self):
        assert str(TickEvent(TickReason.EXECUTED, executed=3)) == "Executed 3 instruction(s)"
        assert str(TickEvent(TickReason.PAUSED)) == "Paused"
        assert str(TickEvent(TickReason.HALTED)) == "Halted"
