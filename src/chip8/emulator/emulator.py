"""
CHIP-8 Emulator - Main Orchestrator
===================================

This module provides the `Emulator` class that owns one complete machine
(memory, CPU, call stack, framebuffer, keypad, timers) and drives it
through the run-state machine.

Run states:

    RUNNING --toggle_pause--> PAUSED --toggle_pause--> RUNNING
       |                        |
       +------- quit -----------+----> HALTED (terminal)

- RUNNING: each tick executes `instructions_per_tick` instructions
  (one in the reference configuration) followed by one timer tick.
- PAUSED: ticks do nothing; the host keeps polling input and presenting.
- HALTED: ticks do nothing; the host is expected to leave its loop.

A fatal runtime error (call stack overflow/underflow, protected store)
halts the machine. The tick that hit it returns a FAULT event carrying
the error, and the error stays available as `emulator.fault`.

Example usage:
    >>> from chip8.emulator import Emulator
    >>> emu = Emulator(bytes([0x60, 0x05, 0x12, 0x02]))  # LD V0,5; JP $202
    >>> emu.tick().reason
    <TickReason.EXECUTED: 1>
    >>> emu.registers["v0"]
    5

Copyright (c) 2025 chip8-vm Contributors
"""

import logging
import random
from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional, Sequence

from chip8.disassembler import Chip8Disassembler
from chip8.errors import MachineError
from .cpu import Chip8CPU
from .decoder import Instruction
from .display import DISPLAY_HEIGHT, DISPLAY_WIDTH, Framebuffer
from .keyboard import Keypad
from .memory import Memory
from .stack import STACK_DEPTH, CallStack
from .timers import Timers

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmulatorConfig:
    """
    Configuration for emulator initialization.

    Attributes:
        width: Framebuffer width in pixels (64)
        height: Framebuffer height in pixels (32)
        instructions_per_tick: Instructions executed per host tick. The
            reference behavior is 1; real CHIP-8 software expects several
            hundred per second (around 10 per 60 Hz tick).
        stack_depth: Call stack capacity (12)
        seed: Seed for the CXNN random generator (None = nondeterministic)
        trace: Log every executed instruction at DEBUG level

    Example:
        >>> config = EmulatorConfig(instructions_per_tick=10)
        >>> emu = Emulator(rom_bytes, config)
    """
    width: int = DISPLAY_WIDTH
    height: int = DISPLAY_HEIGHT
    instructions_per_tick: int = 1
    stack_depth: int = STACK_DEPTH
    seed: Optional[int] = None
    trace: bool = False


class RunState(Enum):
    """Machine run state."""
    RUNNING = auto()
    PAUSED = auto()
    HALTED = auto()


class TickReason(Enum):
    """
    Outcome of one tick.

    Used in TickEvent to tell the host what the tick did.
    """
    EXECUTED = auto()  # Instructions ran and timers ticked
    PAUSED = auto()    # Machine is paused, nothing ran
    HALTED = auto()    # Machine is halted, nothing ran
    FAULT = auto()     # A fatal runtime error halted the machine


@dataclass
class TickEvent:
    """
    Information about one tick.

    Attributes:
        reason: What the tick did
        instruction: Last instruction executed (EXECUTED) or the
            instruction that failed (FAULT)
        executed: Number of instructions completed during the tick
        error: The runtime error (FAULT only)
    """
    reason: TickReason
    instruction: Optional[Instruction] = None
    executed: int = 0
    error: Optional[MachineError] = None

    def __str__(self) -> str:
        """Return human-readable description."""
        match self.reason:
            case TickReason.EXECUTED:
                return f"Executed {self.executed} instruction(s)"
            case TickReason.PAUSED:
                return "Paused"
            case TickReason.HALTED:
                return "Halted"
            case TickReason.FAULT:
                return f"Fault: {self.error}"
            case _:
                return "Unknown"


class Emulator:
    """
    CHIP-8 machine with run-state control.

    The emulator is constructed with the program image; construction fails
    with ProgramTooLargeError (before any machine exists) if the program
    does not fit in memory.

    Attributes:
        config: The EmulatorConfig used to initialize this instance
        memory: 4KB memory with font and program
        cpu: The Chip8CPU register file and executor
        stack: The bounded call stack
        framebuffer: The monochrome display grid
        keypad: The 16-key logical keypad
        timers: Delay and sound timers
    """

    def __init__(self, program: bytes, config: Optional[EmulatorConfig] = None):
        """
        Build a machine with the program loaded at the entry point.

        Args:
            program: Raw program image
            config: EmulatorConfig; defaults to the reference configuration

        Raises:
            ProgramTooLargeError: If the program does not fit
            ValueError: If the configuration is invalid
        """
        self.config = config or EmulatorConfig()
        if self.config.instructions_per_tick < 1:
            raise ValueError(
                f"instructions_per_tick must be >= 1, got {self.config.instructions_per_tick}"
            )

        self.memory = Memory()
        self.memory.load(program)
        self._program = bytes(program)

        self.stack = CallStack(self.config.stack_depth)
        self.framebuffer = Framebuffer(self.config.width, self.config.height)
        self.keypad = Keypad()
        self.timers = Timers()
        self.cpu = Chip8CPU(
            self.memory,
            self.stack,
            self.framebuffer,
            self.keypad,
            self.timers,
            rng=random.Random(self.config.seed),
        )

        self._disassembler = Chip8Disassembler()
        if self.config.trace:
            self.cpu.on_instruction = self._trace_hook

        self._state = RunState.RUNNING
        self._fault: Optional[MachineError] = None
        self._instruction_count = 0
        self._tick_count = 0

    def _trace_hook(self, pc: int, instruction: Instruction) -> None:
        logger.debug("%s", self._disassembler.format_instruction(pc, instruction))

    # =========================================================================
    # Run-State Control
    # =========================================================================

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def is_halted(self) -> bool:
        return self._state is RunState.HALTED

    @property
    def fault(self) -> Optional[MachineError]:
        """The runtime error that halted the machine, if any."""
        return self._fault

    def quit(self) -> None:
        """Halt the machine from any state."""
        if self._state is not RunState.HALTED:
            logger.info("Quit requested, halting")
        self._state = RunState.HALTED

    def toggle_pause(self) -> RunState:
        """
        Toggle between RUNNING and PAUSED.

        Has no effect when halted.

        Returns:
            The new run state
        """
        if self._state is RunState.RUNNING:
            self._state = RunState.PAUSED
            logger.info("Paused at $%03X", self.cpu.pc)
        elif self._state is RunState.PAUSED:
            self._state = RunState.RUNNING
            logger.info("Resumed at $%03X", self.cpu.pc)
        return self._state

    def _halt_on_fault(self, error: MachineError) -> None:
        self._fault = error
        self._state = RunState.HALTED
        logger.error("Machine halted: %s", error)

    # =========================================================================
    # Execution
    # =========================================================================

    def tick(self, keys: Optional[Sequence[bool]] = None) -> TickEvent:
        """
        Advance the machine by one host frame.

        Args:
            keys: Current 16-entry logical key state (None keeps the
                  previous state)

        Returns:
            TickEvent describing what happened
        """
        if self._state is RunState.HALTED:
            return TickEvent(TickReason.HALTED)

        if keys is not None:
            self.keypad.set_state(keys)

        if self._state is RunState.PAUSED:
            return TickEvent(TickReason.PAUSED)

        self._tick_count += 1
        instruction = None
        executed = 0
        for _ in range(self.config.instructions_per_tick):
            try:
                instruction = self.cpu.step()
            except MachineError as error:
                self._halt_on_fault(error)
                return TickEvent(
                    TickReason.FAULT,
                    instruction=error.instruction,
                    executed=executed,
                    error=error,
                )
            executed += 1
            self._instruction_count += 1

        self.timers.tick()
        return TickEvent(TickReason.EXECUTED, instruction=instruction, executed=executed)

    def step(self) -> TickEvent:
        """
        Execute exactly one instruction, ignoring pause.

        Timers are not ticked. Useful for debugging and tests.

        Returns:
            TickEvent with the executed instruction (or HALTED/FAULT)
        """
        if self._state is RunState.HALTED:
            return TickEvent(TickReason.HALTED)
        try:
            instruction = self.cpu.step()
        except MachineError as error:
            self._halt_on_fault(error)
            return TickEvent(TickReason.FAULT, instruction=error.instruction, error=error)
        self._instruction_count += 1
        return TickEvent(TickReason.EXECUTED, instruction=instruction, executed=1)

    def run(self, ticks: int, keys: Optional[Sequence[bool]] = None) -> TickEvent:
        """
        Run up to `ticks` ticks without a host (headless).

        Stops early when the machine halts.

        Returns:
            The last TickEvent
        """
        event = TickEvent(TickReason.HALTED) if self.is_halted else TickEvent(TickReason.EXECUTED)
        for _ in range(ticks):
            event = self.tick(keys)
            if event.reason in (TickReason.HALTED, TickReason.FAULT):
                break
        return event

    # =========================================================================
    # State Inspection
    # =========================================================================

    @property
    def pc(self) -> int:
        return self.cpu.pc

    @property
    def registers(self) -> dict:
        """
        Get current register values as a dictionary.

        Returns:
            Dictionary with keys v0-vf, i, pc
        """
        return self.cpu.get_registers()

    @property
    def sound_active(self) -> bool:
        """True while the host should play a tone."""
        return self.timers.sound_active

    @property
    def instruction_count(self) -> int:
        """Instructions executed since construction."""
        return self._instruction_count

    @property
    def tick_count(self) -> int:
        """Ticks that ran instructions since construction."""
        return self._tick_count

    @property
    def program(self) -> bytes:
        return self._program

    def disassemble_at(self, address: int, count: int = 10) -> List[str]:
        """
        Disassemble instructions from memory.

        Args:
            address: Starting address
            count: Number of instructions

        Returns:
            List of disassembly strings
        """
        data = self.memory.read_bytes(address, count * 2)
        return [str(i) for i in self._disassembler.disassemble(data, start_address=address)]

    def __repr__(self) -> str:
        """Return string representation of emulator state."""
        return (
            f"Emulator(state={self._state.name}, "
            f"pc=${self.cpu.pc:03X}, "
            f"instructions={self._instruction_count})"
        )
