"""
CHIP-8 CPU (Register File and Opcode Executor)
==============================================

The CHIP-8 register file:
- V0-VF: sixteen 8-bit general registers. VF doubles as the flag register:
  instructions that produce a carry, borrow, shifted-out bit or sprite
  collision overwrite it, so it cannot hold a value across them.
- I: 16-bit index register (sprite and memory block address)
- PC: 16-bit program counter

Each step fetches the word at PC, advances PC by 2, then executes. Control
flow instructions therefore see the address of the following instruction
as PC, which is what CALL pushes and what skips advance from.

Failures (call stack overflow/underflow, stores into the protected low
region) raise MachineError subclasses tagged with the address of the
failing instruction. The executor never writes outside the call stack or
memory bounds.

Copyright (c) 2025 chip8-vm Contributors
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from chip8.errors import MachineError
from .decoder import Instruction, Op, fetch_and_decode
from .display import Framebuffer
from .keyboard import Keypad
from .memory import ENTRY_POINT, Memory
from .stack import CallStack
from .timers import Timers

logger = logging.getLogger(__name__)

REGISTER_COUNT = 16
FLAG_REGISTER = 0xF
INSTRUCTION_SIZE = 2


@dataclass
class CPUState:
    """
    Register file contents.

    All values stored as Python ints but represent:
    - v: 16 x 8-bit unsigned (0-255)
    - i, pc: 16-bit unsigned (0-65535)
    """
    v: List[int] = field(default_factory=lambda: [0] * REGISTER_COUNT)
    i: int = 0
    pc: int = ENTRY_POINT


class Chip8CPU:
    """
    CHIP-8 interpreter core.

    The CPU does not own its peripherals: memory, call stack, framebuffer,
    keypad and timers are passed in and shared with the Emulator that
    drives it.

    Instrumentation hook:
        on_instruction(pc, instruction) is called after decode and before
        execution. The emulator uses it for trace logging.

    Example:
        >>> memory = Memory()
        >>> memory.load(bytes([0x60, 0x2A]))  # LD V0, $2A
        >>> cpu = Chip8CPU(memory, CallStack(), Framebuffer(), Keypad(), Timers())
        >>> cpu.step().op
        <Op.LD_IMM: '6XNN'>
        >>> hex(cpu.v[0])
        '0x2a'
    """

    def __init__(
        self,
        memory: Memory,
        stack: CallStack,
        framebuffer: Framebuffer,
        keypad: Keypad,
        timers: Timers,
        rng: Optional[random.Random] = None,
    ):
        self.memory = memory
        self.stack = stack
        self.framebuffer = framebuffer
        self.keypad = keypad
        self.timers = timers
        self.rng = rng or random.Random()
        self.state = CPUState(pc=memory.entry_point)

        self.on_instruction: Optional[Callable[[int, Instruction], None]] = None

    # ========================================
    # Register Properties
    # ========================================

    @property
    def v(self) -> List[int]:
        """General registers V0-VF. Writers must mask to 8 bits."""
        return self.state.v

    @property
    def i(self) -> int:
        """Index register (16-bit)."""
        return self.state.i

    @i.setter
    def i(self, value: int) -> None:
        self.state.i = value & 0xFFFF

    @property
    def pc(self) -> int:
        """Program counter (16-bit)."""
        return self.state.pc

    @pc.setter
    def pc(self, value: int) -> None:
        self.state.pc = value & 0xFFFF

    @property
    def vf(self) -> int:
        """Flag register."""
        return self.state.v[FLAG_REGISTER]

    def set_register(self, index: int, value: int) -> None:
        """Write general register Vindex (masked to 8 bits)."""
        self.state.v[index & 0xF] = value & 0xFF

    def reset(self) -> None:
        """Clear registers and point PC at the entry point."""
        self.state = CPUState(pc=self.memory.entry_point)

    # ========================================
    # Main Execution Loop
    # ========================================

    def step(self) -> Instruction:
        """
        Execute exactly one instruction.

        Returns:
            The executed instruction

        Raises:
            MachineError: On call stack overflow/underflow or a protected
                store. PC is left at its post-fetch value and the
                failing instruction is attached to the error.
        """
        address = self.pc
        instruction, next_pc = fetch_and_decode(self.memory, address)
        self.pc = next_pc

        if self.on_instruction:
            self.on_instruction(address, instruction)

        try:
            self.execute(instruction)
        except MachineError as error:
            if error.pc is None:
                error.locate(address)
            error.instruction = instruction
            raise
        return instruction

    def _skip_if(self, condition: bool) -> None:
        if condition:
            self.pc = self.pc + INSTRUCTION_SIZE

    def execute(self, inst: Instruction) -> None:
        """
        Apply one decoded instruction to the machine state.

        PC must already hold the post-fetch address.

        Args:
            inst: Decoded instruction
        """
        v = self.state.v
        x, y = inst.x, inst.y

        match inst.op:
            # ---- Reference subset ----
            case Op.CLS:
                self.framebuffer.clear()

            case Op.RET:
                self.pc = self.stack.pop()

            case Op.JP:
                self.pc = inst.nnn

            case Op.CALL:
                self.stack.push(self.pc)
                self.pc = inst.nnn

            case Op.SE_IMM:
                self._skip_if(v[x] == inst.nn)

            case Op.LD_IMM:
                v[x] = inst.nn

            case Op.ADD_IMM:
                v[x] = (v[x] + inst.nn) & 0xFF

            case Op.LD_I:
                self.i = inst.nnn

            case Op.DRW:
                self._draw(inst)

            # ---- Conditional skips ----
            case Op.SNE_IMM:
                self._skip_if(v[x] != inst.nn)

            case Op.SE_REG:
                self._skip_if(v[x] == v[y])

            case Op.SNE_REG:
                self._skip_if(v[x] != v[y])

            # ---- Register arithmetic and logic ----
            case Op.LD_REG:
                v[x] = v[y]

            case Op.OR:
                v[x] |= v[y]

            case Op.AND:
                v[x] &= v[y]

            case Op.XOR:
                v[x] ^= v[y]

            case Op.ADD_REG:
                result = v[x] + v[y]
                v[x] = result & 0xFF
                v[FLAG_REGISTER] = 1 if result > 0xFF else 0

            case Op.SUB:
                not_borrow = 1 if v[x] >= v[y] else 0
                v[x] = (v[x] - v[y]) & 0xFF
                v[FLAG_REGISTER] = not_borrow

            case Op.SUBN:
                not_borrow = 1 if v[y] >= v[x] else 0
                v[x] = (v[y] - v[x]) & 0xFF
                v[FLAG_REGISTER] = not_borrow

            case Op.SHR:
                bit = v[x] & 0x01
                v[x] = v[x] >> 1
                v[FLAG_REGISTER] = bit

            case Op.SHL:
                bit = (v[x] >> 7) & 0x01
                v[x] = (v[x] << 1) & 0xFF
                v[FLAG_REGISTER] = bit

            # ---- Jumps and random ----
            case Op.JP_V0:
                self.pc = inst.nnn + v[0]

            case Op.RND:
                v[x] = self.rng.randrange(256) & inst.nn

            # ---- Keypad ----
            case Op.SKP:
                self._skip_if(self.keypad.is_pressed(v[x]))

            case Op.SKNP:
                self._skip_if(not self.keypad.is_pressed(v[x]))

            case Op.LD_KEY:
                key = self.keypad.first_pressed()
                if key is None:
                    # Re-run this instruction until a key is down
                    self.pc = self.pc - INSTRUCTION_SIZE
                else:
                    v[x] = key

            # ---- Timers ----
            case Op.LD_VX_DT:
                v[x] = self.timers.delay

            case Op.LD_DT_VX:
                self.timers.delay = v[x]

            case Op.LD_ST_VX:
                self.timers.sound = v[x]

            # ---- Index register and memory ----
            case Op.ADD_I:
                self.i = self.i + v[x]

            case Op.LD_FONT:
                self.i = self.memory.font_address(v[x])

            case Op.BCD:
                value = v[x]
                self.memory.write_bytes(
                    self.i, bytes([value // 100, (value // 10) % 10, value % 10])
                )

            case Op.STORE:
                self.memory.write_bytes(self.i, bytes(v[:x + 1]))

            case Op.LOAD:
                for index in range(x + 1):
                    v[index] = self.memory.read(self.i + index)

            case Op.NOP:
                logger.debug("Ignoring unrecognised opcode $%04X", inst.opcode)

    def _draw(self, inst: Instruction) -> None:
        """DXYN: XOR an N-row sprite from memory[I] at (Vx, Vy); VF = collision."""
        v = self.state.v
        origin_x = v[inst.x]
        origin_y = v[inst.y]
        v[FLAG_REGISTER] = 0
        sprite = self.memory.read_bytes(self.i, inst.n)
        result = self.framebuffer.draw_sprite(origin_x, origin_y, sprite)
        if result.collision:
            v[FLAG_REGISTER] = 1

    # ========================================
    # Snapshot Helpers
    # ========================================

    def get_registers(self) -> dict:
        """Return register values as a dictionary."""
        registers = {f"v{index:x}": value for index, value in enumerate(self.state.v)}
        registers["i"] = self.state.i
        registers["pc"] = self.state.pc
        return registers
