#!/usr/bin/env python3
"""
CHIP-8 Emulator Demo
====================

This script demonstrates how to use the chip8 emulator headless to:
1. Build a machine from a program image
2. Run it tick by tick
3. Press keys
4. Pause, resume and quit
5. Take screenshots and inspect registers

The program is a tiny hand-assembled ROM that shows the digit of the first key
you press.

Usage:
    python examples/emulator_demo.py

Copyright (c) 2025 chip8-vm Contributors
"""

from pathlib import Path

from chip8.emulator import Emulator, EmulatorConfig, keys_from_names


def assemble(*words: int) -> bytes:
    return b"".join(word.to_bytes(2, "big") for word in words)


# $200  F00A  LD V0, K        wait for a key
# $202  00E0  CLS
# $204  F029  LD F, V0        I = glyph for the key
# $206  6100  LD V1, #00
# $208  D115  DRW V1, V1, 5
# $20A  120A  JP $20A        spin
SHOW_KEY = assemble(0xF00A, 0x00E0, 0xF029, 0x6100, 0xD115, 0x120A)


def main():
    # Output directory for screenshots
    output_dir = Path("trash")
    output_dir.mkdir(exist_ok=True)

    # ==========================================================================
    # 1. Create an emulator instance
    # ==========================================================================
    print("Creating CHIP-8 emulator...")
    emu = Emulator(SHOW_KEY, EmulatorConfig(instructions_per_tick=10, seed=1))
    print(f"  {emu}")

    # ==========================================================================
    # 2. Run with no key pressed: the program waits at $200
    # ==========================================================================
    emu.run(10)
    print(f"\nNo key: pc=${emu.pc:03X}, lit pixels={emu.framebuffer.lit_pixels()}")

    # ==========================================================================
    # 3. Press a key
    # ==========================================================================
    emu.run(1, keys_from_names(["A"]))
    print("\nAfter pressing A:")
    print("\n".join(line[:8] for line in emu.framebuffer.to_text().splitlines()[:5]))

    # ==========================================================================
    # 4. Pause and quit
    # ==========================================================================
    emu.toggle_pause()
    event = emu.tick()
    print(f"\nWhile paused: {event}")
    emu.toggle_pause()

    # ==========================================================================
    # 5. Screenshot and registers
    # ==========================================================================
    png_path = output_dir / "chip8_key.png"
    png_path.write_bytes(emu.framebuffer.render_image(scale=8))
    print(f"\nScreenshot saved to {png_path}")

    regs = emu.registers
    print(f"Registers: V0=${regs['v0']:02X} I=${regs['i']:03X} PC=${regs['pc']:03X}")

    print("\nDisassembly:")
    for line in emu.disassemble_at(0x200, 6):
        print(f"  {line}")

    emu.quit()
    print(f"\nFinal state: {emu.state.name}")


if __name__ == "__main__":
    main()
