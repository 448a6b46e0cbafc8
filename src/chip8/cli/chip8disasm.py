"""
chip8disasm - CHIP-8 Disassembler Command-Line Interface
========================================================

This module implements the command-line interface for the CHIP-8
disassembler. The listing uses the same decoder as the interpreter, so
words the interpreter ignores are shown as DW with a comment.

Usage Examples
--------------
Disassemble a ROM (loaded at $200):
    $ chip8disasm pong.ch8

Limit number of instructions:
    $ chip8disasm pong.ch8 --count 20

Different base address:
    $ chip8disasm dump.bin --address 0x000

Output to file:
    $ chip8disasm pong.ch8 -o pong.asm

Hex dump with disassembly:
    $ chip8disasm pong.ch8 --hex
"""

import sys
from pathlib import Path
from typing import Optional

import click

from chip8 import __version__
from chip8.cli.chip8run import read_rom
from chip8.cli.errors import ExitCode, handle_cli_exception
from chip8.disassembler import Chip8Disassembler
from chip8.emulator.memory import ENTRY_POINT


def parse_address(text: str) -> int:
    """Parse '0x200', '$200' or '512'."""
    if text.lower().startswith("0x"):
        return int(text, 16)
    if text.startswith("$"):
        return int(text[1:], 16)
    return int(text)


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "rom",
    type=click.Path(path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output file (default: stdout)",
)
@click.option(
    "-a", "--address",
    type=str,
    default=f"0x{ENTRY_POINT:03X}",
    help="Base address of the first byte (hex with 0x or $ prefix, or decimal). Default: 0x200",
)
@click.option(
    "-c", "--count",
    type=click.IntRange(min=0),
    default=None,
    help="Maximum number of instructions to disassemble (default: all)",
)
@click.option(
    "--hex",
    "show_hex",
    is_flag=True,
    help="Include hex dump before disassembly",
)
@click.option(
    "--no-bytes",
    is_flag=True,
    help="Omit raw bytes from output (show only mnemonic and operand)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="chip8disasm")
def main(
    rom: Path,
    output: Optional[Path],
    address: str,
    count: Optional[int],
    show_hex: bool,
    no_bytes: bool,
    verbose: bool,
) -> None:
    """
    Disassemble a CHIP-8 program.

    ROM is the raw program image to disassemble.

    Examples:

        # Full listing
        chip8disasm pong.ch8

        # First 20 instructions into a file
        chip8disasm pong.ch8 --count 20 -o pong.asm
    """
    try:
        base_address = parse_address(address)
    except ValueError:
        click.echo(f"Error: Invalid address '{address}'", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    if not 0 <= base_address <= 0xFFF:
        click.echo("Error: Address must be 0-4095 (0x000-0xFFF)", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    try:
        data = read_rom(rom)
    except Exception as e:
        handle_cli_exception(e, verbose=verbose)

    if len(data) == 0:
        click.echo(f"Error: {rom} is empty", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    if verbose:
        click.echo(f"Input file: {rom} ({len(data)} bytes)", err=True)
        click.echo(f"Base address: ${base_address:03X}", err=True)

    output_lines = [
        f"; Disassembly of {rom.name}",
        f"; Size: {len(data)} bytes",
        f"; Base address: ${base_address:03X}",
        "",
    ]

    if show_hex:
        output_lines.append("; Hex dump:")
        output_lines.append("; " + "-" * 60)
        for i in range(0, len(data), 16):
            chunk = data[i:i + 16]
            hex_str = " ".join(f"{b:02X}" for b in chunk)
            output_lines.append(f"; ${base_address + i:03X}: {hex_str}")
        output_lines.append("; " + "-" * 60)
        output_lines.append("")

    disasm = Chip8Disassembler()
    instructions = disasm.disassemble(data, start_address=base_address, count=count)

    for instr in instructions:
        if no_bytes:
            line = f"${instr.address:03X}: {instr.text}"
            if instr.comment:
                line += f"  ; {instr.comment}"
            output_lines.append(line)
        else:
            output_lines.append(str(instr))

    result = "\n".join(output_lines) + "\n"

    if output:
        try:
            output.write_text(result, encoding="utf-8")
        except OSError as e:
            click.echo(f"Error writing {output}: {e}", err=True)
            sys.exit(ExitCode.INVALID_ARGS)
        if verbose:
            click.echo(f"Output written to: {output}", err=True)
    else:
        click.echo(result, nl=False)

    if verbose:
        click.echo(f"Instructions disassembled: {len(instructions)}", err=True)


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
