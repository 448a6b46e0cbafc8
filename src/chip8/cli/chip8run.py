"""
chip8run - CHIP-8 Runner Command-Line Interface
===============================================

This module implements the command-line interface for running CHIP-8
programs, either in a pygame window or headless for scripted checks.

Usage Examples
--------------
Run a ROM in a window:
    $ chip8run maze.ch8

Faster instruction rate and a bigger window:
    $ chip8run pong.ch8 --ipf 10 --scale 15

Run 120 ticks without a window and print the screen:
    $ chip8run maze.ch8 --headless 120 --seed 1

Save the final screen as PNG:
    $ chip8run maze.ch8 --headless 120 --screenshot maze.png

Trace every instruction:
    $ chip8run maze.ch8 --trace

Controls
--------
The hex keypad is mapped onto 1234/QWER/ASDF/ZXCV. Escape or closing the
window quits, P or Space toggles pause.

Exit Codes
----------
0 - The user quit (or the headless run finished)
1 - The machine halted on a runtime error (call stack overflow/underflow)
2 - Invalid arguments, unreadable ROM or ROM too large
3 - Unexpected internal error
"""

import logging
from pathlib import Path
from typing import Optional

import click

from chip8 import __version__
from chip8.cli.errors import handle_cli_exception, report_fault
from chip8.emulator import Emulator, EmulatorConfig
from chip8.errors import RomReadError
from chip8.host.loop import DEFAULT_TICK_RATE, run_loop

logger = logging.getLogger(__name__)


# =============================================================================
# Utilities
# =============================================================================

def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


def read_rom(path: Path) -> bytes:
    """
    Read a program image from disk.

    Raises:
        RomReadError: If the file is missing, a directory or unreadable
    """
    try:
        return path.read_bytes()
    except OSError as e:
        raise RomReadError(str(path), e.strerror or str(e)) from e


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "rom",
    type=click.Path(path_type=Path),
)
@click.option(
    "--scale",
    type=click.IntRange(min=1),
    default=10,
    help="Window pixels per CHIP-8 pixel (default: 10)",
)
@click.option(
    "--ipf",
    type=click.IntRange(min=1),
    default=1,
    help="Instructions executed per tick (default: 1)",
)
@click.option(
    "--tick-rate",
    type=click.IntRange(min=1),
    default=DEFAULT_TICK_RATE,
    help=f"Host ticks per second (default: {DEFAULT_TICK_RATE})",
)
@click.option(
    "--seed",
    type=int,
    default=None,
    help="Seed for the random number instruction",
)
@click.option(
    "--headless",
    "headless_ticks",
    type=click.IntRange(min=0),
    default=None,
    metavar="TICKS",
    help="Run TICKS ticks without a window and print the screen",
)
@click.option(
    "--screenshot",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Save the final screen as a PNG file",
)
@click.option(
    "--trace",
    is_flag=True,
    help="Log every executed instruction",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="chip8run")
def main(
    rom: Path,
    scale: int,
    ipf: int,
    tick_rate: int,
    seed: Optional[int],
    headless_ticks: Optional[int],
    screenshot: Optional[Path],
    trace: bool,
    verbose: bool,
) -> None:
    """
    Run a CHIP-8 program.

    ROM is the raw program image, loaded at $200.

    Examples:

        # Play in a window
        chip8run pong.ch8 --ipf 10

        # Headless run, print the screen after one second
        chip8run maze.ch8 --headless 60 --seed 1
    """
    setup_logging(verbose or trace)

    try:
        program = read_rom(rom)
        config = EmulatorConfig(instructions_per_tick=ipf, seed=seed, trace=trace)
        emulator = Emulator(program, config)

        if verbose:
            click.echo(f"ROM: {rom} ({len(program)} bytes)", err=True)
            click.echo(f"Instructions per tick: {ipf}", err=True)

        if headless_ticks is not None:
            emulator.run(headless_ticks)
            click.echo(emulator.framebuffer.to_text())
        else:
            # Imported here so headless runs never open a display
            from chip8.host.pygame_host import PygameHost

            with PygameHost(
                config.width, config.height, scale=scale, title=rom.name
            ) as host:
                run_loop(emulator, host, tick_rate)

        if screenshot:
            screenshot.write_bytes(emulator.framebuffer.render_image(scale=scale))
            if verbose:
                click.echo(f"Screenshot written to: {screenshot}", err=True)

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Load")

    if verbose:
        click.echo(f"Instructions executed: {emulator.instruction_count}", err=True)

    if emulator.fault is not None:
        report_fault(emulator.fault)


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
