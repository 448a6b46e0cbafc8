"""
pygame Host
===========

A desktop host for the run loop: a scaled window showing the framebuffer,
the conventional QWERTY block mapped onto the hex keypad, and a square
wave tone played while the sound timer runs.

Controls:
    1 2 3 4        1 2 3 C
    Q W E R   ->   4 5 6 D
    A S D F        7 8 9 E
    Z X C V        A 0 B F

    Escape or closing the window quits, P or Space toggles pause.

Audio is optional: if the mixer cannot be opened (no audio device) the
host runs silently.

Copyright (c) 2025 chip8-vm Contributors
"""

import logging
import os
from typing import Dict, Optional, Tuple

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")
import numpy as np
import pygame
import pygame.sndarray

from chip8.emulator.display import Framebuffer
from chip8.emulator.keyboard import KEY_COUNT, KEY_TO_INDEX_QWERTY
from .loop import HostInput

logger = logging.getLogger(__name__)

DEFAULT_SCALE = 10
DEFAULT_TONE_HZ = 440
TONE_AMPLITUDE = 8000
INK_COLOR = (255, 255, 255)
PAPER_COLOR = (0, 0, 0)

QUIT_KEYS = (pygame.K_ESCAPE,)
PAUSE_KEYS = (pygame.K_p, pygame.K_SPACE)


def _build_key_map() -> Dict[int, int]:
    """Map pygame key codes to logical keypad indices."""
    return {
        getattr(pygame, f"K_{name.lower()}"): index
        for name, index in KEY_TO_INDEX_QWERTY.items()
    }


KEY_MAP: Dict[int, int] = _build_key_map()


def square_wave(sample_rate: int, tone_hz: int, channels: int = 1) -> np.ndarray:
    """
    Build one period of a signed 16-bit square wave.

    Returns:
        int16 array of shape (samples,) for mono or (samples, channels)
    """
    half_period = max(1, sample_rate // (tone_hz * 2))
    t = np.arange(half_period * 2)
    wave = np.where(t < half_period, TONE_AMPLITUDE, -TONE_AMPLITUDE).astype(np.int16)
    if channels > 1:
        wave = np.repeat(wave[:, np.newaxis], channels, axis=1)
    return wave


class PygameHost:
    """
    Window, keyboard and tone host.

    Use as a context manager so the window is closed on exit:

        with PygameHost(64, 32, scale=10, title="maze.ch8") as host:
            fault = run_loop(emulator, host)
    """

    def __init__(
        self,
        width: int,
        height: int,
        scale: int = DEFAULT_SCALE,
        title: str = "CHIP-8",
        ink_color: Tuple[int, int, int] = INK_COLOR,
        paper_color: Tuple[int, int, int] = PAPER_COLOR,
        tone_hz: int = DEFAULT_TONE_HZ,
    ):
        if scale < 1:
            raise ValueError(f"scale must be >= 1, got {scale}")
        self.width = width
        self.height = height
        self.scale = scale
        self.ink_color = ink_color
        self.paper_color = paper_color

        pygame.init()
        pygame.display.set_caption(title)
        self.surface = pygame.display.set_mode((width * scale, height * scale))
        self.surface.fill(paper_color)
        pygame.display.flip()
        self.clock = pygame.time.Clock()

        self._keys = [False] * KEY_COUNT
        self._tone: Optional[pygame.mixer.Sound] = self._init_tone(tone_hz)
        self._tone_playing = False

    def __enter__(self) -> "PygameHost":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """Stop audio and close the window."""
        self.set_tone(False)
        pygame.quit()

    # =========================================================================
    # Audio
    # =========================================================================

    @staticmethod
    def _init_tone(tone_hz: int) -> Optional[pygame.mixer.Sound]:
        """Open the mixer and build one period of a square wave, or None."""
        try:
            pygame.mixer.init(frequency=44100, size=-16, channels=1)
        except pygame.error as e:
            logger.warning("Audio unavailable, running without sound: %s", e)
            return None

        frequency, _size, channels = pygame.mixer.get_init()
        return pygame.sndarray.make_sound(square_wave(frequency, tone_hz, channels))

    def set_tone(self, active: bool) -> None:
        if self._tone is None or active == self._tone_playing:
            return
        if active:
            self._tone.play(loops=-1)
        else:
            self._tone.stop()
        self._tone_playing = active

    # =========================================================================
    # Input
    # =========================================================================

    def poll(self) -> HostInput:
        """Drain the event queue and return the current input."""
        host_input = HostInput()
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                host_input.quit = True
            elif event.type == pygame.KEYDOWN:
                if event.key in QUIT_KEYS:
                    host_input.quit = True
                elif event.key in PAUSE_KEYS:
                    host_input.toggle_pause = not host_input.toggle_pause
                elif event.key in KEY_MAP:
                    self._keys[KEY_MAP[event.key]] = True
            elif event.type == pygame.KEYUP and event.key in KEY_MAP:
                self._keys[KEY_MAP[event.key]] = False
        host_input.keys = list(self._keys)
        return host_input

    # =========================================================================
    # Presentation and Pacing
    # =========================================================================

    def present(self, framebuffer: Framebuffer) -> None:
        """Redraw the window, or re-show the last frame if nothing changed."""
        if not framebuffer.needs_refresh:
            pygame.display.flip()
            return
        self.surface.fill(self.paper_color)
        scale = self.scale
        for y, row in enumerate(framebuffer.rows()):
            for x, lit in enumerate(row):
                if lit:
                    pygame.draw.rect(
                        self.surface,
                        self.ink_color,
                        (x * scale, y * scale, scale, scale),
                    )
        pygame.display.flip()
        framebuffer.mark_presented()

    def wait_for_next_tick(self, tick_rate: int) -> None:
        self.clock.tick(tick_rate)
