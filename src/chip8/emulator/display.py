"""
Framebuffer for the CHIP-8 VM
=============================

The CHIP-8 display is a monochrome grid (64x32 in the reference
configuration). The framebuffer owns only on/off state; mapping pixels to
colours is the host's concern.

Sprite compositing:
- Sprites are 8 pixels wide and 1-15 rows tall, one byte per row,
  MSB = leftmost pixel.
- Every sprite bit is XORed into the destination pixel.
- A collision is reported when a set sprite bit lands on a pixel that was
  already on.
- The starting coordinate wraps around the screen; the sprite itself is
  clipped at the right and bottom edges, never wrapped.

Copyright (c) 2025 chip8-vm Contributors
"""

import io
from dataclasses import dataclass
from typing import List

from PIL import Image

DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32


@dataclass(frozen=True)
class DrawResult:
    """
    Outcome of a sprite draw.

    Attributes:
        collision: True if any set sprite bit hit an already-on pixel
        pixels_drawn: Number of sprite bits that were inside the screen
    """
    collision: bool
    pixels_drawn: int


class Framebuffer:
    """
    Row-major boolean pixel grid.

    Example:
        >>> fb = Framebuffer()
        >>> fb.draw_sprite(0, 0, bytes([0x80])).collision
        False
        >>> fb.get_pixel(0, 0)
        True
        >>> fb.draw_sprite(0, 0, bytes([0x80])).collision
        True
    """

    def __init__(self, width: int = DISPLAY_WIDTH, height: int = DISPLAY_HEIGHT):
        """
        Initialize an all-off framebuffer.

        Args:
            width: Width in pixels
            height: Height in pixels
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"invalid framebuffer size {width}x{height}")
        self._width = width
        self._height = height
        self._pixels: List[bool] = [False] * (width * height)

        # Set on any change, cleared by the host after presenting
        self._needs_refresh = True

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def needs_refresh(self) -> bool:
        """True if the framebuffer changed since the last mark_presented()."""
        return self._needs_refresh

    def mark_presented(self) -> None:
        """Called by the host once the current contents are on screen."""
        self._needs_refresh = False

    # =========================================================================
    # Pixel Operations
    # =========================================================================

    def clear(self) -> None:
        """Turn every pixel off."""
        self._pixels = [False] * (self._width * self._height)
        self._needs_refresh = True

    def get_pixel(self, x: int, y: int) -> bool:
        """
        Get pixel state.

        Args:
            x: Column (0 to width-1)
            y: Row (0 to height-1)

        Returns:
            True if the pixel is on
        """
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise IndexError(f"pixel ({x}, {y}) outside {self._width}x{self._height}")
        return self._pixels[y * self._width + x]

    def draw_sprite(self, x: int, y: int, sprite: bytes) -> DrawResult:
        """
        XOR a sprite into the framebuffer.

        The origin wraps modulo the screen size; rows and columns that
        extend past the right or bottom edge are clipped.

        Args:
            x: Origin column (any value, wrapped)
            y: Origin row (any value, wrapped)
            sprite: Sprite rows, one byte per row

        Returns:
            DrawResult with the collision flag
        """
        origin_x = x % self._width
        origin_y = y % self._height
        collision = False
        drawn = 0

        for row_index, row_bits in enumerate(sprite):
            py = origin_y + row_index
            if py >= self._height:
                break
            base = py * self._width
            for bit in range(8):
                px = origin_x + bit
                if px >= self._width:
                    break
                if not (row_bits >> (7 - bit)) & 1:
                    continue
                offset = base + px
                if self._pixels[offset]:
                    collision = True
                self._pixels[offset] = not self._pixels[offset]
                drawn += 1

        self._needs_refresh = True
        return DrawResult(collision=collision, pixels_drawn=drawn)

    # =========================================================================
    # Export API (read-only views for the host)
    # =========================================================================

    def rows(self) -> List[List[bool]]:
        """Return the grid as a list of rows (copies)."""
        w = self._width
        return [self._pixels[y * w:(y + 1) * w] for y in range(self._height)]

    def lit_pixels(self) -> int:
        """Count pixels that are on."""
        return sum(self._pixels)

    def to_text(self, on: str = "#", off: str = ".") -> str:
        """
        Render the framebuffer as text, one line per row.

        Args:
            on: Character for lit pixels
            off: Character for dark pixels
        """
        return "\n".join(
            "".join(on if pixel else off for pixel in row)
            for row in self.rows()
        )

    def get_pixel_buffer(self) -> bytes:
        """
        Get display as pixel buffer.

        Returns:
            One byte per pixel, row-major: 255 for on, 0 for off.
        """
        return bytes(255 if pixel else 0 for pixel in self._pixels)

    def render_image(
        self,
        scale: int = 8,
        ink_color: tuple = (255, 255, 255),
        paper_color: tuple = (0, 0, 0),
    ) -> bytes:
        """
        Render the framebuffer as a PNG image.

        Args:
            scale: Pixel scale factor (default 8)
            ink_color: RGB tuple for lit pixels
            paper_color: RGB tuple for dark pixels

        Returns:
            PNG image bytes
        """
        if scale < 1:
            raise ValueError(f"scale must be >= 1, got {scale}")

        mask = Image.frombytes("L", (self._width, self._height), self.get_pixel_buffer())
        img = Image.new("RGB", (self._width, self._height), paper_color)
        img.paste(ink_color, mask=mask)
        if scale > 1:
            img = img.resize(
                (self._width * scale, self._height * scale), Image.Resampling.NEAREST
            )

        buffer = io.BytesIO()
        img.save(buffer, format="PNG")
        return buffer.getvalue()

    def __repr__(self) -> str:
        return f"Framebuffer({self._width}x{self._height}, lit={self.lit_pixels()})"
