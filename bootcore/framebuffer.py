"""Framebuffer descriptions and wallpaper image layout."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class ImageLayout(Enum):
    """How a wallpaper image is placed on the screen."""

    TILED = 0
    CENTERED = 1
    STRETCHED = 2


@dataclass
class Image:
    """A bitmap with its placement on a frame.

    ``width``/``height`` are the bitmap's own size, ``x_size``/``y_size``
    the size it is drawn at.
    """

    pixels: bytes
    width: int
    height: int
    bpp: int = 32
    pitch: Optional[int] = None
    x_size: Optional[int] = None
    y_size: Optional[int] = None
    layout: ImageLayout = ImageLayout.TILED
    x_displacement: int = 0
    y_displacement: int = 0
    back_colour: int = 0

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("image dimensions must be positive")
        if self.pitch is None:
            self.pitch = self.width * self.bpp // 8
        if len(self.pixels) < self.pitch * self.height:
            raise ValueError("pixel data is shorter than pitch * height")
        if self.x_size is None:
            self.x_size = self.width
        if self.y_size is None:
            self.y_size = self.height

    def make_centered(self, frame_width: int, frame_height: int, back_colour: int) -> None:
        """Centre the image on a frame, filling the rest with ``back_colour``."""
        self.layout = ImageLayout.CENTERED
        self.x_displacement = frame_width // 2 - self.x_size // 2
        self.y_displacement = frame_height // 2 - self.y_size // 2
        self.back_colour = back_colour

    def make_stretched(self, width: int, height: int) -> None:
        """Stretch the image to cover ``width`` by ``height``."""
        self.layout = ImageLayout.STRETCHED
        self.x_size = width
        self.y_size = height


@dataclass
class Framebuffer:
    """A linear framebuffer and its pixel format."""

    width: int
    height: int
    pitch: int
    bpp: int = 32
    memory_model: int = 6
    red_mask_size: int = 8
    red_mask_shift: int = 16
    green_mask_size: int = 8
    green_mask_shift: int = 8
    blue_mask_size: int = 8
    blue_mask_shift: int = 0
    memory: Optional[bytearray] = None
    edid: Any = None
    modes: list["Framebuffer"] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.memory is None:
            self.memory = bytearray(self.pitch * self.height)

    def _row_span(self, y: int) -> tuple[int, int]:
        if self.bpp == 32:
            start = (y * self.pitch) // 4 * 4
            return start, start + self.width * 4
        if self.bpp == 16:
            start = (y * self.pitch) // 2 * 2
            return start, start + self.width * 2
        start = y * self.pitch
        return start, start + self.width * self.bpp

    def clear(self) -> None:
        """Set every visible pixel of every row to zero."""
        size = len(self.memory)
        for y in range(self.height):
            start, end = self._row_span(y)
            end = min(end, size)
            if start < end:
                self.memory[start:end] = bytes(end - start)

    def is_xrgb8888(self) -> bool:
        """True if the pixel format is 8-bit-per-channel xRGB."""
        return (
            self.red_mask_size == 8
            and self.red_mask_shift == 16
            and self.green_mask_size == 8
            and self.green_mask_shift == 8
            and self.blue_mask_size == 8
            and self.blue_mask_shift == 0
        )