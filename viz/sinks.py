from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np
from PIL import Image

from noisegraph.errors import ConfigurationError

from .gradient import Color


def _check_size(width: int, height: int) -> tuple[int, int]:
    width = int(width)
    height = int(height)
    if width <= 0 or height <= 0:
        raise ConfigurationError("width and height must be > 0")
    return width, height


class PixelSink(ABC):
    """Destination for rendered RGBA pixels."""

    @property
    @abstractmethod
    def width(self) -> int: ...

    @property
    @abstractmethod
    def height(self) -> int: ...

    @abstractmethod
    def set_pixel(self, x: int, y: int, color: Color) -> None: ...

    @abstractmethod
    def get_pixel(self, x: int, y: int) -> Color: ...

    def set_row(self, y: int, rgba: np.ndarray) -> None:
        """Write a (width, 4) uint8 row."""
        for x, pixel in enumerate(np.asarray(rgba, dtype=np.uint8)):
            self.set_pixel(x, y, Color(*(int(c) for c in pixel)))


class ImageBuffer(PixelSink):
    """In-memory RGBA image backed by a (height, width, 4) uint8 array."""

    def __init__(self, width: int, height: int):
        width, height = _check_size(width, height)
        self._pixels = np.zeros((height, width, 4), dtype=np.uint8)

    @property
    def width(self) -> int:
        return int(self._pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self._pixels.shape[0])

    @property
    def pixels(self) -> np.ndarray:
        return self._pixels

    def set_pixel(self, x: int, y: int, color: Color) -> None:
        self._pixels[int(y), int(x)] = tuple(color)

    def get_pixel(self, x: int, y: int) -> Color:
        return Color(*(int(c) for c in self._pixels[int(y), int(x)]))

    def set_row(self, y: int, rgba: np.ndarray) -> None:
        self._pixels[int(y)] = np.asarray(rgba, dtype=np.uint8)


class PillowImageSink(PixelSink):
    """Writes straight into a Pillow RGBA image."""

    def __init__(self, width: int, height: int):
        width, height = _check_size(width, height)
        self._image = Image.new("RGBA", (width, height))

    @property
    def width(self) -> int:
        return self._image.width

    @property
    def height(self) -> int:
        return self._image.height

    @property
    def image(self) -> Image.Image:
        return self._image

    def set_pixel(self, x: int, y: int, color: Color) -> None:
        self._image.putpixel((int(x), int(y)), tuple(color))

    def get_pixel(self, x: int, y: int) -> Color:
        return Color(*self._image.getpixel((int(x), int(y))))

    def set_row(self, y: int, rgba: np.ndarray) -> None:
        row = np.ascontiguousarray(np.asarray(rgba, dtype=np.uint8)[None, :, :])
        self._image.paste(Image.fromarray(row), (0, int(y)))
