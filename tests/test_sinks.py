import numpy as np
import pytest

from noisegraph.errors import ConfigurationError
from viz.gradient import Color
from viz.sinks import ImageBuffer, PillowImageSink, PixelSink


class _DictSink(PixelSink):
    def __init__(self, width: int, height: int):
        self._size = (width, height)
        self.pixels = {}

    @property
    def width(self) -> int:
        return self._size[0]

    @property
    def height(self) -> int:
        return self._size[1]

    def set_pixel(self, x, y, color):
        self.pixels[(x, y)] = color

    def get_pixel(self, x, y):
        return self.pixels[(x, y)]


def test_default_set_row_writes_each_pixel():
    sink = _DictSink(2, 1)
    sink.set_row(0, np.array([[1, 2, 3, 4], [5, 6, 7, 8]], dtype=np.uint8))
    assert sink.get_pixel(1, 0) == Color(5, 6, 7, 8)


@pytest.mark.parametrize("cls", [ImageBuffer, PillowImageSink])
def test_sinks_round_trip_pixels(cls):
    sink = cls(3, 2)
    assert (sink.width, sink.height) == (3, 2)
    sink.set_pixel(2, 1, Color(10, 20, 30, 40))
    assert sink.get_pixel(2, 1) == Color(10, 20, 30, 40)
    sink.set_row(0, np.full((3, 4), 200, dtype=np.uint8))
    assert sink.get_pixel(1, 0) == Color(200, 200, 200, 200)


@pytest.mark.parametrize("cls", [ImageBuffer, PillowImageSink])
def test_sinks_reject_empty_size(cls):
    with pytest.raises(ConfigurationError):
        cls(0, 3)
