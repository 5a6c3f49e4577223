from __future__ import annotations

import numpy as np

from noisegraph.errors import ConfigurationError


class NoiseMap:
    """Dense row-major grid of noise values, indexed as data[row, column].

    Reads outside the grid return `border_value`.
    """

    def __init__(self, width: int = 0, height: int = 0, *, border_value: float = 0.0):
        self.border_value = float(border_value)
        self._data = np.zeros((0, 0), dtype=np.float64)
        if width or height:
            self.set_size(width, height)

    @property
    def width(self) -> int:
        return int(self._data.shape[1])

    @property
    def height(self) -> int:
        return int(self._data.shape[0])

    @property
    def data(self) -> np.ndarray:
        return self._data

    def set_size(self, width: int, height: int) -> None:
        width = int(width)
        height = int(height)
        if width <= 0 or height <= 0:
            raise ConfigurationError("width and height must be > 0")
        self._data = np.zeros((height, width), dtype=np.float64)

    def _inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get_value(self, x: int, y: int) -> float:
        x = int(x)
        y = int(y)
        if not self._inside(x, y):
            return self.border_value
        return float(self._data[y, x])

    def set_value(self, x: int, y: int, value: float) -> None:
        x = int(x)
        y = int(y)
        if not self._inside(x, y):
            raise IndexError(f"({x}, {y}) is outside a {self.width}x{self.height} map")
        self._data[y, x] = float(value)

    def set_row(self, y: int, values: np.ndarray) -> None:
        values = np.asarray(values, dtype=np.float64)
        if values.shape != (self.width,):
            raise ValueError(f"row must have shape ({self.width},), got {values.shape}")
        self._data[int(y), :] = values

    def min_max(self) -> tuple[float, float]:
        if self._data.size == 0:
            raise ValueError("noise map is empty")
        return float(np.min(self._data)), float(np.max(self._data))

    def clear(self, value: float = 0.0) -> None:
        self._data.fill(float(value))
