from __future__ import annotations

from typing import Sequence

import numpy as np

from .errors import ConfigurationError
from .module import Module


class Constant(Module):
    """Outputs the same value everywhere."""

    DEFAULT_VALUE = 0.0

    def __init__(self, value: float = DEFAULT_VALUE):
        self.value = float(value)

    def evaluate(self, *coords: np.ndarray) -> np.ndarray:
        return np.full(np.shape(coords[0]), self.value, dtype=np.float64)


def _rings(dist: np.ndarray) -> np.ndarray:
    inner = dist - np.floor(dist)
    nearest = np.minimum(inner, 1.0 - inner)
    # 1.0 on a ring, -1.0 halfway between two rings.
    return 1.0 - nearest * 4.0


class Spheres(Module):
    """Concentric spheres (circles in 2D) centred on the origin, radius step 1."""

    DEFAULT_FREQUENCY = 1.0

    def __init__(self, frequency: float = DEFAULT_FREQUENCY):
        self.frequency = float(frequency)

    def evaluate(self, *coords: np.ndarray) -> np.ndarray:
        f = self.frequency
        dist = np.sqrt(sum((c * f) ** 2 for c in coords))
        return _rings(dist)


class Cylinders(Module):
    """Concentric cylinders around the y axis."""

    SUPPORTED = frozenset({3})

    DEFAULT_FREQUENCY = 1.0

    def __init__(self, frequency: float = DEFAULT_FREQUENCY):
        self.frequency = float(frequency)

    def evaluate(self, x: np.ndarray, y: np.ndarray, z: np.ndarray) -> np.ndarray:
        f = self.frequency
        dist = np.sqrt((x * f) ** 2 + (z * f) ** 2)
        return _rings(dist)


class LinearGradient(Module):
    """Projection of the input point onto a fixed axis."""

    def __init__(self, axis: Sequence[float] = (1.0, 0.0, 0.0, 0.0)):
        self.axis = axis

    @property
    def axis(self) -> tuple[float, float, float, float]:
        return self._axis

    @axis.setter
    def axis(self, value: Sequence[float]) -> None:
        values = [float(v) for v in value]
        if not (2 <= len(values) <= 4):
            raise ConfigurationError("axis must have 2 to 4 components")
        values += [0.0] * (4 - len(values))
        self._axis = (values[0], values[1], values[2], values[3])

    def evaluate(self, *coords: np.ndarray) -> np.ndarray:
        return sum(a * c for a, c in zip(self._axis, coords)) + np.zeros(
            np.shape(coords[0])
        )
