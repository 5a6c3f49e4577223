from __future__ import annotations

from typing import Iterable

import numpy as np

from .core import cerp, lerp
from .errors import ConfigurationError
from .module import Module


class _SourceModifier(Module):
    def __init__(self, source: Module | None = None):
        self.source = source

    def _inputs(self) -> list[tuple[str, Module | None]]:
        return [("source", self.source)]


class ScaleBias(_SourceModifier):
    """source * scale + bias."""

    def __init__(self, source: Module | None = None, scale: float = 1.0, bias: float = 0.0):
        super().__init__(source)
        self.scale = float(scale)
        self.bias = float(bias)

    def evaluate(self, *coords: np.ndarray) -> np.ndarray:
        return self.source.evaluate(*coords) * self.scale + self.bias


class Clamp(_SourceModifier):
    """Clamps the source output to [lower, upper]."""

    def __init__(
        self, source: Module | None = None, lower: float = -1.0, upper: float = 1.0
    ):
        super().__init__(source)
        self.set_bounds(lower, upper)

    def set_bounds(self, lower: float, upper: float) -> None:
        lower = float(lower)
        upper = float(upper)
        if lower > upper:
            raise ConfigurationError(f"lower bound {lower} exceeds upper bound {upper}")
        self.lower = lower
        self.upper = upper

    def evaluate(self, *coords: np.ndarray) -> np.ndarray:
        return np.minimum(np.maximum(self.source.evaluate(*coords), self.lower), self.upper)


class Abs(_SourceModifier):
    def evaluate(self, *coords: np.ndarray) -> np.ndarray:
        return np.abs(self.source.evaluate(*coords))


class Invert(_SourceModifier):
    def evaluate(self, *coords: np.ndarray) -> np.ndarray:
        return -self.source.evaluate(*coords)


class Exponent(_SourceModifier):
    """Maps the source from [-1, 1] to [0, 1], raises it to `exponent`, maps back."""

    def __init__(self, source: Module | None = None, exponent: float = 1.0):
        super().__init__(source)
        self.exponent = float(exponent)

    def evaluate(self, *coords: np.ndarray) -> np.ndarray:
        v = self.source.evaluate(*coords)
        return np.power(np.abs((v + 1.0) / 2.0), self.exponent) * 2.0 - 1.0


class _ControlPointModifier(_SourceModifier):
    MIN_POINTS = 2

    def _check_config(self) -> None:
        super()._check_config()
        if len(self._keys) < self.MIN_POINTS:
            raise ConfigurationError(
                f"{type(self).__name__} needs at least {self.MIN_POINTS} control "
                f"points, has {len(self._keys)}"
            )

    def _insert_key(self, key: float) -> None:
        self._ensure_unlocked()
        if key in self._keys:
            raise ConfigurationError(f"duplicate control point: {key}")
        self._keys = np.sort(np.append(self._keys, key))


class Curve(_ControlPointModifier):
    """Remaps the source through a cubic curve defined by control points.

    Points are (input, output) pairs with unique inputs; at least four are
    required. Outside the control range the curve is flat at the end output.
    """

    MIN_POINTS = 4

    def __init__(
        self,
        source: Module | None = None,
        points: Iterable[tuple[float, float]] = (),
    ):
        super().__init__(source)
        self._keys = np.zeros(0, dtype=np.float64)
        self._values = np.zeros(0, dtype=np.float64)
        for input_value, output_value in points:
            self.add_control_point(input_value, output_value)

    def add_control_point(self, input_value: float, output_value: float) -> None:
        key = float(input_value)
        pairs = dict(zip(self._keys.tolist(), self._values.tolist()))
        self._insert_key(key)
        pairs[key] = float(output_value)
        self._values = np.array([pairs[k] for k in self._keys.tolist()], dtype=np.float64)

    def clear_control_points(self) -> None:
        self._ensure_unlocked()
        self._keys = np.zeros(0, dtype=np.float64)
        self._values = np.zeros(0, dtype=np.float64)

    @property
    def control_points(self) -> list[tuple[float, float]]:
        return list(zip(self._keys.tolist(), self._values.tolist()))

    def evaluate(self, *coords: np.ndarray) -> np.ndarray:
        v = self.source.evaluate(*coords)
        keys = self._keys
        values = self._values
        last = len(keys) - 1

        pos = np.searchsorted(keys, v, side="right")
        i0 = np.clip(pos - 2, 0, last)
        i1 = np.clip(pos - 1, 0, last)
        i2 = np.clip(pos, 0, last)
        i3 = np.clip(pos + 1, 0, last)

        same = i1 == i2
        span = np.where(same, 1.0, keys[i2] - keys[i1])
        alpha = (v - keys[i1]) / span
        out = cerp(values[i0], values[i1], values[i2], values[i3], alpha)
        return np.where(same, values[i1], out)


def terrace_points(count: int) -> list[float]:
    """`count` evenly spaced terrace levels from -1 to 1."""
    count = int(count)
    if count < 2:
        raise ConfigurationError("a terrace needs at least 2 control points")
    return np.linspace(-1.0, 1.0, count).tolist()


class Terrace(_ControlPointModifier):
    """Maps the source onto terrace-like steps between control points."""

    def __init__(
        self,
        source: Module | None = None,
        points: Iterable[float] = (),
        *,
        invert: bool = False,
    ):
        super().__init__(source)
        self.invert = bool(invert)
        self._keys = np.zeros(0, dtype=np.float64)
        for point in points:
            self.add_control_point(point)

    def add_control_point(self, value: float) -> None:
        self._insert_key(float(value))

    def clear_control_points(self) -> None:
        self._ensure_unlocked()
        self._keys = np.zeros(0, dtype=np.float64)

    @property
    def control_points(self) -> list[float]:
        return self._keys.tolist()

    def evaluate(self, *coords: np.ndarray) -> np.ndarray:
        v = self.source.evaluate(*coords)
        keys = self._keys
        last = len(keys) - 1

        pos = np.searchsorted(keys, v, side="right")
        i0 = np.clip(pos - 1, 0, last)
        i1 = np.clip(pos, 0, last)
        same = i0 == i1

        v0 = keys[i0]
        v1 = keys[i1]
        alpha = (v - v0) / np.where(same, 1.0, v1 - v0)
        if self.invert:
            alpha = 1.0 - alpha
            v0, v1 = v1, v0
        alpha = alpha * alpha
        return np.where(same, keys[i1], lerp(v0, v1, alpha))
