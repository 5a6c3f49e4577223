from __future__ import annotations

import numpy as np

from .core import lerp, scurve3
from .errors import ConfigurationError
from .module import Module


class _PairCombiner(Module):
    def __init__(self, left: Module | None = None, right: Module | None = None):
        self.left = left
        self.right = right

    def _inputs(self) -> list[tuple[str, Module | None]]:
        return [("left", self.left), ("right", self.right)]


class Add(_PairCombiner):
    def evaluate(self, *coords: np.ndarray) -> np.ndarray:
        return self.left.evaluate(*coords) + self.right.evaluate(*coords)


class Multiply(_PairCombiner):
    def evaluate(self, *coords: np.ndarray) -> np.ndarray:
        return self.left.evaluate(*coords) * self.right.evaluate(*coords)


class Min(_PairCombiner):
    def evaluate(self, *coords: np.ndarray) -> np.ndarray:
        return np.minimum(self.left.evaluate(*coords), self.right.evaluate(*coords))


class Max(_PairCombiner):
    def evaluate(self, *coords: np.ndarray) -> np.ndarray:
        return np.maximum(self.left.evaluate(*coords), self.right.evaluate(*coords))


class Power(_PairCombiner):
    """left ** right."""

    def evaluate(self, *coords: np.ndarray) -> np.ndarray:
        return np.power(self.left.evaluate(*coords), self.right.evaluate(*coords))


class Blend(Module):
    """Linear interpolation from `source0` to `source1`.

    The control output, clamped to [0, 1], is the interpolation weight: 0
    gives `source0`, 1 gives `source1`. It is clamped rather than remapped
    from [-1, 1], so a control of 0.5 gives the midpoint.
    """

    def __init__(
        self,
        source0: Module | None = None,
        source1: Module | None = None,
        control: Module | None = None,
    ):
        self.source0 = source0
        self.source1 = source1
        self.control = control

    def _inputs(self) -> list[tuple[str, Module | None]]:
        return [
            ("source0", self.source0),
            ("source1", self.source1),
            ("control", self.control),
        ]

    def evaluate(self, *coords: np.ndarray) -> np.ndarray:
        v0 = self.source0.evaluate(*coords)
        v1 = self.source1.evaluate(*coords)
        alpha = np.clip(self.control.evaluate(*coords), 0.0, 1.0)
        return lerp(v0, v1, alpha)


class Select(Module):
    """Outputs `source1` where the control lies in [lower, upper], else `source0`.

    A non-zero `edge_falloff` smooths the switch over a band of that half-width
    around each bound, using a cubic S-curve. The falloff is limited to half
    the selection range.
    """

    DEFAULT_LOWER = -1.0
    DEFAULT_UPPER = 1.0
    DEFAULT_EDGE_FALLOFF = 0.0

    def __init__(
        self,
        source0: Module | None = None,
        source1: Module | None = None,
        control: Module | None = None,
        *,
        lower: float = DEFAULT_LOWER,
        upper: float = DEFAULT_UPPER,
        edge_falloff: float = DEFAULT_EDGE_FALLOFF,
    ):
        self.source0 = source0
        self.source1 = source1
        self.control = control
        self._edge_falloff = 0.0
        self.set_bounds(lower, upper)
        self.edge_falloff = edge_falloff

    def _inputs(self) -> list[tuple[str, Module | None]]:
        return [
            ("source0", self.source0),
            ("source1", self.source1),
            ("control", self.control),
        ]

    def set_bounds(self, lower: float, upper: float) -> None:
        self._ensure_unlocked()
        lower = float(lower)
        upper = float(upper)
        if lower >= upper:
            raise ConfigurationError(
                f"lower bound {lower} must be below upper bound {upper}"
            )
        self._lower = lower
        self._upper = upper
        self._edge_falloff = min(self._edge_falloff, (upper - lower) / 2.0)

    @property
    def lower(self) -> float:
        return self._lower

    @property
    def upper(self) -> float:
        return self._upper

    @property
    def edge_falloff(self) -> float:
        return self._edge_falloff

    @edge_falloff.setter
    def edge_falloff(self, value: float) -> None:
        falloff = float(value)
        if falloff < 0.0:
            raise ConfigurationError("edge_falloff must be >= 0")
        self._edge_falloff = min(falloff, (self._upper - self._lower) / 2.0)

    def evaluate(self, *coords: np.ndarray) -> np.ndarray:
        control = self.control.evaluate(*coords)
        v0 = self.source0.evaluate(*coords)
        v1 = self.source1.evaluate(*coords)
        lower = self._lower
        upper = self._upper
        falloff = self._edge_falloff

        if falloff <= 0.0:
            inside = (control >= lower) & (control <= upper)
            return np.where(inside, v1, v0)

        rise = scurve3((control - (lower - falloff)) / (2.0 * falloff))
        fall = scurve3((control - (upper - falloff)) / (2.0 * falloff))
        return np.select(
            [
                control < lower - falloff,
                control < lower + falloff,
                control < upper - falloff,
                control < upper + falloff,
            ],
            [v0, lerp(v0, v1, rise), v1, lerp(v1, v0, fall)],
            default=v0,
        )
