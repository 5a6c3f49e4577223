from __future__ import annotations

from typing import Iterable, NamedTuple

import numpy as np

from noisegraph.errors import ConfigurationError


class Color(NamedTuple):
    red: int
    green: int
    blue: int
    alpha: int = 255


class GradientColor:
    """Piecewise-linear colour ramp keyed by noise value.

    Values below the first point take its colour, values above the last
    point take the last colour.
    """

    def __init__(self, points: Iterable[tuple[float, Color | tuple[int, ...]]] = ()):
        self._positions = np.zeros(0, dtype=np.float64)
        self._colors = np.zeros((0, 4), dtype=np.float64)
        for position, color in points:
            self.add_gradient_point(position, color)

    def add_gradient_point(self, position: float, color: Color | tuple[int, ...]) -> None:
        position = float(position)
        if position in self._positions:
            raise ConfigurationError(f"duplicate gradient position: {position}")
        rgba = Color(*(int(c) for c in color))
        if not all(0 <= c <= 255 for c in rgba):
            raise ConfigurationError(f"color components must be in 0..255: {tuple(color)}")

        i = int(np.searchsorted(self._positions, position))
        self._positions = np.insert(self._positions, i, position)
        self._colors = np.insert(self._colors, i, np.array(rgba, dtype=np.float64), axis=0)

    def clear(self) -> None:
        self._positions = np.zeros(0, dtype=np.float64)
        self._colors = np.zeros((0, 4), dtype=np.float64)

    @property
    def points(self) -> list[tuple[float, Color]]:
        return [
            (float(p), Color(*(int(c) for c in rgba)))
            for p, rgba in zip(self._positions, self._colors)
        ]

    def __len__(self) -> int:
        return len(self._positions)

    def colors_for(self, values) -> np.ndarray:
        """RGBA bytes, shape values.shape + (4,), for an array of values."""
        if len(self._positions) < 2:
            raise ConfigurationError("a gradient needs at least 2 points")

        v = np.asarray(values, dtype=np.float64)
        positions = self._positions
        colors = self._colors
        last = len(positions) - 1

        pos = np.searchsorted(positions, v, side="right")
        i0 = np.clip(pos - 1, 0, last)
        i1 = np.clip(pos, 0, last)
        same = i0 == i1

        span = np.where(same, 1.0, positions[i1] - positions[i0])
        alpha = np.where(same, 0.0, (v - positions[i0]) / span)[..., None]
        c0 = colors[i0]
        c1 = colors[i1]
        out = c0 + (c1 - c0) * alpha
        return np.clip(out, 0.0, 255.0).astype(np.uint8)

    def get_color(self, value: float) -> Color:
        return Color(*(int(c) for c in self.colors_for(float(value))))


def grayscale() -> GradientColor:
    return GradientColor([(-1.0, Color(0, 0, 0)), (1.0, Color(255, 255, 255))])


def terrain() -> GradientColor:
    """Water below 0, then sand, grass, dirt, rock and snow."""
    return GradientColor(
        [
            (-1.0, Color(0, 0, 128)),
            (-0.25, Color(0, 0, 255)),
            (0.0, Color(0, 128, 255)),
            (0.0625, Color(240, 240, 64)),
            (0.125, Color(32, 160, 0)),
            (0.375, Color(224, 224, 0)),
            (0.75, Color(128, 128, 128)),
            (1.0, Color(255, 255, 255)),
        ]
    )


GRADIENTS = {
    "grayscale": grayscale,
    "terrain": terrain,
}
