from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from .errors import ConfigurationError
from .fractal import SumFractal
from .improved import ImprovedPerlin
from .module import Module, NoiseQuality

# Offsets added before sampling each distort module. Gradient noise is zero
# on integer lattice points, so unshifted samples would all vanish together.
_X_OFFSETS = (12414.0 / 65536.0, 65124.0 / 65536.0, 31337.0 / 65536.0)
_Y_OFFSETS = (26519.0 / 65536.0, 18128.0 / 65536.0, 60493.0 / 65536.0)
_Z_OFFSETS = (53820.0 / 65536.0, 11213.0 / 65536.0, 44845.0 / 65536.0)


class Turbulence(Module):
    """Randomly displaces the input point before sampling the source.

    Each axis is displaced by its own distort module, scaled by `power`.
    A good starting point for `power` is the reciprocal of the source's
    frequency.
    """

    SUPPORTED = frozenset({3})

    DEFAULT_POWER = 1.0

    def __init__(
        self,
        source: Module | None = None,
        x_distort: Module | None = None,
        y_distort: Module | None = None,
        z_distort: Module | None = None,
        *,
        power: float = DEFAULT_POWER,
    ):
        self.source = source
        self.x_distort = x_distort
        self.y_distort = y_distort
        self.z_distort = z_distort
        self.power = float(power)

    @classmethod
    def from_perlin(
        cls,
        source: Module | None = None,
        *,
        frequency: float = 1.0,
        power: float = DEFAULT_POWER,
        roughness: int = 3,
        seed: int = 0,
        quality: NoiseQuality | str = NoiseQuality.STANDARD,
    ) -> Turbulence:
        """Turbulence driven by three fBm distort modules seeded seed..seed+2.

        `roughness` is the octave count of the distort modules.
        """

        def distort(offset: int) -> SumFractal:
            return SumFractal(
                ImprovedPerlin(seed=int(seed) + offset, quality=quality),
                frequency=frequency,
                octave_count=roughness,
            )

        return cls(source, distort(0), distort(1), distort(2), power=power)

    def _inputs(self) -> list[tuple[str, Module | None]]:
        return [
            ("source", self.source),
            ("x_distort", self.x_distort),
            ("y_distort", self.y_distort),
            ("z_distort", self.z_distort),
        ]

    def evaluate(self, x: np.ndarray, y: np.ndarray, z: np.ndarray) -> np.ndarray:
        dx = self.x_distort.evaluate(
            x + _X_OFFSETS[0], y + _X_OFFSETS[1], z + _X_OFFSETS[2]
        )
        dy = self.y_distort.evaluate(
            x + _Y_OFFSETS[0], y + _Y_OFFSETS[1], z + _Y_OFFSETS[2]
        )
        dz = self.z_distort.evaluate(
            x + _Z_OFFSETS[0], y + _Z_OFFSETS[1], z + _Z_OFFSETS[2]
        )
        return self.source.evaluate(
            x + dx * self.power, y + dy * self.power, z + dz * self.power
        )


class Displace(Module):
    """Adds the output of one module per axis to the input point."""

    SUPPORTED = frozenset({3})

    def __init__(
        self,
        source: Module | None = None,
        x_displace: Module | None = None,
        y_displace: Module | None = None,
        z_displace: Module | None = None,
    ):
        self.source = source
        self.x_displace = x_displace
        self.y_displace = y_displace
        self.z_displace = z_displace

    def _inputs(self) -> list[tuple[str, Module | None]]:
        return [
            ("source", self.source),
            ("x_displace", self.x_displace),
            ("y_displace", self.y_displace),
            ("z_displace", self.z_displace),
        ]

    def evaluate(self, x: np.ndarray, y: np.ndarray, z: np.ndarray) -> np.ndarray:
        return self.source.evaluate(
            x + self.x_displace.evaluate(x, y, z),
            y + self.y_displace.evaluate(x, y, z),
            z + self.z_displace.evaluate(x, y, z),
        )


def _four(values: Sequence[float] | float, fill: float) -> tuple[float, ...]:
    if isinstance(values, (int, float)):
        return (float(values),) * 4
    out = [float(v) for v in values]
    if not (1 <= len(out) <= 4):
        raise ConfigurationError("expected 1 to 4 per-axis values")
    return tuple(out + [fill] * (4 - len(out)))


class ScalePoint(Module):
    """Multiplies each input coordinate by a per-axis factor."""

    def __init__(
        self, source: Module | None = None, scale: Sequence[float] | float = 1.0
    ):
        self.source = source
        self.scale = scale

    def _inputs(self) -> list[tuple[str, Module | None]]:
        return [("source", self.source)]

    @property
    def scale(self) -> tuple[float, ...]:
        return self._scale

    @scale.setter
    def scale(self, value: Sequence[float] | float) -> None:
        self._scale = _four(value, 1.0)

    def evaluate(self, *coords: np.ndarray) -> np.ndarray:
        return self.source.evaluate(*(c * s for c, s in zip(coords, self.scale)))


class TranslatePoint(Module):
    """Shifts each input coordinate by a per-axis amount."""

    def __init__(
        self, source: Module | None = None, translation: Sequence[float] | float = 0.0
    ):
        self.source = source
        self.translation = translation

    def _inputs(self) -> list[tuple[str, Module | None]]:
        return [("source", self.source)]

    @property
    def translation(self) -> tuple[float, ...]:
        return self._translation

    @translation.setter
    def translation(self, value: Sequence[float] | float) -> None:
        self._translation = _four(value, 0.0)

    def evaluate(self, *coords: np.ndarray) -> np.ndarray:
        return self.source.evaluate(*(c + t for c, t in zip(coords, self.translation)))


class RotatePoint(Module):
    """Rotates the input point around the origin; angles in degrees."""

    SUPPORTED = frozenset({3})

    def __init__(
        self,
        source: Module | None = None,
        *,
        x_angle: float = 0.0,
        y_angle: float = 0.0,
        z_angle: float = 0.0,
    ):
        self.source = source
        self.set_angles(x_angle, y_angle, z_angle)

    def _inputs(self) -> list[tuple[str, Module | None]]:
        return [("source", self.source)]

    def set_angles(self, x_angle: float, y_angle: float, z_angle: float) -> None:
        self._ensure_unlocked()
        self._angles = (float(x_angle), float(y_angle), float(z_angle))
        xc, yc, zc = (math.cos(math.radians(a)) for a in self._angles)
        xs, ys, zs = (math.sin(math.radians(a)) for a in self._angles)
        self._matrix = np.array(
            [
                [ys * xs * zs + yc * zc, xc * zs, ys * zc - yc * xs * zs],
                [ys * xs * zc - yc * zs, xc * zc, -yc * xs * zc - ys * zs],
                [-ys * xc, xs, yc * xc],
            ],
            dtype=np.float64,
        )

    @property
    def angles(self) -> tuple[float, float, float]:
        return self._angles

    def evaluate(self, x: np.ndarray, y: np.ndarray, z: np.ndarray) -> np.ndarray:
        m = self._matrix
        return self.source.evaluate(
            m[0, 0] * x + m[0, 1] * y + m[0, 2] * z,
            m[1, 0] * x + m[1, 1] * y + m[1, 2] * z,
            m[2, 0] * x + m[2, 1] * y + m[2, 2] * z,
        )
