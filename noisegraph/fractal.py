"""Fractal filters: sums of several octaves of one source module.

The multifractal families follow F. K. Musgrave's formulations from
"Texturing & Modeling: A Procedural Approach" (2nd ed., chapter 16) as adapted
by libnoise: per-octave spectral weights `lacunarity ** (-i * H)`, a damping
weight derived from the previous octave, and an early cut-off once that
weight drops to 0.001 or below. The cut-off is applied per point with a mask
so the recursion matches the scalar loop exactly.

A fractional octave count adds one more iteration whose contribution is
scaled by the fractional part.
"""

from __future__ import annotations

from typing import Iterator

import numpy as np

from .errors import ConfigurationError
from .module import Module

_CUTOFF = 0.001


class FilterModule(Module):
    DEFAULT_FREQUENCY = 1.0
    DEFAULT_LACUNARITY = 2.0
    DEFAULT_OCTAVE_COUNT = 6.0
    DEFAULT_OFFSET = 1.0
    DEFAULT_GAIN = 2.0
    DEFAULT_SPECTRAL_EXPONENT = 0.9
    DEFAULT_PERSISTENCE = 0.5
    MAX_OCTAVE = 30

    def __init__(
        self,
        source: Module | None = None,
        *,
        frequency: float = DEFAULT_FREQUENCY,
        lacunarity: float = DEFAULT_LACUNARITY,
        octave_count: float = DEFAULT_OCTAVE_COUNT,
        offset: float = DEFAULT_OFFSET,
        gain: float = DEFAULT_GAIN,
        spectral_exponent: float = DEFAULT_SPECTRAL_EXPONENT,
        persistence: float = DEFAULT_PERSISTENCE,
    ):
        self.source = source
        self.frequency = float(frequency)
        self.offset = float(offset)
        self.gain = float(gain)
        self._lacunarity = float(lacunarity)
        self._spectral_exponent = float(spectral_exponent)
        self._persistence = float(persistence)
        self._octave_count = self._checked_octaves(octave_count)
        self._compute_weights()

    def _inputs(self) -> list[tuple[str, Module | None]]:
        return [("source", self.source)]

    def _checked_octaves(self, value: float) -> float:
        octaves = float(value)
        if not (1.0 <= octaves <= self.MAX_OCTAVE):
            raise ConfigurationError(
                f"octave_count must be in [1, {self.MAX_OCTAVE}]: {value}"
            )
        return octaves

    def _compute_weights(self) -> None:
        i = np.arange(int(self._octave_count) + 1, dtype=np.float64)
        self._spectral_weights = self._lacunarity ** (-i * self._spectral_exponent)
        self._amplitudes = self._persistence**i

    @property
    def octave_count(self) -> float:
        return self._octave_count

    @octave_count.setter
    def octave_count(self, value: float) -> None:
        self._octave_count = self._checked_octaves(value)
        self._compute_weights()

    @property
    def lacunarity(self) -> float:
        return self._lacunarity

    @lacunarity.setter
    def lacunarity(self, value: float) -> None:
        self._lacunarity = float(value)
        self._compute_weights()

    @property
    def spectral_exponent(self) -> float:
        return self._spectral_exponent

    @spectral_exponent.setter
    def spectral_exponent(self, value: float) -> None:
        self._spectral_exponent = float(value)
        self._compute_weights()

    @property
    def persistence(self) -> float:
        return self._persistence

    @persistence.setter
    def persistence(self, value: float) -> None:
        self._persistence = float(value)
        self._compute_weights()

    @property
    def spectral_weights(self) -> np.ndarray:
        return self._spectral_weights.copy()

    @property
    def amplitudes(self) -> np.ndarray:
        return self._amplitudes.copy()

    def _octaves(
        self, coords: tuple[np.ndarray, ...]
    ) -> Iterator[tuple[int, list[np.ndarray], float]]:
        """Yield (octave index, scaled coordinates, contribution fraction)."""
        point = [c * self.frequency for c in coords]
        full = int(self._octave_count)
        for i in range(full):
            yield i, point, 1.0
            point = [c * self._lacunarity for c in point]
        remainder = self._octave_count - full
        if remainder > 0.0:
            yield full, point, remainder


class Pipe(FilterModule):
    """A single octave of the source at `frequency`."""

    def evaluate(self, *coords: np.ndarray) -> np.ndarray:
        return self.source.evaluate(*(c * self.frequency for c in coords))


class SumFractal(FilterModule):
    """Fractional Brownian motion: octaves summed with amplitude persistence**i."""

    def evaluate(self, *coords: np.ndarray) -> np.ndarray:
        value = np.zeros(np.shape(coords[0]))
        for i, point, fraction in self._octaves(coords):
            signal = self.source.evaluate(*point) * self._amplitudes[i]
            value = value + fraction * signal
        return value


class Billow(FilterModule):
    """Sum of folded octaves (2|n| - 1), giving billowy, cloud-like output."""

    DEFAULT_SCALE = 1.0
    DEFAULT_BIAS = 0.0

    def __init__(
        self,
        source: Module | None = None,
        *,
        scale: float = DEFAULT_SCALE,
        bias: float = DEFAULT_BIAS,
        **params: float,
    ):
        super().__init__(source, **params)
        self.scale = float(scale)
        self.bias = float(bias)

    def evaluate(self, *coords: np.ndarray) -> np.ndarray:
        value = np.zeros(np.shape(coords[0]))
        for i, point, fraction in self._octaves(coords):
            signal = np.abs(self.source.evaluate(*point)) * 2.0 - 1.0
            value = value + fraction * signal * self._amplitudes[i]
        return value * self.scale + self.bias


class SinFractal(FilterModule):
    """Perlin's marble: sin(x + turbulence)."""

    def evaluate(self, *coords: np.ndarray) -> np.ndarray:
        value = np.zeros(np.shape(coords[0]))
        for i, point, fraction in self._octaves(coords):
            signal = np.abs(self.source.evaluate(*point)) * self._spectral_weights[i]
            value = value + fraction * signal
        return np.sin(coords[0] * self.frequency + value)


class MultiFractal(FilterModule):
    """Multiplicative cascade: product of (offset + n_i * w_i)."""

    def evaluate(self, *coords: np.ndarray) -> np.ndarray:
        value = np.ones(np.shape(coords[0]))
        for i, point, fraction in self._octaves(coords):
            factor = self.offset + self.source.evaluate(*point) * self._spectral_weights[i]
            value = value + fraction * value * (factor - 1.0)
        return value


class HeterogeneousMultiFractal(FilterModule):
    """Heterogeneous terrain: each octave is scaled by the running value."""

    def evaluate(self, *coords: np.ndarray) -> np.ndarray:
        octaves = self._octaves(coords)
        _, point, _ = next(octaves)
        value = self.offset + self.source.evaluate(*point)
        for i, point, fraction in octaves:
            signal = self.source.evaluate(*point) + self.offset
            increment = signal * self._spectral_weights[i] * value
            value = value + fraction * increment
        return value


class HybridMultiFractal(FilterModule):
    """Hybrid additive/multiplicative fractal; smooth valleys, rough peaks."""

    def evaluate(self, *coords: np.ndarray) -> np.ndarray:
        octaves = self._octaves(coords)
        _, point, _ = next(octaves)
        value = (self.source.evaluate(*point) + self.offset) * self._spectral_weights[0]
        weight = self.gain * value
        active = np.ones(np.shape(value), dtype=bool)

        for i, point, fraction in octaves:
            active = active & (weight > _CUTOFF)
            weight = np.minimum(weight, 1.0)
            signal = (self.source.evaluate(*point) + self.offset) * self._spectral_weights[i]
            value = value + np.where(active, fraction * weight * signal, 0.0)
            weight = np.where(active, weight * self.gain * signal, weight)
        return value


class RidgedMultiFractal(FilterModule):
    """Ridged multifractal: sharp ridges from inverted absolute noise."""

    def evaluate(self, *coords: np.ndarray) -> np.ndarray:
        octaves = self._octaves(coords)
        _, point, _ = next(octaves)
        signal = self.offset - np.abs(self.source.evaluate(*point))
        signal = signal * signal
        value = signal
        weight = np.ones(np.shape(value))
        active = np.ones(np.shape(value), dtype=bool)

        for i, point, fraction in octaves:
            active = active & (weight > _CUTOFF)
            next_weight = np.clip(signal * self.gain, 0.0, 1.0)
            next_signal = self.offset - np.abs(self.source.evaluate(*point))
            next_signal = next_signal * next_signal * next_weight
            value = value + np.where(
                active, fraction * next_signal * self._spectral_weights[i], 0.0
            )
            signal = np.where(active, next_signal, signal)
            weight = np.where(active, next_weight, weight)
        return value
