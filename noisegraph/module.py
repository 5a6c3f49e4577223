from __future__ import annotations

from contextlib import contextmanager
from enum import Enum
from typing import Callable, Iterator

import numpy as np

from .core import scurve3, scurve5
from .errors import (
    ConfigurationError,
    ModuleLockedError,
    UnboundModuleError,
    UnsupportedDimensionError,
)

ALL_DIMENSIONS = frozenset({2, 3, 4})


class NoiseQuality(Enum):
    """Interpolation fidelity of lattice noise."""

    FAST = "fast"
    STANDARD = "standard"
    BEST = "best"

    @classmethod
    def parse(cls, value: NoiseQuality | str) -> NoiseQuality:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ConfigurationError(f"unknown noise quality: {value}") from None

    @property
    def curve(self) -> Callable[[np.ndarray], np.ndarray]:
        return _CURVES[self]


def _linear(t: np.ndarray) -> np.ndarray:
    return t


_CURVES = {
    NoiseQuality.FAST: _linear,
    NoiseQuality.STANDARD: scurve3,
    NoiseQuality.BEST: scurve5,
}


class Module:
    """A node of the noise graph.

    Subclasses implement `evaluate(*coords)` for every coordinate count listed
    in `SUPPORTED`, and list their child slots in `_inputs()`. The effective
    capability set of a node is `SUPPORTED` intersected with the capability
    sets of its children, so it is known as soon as the children are bound.

    `sample()` is the checked entry point: it validates the whole sub-graph
    once and then runs the unchecked `evaluate()` recursion.
    """

    SUPPORTED: frozenset[int] = ALL_DIMENSIONS

    _lock_depth = 0

    def __setattr__(self, name: str, value) -> None:
        if self._lock_depth and not name.startswith("_"):
            raise ModuleLockedError(
                f"cannot set {type(self).__name__}.{name} while a pass is running"
            )
        super().__setattr__(name, value)

    def _ensure_unlocked(self) -> None:
        if self._lock_depth:
            raise ModuleLockedError(
                f"cannot modify {type(self).__name__} while a pass is running"
            )

    def _inputs(self) -> list[tuple[str, Module | None]]:
        return []

    def children(self) -> list[Module]:
        return [m for _, m in self._inputs() if m is not None]

    @property
    def dimensions(self) -> frozenset[int]:
        dims = self.SUPPORTED
        for name, module in self._inputs():
            if module is None:
                raise UnboundModuleError(f"{type(self).__name__}.{name} is not set")
            dims = dims & module.dimensions
        return frozenset(dims)

    def supports(self, ndim: int) -> bool:
        return int(ndim) in self.dimensions

    def _check_config(self) -> None:
        for name, module in self._inputs():
            if module is None:
                raise UnboundModuleError(f"{type(self).__name__}.{name} is not set")

    def graph(self) -> list[Module]:
        """Every distinct node reachable from this one, this one first."""
        seen: set[int] = set()
        nodes: list[Module] = []
        stack: list[Module] = [self]
        while stack:
            node = stack.pop()
            if id(node) in seen:
                continue
            seen.add(id(node))
            nodes.append(node)
            stack.extend(reversed(node.children()))
        return nodes

    def validate(self, ndim: int) -> None:
        ndim = int(ndim)
        for node in self.graph():
            node._check_config()
        if ndim not in self.dimensions:
            raise UnsupportedDimensionError(
                f"{type(self).__name__} cannot be sampled in {ndim}D "
                f"(supports {sorted(self.dimensions)})"
            )

    @contextmanager
    def locked(self) -> Iterator[Module]:
        nodes = self.graph()
        for node in nodes:
            node._lock_depth += 1
        try:
            yield self
        finally:
            for node in nodes:
                node._lock_depth -= 1

    def evaluate(self, *coords: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    def sample(self, *coords) -> np.ndarray:
        self.validate(len(coords))
        arrays = np.broadcast_arrays(*(np.asarray(c, dtype=np.float64) for c in coords))
        return np.asarray(self.evaluate(*arrays), dtype=np.float64)

    def sample2d(self, x, y) -> np.ndarray:
        return self.sample(x, y)

    def sample3d(self, x, y, z) -> np.ndarray:
        return self.sample(x, y, z)

    def sample4d(self, x, y, z, w) -> np.ndarray:
        return self.sample(x, y, z, w)


class PrimitiveModule(Module):
    """A seeded generator with no children."""

    DEFAULT_SEED = 0
    DEFAULT_QUALITY = NoiseQuality.STANDARD

    def __init__(
        self,
        *,
        seed: int = DEFAULT_SEED,
        quality: NoiseQuality | str = DEFAULT_QUALITY,
    ):
        self.seed = seed
        self.quality = quality

    @property
    def seed(self) -> int:
        return self._seed

    @seed.setter
    def seed(self, value: int) -> None:
        seed = int(value)
        if not (-(2**31) <= seed < 2**31):
            raise ConfigurationError(f"seed must fit in a signed 32-bit int: {value}")
        self._seed = seed
        self._seed_changed()

    def _seed_changed(self) -> None:
        pass

    @property
    def quality(self) -> NoiseQuality:
        return self._quality

    @quality.setter
    def quality(self, value: NoiseQuality | str) -> None:
        self._quality = NoiseQuality.parse(value)
