from __future__ import annotations

import numpy as np

from .core import RANDOM_VECTORS3, lattice_noise, make_int32_range
from .module import PrimitiveModule

X_NOISE_GEN = 1619
Y_NOISE_GEN = 31337
Z_NOISE_GEN = 6971
SEED_NOISE_GEN = 1013
SHIFT_NOISE_GEN = 8


def lattice_hash(
    ix: np.ndarray, iy: np.ndarray, iz: np.ndarray, seed: int
) -> np.ndarray:
    """Low 32 bits of the libnoise lattice hash, as a non-negative int64."""
    return (
        X_NOISE_GEN * np.asarray(ix, dtype=np.int64)
        + Y_NOISE_GEN * np.asarray(iy, dtype=np.int64)
        + Z_NOISE_GEN * np.asarray(iz, dtype=np.int64)
        + SEED_NOISE_GEN * int(seed)
    ) & 0xFFFFFFFF


def int_value_noise3(
    ix: np.ndarray, iy: np.ndarray, iz: np.ndarray, seed: int
) -> np.ndarray:
    """Integer lattice noise in [0, 2**31 - 1]."""
    h = lattice_hash(ix, iy, iz, seed) & 0x7FFFFFFF
    shape = np.shape(h)
    # uint64 arrays wrap silently; only the low 31 bits are kept.
    n = np.atleast_1d(h).astype(np.uint64)
    n = (n >> np.uint64(13)) ^ n
    n = (
        n * (n * n * np.uint64(60493) + np.uint64(19990303)) + np.uint64(1376312589)
    ) & np.uint64(0x7FFFFFFF)
    return n.astype(np.int64).reshape(shape)


def value_noise3(
    ix: np.ndarray, iy: np.ndarray, iz: np.ndarray, seed: int
) -> np.ndarray:
    """Lattice noise in [-1, 1]."""
    return 1.0 - int_value_noise3(ix, iy, iz, seed) / 1073741824.0


class BevinsGradient(PrimitiveModule):
    """libnoise gradient coherent noise (integer lattice hash, 3D only)."""

    SUPPORTED = frozenset({3})

    def evaluate(self, *coords: np.ndarray) -> np.ndarray:
        seed = self.seed

        def corner(ints: list[np.ndarray], deltas: list[np.ndarray]) -> np.ndarray:
            idx = lattice_hash(ints[0], ints[1], ints[2], seed)
            idx = (idx ^ (idx >> SHIFT_NOISE_GEN)) & 0xFF
            v = RANDOM_VECTORS3[idx]
            return (
                v[..., 0] * deltas[0] + v[..., 1] * deltas[1] + v[..., 2] * deltas[2]
            ) * 2.12

        return lattice_noise(
            [make_int32_range(c) for c in coords], self.quality.curve, corner
        )


class BevinsValue(PrimitiveModule):
    """libnoise value coherent noise (integer lattice hash, 3D only)."""

    SUPPORTED = frozenset({3})

    def evaluate(self, *coords: np.ndarray) -> np.ndarray:
        seed = self.seed

        def corner(ints: list[np.ndarray], deltas: list[np.ndarray]) -> np.ndarray:
            return value_noise3(ints[0], ints[1], ints[2], seed)

        return lattice_noise(
            [make_int32_range(c) for c in coords], self.quality.curve, corner
        )
