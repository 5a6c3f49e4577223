from __future__ import annotations

import numpy as np

from .bevins import int_value_noise3, value_noise3
from .core import SQRT_3, make_int32_range
from .module import NoiseQuality, PrimitiveModule


class Voronoi(PrimitiveModule):
    """Voronoi cells around one jittered seed point per unit cube.

    Each point takes the pseudo-random value of the cell whose seed point is
    nearest, scaled by `displacement`. With `enable_distance` the distance to
    that seed point is added, which brightens the cell boundaries.
    """

    SUPPORTED = frozenset({3})

    DEFAULT_FREQUENCY = 1.0
    DEFAULT_DISPLACEMENT = 1.0

    def __init__(
        self,
        *,
        frequency: float = DEFAULT_FREQUENCY,
        displacement: float = DEFAULT_DISPLACEMENT,
        enable_distance: bool = False,
        seed: int = PrimitiveModule.DEFAULT_SEED,
        quality: NoiseQuality | str = PrimitiveModule.DEFAULT_QUALITY,
    ):
        super().__init__(seed=seed, quality=quality)
        self.frequency = float(frequency)
        self.displacement = float(displacement)
        self.enable_distance = bool(enable_distance)

    def evaluate(self, x: np.ndarray, y: np.ndarray, z: np.ndarray) -> np.ndarray:
        x = make_int32_range(x * self.frequency)
        y = make_int32_range(y * self.frequency)
        z = make_int32_range(z * self.frequency)
        seed = self.seed

        ix = np.floor(x).astype(np.int64)
        iy = np.floor(y).astype(np.int64)
        iz = np.floor(z).astype(np.int64)

        min_dist = np.full(np.shape(x), np.inf)
        cand_x = np.zeros(np.shape(x))
        cand_y = np.zeros(np.shape(x))
        cand_z = np.zeros(np.shape(x))

        for dz in (-1, 0, 1):
            for dy in (-1, 0, 1):
                for dx in (-1, 0, 1):
                    cx = ix + dx
                    cy = iy + dy
                    cz = iz + dz
                    # Seed point jittered inside [0, 1) of its own cube.
                    px = cx + int_value_noise3(cx, cy, cz, seed) / 2147483648.0
                    py = cy + int_value_noise3(cx, cy, cz, seed + 1) / 2147483648.0
                    pz = cz + int_value_noise3(cx, cy, cz, seed + 2) / 2147483648.0

                    dist = (px - x) ** 2 + (py - y) ** 2 + (pz - z) ** 2
                    closer = dist < min_dist
                    min_dist = np.where(closer, dist, min_dist)
                    cand_x = np.where(closer, px, cand_x)
                    cand_y = np.where(closer, py, cand_y)
                    cand_z = np.where(closer, pz, cand_z)

        value = np.zeros(np.shape(x))
        if self.enable_distance:
            value = np.sqrt(min_dist) * SQRT_3 - 1.0

        cell_value = value_noise3(
            np.floor(cand_x).astype(np.int64),
            np.floor(cand_y).astype(np.int64),
            np.floor(cand_z).astype(np.int64),
            seed,
        )
        return value + self.displacement * cell_value
