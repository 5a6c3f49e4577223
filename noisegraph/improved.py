from __future__ import annotations

import numpy as np

from .core import (
    GRAD2_DIAG8,
    GRAD3_EDGES,
    GRAD4_EDGES,
    grad_from_hash,
    lattice_noise,
    make_int32_range,
    make_permutation,
)
from .module import PrimitiveModule

_GRADIENTS = {2: GRAD2_DIAG8, 3: GRAD3_EDGES, 4: GRAD4_EDGES}


class ImprovedPerlin(PrimitiveModule):
    """Improved Perlin gradient noise in 2, 3 or 4 dimensions.

    The lattice is hashed through a 256-entry permutation table derived from
    the seed, so the noise repeats every 256 units on each axis.
    """

    def _seed_changed(self) -> None:
        self._perm = make_permutation(self.seed)

    def evaluate(self, *coords: np.ndarray) -> np.ndarray:
        coords = [make_int32_range(c) for c in coords]
        table = _GRADIENTS[len(coords)]
        p = self._perm

        def corner(ints: list[np.ndarray], deltas: list[np.ndarray]) -> np.ndarray:
            h = p[ints[0] & 255]
            for i in ints[1:]:
                h = p[h + (i & 255)]
            g = grad_from_hash(h, table)
            return sum(g[..., axis] * d for axis, d in enumerate(deltas))

        return lattice_noise(coords, self.quality.curve, corner)
