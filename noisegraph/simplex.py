from __future__ import annotations

import math

import numpy as np

from .core import (
    GRAD3_EDGES,
    GRAD4_EDGES,
    grad_from_hash,
    make_int32_range,
    make_permutation,
)
from .module import PrimitiveModule

_GRADIENTS = {2: GRAD3_EDGES[:, :2], 3: GRAD3_EDGES, 4: GRAD4_EDGES}
_SKEW = {n: (math.sqrt(n + 1.0) - 1.0) / n for n in (2, 3, 4)}
_UNSKEW = {n: (1.0 - 1.0 / math.sqrt(n + 1.0)) / n for n in (2, 3, 4)}
_RADIUS2 = {2: 0.5, 3: 0.6, 4: 0.6}
# Brings the summed kernels back to roughly [-1, 1].
_SCALE = {2: 70.0, 3: 32.0, 4: 27.0}


class SimplexPerlin(PrimitiveModule):
    """Simplex noise (Gustavson's formulation) in 2, 3 or 4 dimensions.

    Quality has no effect: the radial kernel is already smooth.
    """

    def _seed_changed(self) -> None:
        self._perm = make_permutation(self.seed)

    def evaluate(self, *coords: np.ndarray) -> np.ndarray:
        n = len(coords)
        skew = _SKEW[n]
        unskew = _UNSKEW[n]
        table = _GRADIENTS[n]
        p = self._perm

        # Fold in skewed space, where a 2**31 shift is a whole number of cells.
        s = sum(coords) * skew
        skewed = [make_int32_range(c + s) for c in coords]
        cells = [np.floor(u).astype(np.int64) for u in skewed]
        frac = [u - i for u, i in zip(skewed, cells)]
        t = sum(frac) * unskew
        x0 = [f - t for f in frac]

        # Rank of each axis by the magnitude of its offset picks the simplex.
        rank = [np.zeros(np.shape(x0[0]), dtype=np.int64) for _ in range(n)]
        for j in range(n):
            for k in range(j + 1, n):
                bigger = x0[j] > x0[k]
                rank[j] += bigger
                rank[k] += ~bigger

        total = np.zeros(np.shape(x0[0]), dtype=np.float64)
        for vertex in range(n + 1):
            offsets = [(r >= n - vertex).astype(np.int64) for r in rank]
            xs = [x - o + vertex * unskew for x, o in zip(x0, offsets)]
            ints = [(i + o) & 255 for i, o in zip(cells, offsets)]

            h = p[ints[-1]]
            for i in reversed(ints[:-1]):
                h = p[i + h]
            g = grad_from_hash(h, table)
            dot = sum(g[..., axis] * x for axis, x in enumerate(xs))

            r = np.maximum(_RADIUS2[n] - sum(x * x for x in xs), 0.0)
            r *= r
            total = total + r * r * dot

        return total * _SCALE[n]
