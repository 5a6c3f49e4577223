from __future__ import annotations

from typing import Callable, Sequence

import numpy as np

# Coordinates at or beyond +/-2**30 are folded back by IEEE remainder over
# 2**31, a multiple of every lattice period used here.
INT32_FOLD = 1073741824.0

SQRT_3 = 1.7320508075688772935


def scurve3(t: np.ndarray) -> np.ndarray:
    """Cubic S-curve, zero first derivative at 0 and 1."""
    return t * t * (3.0 - 2.0 * t)


def scurve5(t: np.ndarray) -> np.ndarray:
    """Quintic fade curve used by Improved Perlin Noise (2002)."""
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


def lerp(a: np.ndarray, b: np.ndarray, t: np.ndarray) -> np.ndarray:
    return a + t * (b - a)


def cerp(
    n0: np.ndarray, n1: np.ndarray, n2: np.ndarray, n3: np.ndarray, a: np.ndarray
) -> np.ndarray:
    """Cubic interpolation between n1 and n2, shaped by n0 and n3."""
    p = (n3 - n2) - (n0 - n1)
    q = (n0 - n1) - p
    r = n2 - n0
    return p * a * a * a + q * a * a + r * a + n1


def make_int32_range(value: np.ndarray) -> np.ndarray:
    v = np.asarray(value, dtype=np.float64)
    period = 2.0 * INT32_FOLD
    folded = np.fmod(v, period)
    folded = np.where(folded > INT32_FOLD, folded - period, folded)
    folded = np.where(folded < -INT32_FOLD, folded + period, folded)
    return np.where(np.abs(v) >= INT32_FOLD, folded, v)


def make_permutation(seed: int) -> np.ndarray:
    rng = np.random.default_rng(int(seed) & 0xFFFFFFFF)
    p = rng.permutation(256).astype(np.int64)
    return np.concatenate([p, p])


def lat_lon_to_xyz(
    lat: np.ndarray, lon: np.ndarray
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Latitude/longitude in degrees to a point on the unit sphere."""
    lat = np.deg2rad(np.asarray(lat, dtype=np.float64))
    lon = np.deg2rad(np.asarray(lon, dtype=np.float64))
    r = np.cos(lat)
    return r * np.cos(lon), np.sin(lat), r * np.sin(lon)


GRAD2_DIAG8 = np.array(
    [
        [1.0, 0.0],
        [-1.0, 0.0],
        [0.0, 1.0],
        [0.0, -1.0],
        [1.0, 1.0],
        [-1.0, 1.0],
        [1.0, -1.0],
        [-1.0, -1.0],
    ],
    dtype=np.float64,
)
GRAD2_DIAG8 /= np.linalg.norm(GRAD2_DIAG8, axis=1, keepdims=True)

GRAD3_EDGES = np.array(
    [
        [1.0, 1.0, 0.0],
        [-1.0, 1.0, 0.0],
        [1.0, -1.0, 0.0],
        [-1.0, -1.0, 0.0],
        [1.0, 0.0, 1.0],
        [-1.0, 0.0, 1.0],
        [1.0, 0.0, -1.0],
        [-1.0, 0.0, -1.0],
        [0.0, 1.0, 1.0],
        [0.0, -1.0, 1.0],
        [0.0, 1.0, -1.0],
        [0.0, -1.0, -1.0],
    ],
    dtype=np.float64,
)

# Midpoints of the 32 edges of the 4D hypercube.
GRAD4_EDGES = np.array(
    [
        [0.0 if axis == zero else sign[axis - (axis > zero)] for axis in range(4)]
        for zero in range(4)
        for sign in [
            (sx, sy, sz)
            for sx in (1.0, -1.0)
            for sy in (1.0, -1.0)
            for sz in (1.0, -1.0)
        ]
    ],
    dtype=np.float64,
)


def _fibonacci_sphere(count: int) -> np.ndarray:
    i = np.arange(count, dtype=np.float64) + 0.5
    phi = np.arccos(1.0 - 2.0 * i / count)
    theta = np.pi * (1.0 + 5.0**0.5) * i
    return np.stack(
        [np.cos(theta) * np.sin(phi), np.sin(theta) * np.sin(phi), np.cos(phi)],
        axis=1,
    )


# Unit vectors indexed by the low byte of the integer lattice hash.
RANDOM_VECTORS3 = _fibonacci_sphere(256)


def grad_from_hash(h: np.ndarray, table: np.ndarray) -> np.ndarray:
    n = int(table.shape[0])
    return table[np.asarray(h, dtype=np.int64) % n]


def lattice_noise(
    coords: Sequence[np.ndarray],
    curve: Callable[[np.ndarray], np.ndarray],
    corner: Callable[[list[np.ndarray], list[np.ndarray]], np.ndarray],
) -> np.ndarray:
    """Interpolate per-corner values over the unit lattice cell of each point.

    `corner(ints, deltas)` receives the integer corner coordinates and the
    offsets from that corner to the point, one array per axis. Corners are
    visited with axis 0 as the least significant bit so that neighbouring
    pairs collapse along x first.
    """

    floors = [np.floor(c) for c in coords]
    deltas = [c - f for c, f in zip(coords, floors)]
    cells = [f.astype(np.int64) for f in floors]
    ndim = len(cells)

    values = []
    for index in range(1 << ndim):
        bits = [(index >> axis) & 1 for axis in range(ndim)]
        values.append(
            corner(
                [c + b for c, b in zip(cells, bits)],
                [d - b for d, b in zip(deltas, bits)],
            )
        )

    for d in deltas:
        w = curve(d)
        values = [lerp(values[i], values[i + 1], w) for i in range(0, len(values), 2)]
    return values[0]
