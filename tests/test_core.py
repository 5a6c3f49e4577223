import numpy as np

from noisegraph.core import (
    GRAD4_EDGES,
    INT32_FOLD,
    cerp,
    lat_lon_to_xyz,
    lattice_noise,
    lerp,
    make_int32_range,
    make_permutation,
    scurve3,
    scurve5,
)


def test_scurve5_endpoints_and_midpoint():
    t = np.array([0.0, 0.5, 1.0], dtype=np.float64)
    out = scurve5(t)
    assert out[0] == 0.0
    assert out[1] == 0.5
    assert out[2] == 1.0


def test_scurves_are_monotonic():
    t = np.linspace(0.0, 1.0, 1001)
    assert np.all(np.diff(scurve3(t)) >= 0.0)
    assert np.all(np.diff(scurve5(t)) >= 0.0)


def test_lerp_basic():
    a = np.array([0.0, 10.0])
    b = np.array([10.0, 20.0])
    t = np.array([0.0, 0.5])
    out = lerp(a, b, t)
    assert np.allclose(out, np.array([0.0, 15.0]))


def test_cerp_hits_inner_points():
    n0, n1, n2, n3 = -3.0, 1.0, 2.0, 7.0
    assert np.isclose(cerp(n0, n1, n2, n3, 0.0), n1)
    assert np.isclose(cerp(n0, n1, n2, n3, 1.0), n2)


def test_int32_range_leaves_small_values_alone():
    v = np.array([-1000.5, 0.0, 3.25, INT32_FOLD - 1.0])
    assert np.array_equal(make_int32_range(v), v)


def test_int32_range_folds_large_values_idempotently():
    v = np.array([1e12, -3.5e11, 2.0**40 + 0.25, -(2.0**31) - 7.0])
    once = make_int32_range(v)
    assert np.all(np.abs(once) <= INT32_FOLD)
    assert np.array_equal(make_int32_range(once), once)


def test_int32_range_keeps_fraction():
    v = np.array([2.0**33 + 0.375])
    out = make_int32_range(v)
    assert np.isclose(out[0] - np.floor(out[0]), 0.375)


def test_make_permutation_is_deterministic_and_doubled():
    p = make_permutation(42)
    assert p.shape == (512,)
    assert np.array_equal(np.sort(p[:256]), np.arange(256))
    assert np.array_equal(p[:256], p[256:])
    assert np.array_equal(p, make_permutation(42))
    assert not np.array_equal(p, make_permutation(43))


def test_make_permutation_accepts_negative_seed():
    p = make_permutation(-(2**31))
    assert np.array_equal(np.sort(p[:256]), np.arange(256))


def test_lat_lon_to_xyz_known_points():
    x, y, z = lat_lon_to_xyz(np.array([0.0, 90.0, 0.0]), np.array([0.0, 0.0, 90.0]))
    assert np.allclose(x, [1.0, 0.0, 0.0], atol=1e-12)
    assert np.allclose(y, [0.0, 1.0, 0.0], atol=1e-12)
    assert np.allclose(z, [0.0, 0.0, 1.0], atol=1e-12)


def test_lat_lon_to_xyz_unit_length():
    rng = np.random.default_rng(0)
    lat = rng.uniform(-90.0, 90.0, 100)
    lon = rng.uniform(-180.0, 180.0, 100)
    x, y, z = lat_lon_to_xyz(lat, lon)
    assert np.allclose(x * x + y * y + z * z, 1.0)


def test_grad4_edges_shape():
    assert GRAD4_EDGES.shape == (32, 4)
    assert np.all(np.sum(GRAD4_EDGES == 0.0, axis=1) == 1)


def test_lattice_noise_constant_corners():
    coords = [np.array([0.3, 5.7]), np.array([-2.2, 1.5])]
    out = lattice_noise(coords, scurve3, lambda ints, deltas: np.full(np.shape(ints[0]), 0.25))
    assert np.allclose(out, 0.25)


def test_lattice_noise_linear_curve_interpolates_x():
    coords = [np.array([0.25, 0.75]), np.array([0.0, 0.0])]
    out = lattice_noise(
        coords,
        lambda t: t,
        lambda ints, deltas: ints[0].astype(np.float64),
    )
    assert np.allclose(out, [0.25, 0.75])
