import numpy as np
import pytest

from noisegraph import (
    Billow,
    Constant,
    HeterogeneousMultiFractal,
    HybridMultiFractal,
    ImprovedPerlin,
    MultiFractal,
    Pipe,
    RidgedMultiFractal,
    SinFractal,
    SumFractal,
)
from noisegraph.errors import ConfigurationError, ModuleLockedError

FILTERS = [
    Pipe,
    SumFractal,
    Billow,
    SinFractal,
    MultiFractal,
    HeterogeneousMultiFractal,
    HybridMultiFractal,
    RidgedMultiFractal,
]


def _points(n: int = 1000) -> list[np.ndarray]:
    rng = np.random.default_rng(99)
    return list(rng.uniform(-10.0, 10.0, size=(3, n)))


def test_sum_fractal_single_octave_is_one_scaled_sample():
    src = ImprovedPerlin(seed=4)
    x, y, z = _points()
    fbm = SumFractal(src, frequency=2.5, octave_count=1)
    assert np.allclose(fbm.sample(x, y, z), src.sample(x * 2.5, y * 2.5, z * 2.5))


def test_pipe_matches_single_octave_sum():
    src = ImprovedPerlin(seed=4)
    pts = _points()
    assert np.allclose(
        Pipe(src, frequency=3.0).sample(*pts),
        SumFractal(src, frequency=3.0, octave_count=1).sample(*pts),
    )


def test_fractional_octave_blends_next_octave():
    src = ImprovedPerlin(seed=1)
    pts = _points()
    two = SumFractal(src, octave_count=2).sample(*pts)
    three = SumFractal(src, octave_count=3).sample(*pts)
    half = SumFractal(src, octave_count=2.5).sample(*pts)
    assert np.allclose(half, two + 0.5 * (three - two))


@pytest.mark.parametrize("octaves", [0, 0.5, 31, 100])
def test_octave_count_bounds(octaves):
    with pytest.raises(ConfigurationError):
        SumFractal(ImprovedPerlin(), octave_count=octaves)


def test_octave_count_upper_limit_is_accepted():
    f = SumFractal(ImprovedPerlin(), octave_count=30)
    assert f.octave_count == 30.0
    assert len(f.spectral_weights) == 31


def test_weight_tables_follow_parameter_changes():
    f = SumFractal(ImprovedPerlin(), octave_count=3)
    assert len(f.amplitudes) == 4
    assert np.isclose(f.spectral_weights[1], 2.0**-0.9)

    f.lacunarity = 3.0
    assert np.isclose(f.spectral_weights[1], 3.0**-0.9)
    f.spectral_exponent = 1.0
    assert np.isclose(f.spectral_weights[2], 1.0 / 9.0)
    f.persistence = 0.25
    assert np.isclose(f.amplitudes[2], 0.0625)
    f.octave_count = 8
    assert len(f.spectral_weights) == 9
    assert len(f.amplitudes) == 9


def test_filter_parameters_locked_during_pass():
    f = RidgedMultiFractal(ImprovedPerlin())
    with f.locked():
        with pytest.raises(ModuleLockedError):
            f.lacunarity = 2.5
        with pytest.raises(ModuleLockedError):
            f.octave_count = 3


@pytest.mark.parametrize("cls", FILTERS)
def test_filters_are_finite_and_deterministic(cls):
    pts = _points()
    a = cls(ImprovedPerlin(seed=2)).sample(*pts)
    b = cls(ImprovedPerlin(seed=2)).sample(*pts)
    assert np.all(np.isfinite(a))
    assert np.array_equal(a, b)
    assert float(np.std(a)) > 0.0


@pytest.mark.parametrize("cls", FILTERS)
def test_filters_work_in_2d_and_4d(cls):
    f = cls(ImprovedPerlin())
    assert f.sample2d(np.array([0.1, 0.2]), 0.3).shape == (2,)
    assert f.sample4d(0.1, 0.2, 0.3, 0.4).shape == ()


def test_billow_scale_and_bias():
    f = Billow(Constant(1.0), octave_count=2, scale=2.0, bias=-0.2)
    # (2|1| - 1) * (1 + 0.5) = 1.5
    assert np.isclose(f.sample(0.0, 0.0, 0.0), 1.5 * 2.0 - 0.2)


def test_sin_fractal_of_zero_source_is_plain_sine():
    f = SinFractal(Constant(0.0), frequency=2.0)
    x = np.linspace(-3.0, 3.0, 11)
    assert np.allclose(f.sample(x, 0.0, 0.0), np.sin(2.0 * x))


def test_multi_fractal_of_zero_source_is_one():
    f = MultiFractal(Constant(0.0))
    assert np.allclose(f.sample(*_points(10)), 1.0)


def test_hetero_of_zero_source_compounds_weights():
    f = HeterogeneousMultiFractal(Constant(0.0), octave_count=6)
    w = f.spectral_weights
    assert np.isclose(f.sample(0.5, 0.5, 0.5), np.prod(1.0 + w[1:6]))


def test_ridged_of_flat_sources():
    zero = RidgedMultiFractal(Constant(0.0), octave_count=6)
    assert np.isclose(zero.sample(0.5, 0.5, 0.5), np.sum(zero.spectral_weights[:6]))
    one = RidgedMultiFractal(Constant(1.0))
    assert np.isclose(one.sample(0.5, 0.5, 0.5), 0.0)


def test_hybrid_stops_when_weight_vanishes():
    # offset + source == 0 makes the first weight 0, so only octave 0 counts.
    f = HybridMultiFractal(Constant(-1.0), offset=1.0)
    assert np.isclose(f.sample(0.1, 0.2, 0.3), 0.0)
