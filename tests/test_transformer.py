import numpy as np
import pytest

from noisegraph import (
    Constant,
    Displace,
    ImprovedPerlin,
    LinearGradient,
    RotatePoint,
    ScalePoint,
    SumFractal,
    TranslatePoint,
    Turbulence,
)
from noisegraph.errors import ConfigurationError, ModuleLockedError, UnboundModuleError


def _points(n: int = 500) -> list[np.ndarray]:
    rng = np.random.default_rng(5)
    return list(rng.uniform(-4.0, 4.0, size=(3, n)))


def test_turbulence_with_zero_power_is_identity():
    src = SumFractal(ImprovedPerlin(seed=8))
    turb = Turbulence.from_perlin(src, power=0.0, seed=3)
    pts = _points()
    assert np.array_equal(turb.sample(*pts), src.sample(*pts))


def test_turbulence_displaces_input():
    src = ImprovedPerlin(seed=8)
    turb = Turbulence.from_perlin(src, power=0.5, frequency=2.0)
    pts = _points()
    assert not np.allclose(turb.sample(*pts), src.sample(*pts))


def test_turbulence_distorters_use_consecutive_seeds():
    turb = Turbulence.from_perlin(ImprovedPerlin(), seed=10, roughness=2)
    seeds = [turb.x_distort.source.seed, turb.y_distort.source.seed, turb.z_distort.source.seed]
    assert seeds == [10, 11, 12]
    assert turb.x_distort.octave_count == 2


def test_turbulence_requires_all_inputs():
    turb = Turbulence(ImprovedPerlin(), ImprovedPerlin(), ImprovedPerlin())
    with pytest.raises(UnboundModuleError):
        turb.sample(0.0, 0.0, 0.0)


def test_displace_adds_offsets():
    src = LinearGradient((1.0, 1.0, 1.0))
    d = Displace(src, Constant(1.0), Constant(0.0), Constant(-2.0))
    assert np.isclose(d.sample(0.5, 0.5, 0.5), 1.5 + 0.5 - 1.5)


def test_scale_point():
    src = ImprovedPerlin()
    pts = _points()
    scaled = ScalePoint(src, (2.0, 1.0, 0.5))
    assert np.allclose(scaled.sample(*pts), src.sample(pts[0] * 2.0, pts[1], pts[2] * 0.5))
    assert ScalePoint(src, 3.0).scale == (3.0, 3.0, 3.0, 3.0)


def test_translate_point():
    src = ImprovedPerlin()
    pts = _points()
    moved = TranslatePoint(src, (1.0, -2.0))
    assert np.allclose(moved.sample(*pts), src.sample(pts[0] + 1.0, pts[1] - 2.0, pts[2]))
    with pytest.raises(ConfigurationError):
        TranslatePoint(src, (1.0, 2.0, 3.0, 4.0, 5.0))


def test_rotate_point_identity_and_quarter_turn():
    src = LinearGradient((1.0, 0.0, 0.0))
    assert np.isclose(RotatePoint(src).sample(0.3, 0.7, 0.1), 0.3)
    assert np.isclose(RotatePoint(src, z_angle=90.0).sample(0.3, 0.7, 0.1), 0.7)


def test_rotate_point_locked():
    r = RotatePoint(ImprovedPerlin(), x_angle=10.0)
    with r.locked():
        with pytest.raises(ModuleLockedError):
            r.set_angles(1.0, 2.0, 3.0)
    r.set_angles(1.0, 2.0, 3.0)
    assert r.angles == (1.0, 2.0, 3.0)
