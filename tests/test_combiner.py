import numpy as np
import pytest

from noisegraph import (
    Add,
    Blend,
    Constant,
    Cylinders,
    ImprovedPerlin,
    LinearGradient,
    Max,
    Min,
    Multiply,
    Power,
    Select,
)
from noisegraph.errors import ConfigurationError, UnboundModuleError


def test_blend_midpoint():
    blend = Blend(Constant(1.0), Constant(-1.0), Constant(0.5))
    assert float(blend.sample(0.0, 0.0, 0.0)) == 0.0


def test_blend_control_is_clamped():
    a, b = Constant(1.0), Constant(-1.0)
    assert np.isclose(Blend(a, b, Constant(0.0)).sample(0.0, 0.0), 1.0)
    assert np.isclose(Blend(a, b, Constant(5.0)).sample(0.0, 0.0), -1.0)
    assert np.isclose(Blend(a, b, Constant(-3.0)).sample(0.0, 0.0), 1.0)


def test_blend_requires_control():
    with pytest.raises(UnboundModuleError):
        Blend(Constant(1.0), Constant(0.0)).sample(0.0, 0.0)


def _select(**kwargs) -> Select:
    return Select(Constant(0.0), Constant(1.0), LinearGradient((1.0, 0.0, 0.0)), **kwargs)


def test_select_without_falloff():
    sel = _select(lower=-0.5, upper=0.5)
    x = np.array([-1.0, -0.5, 0.0, 0.5, 0.9])
    assert np.array_equal(sel.sample(x, 0.0, 0.0), [0.0, 1.0, 1.0, 1.0, 0.0])


def test_select_with_falloff():
    sel = _select(lower=-0.5, upper=0.5, edge_falloff=0.25)
    x = np.array([-1.0, -0.5, 0.0, 0.5, 1.0])
    assert np.allclose(sel.sample(x, 0.0, 0.0), [0.0, 0.5, 1.0, 0.5, 0.0])
    # Smooth inside the band.
    band = sel.sample(np.linspace(-0.75, -0.25, 21), 0.0, 0.0)
    assert np.all(np.diff(band) >= 0.0)


def test_select_falloff_limited_to_half_range():
    sel = _select(lower=0.0, upper=0.2, edge_falloff=1.0)
    assert np.isclose(sel.edge_falloff, 0.1)
    sel.set_bounds(0.0, 0.1)
    assert np.isclose(sel.edge_falloff, 0.05)


def test_select_bounds_must_be_ordered():
    with pytest.raises(ConfigurationError):
        _select(lower=1.0, upper=1.0)
    with pytest.raises(ConfigurationError):
        _select(edge_falloff=-0.1)


def test_arithmetic_combiners():
    two, three = Constant(2.0), Constant(3.0)
    assert np.isclose(Add(two, three).sample(0.0, 0.0), 5.0)
    assert np.isclose(Multiply(two, three).sample(0.0, 0.0), 6.0)
    assert np.isclose(Min(two, three).sample(0.0, 0.0), 2.0)
    assert np.isclose(Max(two, three).sample(0.0, 0.0), 3.0)
    assert np.isclose(Power(two, three).sample(0.0, 0.0), 8.0)


def test_combiner_capability_is_intersection():
    assert Add(ImprovedPerlin(), Cylinders()).dimensions == frozenset({3})
