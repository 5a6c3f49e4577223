import numpy as np
import pytest

from noisemap import NoiseMap
from noisegraph.errors import ConfigurationError


def test_new_map_is_zeroed_row_major():
    nm = NoiseMap(3, 2)
    assert nm.width == 3
    assert nm.height == 2
    assert nm.data.shape == (2, 3)
    assert np.all(nm.data == 0.0)


def test_empty_map():
    nm = NoiseMap()
    assert nm.width == 0
    assert nm.height == 0
    with pytest.raises(ValueError):
        nm.min_max()


def test_get_value_outside_returns_border():
    nm = NoiseMap(2, 2, border_value=-7.0)
    nm.set_value(1, 0, 0.5)
    assert nm.get_value(1, 0) == 0.5
    assert nm.get_value(2, 0) == -7.0
    assert nm.get_value(0, -1) == -7.0


def test_set_value_outside_raises():
    nm = NoiseMap(2, 2)
    with pytest.raises(IndexError):
        nm.set_value(5, 5, 1.0)


def test_set_row_and_min_max():
    nm = NoiseMap(3, 2)
    nm.set_row(1, np.array([-2.0, 0.5, 4.0]))
    assert nm.min_max() == (-2.0, 4.0)
    with pytest.raises(ValueError):
        nm.set_row(0, np.zeros(4))


def test_set_size_validates_and_resets():
    nm = NoiseMap(2, 2)
    nm.clear(3.0)
    nm.set_size(4, 1)
    assert nm.data.shape == (1, 4)
    assert np.all(nm.data == 0.0)
    with pytest.raises(ConfigurationError):
        nm.set_size(0, 4)
