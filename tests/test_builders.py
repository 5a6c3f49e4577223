import numpy as np
import pytest

from noisegraph import (
    Constant,
    ImprovedPerlin,
    LinearGradient,
    Module,
    NoiseQuality,
    SumFractal,
)
from noisegraph.errors import (
    ConfigurationError,
    ModuleLockedError,
    UnboundModuleError,
    UnsupportedDimensionError,
)
from noisemap import (
    BuilderState,
    NoiseMap,
    NoiseMapBuilderCylinder,
    NoiseMapBuilderPlane,
    NoiseMapBuilderSphere,
)


class _Flat2D(Module):
    SUPPORTED = frozenset({2})

    def evaluate(self, x, y):
        return np.zeros(np.shape(x))


def _plane(source, size=(16, 16), **kwargs) -> NoiseMapBuilderPlane:
    builder = NoiseMapBuilderPlane(0.0, 4.0, 0.0, 4.0, **kwargs)
    builder.set_size(*size)
    builder.set_source(source)
    builder.set_output(NoiseMap())
    return builder


def test_plane_build_samples_the_y0_plane():
    src = ImprovedPerlin(seed=2)
    builder = _plane(src, size=(16, 8))
    nm = builder.build()
    assert nm is builder.noise_map
    assert nm.data.shape == (8, 16)
    # Cell (col 5, row 3) sits at x = 5 * 4/16, z = 3 * 4/8.
    assert np.isclose(nm.get_value(5, 3), float(src.sample(1.25, 0.0, 1.5)))
    assert builder.state is BuilderState.BUILT


def test_progress_callback_sees_every_row_in_order():
    rows = []
    builder = _plane(ImprovedPerlin(), size=(8, 13))
    builder.set_progress_callback(rows.append)
    builder.build()
    assert rows == list(range(13))


def test_seamless_plane_edges_match():
    builder = _plane(SumFractal(ImprovedPerlin(seed=9)), size=(32, 24), seamless=True)
    rows = np.arange(24)
    cols = np.arange(32)
    assert np.allclose(builder.sample_cells(0, rows), builder.sample_cells(32, rows))
    assert np.allclose(builder.sample_cells(cols, 0), builder.sample_cells(cols, 24))


def test_sample_cells_matches_build():
    builder = _plane(ImprovedPerlin(seed=9), size=(10, 6), seamless=True)
    nm = builder.build()
    assert np.allclose(nm.data[4], builder.sample_cells(np.arange(10), 4))


def test_plane_build_is_bit_reproducible():
    def build() -> np.ndarray:
        src = ImprovedPerlin(seed=0, quality=NoiseQuality.STANDARD)
        return _plane(src, size=(128, 128)).build().data.copy()

    first = build()
    assert np.array_equal(first, build())
    assert np.all(np.isfinite(first))


def test_rebuild_overwrites_previous_map():
    src = ImprovedPerlin(seed=0)
    builder = _plane(src)
    first = builder.build().data.copy()
    src.seed = 1
    second = builder.build().data.copy()
    assert not np.array_equal(first, second)
    assert np.array_equal(second, _plane(ImprovedPerlin(seed=1)).build().data)


def test_sphere_rows_run_south_to_north():
    builder = NoiseMapBuilderSphere(-90.0, 90.0, -180.0, 180.0)
    builder.set_size(8, 6)
    builder.set_source(LinearGradient((0.0, 1.0, 0.0)))
    builder.set_output(NoiseMap())
    nm = builder.build()
    lat = np.deg2rad(-90.0 + np.arange(6) * 30.0)
    assert np.allclose(nm.data[:, 3], np.sin(lat))


def test_sphere_bounds_are_validated():
    with pytest.raises(ConfigurationError):
        NoiseMapBuilderSphere(-100.0, 90.0, -180.0, 180.0)
    with pytest.raises(ConfigurationError):
        NoiseMapBuilderSphere(-90.0, 90.0, 0.0, 200.0)
    with pytest.raises(ConfigurationError):
        NoiseMapBuilderSphere(10.0, 10.0, -180.0, 180.0)


def test_cylinder_rows_follow_height_and_columns_wrap_angle():
    builder = NoiseMapBuilderCylinder(-180.0, 180.0, -10.0, 10.0)
    builder.set_size(4, 5)
    builder.set_source(LinearGradient((0.0, 1.0, 0.0)))
    builder.set_output(NoiseMap())
    nm = builder.build()
    assert np.allclose(nm.data[:, 0], [-10.0, -6.0, -2.0, 2.0, 6.0])

    builder.set_source(LinearGradient((1.0, 0.0, 0.0)))
    nm = builder.build()
    # Column 0 is at -180 degrees, column 2 at 0 degrees.
    assert np.allclose(nm.data[0, [0, 2]], [-1.0, 1.0])


def test_invalid_configuration():
    with pytest.raises(ConfigurationError):
        NoiseMapBuilderPlane(1.0, 0.0, 0.0, 1.0)
    with pytest.raises(ConfigurationError):
        NoiseMapBuilderCylinder(0.0, 90.0, 1.0, 1.0)
    with pytest.raises(ConfigurationError):
        NoiseMapBuilderPlane().set_size(0, 10)

    builder = NoiseMapBuilderPlane()
    builder.set_source(Constant(1.0))
    builder.set_output(NoiseMap())
    with pytest.raises(ConfigurationError):
        builder.build()


def test_missing_source_or_output():
    builder = NoiseMapBuilderPlane()
    builder.set_size(4, 4)
    builder.set_output(NoiseMap())
    with pytest.raises(UnboundModuleError):
        builder.build()

    builder = NoiseMapBuilderPlane()
    builder.set_size(4, 4)
    builder.set_source(Constant(1.0))
    with pytest.raises(UnboundModuleError):
        builder.build()


def test_source_must_support_3d():
    builder = _plane(_Flat2D())
    with pytest.raises(UnsupportedDimensionError):
        builder.build()


def test_modules_are_locked_during_build():
    src = ImprovedPerlin(seed=0)
    builder = _plane(src, size=(4, 4))

    def mutate(row: int) -> None:
        src.seed = 123

    builder.set_progress_callback(mutate)
    with pytest.raises(ModuleLockedError):
        builder.build()
    assert builder.state is BuilderState.CONFIGURED
    src.seed = 123
    assert src.seed == 123


def test_builder_cannot_be_reconfigured_while_building():
    builder = _plane(ImprovedPerlin(), size=(4, 4))
    builder.set_progress_callback(lambda row: builder.set_size(2, 2))
    with pytest.raises(ModuleLockedError):
        builder.build()
    assert builder.width == 4


def test_callback_error_stops_the_build():
    seen = []

    def stop(row: int) -> None:
        seen.append(row)
        raise RuntimeError("cancelled")

    builder = _plane(ImprovedPerlin(), size=(4, 4))
    builder.set_progress_callback(stop)
    with pytest.raises(RuntimeError, match="cancelled"):
        builder.build()
    assert seen == [0]
    assert builder.state is BuilderState.CONFIGURED
