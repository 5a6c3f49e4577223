"""Noise-map builders: project a 2D grid onto a module's 3D input space.

A builder walks the grid row by row (row 0 first, columns left to right),
samples the source module for each cell and stores the value in its
`NoiseMap`. After each row the optional progress callback receives the row
index. The callback runs on the calling thread and may take any amount of
time; if it raises, the build stops and the exception propagates.

The module tree is locked for the duration of a build, and the builder's own
setters refuse to run while it is building.
"""

from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Callable

import numpy as np

from noisegraph.core import lat_lon_to_xyz, lerp
from noisegraph.errors import (
    ConfigurationError,
    ModuleLockedError,
    UnboundModuleError,
)
from noisegraph.module import Module

from .noise_map import NoiseMap

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int], None]


class BuilderState(Enum):
    CONFIGURED = "configured"
    BUILDING = "building"
    BUILT = "built"


class NoiseMapBuilder:
    def __init__(self) -> None:
        self._width = 0
        self._height = 0
        self._source: Module | None = None
        self._noise_map: NoiseMap | None = None
        self._callback: ProgressCallback | None = None
        self._state = BuilderState.CONFIGURED

    @property
    def state(self) -> BuilderState:
        return self._state

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def source(self) -> Module | None:
        return self._source

    @property
    def noise_map(self) -> NoiseMap | None:
        return self._noise_map

    def _configure(self) -> None:
        if self._state is BuilderState.BUILDING:
            raise ModuleLockedError(
                f"{type(self).__name__} cannot be reconfigured while building"
            )
        self._state = BuilderState.CONFIGURED

    def set_size(self, width: int, height: int) -> None:
        width = int(width)
        height = int(height)
        if width <= 0 or height <= 0:
            raise ConfigurationError("width and height must be > 0")
        self._configure()
        self._width = width
        self._height = height

    def set_source(self, module: Module) -> None:
        self._configure()
        self._source = module

    def set_output(self, noise_map: NoiseMap) -> None:
        self._configure()
        self._noise_map = noise_map

    def set_progress_callback(self, callback: ProgressCallback | None) -> None:
        self._configure()
        self._callback = callback

    def _check_bounds(self) -> None:
        raise NotImplementedError

    def _sample_cells(self, cols: np.ndarray, rows: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    def _validate(self) -> None:
        if self._width <= 0 or self._height <= 0:
            raise ConfigurationError("output size is not set")
        self._check_bounds()
        if self._source is None:
            raise UnboundModuleError(f"{type(self).__name__} has no source module")
        self._source.validate(3)

    def sample_cells(self, cols, rows) -> np.ndarray:
        """Values the build would store at the given (column, row) cells.

        Cells may lie outside the grid, e.g. column == width.
        """
        self._validate()
        cols, rows = np.broadcast_arrays(
            np.asarray(cols, dtype=np.float64), np.asarray(rows, dtype=np.float64)
        )
        return np.asarray(self._sample_cells(cols, rows), dtype=np.float64)

    def build(self) -> NoiseMap:
        if self._state is BuilderState.BUILDING:
            raise ModuleLockedError(f"{type(self).__name__} is already building")
        self._validate()
        if self._noise_map is None:
            raise UnboundModuleError(f"{type(self).__name__} has no output noise map")

        width = self._width
        height = self._height
        noise_map = self._noise_map
        noise_map.set_size(width, height)
        logger.debug(
            "building %dx%d noise map with %s from %s",
            width,
            height,
            type(self).__name__,
            type(self._source).__name__,
        )

        cols = np.arange(width, dtype=np.float64)
        built = False
        t0 = time.perf_counter()
        self._state = BuilderState.BUILDING
        try:
            with self._source.locked():
                for row in range(height):
                    rows = np.full(width, float(row))
                    noise_map.set_row(row, self._sample_cells(cols, rows))
                    if self._callback is not None:
                        self._callback(row)
            built = True
        finally:
            self._state = BuilderState.BUILT if built else BuilderState.CONFIGURED

        logger.info(
            "%s built %dx%d noise map in %.2f ms",
            type(self).__name__,
            width,
            height,
            (time.perf_counter() - t0) * 1000.0,
        )
        return noise_map


def _check_range(name: str, lower: float, upper: float) -> None:
    if not lower < upper:
        raise ConfigurationError(f"{name}: lower bound {lower} must be below {upper}")


class NoiseMapBuilderPlane(NoiseMapBuilder):
    """Samples the source on the y = 0 plane, (x, z) spanning the bounds.

    With `seamless` each cell blends four samples offset by the full extent
    so that the left/right and top/bottom edges of the map line up.
    """

    def __init__(
        self,
        lower_x: float = -1.0,
        upper_x: float = 1.0,
        lower_z: float = -1.0,
        upper_z: float = 1.0,
        *,
        seamless: bool = False,
    ):
        super().__init__()
        self.set_bounds(lower_x, upper_x, lower_z, upper_z)
        self._seamless = bool(seamless)

    def set_bounds(
        self, lower_x: float, upper_x: float, lower_z: float, upper_z: float
    ) -> None:
        lower_x, upper_x = float(lower_x), float(upper_x)
        lower_z, upper_z = float(lower_z), float(upper_z)
        _check_range("x", lower_x, upper_x)
        _check_range("z", lower_z, upper_z)
        self._configure()
        self._bounds = (lower_x, upper_x, lower_z, upper_z)

    @property
    def bounds(self) -> tuple[float, float, float, float]:
        return self._bounds

    @property
    def seamless(self) -> bool:
        return self._seamless

    @seamless.setter
    def seamless(self, value: bool) -> None:
        self._configure()
        self._seamless = bool(value)

    def _check_bounds(self) -> None:
        lower_x, upper_x, lower_z, upper_z = self._bounds
        _check_range("x", lower_x, upper_x)
        _check_range("z", lower_z, upper_z)

    def _sample_cells(self, cols: np.ndarray, rows: np.ndarray) -> np.ndarray:
        lower_x, upper_x, lower_z, upper_z = self._bounds
        x_extent = upper_x - lower_x
        z_extent = upper_z - lower_z
        x = lower_x + cols * (x_extent / self._width)
        z = lower_z + rows * (z_extent / self._height)
        y = np.zeros_like(x)
        source = self._source

        if not self._seamless:
            return source.evaluate(x, y, z)

        sw = source.evaluate(x, y, z)
        se = source.evaluate(x + x_extent, y, z)
        nw = source.evaluate(x, y, z + z_extent)
        ne = source.evaluate(x + x_extent, y, z + z_extent)
        x_blend = 1.0 - (x - lower_x) / x_extent
        z_blend = 1.0 - (z - lower_z) / z_extent
        return lerp(lerp(sw, se, x_blend), lerp(nw, ne, x_blend), z_blend)


def _check_lat_lon(south: float, north: float, west: float, east: float) -> None:
    if not (-90.0 <= south < north <= 90.0):
        raise ConfigurationError(
            f"latitudes must satisfy -90 <= south < north <= 90: {south}, {north}"
        )
    if not (-180.0 <= west < east <= 180.0):
        raise ConfigurationError(
            f"longitudes must satisfy -180 <= west < east <= 180: {west}, {east}"
        )


class NoiseMapBuilderSphere(NoiseMapBuilder):
    """Samples the unit sphere; columns run west to east, rows south to north."""

    def __init__(
        self,
        south: float = -90.0,
        north: float = 90.0,
        west: float = -180.0,
        east: float = 180.0,
    ):
        super().__init__()
        self.set_bounds(south, north, west, east)

    def set_bounds(self, south: float, north: float, west: float, east: float) -> None:
        bounds = (float(south), float(north), float(west), float(east))
        _check_lat_lon(*bounds)
        self._configure()
        self._bounds = bounds

    @property
    def bounds(self) -> tuple[float, float, float, float]:
        return self._bounds

    def _check_bounds(self) -> None:
        _check_lat_lon(*self._bounds)

    def _sample_cells(self, cols: np.ndarray, rows: np.ndarray) -> np.ndarray:
        south, north, west, east = self._bounds
        lon = west + cols * ((east - west) / self._width)
        lat = south + rows * ((north - south) / self._height)
        x, y, z = lat_lon_to_xyz(lat, lon)
        return self._source.evaluate(x, y, z)


class NoiseMapBuilderCylinder(NoiseMapBuilder):
    """Samples a unit cylinder around the y axis; angles in degrees."""

    def __init__(
        self,
        lower_angle: float = -180.0,
        upper_angle: float = 180.0,
        lower_height: float = -1.0,
        upper_height: float = 1.0,
    ):
        super().__init__()
        self.set_bounds(lower_angle, upper_angle, lower_height, upper_height)

    def set_bounds(
        self,
        lower_angle: float,
        upper_angle: float,
        lower_height: float,
        upper_height: float,
    ) -> None:
        lower_angle, upper_angle = float(lower_angle), float(upper_angle)
        lower_height, upper_height = float(lower_height), float(upper_height)
        _check_range("angle", lower_angle, upper_angle)
        _check_range("height", lower_height, upper_height)
        self._configure()
        self._bounds = (lower_angle, upper_angle, lower_height, upper_height)

    @property
    def bounds(self) -> tuple[float, float, float, float]:
        return self._bounds

    def _check_bounds(self) -> None:
        lower_angle, upper_angle, lower_height, upper_height = self._bounds
        _check_range("angle", lower_angle, upper_angle)
        _check_range("height", lower_height, upper_height)

    def _sample_cells(self, cols: np.ndarray, rows: np.ndarray) -> np.ndarray:
        lower_angle, upper_angle, lower_height, upper_height = self._bounds
        angle = np.deg2rad(lower_angle + cols * ((upper_angle - lower_angle) / self._width))
        height = lower_height + rows * ((upper_height - lower_height) / self._height)
        return self._source.evaluate(np.cos(angle), height, np.sin(angle))
