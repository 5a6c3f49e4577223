"""Turn a `NoiseMap` into pixels.

`ImageRenderer` colours each value through a `GradientColor` and optionally
lights the result as a height field. Lighting follows the usual hillshade
recipe: a surface normal from the four neighbouring values, dotted with a
light direction given by azimuth and elevation. `contrast` scales how far a
pixel's intensity strays from flat-ground lighting and `brightness`
multiplies the final intensity.

Both renderers write rows in increasing order and call the progress callback
with the row index after each one.
"""

from __future__ import annotations

import logging
import math
import time
from typing import Callable

import numpy as np

from noisegraph.errors import ConfigurationError, ModuleLockedError, UnboundModuleError
from noisemap.noise_map import NoiseMap

from .gradient import Color, GradientColor, grayscale
from .sinks import PixelSink

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int], None]


def _neighbour_rows(
    data: np.ndarray, y: int, *, wrap: bool
) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """(center, left, right, down, up) values for row y.

    Without wrapping, neighbours that fall off the map reuse the centre value.
    """
    height, width = data.shape
    center = data[y]
    if wrap:
        left = np.roll(center, 1)
        right = np.roll(center, -1)
        down = data[(y - 1) % height]
        up = data[(y + 1) % height]
    else:
        left = np.concatenate((center[:1], center[:-1]))
        right = np.concatenate((center[1:], center[-1:]))
        down = data[y - 1] if y > 0 else center
        up = data[y + 1] if y < height - 1 else center
    return center, left, right, down, up


class _RowRenderer:
    def __init__(self) -> None:
        self._noise_map: NoiseMap | None = None
        self._sink: PixelSink | None = None
        self._callback: ProgressCallback | None = None
        self._rendering = False
        self._bump_height = 1.0
        self._wrap = False

    def _configure(self) -> None:
        if self._rendering:
            raise ModuleLockedError(
                f"{type(self).__name__} cannot be reconfigured while rendering"
            )

    def set_input(self, noise_map: NoiseMap) -> None:
        self._configure()
        self._noise_map = noise_map

    def set_output(self, sink: PixelSink) -> None:
        self._configure()
        self._sink = sink

    def set_progress_callback(self, callback: ProgressCallback | None) -> None:
        self._configure()
        self._callback = callback

    @property
    def bump_height(self) -> float:
        return self._bump_height

    @bump_height.setter
    def bump_height(self, value: float) -> None:
        self._configure()
        self._bump_height = float(value)

    @property
    def wrap(self) -> bool:
        return self._wrap

    @wrap.setter
    def wrap(self, value: bool) -> None:
        self._configure()
        self._wrap = bool(value)

    def _validate(self) -> None:
        if self._noise_map is None:
            raise UnboundModuleError(f"{type(self).__name__} has no input noise map")
        if self._sink is None:
            raise UnboundModuleError(f"{type(self).__name__} has no output sink")
        nm = self._noise_map
        if nm.width == 0 or nm.height == 0:
            raise ConfigurationError("input noise map is empty")
        if (self._sink.width, self._sink.height) != (nm.width, nm.height):
            raise ConfigurationError(
                f"sink is {self._sink.width}x{self._sink.height} but the noise map "
                f"is {nm.width}x{nm.height}"
            )

    def _render_row(self, data: np.ndarray, y: int) -> np.ndarray:
        raise NotImplementedError

    def render(self) -> PixelSink:
        self._configure()
        self._validate()
        data = self._noise_map.data
        sink = self._sink

        t0 = time.perf_counter()
        self._rendering = True
        try:
            for y in range(data.shape[0]):
                sink.set_row(y, self._render_row(data, y))
                if self._callback is not None:
                    self._callback(y)
        finally:
            self._rendering = False

        logger.info(
            "%s rendered %dx%d in %.2f ms",
            type(self).__name__,
            data.shape[1],
            data.shape[0],
            (time.perf_counter() - t0) * 1000.0,
        )
        return sink


class ImageRenderer(_RowRenderer):
    DEFAULT_LIGHT_AZIMUTH = 45.0
    DEFAULT_LIGHT_ELEVATION = 45.0
    DEFAULT_LIGHT_BRIGHTNESS = 1.0
    DEFAULT_LIGHT_CONTRAST = 1.0

    def __init__(self) -> None:
        super().__init__()
        self._gradient = grayscale()
        self._light_enabled = False
        self._light_azimuth = self.DEFAULT_LIGHT_AZIMUTH
        self._light_elevation = self.DEFAULT_LIGHT_ELEVATION
        self._light_brightness = self.DEFAULT_LIGHT_BRIGHTNESS
        self._light_contrast = self.DEFAULT_LIGHT_CONTRAST
        self._light_color = Color(255, 255, 255)
        self._background: Color | None = None

    def set_gradient(self, gradient: GradientColor) -> None:
        self._configure()
        self._gradient = gradient

    @property
    def gradient(self) -> GradientColor:
        return self._gradient

    def set_light_params(
        self,
        brightness: float | None = None,
        contrast: float | None = None,
        bump_height: float | None = None,
        enabled: bool | None = None,
    ) -> None:
        self._configure()
        if contrast is not None and float(contrast) < 0.0:
            raise ConfigurationError("light contrast must be >= 0")
        if brightness is not None:
            self._light_brightness = float(brightness)
        if contrast is not None:
            self._light_contrast = float(contrast)
        if bump_height is not None:
            self._bump_height = float(bump_height)
        if enabled is not None:
            self._light_enabled = bool(enabled)

    def set_light_direction(self, *, azimuth: float, elevation: float) -> None:
        """Azimuth in degrees counter-clockwise from +x; elevation above the map."""
        self._configure()
        elevation = float(elevation)
        if not (0.0 <= elevation <= 90.0):
            raise ConfigurationError(f"light elevation must be in [0, 90]: {elevation}")
        self._light_azimuth = float(azimuth)
        self._light_elevation = elevation

    def set_light_color(self, color: Color) -> None:
        self._configure()
        self._light_color = Color(*(int(c) for c in color))

    def set_background(self, color: Color | None) -> None:
        """Colour shown through translucent gradient colours; None disables it."""
        self._configure()
        self._background = None if color is None else Color(*(int(c) for c in color))

    @property
    def light_enabled(self) -> bool:
        return self._light_enabled

    @property
    def light_brightness(self) -> float:
        return self._light_brightness

    @property
    def light_contrast(self) -> float:
        return self._light_contrast

    @property
    def light_azimuth(self) -> float:
        return self._light_azimuth

    @property
    def light_elevation(self) -> float:
        return self._light_elevation

    def _validate(self) -> None:
        super()._validate()
        if len(self._gradient) < 2:
            raise ConfigurationError("the gradient needs at least 2 points")

    def light_intensity(
        self,
        center: np.ndarray,
        left: np.ndarray,
        right: np.ndarray,
        down: np.ndarray,
        up: np.ndarray,
    ) -> np.ndarray:
        """Lighting factor for each cell given its four neighbours."""
        az = math.radians(self._light_azimuth)
        el = math.radians(self._light_elevation)
        bump = self._bump_height

        dx = (np.asarray(left) - np.asarray(right)) * bump
        dy = (np.asarray(down) - np.asarray(up)) * bump

        # Flat ground is lit by sin(elevation); that is the zero-contrast level.
        flat = math.sqrt(2.0) * math.sin(el) / 2.0
        lx = (1.0 - flat) * self._light_contrast * math.sqrt(2.0) * math.cos(el) * math.cos(az)
        ly = (1.0 - flat) * self._light_contrast * math.sqrt(2.0) * math.cos(el) * math.sin(az)
        intensity = np.maximum(lx * dx + ly * dy + flat, 0.0)
        return intensity * self._light_brightness

    def _render_row(self, data: np.ndarray, y: int) -> np.ndarray:
        center, left, right, down, up = _neighbour_rows(data, y, wrap=self._wrap)
        rgba = self._gradient.colors_for(center).astype(np.float64) / 255.0

        if self._background is not None:
            bg = np.array(self._background, dtype=np.float64) / 255.0
            a = rgba[:, 3:4]
            alpha = np.maximum(rgba[:, 3], bg[3])
            rgba = bg + (rgba - bg) * a
            rgba[:, 3] = alpha

        if self._light_enabled:
            light = self.light_intensity(center, left, right, down, up)[:, None]
            tint = np.array(self._light_color[:3], dtype=np.float64) / 255.0
            rgba[:, :3] = rgba[:, :3] * light * tint

        return np.rint(np.clip(rgba, 0.0, 1.0) * 255.0).astype(np.uint8)


class NormalMapRenderer(_RowRenderer):
    """Encodes surface normals as RGB: x in red, y in green, z in blue."""

    def _render_row(self, data: np.ndarray, y: int) -> np.ndarray:
        center, _, right, _, up = _neighbour_rows(data, y, wrap=self._wrap)
        bump = self._bump_height
        dx = (center - right) * bump
        dy = (center - up) * bump
        d = np.sqrt(dx * dx + dy * dy + 1.0)

        out = np.empty((center.shape[0], 4), dtype=np.uint8)
        out[:, 0] = np.floor((dx / d + 1.0) * 127.5).astype(np.uint8)
        out[:, 1] = np.floor((dy / d + 1.0) * 127.5).astype(np.uint8)
        out[:, 2] = np.floor((1.0 / d + 1.0) * 127.5).astype(np.uint8)
        out[:, 3] = 255
        return out
