"""One-call map generation: primitive -> filter -> projection -> image.

The choices mirror a classic noise-explorer form. Each filter is paired with a
display Scale-Bias that brings its output roughly back into [-1, 1]; the
Cylinders and Spheres primitives are never built seamless.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field, replace
from typing import Callable

from noisegraph import (
    Billow,
    BevinsGradient,
    BevinsValue,
    Constant,
    Cylinders,
    FilterModule,
    HeterogeneousMultiFractal,
    HybridMultiFractal,
    ImprovedPerlin,
    Module,
    MultiFractal,
    NoiseQuality,
    Pipe,
    RidgedMultiFractal,
    ScaleBias,
    SimplexPerlin,
    SinFractal,
    Spheres,
    SumFractal,
    Voronoi,
)
from noisegraph.errors import ConfigurationError
from viz.gradient import GRADIENTS, GradientColor
from viz.renderer import ImageRenderer
from viz.sinks import ImageBuffer

from .builders import (
    NoiseMapBuilder,
    NoiseMapBuilderCylinder,
    NoiseMapBuilderPlane,
    NoiseMapBuilderSphere,
)
from .noise_map import NoiseMap

logger = logging.getLogger(__name__)

PRIMITIVES = (
    "constant",
    "cylinders",
    "spheres",
    "bevins_gradient",
    "bevins_value",
    "improved_perlin",
    "simplex_perlin",
)

FILTERS = (
    "pipe",
    "sum_fractal",
    "sin_fractal",
    "multi_fractal",
    "billow",
    "heterogeneous_multi_fractal",
    "hybrid_multi_fractal",
    "ridged_multi_fractal",
    "voronoi",
)

PROJECTIONS = ("planar", "spherical", "cylindrical")

SIZES = (
    (128, 128),
    (256, 256),
    (512, 512),
    (1024, 1024),
    (256, 128),
    (512, 256),
    (1024, 512),
    (2048, 1024),
)

_UNSEAMLESS = frozenset({"cylinders", "spheres"})

# (scale, bias) applied after the filter so its output lands near [-1, 1].
_DISPLAY_SCALE_BIAS: dict[str, tuple[float, float]] = {
    "multi_fractal": (1.0, -0.8),
    "heterogeneous_multi_fractal": (-1.0, 2.0),
    "hybrid_multi_fractal": (0.7, -2.0),
    "ridged_multi_fractal": (0.9, -1.25),
}

_FILTER_CLASSES: dict[str, type[FilterModule]] = {
    "pipe": Pipe,
    "sum_fractal": SumFractal,
    "sin_fractal": SinFractal,
    "multi_fractal": MultiFractal,
    "billow": Billow,
    "heterogeneous_multi_fractal": HeterogeneousMultiFractal,
    "hybrid_multi_fractal": HybridMultiFractal,
    "ridged_multi_fractal": RidgedMultiFractal,
}

ProgressHook = Callable[[str, int, int], None]


@dataclass(frozen=True)
class MapRequest:
    primitive: str = "improved_perlin"
    filter: str = "sum_fractal"
    quality: str = NoiseQuality.STANDARD.value
    seed: int = 0
    frequency: float = FilterModule.DEFAULT_FREQUENCY
    lacunarity: float = FilterModule.DEFAULT_LACUNARITY
    gain: float = FilterModule.DEFAULT_GAIN
    offset: float = FilterModule.DEFAULT_OFFSET
    spectral_exponent: float = FilterModule.DEFAULT_SPECTRAL_EXPONENT
    octave_count: int = int(FilterModule.DEFAULT_OCTAVE_COUNT)
    projection: str = "planar"
    width: int = 256
    height: int = 256
    seamless: bool = True
    gradient: str = "grayscale"
    light_enabled: bool = False
    light_brightness: float = 2.0
    light_contrast: float = 8.0
    planar_bounds: tuple[float, float, float, float] = field(default=(2.0, 4.0, 2.0, 4.0))

    def effective(self) -> MapRequest:
        """The request as it will actually be built."""
        if self.seamless and self.primitive in _UNSEAMLESS:
            return replace(self, seamless=False)
        return self


def create_primitive(request: MapRequest) -> Module:
    kind = request.primitive
    quality = NoiseQuality.parse(request.quality)
    seed = int(request.seed)

    # The shape primitives take their frequency from the offset field.
    if kind == "constant":
        return Constant(request.offset)
    if kind == "cylinders":
        return Cylinders(request.offset)
    if kind == "spheres":
        return Spheres(request.offset)
    if kind == "bevins_gradient":
        return BevinsGradient(seed=seed, quality=quality)
    if kind == "bevins_value":
        return BevinsValue(seed=seed, quality=quality)
    if kind == "improved_perlin":
        return ImprovedPerlin(seed=seed, quality=quality)
    if kind == "simplex_perlin":
        return SimplexPerlin(seed=seed, quality=quality)
    raise ConfigurationError(f"unknown primitive: {kind}")


def create_filter(request: MapRequest, primitive: Module) -> Module:
    """Wrap `primitive` in the requested filter and its display Scale-Bias.

    Voronoi is a self-contained generator; it ignores `primitive`.
    """
    kind = request.filter
    if kind == "voronoi":
        return Voronoi(frequency=request.frequency, seed=int(request.seed))

    cls = _FILTER_CLASSES.get(kind)
    if cls is None:
        raise ConfigurationError(f"unknown filter: {kind}")

    params = dict(
        frequency=request.frequency,
        lacunarity=request.lacunarity,
        octave_count=request.octave_count,
        offset=request.offset,
        gain=request.gain,
        spectral_exponent=request.spectral_exponent,
    )
    if cls is Billow:
        module: Module = Billow(primitive, scale=2.0, bias=-0.2, **params)
    else:
        module = cls(primitive, **params)

    if kind in _DISPLAY_SCALE_BIAS:
        scale, bias = _DISPLAY_SCALE_BIAS[kind]
        module = ScaleBias(module, scale, bias)
    return module


def create_builder(request: MapRequest) -> NoiseMapBuilder:
    request = request.effective()
    kind = request.projection
    if kind == "planar":
        builder: NoiseMapBuilder = NoiseMapBuilderPlane(
            *request.planar_bounds, seamless=request.seamless
        )
    elif kind == "spherical":
        builder = NoiseMapBuilderSphere(-90.0, 90.0, -180.0, 180.0)
    elif kind == "cylindrical":
        builder = NoiseMapBuilderCylinder(-180.0, 180.0, -10.0, 10.0)
    else:
        raise ConfigurationError(f"unknown projection: {kind}")
    builder.set_size(request.width, request.height)
    return builder


def create_gradient(name: str) -> GradientColor:
    try:
        factory = GRADIENTS[str(name).strip().lower()]
    except KeyError:
        raise ConfigurationError(f"unknown gradient: {name}") from None
    return factory()


def generate(
    request: MapRequest, on_progress: ProgressHook | None = None
) -> tuple[NoiseMap, ImageBuffer]:
    """Build the noise map for `request` and render it.

    `on_progress(stage, row, height)` is called after every row of the
    "build" stage and then of the "render" stage.
    """
    request = request.effective()
    module = create_filter(request, create_primitive(request))
    builder = create_builder(request)
    gradient = create_gradient(request.gradient)

    def hook(stage: str) -> Callable[[int], None] | None:
        if on_progress is None:
            return None
        return lambda row: on_progress(stage, row, request.height)

    noise_map = NoiseMap()
    builder.set_source(module)
    builder.set_output(noise_map)
    builder.set_progress_callback(hook("build"))

    t0 = time.perf_counter()
    builder.build()
    t_build = time.perf_counter() - t0

    image = ImageBuffer(request.width, request.height)
    renderer = ImageRenderer()
    renderer.set_input(noise_map)
    renderer.set_gradient(gradient)
    renderer.set_light_params(
        brightness=request.light_brightness,
        contrast=request.light_contrast,
        enabled=request.light_enabled,
    )
    renderer.set_output(image)
    renderer.set_progress_callback(hook("render"))

    t1 = time.perf_counter()
    renderer.render()
    t_render = time.perf_counter() - t1

    logger.info(
        "generated %dx%d %s/%s %s map: build %.2f ms, render %.2f ms",
        request.width,
        request.height,
        request.primitive,
        request.filter,
        request.projection,
        t_build * 1000.0,
        t_render * 1000.0,
    )
    return noise_map, image
