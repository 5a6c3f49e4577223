from __future__ import annotations

import logging
import time

import numpy as np

from noisegraph import BevinsGradient, ImprovedPerlin, RidgedMultiFractal, SimplexPerlin, SumFractal
from noisemap import NoiseMap, NoiseMapBuilderPlane, NoiseMapBuilderSphere
from noisemap.pipeline import MapRequest, generate


def _timeit(label: str, fn) -> float:
    t0 = time.perf_counter()
    fn()
    t1 = time.perf_counter()
    ms = (t1 - t0) * 1000.0
    print(f"{label}: {ms:.2f} ms")
    return ms


def _build(builder, module, size: int) -> None:
    builder.set_size(size, size)
    builder.set_source(module)
    builder.set_output(NoiseMap())
    builder.build()


def main() -> None:
    """Quick CPU benchmark.

    Intended targets (laptop-class CPU):
    - 6-octave fBm, 512x512 plane: < ~500ms
    - full generate() 256x256 with lighting: < ~250ms
    """

    logging.basicConfig(level=logging.WARNING)

    rng = np.random.default_rng(0)
    pts = rng.uniform(-100.0, 100.0, size=(3, 1_000_000))

    for module in (ImprovedPerlin(), BevinsGradient(), SimplexPerlin()):
        _timeit(
            f"{type(module).__name__}: 1M 3D samples",
            lambda m=module: m.sample(*pts),
        )

    _timeit(
        "Plane: SumFractal(ImprovedPerlin) 512x512",
        lambda: _build(NoiseMapBuilderPlane(2, 4, 2, 4), SumFractal(ImprovedPerlin()), 512),
    )
    _timeit(
        "Plane seamless: SumFractal(ImprovedPerlin) 512x512",
        lambda: _build(
            NoiseMapBuilderPlane(2, 4, 2, 4, seamless=True), SumFractal(ImprovedPerlin()), 512
        ),
    )
    _timeit(
        "Sphere: RidgedMultiFractal(SimplexPerlin) 512x512",
        lambda: _build(NoiseMapBuilderSphere(), RidgedMultiFractal(SimplexPerlin()), 512),
    )
    _timeit(
        "generate(): terrain + lighting 256x256",
        lambda: generate(MapRequest(gradient="terrain", light_enabled=True)),
    )


if __name__ == "__main__":
    main()
