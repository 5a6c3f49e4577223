from __future__ import annotations

import logging
import sys
from dataclasses import replace
from pathlib import Path

logger = logging.getLogger("generate_readme_assets")


def main() -> None:
    root = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(root))

    from noisemap.pipeline import MapRequest, generate
    from viz.export import sink_to_image

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    out_dir = root / "assets"
    out_dir.mkdir(parents=True, exist_ok=True)

    base = MapRequest(width=256, height=256)
    scenes = {
        "sum_fractal_grayscale": base,
        "ridged_terrain_lit": replace(
            base, filter="ridged_multi_fractal", gradient="terrain", light_enabled=True
        ),
        "billow_simplex": replace(base, primitive="simplex_perlin", filter="billow"),
        "voronoi": replace(base, filter="voronoi", frequency=4.0),
        "planet": replace(
            base,
            projection="spherical",
            width=512,
            height=256,
            gradient="terrain",
            light_enabled=True,
        ),
    }

    for name, request in scenes.items():
        _, image = generate(request)
        path = out_dir / f"{name}.png"
        sink_to_image(image).save(path)
        logger.info("wrote %s", path)


if __name__ == "__main__":
    main()
