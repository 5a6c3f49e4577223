from __future__ import annotations

import io

import numpy as np
from PIL import Image

from noisemap.noise_map import NoiseMap

from .sinks import ImageBuffer, PillowImageSink, PixelSink


def sink_to_image(sink: PixelSink) -> Image.Image:
    if isinstance(sink, PillowImageSink):
        return sink.image.copy()
    if isinstance(sink, ImageBuffer):
        return Image.fromarray(np.ascontiguousarray(sink.pixels))

    pixels = np.zeros((sink.height, sink.width, 4), dtype=np.uint8)
    for y in range(sink.height):
        for x in range(sink.width):
            pixels[y, x] = tuple(sink.get_pixel(x, y))
    return Image.fromarray(pixels)


def sink_to_png_bytes(sink: PixelSink) -> bytes:
    out = io.BytesIO()
    sink_to_image(sink).save(out, format="PNG")
    return out.getvalue()


def noise_map_to_png_bytes(noise_map: NoiseMap) -> bytes:
    """Convert a noise map to an 8-bit grayscale PNG.

    Values are min/max normalized to [0, 255]. Degenerate (constant) maps
    become all zeros.
    """

    z = np.asarray(noise_map.data, dtype=np.float64)
    if z.size == 0:
        raise ValueError("noise map is empty")

    zmin, zmax = noise_map.min_max()
    if zmax == zmin:
        img = np.zeros(z.shape, dtype=np.uint8)
    else:
        zn = (z - zmin) / (zmax - zmin)
        img = np.clip(zn * 255.0, 0.0, 255.0).astype(np.uint8)

    out = io.BytesIO()
    Image.fromarray(img).save(out, format="PNG")
    return out.getvalue()


def noise_map_to_npy_bytes(noise_map: NoiseMap) -> bytes:
    out = io.BytesIO()
    np.save(out, noise_map.data)
    return out.getvalue()
