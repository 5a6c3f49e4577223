from .gradient import Color, GradientColor, grayscale, terrain
from .renderer import ImageRenderer, NormalMapRenderer
from .sinks import ImageBuffer, PillowImageSink, PixelSink

__all__ = [
    "Color",
    "GradientColor",
    "ImageBuffer",
    "ImageRenderer",
    "NormalMapRenderer",
    "PillowImageSink",
    "PixelSink",
    "grayscale",
    "terrain",
]
