from .builders import (
    BuilderState,
    NoiseMapBuilder,
    NoiseMapBuilderCylinder,
    NoiseMapBuilderPlane,
    NoiseMapBuilderSphere,
)
from .noise_map import NoiseMap

__all__ = [
    "BuilderState",
    "NoiseMap",
    "NoiseMapBuilder",
    "NoiseMapBuilderCylinder",
    "NoiseMapBuilderPlane",
    "NoiseMapBuilderSphere",
]
