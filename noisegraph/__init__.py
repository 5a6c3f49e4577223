from .bevins import BevinsGradient, BevinsValue
from .combiner import Add, Blend, Max, Min, Multiply, Power, Select
from .errors import (
    ConfigurationError,
    ModuleLockedError,
    NoiseError,
    UnboundModuleError,
    UnsupportedDimensionError,
)
from .fractal import (
    Billow,
    FilterModule,
    HeterogeneousMultiFractal,
    HybridMultiFractal,
    MultiFractal,
    Pipe,
    RidgedMultiFractal,
    SinFractal,
    SumFractal,
)
from .improved import ImprovedPerlin
from .modifier import (
    Abs,
    Clamp,
    Curve,
    Exponent,
    Invert,
    ScaleBias,
    Terrace,
    terrace_points,
)
from .module import Module, NoiseQuality, PrimitiveModule
from .shapes import Constant, Cylinders, LinearGradient, Spheres
from .simplex import SimplexPerlin
from .transformer import Displace, RotatePoint, ScalePoint, TranslatePoint, Turbulence
from .voronoi import Voronoi

__all__ = [
    "Abs",
    "Add",
    "BevinsGradient",
    "BevinsValue",
    "Billow",
    "Blend",
    "Clamp",
    "ConfigurationError",
    "Constant",
    "Curve",
    "Cylinders",
    "Displace",
    "Exponent",
    "FilterModule",
    "HeterogeneousMultiFractal",
    "HybridMultiFractal",
    "ImprovedPerlin",
    "Invert",
    "LinearGradient",
    "Max",
    "Min",
    "Module",
    "ModuleLockedError",
    "MultiFractal",
    "Multiply",
    "NoiseError",
    "NoiseQuality",
    "Pipe",
    "Power",
    "PrimitiveModule",
    "RidgedMultiFractal",
    "RotatePoint",
    "ScaleBias",
    "ScalePoint",
    "Select",
    "SimplexPerlin",
    "SinFractal",
    "Spheres",
    "SumFractal",
    "Terrace",
    "TranslatePoint",
    "Turbulence",
    "UnboundModuleError",
    "UnsupportedDimensionError",
    "Voronoi",
    "terrace_points",
]
