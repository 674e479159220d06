"""Display mapping shaders."""

from .DensityDisplay import DensityDisplay
from .OceanDisplay import OceanDisplay
from .SmokeDisplay import SmokeDisplay

__all__ = [
    "DensityDisplay",
    "OceanDisplay",
    "SmokeDisplay",
]
