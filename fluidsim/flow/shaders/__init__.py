"""Generic field shaders."""

from .Scale import Scale
from .Splat import Splat

__all__ = [
    "Scale",
    "Splat",
]
