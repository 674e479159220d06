"""Fluid simulation shaders."""

from .Advect import Advect
from .Buoyancy import Buoyancy
from .Divergence import Divergence
from .Foam import Foam
from .Gradient import Gradient
from .JacobiPressure import JacobiPressure
from .VorticityCurl import VorticityCurl
from .VorticityForce import VorticityForce
from .WaveNormal import WaveNormal
from .WaveUpdate import WaveUpdate

__all__ = [
    "Advect",
    "Buoyancy",
    "Divergence",
    "Foam",
    "Gradient",
    "JacobiPressure",
    "VorticityCurl",
    "VorticityForce",
    "WaveNormal",
    "WaveUpdate",
]
