from .Visualiser import Visualizer
from .shaders import DensityDisplay, OceanDisplay, SmokeDisplay
