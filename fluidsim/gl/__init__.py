
from .Image import Image
from .RenderWindowGLFW import RenderWindow, Button
from .FluidWindow import FluidWindow
from .Utils import FpsCounter, fit
