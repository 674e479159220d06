import logging

import torch

from fluidsim.gpu.Fbo import bound_target
from fluidsim.gpu.Texture import Texture


class FeedbackLoopError(RuntimeError):
    """Raised when a pass samples the render target it is writing."""


def draw_quad(result: torch.Tensor, *sources: Texture) -> None :
    """Write a full-screen result into the bound render target.

    Extra result channels are dropped and missing ones are written as zero, like a
    vec4 fragment output into a narrower format.

    Raises:
        RuntimeError: If no render target is bound.
        FeedbackLoopError: If one of the sampled textures is the render target.
    """
    target = bound_target()
    if target is None or target.tensor is None:
        raise RuntimeError("draw_quad: no render target bound")
    for source in sources:
        if source is target or (source.tensor is not None and source.tensor.data_ptr() == target.tensor.data_ptr()):
            raise FeedbackLoopError("draw_quad: render target is also sampled by the pass")

    channels: int = target.channels
    if result.shape[0] >= channels:
        target.tensor.copy_(result[:channels])
    else:
        target.tensor.zero_()
        target.tensor[:result.shape[0]].copy_(result)


class Shader():
    """Base class of a full-screen kernel pass.

    Subclasses implement use(), which samples its input textures, evaluates the
    per-cell expression and hands the result to draw_quad().
    """

    def __init__(self) -> None :
        self.allocated: bool = False
        self.shader_name: str = self.__class__.__name__

    def allocate(self) -> None :
        if self.allocated: return
        self.allocated = True
        logging.debug(f"{self.shader_name} allocated")

    def deallocate(self) -> None :
        self.allocated = False

    def ready(self, *textures: Texture) -> bool:
        if not self.allocated:
            logging.warning(f"{self.shader_name} shader not allocated.")
            return False
        for texture in textures:
            if not texture.allocated:
                logging.warning(f"{self.shader_name} shader: input texture(s) not allocated.")
                return False
        return True
