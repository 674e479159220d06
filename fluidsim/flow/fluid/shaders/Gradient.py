"""Gradient shader - Subtract the pressure gradient from velocity."""

import torch

from fluidsim.gpu import Shader, Texture, draw_quad
from fluidsim.gpu.Sampling import neighbors


class Gradient(Shader):
    """velocity −= 0.5 × (pR − pL, pT − pB)"""

    def use(self, velocity: Texture, pressure: Texture) -> None:
        """Make velocity divergence free.

        Args:
            velocity: Velocity field (RG32F)
            pressure: Solved pressure field (R32F)
        """
        if not self.ready(velocity, pressure): return
        left, right, bottom, top = neighbors(pressure.tensor) # type: ignore
        gradient = 0.5 * torch.cat((right - left, top - bottom), dim=0)
        draw_quad(velocity.tensor - gradient, velocity, pressure)
