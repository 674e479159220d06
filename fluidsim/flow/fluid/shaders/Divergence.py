"""Divergence shader - Compute velocity field divergence."""

import torch

from fluidsim.gpu import Shader, Texture, draw_quad
from fluidsim.gpu.Sampling import neighbors


def divergence(velocity: torch.Tensor) -> torch.Tensor:
    """0.5 × ((R.x − L.x) + (T.y − B.y)) with clamped borders, shaped (1, H, W)."""
    left, right, bottom, top = neighbors(velocity)
    return 0.5 * ((right[0:1] - left[0:1]) + (top[1:2] - bottom[1:2]))


class Divergence(Shader):
    """Compute divergence of the velocity field."""

    def use(self, velocity: Texture) -> None:
        """Compute divergence.

        Args:
            velocity: Velocity field (RG32F)
        """
        if not self.ready(velocity): return
        draw_quad(divergence(velocity.tensor), velocity) # type: ignore
