"""SmokeDisplay shader - ACES tone mapped smoke with a soft glow."""

import torch

from fluidsim.gpu import Shader, Texture, draw_quad
from fluidsim.gpu.Sampling import vec


def tonemap_aces(color: torch.Tensor) -> torch.Tensor:
    """Fitted ACES filmic curve, output clamped to [0, 1]."""
    a, b, c, d, e = 2.51, 0.03, 2.43, 0.59, 0.14
    return ((color * (a * color + b)) / (color * (c * color + d) + e)).clamp(0.0, 1.0)


class SmokeDisplay(Shader):

    def use(self, density: Texture, glow: Texture, brightness: float) -> None:
        """Map smoke density and glow to display colour.

        Args:
            density: Smoke colour density (RGB32F)
            glow: Accumulated glow (R32F)
            brightness: Final multiplier
        """
        if not self.ready(density, glow): return
        device = density.device
        color = density.tensor[0:3].clamp(min=0.0).pow(0.8) # type: ignore

        # cool tint, 20% towards blue
        color = color * 0.8 + color * vec(0.9, 0.95, 1.0, device=device) * 0.2
        color = tonemap_aces(color * 1.5)

        luminance = (color * vec(0.299, 0.587, 0.114, device=device)).sum(dim=0, keepdim=True)
        color = color + luminance.pow(2.0) * 0.1 + glow.tensor[0:1] * vec(1.0, 0.85, 0.7, device=device) * 0.5 # type: ignore
        draw_quad((color * brightness).clamp(0.0, 1.0), density, glow)
