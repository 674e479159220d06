"""Splat shader - additive Gaussian impulse.

    result = src + exp(-|p - c|² / r²) × value

The x offset is scaled by the grid aspect ratio so the falloff stays circular on
non-square grids.
"""

import torch

from fluidsim.gpu import Shader, Texture, draw_quad
from fluidsim.gpu.Sampling import tex_coords, vec


class Splat(Shader):
    """Add a Gaussian blob to a field."""

    def use(self, src: Texture, point: tuple[float, float], value: tuple[float, ...],
            radius: float, aspect: float) -> None:
        """Add a splat.

        Args:
            src: Field to add to
            point: Centre in texture coordinates
            value: Amount per channel at the centre, padded with zeros
            radius: Gaussian radius in texture space (> 0)
            aspect: Width / height of the grid
        """
        if not self.ready(src): return
        u, v = tex_coords(src.height, src.width, src.device)
        dx = (u - point[0]) * aspect
        dy = v - point[1]
        falloff = torch.exp(-(dx * dx + dy * dy) / (radius * radius))

        amount = list(value[:src.channels]) + [0.0] * (src.channels - len(value))
        draw_quad(src.tensor + falloff.unsqueeze(0) * vec(*amount, device=src.device), src)
