"""WaveNormal shader - Surface normals from the height field, packed into [0, 1]."""

import torch

from fluidsim.gpu import Shader, Texture, draw_quad
from fluidsim.gpu.Sampling import neighbors, length

# Vertical component of the unnormalised normal, sets how strongly slopes tilt it
NORMAL_FLATNESS: float = 0.01


class WaveNormal(Shader):
    """normal = normalize((hL − hR) × 0.5, (hB − hT) × 0.5, flatness) × 0.5 + 0.5"""

    def use(self, surface: Texture) -> None:
        if not self.ready(surface): return
        left, right, bottom, top = neighbors(surface.tensor[0:1]) # type: ignore
        normal = torch.cat(((left - right) * 0.5, (bottom - top) * 0.5, torch.full_like(left, NORMAL_FLATNESS)), dim=0)
        normal = normal / length(normal)
        draw_quad(normal * 0.5 + 0.5, surface)
