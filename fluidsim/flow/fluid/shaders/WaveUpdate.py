"""WaveUpdate shader - Explicit wave equation on a height field.

The surface texture holds height in R and vertical velocity in G.

    vel += s × (c × (hL + hR + hB + hT − 4h) + swell(uv, t))
    vel *= damping
    h   += s × vel

with s the frame step in reference frames. c ≤ 0.5 keeps the scheme stable.
"""

import torch

from fluidsim.gpu import Shader, Texture, draw_quad
from fluidsim.gpu.Sampling import neighbors, tex_coords


class WaveUpdate(Shader):
    """Propagate, damp and integrate the ocean surface."""

    def use(self, surface: Texture, wave_speed: float, damping: float,
            ambient: float, time: float, step: float) -> None:
        """Advance the surface by one frame.

        Args:
            surface: Height and vertical velocity (RG32F)
            wave_speed: Laplacian coupling c
            damping: Velocity multiplier for this frame
            ambient: Amplitude of the ambient swell
            time: Simulation time in seconds
            step: Frame time step in reference frames
        """
        if not self.ready(surface): return
        height = surface.tensor[0:1] # type: ignore
        velocity = surface.tensor[1:2] # type: ignore

        left, right, bottom, top = neighbors(height)
        laplacian = left + right + bottom + top - 4.0 * height

        u, v = tex_coords(surface.height, surface.width, surface.device)
        swell = ambient * (torch.sin(u * 10.0 - time * 2.0)
                           + torch.sin(v * 8.0 - time * 1.5)
                           + 0.5 * torch.sin((u + v) * 6.0 - time * 2.5))

        velocity = (velocity + step * (wave_speed * laplacian + swell.unsqueeze(0))) * damping
        height = height + step * velocity
        draw_quad(torch.cat((height, velocity), dim=0), surface)
