"""Advect shader - Semi-Lagrangian advection with dissipation.

Advection formula:  src = uv − dt × velocity(uv) × texel_size
Velocity is expressed in cells per second, so a velocity of 1.0 moves one cell
per second along each axis.
"""

from fluidsim.gpu import Shader, Texture, draw_quad
from fluidsim.gpu.Sampling import sample, tex_coords


class Advect(Shader):
    """Semi-Lagrangian advection shader with dissipation."""

    def use(self, source: Texture, velocity: Texture, texel_size: tuple[float, float],
            timestep: float, dissipation: float) -> None:
        """Apply advection.

        Args:
            source: Field to advect (velocity, density, temperature)
            velocity: Velocity field (RG32F), same grid as source
            texel_size: (1 / width, 1 / height)
            timestep: Frame time step in seconds
            dissipation: Multiplier applied to the transported value
        """
        if not self.ready(source, velocity): return

        u, v = tex_coords(source.height, source.width, source.device)
        vel = velocity.tensor
        src_u = u - timestep * vel[0] * texel_size[0]
        src_v = v - timestep * vel[1] * texel_size[1]

        draw_quad(sample(source.tensor, src_u, src_v) * dissipation, source, velocity)
