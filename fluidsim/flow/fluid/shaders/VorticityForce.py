"""VorticityForce shader - Apply vorticity confinement to velocity."""

import torch

from fluidsim.gpu import Shader, Texture, draw_quad
from fluidsim.gpu.Sampling import neighbors, length

EPSILON: float = 1e-5


class VorticityForce(Shader):
    """Re-inject small scale swirl lost to numerical dissipation.

    direction = (|cT| − |cB|, |cL| − |cR|)
    force     = direction / (|direction| + ε) × strength × h × curl
    velocity += force × dt

    h is the cell size in texture space, so the injected swirl does not grow with
    the grid resolution.
    """

    def use(self, velocity: Texture, curl: Texture, strength: float, cell_size: float, timestep: float) -> None:
        """Apply confinement force.

        Args:
            velocity: Velocity field (RG32F)
            curl: Curl field (R32F)
            strength: Confinement strength
            cell_size: Cell size h in texture space
            timestep: Frame time step in seconds
        """
        if not self.ready(velocity, curl): return
        left, right, bottom, top = neighbors(curl.tensor) # type: ignore
        direction = torch.cat((top.abs() - bottom.abs(), left.abs() - right.abs()), dim=0)
        direction = direction / (length(direction) + EPSILON)
        force = direction * (strength * cell_size) * curl.tensor
        draw_quad(velocity.tensor + force * timestep, velocity, curl)
