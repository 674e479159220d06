"""JacobiPressure shader - One Jacobi iteration of the pressure Poisson equation."""

from fluidsim.gpu import Shader, Texture, draw_quad
from fluidsim.gpu.Sampling import neighbors


class JacobiPressure(Shader):
    """p' = (pL + pR + pB + pT − divergence) × 0.25"""

    def use(self, pressure: Texture, divergence: Texture) -> None:
        """Run one Jacobi iteration.

        Args:
            pressure: Current pressure estimate (R32F)
            divergence: Velocity divergence (R32F)
        """
        if not self.ready(pressure, divergence): return
        left, right, bottom, top = neighbors(pressure.tensor) # type: ignore
        draw_quad((left + right + bottom + top - divergence.tensor) * 0.25, pressure, divergence)
