"""VorticityCurl shader - Compute the scalar curl of the velocity field."""

from fluidsim.gpu import Shader, Texture, draw_quad
from fluidsim.gpu.Sampling import neighbors


class VorticityCurl(Shader):
    """curl = 0.5 × ((R.y − L.y) − (T.x − B.x))"""

    def use(self, velocity: Texture) -> None:
        """Compute curl.

        Args:
            velocity: Velocity field (RG32F)
        """
        if not self.ready(velocity): return
        left, right, bottom, top = neighbors(velocity.tensor) # type: ignore
        curl = 0.5 * ((right[1:2] - left[1:2]) - (top[0:1] - bottom[0:1]))
        draw_quad(curl, velocity)
