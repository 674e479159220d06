"""Buoyancy shader - Temperature driven lift and density driven weight."""

from fluidsim.gpu import Shader, Texture, draw_quad
from fluidsim.gpu.Sampling import length


class Buoyancy(Shader):
    """velocity.y += dt × (κ × (T − T_ambient) − σ × |density.rgb|)"""

    def use(self, velocity: Texture, temperature: Texture, density: Texture,
            kappa: float, sigma: float, ambient_temperature: float, timestep: float) -> None:
        """Apply buoyancy to the vertical velocity component.

        Args:
            velocity: Velocity field (RG32F)
            temperature: Temperature field (R32F)
            density: Density field (RGB32F)
            kappa: Thermal lift coefficient
            sigma: Density weight coefficient
            ambient_temperature: Reference temperature
            timestep: Frame time step in seconds
        """
        if not self.ready(velocity, temperature, density): return
        lift = kappa * (temperature.tensor[0:1] - ambient_temperature) # type: ignore
        weight = sigma * length(density.tensor[0:3]) # type: ignore
        result = velocity.tensor.clone() # type: ignore
        result[1:2] += timestep * (lift - weight)
        draw_quad(result, velocity, temperature, density)
