"""DensityDisplay shader - Dye density to display colour.

    c = clamp(((max(d, 0)^(1/gamma) − 0.5) × contrast + 0.5) × brightness, 0, 1)
"""

from fluidsim.gpu import Shader, Texture, draw_quad


class DensityDisplay(Shader):
    """Gamma, contrast and brightness mapping of an RGB density field."""

    def use(self, density: Texture, brightness: float, contrast: float, gamma: float) -> None:
        if not self.ready(density): return
        color = density.tensor[0:3].clamp(min=0.0) # type: ignore
        if gamma != 1.0:
            color = color.pow(1.0 / gamma)
        if contrast != 1.0:
            color = (color - 0.5) * contrast + 0.5
        draw_quad((color * brightness).clamp(0.0, 1.0), density)
