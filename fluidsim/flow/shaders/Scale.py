"""Scale shader.

Scalar multiplication, used for fading and for replacing a field with an
attenuated copy of another.
"""

from fluidsim.gpu import Shader, Texture, draw_quad


class Scale(Shader):
    """Multiply texture by a scalar."""

    def use(self, src: Texture, scale: float) -> None:
        """Multiply source texture by scale.

        Args:
            src: Source texture
            scale: Multiplier value
        """
        if not self.ready(src): return
        draw_quad(src.tensor * scale, src)
