"""Flow utility functions for field operations."""

import torch

from fluidsim.gpu import Fbo, SwapFbo, Texture


class FlowUtil:
    """Static utility methods for flow field operations."""

    @staticmethod
    def zero(fbo: Fbo | SwapFbo) -> None:
        """Clear a field to zero, both buffers for a SwapFbo."""
        if isinstance(fbo, SwapFbo):
            fbo.clear_all(0.0)
        else:
            fbo.clear(0.0)

    @staticmethod
    def set(dst_fbo: SwapFbo, src: Texture, strength: float = 1.0) -> None:
        """Replace target with attenuated source.

        Args:
            dst_fbo: Target field
            src: Source texture, may be dst_fbo's own read buffer
            strength: Attenuation factor (1.0 = full copy, 0.0 = clear)
        """
        if not hasattr(FlowUtil, '_scale_shader'):
            from .shaders.Scale import Scale
            FlowUtil._scale_shader = Scale()
            FlowUtil._scale_shader.allocate()

        dst_fbo.begin()
        FlowUtil._scale_shader.use(src, strength)
        dst_fbo.end()
        dst_fbo.swap()

    # METRICS (host side readback, for tests and diagnostics)
    @staticmethod
    def divergence(velocity: Texture) -> torch.Tensor:
        """Central difference divergence of a velocity field, shaped (1, H, W)."""
        from .fluid.shaders.Divergence import divergence
        return divergence(velocity.tensor) # type: ignore

    @staticmethod
    def mean_abs_divergence(velocity: Texture) -> float:
        return float(FlowUtil.divergence(velocity).abs().mean().item())

    @staticmethod
    def total(texture: Texture) -> float:
        """Sum of all cells and channels."""
        return float(texture.tensor.sum().item()) # type: ignore

    @staticmethod
    def max_abs(texture: Texture) -> float:
        return float(texture.tensor.abs().max().item()) # type: ignore

    @staticmethod
    def is_finite(texture: Texture) -> bool:
        return bool(torch.isfinite(texture.tensor).all().item()) # type: ignore
