from fluidsim.gpu import TextureFormat
from fluidsim.flow.visualization.shaders import DensityDisplay
from ..FluidConfig import FluidConfig
from ..FluidFields import FieldSpec
from ..stages import (
    AdvectStage, DisplayStage, FrameContext, ProjectionStage, SolverStage,
    SplatStage, VorticityStage, splat_color, splat_impulse
)
from .VariantBase import VariantBase


def density_uniforms(frame: FrameContext) -> dict[str, float]:
    config = frame.config
    return {
        'brightness': config.display_brightness,
        'contrast': config.display_contrast,
        'gamma': config.display_gamma,
    }


class FluidVariant(VariantBase):
    """Interactive dye: splats stir velocity and colour, the fluid stays incompressible.

    Pipeline:
        1. Splats (velocity, density)
        2. Advect velocity, then density
        3. Vorticity confinement
        4. Pressure projection
        5. Display
    """

    name = 'fluid'
    config_class = FluidConfig

    def field_specs(self) -> list[FieldSpec]:
        return [
            FieldSpec('velocity',   TextureFormat.RG32F),
            FieldSpec('density',    TextureFormat.RGB32F),
            FieldSpec('pressure',   TextureFormat.R32F),
            FieldSpec('divergence', TextureFormat.R32F, double_buffered=False),
            FieldSpec('curl',       TextureFormat.R32F, double_buffered=False),
            FieldSpec('display',    TextureFormat.RGB32F, double_buffered=False),
        ]

    def build_stages(self) -> list[SolverStage]:
        return [
            SplatStage({'velocity': splat_impulse, 'density': splat_color}),
            AdvectStage('velocity', 'vel_dissipation'),
            AdvectStage('density', 'den_dissipation'),
            VorticityStage(),
            ProjectionStage(),
            DisplayStage(DensityDisplay(), ('density',), density_uniforms),
        ]
