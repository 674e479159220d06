from fluidsim.gpu import TextureFormat
from fluidsim.flow.visualization.shaders import DensityDisplay
from ..FluidConfig import SimpleConfig
from ..FluidFields import FieldSpec
from ..stages import DisplayStage, FadeStage, SolverStage, SplatStage, splat_color
from .FluidVariant import density_uniforms
from .VariantBase import VariantBase


class SimpleVariant(VariantBase):
    """Fading dye without transport, for checking splats and display in isolation."""

    name = 'simple'
    config_class = SimpleConfig

    def field_specs(self) -> list[FieldSpec]:
        return [
            FieldSpec('density', TextureFormat.RGB32F),
            FieldSpec('display', TextureFormat.RGB32F, double_buffered=False),
        ]

    def build_stages(self) -> list[SolverStage]:
        return [
            FadeStage('density', 'den_dissipation'),
            SplatStage({'density': splat_color}),
            DisplayStage(DensityDisplay(), ('density',), density_uniforms),
        ]
