from fluidsim.gpu import TextureFormat
from fluidsim.flow.visualization.shaders import SmokeDisplay
from ..FluidConfig import FluidConfig, SmokeConfig
from ..FluidFields import FieldSpec
from ..Source import Source
from ..stages import (
    AdvectStage, BuoyancyStage, DisplayStage, FoamParams, FoamStage, FrameContext, Measure,
    ProjectionStage, SolverStage, SourceStage, SplatStage, VorticityStage,
    splat_color, splat_impulse, splat_temperature
)
from .VariantBase import VariantBase


def glow_params(config: FluidConfig) -> FoamParams:
    return FoamParams(
        decay=config.glow_decay,                        # type: ignore[attr-defined]
        level_threshold=config.glow_level_threshold,    # type: ignore[attr-defined]
        speed_threshold=config.glow_speed_threshold,    # type: ignore[attr-defined]
        level_gain=config.glow_level_gain,              # type: ignore[attr-defined]
        speed_gain=config.glow_speed_gain,              # type: ignore[attr-defined]
    )


def smoke_uniforms(frame: FrameContext) -> dict[str, float]:
    return {'brightness': frame.config.display_brightness}


class SmokeVariant(VariantBase):
    """Buoyant coloured smoke rising from vents.

    Pipeline:
        1. Sources, then splats (velocity, density, temperature)
        2. Buoyancy
        3. Vorticity confinement
        4. Advect velocity, density, temperature
        5. Pressure projection
        6. Glow (display only)
        7. Display
    """

    name = 'smoke'
    config_class = SmokeConfig

    def field_specs(self) -> list[FieldSpec]:
        return [
            FieldSpec('velocity',       TextureFormat.RG32F),
            FieldSpec('density',        TextureFormat.RGB32F),
            FieldSpec('temperature',    TextureFormat.R32F),
            FieldSpec('pressure',       TextureFormat.R32F),
            FieldSpec('glow',           TextureFormat.R32F),
            FieldSpec('divergence',     TextureFormat.R32F, double_buffered=False),
            FieldSpec('curl',           TextureFormat.R32F, double_buffered=False),
            FieldSpec('display',        TextureFormat.RGB32F, double_buffered=False),
        ]

    def build_stages(self) -> list[SolverStage]:
        return [
            SourceStage(),
            SplatStage({'velocity': splat_impulse, 'density': splat_color, 'temperature': splat_temperature}),
            BuoyancyStage(),
            VorticityStage(),
            AdvectStage('velocity', 'vel_dissipation'),
            AdvectStage('density', 'den_dissipation'),
            AdvectStage('temperature', 'tmp_dissipation'),
            ProjectionStage(),
            FoamStage('glow', Measure('density'), Measure('velocity'), glow_params),
            DisplayStage(SmokeDisplay(), ('density', 'glow'), smoke_uniforms),
        ]

    def default_sources(self) -> list[Source]:
        return [
            Source(0.2, 0.1, velocity=(0.0, 2.0), color=(1.0, 0.2, 0.2), temperature=1.5, density=2.0, radius=0.04),
            Source(0.5, 0.1, velocity=(0.0, 2.2), color=(0.2, 1.0, 0.2), temperature=1.6, density=2.0, radius=0.04),
            Source(0.8, 0.1, velocity=(0.0, 1.8), color=(0.2, 0.2, 1.0), temperature=1.4, density=2.0, radius=0.04),
        ]
