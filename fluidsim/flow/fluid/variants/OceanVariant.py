from fluidsim.gpu import TextureFormat
from fluidsim.flow.visualization.shaders import OceanDisplay
from ..FluidConfig import FluidConfig, OceanConfig
from ..FluidFields import FieldSpec
from ..stages import (
    DisplayStage, FoamParams, FoamStage, FrameContext, Measure, NormalStage,
    SolverStage, SplatStage, WaveStage, splat_height
)
from .VariantBase import VariantBase


def foam_params(config: FluidConfig) -> FoamParams:
    return FoamParams(
        decay=config.foam_decay,                        # type: ignore[attr-defined]
        level_threshold=config.foam_height_threshold,   # type: ignore[attr-defined]
        speed_threshold=config.foam_speed_threshold,    # type: ignore[attr-defined]
        level_gain=config.foam_height_gain,             # type: ignore[attr-defined]
        speed_gain=config.foam_speed_gain,              # type: ignore[attr-defined]
    )


def ocean_uniforms(frame: FrameContext) -> dict[str, float]:
    return {'time': frame.time, 'brightness': frame.config.display_brightness}


class OceanVariant(VariantBase):
    """Height field ocean. Splats are impacts on the surface.

    The surface field holds height in R and vertical velocity in G.

    Pipeline:
        1. Wave propagation
        2. Impacts (at most splats_per_frame)
        3. Normals
        4. Foam
        5. Display
    """

    name = 'ocean'
    config_class = OceanConfig

    def field_specs(self) -> list[FieldSpec]:
        return [
            FieldSpec('surface',    TextureFormat.RG32F),
            FieldSpec('foam',       TextureFormat.R32F),
            FieldSpec('normal',     TextureFormat.RGB32F, double_buffered=False),
            FieldSpec('display',    TextureFormat.RGB32F, double_buffered=False),
        ]

    def build_stages(self) -> list[SolverStage]:
        return [
            WaveStage(),
            SplatStage({'surface': splat_height}),
            NormalStage(),
            FoamStage('foam', Measure('surface', 0), Measure('surface', 1), foam_params),
            DisplayStage(OceanDisplay(), ('surface', 'normal', 'foam'), ocean_uniforms),
        ]
