"""Ocean surface stages: wave propagation and surface normals."""

import math

from ..FluidFields import FieldSet
from ..shaders import WaveNormal, WaveUpdate
from .SolverStage import FrameContext, SolverStage, per_frame

# The explicit update is stable up to one reference frame per step at wave_speed 0.5
MAX_WAVE_STEP: float = 1.0


def wave_substeps(step: float) -> int:
    return max(1, math.ceil(step / MAX_WAVE_STEP))


class WaveStage(SolverStage):
    """Advance the height / vertical velocity surface with the damped wave equation.

    Frames longer than MAX_WAVE_STEP reference frames run as equal substeps.
    """

    def __init__(self, surface: str = 'surface') -> None:
        super().__init__((surface,), (surface,))
        self._surface: str = surface
        self._wave_shader: WaveUpdate = WaveUpdate()
        self._shaders = [self._wave_shader]

    def enabled(self, frame: FrameContext) -> bool:
        return frame.step > 0.0

    def apply(self, dt: float, fields: FieldSet, frame: FrameContext) -> None:
        config = frame.config
        surface = fields.swap(self._surface)
        substeps: int = wave_substeps(frame.step)
        step: float = frame.step / substeps
        damping: float = per_frame(config.wave_damping, step)  # type: ignore[attr-defined]

        for i in range(substeps):
            surface.begin()
            self._wave_shader.use(
                surface.texture,
                config.wave_speed,                              # type: ignore[attr-defined]
                damping,
                config.wave_ambient,                            # type: ignore[attr-defined]
                frame.time + i * dt / substeps,
                step
            )
            surface.end()
            surface.swap()


class NormalStage(SolverStage):
    """Derive packed surface normals from the height channel."""

    def __init__(self, surface: str = 'surface', normal: str = 'normal') -> None:
        super().__init__((surface,), (normal,))
        self._surface: str = surface
        self._normal: str = normal
        self._normal_shader: WaveNormal = WaveNormal()
        self._shaders = [self._normal_shader]

    def reset(self, fields: FieldSet, frame: FrameContext) -> None:
        # a zeroed normal field is not a valid normal, start from the flat surface
        self.apply(0.0, fields, frame)

    def apply(self, dt: float, fields: FieldSet, frame: FrameContext) -> None:
        normal = fields.single(self._normal)
        normal.begin()
        self._normal_shader.use(fields.texture(self._surface))
        normal.end()
