from dataclasses import dataclass
from typing import Callable

from ..FluidConfig import FluidConfig
from ..FluidFields import FieldSet
from ..shaders import Foam
from .SolverStage import FrameContext, SolverStage, per_frame


@dataclass(frozen=True)
class FoamParams:
    decay: float
    level_threshold: float
    speed_threshold: float
    level_gain: float
    speed_gain: float


@dataclass(frozen=True)
class Measure:
    """Field and channel to measure, channel None means vector length."""
    field: str
    channel: int | None = None


class FoamStage(SolverStage):
    """Display-only accumulation of foam (ocean) or glow (smoke)."""

    def __init__(self, field: str, level: Measure, speed: Measure,
                 params: Callable[[FluidConfig], FoamParams]) -> None:
        super().__init__(tuple(dict.fromkeys((level.field, speed.field))), (field,))
        self._field: str = field
        self._level: Measure = level
        self._speed: Measure = speed
        self._params: Callable[[FluidConfig], FoamParams] = params
        self._foam_shader: Foam = Foam()
        self._shaders = [self._foam_shader]

    def enabled(self, frame: FrameContext) -> bool:
        return frame.step > 0.0

    def apply(self, dt: float, fields: FieldSet, frame: FrameContext) -> None:
        params: FoamParams = self._params(frame.config)
        foam = fields.swap(self._field)
        foam.begin()
        self._foam_shader.use(
            foam.texture,
            fields.texture(self._level.field), self._level.channel,
            fields.texture(self._speed.field), self._speed.channel,
            per_frame(params.decay, frame.step),
            params.level_threshold,
            params.speed_threshold,
            params.level_gain,
            params.speed_gain,
            frame.step
        )
        foam.end()
        foam.swap()
