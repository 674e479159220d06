"""Force injection: one-shot splats and continuous sources."""

from typing import Callable

from fluidsim.flow.shaders import Splat as SplatShader
from ..FluidFields import FieldSet
from ..Splat import Splat
from .SolverStage import FrameContext, SolverStage

SplatValue = Callable[[Splat], tuple[float, ...]]


def splat_impulse(splat: Splat) -> tuple[float, ...]:
    return splat.impulse


def splat_color(splat: Splat) -> tuple[float, ...]:
    return splat.color


def splat_temperature(splat: Splat) -> tuple[float, ...]:
    return (splat.temperature,)


def splat_height(splat: Splat) -> tuple[float, ...]:
    """Height impulse, with half of it given to the vertical velocity."""
    return (splat.impulse[0], splat.impulse[0] * 0.5)


class SplatStage(SolverStage):
    """Apply this frame's splats, in arrival order, to the mapped fields."""

    def __init__(self, targets: dict[str, SplatValue]) -> None:
        super().__init__(tuple(targets), tuple(targets))
        self._targets: dict[str, SplatValue] = targets
        self._splat_shader: SplatShader = SplatShader()
        self._shaders = [self._splat_shader]

    def enabled(self, frame: FrameContext) -> bool:
        return len(frame.splats) > 0

    def apply(self, dt: float, fields: FieldSet, frame: FrameContext) -> None:
        for splat in frame.splats:
            for name, value_of in self._targets.items():
                value: tuple[float, ...] = value_of(splat)
                if not any(value):
                    continue
                fbo = fields.swap(name)
                fbo.begin()
                self._splat_shader.use(fbo.texture, (splat.u, splat.v), value, splat.radius, frame.aspect)
                fbo.end()
                fbo.swap()


class SourceStage(SolverStage):
    """Apply every active source, scaled by the frame time step."""

    def __init__(self, velocity: str = 'velocity', density: str = 'density', temperature: str | None = 'temperature') -> None:
        outputs: tuple[str, ...] = (velocity, density) if temperature is None else (velocity, density, temperature)
        super().__init__(outputs, outputs)
        self._velocity: str = velocity
        self._density: str = density
        self._temperature: str | None = temperature
        self._splat_shader: SplatShader = SplatShader()
        self._shaders = [self._splat_shader]

    def enabled(self, frame: FrameContext) -> bool:
        return len(frame.sources) > 0 and frame.delta_time > 0.0

    def apply(self, dt: float, fields: FieldSet, frame: FrameContext) -> None:
        for source in frame.sources:
            contributions: list[tuple[str, tuple[float, ...]]] = [
                (self._density, tuple(c * source.density * dt for c in source.color)),
                (self._velocity, tuple(c * 0.5 * dt for c in source.velocity)),
            ]
            if self._temperature is not None:
                contributions.append((self._temperature, (source.temperature * dt,)))

            for name, value in contributions:
                if not any(value):
                    continue
                fbo = fields.swap(name)
                fbo.begin()
                self._splat_shader.use(fbo.texture, (source.u, source.v), value, source.radius, frame.aspect)
                fbo.end()
                fbo.swap()
