from ..FluidFields import FieldSet
from ..shaders import Buoyancy
from .SolverStage import FrameContext, SolverStage


class BuoyancyStage(SolverStage):
    """Hot air rises, dense smoke sinks. Reads tmp_buoyancy, tmp_weight and tmp_ambient."""

    def __init__(self, velocity: str = 'velocity', temperature: str = 'temperature', density: str = 'density') -> None:
        super().__init__((velocity, temperature, density), (velocity,))
        self._velocity: str = velocity
        self._temperature: str = temperature
        self._density: str = density
        self._buoyancy_shader: Buoyancy = Buoyancy()
        self._shaders = [self._buoyancy_shader]

    def enabled(self, frame: FrameContext) -> bool:
        return frame.delta_time > 0.0

    def apply(self, dt: float, fields: FieldSet, frame: FrameContext) -> None:
        config = frame.config
        velocity = fields.swap(self._velocity)
        velocity.begin()
        self._buoyancy_shader.use(
            velocity.texture,
            fields.texture(self._temperature),
            fields.texture(self._density),
            config.tmp_buoyancy,    # type: ignore[attr-defined]
            config.tmp_weight,      # type: ignore[attr-defined]
            config.tmp_ambient,     # type: ignore[attr-defined]
            dt
        )
        velocity.end()
        velocity.swap()
