from ..FluidFields import FieldSet
from ..shaders import Advect
from .SolverStage import FrameContext, SolverStage, per_frame


class AdvectStage(SolverStage):
    """Transport a field along the velocity field and dissipate it.

    Advecting 'velocity' itself is self-advection: the pass reads the current
    velocity both as source and as flow and writes the scratch buffer.
    """

    def __init__(self, field: str, dissipation: str | None = None, velocity: str = 'velocity') -> None:
        super().__init__((field, velocity), (field,))
        self._field: str = field
        self._velocity: str = velocity
        self._dissipation: str | None = dissipation
        self._advect_shader: Advect = Advect()
        self._shaders = [self._advect_shader]

    def enabled(self, frame: FrameContext) -> bool:
        return frame.delta_time > 0.0

    def apply(self, dt: float, fields: FieldSet, frame: FrameContext) -> None:
        dissipation: float = 1.0
        if self._dissipation is not None:
            dissipation = per_frame(getattr(frame.config, self._dissipation), frame.step)

        fbo = fields.swap(self._field)
        fbo.begin()
        self._advect_shader.use(
            fbo.texture,                        # Source (read buffer)
            fields.texture(self._velocity),     # Velocity
            frame.texel_size,
            dt,
            dissipation
        )
        fbo.end()
        fbo.swap()
