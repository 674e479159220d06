from fluidsim.flow.FlowUtil import FlowUtil
from ..FluidFields import FieldSet
from ..shaders import Divergence, Gradient, JacobiPressure
from .SolverStage import FrameContext, SolverStage


class ProjectionStage(SolverStage):
    """Pressure projection, makes the velocity field (approximately) divergence free.

    1. Divergence of the current velocity
    2. Pressure cleared, then prs_iterations Jacobi iterations
    3. Pressure gradient subtracted from velocity
    """

    def __init__(self, velocity: str = 'velocity', divergence: str = 'divergence', pressure: str = 'pressure') -> None:
        super().__init__((velocity,), (velocity, divergence, pressure))
        self._velocity: str = velocity
        self._divergence: str = divergence
        self._pressure: str = pressure
        self._divergence_shader: Divergence = Divergence()
        self._jacobi_pressure_shader: JacobiPressure = JacobiPressure()
        self._gradient_shader: Gradient = Gradient()
        self._shaders = [self._divergence_shader, self._jacobi_pressure_shader, self._gradient_shader]

    def enabled(self, frame: FrameContext) -> bool:
        return frame.delta_time > 0.0

    def apply(self, dt: float, fields: FieldSet, frame: FrameContext) -> None:
        velocity = fields.swap(self._velocity)
        divergence = fields.single(self._divergence)
        pressure = fields.swap(self._pressure)

        # 1. Divergence
        divergence.begin()
        self._divergence_shader.use(velocity.texture)
        divergence.end()

        # 2. Jacobi iterations from a zero initial guess
        FlowUtil.zero(pressure)
        for _ in range(frame.config.prs_iterations):
            pressure.begin()
            self._jacobi_pressure_shader.use(pressure.texture, divergence)
            pressure.end()
            pressure.swap()

        # 3. Gradient subtraction
        velocity.begin()
        self._gradient_shader.use(velocity.texture, pressure.texture)
        velocity.end()
        velocity.swap()
