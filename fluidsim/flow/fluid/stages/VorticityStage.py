from ..FluidFields import FieldSet
from ..shaders import VorticityCurl, VorticityForce
from .SolverStage import FrameContext, SolverStage, per_frame

# Share of the per-frame velocity loss that confinement may put back. |curl| is at
# most twice the largest speed, so below 0.5 the undriven field still decays.
CONFINEMENT_SHARE: float = 0.25


def confinement_strength(frame: FrameContext) -> float:
    """vel_vorticity, limited so one frame of confinement stays below the dissipation loss."""
    config = frame.config
    cell_size: float = min(frame.texel_size)
    loss: float = 1.0 - per_frame(config.vel_dissipation, frame.step)
    limit: float = CONFINEMENT_SHARE * loss / (cell_size * frame.delta_time)
    return min(config.vel_vorticity, limit)


class VorticityStage(SolverStage):
    """Vorticity confinement, skipped when vel_vorticity is zero or velocity does not dissipate."""

    def __init__(self, velocity: str = 'velocity', curl: str = 'curl') -> None:
        super().__init__((velocity,), (velocity, curl))
        self._velocity: str = velocity
        self._curl: str = curl
        self._curl_shader: VorticityCurl = VorticityCurl()
        self._force_shader: VorticityForce = VorticityForce()
        self._shaders = [self._curl_shader, self._force_shader]

    def enabled(self, frame: FrameContext) -> bool:
        return (frame.config.vel_vorticity > 0.0
                and frame.config.vel_dissipation < 1.0
                and frame.delta_time > 0.0)

    def apply(self, dt: float, fields: FieldSet, frame: FrameContext) -> None:
        velocity = fields.swap(self._velocity)
        curl = fields.single(self._curl)

        # 1. Curl of the current velocity
        curl.begin()
        self._curl_shader.use(velocity.texture)
        curl.end()

        # 2. Confinement force added to velocity
        velocity.begin()
        self._force_shader.use(velocity.texture, curl, confinement_strength(frame), min(frame.texel_size), dt)
        velocity.end()
        velocity.swap()
