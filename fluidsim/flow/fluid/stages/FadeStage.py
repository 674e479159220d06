from fluidsim.flow.FlowUtil import FlowUtil
from ..FluidFields import FieldSet
from .SolverStage import FrameContext, SolverStage, per_frame


class FadeStage(SolverStage):
    """Multiply a field by a per-frame dissipation factor, without transport."""

    def __init__(self, field: str, dissipation: str) -> None:
        super().__init__((field,), (field,))
        self._field: str = field
        self._dissipation: str = dissipation

    def enabled(self, frame: FrameContext) -> bool:
        return frame.step > 0.0

    def apply(self, dt: float, fields: FieldSet, frame: FrameContext) -> None:
        fbo = fields.swap(self._field)
        FlowUtil.set(fbo, fbo.texture, per_frame(getattr(frame.config, self._dissipation), frame.step))
