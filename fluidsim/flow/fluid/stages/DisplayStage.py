from typing import Any, Callable

from fluidsim.gpu import Shader
from ..FluidFields import FieldSet
from .SolverStage import FrameContext, SolverStage


class DisplayStage(SolverStage):
    """Map simulation fields to the display field. Never writes simulation state.

    uniforms returns the shader's keyword arguments for a frame.
    """

    def __init__(self, shader: Shader, inputs: tuple[str, ...],
                 uniforms: Callable[[FrameContext], dict[str, Any]], display: str = 'display') -> None:
        super().__init__(inputs, (display,))
        self._display: str = display
        self._display_shader: Shader = shader
        self._uniforms: Callable[[FrameContext], dict[str, Any]] = uniforms
        self._shaders = [shader]

    def reset(self, fields: FieldSet, frame: FrameContext) -> None:
        self.apply(0.0, fields, frame)

    def apply(self, dt: float, fields: FieldSet, frame: FrameContext) -> None:
        display = fields.single(self._display)
        display.begin()
        self._display_shader.use(*(fields.texture(name) for name in self.inputs), **self._uniforms(frame)) # type: ignore[attr-defined]
        display.end()
