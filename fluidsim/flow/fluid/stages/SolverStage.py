"""Base class for the passes an engine runs each frame."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from fluidsim.gpu import Shader
from ..FluidConfig import FluidConfig
from ..FluidFields import FieldSet
from ..Source import Source
from ..Splat import Splat


@dataclass(frozen=True)
class FrameContext:
    """Immutable per-frame inputs shared by every stage of one update.

    step is delta_time in reference frames, dissipation factors are raised to it.
    """
    config: FluidConfig
    delta_time: float
    step: float
    time: float
    frame: int
    aspect: float
    texel_size: tuple[float, float]
    splats: tuple[Splat, ...] = ()
    sources: tuple[Source, ...] = ()


def per_frame(factor: float, step: float) -> float:
    """Factor given per reference frame, converted to this frame's step."""
    if step == 0.0:
        return 1.0
    return factor ** step


class SolverStage(ABC):
    """One step of the simulation pipeline.

    A stage reads the fields named in inputs and writes the ones named in outputs.
    Every write goes to a scratch buffer and is swapped in after the pass ends.
    """

    def __init__(self, inputs: tuple[str, ...], outputs: tuple[str, ...]) -> None:
        self.inputs: tuple[str, ...] = inputs
        self.outputs: tuple[str, ...] = outputs
        self._shaders: list[Shader] = []

    @property
    def name(self) -> str:
        return self.__class__.__name__

    def allocate(self) -> None:
        for shader in self._shaders:
            shader.allocate()

    def deallocate(self) -> None:
        for shader in self._shaders:
            shader.deallocate()

    def enabled(self, frame: FrameContext) -> bool:
        return True

    def reset(self, fields: FieldSet, frame: FrameContext) -> None:
        """Called after the engine zeroed all fields."""

    @abstractmethod
    def apply(self, dt: float, fields: FieldSet, frame: FrameContext) -> None:
        ...
