from abc import ABC, abstractmethod

from ..FluidConfig import FluidConfig
from ..FluidFields import FieldSpec
from ..Source import Source
from ..stages import SolverStage


class VariantBase(ABC):
    """A simulation flavour: the fields it needs and the stages it runs, in order.

    The engine owns the fields and the frame loop. A new variant only supplies a
    field list, a stage list and a config class.
    """

    name: str = ''
    config_class: type[FluidConfig] = FluidConfig
    display_field: str = 'display'

    @abstractmethod
    def field_specs(self) -> list[FieldSpec]:
        ...

    @abstractmethod
    def build_stages(self) -> list[SolverStage]:
        ...

    def default_sources(self) -> list[Source]:
        return []

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}('{self.name}')"
