from .VariantBase import VariantBase
from .FluidVariant import FluidVariant
from .OceanVariant import OceanVariant
from .SimpleVariant import SimpleVariant
from .SmokeVariant import SmokeVariant

VARIANTS: dict[str, type[VariantBase]] = {
    FluidVariant.name:  FluidVariant,
    SmokeVariant.name:  SmokeVariant,
    OceanVariant.name:  OceanVariant,
    SimpleVariant.name: SimpleVariant,
}
