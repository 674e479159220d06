
from .FluidConfig import FluidConfig, SmokeConfig, OceanConfig, SimpleConfig, REFERENCE_DELTA_TIME
from .FluidFields import FieldSpec, FieldSet
from .Source import Source
from .Splat import Splat, SplatQueue
from .FluidEngine import FluidEngine, GridSizeError, EngineStateError
from .variants import VARIANTS, VariantBase, FluidVariant, SmokeVariant, OceanVariant, SimpleVariant
