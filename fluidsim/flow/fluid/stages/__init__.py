"""Solver stages, composed by the variants into per-frame pipelines."""

from .SolverStage import SolverStage, FrameContext, per_frame
from .AdvectStage import AdvectStage
from .BuoyancyStage import BuoyancyStage
from .DisplayStage import DisplayStage
from .FadeStage import FadeStage
from .FoamStage import FoamStage, FoamParams, Measure
from .ProjectionStage import ProjectionStage
from .SplatStage import SplatStage, SourceStage, splat_color, splat_height, splat_impulse, splat_temperature
from .VorticityStage import VorticityStage, confinement_strength
from .WaveStage import WaveStage, NormalStage, wave_substeps
