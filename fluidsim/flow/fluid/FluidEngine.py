"""Fluid Engine - frame loop over a variant's solver stages.

Owns the fields, the pending splats and the active sources, and runs every
stage of the variant once per update(dt):

    1. Clamp dt, snapshot config, dequeue splats, snapshot sources
    2. Run stages in order, each swapping only the fields it wrote
    3. Leave the display field ready for presentation
"""

import colorsys
import itertools
import logging
import math
import random
import threading
from dataclasses import replace
from typing import Iterable

import numpy as np
import torch

from fluidsim.gpu import Texture, get_device, release_target
from fluidsim.flow.visualization.Visualiser import Visualizer
from .FluidConfig import FluidConfig, MAX_SPLAT_RADIUS, MIN_SPLAT_RADIUS, REFERENCE_DELTA_TIME
from .FluidFields import FieldSet
from .Source import Source
from .Splat import Splat, SplatQueue
from .stages import FrameContext, SolverStage
from .variants import VARIANTS, VariantBase


class GridSizeError(ValueError):
    """Raised for grid dimensions below one cell."""


class EngineStateError(RuntimeError):
    """Raised when updating after a frame failed part way; call reset() to recover."""


def _clamp(value: float, low: float, high: float) -> float:
    return min(max(float(value), low), high)


def _require_finite(kind: str, values: Iterable[float]) -> None:
    if not all(math.isfinite(value) for value in values):
        raise ValueError(f"{kind} values must be finite")


class FluidEngine:
    """Real-time 2D grid fluid simulation.

    Example:
        >>> engine = FluidEngine(256, 256, 'smoke')
        >>> engine.add_splat(0.5, 0.5, impulse=(0.0, 200.0), color=(1.0, 0.5, 0.2))
        >>> engine.update(1.0 / 60.0)
        >>> image = engine.get_image()
    """

    def __init__(self, width: int, height: int, variant: VariantBase | str = 'fluid',
                 config: FluidConfig | None = None, device: torch.device | str | None = None) -> None:
        if isinstance(width, bool) or isinstance(height, bool) or not isinstance(width, int) or not isinstance(height, int):
            raise GridSizeError(f"grid size must be integers, got {width!r} x {height!r}")
        if width < 1 or height < 1:
            raise GridSizeError(f"grid size must be at least 1 x 1, got {width} x {height}")

        if isinstance(variant, str):
            if variant not in VARIANTS:
                raise ValueError(f"unknown variant '{variant}', expected one of {', '.join(VARIANTS)}")
            variant = VARIANTS[variant]()
        self._variant: VariantBase = variant

        if config is None:
            config = variant.config_class()
        elif not isinstance(config, variant.config_class):
            raise TypeError(f"{variant.name} variant needs a {variant.config_class.__name__}, got {type(config).__name__}")
        self.config: FluidConfig = config

        self._width: int = width
        self._height: int = height
        self._aspect: float = width / height
        self._texel_size: tuple[float, float] = (1.0 / width, 1.0 / height)

        self._lock: threading.Lock = threading.Lock()
        self._splats: SplatQueue = SplatQueue(config.splat_capacity)
        self._sources: dict[int, Source] = {}
        self._sources_lock: threading.Lock = threading.Lock()
        self._source_ids = itertools.count(1)

        self._time: float = 0.0
        self._frame: int = 0
        self._state_valid: bool = True
        self._disposed: bool = False

        self._fields: FieldSet = FieldSet(variant.field_specs())
        self._stages: list[SolverStage] = variant.build_stages()
        self._validate_stages()

        self._device: torch.device = get_device(device)
        self._fields.allocate(width, height, self._device)
        try:
            for stage in self._stages:
                stage.allocate()
            self._reset_fields()
        except Exception:
            release_target()
            for stage in self._stages:
                stage.deallocate()
            self._fields.deallocate()
            raise

        self.add_default_sources()
        logging.info(f"FluidEngine: {variant.name} {width}x{height} on {self._device}")

    def _validate_stages(self) -> None:
        if self._variant.display_field not in self._fields:
            raise ValueError(f"{self._variant.name}: display field '{self._variant.display_field}' is not declared")
        for stage in self._stages:
            for name in stage.inputs + stage.outputs:
                if name not in self._fields:
                    raise ValueError(f"{self._variant.name}: stage {stage.name} uses undeclared field '{name}'")

    # ========== Properties ==========

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def aspect(self) -> float:
        return self._aspect

    @property
    def texel_size(self) -> tuple[float, float]:
        return self._texel_size

    @property
    def device(self) -> torch.device:
        return self._device

    @property
    def variant(self) -> VariantBase:
        return self._variant

    @property
    def fields(self) -> FieldSet:
        return self._fields

    @property
    def stages(self) -> list[SolverStage]:
        return list(self._stages)

    @property
    def time(self) -> float:
        return self._time

    @property
    def frame(self) -> int:
        return self._frame

    @property
    def pending_splats(self) -> int:
        return len(self._splats)

    @property
    def sources(self) -> dict[int, Source]:
        with self._sources_lock:
            return dict(self._sources)

    @property
    def disposed(self) -> bool:
        return self._disposed

    # ========== Input Methods ==========

    def add_splat(self, u: float, v: float, impulse: tuple[float, float] | float = (0.0, 0.0),
                  color: tuple[float, float, float] = (1.0, 1.0, 1.0), radius: float | None = None,
                  temperature: float = 0.0) -> bool:
        """Queue a Gaussian impulse for the next frames.

        Args:
            u, v: Position in texture coordinates, clamped to [0, 1]
            impulse: Velocity impulse, or the height impulse for the ocean
            color: Dye added at the centre
            radius: Gaussian radius, defaults to config.splat_radius, clamped to [0.01, 0.2]
            temperature: Heat added at the centre (smoke)

        Returns:
            False when the queue is full and the splat was rejected.

        Raises:
            ValueError: If any value is NaN or infinite.
        """
        if radius is None:
            radius = self.config.splat_radius
        splat = Splat(u, v, impulse, color, radius, temperature)
        _require_finite('splat', (splat.u, splat.v, splat.radius, splat.temperature, *splat.impulse, *splat.color))
        return self._splats.put(replace(
            splat,
            u=_clamp(splat.u, 0.0, 1.0),
            v=_clamp(splat.v, 0.0, 1.0),
            radius=_clamp(splat.radius, MIN_SPLAT_RADIUS, MAX_SPLAT_RADIUS),
        ))

    def add_random_splats(self, count: int, rng: random.Random | None = None) -> int:
        """Queue count splats at random positions with random hues.

        Returns:
            Number of splats accepted.
        """
        rng = rng or random.Random()
        accepted: int = 0
        for _ in range(count):
            color = colorsys.hls_to_rgb(rng.random(), 0.5, 1.0)
            impulse = ((rng.random() - 0.5) * 10.0, (rng.random() - 0.5) * 10.0)
            if self.add_splat(rng.random(), rng.random(), impulse, color, 0.1):
                accepted += 1
        return accepted

    def add_source(self, source: Source) -> int:
        """Add a continuous emitter, returns its id.

        Position and radius are clamped like a splat's.

        Raises:
            ValueError: If any value of the source is NaN or infinite.
        """
        _require_finite('source', (source.u, source.v, source.temperature, source.density, source.radius,
                                   *source.velocity, *source.color))
        source = replace(
            source,
            u=_clamp(source.u, 0.0, 1.0),
            v=_clamp(source.v, 0.0, 1.0),
            radius=_clamp(source.radius, MIN_SPLAT_RADIUS, MAX_SPLAT_RADIUS),
        )
        with self._sources_lock:
            source_id: int = next(self._source_ids)
            self._sources[source_id] = source
        return source_id

    def remove_source(self, source_id: int) -> bool:
        """Remove an emitter, returns False for unknown ids."""
        with self._sources_lock:
            return self._sources.pop(source_id, None) is not None

    def clear_sources(self) -> None:
        with self._sources_lock:
            self._sources.clear()

    def add_default_sources(self) -> list[int]:
        """Install the variant's default emitters."""
        return [self.add_source(source) for source in self._variant.default_sources()]

    # ========== Update Pipeline ==========

    def update(self, delta_time: float) -> None:
        """Advance the simulation by delta_time seconds.

        Raises:
            ValueError: If delta_time is not finite.
            EngineStateError: If a previous update failed part way.
        """
        if not math.isfinite(delta_time):
            raise ValueError(f"delta_time must be finite, got {delta_time}")

        with self._lock:
            if self._disposed:
                logging.warning("FluidEngine: update after dispose ignored")
                return
            if not self._state_valid:
                raise EngineStateError("FluidEngine: simulation state is undefined after a failed update, call reset()")

            config: FluidConfig = self.config.snapshot() # type: ignore[assignment]
            dt: float = min(max(float(delta_time), 0.0), config.max_delta_time)
            with self._sources_lock:
                sources = tuple(self._sources.values())

            frame = FrameContext(
                config=config,
                delta_time=dt,
                step=dt / REFERENCE_DELTA_TIME,
                time=self._time,
                frame=self._frame,
                aspect=self._aspect,
                texel_size=self._texel_size,
                splats=self._splats.take(config.splats_per_frame),
                sources=sources,
            )

            try:
                for stage in self._stages:
                    if stage.enabled(frame):
                        stage.apply(dt, self._fields, frame)
            except Exception:
                self._state_valid = False
                release_target()
                logging.exception(f"FluidEngine: update failed in frame {self._frame}")
                raise

            self._time += dt
            self._frame += 1

    # ========== Output ==========

    def get_display_field(self) -> Texture:
        """Display texture, valid until the next update."""
        if self._disposed:
            raise RuntimeError("FluidEngine: display field requested after dispose")
        return self._fields.texture(self._variant.display_field)

    def get_image(self) -> np.ndarray:
        """Display field as an (H, W, 3) uint8 image, top row first."""
        with self._lock:
            return Visualizer.to_image(self.get_display_field())

    # ========== Lifecycle ==========

    def _frame_context(self) -> FrameContext:
        return FrameContext(
            config=self.config.snapshot(), # type: ignore[arg-type]
            delta_time=0.0,
            step=0.0,
            time=self._time,
            frame=self._frame,
            aspect=self._aspect,
            texel_size=self._texel_size,
        )

    def _reset_fields(self) -> None:
        self._fields.zero()
        frame: FrameContext = self._frame_context()
        for stage in self._stages:
            stage.reset(self._fields, frame)

    def reset(self) -> None:
        """Zero every field and drop pending splats and sources."""
        with self._lock:
            if self._disposed:
                return
            self._splats.clear()
            self.clear_sources()
            self._time = 0.0
            self._frame = 0
            release_target()
            self._reset_fields()
            self._state_valid = True

    def dispose(self) -> None:
        """Release all fields and shaders. Waits for an update in progress."""
        with self._lock:
            if self._disposed:
                return
            self._disposed = True
            self._splats.clear()
            self.clear_sources()
            for stage in self._stages:
                stage.deallocate()
            self._fields.deallocate()
        logging.info(f"FluidEngine: {self._variant.name} disposed")

    def __enter__(self) -> 'FluidEngine':
        return self

    def __exit__(self, *exc) -> None:
        self.dispose()
