"""Tests for the engine frame loop, its inputs and its lifecycle."""

import math
import random

import numpy as np
import pytest

from fluidsim.gpu import bound_target
from fluidsim.flow import FlowUtil
from fluidsim.flow.fluid import (
    EngineStateError, FluidConfig, FluidEngine, FluidVariant, GridSizeError, SimpleConfig, SmokeConfig, Source
)
from fluidsim.flow.fluid.FluidConfig import MAX_SPLAT_RADIUS, MIN_SPLAT_RADIUS
from fluidsim.flow.fluid.stages import SolverStage

DT = 1.0 / 60.0


class FailingStage(SolverStage):
    """Binds a target, then raises while failing is set."""

    def __init__(self) -> None:
        super().__init__(('velocity',), ('velocity',))
        self.failing = True

    def apply(self, dt, fields, frame) -> None:
        fields.swap('velocity').begin()
        if self.failing:
            raise RuntimeError("stage failure")
        fields.swap('velocity').end()


class FailingVariant(FluidVariant):
    name = 'failing'

    def __init__(self) -> None:
        self.failing_stage = FailingStage()

    def build_stages(self):
        return super().build_stages() + [self.failing_stage]


class ResetFailingStage(SolverStage):
    """Keeps the fields it was reset with and raises."""

    def __init__(self) -> None:
        super().__init__((), ('velocity',))
        self.fields = None

    def reset(self, fields, frame) -> None:
        self.fields = fields
        raise RuntimeError("reset failure")

    def apply(self, dt, fields, frame) -> None:
        pass


class ResetFailingVariant(FluidVariant):
    name = 'reset-failing'

    def __init__(self) -> None:
        self.failing_stage = ResetFailingStage()

    def build_stages(self):
        return super().build_stages() + [self.failing_stage]


def fluid_engine(width: int = 32, height: int = 32, **config) -> FluidEngine:
    return FluidEngine(width, height, 'fluid', FluidConfig(**config), device='cpu')


class TestConstruction:

    @pytest.mark.parametrize('width, height', [(0, 4), (4, 0), (-1, 8)])
    def test_grid_too_small(self, width, height):
        with pytest.raises(GridSizeError):
            FluidEngine(width, height, device='cpu')

    def test_grid_not_integer(self):
        with pytest.raises(GridSizeError):
            FluidEngine(4.0, 4, device='cpu')
        assert issubclass(GridSizeError, ValueError)

    def test_unknown_variant(self):
        with pytest.raises(ValueError):
            FluidEngine(4, 4, 'lava', device='cpu')

    def test_config_of_wrong_variant(self):
        with pytest.raises(TypeError):
            FluidEngine(4, 4, 'smoke', FluidConfig(), device='cpu')

    def test_subclass_config_accepted(self):
        with FluidEngine(4, 4, 'fluid', SmokeConfig(), device='cpu') as engine:
            assert engine.config.prs_iterations == 30

    def test_geometry(self):
        with FluidEngine(48, 32, device='cpu') as engine:
            assert engine.aspect == pytest.approx(1.5)
            assert engine.texel_size == pytest.approx((1 / 48, 1 / 32))
            assert engine.fields.texture('density').width == 48
            assert engine.variant.name == 'fluid'

    def test_single_cell_grid(self):
        with FluidEngine(1, 1, device='cpu') as engine:
            engine.add_splat(0.5, 0.5, (1.0, 1.0))
            engine.update(DT)
            assert FlowUtil.is_finite(engine.fields.texture('velocity'))

    def test_failed_setup_releases_fields(self):
        variant = ResetFailingVariant()
        with pytest.raises(RuntimeError, match="reset failure"):
            FluidEngine(8, 8, variant, device='cpu')
        assert variant.failing_stage.fields is not None
        assert not variant.failing_stage.fields.allocated
        assert bound_target() is None


class TestUpdate:

    def test_zero_dt_leaves_fields_unchanged(self):
        with fluid_engine(4, 4) as engine:
            rng = np.random.default_rng(0)
            velocity = rng.standard_normal((4, 4, 2)).astype(np.float32)
            density = rng.random((4, 4, 3), dtype=np.float32)
            engine.fields.texture('velocity').write(velocity)
            engine.fields.texture('density').write(density)

            engine.update(0.0)

            np.testing.assert_array_equal(engine.fields.texture('velocity').read(), velocity)
            np.testing.assert_array_equal(engine.fields.texture('density').read(), density)
            assert engine.frame == 1
            assert engine.time == 0.0

    def test_negative_dt_is_treated_as_zero(self):
        with fluid_engine(4, 4) as engine:
            engine.fields.texture('density').write(np.ones((4, 4, 3), dtype=np.float32))
            engine.update(-1.0)
            assert np.all(engine.fields.texture('density').read() == 1.0)

    def test_large_dt_is_clamped(self):
        with fluid_engine(8, 8) as engine:
            engine.update(10.0)
            assert engine.time == pytest.approx(engine.config.max_delta_time)

    @pytest.mark.parametrize('dt', [math.nan, math.inf, -math.inf])
    def test_non_finite_dt(self, dt):
        with fluid_engine(4, 4) as engine:
            with pytest.raises(ValueError):
                engine.update(dt)
            assert engine.frame == 0

    def test_centred_splat(self):
        with fluid_engine(32, 32) as engine:
            engine.add_splat(0.5, 0.5, (0.0, 50.0), (1.0, 1.0, 1.0))
            engine.update(DT)

            speed = np.linalg.norm(engine.fields.texture('velocity').read(), axis=-1)
            row, col = np.unravel_index(np.argmax(speed), speed.shape)
            assert 14 <= row <= 17 and 14 <= col <= 17
            assert speed[0, 0] < 1e-3

            density = engine.fields.texture('density').read()
            assert density[16, 16, 0] > 0.5
            assert density[0, 0, 0] < 1e-3

    def test_projection_reduces_divergence(self):
        divergence = {}
        for iterations in (0, 30):
            with fluid_engine(64, 64, prs_iterations=iterations, vel_vorticity=0.0, splat_radius=0.1) as engine:
                engine.add_splat(0.5, 0.5, (200.0, 0.0))
                engine.update(DT)
                divergence[iterations] = FlowUtil.mean_abs_divergence(engine.fields.texture('velocity'))
        assert divergence[30] < divergence[0]

    def test_velocity_stays_bounded(self):
        with fluid_engine(32, 32, vel_vorticity=0.0, vel_dissipation=0.9) as engine:
            engine.add_random_splats(5, random.Random(7))
            engine.update(DT)
            first = FlowUtil.max_abs(engine.fields.texture('velocity'))
            for _ in range(120):
                engine.update(DT)
            velocity = engine.fields.texture('velocity')
            assert FlowUtil.is_finite(velocity)
            assert FlowUtil.max_abs(velocity) < first

    def test_vorticity_keeps_fields_finite(self):
        with fluid_engine(32, 32, vel_vorticity=100.0) as engine:
            engine.add_random_splats(5, random.Random(3))
            for _ in range(30):
                engine.update(DT)
            assert FlowUtil.is_finite(engine.fields.texture('velocity'))
            assert FlowUtil.is_finite(engine.fields.texture('density'))

    def test_default_config_decays_with_vorticity(self):
        with FluidEngine(32, 32, device='cpu') as engine:
            assert engine.config.vel_vorticity > 0.0
            engine.add_random_splats(5, random.Random(7))
            peak = 0.0
            for _ in range(10):
                engine.update(DT)
                peak = max(peak, FlowUtil.max_abs(engine.fields.texture('velocity')))
            for _ in range(300):
                engine.update(DT)
            velocity = engine.fields.texture('velocity')
            assert FlowUtil.is_finite(velocity)
            assert FlowUtil.max_abs(velocity) < 0.5 * peak

    def test_time_and_frame_advance(self):
        with fluid_engine(8, 8) as engine:
            for _ in range(3):
                engine.update(DT)
            assert engine.frame == 3
            assert engine.time == pytest.approx(3 * DT)

    def test_no_target_bound_after_update(self):
        with fluid_engine(8, 8) as engine:
            engine.add_splat(0.5, 0.5, (1.0, 0.0))
            engine.update(DT)
            assert bound_target() is None


class TestSplatInput:

    def test_splats_per_frame_cap(self):
        with fluid_engine(8, 8, splats_per_frame=2) as engine:
            for _ in range(5):
                engine.add_splat(0.5, 0.5, (1.0, 0.0))
            engine.update(0.0)
            assert engine.pending_splats == 3
            engine.update(0.0)
            engine.update(0.0)
            assert engine.pending_splats == 0

    def test_capacity(self):
        with fluid_engine(8, 8, splat_capacity=2) as engine:
            assert engine.add_splat(0.5, 0.5)
            assert engine.add_splat(0.5, 0.5)
            assert not engine.add_splat(0.5, 0.5)
            assert engine.pending_splats == 2

    def test_splat_outside_domain_is_clamped(self):
        with fluid_engine(16, 16) as engine:
            engine.add_splat(2.0, -1.0, (0.0, 0.0), (1.0, 0.0, 0.0))
            engine.update(0.0)
            density = engine.fields.texture('density').read()
            # row 0 is v = 0, the last column is u = 1
            row, col = np.unravel_index(np.argmax(density[..., 0]), density.shape[:2])
            assert (row, col) == (0, 15)

    @pytest.mark.parametrize('kwargs', [
        {'u': math.nan, 'v': 0.5},
        {'u': 0.5, 'v': math.inf},
        {'u': 0.5, 'v': 0.5, 'impulse': (math.nan, 0.0)},
        {'u': 0.5, 'v': 0.5, 'color': (1.0, math.nan, 0.0)},
        {'u': 0.5, 'v': 0.5, 'radius': math.inf},
        {'u': 0.5, 'v': 0.5, 'radius': math.nan},
        {'u': 0.5, 'v': 0.5, 'temperature': -math.inf},
    ])
    def test_non_finite_splat_rejected(self, kwargs):
        with fluid_engine(8, 8) as engine:
            with pytest.raises(ValueError):
                engine.add_splat(**kwargs)
            assert engine.pending_splats == 0

    def test_splat_radius_clamped(self):
        with fluid_engine(16, 16, splat_radius=0.05) as engine:
            engine.add_splat(0.5, 0.5, (0.0, 0.0), (1.0, 1.0, 1.0), radius=0.0)
            engine.update(0.0)
            density = engine.fields.texture('density')
            assert FlowUtil.is_finite(density)
            assert FlowUtil.total(density) > 0.0

    def test_splats_applied_in_order_across_frames(self):
        config = SimpleConfig(splats_per_frame=1)
        with FluidEngine(32, 16, 'simple', config, device='cpu') as engine:
            # columns nearest to u = 0.2, 0.5 and 0.8
            columns = [6, 16, 25]
            for u in (0.2, 0.5, 0.8):
                engine.add_splat(u, 0.5, (0.0, 0.0), (1.0, 1.0, 1.0), radius=0.05)

            for applied in range(1, 4):
                engine.update(0.0)
                assert engine.pending_splats == 3 - applied
                density = engine.fields.texture('density').read()[..., 0]
                for index, column in enumerate(columns):
                    if index < applied:
                        assert density[:, column].max() > 0.3
                    else:
                        assert density[:, column].max() < 1e-3

    def test_splats_applied_at_zero_dt(self):
        with fluid_engine(16, 16) as engine:
            engine.add_splat(0.5, 0.5, (5.0, 0.0), (1.0, 1.0, 1.0))
            engine.update(0.0)
            assert FlowUtil.total(engine.fields.texture('density')) > 0.0
            assert FlowUtil.max_abs(engine.fields.texture('velocity')) > 0.0

    def test_random_splats(self):
        with fluid_engine(8, 8) as engine:
            assert engine.add_random_splats(4, random.Random(1)) == 4
            assert engine.pending_splats == 4


class TestSources:

    def test_add_and_remove(self):
        with fluid_engine(8, 8) as engine:
            source_id = engine.add_source(Source(0.5, 0.5, color=(1.0, 0.0, 0.0)))
            assert source_id in engine.sources
            assert engine.remove_source(source_id)
            assert not engine.remove_source(source_id)

    def test_fluid_has_no_default_sources(self):
        with fluid_engine(8, 8) as engine:
            assert engine.sources == {}

    def test_source_clamped(self):
        with fluid_engine(8, 8) as engine:
            source_id = engine.add_source(Source(2.0, -0.5, radius=0.0))
            source = engine.sources[source_id]
            assert (source.u, source.v) == (1.0, 0.0)
            assert source.radius == MIN_SPLAT_RADIUS
            large = engine.sources[engine.add_source(Source(0.5, 0.5, radius=5.0))]
            assert large.radius == MAX_SPLAT_RADIUS

    def test_zero_radius_source_stays_finite(self):
        with FluidEngine(15, 15, 'smoke', device='cpu') as engine:
            engine.clear_sources()
            engine.add_source(Source(0.5, 0.5, color=(1.0, 1.0, 1.0), temperature=1.0, radius=0.0))
            engine.update(DT)
            assert FlowUtil.is_finite(engine.fields.texture('density'))
            assert FlowUtil.is_finite(engine.fields.texture('temperature'))
            assert FlowUtil.total(engine.fields.texture('density')) > 0.0

    @pytest.mark.parametrize('source', [
        Source(math.nan, 0.5),
        Source(0.5, 0.5, velocity=(math.inf, 0.0)),
        Source(0.5, 0.5, radius=math.nan),
        Source(0.5, 0.5, density=math.nan),
    ])
    def test_non_finite_source_rejected(self, source):
        with fluid_engine(8, 8) as engine:
            with pytest.raises(ValueError):
                engine.add_source(source)
            assert engine.sources == {}


class TestLifecycle:

    def test_reset(self):
        with fluid_engine(16, 16) as engine:
            engine.add_random_splats(5, random.Random(2))
            for _ in range(3):
                engine.update(DT)
            engine.add_splat(0.5, 0.5)

            engine.reset()
            engine.reset()

            assert engine.frame == 0 and engine.time == 0.0
            assert engine.pending_splats == 0
            for name in engine.fields:
                assert FlowUtil.max_abs(engine.fields.texture(name)) == 0.0

    def test_dispose(self):
        engine = fluid_engine(8, 8)
        engine.dispose()
        assert engine.disposed
        engine.update(DT)  # logged and ignored
        engine.dispose()
        engine.reset()
        with pytest.raises(RuntimeError):
            engine.get_display_field()

    def test_context_manager_disposes(self):
        with fluid_engine(8, 8) as engine:
            pass
        assert engine.disposed

    def test_failed_update_invalidates_state(self):
        variant = FailingVariant()
        with FluidEngine(8, 8, variant, device='cpu') as engine:
            with pytest.raises(RuntimeError, match="stage failure"):
                engine.update(DT)
            assert bound_target() is None
            assert engine.frame == 0

            with pytest.raises(EngineStateError):
                engine.update(DT)

            variant.failing_stage.failing = False
            engine.reset()
            engine.update(DT)
            assert engine.frame == 1


class TestDisplay:

    def test_display_field(self):
        with fluid_engine(8, 8) as engine:
            engine.add_splat(0.5, 0.5, (0.0, 0.0), (4.0, 1.0, 0.0))
            engine.update(DT)
            display = engine.get_display_field().read()
            assert display.shape == (8, 8, 3)
            assert display.min() >= 0.0 and display.max() <= 1.0
            assert display.max() > 0.0

    def test_image(self):
        with FluidEngine(48, 32, device='cpu') as engine:
            engine.add_splat(0.5, 0.9, (0.0, 0.0), (1.0, 1.0, 1.0))
            engine.update(0.0)
            image = engine.get_image()
            assert image.shape == (32, 48, 3)
            assert image.dtype == np.uint8
            # v = 0.9 is near the top, which is the first image row
            assert image[:16].sum() > image[16:].sum()
