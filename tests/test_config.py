"""Tests for config clamping, locking, snapshots and change notification."""

import math

import pytest

from fluidsim.flow.fluid import FluidConfig, OceanConfig, SimpleConfig, SmokeConfig
from fluidsim.flow.fluid.FluidConfig import MAX_SPLAT_RADIUS, REFERENCE_DELTA_TIME


class TestDefaults:

    def test_fluid_defaults(self):
        config = FluidConfig()
        assert config.vel_dissipation == 0.98
        assert config.prs_iterations == 20
        assert config.splats_per_frame == 5
        assert config.max_delta_time == pytest.approx(REFERENCE_DELTA_TIME)

    def test_variant_overrides(self):
        assert SmokeConfig().prs_iterations == 30
        assert OceanConfig().splat_radius == 0.1
        assert SimpleConfig().display_gamma == 2.2
        assert isinstance(SmokeConfig(), FluidConfig)


class TestClamp:

    def test_init_values_clamped(self):
        config = FluidConfig(vel_dissipation=2.0, prs_iterations=-3)
        assert config.vel_dissipation == 1.0
        assert config.prs_iterations == 0

    def test_assignment_clamped(self):
        config = FluidConfig()
        config.splat_radius = 5.0
        assert config.splat_radius == MAX_SPLAT_RADIUS
        config.max_delta_time = -1.0
        assert config.max_delta_time == 0.0

    def test_unclamped_out_of_range_warns(self):
        with pytest.warns(UserWarning):
            SmokeConfig(tmp_ambient=50.0)

    @pytest.mark.parametrize('name', ['vel_dissipation', 'max_delta_time', 'splat_radius'])
    def test_nan_assignment_rejected(self, name):
        config = FluidConfig()
        before = getattr(config, name)
        with pytest.raises(ValueError):
            setattr(config, name, math.nan)
        assert getattr(config, name) == before

    def test_nan_init_rejected(self):
        with pytest.raises(ValueError):
            FluidConfig(vel_dissipation=math.nan)
        with pytest.raises(ValueError):
            SmokeConfig(tmp_ambient=math.nan)


class TestLocking:

    def test_fixed_field(self):
        config = FluidConfig(splat_capacity=16)
        assert config.splat_capacity == 16
        with pytest.raises(AttributeError):
            config.splat_capacity = 32

    def test_undeclared_attribute(self):
        config = FluidConfig()
        with pytest.raises(AttributeError):
            config.viscosity = 0.1


class TestSnapshot:

    def test_snapshot_is_independent(self):
        config = FluidConfig()
        snapshot = config.snapshot()
        config.vel_vorticity = 5.0
        assert snapshot.vel_vorticity == 30.0
        assert type(snapshot) is FluidConfig

    def test_snapshot_has_no_listeners(self):
        config = FluidConfig()
        calls = []
        config.watch(lambda: calls.append(1))
        snapshot = config.snapshot()
        snapshot.vel_vorticity = 1.0
        assert calls == []

    def test_snapshot_keeps_fixed_fields(self):
        snapshot = FluidConfig().snapshot()
        with pytest.raises(AttributeError):
            snapshot.splat_capacity = 1


class TestWatch:

    def test_watch_all(self):
        config = FluidConfig()
        calls = []
        unwatch = config.watch(lambda: calls.append('changed'))
        config.den_dissipation = 0.5
        unwatch()
        config.den_dissipation = 0.6
        assert calls == ['changed']

    def test_watch_attribute_receives_clamped_value(self):
        config = FluidConfig()
        values = []
        config.watch(values.append, 'prs_iterations')
        config.prs_iterations = 500
        assert values == [100]

    def test_watch_unknown_attribute(self):
        with pytest.raises(AttributeError):
            FluidConfig().watch(lambda value: None, 'nope')


class TestInfo:

    def test_info_metadata(self):
        info = FluidConfig().info('prs_iterations')
        assert info['label'] == 'Pressure Iterations'
        assert info['min'] == 0 and info['max'] == 100
        assert info['clamp'] is True
        assert info['default'] == 20

    def test_generated_label(self):
        assert FluidConfig().info('vel_dissipation')['label'] == 'Vel Dissipation'
