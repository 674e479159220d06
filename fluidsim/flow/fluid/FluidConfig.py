"""Configuration for the fluid engine and its variants.

Dissipation and damping factors are given per reference frame of
REFERENCE_DELTA_TIME seconds. Stages raise them to dt / REFERENCE_DELTA_TIME so
the look does not depend on the frame rate.
"""
from dataclasses import dataclass

from fluidsim.ConfigBase import ConfigBase, config_field

REFERENCE_DELTA_TIME: float = 1.0 / 60.0

MIN_SPLAT_RADIUS: float = 0.01
MAX_SPLAT_RADIUS: float = 0.2


@dataclass
class FluidConfig(ConfigBase):
    """Shared solver, forcing and display parameters."""

    # Velocity parameters
    vel_dissipation: float = config_field(
        0.98, min=0.0, max=1.0, clamp=True,
        description="Velocity kept per reference frame (1.0 = no loss)")
    vel_vorticity: float = config_field(
        30.0, min=0.0, max=100.0, clamp=True, label="Vorticity",
        description="Vortex confinement strength, 0 disables the stage")

    # Pressure parameters
    prs_iterations: int = config_field(
        20, min=0, max=100, clamp=True, label="Pressure Iterations",
        description="Jacobi iterations per frame (higher = more incompressible)")

    # Density parameters
    den_dissipation: float = config_field(
        0.98, min=0.0, max=1.0, clamp=True,
        description="Density kept per reference frame (1.0 = no loss)")

    # Splat parameters
    splat_radius: float = config_field(
        0.05, min=MIN_SPLAT_RADIUS, max=MAX_SPLAT_RADIUS, clamp=True,
        description="Default Gaussian radius of a splat in texture space")
    splats_per_frame: int = config_field(
        5, min=1, max=64, clamp=True,
        description="Maximum splats applied in one frame, the rest wait in the queue")
    splat_capacity: int = config_field(
        1024, fixed=True,
        description="Maximum pending splats before new ones are rejected")

    # Timing
    max_delta_time: float = config_field(
        REFERENCE_DELTA_TIME, min=0.0, max=0.1, clamp=True,
        description="Upper bound for the frame time step in seconds")

    # Display parameters
    display_brightness: float = config_field(1.0, min=0.0, max=4.0, clamp=True)
    display_contrast: float = config_field(1.0, min=0.0, max=4.0, clamp=True)
    display_gamma: float = config_field(
        1.0, min=0.1, max=4.0, clamp=True,
        description="Display gamma, the output is raised to 1 / gamma")


@dataclass
class SmokeConfig(FluidConfig):
    """Buoyant smoke driven by continuous vents."""

    vel_dissipation: float = config_field(0.98, min=0.0, max=1.0, clamp=True)
    vel_vorticity: float = config_field(20.0, min=0.0, max=100.0, clamp=True, label="Vorticity")
    prs_iterations: int = config_field(30, min=0, max=100, clamp=True, label="Pressure Iterations")
    den_dissipation: float = config_field(0.97, min=0.0, max=1.0, clamp=True)

    # Temperature parameters
    tmp_dissipation: float = config_field(
        0.96, min=0.0, max=1.0, clamp=True,
        description="Temperature kept per reference frame")
    tmp_buoyancy: float = config_field(
        0.05, min=0.0, max=10.0, clamp=True, label="Buoyancy",
        description="Thermal lift coefficient: hot air rises")
    tmp_weight: float = config_field(
        0.02, min=0.0, max=10.0, clamp=True, label="Density Weight",
        description="Downward pull per unit of smoke density")
    tmp_ambient: float = config_field(
        0.0, min=-10.0, max=10.0,
        description="Reference temperature (buoyancy = 0 at this temp)")

    # Glow (display only)
    glow_decay: float = config_field(0.9, min=0.0, max=1.0, clamp=True)
    glow_speed_threshold: float = config_field(1.0, min=0.0, max=100.0)
    glow_level_threshold: float = config_field(0.5, min=0.0, max=100.0)
    glow_speed_gain: float = config_field(0.05, min=0.0, max=10.0)
    glow_level_gain: float = config_field(0.1, min=0.0, max=10.0)


@dataclass
class OceanConfig(FluidConfig):
    """Height field ocean with impacts and foam."""

    splat_radius: float = config_field(0.1, min=MIN_SPLAT_RADIUS, max=MAX_SPLAT_RADIUS, clamp=True)
    splats_per_frame: int = config_field(3, min=1, max=64, clamp=True)

    wave_damping: float = config_field(
        0.98, min=0.0, max=1.0, clamp=True,
        description="Vertical velocity kept per reference frame")
    wave_speed: float = config_field(
        0.5, min=0.0, max=0.5, clamp=True,
        description="Laplacian coupling, 0.5 is the stability limit")
    wave_ambient: float = config_field(
        0.001, min=0.0, max=0.1, clamp=True,
        description="Amplitude of the ambient swell")

    foam_decay: float = config_field(0.95, min=0.0, max=1.0, clamp=True)
    foam_speed_threshold: float = config_field(0.02, min=0.0, max=10.0)
    foam_height_threshold: float = config_field(0.1, min=0.0, max=10.0)
    foam_speed_gain: float = config_field(5.0, min=0.0, max=100.0)
    foam_height_gain: float = config_field(2.0, min=0.0, max=100.0)


@dataclass
class SimpleConfig(FluidConfig):
    """Fade and splat only, used as a minimal rig."""

    den_dissipation: float = config_field(0.985, min=0.0, max=1.0, clamp=True)
    display_brightness: float = config_field(1.5, min=0.0, max=4.0, clamp=True)
    display_gamma: float = config_field(2.2, min=0.1, max=4.0, clamp=True)
