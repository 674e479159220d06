from dataclasses import dataclass


@dataclass(frozen=True)
class Source:
    """Continuous emitter, applied every frame until removed.

    Each frame adds color * density * dt to density, temperature * dt to temperature
    and velocity * 0.5 * dt to velocity, all weighted by a Gaussian of the given radius.
    """
    u: float
    v: float
    velocity: tuple[float, float] = (0.0, 0.0)
    color: tuple[float, float, float] = (1.0, 1.0, 1.0)
    temperature: float = 0.0
    density: float = 1.0
    radius: float = 0.04
