"""OceanDisplay shader - Lit ocean surface composite.

Depth colour ramp, Lambert diffuse, Blinn specular, a subsurface term, foam,
distance fog, then Reinhard tone mapping and gamma.
"""

import math

import torch

from fluidsim.gpu import Shader, Texture, draw_quad
from fluidsim.gpu.Sampling import length, tex_coords, vec

DEEP_COLOR =        (0.004, 0.016, 0.047)
SHALLOW_COLOR =     (0.02, 0.1, 0.2)
SURFACE_COLOR =     (0.05, 0.2, 0.3)
SUBSURFACE_COLOR =  (0.0, 0.3, 0.4)
SPECULAR_COLOR =    (1.0, 1.0, 0.9)
FOAM_COLOR =        (0.9, 0.95, 1.0)
FOG_COLOR =         (0.7, 0.8, 0.9)
VIEW_POSITION =     (0.5, 0.5, 1.0)
LIGHT_ROTATION_SPEED: float = 0.1


def _mix(a: torch.Tensor, b: torch.Tensor, t: torch.Tensor) -> torch.Tensor:
    return a + (b - a) * t


def light_direction(time: float) -> tuple[float, float, float]:
    """Normalised light direction, circling at LIGHT_ROTATION_SPEED rad/s."""
    angle: float = time * LIGHT_ROTATION_SPEED
    x, y, z = math.cos(angle) * 0.5, 0.8, math.sin(angle) * 0.5
    norm: float = math.sqrt(x * x + y * y + z * z)
    return x / norm, y / norm, z / norm


class OceanDisplay(Shader):

    def use(self, surface: Texture, normal: Texture, foam: Texture, time: float, brightness: float) -> None:
        """Shade the ocean.

        Args:
            surface: Height and vertical velocity (RG32F)
            normal: Packed surface normal (RGB32F)
            foam: Foam amount (R32F)
            time: Simulation time in seconds, rotates the light
            brightness: Final multiplier
        """
        if not self.ready(surface, normal, foam): return
        device = surface.device
        depth = surface.tensor[0:1] + 0.5 # type: ignore
        n = normal.tensor[0:3] * 2.0 - 1.0 # type: ignore

        color = _mix(vec(*DEEP_COLOR, device=device), vec(*SHALLOW_COLOR, device=device), (depth * 2.0 + 0.5).clamp(0.0, 1.0))
        color = _mix(color, vec(*SURFACE_COLOR, device=device), (depth * 4.0 + 0.8).clamp(0.0, 1.0))

        light = vec(*light_direction(time), device=device)
        n_dot_l = (n * light).sum(dim=0, keepdim=True).clamp(min=0.0)

        u, v = tex_coords(surface.height, surface.width, device)
        view = torch.stack((VIEW_POSITION[0] - u, VIEW_POSITION[1] - v, torch.full_like(u, VIEW_POSITION[2])), dim=0)
        view = view / length(view)
        half = light + view
        half = half / length(half)
        specular = (n * half).sum(dim=0, keepdim=True).clamp(min=0.0).pow(32.0)
        subsurface = (-n * light).sum(dim=0, keepdim=True).clamp(min=0.0).pow(3.0) * 0.5

        color = color * (0.3 + n_dot_l * 0.7)
        color = color + vec(*SUBSURFACE_COLOR, device=device) * subsurface
        color = color + vec(*SPECULAR_COLOR, device=device) * specular * 0.8
        color = _mix(color, vec(*FOAM_COLOR, device=device), foam.tensor[0:1] * 0.8) # type: ignore

        distance = torch.sqrt((u - 0.5) ** 2 + (v - 0.5) ** 2).unsqueeze(0)
        color = _mix(color, vec(*FOG_COLOR, device=device), distance * 0.2)

        color = color * brightness
        color = color / (color + 1.0)
        draw_quad(color.pow(0.45).clamp(0.0, 1.0), surface, normal, foam)
