"""Texture lookups shared by the kernel passes.

All tensors are (channels, height, width). Borders clamp to the edge, the same
as GL_CLAMP_TO_EDGE with linear filtering.
"""

from functools import lru_cache

import torch
import torch.nn.functional as F


@lru_cache(maxsize=16)
def tex_coords(height: int, width: int, device: torch.device) -> tuple[torch.Tensor, torch.Tensor]:
    """Cell-centre texture coordinates (u, v), each shaped (height, width)."""
    u = (torch.arange(width, dtype=torch.float32, device=device) + 0.5) / width
    v = (torch.arange(height, dtype=torch.float32, device=device) + 0.5) / height
    grid_v, grid_u = torch.meshgrid(v, u, indexing='ij')
    return grid_u, grid_v


def neighbors(t: torch.Tensor) -> tuple[torch.Tensor, torch.Tensor, torch.Tensor, torch.Tensor]:
    """Left, right, bottom and top neighbours with clamp-to-edge borders."""
    padded = F.pad(t.unsqueeze(0), (1, 1, 1, 1), mode='replicate').squeeze(0)
    left = padded[:, 1:-1, :-2]
    right = padded[:, 1:-1, 2:]
    bottom = padded[:, :-2, 1:-1]
    top = padded[:, 2:, 1:-1]
    return left, right, bottom, top


def sample(t: torch.Tensor, u: torch.Tensor, v: torch.Tensor) -> torch.Tensor:
    """Bilinear lookup of t at texture coordinates (u, v)."""
    grid = torch.stack((u * 2.0 - 1.0, v * 2.0 - 1.0), dim=-1).unsqueeze(0)
    result = F.grid_sample(t.unsqueeze(0), grid, mode='bilinear', padding_mode='border', align_corners=False)
    return result.squeeze(0)


def length(t: torch.Tensor) -> torch.Tensor:
    """Per-cell vector length, shaped (1, height, width)."""
    return torch.linalg.vector_norm(t, dim=0, keepdim=True)


def vec(*components: float, device: torch.device) -> torch.Tensor:
    """Uniform vector broadcastable against a (channels, height, width) tensor."""
    return torch.tensor(components, dtype=torch.float32, device=device).view(-1, 1, 1)
