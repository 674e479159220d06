"""Device-resident float textures backed by torch tensors.

Storage layout is (channels, height, width), float32. Row 0 is the bottom of the
domain (v = 0), matching GL texture coordinates.
"""

import logging
from enum import Enum

import numpy as np
import torch

from fluidsim.gpu.Device import get_device


class AllocationError(RuntimeError):
    """Raised when a texture cannot be created on the requested device."""


class TextureFormat(Enum):
    R32F =      1
    RG32F =     2
    RGB32F =    3
    RGBA32F =   4

    @property
    def channels(self) -> int:
        return self.value


class Texture():
    def __init__(self) -> None :
        self.allocated = False
        self.width: int = 0
        self.height: int = 0
        self.internal_format: TextureFormat | None = None
        self.device: torch.device | None = None
        self.tensor: torch.Tensor | None = None

    @property
    def channels(self) -> int:
        if self.internal_format is None:
            return 0
        return self.internal_format.channels

    def allocate(self, width: int, height: int, internal_format: TextureFormat,
                 device: torch.device | str | None = None) -> None :
        """Allocate a zero-filled texture.

        Args:
            width: Texture width in cells
            height: Texture height in cells
            internal_format: Channel layout, always stored as float32
            device: Torch device, defaults to get_device()

        Raises:
            AllocationError: If the device cannot hold the texture.
        """
        if self.allocated:
            self.deallocate()

        try:
            target: torch.device = get_device(device)
            tensor = torch.zeros((internal_format.channels, height, width), dtype=torch.float32, device=target)
        # torch builds without CUDA raise AssertionError for cuda devices
        except (RuntimeError, MemoryError, AssertionError) as e:
            logging.error(f"Texture: failed to allocate {width}x{height} {internal_format.name} on {device}: {e}")
            raise AllocationError(f"cannot allocate {width}x{height} {internal_format.name} on {device}") from e

        self.width = width
        self.height = height
        self.internal_format = internal_format
        self.device = target
        self.tensor = tensor
        self.allocated = True

    def deallocate(self) -> None :
        if not self.allocated: return
        self.allocated = False
        self.width = 0
        self.height = 0
        self.internal_format = None
        self.device = None
        self.tensor = None

    def clear(self, value: float = 0.0) -> None :
        if not self.allocated: return
        self.tensor.fill_(value) # type: ignore

    def read(self) -> np.ndarray:
        """Copy the texture to host memory as (height, width, channels)."""
        if not self.allocated or self.tensor is None:
            raise RuntimeError("Texture: read from unallocated texture")
        return self.tensor.permute(1, 2, 0).detach().cpu().numpy().copy()

    def write(self, data: np.ndarray | torch.Tensor) -> None:
        """Upload (height, width, channels) or (height, width) data.

        Raises:
            ValueError: If the data shape does not match the texture.
        """
        if not self.allocated or self.tensor is None:
            raise RuntimeError("Texture: write to unallocated texture")
        source = torch.as_tensor(data, dtype=torch.float32)
        if source.dim() == 2:
            source = source.unsqueeze(-1)
        if tuple(source.shape) != (self.height, self.width, self.channels):
            raise ValueError(f"Texture: expected shape {(self.height, self.width, self.channels)}, got {tuple(source.shape)}")
        self.tensor.copy_(source.permute(2, 0, 1).to(self.device))
