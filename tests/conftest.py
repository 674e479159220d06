"""Shared fixtures: every test runs on the CPU device with no render target left bound."""

import numpy as np
import pytest
import torch

from fluidsim.gpu import Fbo, SwapFbo, TextureFormat, release_target


@pytest.fixture
def device() -> torch.device:
    return torch.device('cpu')


@pytest.fixture(autouse=True)
def unbound_target():
    release_target()
    yield
    release_target()


@pytest.fixture
def make_fbo(device):
    """Factory for an allocated Fbo, optionally filled with (H, W, C) data."""
    def factory(width: int, height: int, fmt: TextureFormat = TextureFormat.R32F,
                data: np.ndarray | None = None) -> Fbo:
        fbo = Fbo()
        fbo.allocate(width, height, fmt, device)
        if data is not None:
            fbo.write(data)
        return fbo
    return factory


@pytest.fixture
def make_swap_fbo(device):
    """Factory for an allocated SwapFbo, the read buffer optionally filled."""
    def factory(width: int, height: int, fmt: TextureFormat = TextureFormat.R32F,
                data: np.ndarray | None = None) -> SwapFbo:
        fbo = SwapFbo()
        fbo.allocate(width, height, fmt, device)
        if data is not None:
            fbo.texture.write(data)
        return fbo
    return factory


def column_ramp(width: int, height: int) -> np.ndarray:
    """(H, W) field whose value is the column index."""
    return np.tile(np.arange(width, dtype=np.float32), (height, 1))


def row_ramp(width: int, height: int) -> np.ndarray:
    """(H, W) field whose value is the row index, row 0 at v = 0."""
    return np.tile(np.arange(height, dtype=np.float32)[:, None], (1, width))
