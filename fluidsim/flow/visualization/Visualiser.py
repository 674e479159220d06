"""Conversion of display fields to presentable images."""

import numpy as np
import torch

from fluidsim.gpu import Texture


class Visualizer:
    """Turns a display texture into an 8-bit RGB image.

    Single channel textures are shown as grey, two channel textures put the
    second channel in green. Values are expected in [0, 1] and clamped.
    """

    @staticmethod
    def to_tensor(texture: Texture) -> torch.Tensor:
        """(H, W, 3) float tensor with the top row first, on the texture's device."""
        if not texture.allocated or texture.tensor is None:
            raise RuntimeError("Visualizer: texture not allocated")
        data = texture.tensor
        if data.shape[0] == 1:
            data = data.expand(3, -1, -1)
        elif data.shape[0] == 2:
            data = torch.cat((data, torch.zeros_like(data[0:1])), dim=0)
        else:
            data = data[0:3]
        return data.flip(1).permute(1, 2, 0).clamp(0.0, 1.0)

    @staticmethod
    def to_image(texture: Texture) -> np.ndarray:
        """(H, W, 3) uint8 RGB image with the top row first."""
        image = Visualizer.to_tensor(texture)
        return (image * 255.0 + 0.5).to(torch.uint8).cpu().numpy()
