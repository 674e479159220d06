"""Foam shader - Decaying accumulation where a surface moves fast or sits high.

    foam = clamp(prev × decay + (speed × speed_gain + level × level_gain) × step, 0, 1)

The growth term only applies where speed or level exceeds its threshold.
"""

import torch

from fluidsim.gpu import Shader, Texture, draw_quad
from fluidsim.gpu.Sampling import length


def _measure(texture: Texture, channel: int | None) -> torch.Tensor:
    if channel is None:
        return length(texture.tensor) # type: ignore
    return texture.tensor[channel:channel + 1].abs() # type: ignore


class Foam(Shader):
    """Accumulate foam or glow from a level and a speed measurement."""

    def use(self, foam: Texture, level: Texture, level_channel: int | None,
            speed: Texture, speed_channel: int | None,
            decay: float, level_threshold: float, speed_threshold: float,
            level_gain: float, speed_gain: float, step: float) -> None:
        """Update foam.

        Args:
            foam: Previous foam (R32F)
            level: Texture measured for level (height, density)
            level_channel: Channel to take the absolute value of, None for vector length
            speed: Texture measured for speed (surface velocity, velocity)
            speed_channel: Channel to take the absolute value of, None for vector length
            decay: Foam multiplier for this frame
            level_threshold: Level above which foam grows
            speed_threshold: Speed above which foam grows
            level_gain: Growth per unit of level
            speed_gain: Growth per unit of speed
            step: Frame time step in reference frames
        """
        if not self.ready(foam, level, speed): return
        level_value = _measure(level, level_channel)
        speed_value = _measure(speed, speed_channel)

        active = (speed_value > speed_threshold) | (level_value > level_threshold)
        growth = torch.where(active, speed_value * speed_gain + level_value * level_gain, torch.zeros_like(level_value))
        result = (foam.tensor[0:1] * decay + growth * step).clamp(0.0, 1.0) # type: ignore
        draw_quad(result, foam, level, speed)
