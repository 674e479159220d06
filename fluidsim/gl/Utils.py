from time import time
import math


class FpsCounter:
    def __init__(self, numSamples: int = 120) -> None:
        self._times: list[float] = []
        self.numSamples: int = numSamples

    def tick(self) -> None:
        now: float = time()
        self._times.append(now)
        if len(self._times) > self.numSamples:
            self._times.pop(0)

    def get_fps(self) -> int:
        if len(self._times) < 2:
            return 0
        diff: float = self._times[-1] - self._times[0]
        if diff == 0:
            return 0
        return int(math.floor((len(self._times) - 1) / diff))

    def get_min_fps(self) -> int:
        """Frame rate of the slowest frame in the sample window."""
        if len(self._times) < 2:
            return 0
        longest: float = max(b - a for a, b in zip(self._times, self._times[1:]))
        if longest == 0:
            return 0
        return int(math.floor(1.0 / longest))


def fit(src_width: int | float, src_height: int | float, dst_width: int | float, dst_height: int | float) -> list[float]:
    """Largest rectangle with the source aspect ratio centred in the destination."""
    src_ratio: float = float(src_width) / float(src_height)
    dst_ratio: float = float(dst_width) / float(dst_height)

    if dst_ratio > src_ratio:
        height = float(dst_height)
        width = height * src_ratio
    else:
        width = float(dst_width)
        height = width / src_ratio

    x: float = (dst_width - width) / 2.0
    y: float = (dst_height - height) / 2.0

    return [x, y, width, height]
