"""One-shot Gaussian impulses and the bounded queue that feeds them to the solver."""

import logging
import queue
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Splat:
    """A Gaussian impulse at texture coordinates (u, v).

    A scalar impulse is stored as (impulse, 0.0); height field variants read the
    first component only.
    """
    u: float
    v: float
    impulse: tuple[float, float] = (0.0, 0.0)
    color: tuple[float, float, float] = (1.0, 1.0, 1.0)
    radius: float = 0.05
    temperature: float = 0.0

    def __post_init__(self) -> None:
        if isinstance(self.impulse, (int, float)):
            object.__setattr__(self, 'impulse', (float(self.impulse), 0.0))
        else:
            object.__setattr__(self, 'impulse', tuple(float(c) for c in self.impulse))
        object.__setattr__(self, 'color', tuple(float(c) for c in self.color))


@dataclass
class SplatQueue:
    """Thread-safe FIFO of pending splats with a fixed capacity.

    Input threads put(), the update loop takes a capped batch each frame.
    """
    capacity: int = 1024
    _queue: queue.Queue = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._queue = queue.Queue(maxsize=self.capacity)

    def __len__(self) -> int:
        return self._queue.qsize()

    def put(self, splat: Splat) -> bool:
        """Enqueue a splat, returns False when the queue is full."""
        try:
            self._queue.put_nowait(splat)
        except queue.Full:
            logging.warning(f"SplatQueue: full ({self.capacity} pending), splat rejected")
            return False
        return True

    def take(self, limit: int) -> tuple[Splat, ...]:
        """Dequeue at most limit splats in arrival order."""
        batch: list[Splat] = []
        while len(batch) < limit:
            try:
                batch.append(self._queue.get_nowait())
            except queue.Empty:
                break
        return tuple(batch)

    def clear(self) -> None:
        while True:
            try:
                self._queue.get_nowait()
            except queue.Empty:
                return
