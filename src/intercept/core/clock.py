"""Simulated clock and host frame-rate tracking."""

from __future__ import annotations

import time
from collections import deque
from typing import Callable


class SimClock:
    """Deterministic clock for reproducible simulation and testing.

    Time only advances when :meth:`step` or :meth:`set_elapsed` are called.

    Args:
        start_epoch: Initial epoch time (what ``now()`` returns at
            ``elapsed=0``).  Defaults to ``0.0``.
    """

    def __init__(self, start_epoch: float = 0.0):
        self._start_epoch = start_epoch
        self._elapsed = 0.0

    def now(self) -> float:
        """Current simulated epoch time."""
        return self._start_epoch + self._elapsed

    def elapsed(self) -> float:
        """Simulated seconds since clock was created or reset."""
        return self._elapsed

    def step(self, dt: float) -> None:
        """Advance simulated time by *dt* seconds.

        Raises:
            ValueError: If *dt* is negative.
        """
        if dt < 0:
            raise ValueError(f"SimClock.step() requires dt >= 0, got {dt}")
        self._elapsed += dt

    def set_elapsed(self, elapsed: float) -> None:
        """Set the elapsed time directly.

        Raises:
            ValueError: If *elapsed* is negative.
        """
        if elapsed < 0:
            raise ValueError(
                f"SimClock.set_elapsed() requires elapsed >= 0, got {elapsed}"
            )
        self._elapsed = elapsed

    def reset(self) -> None:
        self._elapsed = 0.0

    @property
    def start_epoch(self) -> float:
        """The epoch time that corresponds to ``elapsed=0``."""
        return self._start_epoch


class FrameTimer:
    """Rolling frame-rate estimate over the last *window_size* host frames.

    Reads wall-clock time from *time_source* (``time.monotonic`` unless a
    callable is injected, e.g. by tests).
    """

    def __init__(
        self,
        window_size: int = 30,
        time_source: Callable[[], float] = time.monotonic,
    ):
        if window_size < 2:
            raise ValueError(f"window_size must be >= 2, got {window_size}")
        self._time_source = time_source
        self._stamps: deque[float] = deque(maxlen=window_size)

    def tick(self) -> None:
        """Record that a host frame happened now."""
        self._stamps.append(self._time_source())

    @property
    def frame_count(self) -> int:
        return len(self._stamps)

    @property
    def fps(self) -> float:
        """Frames per second across the window, 0 until two frames exist."""
        if len(self._stamps) < 2:
            return 0.0
        span = self._stamps[-1] - self._stamps[0]
        if span <= 0:
            return 0.0
        return (len(self._stamps) - 1) / span

    def reset(self) -> None:
        self._stamps.clear()
