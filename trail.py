"""Tip trails: a bounded FIFO of recent positions and the timer that fills it.

Trail sampling runs on its own wall-clock cadence, independent of both the
physics step and the frame rate. Every pendulum keeps at most
DEFAULT_CAPACITY points; the oldest point is dropped first.
"""

from __future__ import annotations

import logging
from collections import deque

import numpy as np

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 100
DEFAULT_PERIOD = 0.06


class TrailBuffer:
    """Capped history of (x, y) tip positions, oldest first."""

    def __init__(self, capacity=DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError(f"trail capacity must be at least 1, got {capacity!r}")
        self._points = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._points.maxlen

    def append(self, position):
        """Add a position, evicting the oldest one when full."""
        x, y = position
        self._points.append((float(x), float(y)))

    def clear(self):
        self._points.clear()

    def snapshot(self) -> list:
        """Positions from oldest to newest, safe to hold across frames."""
        return list(self._points)

    def as_array(self) -> np.ndarray:
        """(n, 2) float64 array of the positions, oldest first."""
        if not self._points:
            return np.empty((0, 2), dtype=np.float64)
        return np.array(self._points, dtype=np.float64)

    def __len__(self):
        return len(self._points)

    def __iter__(self):
        return iter(self._points)

    def __repr__(self):
        return f"TrailBuffer(len={len(self)}, capacity={self.capacity})"


class TrailTimer:
    """Repeating timer advanced by elapsed real time.

    tick() reports whether at least one period completed; the overshoot
    carries into the next period so the long-run cadence stays exact.
    """

    def __init__(self, period=DEFAULT_PERIOD):
        if not period > 0:
            raise ValueError(f"trail period must be positive, got {period!r}")
        self.period = period
        self.elapsed = 0.0
        self.times_finished = 0

    def tick(self, delta) -> bool:
        if delta < 0:
            raise ValueError(f"elapsed time cannot be negative, got {delta!r}")
        self.elapsed += delta
        self.times_finished = int(self.elapsed // self.period)
        if self.times_finished:
            self.elapsed -= self.times_finished * self.period
        return self.times_finished > 0

    @property
    def finished(self) -> bool:
        return self.times_finished > 0

    def reset(self):
        self.elapsed = 0.0
        self.times_finished = 0


class TrailSampler:
    """Appends every pendulum's tip to its trail when the timer fires.

    A tick that spans several periods still records a single sample, since
    the tip has only one current position.
    """

    def __init__(self, period=DEFAULT_PERIOD):
        self.timer = TrailTimer(period)
        self.samples_taken = 0

    def advance(self, delta, pendulums) -> bool:
        """Advance the timer by delta; sample all pendulums on completion."""
        if not self.timer.tick(delta):
            return False
        if self.timer.times_finished > 1:
            logger.debug(
                "Trail timer completed %d periods in one frame",
                self.timer.times_finished,
            )
        for pendulum in pendulums:
            pendulum.trail.append(pendulum.tip)
        self.samples_taken += 1
        return True
