"""
Sample filtering for noisy power-supply readings.
Keeps a sliding window of timestamped values and derives a mean and a
per-hour rate of change from it.
"""

import time
from collections import deque
from dataclasses import dataclass

MAX_SAMPLES = 60
MIN_RATE_HORIZON = 60.0  # seconds between oldest and newest sample


@dataclass(frozen=True)
class Sample:
    value: float
    timestamp: float


class RateFilter:
    """
    Fixed-size window of samples (oldest evicted first).

    - mean() smooths spiky instrument readings (power_now, current_now)
    - rate() differentiates a capacity series when no instrument is available
    """

    def __init__(self, name: str = "", capacity: int = MAX_SAMPLES, clock=time.monotonic):
        self.name = name
        self._clock = clock
        self._samples = deque(maxlen=capacity)

    def __len__(self) -> int:
        return len(self._samples)

    @property
    def capacity(self) -> int:
        return self._samples.maxlen

    def append(self, value: float):
        """Record a value stamped with the current monotonic time."""
        self._samples.append(Sample(value, self._clock()))

    def mean(self) -> float:
        """Arithmetic mean of the retained samples, 0.0 when empty."""
        if not self._samples:
            return 0.0
        return sum(s.value for s in self._samples) / len(self._samples)

    def rate(self, min_horizon: float = MIN_RATE_HORIZON):
        """
        Rate of change per hour between the oldest and newest sample.

        Returns:
            Signed rate, or None with fewer than two samples or when the
            samples span less than min_horizon seconds.
        """
        if len(self._samples) < 2:
            return None

        oldest = self._samples[0]
        newest = self._samples[-1]
        elapsed = newest.timestamp - oldest.timestamp
        if elapsed < min_horizon:
            return None

        return (newest.value - oldest.value) / elapsed * 3600.0

    def reset(self):
        self._samples.clear()


class RateFilters:
    """The four filters fed by one battery, one per attribute family."""

    def __init__(self, clock=time.monotonic):
        self.energy = RateFilter("energy", clock=clock)
        self.charge = RateFilter("charge", clock=clock)
        self.power = RateFilter("power", clock=clock)
        self.current = RateFilter("current", clock=clock)

    def capacity_filter(self, uses_charge: bool) -> RateFilter:
        return self.charge if uses_charge else self.energy

    def rate_filter(self, uses_charge: bool) -> RateFilter:
        return self.current if uses_charge else self.power

    def reset(self):
        """Drop all history, e.g. after the charge direction changed."""
        for f in (self.energy, self.charge, self.power, self.current):
            f.reset()
