"""Deterministic pseudo-random stream used for tab generation.

The stream is a pure function of the integer seed, so the same seed always
reproduces the same sequence of values on every platform that implements IEEE
double precision ``sin``.
"""

import math


class SeededRandom:
    """Sine-based pseudo-random generator keyed by an integer seed."""

    def __init__(self, seed: int):
        """Initialize the stream.

        Args:
            seed: Starting seed. Each draw advances it by one.
        """
        self.seed = seed

    def next(self) -> float:
        """Return the next value in [0, 1)."""
        x = math.sin(self.seed) * 10000
        self.seed += 1
        return x - math.floor(x)

    def uniform(self, low: float, high: float) -> float:
        """Return a value drawn uniformly from [low, high)."""
        return low + self.next() * (high - low)

    def rbool(self) -> bool:
        """Return a fair coin flip."""
        return self.next() > 0.5
