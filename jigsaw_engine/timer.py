"""Elapsed-time tracking for a running puzzle."""

import logging
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)


def format_time(seconds: int) -> str:
    """Format whole seconds as MM:SS (minutes keep growing past 99)."""
    mins, secs = divmod(int(seconds), 60)
    return f"{mins:02d}:{secs:02d}"


class GameTimer:
    """Wall-clock based elapsed-time counter.

    The host calls :meth:`tick` periodically (nominally once per second). Each
    tick adds the real time since the previous tick, so late or missed ticks do
    not lose time.
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None):
        """Initialize the timer.

        Args:
            clock: Monotonic clock returning seconds. Defaults to time.monotonic.
        """
        self._clock = clock or time.monotonic
        self._elapsed = 0.0
        self._last_timestamp: Optional[float] = None

    @property
    def running(self) -> bool:
        return self._last_timestamp is not None

    @property
    def elapsed(self) -> float:
        """Accumulated seconds up to the last tick, start or stop."""
        return self._elapsed

    @property
    def elapsed_seconds(self) -> int:
        return int(self._elapsed)

    def start(self) -> None:
        """Start counting, discarding any previous tick source."""
        if self.running:
            logger.debug("Timer restarted while running")
        self._last_timestamp = self._clock()

    def tick(self) -> float:
        """Fold the time since the last tick into the elapsed total."""
        if self._last_timestamp is not None:
            now = self._clock()
            self._elapsed += max(0.0, now - self._last_timestamp)
            self._last_timestamp = now
        return self._elapsed

    def stop(self) -> None:
        """Stop counting. Time since the last tick is kept."""
        self.tick()
        self._last_timestamp = None

    def reset(self) -> None:
        """Stop and zero the counter."""
        self._last_timestamp = None
        self._elapsed = 0.0
