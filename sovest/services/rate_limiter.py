"""Minimum-interval rate limiter for the stock data provider.

The limiter is an explicit object handed to the client that needs it, so
callers can share one across threads or inject a fake clock in tests.
"""

import threading
import time
from typing import Callable


class RateLimiter:
    """Spaces calls at least `60 / calls_per_minute` seconds apart."""

    def __init__(
        self,
        calls_per_minute: int,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if calls_per_minute <= 0:
            raise ValueError("calls_per_minute must be positive")
        self.interval = 60.0 / calls_per_minute
        self._clock = clock
        self._sleep = sleep
        self._last_call: float | None = None
        self._lock = threading.Lock()

    def wait(self) -> float:
        """Block until the next call is allowed. Returns the seconds waited."""
        with self._lock:
            waited = 0.0
            if self._last_call is not None:
                remaining = self.interval - (self._clock() - self._last_call)
                if remaining > 0:
                    self._sleep(remaining)
                    waited = remaining
            self._last_call = self._clock()
            return waited


__all__ = ["RateLimiter"]
