"""
Token bucket rate limiting for calls to the reasoning service.

One bucket is shared by every worker in a batch, so the aggregate request
rate never exceeds the configured budget no matter how many threads run.
"""

import logging
import threading
import time
from typing import Callable

logger = logging.getLogger(__name__)


class TokenBucket:
    """Thread-safe token bucket.

    Args:
        requests_per_minute: Refill rate.
        capacity: Maximum number of tokens held, i.e. the allowed burst.
        clock: Monotonic time source, injectable for tests.
        sleep: Sleep function, injectable for tests.
    """

    def __init__(
        self,
        requests_per_minute: float,
        capacity: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if requests_per_minute <= 0:
            raise ValueError("requests_per_minute must be positive")
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = float(capacity)
        self.tokens = float(capacity)
        self.refill_rate = requests_per_minute / 60.0
        self._clock = clock
        self._sleep = sleep
        self._last_update = clock()
        self._lock = threading.Lock()

    def _refill(self) -> None:
        now = self._clock()
        elapsed = now - self._last_update
        self.tokens = min(self.capacity, self.tokens + elapsed * self.refill_rate)
        self._last_update = now

    def try_acquire(self) -> bool:
        """Takes a token if one is available. Never blocks."""
        with self._lock:
            self._refill()
            if self.tokens >= 1.0:
                self.tokens -= 1.0
                return True
            return False

    def time_until_token(self) -> float:
        """Seconds until a token is available."""
        with self._lock:
            self._refill()
            if self.tokens >= 1.0:
                return 0.0
            return (1.0 - self.tokens) / self.refill_rate

    def acquire(self) -> None:
        """Blocks until a token has been taken."""
        while not self.try_acquire():
            wait = self.time_until_token()
            if wait > 0:
                logger.debug("Rate limited, waiting %.2fs", wait)
                self._sleep(wait)
