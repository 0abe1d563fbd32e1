"""Client-side rate limiting for RPC calls."""

from __future__ import annotations

import logging
import threading
import time
from collections import deque

LOG = logging.getLogger(__name__)


class RateLimiter:
    """Sliding-window rate limiter.

    Shared between the watcher thread and the cycle worker, hence the lock.
    """

    def __init__(self, calls_per_minute: int = 120, window_seconds: float = 60.0):
        self.limit = max(1, int(calls_per_minute))
        self.window = float(window_seconds)
        self._calls: deque[float] = deque()
        self._lock = threading.Lock()

    def wait_if_needed(self) -> float:
        """Block until a call slot is free; return the total time slept."""
        slept = 0.0
        while True:
            with self._lock:
                now = time.time()
                while self._calls and self._calls[0] <= now - self.window:
                    self._calls.popleft()

                if len(self._calls) < self.limit:
                    self._calls.append(now)
                    return slept

                delay = max(0.0, self.window - (now - self._calls[0]))

            if delay > 0:
                LOG.info("Throttling RPC calls for %.2fs (limit=%d per %.0fs)", delay, self.limit, self.window)
                time.sleep(delay)
                slept += delay
