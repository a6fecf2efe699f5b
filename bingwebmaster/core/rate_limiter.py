"""
Per-client request admission over a rolling 60-second window.
"""

from __future__ import annotations

import threading
import time
from collections import deque
from typing import Callable, Deque

WINDOW_SECONDS = 60.0


class RateLimitWindow:
    """
    Admits at most ``max_requests_per_minute`` requests in any rolling
    60-second window. Rejected requests are not queued.
    """

    def __init__(
        self,
        *,
        max_requests_per_minute: int,
        enabled: bool = True,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.enabled = enabled
        self.max_requests_per_minute = max(1, max_requests_per_minute)
        self._clock = clock
        self._admitted: Deque[float] = deque()
        self._lock = threading.Lock()

    def _expire(self, now: float) -> None:
        while self._admitted and now - self._admitted[0] >= WINDOW_SECONDS:
            self._admitted.popleft()

    def try_admit(self) -> bool:
        """
        Record an admission and return True, or return False when the
        window is full.
        """

        if not self.enabled:
            return True

        with self._lock:
            now = self._clock()
            self._expire(now)
            if len(self._admitted) >= self.max_requests_per_minute:
                return False
            self._admitted.append(now)
            return True

    @property
    def count(self) -> int:
        """Admissions currently inside the window."""
        with self._lock:
            self._expire(self._clock())
            return len(self._admitted)

    def seconds_until_available(self) -> float:
        with self._lock:
            now = self._clock()
            self._expire(now)
            if len(self._admitted) < self.max_requests_per_minute:
                return 0.0
            return max(0.0, WINDOW_SECONDS - (now - self._admitted[0]))
