"""Sliding-window admission control for outbound provider calls."""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from typing import Callable

GEOCODE_BUCKET = "geocode"
DISTANCE_BUCKET = "distance"

DEFAULT_LIMIT_PER_WINDOW = 60
DEFAULT_WINDOW_SECONDS = 60.0

logger = logging.getLogger(__name__)


class RateLimiter:
    """Admit at most ``limit`` calls per sliding window, tracked independently per bucket.

    The limiter never waits or retries. A denied ``try_acquire`` leaves the
    bucket untouched so the caller can fail fast or fall back.
    """

    def __init__(
        self,
        limit: int = DEFAULT_LIMIT_PER_WINDOW,
        window_seconds: float = DEFAULT_WINDOW_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if limit < 1:
            raise ValueError("Rate limit must admit at least one call per window.")
        if window_seconds <= 0:
            raise ValueError("Rate limit window must be positive.")
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._windows: dict[str, deque[float]] = {}

    def _prune(self, bucket: str, now: float) -> deque[float]:
        window = self._windows.setdefault(bucket, deque())
        cutoff = now - self.window_seconds
        while window and window[0] <= cutoff:
            window.popleft()
        return window

    def try_acquire(self, bucket: str) -> bool:
        with self._lock:
            now = self._clock()
            window = self._prune(bucket, now)
            if len(window) >= self.limit:
                logger.warning(f"Rate limit reached for bucket '{bucket}' ({self.limit}/{self.window_seconds:g}s)")
                return False
            window.append(now)
            return True

    def remaining(self, bucket: str) -> int:
        with self._lock:
            return self.limit - len(self._prune(bucket, self._clock()))

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()
