"""Throttling for the unauthenticated order log.

Counters are kept per (client, storefront) pair so that a burst aimed at one
business does not use up another storefront's allowance for the same client.
"""
from __future__ import annotations

import math
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from threading import Lock
from typing import Callable

DEFAULT_LIMIT = 30
DEFAULT_WINDOW_SECONDS = 60
MAX_TRACKED_WINDOWS = 10_000


@dataclass
class RateLimitDecision:
    allowed: bool
    limit: int
    remaining: int
    retry_after_seconds: int


@dataclass
class _Window:
    opened_at: float
    hits: int = 0


class RateLimiterService(ABC):
    @abstractmethod
    def check(self, *, client: str, storefront: str) -> RateLimitDecision:
        """Count one order from ``client`` against ``storefront`` and decide."""


class InMemoryRateLimiterService(RateLimiterService):
    """Fixed-window counters held in process memory."""

    def __init__(
        self,
        *,
        limit: int = DEFAULT_LIMIT,
        window_seconds: int = DEFAULT_WINDOW_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        max_tracked: int = MAX_TRACKED_WINDOWS,
    ) -> None:
        self.limit = limit
        self.window_seconds = window_seconds
        self.max_tracked = max_tracked
        self._clock = clock
        self._windows: dict[tuple[str, str], _Window] = {}
        self._lock = Lock()

    def check(self, *, client: str, storefront: str) -> RateLimitDecision:
        now = self._clock()
        with self._lock:
            window = self._windows.get((client, storefront))
            if window is None or self._expired(window, now):
                if len(self._windows) >= self.max_tracked:
                    self._forget_expired(now)
                window = _Window(opened_at=now)
                self._windows[(client, storefront)] = window

            if window.hits >= self.limit:
                closes_in = window.opened_at + self.window_seconds - now
                return RateLimitDecision(False, self.limit, 0, max(1, math.ceil(closes_in)))

            window.hits += 1
            return RateLimitDecision(True, self.limit, self.limit - window.hits, 0)

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()

    def _expired(self, window: _Window, now: float) -> bool:
        return now - window.opened_at >= self.window_seconds

    def _forget_expired(self, now: float) -> None:
        stale = [key for key, window in self._windows.items() if self._expired(window, now)]
        for key in stale:
            del self._windows[key]
