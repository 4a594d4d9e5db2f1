"""
Rate Limiter - Fixed-window request counter per client key.

Each key gets a window that opens on its first request and lasts
window_seconds. Requests beyond max_requests inside the window are
rejected until the window expires, then the count starts over.
"""
import math
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional


@dataclass
class Window:
    started_at: float
    count: int = 0


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    limit: int
    remaining: int
    reset_after: float

    @property
    def retry_after(self) -> int:
        """Whole seconds until the window resets (at least 1)."""
        return max(1, math.ceil(self.reset_after))


class FixedWindowRateLimiter:
    """Thread-safe per-key fixed-window rate limiter."""

    def __init__(
        self,
        max_requests: int = 100,
        window_seconds: float = 15 * 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: Dict[str, Window] = {}
        self._lock = threading.Lock()
        self._last_purge = clock()

    def hit(self, key: str) -> RateLimitDecision:
        """Count one request for key and decide whether it may proceed."""
        now = self._clock()
        with self._lock:
            if now - self._last_purge >= self.window_seconds:
                self._purge(now)

            window = self._windows.get(key)
            if window is None or now - window.started_at >= self.window_seconds:
                window = Window(started_at=now)
                self._windows[key] = window

            window.count += 1
            reset_after = window.started_at + self.window_seconds - now

            return RateLimitDecision(
                allowed=window.count <= self.max_requests,
                limit=self.max_requests,
                remaining=max(0, self.max_requests - window.count),
                reset_after=reset_after,
            )

    def _purge(self, now: float) -> None:
        expired = [
            key for key, window in self._windows.items()
            if now - window.started_at >= self.window_seconds
        ]
        for key in expired:
            del self._windows[key]
        self._last_purge = now

    def reset(self, key: Optional[str] = None) -> None:
        """Forget one key, or every key."""
        with self._lock:
            if key is None:
                self._windows.clear()
            else:
                self._windows.pop(key, None)
