"""
Format Rate Limiter — in-memory sliding window per client IP.

Process-local: windows reset on restart and are not shared between workers.
"""

from __future__ import annotations

import logging
import time
from collections import defaultdict, deque

logger = logging.getLogger(__name__)

WINDOW_SECONDS = 60.0


class FormatRateLimiter:
    """Sliding window limiter for the format endpoints."""

    def __init__(self, window_seconds: float = WINDOW_SECONDS) -> None:
        self.window_seconds = window_seconds
        # ip -> request timestamps, oldest first
        self._hits: dict[str, deque[float]] = defaultdict(deque)
        self._last_sweep = time.monotonic()

    def _sweep(self, now: float) -> None:
        """Forget IPs with no request inside the window."""
        cutoff = now - self.window_seconds
        idle = [ip for ip, hits in self._hits.items() if not hits or hits[-1] <= cutoff]
        for ip in idle:
            del self._hits[ip]
        self._last_sweep = now
        if idle:
            logger.debug("Evicted %d idle rate limit window(s)", len(idle))

    def check(self, ip: str, rpm_limit: int) -> bool:
        """Record a request from ``ip``. Returns False when it is over the limit."""
        if rpm_limit <= 0:
            return True

        now = time.monotonic()
        if now - self._last_sweep >= self.window_seconds:
            self._sweep(now)

        hits = self._hits[ip]
        while hits and hits[0] <= now - self.window_seconds:
            hits.popleft()

        if len(hits) >= rpm_limit:
            logger.warning("Format rate limit hit: %s (%d RPM)", ip, rpm_limit)
            return False

        hits.append(now)
        return True

    def __len__(self) -> int:
        """Number of IPs currently tracked."""
        return len(self._hits)

    def reset(self) -> None:
        """Clear all windows (for testing)."""
        self._hits.clear()


_rate_limiter: FormatRateLimiter | None = None


def get_rate_limiter() -> FormatRateLimiter:
    """Get or create the singleton rate limiter."""
    global _rate_limiter
    if _rate_limiter is None:
        _rate_limiter = FormatRateLimiter()
    return _rate_limiter


def reset_rate_limiter() -> None:
    """Drop the singleton (for testing)."""
    global _rate_limiter
    _rate_limiter = None
