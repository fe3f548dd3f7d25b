"""In-memory fixed-window rate limiting keyed by client address.

The counter table lives for the lifetime of the process and is not shared
between workers. A window starts with a client's first request and is
replaced, not slid, once it expires.

Client key resolution order:

1. ``X-Forwarded-For`` - leftmost entry
2. ``X-Real-IP``
3. ``"unknown"`` - every client without proxy headers shares this key
"""

import logging
import math
import time
from collections.abc import Callable
from dataclasses import dataclass

from fastapi import Request

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 30
DEFAULT_WINDOW_SECONDS = 60.0

UNKNOWN_CLIENT = "unknown"


@dataclass
class RateLimitEntry:
    """Request count for one client key within its current window."""

    count: int
    reset_at: float


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of a single rate-limit check.

    Attributes:
        allowed: Whether the request may proceed.
        retry_after: Whole seconds until the window resets (0 when allowed).
    """

    allowed: bool
    retry_after: int = 0


class FixedWindowRateLimiter:
    """Allow ``limit`` requests per key in each ``window_seconds`` window."""

    def __init__(
        self,
        limit: int = DEFAULT_LIMIT,
        window_seconds: float = DEFAULT_WINDOW_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._hits: dict[str, RateLimitEntry] = {}

    def hit(self, key: str) -> RateLimitDecision:
        """Record a request for ``key`` and decide whether it is allowed.

        Rejected requests are not counted.
        """
        now = self._clock()
        entry = self._hits.get(key)

        if entry is None or now > entry.reset_at:
            self._hits[key] = RateLimitEntry(count=1, reset_at=now + self.window_seconds)
            return RateLimitDecision(allowed=True)

        if entry.count >= self.limit:
            retry_after = max(1, math.ceil(entry.reset_at - now))
            return RateLimitDecision(allowed=False, retry_after=retry_after)

        entry.count += 1
        return RateLimitDecision(allowed=True)

    def reset(self) -> None:
        """Forget all counters."""
        self._hits.clear()


def get_client_key(request: Request) -> str:
    """Derive the rate-limit key for a request from its proxy headers."""
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first

    real_ip = request.headers.get("x-real-ip")
    if real_ip and real_ip.strip():
        return real_ip.strip()

    return UNKNOWN_CLIENT


# Module-level singleton instance
_rate_limiter: FixedWindowRateLimiter | None = None


def get_rate_limiter() -> FixedWindowRateLimiter:
    """Get or create the process-wide rate limiter.

    Returns:
        The FixedWindowRateLimiter instance.
    """
    global _rate_limiter
    if _rate_limiter is None:
        _rate_limiter = FixedWindowRateLimiter()
        logger.info(
            f"Rate limiter initialized: {_rate_limiter.limit} requests "
            f"per {_rate_limiter.window_seconds:.0f}s per client"
        )
    return _rate_limiter
