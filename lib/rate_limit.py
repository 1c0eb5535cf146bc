# =============================================================================
# lib/rate_limit.py - Fixed-Window Rate Limiting
# =============================================================================
# Counts requests per client key inside fixed time windows. When a window
# elapses its counter starts again from zero.
#
# The counters live behind the RateLimitStore interface:
# - InMemoryRateLimitStore: a dict in this process. Only correct for a
#   single-instance deployment.
# - RedisRateLimitStore: INCR + PEXPIRE NX in one transaction on a shared
#   Redis, so every API instance sees the same counts.
#
# Usage:
#   limiter = RateLimiter(InMemoryRateLimitStore(), max_requests=100, window_seconds=60)
#   decision = await limiter.hit("203.0.113.7")
#   if decision.limited:
#       ...  # respond 429 with Retry-After: decision.retry_after
# =============================================================================

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Protocol

import redis.asyncio as aioredis

logger = logging.getLogger(__name__)


class RateLimitStore(Protocol):
    """Storage contract for fixed-window counters."""

    async def increment(self, key: str, window_ms: int) -> int:
        """
        Count one request for `key` and return the count in the current window.

        If no window is open for the key, or the open one has expired, a new
        window of `window_ms` milliseconds starts and the count is 1.
        """
        ...


# =============================================================================
# In-Process Store
# =============================================================================

@dataclass
class _Window:
    count: int
    reset_at_ms: float


class InMemoryRateLimitStore:
    """
    Window counters held in a process-local dict.

    increment() never awaits between reading and writing the table, so under
    the event loop's cooperative scheduling one request's update always
    completes before another's starts.
    """

    # Expired windows are swept once the table grows past this many keys
    PRUNE_THRESHOLD = 10_000

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._windows: dict[str, _Window] = {}

    def _now_ms(self) -> float:
        return self._clock() * 1000

    async def increment(self, key: str, window_ms: int) -> int:
        now = self._now_ms()
        window = self._windows.get(key)

        if window is None or now > window.reset_at_ms:
            if len(self._windows) >= self.PRUNE_THRESHOLD:
                self._prune(now)
            window = _Window(count=0, reset_at_ms=now + window_ms)
            self._windows[key] = window

        window.count += 1
        return window.count

    def _prune(self, now: float) -> None:
        expired = [k for k, w in self._windows.items() if now > w.reset_at_ms]
        for k in expired:
            del self._windows[k]
        logger.debug(f"Pruned {len(expired)} expired rate-limit windows")

    def reset(self) -> None:
        """Forget every window."""
        self._windows.clear()

    def __len__(self) -> int:
        return len(self._windows)


# =============================================================================
# Redis Store
# =============================================================================

class RedisRateLimitStore:
    """
    Window counters shared through Redis.

    INCR and PEXPIRE NX run in one MULTI transaction: the first INCR of a
    window creates the key and sets its expiry, later ones leave the expiry
    alone, and the key disappears (resetting the window) when it lapses.
    PEXPIRE NX needs Redis 7 or newer.
    """

    def __init__(self, client: aioredis.Redis, prefix: str = "ratelimit:"):
        self._client = client
        self._prefix = prefix

    @classmethod
    def from_url(cls, url: str, prefix: str = "ratelimit:") -> RedisRateLimitStore:
        """Create a store connected to the Redis at `url`."""
        return cls(aioredis.from_url(url), prefix=prefix)

    async def increment(self, key: str, window_ms: int) -> int:
        redis_key = f"{self._prefix}{key}"
        async with self._client.pipeline(transaction=True) as pipe:
            count, _ = await pipe.incr(redis_key).pexpire(redis_key, window_ms, nx=True).execute()
        return int(count)

    async def close(self) -> None:
        await self._client.aclose()


# =============================================================================
# Limiter
# =============================================================================

@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of counting one request."""
    limited: bool
    count: int
    limit: int
    retry_after: int  # seconds

    @property
    def remaining(self) -> int:
        return max(self.limit - self.count, 0)


class RateLimiter:
    """
    Fixed-window limiter: at most `max_requests` per key per window.

    The request that pushes the count past the maximum, and every one after
    it until the window resets, is limited.
    """

    def __init__(
        self,
        store: RateLimitStore,
        max_requests: int = 100,
        window_seconds: int = 60,
    ):
        self.store = store
        self.max_requests = max_requests
        self.window_seconds = window_seconds

    async def hit(self, key: str) -> RateLimitDecision:
        """Count a request from `key` and decide whether it is allowed."""
        count = await self.store.increment(key, self.window_seconds * 1000)
        limited = count > self.max_requests

        if limited:
            logger.warning(f"Rate limit exceeded for {key} ({count}/{self.max_requests})")

        return RateLimitDecision(
            limited=limited,
            count=count,
            limit=self.max_requests,
            retry_after=self.window_seconds,
        )
