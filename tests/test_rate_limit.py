# =============================================================================
# tests/test_rate_limit.py - Tests for Fixed-Window Rate Limiting
# =============================================================================

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from lib.rate_limit import (
    InMemoryRateLimitStore,
    RateLimitDecision,
    RateLimiter,
    RedisRateLimitStore,
)


class FakeClock:
    """Manually advanced monotonic clock (seconds)."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return InMemoryRateLimitStore(clock=clock)


def hit_many(limiter: RateLimiter, key: str, times: int) -> list[RateLimitDecision]:
    async def run():
        return [await limiter.hit(key) for _ in range(times)]
    return asyncio.run(run())


# =============================================================================
# In-Memory Store
# =============================================================================

class TestInMemoryRateLimitStore:
    """Tests for process-local window counters."""

    def test_counts_within_window(self, store):
        async def run():
            return [await store.increment("1.2.3.4", 60_000) for _ in range(3)]

        assert asyncio.run(run()) == [1, 2, 3]

    def test_keys_are_independent(self, store):
        async def run():
            await store.increment("a", 60_000)
            await store.increment("a", 60_000)
            return await store.increment("b", 60_000)

        assert asyncio.run(run()) == 1

    def test_window_resets_after_expiry(self, store, clock):
        async def run():
            await store.increment("a", 60_000)
            await store.increment("a", 60_000)
            clock.advance(61)
            return await store.increment("a", 60_000)

        assert asyncio.run(run()) == 1

    def test_window_still_open_at_boundary(self, store, clock):
        async def run():
            await store.increment("a", 60_000)
            clock.advance(60)
            return await store.increment("a", 60_000)

        assert asyncio.run(run()) == 2

    def test_prunes_expired_windows(self, clock, monkeypatch):
        store = InMemoryRateLimitStore(clock=clock)
        monkeypatch.setattr(InMemoryRateLimitStore, "PRUNE_THRESHOLD", 3)

        async def run():
            for key in ("a", "b", "c"):
                await store.increment(key, 1_000)
            clock.advance(5)
            await store.increment("d", 1_000)

        asyncio.run(run())
        assert len(store) == 1

    def test_reset(self, store):
        asyncio.run(store.increment("a", 60_000))
        store.reset()
        assert len(store) == 0


# =============================================================================
# Redis Store
# =============================================================================

class TestRedisRateLimitStore:
    """Tests for the shared Redis store using a mocked client."""

    @staticmethod
    def make_client(count: int):
        pipe = MagicMock()
        pipe.incr.return_value = pipe
        pipe.pexpire.return_value = pipe
        pipe.execute = AsyncMock(return_value=[count, True])

        client = MagicMock()
        client.pipeline.return_value.__aenter__.return_value = pipe
        return client, pipe

    def test_incr_and_expiry_sent_in_one_transaction(self):
        client, pipe = self.make_client(1)
        store = RedisRateLimitStore(client)

        count = asyncio.run(store.increment("1.2.3.4", 60_000))

        assert count == 1
        client.pipeline.assert_called_once_with(transaction=True)
        pipe.incr.assert_called_once_with("ratelimit:1.2.3.4")
        pipe.pexpire.assert_called_once_with("ratelimit:1.2.3.4", 60_000, nx=True)
        pipe.execute.assert_awaited_once()

    def test_later_hits_do_not_extend_window(self):
        client, pipe = self.make_client(5)
        store = RedisRateLimitStore(client, prefix="amc:")

        count = asyncio.run(store.increment("1.2.3.4", 60_000))

        assert count == 5
        pipe.incr.assert_called_once_with("amc:1.2.3.4")
        # NX leaves an existing expiry untouched
        pipe.pexpire.assert_called_once_with("amc:1.2.3.4", 60_000, nx=True)

    def test_close(self):
        client = AsyncMock()
        asyncio.run(RedisRateLimitStore(client).close())
        client.aclose.assert_awaited_once()


# =============================================================================
# Limiter
# =============================================================================

class TestRateLimiter:
    """Tests for the count-and-compare decision."""

    def test_allows_up_to_maximum(self, store):
        limiter = RateLimiter(store, max_requests=100, window_seconds=60)

        decisions = hit_many(limiter, "1.2.3.4", 100)

        assert not any(d.limited for d in decisions)
        assert decisions[-1].remaining == 0

    def test_limits_request_past_maximum(self, store):
        limiter = RateLimiter(store, max_requests=100, window_seconds=60)

        decisions = hit_many(limiter, "1.2.3.4", 102)

        assert decisions[100].limited
        assert decisions[101].limited
        assert decisions[100].retry_after == 60

    def test_other_clients_unaffected(self, store):
        limiter = RateLimiter(store, max_requests=2, window_seconds=60)
        hit_many(limiter, "a", 5)

        assert not hit_many(limiter, "b", 1)[0].limited

    def test_allowed_again_after_window(self, store, clock):
        limiter = RateLimiter(store, max_requests=2, window_seconds=60)
        assert hit_many(limiter, "a", 3)[-1].limited

        clock.advance(61)

        decision = hit_many(limiter, "a", 1)[0]
        assert not decision.limited
        assert decision.count == 1
        assert decision.remaining == 1
