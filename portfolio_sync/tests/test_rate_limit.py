"""
Tests for the outbound RateLimiter.
"""

import asyncio

import pytest

from portfolio_sync.rate_limit import RateLimiter, inbound_limit


class TestRateLimiter:
    """Tests for RateLimiter.wait_if_needed."""

    @pytest.mark.asyncio
    async def test_first_request_does_not_wait(self, clock):
        limiter = RateLimiter(min_interval=1.0, clock=clock, sleep=clock.sleep)
        await limiter.wait_if_needed()
        assert clock.sleeps == []
        assert limiter.last_request == clock.now

    @pytest.mark.asyncio
    async def test_back_to_back_requests_wait_full_interval(self, clock):
        limiter = RateLimiter(min_interval=1.0, clock=clock, sleep=clock.sleep)
        await limiter.wait_if_needed()
        await limiter.wait_if_needed()
        assert clock.sleeps == [pytest.approx(1.0)]

    @pytest.mark.asyncio
    async def test_waits_only_the_remainder(self, clock):
        limiter = RateLimiter(min_interval=1.0, clock=clock, sleep=clock.sleep)
        await limiter.wait_if_needed()
        clock.advance(0.25)
        await limiter.wait_if_needed()
        assert clock.sleeps == [pytest.approx(0.75)]

    @pytest.mark.asyncio
    async def test_no_wait_after_interval_elapsed(self, clock):
        limiter = RateLimiter(min_interval=1.0, clock=clock, sleep=clock.sleep)
        await limiter.wait_if_needed()
        clock.advance(5)
        await limiter.wait_if_needed()
        assert clock.sleeps == []

    @pytest.mark.asyncio
    async def test_records_time_after_waiting(self, clock):
        """The recorded time is taken after the sleep, not before."""
        limiter = RateLimiter(min_interval=1.0, clock=clock, sleep=clock.sleep)
        await limiter.wait_if_needed()
        start = clock.now
        await limiter.wait_if_needed()
        assert limiter.last_request == pytest.approx(start + 1.0)

    @pytest.mark.asyncio
    async def test_overlapping_callers_are_spaced_out(self, clock):
        """Two callers arriving together each get their own full interval."""
        limiter = RateLimiter(min_interval=1.0, clock=clock, sleep=clock.sleep)
        await limiter.wait_if_needed()
        start = clock.now

        async def released_at() -> float:
            await limiter.wait_if_needed()
            return clock.now

        first, second = await asyncio.gather(released_at(), released_at())

        assert clock.sleeps == [pytest.approx(1.0), pytest.approx(1.0)]
        assert first == pytest.approx(start + 1.0)
        assert second == pytest.approx(start + 2.0)


class TestInboundLimit:
    """Tests for the per-client API limit."""

    def test_limit_from_config(self, monkeypatch):
        from portfolio_sync.config import config
        monkeypatch.setattr(config, "RATE_LIMIT_PER_MINUTE", 30)
        assert inbound_limit() == "30/minute"

    def test_zero_disables_limit(self, monkeypatch):
        from portfolio_sync.config import config
        monkeypatch.setattr(config, "RATE_LIMIT_PER_MINUTE", 0)
        assert inbound_limit() is None
