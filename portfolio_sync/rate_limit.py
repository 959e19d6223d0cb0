"""
Rate limiting in both directions.

- RateLimiter: minimum delay between outbound requests to one upstream
- limiter: per-client limit on the content API itself (slowapi)
"""

import asyncio
import time
from typing import Awaitable, Callable

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from fastapi import Request
from fastapi.responses import JSONResponse

from .config import config, RATE_LIMIT_DELAY


class RateLimiter:
    """Ensures at least min_interval seconds between request starts."""

    def __init__(
        self,
        min_interval: float = RATE_LIMIT_DELAY,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._last_request = 0.0
        self._lock = asyncio.Lock()

    async def wait_if_needed(self) -> None:
        """Sleep out the remainder of the interval, then record now."""
        async with self._lock:
            elapsed = self._clock() - self._last_request
            if elapsed < self.min_interval:
                await self._sleep(self.min_interval - elapsed)
            self._last_request = self._clock()

    @property
    def last_request(self) -> float:
        return self._last_request


# ─────────────────────────────────────────────────────────────
# Inbound API limiting
# ─────────────────────────────────────────────────────────────

def inbound_limit() -> str | None:
    """Per-client limit string for slowapi, or None when RATE_LIMIT_PER_MINUTE <= 0."""
    per_minute = config.RATE_LIMIT_PER_MINUTE
    if per_minute <= 0:
        return None
    return f"{per_minute}/minute"


_inbound_limit = inbound_limit()

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[_inbound_limit] if _inbound_limit else [],
    enabled=_inbound_limit is not None,
    storage_uri="memory://",
)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    retry_after = str(getattr(exc, "retry_after", 60))
    return JSONResponse(
        status_code=429,
        content={"detail": f"Too many requests to the content API ({exc.detail})"},
        headers={"Retry-After": retry_after},
    )


def setup_rate_limiting(app):
    """Attach the per-client limiter to the content API."""
    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
