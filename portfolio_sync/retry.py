"""
Retry policy for upstream fetches.

plan_retry is a pure function deciding, for one failed attempt, whether to
try again and how long to wait first. run_with_retry drives an operation
through tenacity using that decision, so the policy can be tested without
real time passing.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar

from tenacity import AsyncRetrying, RetryCallState, stop_after_attempt

from .exceptions import ContentSourceError, MaxRetriesExceeded, RateLimitError

logger = logging.getLogger(__name__)

T = TypeVar("T")

BACKOFF_BASE = 2  # seconds, raised to the attempt number
RATE_LIMIT_MAX_WAIT = 60.0  # only wait out resets closer than this


@dataclass(frozen=True)
class RetryDecision:
    retry: bool
    delay: float = 0.0
    reason: str = ""


def plan_retry(attempt: int, error: BaseException, now: float) -> RetryDecision:
    """
    Decide what to do after attempt number `attempt` (1-based) failed.

    - Rate limit with a reset less than a minute away: wait until the reset
    - Other client errors (4xx): give up
    - Anything else (5xx, network, bad payload): back off 2**attempt seconds

    `now` is the current epoch time in seconds.
    """
    if isinstance(error, RateLimitError) and error.rate_limit_reset:
        wait = error.rate_limit_reset / 1000 - now
        if 0 < wait < RATE_LIMIT_MAX_WAIT:
            return RetryDecision(retry=True, delay=wait, reason="rate_limit")

    if isinstance(error, ContentSourceError) and error.is_client_error:
        return RetryDecision(retry=False, reason="client_error")

    return RetryDecision(retry=True, delay=float(BACKOFF_BASE ** attempt), reason="backoff")


async def run_with_retry(
    operation: Callable[[], Awaitable[T]],
    *,
    max_attempts: int = 3,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    clock: Callable[[], float] = time.time,
    description: str = "request",
) -> T:
    """
    Run `operation` until it succeeds or the policy gives up.

    Raises the last error when attempts run out, or MaxRetriesExceeded
    when the final attempt ended in a rate limit that was being waited out.
    Errors the policy refuses to retry propagate immediately.
    """

    def decide(retry_state: RetryCallState) -> RetryDecision:
        error = retry_state.outcome.exception()
        return plan_retry(retry_state.attempt_number, error, clock())

    def should_retry(retry_state: RetryCallState) -> bool:
        if not retry_state.outcome.failed:
            return False
        return decide(retry_state).retry

    def wait(retry_state: RetryCallState) -> float:
        return decide(retry_state).delay

    def log_retry(retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception()
        logger.warning(
            f"{description} attempt {retry_state.attempt_number}/{max_attempts} failed: "
            f"{error}; retrying in {retry_state.upcoming_sleep:.1f}s"
        )

    def exhausted(retry_state: RetryCallState):
        error = retry_state.outcome.exception()
        logger.error(f"{description} failed after {retry_state.attempt_number} attempts: {error}")
        if decide(retry_state).reason == "rate_limit":
            raise MaxRetriesExceeded() from error
        raise error

    retrying = AsyncRetrying(
        stop=stop_after_attempt(max_attempts),
        retry=should_retry,
        wait=wait,
        sleep=sleep,
        before_sleep=log_retry,
        retry_error_callback=exhausted,
    )
    return await retrying(operation)
