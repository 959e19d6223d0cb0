"""
Error kinds raised by the content sources.

Transport and server failures are retried by the sources; client errors
(4xx) abort immediately. See retry.plan_retry for the policy.
"""


class ContentSourceError(Exception):
    """Base error for a failed request to an upstream content source."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.message = message
        self.status = status

    @property
    def is_client_error(self) -> bool:
        return self.status is not None and 400 <= self.status < 500


class RateLimitError(ContentSourceError):
    """Upstream refused the request because the rate limit was hit.

    rate_limit_reset is the epoch time in milliseconds at which the limit
    resets, when the upstream reported one.
    """

    def __init__(
        self,
        message: str = "GitHub API rate limit exceeded",
        status: int = 403,
        rate_limit_reset: int | None = None,
    ):
        super().__init__(message, status)
        self.rate_limit_reset = rate_limit_reset


class NotFoundError(ContentSourceError):
    """The account does not exist upstream."""

    def __init__(self, message: str, status: int = 404):
        super().__init__(message, status)


class APIError(ContentSourceError):
    """Generic non-2xx response or network failure (status is None)."""
    pass


class EnvelopeError(ContentSourceError):
    """The feed conversion service reported a non-"ok" status."""
    pass


class MaxRetriesExceeded(ContentSourceError):
    """All attempts were used up without a usable response."""

    def __init__(self, message: str = "Max retries exceeded"):
        super().__init__(message)


class PayloadError(ContentSourceError):
    """The upstream answered 2xx but the body was not the expected shape."""
    pass
