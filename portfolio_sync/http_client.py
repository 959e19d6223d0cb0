"""
HTTP transport for the content sources.

Handles:
- GET/HEAD requests with a per-request timeout
- Wrapping network failures as status-less APIError
- Mapping upstream status codes to typed errors
"""

import asyncio
import json
import logging
from dataclasses import dataclass, field
from typing import Any

import aiohttp

from .exceptions import APIError, NotFoundError, PayloadError, RateLimitError

logger = logging.getLogger(__name__)


@dataclass
class HttpResponse:
    """A fully read upstream response."""
    status: int
    reason: str = ""
    headers: dict[str, str] = field(default_factory=dict)  # lower-cased names
    text: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def header(self, name: str) -> str | None:
        return self.headers.get(name.lower())

    def json(self) -> Any:
        return json.loads(self.text)


class HttpClient:
    """Thin aiohttp wrapper returning HttpResponse objects."""

    def __init__(self, timeout: int = 15):
        self.timeout = timeout

    async def request(
        self,
        method: str,
        url: str,
        headers: dict[str, str] | None = None,
        params: dict[str, str] | None = None,
    ) -> HttpResponse:
        """
        Issue one request and read the whole body.

        Raises:
            APIError: on connection failures and timeouts (status None)
        """
        try:
            async with aiohttp.ClientSession() as session:
                async with session.request(
                    method,
                    url,
                    headers=headers,
                    params=params,
                    timeout=aiohttp.ClientTimeout(total=self.timeout),
                ) as resp:
                    text = await resp.text() if method != "HEAD" else ""
                    return HttpResponse(
                        status=resp.status,
                        reason=resp.reason or "",
                        headers={k.lower(): v for k, v in resp.headers.items()},
                        text=text,
                    )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.debug(f"{method} {url} failed: {e!r}")
            raise APIError(f"Request to {url} failed: {str(e) or type(e).__name__}") from e

    async def get(self, url: str, headers=None, params=None) -> HttpResponse:
        return await self.request("GET", url, headers=headers, params=params)

    async def head(self, url: str, headers=None) -> HttpResponse:
        return await self.request("HEAD", url, headers=headers)


def parse_rate_limit_reset(value: str | None) -> int | None:
    """Convert an X-RateLimit-Reset header (epoch seconds) to milliseconds."""
    if not value:
        return None
    try:
        return int(value) * 1000
    except ValueError:
        return None


def raise_for_status(
    response: HttpResponse,
    *,
    service: str,
    not_found_message: str,
    rate_limit_message: str | None = None,
) -> None:
    """
    Raise the typed error matching a non-2xx response.

    403 -> RateLimitError (with reset time when given) for sources that pass
    a rate_limit_message, 404 -> NotFoundError, anything else -> APIError
    carrying the status.
    Without a rate_limit_message a 403 is a plain APIError.
    """
    if response.ok:
        return

    if response.status == 403 and rate_limit_message:
        raise RateLimitError(
            rate_limit_message,
            status=response.status,
            rate_limit_reset=parse_rate_limit_reset(response.header("X-RateLimit-Reset")),
        )

    if response.status == 404:
        raise NotFoundError(not_found_message, status=response.status)

    raise APIError(
        f"{service} request failed: {response.status} {response.reason}".rstrip(),
        status=response.status,
    )


def decode_json(response: HttpResponse, *, service: str) -> Any:
    """Parse a 2xx body as JSON, raising PayloadError if it is not JSON."""
    try:
        return response.json()
    except ValueError as e:
        raise PayloadError(
            f"{service} returned a malformed payload", status=response.status
        ) from e
