"""
Tests for the aiohttp transport and status classification.
"""

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp import test_utils

from portfolio_sync.exceptions import APIError, NotFoundError, PayloadError, RateLimitError
from portfolio_sync.http_client import (
    HttpClient,
    HttpResponse,
    decode_json,
    parse_rate_limit_reset,
    raise_for_status,
)


async def _repos(request: web.Request) -> web.Response:
    return web.json_response(
        [{"name": "demo", "sort": request.query.get("sort")}],
        headers={"X-RateLimit-Remaining": "59"},
    )


@pytest_asyncio.fixture
async def server():
    app = web.Application()
    app.router.add_get("/users/octocat/repos", _repos)
    async with test_utils.TestServer(app) as test_server:
        yield test_server


class TestHttpClient:

    @pytest.mark.asyncio
    async def test_get_reads_body_and_headers(self, server):
        client = HttpClient(timeout=5)
        response = await client.get(
            str(server.make_url("/users/octocat/repos")),
            params={"sort": "updated"},
        )
        assert response.ok
        assert response.json() == [{"name": "demo", "sort": "updated"}]
        assert response.header("x-ratelimit-remaining") == "59"

    @pytest.mark.asyncio
    async def test_non_2xx_is_returned_not_raised(self, server):
        client = HttpClient(timeout=5)
        response = await client.get(str(server.make_url("/missing")))
        assert response.status == 404
        assert not response.ok

    @pytest.mark.asyncio
    async def test_connection_failure_is_api_error(self):
        client = HttpClient(timeout=5)
        with pytest.raises(APIError) as exc_info:
            await client.get("http://127.0.0.1:1/unreachable")
        assert exc_info.value.status is None


class TestRaiseForStatus:

    def _raise(self, response: HttpResponse):
        raise_for_status(
            response,
            service="GitHub API",
            not_found_message="gone",
            rate_limit_message="GitHub API rate limit exceeded",
        )

    def test_ok_passes(self):
        self._raise(HttpResponse(status=200))

    def test_403_with_reset(self):
        with pytest.raises(RateLimitError) as exc_info:
            self._raise(HttpResponse(status=403, headers={"x-ratelimit-reset": "1700000000"}))
        assert exc_info.value.rate_limit_reset == 1_700_000_000_000
        assert exc_info.value.status == 403

    def test_403_without_reset(self):
        with pytest.raises(RateLimitError) as exc_info:
            self._raise(HttpResponse(status=403))
        assert exc_info.value.rate_limit_reset is None

    def test_403_without_rate_limit_message_is_plain_api_error(self):
        with pytest.raises(APIError) as exc_info:
            raise_for_status(
                HttpResponse(status=403, reason="Forbidden"),
                service="Medium RSS",
                not_found_message="gone",
            )
        assert not isinstance(exc_info.value, RateLimitError)
        assert exc_info.value.message == "Medium RSS request failed: 403 Forbidden"

    def test_404(self):
        with pytest.raises(NotFoundError, match="gone"):
            self._raise(HttpResponse(status=404))

    def test_500(self):
        with pytest.raises(APIError) as exc_info:
            self._raise(HttpResponse(status=500, reason="Internal Server Error"))
        assert exc_info.value.status == 500
        assert exc_info.value.message == "GitHub API request failed: 500 Internal Server Error"


def test_parse_rate_limit_reset():
    assert parse_rate_limit_reset("12") == 12000
    assert parse_rate_limit_reset("soon") is None
    assert parse_rate_limit_reset(None) is None


class TestDecodeJson:

    def test_valid_json(self):
        assert decode_json(HttpResponse(status=200, text='{"a": 1}'), service="X") == {"a": 1}

    def test_non_json_is_payload_error(self):
        with pytest.raises(PayloadError) as exc_info:
            decode_json(HttpResponse(status=200, text="<html>"), service="GitHub API")
        assert exc_info.value.message == "GitHub API returned a malformed payload"
        assert exc_info.value.status == 200
