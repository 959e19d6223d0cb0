"""
Pytest fixtures for portfolio_sync tests.
"""

import asyncio
import json

import pytest
from fastapi.testclient import TestClient

from portfolio_sync.cache import ContentCache
from portfolio_sync.config import state, GitHubSettings, MediumSettings
from portfolio_sync.github import RepositorySource
from portfolio_sync.http_client import HttpResponse
from portfolio_sync.medium import ArticleSource
from portfolio_sync.rate_limit import limiter
from portfolio_sync.server import app


class FakeClock:
    """
    Deterministic clock whose sleep advances time instead of waiting.

    sleep() yields to the event loop before waking, and concurrent sleepers
    wake at their own deadline, so overlapping callers see each other.
    """

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        wake_at = self.now + seconds
        self.sleeps.append(seconds)
        await asyncio.sleep(0)
        self.now = max(self.now, wake_at)

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeHttpClient:
    """Returns queued responses (or raises queued exceptions) in order."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls: list[dict] = []

    def queue(self, *responses):
        self.responses.extend(responses)

    async def request(self, method, url, headers=None, params=None):
        self.calls.append({"method": method, "url": url, "headers": headers, "params": params})
        await asyncio.sleep(0)
        if not self.responses:
            raise AssertionError(f"Unexpected request: {method} {url}")
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response

    async def get(self, url, headers=None, params=None):
        return await self.request("GET", url, headers=headers, params=params)

    async def head(self, url, headers=None):
        return await self.request("HEAD", url, headers=headers)


def json_response(data, status: int = 200, headers: dict | None = None) -> HttpResponse:
    return HttpResponse(
        status=status,
        reason="OK" if status < 400 else "Error",
        headers={k.lower(): v for k, v in (headers or {}).items()},
        text=json.dumps(data),
    )


def error_response(status: int, headers: dict | None = None) -> HttpResponse:
    return json_response({"message": "error"}, status=status, headers=headers)


def make_repo(name: str, **overrides) -> dict:
    """A GitHub API repository payload."""
    repo = {
        "name": name,
        "description": f"{name} description",
        "html_url": f"https://github.com/octocat/{name}",
        "homepage": None,
        "language": "Python",
        "stargazers_count": 0,
        "forks_count": 0,
        "updated_at": "2024-01-01T00:00:00Z",
        "created_at": "2023-01-01T00:00:00Z",
        "topics": [],
        "fork": False,
    }
    repo.update(overrides)
    return repo


def make_item(title: str, **overrides) -> dict:
    """An rss2json feed item payload."""
    slug = title.lower().replace(" ", "-")
    item = {
        "title": title,
        "pubDate": "2024-01-01 12:00:00",
        "link": f"https://medium.com/@octocat/{slug}",
        "guid": f"https://medium.com/p/{slug}",
        "author": "Octo Cat",
        "thumbnail": "",
        "description": f"<p>{title} body text</p>",
        "content": f"<p>{title} body text</p>",
        "categories": ["python"],
    }
    item.update(overrides)
    return item


def feed_envelope(items: list[dict], status: str = "ok") -> dict:
    return {
        "status": status,
        "feed": {"url": "https://medium.com/feed/@octocat", "title": "Stories by Octo Cat"},
        "items": items,
    }


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def github_settings():
    return GitHubSettings(username="octocat", max_repos=3)


@pytest.fixture
def medium_settings():
    return MediumSettings(username="octocat", max_articles=3)


@pytest.fixture
def http():
    return FakeHttpClient()


@pytest.fixture
def github_source(github_settings, http, clock):
    return RepositorySource(github_settings, client=http, sleep=clock.sleep, clock=clock)


@pytest.fixture
def article_cache(clock):
    return ContentCache(ttl_seconds=3600, clock=clock)


@pytest.fixture
def medium_source(medium_settings, article_cache, http, clock):
    return ArticleSource(
        medium_settings, cache=article_cache, client=http, sleep=clock.sleep, clock=clock
    )


@pytest.fixture
def client(github_source, medium_source, article_cache, http):
    """Test client wired to sources backed by the fake HTTP client."""
    # Store original state
    original_github = state.github
    original_medium = state.medium
    original_cache = state.cache
    original_http = state.http_client

    state.github = github_source
    state.medium = medium_source
    state.cache = article_cache
    state.http_client = http
    limiter.reset()

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client

    # Restore original state
    state.github = original_github
    state.medium = original_medium
    state.cache = original_cache
    state.http_client = original_http
