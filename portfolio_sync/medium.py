"""
Medium article source for the articles section.

Handles:
- Fetching an account's RSS feed, through the rss2json conversion service
  or directly with feedparser
- HTML cleanup, thumbnail extraction, ranking and truncation
- A time-boxed cache of the mapped articles

get_articles() ALWAYS propagates fetch errors; there is no static fallback
for articles. RepositorySource.get_projects() does the opposite.
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable

from .cache import ContentCache
from .config import MediumSettings, USER_AGENT, config
from .exceptions import EnvelopeError, PayloadError
from .extractors import (
    estimate_read_time,
    extract_image_url,
    extract_text_from_html,
    make_excerpt,
)
from .feeds import parse_feed_items
from .http_client import HttpClient, decode_json, raise_for_status
from .models import Article, FeedEntry, RawFeedItem, parse_timestamp
from .rate_limit import RateLimiter
from .retry import run_with_retry

logger = logging.getLogger(__name__)


def rss_url(account: str) -> str:
    return f"https://medium.com/feed/@{account}"


def cache_key(account: str) -> str:
    return f"medium-articles-{account}"


class ArticleSource:
    """Fetches, ranks and caches one Medium account's articles."""

    def __init__(
        self,
        settings: MediumSettings,
        cache: ContentCache | None = None,
        client: HttpClient | None = None,
        rate_limiter: RateLimiter | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.time,
    ):
        self.settings = settings
        self.cache = cache or ContentCache(config.cache_ttl_seconds(), clock=clock)
        self.client = client or HttpClient()
        self.rate_limiter = rate_limiter or RateLimiter(
            min_interval=settings.rate_limit_delay, clock=clock, sleep=sleep
        )
        self._sleep = sleep
        self._clock = clock
        self._lock = asyncio.Lock()

    def is_featured(self, title: str, link: str) -> bool:
        """Title contains (case-insensitive) or link contains a featured entry."""
        title_lower = title.lower()
        return any(
            featured.lower() in title_lower or featured in link
            for featured in self.settings.featured_articles
        )

    # ─────────────────────────────────────────────────────────────
    # Fetching
    # ─────────────────────────────────────────────────────────────

    async def fetch_articles(self, account: str | None = None) -> list[FeedEntry]:
        """
        Fetch, clean, rank and truncate an account's feed entries.

        Raises:
            EnvelopeError: If the conversion service keeps reporting failure
            PayloadError: If the feed or its JSON rendition cannot be read
            ContentSourceError: For upstream HTTP failures (4xx not retried)
        """
        account = account or self.settings.username

        async def attempt() -> list[FeedEntry]:
            await self.rate_limiter.wait_if_needed()
            return await self._fetch_once(account)

        return await run_with_retry(
            attempt,
            max_attempts=self.settings.max_retries,
            sleep=self._sleep,
            clock=self._clock,
            description=f"Medium feed for '{account}'",
        )

    async def _fetch_once(self, account: str) -> list[FeedEntry]:
        items = await self._fetch_feed_items(rss_url(account))

        # Take more than needed so filtering still leaves enough
        entries = [
            self.to_entry(item)
            for item in items[:self.settings.max_articles * 2]
        ]
        entries = [e for e in entries if e.title and e.description and e.link]

        return self.rank(entries)[:self.settings.max_articles]

    async def _fetch_feed_items(self, feed_url: str) -> list[RawFeedItem]:
        if not self.settings.converter_url:
            response = await self.client.get(feed_url, headers={"User-Agent": USER_AGENT})
            raise_for_status(
                response,
                service="Medium RSS",
                not_found_message=f"Medium feed '{feed_url}' not found",
            )
            try:
                return parse_feed_items(response.text)
            except ValueError as e:
                raise PayloadError(
                    f"Medium RSS returned a malformed feed: {e}", status=response.status
                ) from e

        response = await self.client.get(
            self.settings.converter_url,
            headers={"Accept": "application/json", "User-Agent": USER_AGENT},
            params={"rss_url": feed_url},
        )
        raise_for_status(
            response,
            service="RSS2JSON API",
            not_found_message=f"Medium feed '{feed_url}' not found",
        )

        data = decode_json(response, service="RSS2JSON API")
        if not isinstance(data, dict):
            raise PayloadError(
                f"RSS2JSON API returned a malformed payload: expected an object, "
                f"got {type(data).__name__}",
                status=response.status,
            )
        if data.get("status") != "ok":
            raise EnvelopeError(f"RSS2JSON API returned error status: {data.get('status')}")

        try:
            return [RawFeedItem.from_api(item) for item in data.get("items") or []]
        except (AttributeError, TypeError) as e:
            raise PayloadError(
                f"RSS2JSON API returned a malformed item: {e!r}", status=response.status
            ) from e

    def to_entry(self, item: RawFeedItem) -> FeedEntry:
        return FeedEntry(
            title=item.title,
            link=item.link,
            description=extract_text_from_html(item.description),
            published_at=parse_timestamp(item.pub_date),
            guid=item.guid,
            categories=tuple(item.categories),
            image_url=extract_image_url(item.description),
        )

    def rank(self, entries: list[FeedEntry]) -> list[FeedEntry]:
        """Featured first in feed order, then newest first; undated last."""
        featured = [e for e in entries if self.is_featured(e.title, e.link)]
        others = [e for e in entries if not self.is_featured(e.title, e.link)]

        dated = [e for e in others if e.published_at is not None]
        undated = [e for e in others if e.published_at is None]
        dated.sort(key=lambda e: e.published_at, reverse=True)

        return featured + dated + undated

    # ─────────────────────────────────────────────────────────────
    # Mapping and caching
    # ─────────────────────────────────────────────────────────────

    def to_article(self, entry: FeedEntry) -> Article:
        return Article(
            id=entry.guid or entry.link,
            title=entry.title,
            excerpt=make_excerpt(entry.description),
            published_at=entry.published_at,
            read_time=estimate_read_time(entry.description),
            url=entry.link,
            image_url=entry.image_url,
            tags=tuple(entry.categories),
            featured=self.is_featured(entry.title, entry.link),
        )

    async def get_articles(self, account: str | None = None) -> list[Article]:
        """Articles for display. Fetch errors propagate unchanged."""
        entries = await self.fetch_articles(account)
        return [self.to_article(entry) for entry in entries]

    async def get_cached_articles(self, account: str | None = None) -> list[Article]:
        """
        Articles from the cache when fresh, otherwise fetched and cached.

        Failed fetches are not cached and propagate.
        """
        account = account or self.settings.username
        key = cache_key(account)

        async with self._lock:
            cached = self.cache.get(key)
            if cached is not None:
                logger.debug(f"Cache hit for {key}")
                return cached

            logger.debug(f"Cache miss for {key}")
            articles = await self.get_articles(account)
            self.cache.set(key, articles)
            return articles

    def invalidate(self, account: str | None = None) -> None:
        self.cache.delete(cache_key(account or self.settings.username))

    async def check_health(self, account: str | None = None) -> bool:
        """True if the account's RSS feed answers a HEAD request."""
        try:
            response = await self.client.head(
                rss_url(account or self.settings.username),
                headers={"User-Agent": USER_AGENT},
            )
        except Exception as e:
            logger.warning(f"Medium health check failed: {e}")
            return False
        return response.ok
