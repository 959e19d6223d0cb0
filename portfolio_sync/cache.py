"""
Cache - Time-boxed in-memory store for fetched article lists.

One entry per key (one key per tracked account). Entries expire lazily:
a read past the TTL evicts the entry and reports a miss. Reads hand out a
fresh list so callers cannot alter what is cached.
"""

import time
from dataclasses import dataclass
from typing import Callable

from .models import Article


@dataclass
class CacheEntry:
    data: tuple[Article, ...]
    timestamp: float


class ContentCache:
    """Keyed article-list cache with a fixed TTL."""

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.time):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._cache: dict[str, CacheEntry] = {}

    def get(self, key: str) -> list[Article] | None:
        entry = self._cache.get(key)
        if entry is None:
            return None

        if self._is_expired(entry):
            self.delete(key)
            return None

        return list(entry.data)

    def set(self, key: str, data: list[Article]) -> None:
        self._cache[key] = CacheEntry(data=tuple(data), timestamp=self._clock())

    def delete(self, key: str) -> None:
        self._cache.pop(key, None)

    def clear(self) -> None:
        self._cache.clear()

    def _is_expired(self, entry: CacheEntry) -> bool:
        return self._clock() - entry.timestamp >= self.ttl_seconds

    @property
    def size(self) -> int:
        """Number of entries that are still fresh."""
        return sum(1 for entry in self._cache.values() if not self._is_expired(entry))
