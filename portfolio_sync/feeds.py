"""
Feed Parser - Parse a raw RSS/Atom document into feed items.

Used when articles are fetched straight from the Medium feed rather than
through the feed-to-JSON conversion service.
"""

import feedparser

from .models import RawFeedItem


def parse_feed_items(content: str) -> list[RawFeedItem]:
    """
    Parse RSS/Atom text into RawFeedItem objects, in feed order.

    Raises:
        ValueError: If the document is not a feed at all
    """
    parsed = feedparser.parse(content)

    if parsed.bozo and not parsed.entries:
        raise ValueError(f"Failed to parse feed: {parsed.bozo_exception}")

    items = []
    for entry in parsed.entries:
        # Full body, when the feed ships one (Medium uses content:encoded)
        body = None
        if hasattr(entry, "content") and entry.content:
            body = entry.content[0].value

        # Medium puts the full post in content and leaves summary empty
        description = entry.get("summary") or body or ""

        categories = tuple(tag.get("term") for tag in entry.get("tags", []) if tag.get("term"))

        items.append(RawFeedItem(
            title=entry.get("title", ""),
            link=entry.get("link", ""),
            description=description,
            pub_date=entry.get("published") or entry.get("updated"),
            guid=entry.get("id") or None,
            author=entry.get("author"),
            content=body,
            categories=categories,
        ))

    return items
