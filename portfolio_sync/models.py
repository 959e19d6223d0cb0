"""
Data models for the project and article sections.

Raw* classes mirror the upstream JSON payloads and are consumed once.
Project and Article are the display models handed to the presentation layer.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime

# GitHub-style language colours
LANGUAGE_COLORS: dict[str, str] = {
    "JavaScript": "#f1e05a",
    "TypeScript": "#2b7489",
    "Python": "#3572A5",
    "Java": "#b07219",
    "C++": "#f34b7d",
    "C#": "#239120",
    "PHP": "#4F5D95",
    "Ruby": "#701516",
    "Go": "#00ADD8",
    "Rust": "#dea584",
    "Swift": "#ffac45",
    "Kotlin": "#F18E33",
    "Dart": "#00B4AB",
    "HTML": "#e34c26",
    "CSS": "#1572B6",
    "Vue": "#2c3e50",
    "Svelte": "#ff3e00",
    "Shell": "#89e051",
    "Dockerfile": "#384d54",
}
DEFAULT_LANGUAGE_COLOR = "#6b7280"


def language_color(language: str | None) -> str:
    return LANGUAGE_COLORS.get(language or "", DEFAULT_LANGUAGE_COLOR)


def parse_timestamp(value: str | None) -> datetime | None:
    """
    Parse an upstream timestamp into an aware UTC datetime.

    Accepts ISO 8601 (GitHub, "2024-01-15T10:30:00Z"), the rss2json
    format ("2024-01-15 10:30:00") and RFC 822 (raw RSS pubDate).
    Naive values are taken to be UTC. Returns None if unparseable.
    """
    if not value:
        return None

    text = value.strip()
    parsed = None
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        try:
            parsed = parsedate_to_datetime(text)
        except (TypeError, ValueError):
            return None

    if parsed is None:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class RawRepository:
    """A repository as returned by GET /users/{account}/repos."""
    name: str
    description: str | None
    html_url: str
    homepage: str | None = None
    language: str | None = None
    stargazers_count: int = 0
    forks_count: int = 0
    updated_at: str | None = None
    created_at: str | None = None
    topics: tuple[str, ...] = ()
    fork: bool = False

    @classmethod
    def from_api(cls, data: dict) -> "RawRepository":
        return cls(
            name=data["name"],
            description=data.get("description"),
            html_url=data.get("html_url", ""),
            homepage=data.get("homepage") or None,
            language=data.get("language"),
            stargazers_count=data.get("stargazers_count") or 0,
            forks_count=data.get("forks_count") or 0,
            updated_at=data.get("updated_at"),
            created_at=data.get("created_at"),
            topics=tuple(data.get("topics") or ()),
            fork=bool(data.get("fork", False)),
        )

    @property
    def updated(self) -> datetime | None:
        return parse_timestamp(self.updated_at)


@dataclass(frozen=True)
class RawFeedItem:
    """A feed item as returned by the feed-to-JSON service."""
    title: str
    link: str
    description: str  # HTML
    pub_date: str | None = None
    guid: str | None = None
    author: str | None = None
    thumbnail: str | None = None
    content: str | None = None
    categories: tuple[str, ...] = ()

    @classmethod
    def from_api(cls, data: dict) -> "RawFeedItem":
        return cls(
            title=data.get("title") or "",
            link=data.get("link") or "",
            description=data.get("description") or "",
            pub_date=data.get("pubDate"),
            guid=data.get("guid") or None,
            author=data.get("author"),
            thumbnail=data.get("thumbnail") or None,
            content=data.get("content"),
            categories=tuple(data.get("categories") or ()),
        )


@dataclass(frozen=True)
class FeedEntry:
    """A feed item after HTML cleanup, ready for ranking."""
    title: str
    link: str
    description: str  # plain text
    published_at: datetime | None
    guid: str | None = None
    categories: tuple[str, ...] = ()
    image_url: str | None = None


@dataclass(frozen=True)
class Project:
    """A repository shown in the projects section."""
    id: str
    name: str
    description: str
    technologies: tuple[str, ...]
    github_url: str
    language: str
    featured: bool
    created_at: datetime
    updated_at: datetime
    live_url: str | None = None
    stars: int | None = None
    forks: int | None = None

    @property
    def language_color(self) -> str:
        return language_color(self.language)


@dataclass(frozen=True)
class Article:
    """A blog post shown in the articles section."""
    id: str
    title: str
    excerpt: str
    published_at: datetime | None
    read_time: int  # minutes, >= 1
    url: str
    tags: tuple[str, ...] = ()
    featured: bool = False
    image_url: str | None = None
