"""
Configuration and application state management.
"""

import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from dotenv import load_dotenv
from fastapi import HTTPException

if TYPE_CHECKING:
    from .cache import ContentCache
    from .github import RepositorySource
    from .http_client import HttpClient
    from .medium import ArticleSource

# Load environment variables
load_dotenv()


def _parse_bool(value: str | None, default: bool = False) -> bool:
    """Parse boolean from environment variable."""
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "on")


def _parse_list(value: str | None) -> list[str]:
    """Parse a comma-separated environment variable, keeping order."""
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


class Config:
    """Application configuration from environment."""
    # GitHub account whose repositories populate the projects section
    GITHUB_USERNAME: str = os.getenv("GITHUB_USERNAME", "yourusername")
    # Optional token for higher API rate limits
    GITHUB_TOKEN: str = os.getenv("GITHUB_TOKEN", "")
    GITHUB_MAX_REPOS: int = int(os.getenv("GITHUB_MAX_REPOS", "6"))
    GITHUB_EXCLUDE_REPOS: list[str] = _parse_list(os.getenv("GITHUB_EXCLUDE_REPOS"))
    # Ordered: listed repos are shown first, in this order
    GITHUB_FEATURED_REPOS: list[str] = _parse_list(os.getenv("GITHUB_FEATURED_REPOS"))
    GITHUB_SHOW_FORKS: bool = _parse_bool(os.getenv("GITHUB_SHOW_FORKS"), default=False)
    GITHUB_API_URL: str = os.getenv("GITHUB_API_URL", "https://api.github.com")

    # Medium account whose feed populates the articles section
    MEDIUM_USERNAME: str = os.getenv("MEDIUM_USERNAME", "yourusername")
    MEDIUM_MAX_ARTICLES: int = int(os.getenv("MEDIUM_MAX_ARTICLES", "6"))
    MEDIUM_FEATURED_ARTICLES: list[str] = _parse_list(os.getenv("MEDIUM_FEATURED_ARTICLES"))
    # Empty string fetches the RSS document directly instead of via rss2json
    MEDIUM_CONVERTER_URL: str = os.getenv(
        "MEDIUM_CONVERTER_URL", "https://api.rss2json.com/v1/api.json"
    )

    APP_ENV: str = os.getenv("APP_ENV", "production")
    REQUEST_TIMEOUT: int = int(os.getenv("REQUEST_TIMEOUT", "15"))  # seconds
    RATE_LIMIT_PER_MINUTE: int = int(os.getenv("RATE_LIMIT_PER_MINUTE", "60"))
    PORT: int = int(os.getenv("PORT", "5005"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @classmethod
    def is_development(cls) -> bool:
        return cls.APP_ENV.lower() == "development"

    @classmethod
    def cache_ttl_seconds(cls) -> int:
        """5 minutes in development, 1 hour otherwise."""
        return 300 if cls.is_development() else 3600


config = Config()


USER_AGENT = "Portfolio-Website"
MAX_RETRIES = 3
RATE_LIMIT_DELAY = 1.0  # seconds between requests to the same source


@dataclass
class GitHubSettings:
    """Settings consumed by RepositorySource."""
    username: str
    max_repos: int = 6
    exclude_repos: list[str] = field(default_factory=list)
    featured_repos: list[str] = field(default_factory=list)
    show_forks: bool = False
    token: str = ""
    api_url: str = "https://api.github.com"
    max_retries: int = MAX_RETRIES
    rate_limit_delay: float = RATE_LIMIT_DELAY

    @classmethod
    def from_config(cls) -> "GitHubSettings":
        return cls(
            username=config.GITHUB_USERNAME,
            max_repos=config.GITHUB_MAX_REPOS,
            exclude_repos=list(config.GITHUB_EXCLUDE_REPOS),
            featured_repos=list(config.GITHUB_FEATURED_REPOS),
            show_forks=config.GITHUB_SHOW_FORKS,
            token=config.GITHUB_TOKEN,
            api_url=config.GITHUB_API_URL,
        )


@dataclass
class MediumSettings:
    """Settings consumed by ArticleSource."""
    username: str
    max_articles: int = 6
    featured_articles: list[str] = field(default_factory=list)
    converter_url: str = "https://api.rss2json.com/v1/api.json"
    max_retries: int = MAX_RETRIES
    rate_limit_delay: float = RATE_LIMIT_DELAY

    @classmethod
    def from_config(cls) -> "MediumSettings":
        return cls(
            username=config.MEDIUM_USERNAME,
            max_articles=config.MEDIUM_MAX_ARTICLES,
            featured_articles=list(config.MEDIUM_FEATURED_ARTICLES),
            converter_url=config.MEDIUM_CONVERTER_URL,
        )


class AppState:
    """Shared application state."""
    cache: "ContentCache | None" = None
    http_client: "HttpClient | None" = None
    github: "RepositorySource | None" = None
    medium: "ArticleSource | None" = None


state = AppState()


def get_github() -> "RepositorySource":
    """Dependency to get the repository source."""
    if not state.github:
        raise HTTPException(status_code=500, detail="GitHub source not initialized")
    return state.github


def get_medium() -> "ArticleSource":
    """Dependency to get the article source."""
    if not state.medium:
        raise HTTPException(status_code=500, detail="Medium source not initialized")
    return state.medium
