"""
Content service: what the projects and articles sections display.

Loads projects (never failing) and articles (failing with a message fit for
the page), and reports upstream reachability.
"""

import asyncio
import logging

from ..exceptions import ContentSourceError
from ..github import RepositorySource
from ..medium import ArticleSource
from ..models import Article, Project

logger = logging.getLogger(__name__)


def describe_error(error: BaseException, noun: str) -> str:
    """User-visible message for a failed load of `noun` ("projects", "articles")."""
    if isinstance(error, ContentSourceError):
        return error.message
    return f"Failed to load {noun}. Please try again later."


class ContentLoadError(Exception):
    """A section could not be loaded; message is safe to show to visitors."""

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class ContentService:
    """Service for the portfolio's dynamic sections."""

    def __init__(self, github: RepositorySource, medium: ArticleSource):
        self.github = github
        self.medium = medium

    async def list_projects(self) -> list[Project]:
        return await self.github.get_projects()

    async def list_articles(self, refresh: bool = False) -> list[Article]:
        """
        Articles for the articles section.

        Args:
            refresh: Drop the cached list first and fetch again

        Raises:
            ContentLoadError: If the feed could not be loaded
        """
        if refresh:
            self.medium.invalidate()

        try:
            return await self.medium.get_cached_articles()
        except Exception as e:
            logger.error(f"Error fetching Medium articles: {e}")
            raise ContentLoadError(describe_error(e, "articles"), cause=e) from e

    async def upstream_status(self) -> dict[str, bool]:
        github_ok, medium_ok = await asyncio.gather(
            self.github.check_health(),
            self.medium.check_health(),
        )
        return {"github": github_ok, "medium": medium_ok}
