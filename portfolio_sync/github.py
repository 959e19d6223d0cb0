"""
GitHub repository source for the projects section.

Handles:
- Fetching an account's repositories with rate limiting and retry/backoff
- Filtering (forks, exclusions, undescribed repos) and ranking
- Mapping repositories to Project records

get_projects() NEVER raises: on any failure it logs and returns the static
fallback list. This is the opposite of ArticleSource.get_articles(), which
always propagates. Keep the two policies apart.
"""

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Awaitable, Callable

from .config import GitHubSettings, USER_AGENT
from .exceptions import PayloadError
from .http_client import HttpClient, decode_json, raise_for_status
from .models import Project, RawRepository, parse_timestamp
from .rate_limit import RateLimiter
from .retry import run_with_retry

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class RepositorySource:
    """Fetches and ranks one GitHub account's repositories."""

    def __init__(
        self,
        settings: GitHubSettings,
        client: HttpClient | None = None,
        rate_limiter: RateLimiter | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.time,
    ):
        self.settings = settings
        self.client = client or HttpClient()
        self.rate_limiter = rate_limiter or RateLimiter(
            min_interval=settings.rate_limit_delay, clock=clock, sleep=sleep
        )
        self._sleep = sleep
        self._clock = clock

    @property
    def headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": USER_AGENT,
        }
        if self.settings.token:
            headers["Authorization"] = f"token {self.settings.token}"
        return headers

    # ─────────────────────────────────────────────────────────────
    # Fetching
    # ─────────────────────────────────────────────────────────────

    async def fetch_repositories(self, account: str | None = None) -> list[RawRepository]:
        """
        Fetch, filter, rank and truncate an account's repositories.

        Raises:
            NotFoundError: If the account does not exist (not retried)
            RateLimitError: If rate limited with no near-term reset
            APIError: If the API keeps failing
            PayloadError: If the API keeps answering with an unusable body
            MaxRetriesExceeded: If attempts ran out while waiting on a rate limit
        """
        account = account or self.settings.username

        async def attempt() -> list[RawRepository]:
            await self.rate_limiter.wait_if_needed()
            return await self._fetch_once(account)

        return await run_with_retry(
            attempt,
            max_attempts=self.settings.max_retries,
            sleep=self._sleep,
            clock=self._clock,
            description=f"GitHub repositories for '{account}'",
        )

    async def _fetch_once(self, account: str) -> list[RawRepository]:
        url = f"{self.settings.api_url}/users/{account}/repos"
        params = {"sort": "updated", "per_page": str(self.settings.max_repos * 2)}

        response = await self.client.get(url, headers=self.headers, params=params)
        raise_for_status(
            response,
            service="GitHub API",
            not_found_message=f"GitHub user '{account}' not found",
            rate_limit_message="GitHub API rate limit exceeded",
        )

        data = decode_json(response, service="GitHub API")
        if not isinstance(data, list):
            raise PayloadError(
                f"GitHub API returned a malformed payload: expected a list, "
                f"got {type(data).__name__}",
                status=response.status,
            )
        try:
            repositories = [RawRepository.from_api(item) for item in data]
        except (AttributeError, KeyError, TypeError) as e:
            raise PayloadError(
                f"GitHub API returned a malformed repository: {e!r}", status=response.status
            ) from e
        logger.debug(f"GitHub returned {len(repositories)} repositories for '{account}'")

        ranked = self.rank(self.filter(repositories))
        return ranked[:self.settings.max_repos]

    def filter(self, repositories: list[RawRepository]) -> list[RawRepository]:
        """Drop forks (unless enabled), excluded names and undescribed repos."""
        kept = []
        for repo in repositories:
            if repo.fork and not self.settings.show_forks:
                continue
            if repo.name in self.settings.exclude_repos:
                continue
            if not repo.description:
                continue
            kept.append(repo)
        return kept

    def rank(self, repositories: list[RawRepository]) -> list[RawRepository]:
        """
        Featured repos first, in allow-list order; then by stars, then by
        most recent update.
        """
        featured = self.settings.featured_repos

        def sort_key(repo: RawRepository):
            if repo.name in featured:
                return (0, featured.index(repo.name), 0, 0.0)
            updated = repo.updated or _EPOCH
            return (1, 0, -repo.stargazers_count, -updated.timestamp())

        return sorted(repositories, key=sort_key)

    # ─────────────────────────────────────────────────────────────
    # Mapping
    # ─────────────────────────────────────────────────────────────

    def to_project(self, repo: RawRepository) -> Project:
        language = repo.language or "Unknown"
        updated_at = parse_timestamp(repo.updated_at) or _EPOCH
        created_at = parse_timestamp(repo.created_at) or updated_at

        return Project(
            id=repo.name,
            name=repo.name,
            description=repo.description or "",
            technologies=tuple(t for t in (language, *repo.topics) if t),
            github_url=repo.html_url,
            live_url=repo.homepage or None,
            stars=repo.stargazers_count or 0,
            forks=repo.forks_count or 0,
            language=language,
            featured=repo.name in self.settings.featured_repos,
            created_at=created_at,
            updated_at=updated_at,
        )

    async def get_projects(self) -> list[Project]:
        """Projects for display. Never raises; falls back to sample data."""
        try:
            repositories = await self.fetch_repositories()
        except Exception as e:
            logger.error(f"Failed to fetch GitHub repositories: {e}")
            return get_fallback_projects()

        return [self.to_project(repo) for repo in repositories]

    async def check_health(self) -> bool:
        """True if the GitHub API answers its rate-limit endpoint."""
        try:
            response = await self.client.get(
                f"{self.settings.api_url}/rate_limit",
                headers={
                    "Accept": "application/vnd.github.v3+json",
                    "User-Agent": USER_AGENT,
                },
            )
        except Exception as e:
            logger.warning(f"GitHub health check failed: {e}")
            return False
        return response.ok


def get_fallback_projects() -> list[Project]:
    """Static projects shown when GitHub cannot be reached."""
    return [
        Project(
            id="portfolio-website",
            name="Portfolio Website",
            description="A modern, responsive portfolio website built with Next.js and Tailwind CSS",
            technologies=("Next.js", "TypeScript", "Tailwind CSS", "Framer Motion"),
            github_url="https://github.com/yourusername/portfolio-website",
            live_url="https://yourusername.github.io",
            language="TypeScript",
            featured=True,
            created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
            updated_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        ),
        Project(
            id="sample-project-1",
            name="Sample Project 1",
            description="A sample project demonstrating modern web development practices",
            technologies=("React", "Node.js", "MongoDB"),
            github_url="https://github.com/yourusername/sample-project-1",
            language="JavaScript",
            featured=False,
            created_at=datetime(2023, 6, 1, tzinfo=timezone.utc),
            updated_at=datetime(2023, 6, 1, tzinfo=timezone.utc),
        ),
        Project(
            id="sample-project-2",
            name="Sample Project 2",
            description="Another sample project showcasing full-stack development",
            technologies=("Vue.js", "Express", "PostgreSQL"),
            github_url="https://github.com/yourusername/sample-project-2",
            language="JavaScript",
            featured=False,
            created_at=datetime(2023, 3, 1, tzinfo=timezone.utc),
            updated_at=datetime(2023, 3, 1, tzinfo=timezone.utc),
        ),
    ]
