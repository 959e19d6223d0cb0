"""
Portfolio Content API Server

FastAPI application providing endpoints for:
- Projects (GitHub repositories)
- Articles (Medium feed)
- Health and upstream status
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from . import __version__
from .cache import ContentCache
from .config import config, state, GitHubSettings, MediumSettings
from .github import RepositorySource
from .http_client import HttpClient
from .medium import ArticleSource
from .rate_limit import setup_rate_limiting
from .routes import content_router, misc_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize application resources."""
    # Startup - skip if already initialized (e.g., by tests)
    if state.github is None:
        logging.basicConfig(level=config.LOG_LEVEL.upper())

        state.http_client = HttpClient(timeout=config.REQUEST_TIMEOUT)
        state.cache = ContentCache(ttl_seconds=config.cache_ttl_seconds())
        state.github = RepositorySource(
            GitHubSettings.from_config(),
            client=state.http_client,
        )
        state.medium = ArticleSource(
            MediumSettings.from_config(),
            cache=state.cache,
            client=state.http_client,
        )

        if not config.GITHUB_TOKEN:
            logger.warning(
                "GITHUB_TOKEN not set. Unauthenticated GitHub requests are "
                "limited to 60 per hour."
            )
        logger.info(
            f"Content sources initialized (GitHub: {config.GITHUB_USERNAME}, "
            f"Medium: {config.MEDIUM_USERNAME}, cache TTL: {config.cache_ttl_seconds()}s)"
        )

    yield


app = FastAPI(
    title="Portfolio Content API",
    version=__version__,
    lifespan=lifespan
)

setup_rate_limiting(app)

# Include routers
app.include_router(misc_router)
app.include_router(content_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="127.0.0.1", port=config.PORT)
