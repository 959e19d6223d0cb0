"""
Service layer for business logic.

Services keep routes as thin HTTP adapters and receive their dependencies
via constructor injection.

Usage in routes:
    from ..services import ContentServiceDep

    @router.get("/projects")
    async def list_projects(service: ContentServiceDep):
        return await service.list_projects()
"""

from typing import Annotated

from fastapi import Depends

from ..config import get_github, get_medium
from ..github import RepositorySource
from ..medium import ArticleSource

from .content_service import ContentService, ContentLoadError, describe_error

__all__ = [
    "ContentService",
    "ContentLoadError",
    "describe_error",
    "get_content_service",
    "ContentServiceDep",
]


def get_content_service(
    github: Annotated[RepositorySource, Depends(get_github)],
    medium: Annotated[ArticleSource, Depends(get_medium)],
) -> ContentService:
    """Dependency to get ContentService instance."""
    return ContentService(github=github, medium=medium)


ContentServiceDep = Annotated[ContentService, Depends(get_content_service)]
