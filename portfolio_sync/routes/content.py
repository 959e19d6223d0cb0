"""
Content routes: projects and articles for the portfolio sections.
"""

from fastapi import APIRouter, HTTPException, Query

from ..schemas import ArticleResponse, ProjectResponse
from ..services import ContentLoadError, ContentServiceDep

router = APIRouter(tags=["content"])


@router.get("/projects")
async def list_projects(service: ContentServiceDep) -> list[ProjectResponse]:
    """Projects, falling back to sample data when GitHub is unavailable."""
    projects = await service.list_projects()
    return [ProjectResponse.from_project(p) for p in projects]


@router.get("/articles")
async def list_articles(
    service: ContentServiceDep,
    refresh: bool = Query(default=False),
) -> list[ArticleResponse]:
    """Articles from the Medium feed. Pass refresh=true to retry past the cache."""
    try:
        articles = await service.list_articles(refresh=refresh)
    except ContentLoadError as e:
        raise HTTPException(status_code=502, detail=e.message)
    return [ArticleResponse.from_article(a) for a in articles]
