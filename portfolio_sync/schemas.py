"""
Pydantic models for API responses.
"""

from pydantic import BaseModel

from .models import Article, Project


# ─────────────────────────────────────────────────────────────
# Project Schemas
# ─────────────────────────────────────────────────────────────

class ProjectResponse(BaseModel):
    """Project card data."""
    id: str
    name: str
    description: str
    technologies: list[str]
    github_url: str
    live_url: str | None = None
    stars: int | None = None
    forks: int | None = None
    language: str
    language_color: str
    featured: bool
    created_at: str
    updated_at: str

    @classmethod
    def from_project(cls, project: Project) -> "ProjectResponse":
        return cls(
            id=project.id,
            name=project.name,
            description=project.description,
            technologies=list(project.technologies),
            github_url=project.github_url,
            live_url=project.live_url,
            stars=project.stars,
            forks=project.forks,
            language=project.language,
            language_color=project.language_color,
            featured=project.featured,
            created_at=project.created_at.isoformat(),
            updated_at=project.updated_at.isoformat(),
        )


# ─────────────────────────────────────────────────────────────
# Article Schemas
# ─────────────────────────────────────────────────────────────

class ArticleResponse(BaseModel):
    """Article card data."""
    id: str
    title: str
    excerpt: str
    published_at: str | None
    read_time: int
    url: str
    image_url: str | None = None
    tags: list[str]
    featured: bool

    @classmethod
    def from_article(cls, article: Article) -> "ArticleResponse":
        return cls(
            id=article.id,
            title=article.title,
            excerpt=article.excerpt,
            published_at=article.published_at.isoformat() if article.published_at else None,
            read_time=article.read_time,
            url=article.url,
            image_url=article.image_url,
            tags=list(article.tags),
            featured=article.featured,
        )


# ─────────────────────────────────────────────────────────────
# Status Schemas
# ─────────────────────────────────────────────────────────────

class StatusResponse(BaseModel):
    status: str
    version: str
    github_account: str
    medium_account: str
    cached_feeds: int


class UpstreamStatusResponse(BaseModel):
    """Reachability of the two upstream sources."""
    github: bool
    medium: bool
