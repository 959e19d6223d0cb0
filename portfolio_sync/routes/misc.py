"""
Miscellaneous routes: health check and upstream status.
"""

from fastapi import APIRouter

from .. import __version__
from ..config import state
from ..schemas import StatusResponse, UpstreamStatusResponse
from ..services import ContentServiceDep

router = APIRouter(tags=["misc"])


@router.get("/status")
async def health_check() -> StatusResponse:
    """API health check."""
    return StatusResponse(
        status="ok",
        version=__version__,
        github_account=state.github.settings.username if state.github else "",
        medium_account=state.medium.settings.username if state.medium else "",
        cached_feeds=state.cache.size if state.cache else 0,
    )


@router.get("/status/upstream")
async def upstream_status(service: ContentServiceDep) -> UpstreamStatusResponse:
    """Whether GitHub and the Medium feed are reachable right now."""
    return UpstreamStatusResponse(**await service.upstream_status())
