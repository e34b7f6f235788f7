"""Sync and review endpoints."""

import logging
from dataclasses import asdict

from fastapi import APIRouter, Request

from app.core.config import get_settings
from app.core.deps import DbSession, Provider
from app.core.rate_limit import limiter
from app.schemas.sync import AcceptAllResponse, AcceptResponse, SyncResponse
from app.services.review import ReviewService
from app.services.projects import ProjectService
from app.services.sync import SyncService

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter()


@router.post("/projects/{project_id}/sync", response_model=SyncResponse)
@limiter.limit(settings.sync_rate_limit)
async def sync_project(
    request: Request,
    project_id: str,
    session: DbSession,
    provider: Provider,
) -> SyncResponse:
    """Pull the project's Figma file and classify every text block."""
    result = await SyncService(session, provider).sync(project_id)
    return SyncResponse(**asdict(result))


@router.post("/sync", response_model=SyncResponse, deprecated=True)
@limiter.limit(settings.sync_rate_limit)
async def sync_latest_project(
    request: Request,
    session: DbSession,
    provider: Provider,
) -> SyncResponse:
    """Sync the most recently updated project.

    Kept for clients from before multi-project support; use
    ``POST /projects/{project_id}/sync``.
    """
    result = await SyncService(session, provider).sync_latest()
    return SyncResponse(**asdict(result))


@router.post(
    "/projects/{project_id}/text-blocks/accept-all",
    response_model=AcceptAllResponse,
)
async def accept_all_changes(
    project_id: str,
    session: DbSession,
) -> AcceptAllResponse:
    """Accept every pending change in the project."""
    await ProjectService(session).get_project(project_id)
    result = await ReviewService(session).accept_all(project_id)
    return AcceptAllResponse(**asdict(result))


@router.post(
    "/projects/{project_id}/text-blocks/{block_id}/accept",
    response_model=AcceptResponse,
)
async def accept_change(
    project_id: str,
    block_id: str,
    session: DbSession,
) -> AcceptResponse:
    """Accept one pending change. Blocks that are not pending are left as they are."""
    await ProjectService(session).get_project(project_id)
    result = await ReviewService(session).accept_change(project_id, block_id)
    return AcceptResponse(**asdict(result))
