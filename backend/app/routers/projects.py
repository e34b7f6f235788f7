"""Project management endpoints."""

import logging

from fastapi import APIRouter, Query, Response, status

from app.core.deps import DbSession
from app.models import ChangeStatus, ProjectCreate, ProjectRead, ProjectUpdate
from app.schemas.sync import ProjectStatusResponse
from app.services.projects import ProjectService
from app.services.text_blocks import TextBlockService
from app.services.status import compute_project_status

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/projects")


@router.get("", response_model=list[ProjectRead])
async def list_projects(
    session: DbSession,
    include_archived: bool = Query(False),
) -> list[ProjectRead]:
    """List projects, most recently updated first, with derived status."""
    service = ProjectService(session)
    projects = await service.list_projects(include_archived=include_archived)
    return await service.to_read(projects)


@router.post("", response_model=ProjectRead, status_code=status.HTTP_201_CREATED)
async def create_project(
    project_data: ProjectCreate,
    session: DbSession,
) -> ProjectRead:
    """Create a project. ``figma_file_key`` may be a key or a Figma file URL."""
    service = ProjectService(session)
    project = await service.create_project(project_data)
    return (await service.to_read([project]))[0]


@router.get("/{project_id}", response_model=ProjectRead)
async def get_project(
    project_id: str,
    session: DbSession,
) -> ProjectRead:
    """Get project details."""
    service = ProjectService(session)
    project = await service.get_project(project_id)
    return (await service.to_read([project]))[0]


@router.put("/{project_id}", response_model=ProjectRead)
async def update_project(
    project_id: str,
    project_data: ProjectUpdate,
    session: DbSession,
) -> ProjectRead:
    """Update name, file, token or scope filters."""
    service = ProjectService(session)
    project = await service.update_project(project_id, project_data)
    return (await service.to_read([project]))[0]


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(
    project_id: str,
    session: DbSession,
    hard: bool = Query(False, description="Delete rows instead of archiving"),
) -> Response:
    """Archive a project, or delete it with all its blocks and frames."""
    service = ProjectService(session)
    if hard:
        await service.delete_project(project_id)
    else:
        await service.archive_project(project_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{project_id}/restore", response_model=ProjectRead)
async def restore_project(
    project_id: str,
    session: DbSession,
) -> ProjectRead:
    """Bring an archived project back."""
    service = ProjectService(session)
    project = await service.restore_project(project_id)
    return (await service.to_read([project]))[0]


@router.get("/{project_id}/status", response_model=ProjectStatusResponse)
async def get_project_status(
    project_id: str,
    session: DbSession,
) -> ProjectStatusResponse:
    """Project-level review status, recomputed from its blocks."""
    project = await ProjectService(session).get_project(project_id)
    blocks = await TextBlockService(session).list_blocks(project_id)

    return ProjectStatusResponse(
        project_id=project.id,
        status=compute_project_status(blocks, project.last_export).value,
        pending_count=sum(1 for b in blocks if b.change_status == ChangeStatus.PENDING),
        accepted_count=sum(1 for b in blocks if b.change_status == ChangeStatus.ACCEPTED),
        last_sync=project.last_sync,
        last_export=project.last_export,
    )
