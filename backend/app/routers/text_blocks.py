"""Per-project read endpoints: text blocks, frames, components and pages."""

from fastapi import APIRouter, Query

from app.core.deps import DbSession, Provider
from app.models import ComponentInfo, FrameRead, TextBlockRead
from app.schemas.figma import PageResponse
from app.services.figma import list_pages
from app.services.projects import ProjectService
from app.services.status import to_text_block_read
from app.services.text_blocks import TextBlockService

router = APIRouter(prefix="/projects/{project_id}")


@router.get("/text-blocks", response_model=list[TextBlockRead])
async def list_text_blocks(
    project_id: str,
    session: DbSession,
    include_removed: bool = Query(True),
) -> list[TextBlockRead]:
    """Text blocks of a project with their before/after diff entries."""
    await ProjectService(session).get_project(project_id)
    blocks = await TextBlockService(session).list_blocks(
        project_id,
        include_removed=include_removed,
    )
    return [to_text_block_read(block) for block in blocks]


@router.get("/frames", response_model=list[FrameRead])
async def list_frames(
    project_id: str,
    session: DbSession,
) -> list[FrameRead]:
    """Frames with derived status, top-to-bottom then left-to-right."""
    await ProjectService(session).get_project(project_id)
    return await TextBlockService(session).list_frames(project_id)


@router.get("/components", response_model=list[ComponentInfo])
async def list_components(
    project_id: str,
    session: DbSession,
) -> list[ComponentInfo]:
    """Distinct containers the project's text blocks belong to."""
    await ProjectService(session).get_project(project_id)
    return await TextBlockService(session).list_components(project_id)


@router.get("/pages", response_model=list[PageResponse])
async def list_project_pages(
    project_id: str,
    session: DbSession,
    provider: Provider,
) -> list[PageResponse]:
    """Pages of the project's Figma file, for picking a page scope."""
    project = await ProjectService(session).get_project(project_id)
    document = await provider.fetch_document(project.figma_file_key, project.figma_token)
    return [PageResponse(id=page.id, name=page.name) for page in list_pages(document)]
