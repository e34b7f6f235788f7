"""Export and change-feed endpoints."""

from datetime import datetime
from typing import Literal

from fastapi import APIRouter
from fastapi.responses import StreamingResponse

from app.core.deps import DbSession
from app.models import TextBlockRead
from app.schemas.export import ExportResponse
from app.services.export import ExportResult, ExportService, to_csv
from app.services.status import to_text_block_read
from app.services.text_blocks import TextBlockService

router = APIRouter()


@router.get("/export", response_model=ExportResponse)
async def export_text_blocks(
    session: DbSession,
    project_id: str | None = None,
    format: Literal["json", "csv"] = "json",
    since: datetime | None = None,
):
    """Export current text.

    Scoped to a project, this also marks the project's accepted changes as
    exported. Returns JSON, or a CSV file download.
    """
    result = await ExportService(session).export(project_id=project_id, since=since)

    if format == "csv":
        return _export_csv(result)
    return ExportResponse(items=result.items, total=result.total, exported_at=result.exported_at)


def _export_csv(result: ExportResult) -> StreamingResponse:
    """Export items as CSV."""
    timestamp = result.exported_at.strftime("%Y%m%d_%H%M%S")
    return StreamingResponse(
        iter([to_csv(result.items)]),
        media_type="text/csv",
        headers={
            "Content-Disposition": f"attachment; filename=fignity_export_{timestamp}.csv"
        },
    )


@router.get("/changes", response_model=list[TextBlockRead])
async def list_changes(
    session: DbSession,
    since: datetime | None = None,
) -> list[TextBlockRead]:
    """Text blocks across all projects, optionally modified since a timestamp."""
    blocks = await TextBlockService(session).list_blocks(since=since)
    return [to_text_block_read(block) for block in blocks]
