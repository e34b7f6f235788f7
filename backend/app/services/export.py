"""Export current text to JSON or CSV and commit accepted changes."""

import csv
import io
import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.database import commit
from app.models import ChangeStatus, TextBlock
from app.models.types import utcnow
from app.schemas.export import EXPORT_FIELDS, ExportItem
from app.services.projects import ProjectService
from app.services.text_blocks import TextBlockService

logger = logging.getLogger(__name__)


@dataclass
class ExportResult:
    """Snapshot of exported items, taken before accepted blocks were cleaned."""

    items: list[ExportItem]
    exported_at: datetime
    project_id: str | None = None
    cleaned: int = 0

    @property
    def total(self) -> int:
        return len(self.items)


def _csv_value(value) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def to_csv(items: list[ExportItem]) -> str:
    """Header row plus one row per item.

    Fields holding the delimiter, a quote or a newline are quoted with
    embedded quotes doubled.
    """
    output = io.StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(EXPORT_FIELDS)
    for item in items:
        writer.writerow([_csv_value(getattr(item, field)) for field in EXPORT_FIELDS])
    return output.getvalue()


class ExportService:
    """Service producing export snapshots."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def export(
        self,
        project_id: str | None = None,
        since: datetime | None = None,
    ) -> ExportResult:
        """Read blocks for export.

        Blocks no longer present upstream are left out. When scoped to one
        project, every accepted block there becomes clean and the project's
        ``last_export`` is stamped, all in one commit. Unscoped exports have
        no side effects.

        Raises:
            NotFoundError: If ``project_id`` names no active project
        """
        project = None
        if project_id is not None:
            project = await ProjectService(self.session).get_project(project_id)

        blocks = await TextBlockService(self.session).list_blocks(
            project_id=project_id,
            since=since,
            include_removed=False,
        )
        items = [ExportItem.model_validate(block) for block in blocks]
        exported_at = utcnow()

        if project is None:
            return ExportResult(items=items, exported_at=exported_at)

        result = await self.session.execute(
            select(TextBlock).where(
                TextBlock.project_id == project.id,
                TextBlock.change_status == ChangeStatus.ACCEPTED,
            )
        )
        accepted = list(result.scalars().all())
        for block in accepted:
            block.mark_exported()
            self.session.add(block)

        project.last_export = exported_at
        project.updated_at = exported_at
        self.session.add(project)
        await commit(self.session)

        logger.info(
            f"Exported {len(items)} blocks from project {project.id}; "
            f"{len(accepted)} accepted changes committed"
        )
        return ExportResult(
            items=items,
            exported_at=exported_at,
            project_id=project.id,
            cleaned=len(accepted),
        )
