"""Read access to stored text blocks and frames."""

from datetime import datetime

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.models import ComponentInfo, Frame, FrameRead, TextBlock
from app.models.types import as_utc
from app.services.status import compute_frame_status


class TextBlockService:
    """Queries over text blocks and frames."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_blocks(
        self,
        project_id: str | None = None,
        since: datetime | None = None,
        include_removed: bool = True,
    ) -> list[TextBlock]:
        """Blocks ordered by page name, most recently modified first.

        Args:
            project_id: Restrict to one project (all projects if None)
            since: Only blocks with ``last_modified >= since``
            include_removed: Whether blocks no longer present upstream are listed
        """
        query = select(TextBlock)
        if project_id is not None:
            query = query.where(TextBlock.project_id == project_id)
        if since is not None:
            query = query.where(TextBlock.last_modified >= as_utc(since))
        if not include_removed:
            query = query.where(TextBlock.removed_at.is_(None))

        result = await self.session.execute(
            query.order_by(TextBlock.page_name, TextBlock.last_modified.desc())
        )
        return list(result.scalars().all())

    async def list_frames(self, project_id: str) -> list[FrameRead]:
        """Frames ordered top-to-bottom, left-to-right, with derived status."""
        result = await self.session.execute(
            select(Frame)
            .where(Frame.project_id == project_id)
            .order_by(Frame.y, Frame.x)
        )
        frames = list(result.scalars().all())
        if not frames:
            return []

        blocks = await self.list_blocks(project_id)
        return [compute_frame_status(frame, blocks) for frame in frames]

    async def list_components(self, project_id: str) -> list[ComponentInfo]:
        """Distinct containers referenced by a project's blocks."""
        result = await self.session.execute(
            select(
                TextBlock.frame_id,
                func.max(TextBlock.frame_name),
                func.count(),
            )
            .where(
                TextBlock.project_id == project_id,
                TextBlock.frame_id.is_not(None),
            )
            .group_by(TextBlock.frame_id)
            .order_by(func.max(TextBlock.frame_name))
        )
        return [
            ComponentInfo(frame_id=frame_id, frame_name=frame_name, text_block_count=count)
            for frame_id, frame_name, count in result.all()
        ]
