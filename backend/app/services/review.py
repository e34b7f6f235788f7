"""Accept detected changes."""

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.database import commit
from app.core.exceptions import NotFoundError
from app.models import ChangeStatus, TextBlock
from app.models.types import utcnow

logger = logging.getLogger(__name__)


@dataclass
class AcceptResult:
    """Outcome of accepting a single block."""

    block_id: str
    accepted: bool
    accepted_at: datetime | None


@dataclass
class AcceptAllResult:
    """Outcome of accepting every pending block of a project."""

    accepted_count: int
    accepted_at: datetime


class ReviewService:
    """Service moving pending blocks to accepted."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def accept_change(self, project_id: str, block_id: str) -> AcceptResult:
        """Accept one pending block.

        Raises:
            NotFoundError: If the block does not belong to the project

        A block that is not pending is left untouched; the result then reports
        ``accepted=False`` with whatever acceptance time it already had.
        """
        result = await self.session.execute(
            select(TextBlock).where(
                TextBlock.project_id == project_id,
                TextBlock.id == block_id,
            )
        )
        block = result.scalar_one_or_none()
        if not block:
            raise NotFoundError("Text block", block_id)

        if block.change_status != ChangeStatus.PENDING:
            return AcceptResult(block_id=block.id, accepted=False, accepted_at=block.change_accepted_at)

        accepted_at = utcnow()
        block.mark_accepted(accepted_at)
        self.session.add(block)
        await commit(self.session)

        logger.info(f"Accepted change on text block {block_id} in project {project_id}")
        return AcceptResult(block_id=block.id, accepted=True, accepted_at=accepted_at)

    async def accept_all(self, project_id: str) -> AcceptAllResult:
        """Accept every pending block of a project in a single transaction."""
        result = await self.session.execute(
            select(TextBlock).where(
                TextBlock.project_id == project_id,
                TextBlock.change_status == ChangeStatus.PENDING,
            )
        )
        blocks = list(result.scalars().all())

        accepted_at = utcnow()
        for block in blocks:
            block.mark_accepted(accepted_at)
            self.session.add(block)
        await commit(self.session)

        logger.info(f"Accepted {len(blocks)} pending changes in project {project_id}")
        return AcceptAllResult(accepted_count=len(blocks), accepted_at=accepted_at)
