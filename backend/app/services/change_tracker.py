"""Classify extracted text against stored blocks and persist the outcome."""

import logging
from datetime import datetime
from enum import Enum
from typing import Iterable

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.database import commit
from app.models import TextBlock
from app.services.figma.extractor import ExtractedTextNode
from app.services.figma.style_mapper import resolve_style_label
from app.services.fingerprint import fingerprint

logger = logging.getLogger(__name__)


class ChangeOutcome(str, Enum):
    """Result of classifying one extracted item."""

    NEW = "new"
    CHANGED = "changed"
    UNCHANGED = "unchanged"


def _apply_linkage(block: TextBlock, node: ExtractedTextNode) -> None:
    block.page_id = node.page_id
    block.page_name = node.page_name
    block.frame_id = node.frame_id
    block.frame_name = node.frame_name
    block.frame_x = node.frame_x
    block.frame_y = node.frame_y
    block.frame_width = node.frame_width
    block.frame_height = node.frame_height


def _apply_values(block: TextBlock, node: ExtractedTextNode, style: str, content_hash: str) -> None:
    block.content = node.content
    block.style = style
    block.font_size = node.font_size
    block.x = node.x
    block.y = node.y
    block.width = node.width
    block.height = node.height
    block.content_hash = content_hash


def in_scope(block: TextBlock, page_ids: set[str], frame_ids: set[str]) -> bool:
    """Whether a stored block falls inside a project's page and container allow-lists."""
    if page_ids and block.page_id not in page_ids:
        return False
    if frame_ids and block.frame_id is not None and block.frame_id not in frame_ids:
        return False
    return True


class ChangeTracker:
    """Service applying sync observations to stored text blocks."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_block(self, project_id: str, block_id: str) -> TextBlock | None:
        result = await self.session.execute(
            select(TextBlock).where(
                TextBlock.project_id == project_id,
                TextBlock.id == block_id,
            )
        )
        return result.scalar_one_or_none()

    async def classify(
        self,
        project_id: str,
        node: ExtractedTextNode,
        timestamp: datetime,
    ) -> ChangeOutcome:
        """Classify one extracted item and persist it.

        - New: inserted clean with no baseline.
        - Changed: the pre-update values become the baseline (replacing any
          older one) and the block goes pending with the new values.
        - Unchanged: only page/container linkage and ``last_modified`` move;
          change-tracking fields are left alone.

        Each call commits on its own.
        """
        style = resolve_style_label(node.style_name, node.font_size)
        content_hash = fingerprint(node.content, style, node.x, node.y)
        existing = await self.get_block(project_id, node.id)

        if existing is None:
            block = TextBlock(id=node.id, project_id=project_id, last_modified=timestamp)
            _apply_linkage(block, node)
            _apply_values(block, node, style, content_hash)
            self.session.add(block)
            outcome = ChangeOutcome.NEW
        elif existing.content_hash != content_hash:
            baseline = existing.snapshot()
            _apply_linkage(existing, node)
            _apply_values(existing, node, style, content_hash)
            existing.mark_changed(baseline, timestamp)
            existing.last_modified = timestamp
            existing.removed_at = None
            self.session.add(existing)
            outcome = ChangeOutcome.CHANGED
        else:
            _apply_linkage(existing, node)
            existing.last_modified = timestamp
            existing.removed_at = None
            self.session.add(existing)
            outcome = ChangeOutcome.UNCHANGED

        await commit(self.session)
        return outcome

    async def mark_removed(
        self,
        project_id: str,
        observed_ids: Iterable[str],
        page_ids: Iterable[str],
        frame_ids: Iterable[str],
        timestamp: datetime,
    ) -> int:
        """Stamp ``removed_at`` on in-scope blocks the latest sync did not see.

        Rows are never deleted and their change state is untouched. Returns the
        number of blocks newly marked.
        """
        observed = set(observed_ids)
        pages = set(page_ids)
        frames = set(frame_ids)

        result = await self.session.execute(
            select(TextBlock).where(
                TextBlock.project_id == project_id,
                TextBlock.removed_at.is_(None),
            )
        )
        removed = 0
        for block in result.scalars().all():
            if block.id in observed or not in_scope(block, pages, frames):
                continue
            block.removed_at = timestamp
            self.session.add(block)
            removed += 1

        if removed:
            await commit(self.session)
            logger.info(f"Marked {removed} text blocks removed in project {project_id}")
        return removed
