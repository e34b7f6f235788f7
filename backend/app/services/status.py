"""Derived review status for frames and projects.

Nothing here is stored: statuses depend on the live block states and the
project's last export, so they are recomputed on every read.
"""

from datetime import datetime
from typing import Iterable

from app.models import (
    ChangeStatus,
    Frame,
    FrameRead,
    ProjectStatus,
    TextBlock,
    TextBlockChange,
    TextBlockRead,
)
from app.models.types import as_utc


def compute_frame_status(frame: Frame, text_blocks: Iterable[TextBlock]) -> FrameRead:
    """Frame with ``pending`` > ``accepted`` > ``clean`` over its own blocks."""
    statuses = [
        ChangeStatus(block.change_status)
        for block in text_blocks
        if block.frame_id == frame.id
    ]
    pending_count = statuses.count(ChangeStatus.PENDING)

    if pending_count:
        status = ChangeStatus.PENDING
    elif ChangeStatus.ACCEPTED in statuses:
        status = ChangeStatus.ACCEPTED
    else:
        status = ChangeStatus.CLEAN

    return FrameRead(
        id=frame.id,
        project_id=frame.project_id,
        name=frame.name,
        image_url=frame.image_url,
        x=frame.x,
        y=frame.y,
        width=frame.width,
        height=frame.height,
        last_synced=frame.last_synced,
        created_at=frame.created_at,
        status=status,
        pending_changes_count=pending_count,
    )


def compute_project_status(
    text_blocks: Iterable[TextBlock],
    last_export: datetime | None,
) -> ProjectStatus:
    """Project rollup.

    ``pending`` if any block is pending; otherwise ``needs_export`` if some
    block is accepted and either the project was never exported or an
    acceptance is newer than the last export; otherwise ``clean``.
    """
    blocks = list(text_blocks)
    if any(block.change_status == ChangeStatus.PENDING for block in blocks):
        return ProjectStatus.PENDING

    accepted = [block for block in blocks if block.change_status == ChangeStatus.ACCEPTED]
    if accepted:
        if last_export is None:
            return ProjectStatus.NEEDS_EXPORT
        exported_at = as_utc(last_export)
        if any(
            block.change_accepted_at is not None and as_utc(block.change_accepted_at) > exported_at
            for block in accepted
        ):
            return ProjectStatus.NEEDS_EXPORT

    return ProjectStatus.CLEAN


def _point(x: float, y: float) -> str:
    return f"({x:.0f}, {y:.0f})"


def _size(width: float, height: float) -> str:
    return f"{width:.0f}×{height:.0f}"


def get_text_block_changes(block: TextBlock) -> list[TextBlockChange]:
    """Displayable differences between a block's baseline and current values.

    Position and size are compared directly, so they show up even though
    they do not drive change detection.
    """
    changes: list[TextBlockChange] = []

    if block.previous_content is not None and block.previous_content != block.content:
        changes.append(
            TextBlockChange(
                type="content",
                label="Content",
                old_value=block.previous_content,
                new_value=block.content,
            )
        )

    if block.previous_style is not None and block.previous_style != block.style:
        changes.append(
            TextBlockChange(
                type="style",
                label="Style",
                old_value=block.previous_style,
                new_value=block.style,
            )
        )

    if (
        block.previous_x is not None
        and block.previous_y is not None
        and (block.previous_x != block.x or block.previous_y != block.y)
    ):
        changes.append(
            TextBlockChange(
                type="position",
                label="Position",
                old_value=_point(block.previous_x, block.previous_y),
                new_value=_point(block.x, block.y),
            )
        )

    if (
        block.previous_width is not None
        and block.previous_height is not None
        and (block.previous_width != block.width or block.previous_height != block.height)
    ):
        changes.append(
            TextBlockChange(
                type="size",
                label="Size",
                old_value=_size(block.previous_width, block.previous_height),
                new_value=_size(block.width, block.height),
            )
        )

    return changes


def to_text_block_read(block: TextBlock) -> TextBlockRead:
    """Read schema for a block, with its diff entries."""
    return TextBlockRead.model_validate(block, update={"changes": get_text_block_changes(block)})
