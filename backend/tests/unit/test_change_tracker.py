"""Unit tests for classification and persistence of extracted text."""

from datetime import datetime, timezone

import pytest

from app.models import ChangeStatus
from app.services.change_tracker import ChangeOutcome, ChangeTracker
from app.services.figma import ExtractedTextNode

T1 = datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)
T2 = datetime(2025, 3, 1, 10, 0, tzinfo=timezone.utc)
T3 = datetime(2025, 3, 1, 11, 0, tzinfo=timezone.utc)


def extracted(
    content: str = "A",
    x: float = 0.0,
    y: float = 0.0,
    width: float = 100.0,
    height: float = 20.0,
    node_id: str = "100:1",
    page_id: str = "1:1",
    frame_id: str | None = "10:1",
    frame_name: str | None = "Hero",
    style_name: str | None = None,
) -> ExtractedTextNode:
    return ExtractedTextNode(
        id=node_id,
        page_id=page_id,
        page_name="Landing",
        content=content,
        font_size=16,
        x=x,
        y=y,
        width=width,
        height=height,
        style_name=style_name,
        frame_id=frame_id,
        frame_name=frame_name,
    )


@pytest.mark.asyncio
class TestClassify:
    """Tests for the new / changed / unchanged outcomes."""

    async def test_new_block_is_clean(self, test_session, project):
        tracker = ChangeTracker(test_session)

        outcome = await tracker.classify(project.id, extracted(), T1)

        block = await tracker.get_block(project.id, "100:1")
        assert outcome == ChangeOutcome.NEW
        assert block.change_status == ChangeStatus.CLEAN
        assert block.previous_snapshot is None
        assert block.change_detected_at is None
        assert block.style == "Body M"
        assert block.last_modified == T1

    async def test_changed_block_keeps_pre_update_values(self, test_session, project):
        tracker = ChangeTracker(test_session)
        await tracker.classify(project.id, extracted("A"), T1)

        outcome = await tracker.classify(project.id, extracted("B"), T2)

        block = await tracker.get_block(project.id, "100:1")
        assert outcome == ChangeOutcome.CHANGED
        assert block.change_status == ChangeStatus.PENDING
        assert block.content == "B"
        assert block.previous_content == "A"
        assert block.previous_style == "Body M"
        assert block.previous_content_hash is not None
        assert block.previous_content_hash != block.content_hash
        assert block.change_detected_at == T2

    async def test_second_change_moves_baseline(self, test_session, project):
        """Baseline is the last value seen before the latest change."""
        tracker = ChangeTracker(test_session)
        await tracker.classify(project.id, extracted("A"), T1)
        await tracker.classify(project.id, extracted("B"), T2)

        await tracker.classify(project.id, extracted("C"), T3)

        block = await tracker.get_block(project.id, "100:1")
        assert block.change_status == ChangeStatus.PENDING
        assert block.previous_content == "B"
        assert block.content == "C"
        assert block.change_detected_at == T3

    async def test_unchanged_sync_keeps_pending_baseline(self, test_session, project):
        tracker = ChangeTracker(test_session)
        await tracker.classify(project.id, extracted("A"), T1)
        await tracker.classify(project.id, extracted("B"), T2)

        outcome = await tracker.classify(
            project.id,
            extracted("B", frame_id="10:9", frame_name="Renamed"),
            T3,
        )

        block = await tracker.get_block(project.id, "100:1")
        assert outcome == ChangeOutcome.UNCHANGED
        assert block.change_status == ChangeStatus.PENDING
        assert block.previous_content == "A"
        assert block.change_detected_at == T2
        assert block.frame_id == "10:9"
        assert block.frame_name == "Renamed"
        assert block.last_modified == T3

    async def test_resize_alone_is_unchanged(self, test_session, project):
        tracker = ChangeTracker(test_session)
        await tracker.classify(project.id, extracted(width=100.0, height=20.0), T1)

        outcome = await tracker.classify(project.id, extracted(width=300.0, height=60.0), T2)

        block = await tracker.get_block(project.id, "100:1")
        assert outcome == ChangeOutcome.UNCHANGED
        assert block.change_status == ChangeStatus.CLEAN
        assert block.width == 100.0

    async def test_move_is_a_change_and_carries_size(self, test_session, project):
        tracker = ChangeTracker(test_session)
        await tracker.classify(project.id, extracted(x=0.0, width=100.0), T1)

        outcome = await tracker.classify(project.id, extracted(x=50.0, width=120.0), T2)

        block = await tracker.get_block(project.id, "100:1")
        assert outcome == ChangeOutcome.CHANGED
        assert block.previous_x == 0.0
        assert block.previous_width == 100.0
        assert block.width == 120.0

    async def test_accepted_block_changed_again(self, test_session, project):
        tracker = ChangeTracker(test_session)
        await tracker.classify(project.id, extracted("A"), T1)
        await tracker.classify(project.id, extracted("B"), T2)
        block = await tracker.get_block(project.id, "100:1")
        block.mark_accepted(T2)
        test_session.add(block)
        await test_session.commit()

        await tracker.classify(project.id, extracted("C"), T3)

        block = await tracker.get_block(project.id, "100:1")
        assert block.change_status == ChangeStatus.PENDING
        assert block.previous_content == "B"
        assert block.change_accepted_at is None

    async def test_named_style_used_as_label(self, test_session, project):
        tracker = ChangeTracker(test_session)

        await tracker.classify(project.id, extracted(style_name="Heading/H1"), T1)

        block = await tracker.get_block(project.id, "100:1")
        assert block.style == "Heading/H1"


@pytest.mark.asyncio
class TestMarkRemoved:
    """Tests for flagging blocks that disappeared upstream."""

    async def test_unseen_block_marked(self, test_session, project):
        tracker = ChangeTracker(test_session)
        await tracker.classify(project.id, extracted(node_id="100:1"), T1)
        await tracker.classify(project.id, extracted(node_id="100:2"), T1)

        removed = await tracker.mark_removed(project.id, ["100:1"], [], [], T2)

        assert removed == 1
        gone = await tracker.get_block(project.id, "100:2")
        kept = await tracker.get_block(project.id, "100:1")
        assert gone.removed_at == T2
        assert gone.change_status == ChangeStatus.CLEAN
        assert kept.removed_at is None

    async def test_out_of_scope_blocks_untouched(self, test_session, project):
        tracker = ChangeTracker(test_session)
        await tracker.classify(project.id, extracted(node_id="100:1", page_id="1:1"), T1)
        await tracker.classify(project.id, extracted(node_id="100:2", page_id="1:2"), T1)
        await tracker.classify(project.id, extracted(node_id="100:3", frame_id="10:2"), T1)
        await tracker.classify(project.id, extracted(node_id="100:4", frame_id=None, frame_name=None), T1)

        removed = await tracker.mark_removed(project.id, [], ["1:1"], ["10:1"], T2)

        assert removed == 2
        assert (await tracker.get_block(project.id, "100:1")).removed_at == T2
        assert (await tracker.get_block(project.id, "100:2")).removed_at is None
        assert (await tracker.get_block(project.id, "100:3")).removed_at is None
        assert (await tracker.get_block(project.id, "100:4")).removed_at == T2

    async def test_reappearing_block_cleared(self, test_session, project):
        tracker = ChangeTracker(test_session)
        await tracker.classify(project.id, extracted(), T1)
        await tracker.mark_removed(project.id, [], [], [], T2)

        await tracker.classify(project.id, extracted(), T3)

        block = await tracker.get_block(project.id, "100:1")
        assert block.removed_at is None

    async def test_already_removed_not_counted_again(self, test_session, project):
        tracker = ChangeTracker(test_session)
        await tracker.classify(project.id, extracted(), T1)
        await tracker.mark_removed(project.id, [], [], [], T2)

        removed = await tracker.mark_removed(project.id, [], [], [], T3)

        block = await tracker.get_block(project.id, "100:1")
        assert removed == 0
        assert block.removed_at == T2
