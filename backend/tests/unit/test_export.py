"""Unit tests for export snapshots and CSV rendering."""

import csv
import io
from datetime import datetime, timezone

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.exceptions import NotFoundError
from app.models import BlockSnapshot, ChangeStatus, Project, ProjectStatus, TextBlock
from app.schemas.export import EXPORT_FIELDS
from app.services.export import ExportService, to_csv
from app.services.projects import ProjectService


def utc(*parts: int) -> datetime:
    return datetime(*parts, tzinfo=timezone.utc)


async def add_block(
    session,
    project_id: str,
    block_id: str,
    content: str = "Hello",
    status: ChangeStatus = ChangeStatus.CLEAN,
    last_modified: datetime = utc(2025, 1, 1),
    removed_at: datetime | None = None,
) -> TextBlock:
    block = TextBlock(
        id=block_id,
        project_id=project_id,
        page_id="1:1",
        page_name="Landing",
        frame_id="10:1",
        frame_name="Hero",
        content=content,
        style="Body M",
        x=1.0,
        y=2.0,
        width=100.0,
        height=20.0,
        content_hash=f"hash-{block_id}",
        last_modified=last_modified,
        removed_at=removed_at,
    )
    if status != ChangeStatus.CLEAN:
        block.mark_changed(
            BlockSnapshot("Old", "Body M", 1.0, 2.0, 100.0, 20.0, "hash-old"),
            last_modified,
        )
    if status == ChangeStatus.ACCEPTED:
        block.mark_accepted(last_modified)
    session.add(block)
    await session.commit()
    return block


class TestToCsv:
    """Tests for CSV rendering."""

    @pytest.mark.asyncio
    async def test_quotes_and_commas_survive(self, test_session, project):
        await add_block(test_session, project.id, "100:1", content='Say "hi", friend')
        export = await ExportService(test_session).export()

        rows = list(csv.reader(io.StringIO(to_csv(export.items))))

        assert rows[0] == EXPORT_FIELDS
        assert len(rows) == 2
        record = dict(zip(rows[0], rows[1]))
        assert record["content"] == 'Say "hi", friend'
        assert record["frame_name"] == "Hero"
        assert record["last_modified"] == "2025-01-01T00:00:00+00:00"

    def test_empty_export_has_header(self):
        assert to_csv([]) == ",".join(EXPORT_FIELDS) + "\n"

    @pytest.mark.asyncio
    async def test_missing_container_is_empty_field(self, test_session, project):
        block = await add_block(test_session, project.id, "100:1")
        block.frame_id = None
        block.frame_name = None
        test_session.add(block)
        await test_session.commit()
        export = await ExportService(test_session).export()

        rows = list(csv.DictReader(io.StringIO(to_csv(export.items))))

        assert rows[0]["frame_id"] == ""
        assert rows[0]["frame_name"] == ""


@pytest.mark.asyncio
class TestExportService:
    """Tests for export side effects."""

    async def test_scoped_export_cleans_accepted(self, test_session, project):
        await add_block(test_session, project.id, "100:1", status=ChangeStatus.ACCEPTED)
        await add_block(test_session, project.id, "100:2", status=ChangeStatus.PENDING)
        await add_block(test_session, project.id, "100:3")

        result = await ExportService(test_session).export(project.id)

        statuses = {item.id: item.change_status for item in result.items}
        assert statuses["100:1"] == ChangeStatus.ACCEPTED
        assert result.total == 3
        assert result.cleaned == 1

        accepted = await test_session.get(TextBlock, (project.id, "100:1"))
        pending = await test_session.get(TextBlock, (project.id, "100:2"))
        assert accepted.change_status == ChangeStatus.CLEAN
        assert accepted.change_accepted_at is None
        assert pending.change_status == ChangeStatus.PENDING
        assert pending.previous_content == "Old"
        assert project.last_export == result.exported_at

    async def test_second_export_changes_nothing(self, test_session, project):
        await add_block(test_session, project.id, "100:1", status=ChangeStatus.ACCEPTED)
        service = ExportService(test_session)
        first = await service.export(project.id)

        second = await service.export(project.id)

        assert second.cleaned == 0
        assert [i.id for i in second.items] == [i.id for i in first.items]
        assert second.items[0].change_status == ChangeStatus.CLEAN

    async def test_unscoped_export_has_no_side_effects(self, test_session, project):
        await add_block(test_session, project.id, "100:1", status=ChangeStatus.ACCEPTED)

        result = await ExportService(test_session).export()

        block = await test_session.get(TextBlock, (project.id, "100:1"))
        assert result.project_id is None
        assert block.change_status == ChangeStatus.ACCEPTED
        assert project.last_export is None

    async def test_unscoped_export_spans_projects(self, test_session, project):
        other = Project(name="Other", figma_file_key="K2", figma_token="t")
        test_session.add(other)
        await test_session.commit()
        await add_block(test_session, project.id, "100:1")
        await add_block(test_session, other.id, "100:1")

        result = await ExportService(test_session).export()

        assert sorted(i.project_id for i in result.items) == sorted([project.id, other.id])

    async def test_removed_blocks_left_out(self, test_session, project):
        await add_block(test_session, project.id, "100:1")
        await add_block(test_session, project.id, "100:2", removed_at=utc(2025, 2, 1))

        result = await ExportService(test_session).export(project.id)

        assert [i.id for i in result.items] == ["100:1"]

    async def test_since_filter(self, test_session, project):
        await add_block(test_session, project.id, "100:1", last_modified=utc(2025, 1, 1))
        await add_block(test_session, project.id, "100:2", last_modified=utc(2025, 3, 1))

        result = await ExportService(test_session).export(project.id, since=utc(2025, 2, 1))

        assert [i.id for i in result.items] == ["100:2"]

    async def test_since_filter_takes_naive_utc(self, test_session, project):
        await add_block(test_session, project.id, "100:1", last_modified=utc(2025, 1, 1))
        await add_block(test_session, project.id, "100:2", last_modified=utc(2025, 3, 1))

        result = await ExportService(test_session).export(project.id, since=datetime(2025, 2, 1))

        assert [i.id for i in result.items] == ["100:2"]

    async def test_timestamps_compare_after_reload(self, test_engine, test_session, project):
        await add_block(test_session, project.id, "100:1", status=ChangeStatus.ACCEPTED)
        result = await ExportService(test_session).export(project.id)

        fresh_session = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
        async with fresh_session() as session:
            stored = await session.get(Project, project.id)
            [after_export] = await ProjectService(session).to_read([stored])

        await add_block(
            test_session, project.id, "100:2", status=ChangeStatus.ACCEPTED, last_modified=utc(2999, 1, 1)
        )
        async with fresh_session() as session:
            [after_accept] = await ProjectService(session).to_read([await session.get(Project, project.id)])
            reloaded = await session.get(TextBlock, (project.id, "100:2"))

        assert stored.last_export == result.exported_at
        assert stored.last_export.tzinfo is not None
        assert after_export.status == ProjectStatus.CLEAN
        assert after_accept.status == ProjectStatus.NEEDS_EXPORT
        assert reloaded.change_accepted_at == utc(2999, 1, 1)

    async def test_unknown_project(self, test_session):
        with pytest.raises(NotFoundError):
            await ExportService(test_session).export("missing")
