"""Pull a project's design file and reconcile it with stored text blocks."""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.database import commit
from app.core.exceptions import SyncInProgressError, ValidationError
from app.models import Frame, Project
from app.models.types import utcnow
from app.services.change_tracker import ChangeOutcome, ChangeTracker
from app.services.figma.base import DesignProvider
from app.services.figma.extractor import ExtractedTextNode, extract_text_nodes
from app.services.projects import ProjectService

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    """Counts from one sync pass."""

    project_id: str
    total: int
    new: int
    updated: int
    unchanged: int
    removed: int
    frames: int
    timestamp: datetime


class SyncLocks:
    """One asyncio.Lock per project id."""

    def __init__(self):
        self._locks: dict[str, asyncio.Lock] = {}

    def get(self, project_id: str) -> asyncio.Lock:
        if project_id not in self._locks:
            self._locks[project_id] = asyncio.Lock()
        return self._locks[project_id]

    def is_running(self, project_id: str) -> bool:
        lock = self._locks.get(project_id)
        return lock is not None and lock.locked()

    def discard(self, project_id: str) -> None:
        lock = self._locks.get(project_id)
        if lock is not None and not lock.locked():
            del self._locks[project_id]

    def __len__(self) -> int:
        return len(self._locks)


sync_locks = SyncLocks()


def filter_by_containers(
    nodes: list[ExtractedTextNode],
    included_components: list[str],
) -> list[ExtractedTextNode]:
    """Apply a container allow-list. Items outside any container are always kept."""
    if not included_components:
        return nodes
    included = set(included_components)
    return [node for node in nodes if node.frame_id is None or node.frame_id in included]


class SyncService:
    """Orchestrates fetch, extract, classify and frame refresh for a project."""

    def __init__(
        self,
        session: AsyncSession,
        provider: DesignProvider,
        locks: SyncLocks | None = None,
    ):
        self.session = session
        self.provider = provider
        self.locks = locks or sync_locks

    async def sync(self, project_id: str) -> SyncResult:
        """Sync one project.

        Fails fast with SyncInProgressError when the same project is already
        syncing. Block writes commit item by item; frames are refreshed after
        every block is written and ``last_sync`` is stamped last, so a failed
        pass never advances the project's sync time and can simply be re-run.

        Raises:
            NotFoundError: If the project is missing or archived
            ProviderError: If the design file or its images cannot be fetched
            SyncInProgressError: If a sync of this project is already running
        """
        project = await ProjectService(self.session).get_project(project_id)
        lock = self.locks.get(project_id)
        if lock.locked():
            raise SyncInProgressError(project_id)

        try:
            async with lock:
                return await self._run(project)
        finally:
            self.locks.discard(project_id)

    async def sync_latest(self) -> SyncResult:
        """Sync the most recently updated project."""
        project = await ProjectService(self.session).latest_project()
        if project is None:
            raise ValidationError("No projects configured. Create a project first.")
        return await self.sync(project.id)

    async def _run(self, project: Project) -> SyncResult:
        project_id = project.id
        file_key = project.figma_file_key
        token = project.figma_token
        page_ids = list(project.source_page_ids or [])
        component_ids = list(project.included_components or [])
        timestamp = utcnow()

        logger.info(f"Starting sync for project {project_id} (file {file_key})")
        document = await self.provider.fetch_document(file_key, token)

        nodes = extract_text_nodes(document, page_ids)
        nodes = filter_by_containers(nodes, component_ids)

        tracker = ChangeTracker(self.session)
        counts = {outcome: 0 for outcome in ChangeOutcome}
        for node in nodes:
            outcome = await tracker.classify(project_id, node, timestamp)
            counts[outcome] += 1

        removed = await tracker.mark_removed(
            project_id,
            [node.id for node in nodes],
            page_ids,
            component_ids,
            timestamp,
        )

        frames: dict[str, ExtractedTextNode] = {}
        for node in nodes:
            if node.frame_id is not None and node.frame_id not in frames:
                frames[node.frame_id] = node

        if frames:
            images = await self.provider.fetch_images(file_key, token, list(frames))
            await self._upsert_frames(project_id, frames, images, timestamp)

        project.last_sync = timestamp
        project.updated_at = timestamp
        self.session.add(project)
        await commit(self.session)

        result = SyncResult(
            project_id=project_id,
            total=len(nodes),
            new=counts[ChangeOutcome.NEW],
            updated=counts[ChangeOutcome.CHANGED],
            unchanged=counts[ChangeOutcome.UNCHANGED],
            removed=removed,
            frames=len(frames),
            timestamp=timestamp,
        )
        logger.info(
            f"Synced project {project_id}: {result.total} blocks "
            f"({result.new} new, {result.updated} updated, {result.unchanged} unchanged, "
            f"{result.removed} removed), {result.frames} frames"
        )
        return result

    async def _upsert_frames(
        self,
        project_id: str,
        frames: dict[str, ExtractedTextNode],
        images: dict[str, str | None],
        timestamp: datetime,
    ) -> None:
        """Insert or overwrite every observed frame, image included."""
        result = await self.session.execute(
            select(Frame).where(
                Frame.project_id == project_id,
                Frame.id.in_(list(frames)),
            )
        )
        existing = {frame.id: frame for frame in result.scalars().all()}

        for frame_id, node in frames.items():
            frame = existing.get(frame_id) or Frame(id=frame_id, project_id=project_id)
            frame.name = node.frame_name or ""
            frame.image_url = images.get(frame_id)
            frame.x = node.frame_x or 0.0
            frame.y = node.frame_y or 0.0
            frame.width = node.frame_width or 0.0
            frame.height = node.frame_height or 0.0
            frame.last_synced = timestamp
            self.session.add(frame)

        await commit(self.session)
