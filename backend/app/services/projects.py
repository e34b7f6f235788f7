"""Project management service."""

import logging
import re
from collections import defaultdict

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.database import commit
from app.core.exceptions import NotFoundError, ValidationError
from app.models import (
    ChangeStatus,
    Frame,
    Project,
    ProjectCreate,
    ProjectRead,
    ProjectUpdate,
    TextBlock,
)
from app.models.types import utcnow
from app.services.status import compute_project_status

logger = logging.getLogger(__name__)

FIGMA_URL_PATTERN = re.compile(r"figma\.com/(?:design|file|proto)/([a-zA-Z0-9]+)")


def extract_figma_file_key(value: str) -> str:
    """Return the file key from a bare key or a figma.com file/design/proto URL.

    Raises:
        ValidationError: If a URL is given that does not contain a file key
    """
    value = value.strip()
    if not value:
        raise ValidationError("Figma file key must not be blank")
    if not value.startswith("http"):
        return value

    match = FIGMA_URL_PATTERN.search(value)
    if not match:
        raise ValidationError("Invalid Figma URL. Please provide a file key or valid Figma URL.")
    return match.group(1)


def required_name(value: str) -> str:
    name = value.strip()
    if not name:
        raise ValidationError("Project name must not be blank")
    return name


class ProjectService:
    """Service for project CRUD and project-level rollups."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_project(self, project_id: str, include_archived: bool = False) -> Project:
        """Get a project by id.

        Raises:
            NotFoundError: If it does not exist, or is archived and
                ``include_archived`` is false
        """
        project = await self.session.get(Project, project_id)
        if not project or (project.archived and not include_archived):
            raise NotFoundError("Project", project_id)
        return project

    async def list_projects(self, include_archived: bool = False) -> list[Project]:
        """Projects, most recently updated first."""
        query = select(Project)
        if not include_archived:
            query = query.where(Project.archived == False)  # noqa: E712
        result = await self.session.execute(query.order_by(Project.updated_at.desc()))
        return list(result.scalars().all())

    async def latest_project(self) -> Project | None:
        """Most recently updated non-archived project."""
        projects = await self.list_projects()
        return projects[0] if projects else None

    async def has_any_projects(self) -> bool:
        return await self.latest_project() is not None

    async def to_read(self, projects: list[Project]) -> list[ProjectRead]:
        """Read schemas with derived status and counts, one block query for all."""
        if not projects:
            return []

        result = await self.session.execute(
            select(TextBlock).where(TextBlock.project_id.in_([p.id for p in projects]))
        )
        blocks_by_project: dict[str, list[TextBlock]] = defaultdict(list)
        for block in result.scalars().all():
            blocks_by_project[block.project_id].append(block)

        reads = []
        for project in projects:
            blocks = blocks_by_project[project.id]
            reads.append(
                ProjectRead.from_project(
                    project,
                    status=compute_project_status(blocks, project.last_export),
                    pending_count=sum(1 for b in blocks if b.change_status == ChangeStatus.PENDING),
                    accepted_count=sum(1 for b in blocks if b.change_status == ChangeStatus.ACCEPTED),
                    text_block_count=len(blocks),
                )
            )
        return reads

    async def create_project(self, data: ProjectCreate) -> Project:
        """Create a project; ``figma_file_key`` may be a key or a Figma URL."""
        name = required_name(data.name)
        file_key = extract_figma_file_key(data.figma_file_key)
        now = utcnow()
        project = Project(
            name=name,
            figma_file_key=file_key,
            figma_token=data.figma_token,
            included_components=data.included_components or [],
            source_page_ids=data.source_page_ids or [],
            created_at=now,
            updated_at=now,
        )
        self.session.add(project)
        await commit(self.session)
        await self.session.refresh(project)

        logger.info(f"Created project {project.id} ({project.name})")
        return project

    async def update_project(self, project_id: str, data: ProjectUpdate) -> Project:
        """Apply a partial update. ``updated_at`` only moves when a field is set."""
        project = await self.get_project(project_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        if not changes:
            return project

        if "figma_file_key" in changes:
            changes["figma_file_key"] = extract_figma_file_key(changes["figma_file_key"])
        if "name" in changes:
            changes["name"] = required_name(changes["name"])

        for field, value in changes.items():
            setattr(project, field, value)
        project.updated_at = utcnow()

        self.session.add(project)
        await commit(self.session)
        await self.session.refresh(project)
        return project

    async def archive_project(self, project_id: str) -> Project:
        """Soft delete: hide from listings and refuse syncs."""
        project = await self.get_project(project_id)
        project.archived = True
        project.updated_at = utcnow()
        self.session.add(project)
        await commit(self.session)
        logger.info(f"Archived project {project_id}")
        return project

    async def restore_project(self, project_id: str) -> Project:
        project = await self.get_project(project_id, include_archived=True)
        project.archived = False
        project.updated_at = utcnow()
        self.session.add(project)
        await commit(self.session)
        await self.session.refresh(project)
        logger.info(f"Restored project {project_id}")
        return project

    async def delete_project(self, project_id: str) -> None:
        """Hard delete a project with its text blocks and frames in one transaction."""
        project = await self.get_project(project_id, include_archived=True)
        await self.session.execute(delete(TextBlock).where(TextBlock.project_id == project_id))
        await self.session.execute(delete(Frame).where(Frame.project_id == project_id))
        await self.session.delete(project)
        await commit(self.session)
        logger.info(f"Deleted project {project_id}")
