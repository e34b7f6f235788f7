"""Project model: one Figma file tracked for text changes."""

from datetime import datetime
from enum import Enum
from uuid import uuid4

from sqlalchemy import Column
from sqlmodel import Field, SQLModel

from app.models.types import JSONStringList, UTCDateTime, utcnow


class ProjectStatus(str, Enum):
    """Derived project-level review status."""

    CLEAN = "clean"
    PENDING = "pending"
    NEEDS_EXPORT = "needs_export"


class ProjectBase(SQLModel):
    """Base project fields."""

    name: str = Field(index=True)
    figma_file_key: str


class Project(ProjectBase, table=True):
    """Project database model."""

    __tablename__ = "projects"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    figma_token: str
    included_components: list[str] = Field(
        default_factory=list,
        sa_column=Column(JSONStringList, nullable=False, server_default="[]"),
    )
    source_page_ids: list[str] = Field(
        default_factory=list,
        sa_column=Column(JSONStringList, nullable=False, server_default="[]"),
    )
    last_sync: datetime | None = Field(default=None, sa_type=UTCDateTime)
    last_export: datetime | None = Field(default=None, sa_type=UTCDateTime)
    archived: bool = Field(default=False, index=True)
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)


class ProjectCreate(SQLModel):
    """Schema for creating a project."""

    name: str = Field(min_length=1)
    figma_file_key: str = Field(min_length=1)  # bare key or figma.com URL
    figma_token: str = Field(min_length=1)
    included_components: list[str] | None = None
    source_page_ids: list[str] | None = None


class ProjectUpdate(SQLModel):
    """Schema for updating a project."""

    name: str | None = Field(default=None, min_length=1)
    figma_file_key: str | None = Field(default=None, min_length=1)
    figma_token: str | None = Field(default=None, min_length=1)
    included_components: list[str] | None = None
    source_page_ids: list[str] | None = None


class ProjectRead(ProjectBase):
    """Schema for reading a project. The token never leaves the server."""

    id: str
    has_token: bool
    included_components: list[str]
    source_page_ids: list[str]
    last_sync: datetime | None
    last_export: datetime | None
    archived: bool
    created_at: datetime
    updated_at: datetime
    status: ProjectStatus = ProjectStatus.CLEAN
    pending_count: int = 0
    accepted_count: int = 0
    text_block_count: int = 0

    @classmethod
    def from_project(cls, project: Project, **extra) -> "ProjectRead":
        return cls(
            id=project.id,
            name=project.name,
            figma_file_key=project.figma_file_key,
            has_token=bool(project.figma_token),
            included_components=list(project.included_components or []),
            source_page_ids=list(project.source_page_ids or []),
            last_sync=project.last_sync,
            last_export=project.last_export,
            archived=project.archived,
            created_at=project.created_at,
            updated_at=project.updated_at,
            **extra,
        )
