"""Frame model: a top-level container (artboard) holding text blocks."""

from datetime import datetime

from sqlalchemy import Column, ForeignKey, String
from sqlmodel import Field, SQLModel

from app.models.text_block import ChangeStatus
from app.models.types import UTCDateTime, utcnow


class FrameBase(SQLModel):
    """Base frame fields."""

    name: str
    image_url: str | None = Field(default=None)
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0


class Frame(FrameBase, table=True):
    """Frame database model. Upserted on every sync that observes it."""

    __tablename__ = "frames"

    project_id: str = Field(
        sa_column=Column(
            String,
            ForeignKey("projects.id", ondelete="CASCADE"),
            primary_key=True,
        )
    )
    id: str = Field(primary_key=True)
    last_synced: datetime | None = Field(default=None, sa_type=UTCDateTime)
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)


class FrameRead(FrameBase):
    """Schema for reading a frame with its derived review status."""

    id: str
    project_id: str
    last_synced: datetime | None
    created_at: datetime
    status: ChangeStatus = ChangeStatus.CLEAN
    pending_changes_count: int = 0


class ComponentInfo(SQLModel):
    """Distinct container referenced by a project's text blocks."""

    frame_id: str
    frame_name: str | None
    text_block_count: int
