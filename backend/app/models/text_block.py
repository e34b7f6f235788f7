"""Text block model and its change-review state machine."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from sqlalchemy import Column, ForeignKey, String
from sqlalchemy import Enum as SAEnum
from sqlmodel import Field, SQLModel

from app.core.exceptions import InvalidTransitionError
from app.models.types import UTCDateTime, utcnow


class ChangeStatus(str, Enum):
    """Review state of a text block."""

    CLEAN = "clean"
    PENDING = "pending"
    ACCEPTED = "accepted"


# clean -> pending      sync detected a fingerprint mismatch
# pending -> pending    another change arrived before review
# pending -> accepted   user accepted the change
# accepted -> pending   changed again before export
# accepted -> clean     exported
ALLOWED_TRANSITIONS: dict[ChangeStatus, frozenset[ChangeStatus]] = {
    ChangeStatus.CLEAN: frozenset({ChangeStatus.PENDING}),
    ChangeStatus.PENDING: frozenset({ChangeStatus.PENDING, ChangeStatus.ACCEPTED}),
    ChangeStatus.ACCEPTED: frozenset({ChangeStatus.PENDING, ChangeStatus.CLEAN}),
}


@dataclass(frozen=True)
class BlockSnapshot:
    """The fingerprinted and displayed values of a block at one point in time."""

    content: str
    style: str
    x: float
    y: float
    width: float
    height: float
    content_hash: str


class TextBlockBase(SQLModel):
    """Base text block fields."""

    page_id: str
    page_name: str
    frame_id: str | None = Field(default=None, index=True)
    frame_name: str | None = Field(default=None)
    frame_x: float | None = Field(default=None)
    frame_y: float | None = Field(default=None)
    frame_width: float | None = Field(default=None)
    frame_height: float | None = Field(default=None)
    content: str
    style: str
    font_size: float | None = Field(default=None)
    x: float
    y: float
    width: float
    height: float


class TextBlock(TextBlockBase, table=True):
    """Text block database model.

    ``previous_*`` columns hold the last-seen values before the most recent
    detected change. They are populated only while the block is pending.
    """

    __tablename__ = "text_blocks"

    project_id: str = Field(
        sa_column=Column(
            String,
            ForeignKey("projects.id", ondelete="CASCADE"),
            primary_key=True,
        )
    )
    id: str = Field(primary_key=True)
    content_hash: str = Field(index=True)
    last_modified: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime, index=True)
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
    removed_at: datetime | None = Field(default=None, sa_type=UTCDateTime)

    change_status: ChangeStatus = Field(
        default=ChangeStatus.CLEAN,
        sa_column=Column(
            SAEnum(
                ChangeStatus,
                name="change_status",
                native_enum=False,
                length=16,
                values_callable=lambda enum: [member.value for member in enum],
            ),
            nullable=False,
            server_default=ChangeStatus.CLEAN.value,
            index=True,
        ),
    )
    previous_content: str | None = Field(default=None)
    previous_style: str | None = Field(default=None)
    previous_x: float | None = Field(default=None)
    previous_y: float | None = Field(default=None)
    previous_width: float | None = Field(default=None)
    previous_height: float | None = Field(default=None)
    previous_content_hash: str | None = Field(default=None)
    change_detected_at: datetime | None = Field(default=None, sa_type=UTCDateTime)
    change_accepted_at: datetime | None = Field(default=None, sa_type=UTCDateTime)

    def snapshot(self) -> BlockSnapshot:
        """Current values as a snapshot."""
        return BlockSnapshot(
            content=self.content,
            style=self.style,
            x=self.x,
            y=self.y,
            width=self.width,
            height=self.height,
            content_hash=self.content_hash,
        )

    @property
    def previous_snapshot(self) -> BlockSnapshot | None:
        """Baseline captured when the pending change was detected."""
        if self.previous_content_hash is None:
            return None
        return BlockSnapshot(
            content=self.previous_content,
            style=self.previous_style,
            x=self.previous_x,
            y=self.previous_y,
            width=self.previous_width,
            height=self.previous_height,
            content_hash=self.previous_content_hash,
        )

    def _transition(self, target: ChangeStatus) -> None:
        current = ChangeStatus(self.change_status)
        if target not in ALLOWED_TRANSITIONS[current]:
            raise InvalidTransitionError(current.value, target.value)
        self.change_status = target

    def _set_previous(self, snapshot: BlockSnapshot | None) -> None:
        self.previous_content = snapshot.content if snapshot else None
        self.previous_style = snapshot.style if snapshot else None
        self.previous_x = snapshot.x if snapshot else None
        self.previous_y = snapshot.y if snapshot else None
        self.previous_width = snapshot.width if snapshot else None
        self.previous_height = snapshot.height if snapshot else None
        self.previous_content_hash = snapshot.content_hash if snapshot else None

    def mark_changed(self, baseline: BlockSnapshot, detected_at: datetime) -> None:
        """Enter ``pending`` with ``baseline`` as the values shown as "before"."""
        self._transition(ChangeStatus.PENDING)
        self._set_previous(baseline)
        self.change_detected_at = detected_at
        self.change_accepted_at = None

    def mark_accepted(self, accepted_at: datetime) -> None:
        """Accept a pending change; the baseline is discarded."""
        self._transition(ChangeStatus.ACCEPTED)
        self._set_previous(None)
        self.change_accepted_at = accepted_at

    def mark_exported(self) -> None:
        """Accepted change has left the system."""
        self._transition(ChangeStatus.CLEAN)
        self.change_accepted_at = None


class TextBlockChange(SQLModel):
    """One displayed difference between a block's baseline and current values."""

    type: str  # content, style, position, size
    label: str
    old_value: str
    new_value: str


class TextBlockRead(TextBlockBase):
    """Schema for reading a text block."""

    id: str
    project_id: str
    content_hash: str
    last_modified: datetime
    created_at: datetime
    removed_at: datetime | None
    change_status: ChangeStatus
    previous_content: str | None
    previous_style: str | None
    previous_x: float | None
    previous_y: float | None
    previous_width: float | None
    previous_height: float | None
    previous_content_hash: str | None
    change_detected_at: datetime | None
    change_accepted_at: datetime | None
    changes: list[TextBlockChange] = []
