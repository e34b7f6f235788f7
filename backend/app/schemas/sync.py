"""Sync and review response schemas."""

from datetime import datetime

from pydantic import BaseModel


class SyncResponse(BaseModel):
    """Counts from one sync pass."""

    project_id: str
    total: int
    new: int
    updated: int
    unchanged: int
    removed: int = 0
    frames: int = 0
    timestamp: datetime


class AcceptResponse(BaseModel):
    """Result of accepting a single block."""

    block_id: str
    accepted: bool
    accepted_at: datetime | None


class AcceptAllResponse(BaseModel):
    """Result of accepting every pending block of a project."""

    accepted_count: int
    accepted_at: datetime


class ProjectStatusResponse(BaseModel):
    """Project rollup with counts."""

    project_id: str
    status: str
    pending_count: int
    accepted_count: int
    last_sync: datetime | None
    last_export: datetime | None
