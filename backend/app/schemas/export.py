"""Export request/response schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from app.models import ChangeStatus

# Column order of the CSV export
EXPORT_FIELDS = [
    "id",
    "project_id",
    "page_id",
    "page_name",
    "frame_id",
    "frame_name",
    "content",
    "style",
    "x",
    "y",
    "width",
    "height",
    "last_modified",
]


class ExportItem(BaseModel):
    """One exported text block."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    project_id: str
    page_id: str
    page_name: str
    frame_id: str | None
    frame_name: str | None
    content: str
    style: str
    font_size: float | None = None
    x: float
    y: float
    width: float
    height: float
    change_status: ChangeStatus
    last_modified: datetime


class ExportResponse(BaseModel):
    """JSON export payload."""

    items: list[ExportItem]
    total: int
    exported_at: datetime
