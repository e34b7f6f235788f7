"""Application-level key/value settings (legacy single-file configuration)."""

from datetime import datetime

from sqlmodel import Field, SQLModel

from app.models.types import UTCDateTime, utcnow


class AppSetting(SQLModel, table=True):
    """Key/value setting row."""

    __tablename__ = "app_settings"

    key: str = Field(primary_key=True)
    value: str
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
