"""Legacy application settings schemas."""

from pydantic import BaseModel, Field


class SettingsResponse(BaseModel):
    """Stored settings with the token replaced by a flag."""

    settings: dict[str, str]
    has_token: bool


class SettingsCheckResponse(BaseModel):
    """Whether enough is configured to sync."""

    configured: bool
    has_projects: bool


class InitializeSettingsRequest(BaseModel):
    """First-run setup of the single-file settings."""

    project_name: str = Field(..., min_length=1)
    figma_token: str = Field(..., min_length=1)
    figma_file_key: str = Field(..., min_length=1)

