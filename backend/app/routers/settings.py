"""Legacy single-file settings endpoints."""

from fastapi import APIRouter

from app.core.deps import DbSession
from app.schemas.settings import (
    InitializeSettingsRequest,
    SettingsCheckResponse,
    SettingsResponse,
)
from app.services.app_settings import AppSettingsService
from app.services.projects import ProjectService

router = APIRouter(prefix="/settings")


@router.get("", response_model=SettingsResponse)
async def get_settings(session: DbSession) -> SettingsResponse:
    """Stored settings. The token is never returned, only whether one is set."""
    values, has_token = await AppSettingsService(session).get_public()
    return SettingsResponse(settings=values, has_token=has_token)


@router.put("", response_model=SettingsResponse)
async def update_settings(
    values: dict[str, str],
    session: DbSession,
) -> SettingsResponse:
    """Upsert settings keys."""
    service = AppSettingsService(session)
    await service.set_many(values)
    public, has_token = await service.get_public()
    return SettingsResponse(settings=public, has_token=has_token)


@router.get("/check", response_model=SettingsCheckResponse)
async def check_settings(session: DbSession) -> SettingsCheckResponse:
    """Whether first-run setup has happened."""
    return SettingsCheckResponse(
        configured=await AppSettingsService(session).is_configured(),
        has_projects=await ProjectService(session).has_any_projects(),
    )


@router.post("/initialize", response_model=SettingsCheckResponse)
async def initialize_settings(
    data: InitializeSettingsRequest,
    session: DbSession,
) -> SettingsCheckResponse:
    """First-run setup of project name, token and file key."""
    service = AppSettingsService(session)
    await service.initialize(data.project_name, data.figma_token, data.figma_file_key)
    return SettingsCheckResponse(
        configured=await service.is_configured(),
        has_projects=await ProjectService(session).has_any_projects(),
    )
