"""Key/value application settings from the single-file era."""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.database import commit
from app.models import AppSetting
from app.models.types import utcnow

TOKEN_KEY = "figma_token"
FILE_KEY_KEY = "figma_file_key"
PROJECT_NAME_KEY = "project_name"
REQUIRED_KEYS = (TOKEN_KEY, FILE_KEY_KEY, PROJECT_NAME_KEY)


class AppSettingsService:
    """Service for the legacy settings table."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, key: str) -> str | None:
        setting = await self.session.get(AppSetting, key)
        return setting.value if setting else None

    async def get_all(self) -> dict[str, str]:
        result = await self.session.execute(select(AppSetting).order_by(AppSetting.key))
        return {setting.key: setting.value for setting in result.scalars().all()}

    async def get_public(self) -> tuple[dict[str, str], bool]:
        """Settings without the token, plus whether a token is stored."""
        settings = await self.get_all()
        token = settings.pop(TOKEN_KEY, None)
        return settings, bool(token)

    async def set_many(self, values: dict[str, str]) -> None:
        """Upsert several keys in one transaction."""
        now = utcnow()
        for key, value in values.items():
            setting = await self.session.get(AppSetting, key)
            if setting:
                setting.value = value
                setting.updated_at = now
            else:
                setting = AppSetting(key=key, value=value, created_at=now, updated_at=now)
            self.session.add(setting)
        await commit(self.session)

    async def is_configured(self) -> bool:
        """Token, file key and project name are all set."""
        for key in REQUIRED_KEYS:
            if not await self.get(key):
                return False
        return True

    async def initialize(self, project_name: str, figma_token: str, figma_file_key: str) -> None:
        await self.set_many(
            {
                PROJECT_NAME_KEY: project_name,
                TOKEN_KEY: figma_token,
                FILE_KEY_KEY: figma_file_key,
            }
        )
