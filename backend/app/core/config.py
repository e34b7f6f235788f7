"""Application configuration using pydantic-settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Application
    app_name: str = "Fignity"
    debug: bool = False
    api_v1_prefix: str = "/api/v1"
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite+aiosqlite:///./data/fignity.db"

    # CORS
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]

    # Rate Limiting
    rate_limit_enabled: bool = True
    sync_rate_limit: str = "30/minute"

    # Figma API
    figma_api_base: str = "https://api.figma.com/v1"
    figma_timeout: float = Field(default=30.0, gt=0)  # seconds
    figma_max_attempts: int = Field(default=3, ge=1)
    figma_image_format: str = "png"
    figma_image_scale: float = Field(default=1.0, gt=0, le=4)
    figma_image_batch_size: int = Field(default=50, ge=1)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
