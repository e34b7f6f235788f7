"""FastAPI dependencies."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_session
from app.services.figma import DesignProvider, FigmaProvider

DbSession = Annotated[AsyncSession, Depends(get_session)]


@lru_cache
def get_design_provider() -> DesignProvider:
    """Shared design-file provider."""
    return FigmaProvider()


Provider = Annotated[DesignProvider, Depends(get_design_provider)]
