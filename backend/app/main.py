"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from app.core.config import get_settings
from app.core.database import init_db
from app.core.exceptions import (
    NotFoundError,
    ProviderError,
    StoreError,
    SyncInProgressError,
    ValidationError,
)
from app.core.rate_limit import limiter
from app.routers import export, figma, health, projects, settings as settings_router, sync, text_blocks

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan events."""
    await init_db()
    yield


app = FastAPI(
    title=settings.app_name,
    description="Tracks text changes in Figma files for review and export",
    version="0.1.0",
    lifespan=lifespan,
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


# Domain errors
async def _not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": exc.message})


async def _validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": exc.message})


async def _sync_in_progress_handler(request: Request, exc: SyncInProgressError) -> JSONResponse:
    return JSONResponse(status_code=409, content={"detail": exc.message})


async def _provider_error_handler(request: Request, exc: ProviderError) -> JSONResponse:
    status_code = exc.status_code if exc.status_code and 400 <= exc.status_code < 600 else 502
    return JSONResponse(status_code=status_code, content={"detail": exc.message})


async def _store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=500, content={"detail": "Database error"})


app.add_exception_handler(NotFoundError, _not_found_handler)
app.add_exception_handler(ValidationError, _validation_handler)
app.add_exception_handler(SyncInProgressError, _sync_in_progress_handler)
app.add_exception_handler(ProviderError, _provider_error_handler)
app.add_exception_handler(StoreError, _store_error_handler)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router, prefix=settings.api_v1_prefix, tags=["health"])
app.include_router(projects.router, prefix=settings.api_v1_prefix, tags=["projects"])
app.include_router(sync.router, prefix=settings.api_v1_prefix, tags=["sync"])
app.include_router(text_blocks.router, prefix=settings.api_v1_prefix, tags=["text-blocks"])
app.include_router(export.router, prefix=settings.api_v1_prefix, tags=["export"])
app.include_router(figma.router, prefix=settings.api_v1_prefix, tags=["figma"])
app.include_router(settings_router.router, prefix=settings.api_v1_prefix, tags=["settings"])
