"""Database engine, session management and startup migrations."""

import logging
from collections.abc import AsyncGenerator
from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import event
from sqlalchemy.engine import Connection, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import get_settings
from app.core.exceptions import StoreError

logger = logging.getLogger(__name__)
settings = get_settings()

ALEMBIC_DIR = Path(__file__).resolve().parents[2] / "alembic"


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_url: str, **kwargs) -> AsyncEngine:
    """Create an async engine; SQLite connections get foreign key enforcement."""
    url = make_url(database_url)
    engine = create_async_engine(database_url, echo=settings.debug, **kwargs)
    if url.get_backend_name() == "sqlite":
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine


engine = build_engine(settings.database_url)
async_session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async database session."""
    async with async_session_factory() as session:
        yield session


def alembic_config() -> Config:
    """Alembic configuration pointing at the bundled migration scripts."""
    cfg = Config()
    cfg.set_main_option("script_location", str(ALEMBIC_DIR))
    return cfg


def _upgrade(connection: Connection, cfg: Config) -> None:
    cfg.attributes["connection"] = connection
    command.upgrade(cfg, "head")


async def init_db(target: AsyncEngine | None = None) -> None:
    """Apply pending schema migrations.

    Every revision is applied exactly once; the ``alembic_version`` table is
    the schema marker. Any migration failure aborts startup.
    """
    target = target or engine
    db_path = target.url.database
    if target.url.get_backend_name() == "sqlite" and db_path and db_path != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    try:
        async with target.begin() as conn:
            await conn.run_sync(_upgrade, alembic_config())
    except Exception:
        logger.exception("Schema migration failed")
        raise
    logger.info("Database schema is up to date")


async def commit(session: AsyncSession) -> None:
    """Commit the session, rolling back and raising StoreError on failure."""
    try:
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(f"Store commit failed: {e}")
        raise StoreError(f"Database write failed: {e.__class__.__name__}") from e
