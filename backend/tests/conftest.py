"""Pytest configuration and fixtures."""

from typing import Any, AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from app.main import app
from app.core.database import build_engine, get_session
from app.core.deps import get_design_provider
from app.core.exceptions import ProviderError
from app.core.rate_limit import limiter
from app.models import Project
from app.services.figma import DesignProvider, RemoteDocument


# Test database URL (in-memory SQLite)
TEST_DATABASE_URL = "sqlite+aiosqlite://"


def text_node(
    node_id: str,
    characters: str,
    x: float = 0.0,
    y: float = 0.0,
    width: float = 100.0,
    height: float = 20.0,
    font_size: float | None = 16,
    style_id: str | None = None,
) -> dict[str, Any]:
    """Build a TEXT node."""
    node: dict[str, Any] = {
        "id": node_id,
        "name": characters[:20],
        "type": "TEXT",
        "characters": characters,
        "absoluteBoundingBox": {"x": x, "y": y, "width": width, "height": height},
        "style": {} if font_size is None else {"fontSize": font_size},
    }
    if style_id:
        node["styles"] = {"text": style_id}
    return node


def frame_node(
    node_id: str,
    name: str,
    children: list[dict[str, Any]],
    x: float = 0.0,
    y: float = 0.0,
    width: float = 1440.0,
    height: float = 900.0,
    node_type: str = "FRAME",
) -> dict[str, Any]:
    """Build a frame-like container node."""
    return {
        "id": node_id,
        "name": name,
        "type": node_type,
        "absoluteBoundingBox": {"x": x, "y": y, "width": width, "height": height},
        "children": children,
    }


def page_node(node_id: str, name: str, children: list[dict[str, Any]]) -> dict[str, Any]:
    """Build a page (CANVAS) node."""
    return {"id": node_id, "name": name, "type": "CANVAS", "children": children}


def make_document(
    pages: list[dict[str, Any]],
    styles: dict[str, dict[str, Any]] | None = None,
    name: str = "Marketing Site",
) -> RemoteDocument:
    """Wrap pages into a fetched document."""
    return RemoteDocument(
        name=name,
        document={"id": "0:0", "name": "Document", "type": "DOCUMENT", "children": pages},
        styles=styles or {},
    )


def landing_document(headline: str = "Welcome", x: float = 100.0, y: float = 200.0) -> RemoteDocument:
    """One page, one frame with two text blocks, plus a loose caption."""
    return make_document(
        [
            page_node(
                "1:1",
                "Landing",
                [
                    frame_node(
                        "10:1",
                        "Hero",
                        [
                            text_node("100:1", headline, x=x, y=y, font_size=40),
                            text_node("100:2", "Sign up today", x=100.0, y=300.0, font_size=16),
                        ],
                    ),
                    text_node("100:3", "Draft note", x=2000.0, y=0.0, font_size=12),
                ],
            )
        ]
    )


class FakeProvider(DesignProvider):
    """In-memory design provider returning a configurable document."""

    def __init__(self, document: RemoteDocument | None = None):
        self.document = document or landing_document()
        self.error: ProviderError | None = None
        self.image_error: ProviderError | None = None
        self.document_calls: list[tuple[str, str]] = []
        self.image_calls: list[list[str]] = []

    @property
    def name(self) -> str:
        return "fake"

    async def fetch_document(self, file_key: str, token: str) -> RemoteDocument:
        self.document_calls.append((file_key, token))
        if self.error:
            raise self.error
        return self.document

    async def fetch_images(self, file_key: str, token: str, node_ids: list[str]) -> dict[str, str | None]:
        if not node_ids:
            return {}
        self.image_calls.append(list(node_ids))
        if self.image_error:
            raise self.image_error
        return {node_id: f"https://images.test/{node_id}.png" for node_id in node_ids}


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create test database engine."""
    engine = build_engine(TEST_DATABASE_URL, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def test_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    async_session = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    async with async_session() as session:
        yield session


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()


@pytest_asyncio.fixture(scope="function")
async def client(test_session, fake_provider) -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client with overridden dependencies."""

    async def override_get_session():
        yield test_session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_design_provider] = lambda: fake_provider
    limiter.enabled = False

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
    limiter.enabled = True


@pytest_asyncio.fixture(scope="function")
async def project(test_session) -> Project:
    """Create a project with no scope filters."""
    project = Project(
        name="Marketing Site",
        figma_file_key="AbC123xyz",
        figma_token="figd_test_token",
    )
    test_session.add(project)
    await test_session.commit()
    await test_session.refresh(project)
    return project
