"""Integration tests for sync, review and per-project read endpoints."""

import pytest

from app.core.exceptions import ProviderError
from tests.conftest import landing_document


async def sync(client, project_id: str):
    return await client.post(f"/api/v1/projects/{project_id}/sync")


@pytest.mark.asyncio
class TestSyncEndpoint:
    """Tests for triggering a sync."""

    async def test_sync_counts(self, client, project):
        response = await sync(client, project.id)

        assert response.status_code == 200
        data = response.json()
        assert data["project_id"] == project.id
        assert (data["total"], data["new"], data["updated"], data["unchanged"]) == (3, 3, 0, 0)
        assert data["frames"] == 1

    async def test_sync_unknown_project(self, client):
        response = await sync(client, "missing")

        assert response.status_code == 404

    async def test_provider_status_passed_through(self, client, project, fake_provider):
        fake_provider.error = ProviderError("Figma API error: Invalid token", status_code=403)

        response = await sync(client, project.id)

        assert response.status_code == 403
        assert "Invalid token" in response.json()["detail"]

    async def test_unreachable_provider_is_bad_gateway(self, client, project, fake_provider):
        fake_provider.error = ProviderError("Figma API error: Cannot connect")

        response = await sync(client, project.id)

        assert response.status_code == 502

    async def test_legacy_sync_uses_latest_project(self, client, project):
        response = await client.post("/api/v1/sync")

        assert response.status_code == 200
        assert response.json()["project_id"] == project.id

    async def test_legacy_sync_without_projects(self, client):
        response = await client.post("/api/v1/sync")

        assert response.status_code == 400
        assert "No projects configured" in response.json()["detail"]


@pytest.mark.asyncio
class TestReviewFlow:
    """Tests for detect, review, accept and status rollups."""

    async def test_edit_shows_diff(self, client, project, fake_provider):
        await sync(client, project.id)
        fake_provider.document = landing_document(headline="Welcome back", x=120.0)
        await sync(client, project.id)

        response = await client.get(f"/api/v1/projects/{project.id}/text-blocks")

        assert response.status_code == 200
        blocks = {b["id"]: b for b in response.json()}
        headline = blocks["100:1"]
        assert headline["change_status"] == "pending"
        changes = {c["type"]: c for c in headline["changes"]}
        assert changes["content"]["old_value"] == "Welcome"
        assert changes["content"]["new_value"] == "Welcome back"
        assert changes["position"]["old_value"] == "(100, 200)"
        assert changes["position"]["new_value"] == "(120, 200)"
        assert blocks["100:2"]["changes"] == []

    async def test_accept_single(self, client, project, fake_provider):
        await sync(client, project.id)
        fake_provider.document = landing_document(headline="Welcome back")
        await sync(client, project.id)

        response = await client.post(f"/api/v1/projects/{project.id}/text-blocks/100:1/accept")

        assert response.status_code == 200
        data = response.json()
        assert data["block_id"] == "100:1"
        assert data["accepted"] is True
        status = (await client.get(f"/api/v1/projects/{project.id}/status")).json()
        assert status["status"] == "needs_export"
        assert status["pending_count"] == 0
        assert status["accepted_count"] == 1

    async def test_accept_clean_block_is_noop(self, client, project):
        await sync(client, project.id)

        response = await client.post(f"/api/v1/projects/{project.id}/text-blocks/100:2/accept")

        assert response.status_code == 200
        assert response.json()["accepted"] is False

    async def test_accept_unknown_block(self, client, project):
        response = await client.post(f"/api/v1/projects/{project.id}/text-blocks/404:1/accept")

        assert response.status_code == 404

    async def test_accept_all_then_export_clears_status(self, client, project, fake_provider):
        await sync(client, project.id)
        fake_provider.document = landing_document(headline="Hello", x=10.0, y=10.0)
        await sync(client, project.id)
        assert (await client.get(f"/api/v1/projects/{project.id}/status")).json()["status"] == "pending"

        response = await client.post(f"/api/v1/projects/{project.id}/text-blocks/accept-all")

        assert response.json()["accepted_count"] == 1
        await client.get("/api/v1/export", params={"project_id": project.id})
        status = (await client.get(f"/api/v1/projects/{project.id}/status")).json()
        assert status["status"] == "clean"
        assert status["last_export"] is not None

    async def test_project_listing_carries_status(self, client, project, fake_provider):
        await sync(client, project.id)
        fake_provider.document = landing_document(headline="Hello")
        await sync(client, project.id)

        [listed] = (await client.get("/api/v1/projects")).json()

        assert listed["status"] == "pending"
        assert listed["pending_count"] == 1
        assert listed["text_block_count"] == 3


@pytest.mark.asyncio
class TestProjectReads:
    """Tests for frames, components and pages."""

    async def test_frames(self, client, project, fake_provider):
        await sync(client, project.id)
        fake_provider.document = landing_document(headline="Hello")
        await sync(client, project.id)

        response = await client.get(f"/api/v1/projects/{project.id}/frames")

        [frame] = response.json()
        assert frame["id"] == "10:1"
        assert frame["name"] == "Hero"
        assert frame["image_url"] == "https://images.test/10:1.png"
        assert frame["status"] == "pending"
        assert frame["pending_changes_count"] == 1

    async def test_components(self, client, project):
        await sync(client, project.id)

        response = await client.get(f"/api/v1/projects/{project.id}/components")

        assert response.json() == [{"frame_id": "10:1", "frame_name": "Hero", "text_block_count": 2}]

    async def test_pages(self, client, project):
        response = await client.get(f"/api/v1/projects/{project.id}/pages")

        assert response.status_code == 200
        assert response.json() == [{"id": "1:1", "name": "Landing"}]

    async def test_removed_blocks_can_be_hidden(self, client, project, fake_provider):
        await sync(client, project.id)
        fake_provider.document.document["children"][0]["children"].pop()
        await sync(client, project.id)

        listed = (await client.get(f"/api/v1/projects/{project.id}/text-blocks")).json()
        hidden = (
            await client.get(
                f"/api/v1/projects/{project.id}/text-blocks",
                params={"include_removed": False},
            )
        ).json()

        assert {b["id"] for b in listed} == {"100:1", "100:2", "100:3"}
        assert {b["id"] for b in hidden} == {"100:1", "100:2"}
