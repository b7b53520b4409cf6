"""Unit tests for the HTTP routes, backed by the mocked container."""

import httpx
import pytest
import pytest_asyncio
from dishka.integrations.fastapi import FastapiProvider
from fastapi import FastAPI

from convo.interface.api.routes import conversations, health, invites, joins
from convo.util.di.container import setup_di
from tests.conftest import Party
from tests.di import build_test_container


@pytest_asyncio.fixture
async def client():
    """HTTP client for an app wired with mock providers."""
    container = build_test_container(FastapiProvider())
    app = FastAPI()
    setup_di(app, container)
    for module in (health, conversations, invites, joins):
        app.include_router(module.router)

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    await container.close()


class TestRoutes:
    """Tests for route wiring and error mapping."""

    @pytest.mark.asyncio
    async def test_health(self, client):
        """Health endpoint reports the service as healthy."""
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert "identity_configured" in response.json()

    @pytest.mark.asyncio
    async def test_create_conversation(self, client):
        """Registering a conversation returns 201 with its tag."""
        response = await client.post(
            "/conversations", json={"conversation_id": "conv-123", "name": "Book Club"}
        )

        assert response.status_code == 201
        assert response.json()["conversation_id"] == "conv-123"
        assert len(response.json()["invite_tag"]) == 10

    @pytest.mark.asyncio
    async def test_generate_invite_unknown_conversation(self, client):
        """Issuing an invite for an unknown conversation is a 404."""
        response = await client.post("/conversations/missing/invites", json={})

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_decode_invite(self, client):
        """Decoding an invite previews its contents."""
        # Arrange
        creator = Party()
        conversation = await creator.create_conversation()
        slug = await creator.invite_service.generate_invite(conversation)

        # Act
        response = await client.post("/invites/decode", json={"invite": slug})

        # Assert
        assert response.status_code == 200
        assert response.json()["invite_tag"] == str(conversation.invite_tag)
        assert response.json()["name"] == "Book Club"

    @pytest.mark.asyncio
    async def test_decode_garbage(self, client):
        """Malformed invites are a 400."""
        response = await client.post("/invites/decode", json={"invite": "%%%"})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_join_request_from_stranger_blocks(self, client):
        """A non-invite direct message reports the blocked state."""
        response = await client.post(
            "/joins/requests",
            json={"sender_inbox_id": "cd" * 32, "text": "hello"},
        )

        assert response.status_code == 200
        assert response.json()["state"] == "blocked"

    @pytest.mark.asyncio
    async def test_list_pending_joins(self, client):
        """Pending joins are listed, empty for a fresh inbox."""
        response = await client.get("/joins/pending")

        assert response.status_code == 200
        assert response.json() == {"pending": []}
