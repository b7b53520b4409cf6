"""Tests for generate invite use case."""

import pytest

from convo.application.usecase.conversation import (
    CreateConversationRequest,
    CreateConversationUseCase,
)
from convo.application.usecase.invite import (
    GenerateInviteRequest,
    GenerateInviteUseCase,
)
from convo.domain.error import NotFoundError
from convo.domain.service import InviteService
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


class TestGenerateInviteUseCase:
    """Tests for GenerateInviteUseCase."""

    @pytest.mark.asyncio
    async def test_generate_invite(self, unit_env):
        """Invites carry the conversation's current tag."""
        # Arrange
        create_use_case = await unit_env.get(CreateConversationUseCase)
        use_case = await unit_env.get(GenerateInviteUseCase)
        invite_service = await unit_env.get(InviteService)
        conversation = await create_use_case.execute(
            CreateConversationRequest(conversation_id="conv-123", name="Book Club")
        )

        # Act
        response = await use_case.execute(
            GenerateInviteRequest(conversation_id="conv-123", single_use=True)
        )

        # Assert
        assert response.invite_tag == conversation.invite_tag
        assert response.single_use is True
        assert response.invite_url.endswith(f"?i={response.slug}")

        signed = invite_service.decode_invite(response.slug).signed_invite
        assert signed.name == "Book Club"
        assert signed.expires_after_use is True

    @pytest.mark.asyncio
    async def test_unknown_conversation(self, unit_env):
        """Invites cannot be issued for unregistered conversations."""
        use_case = await unit_env.get(GenerateInviteUseCase)

        with pytest.raises(NotFoundError):
            await use_case.execute(GenerateInviteRequest(conversation_id="missing"))
