"""Tests for decode invite use case."""

from datetime import datetime, timedelta, timezone

import pytest

from convo.application.usecase.invite import DecodeInviteRequest, DecodeInviteUseCase
from convo.domain.service import InviteService, KeyProvider
from convo.domain.value import ConversationId
from convo.protocol.error import EncodingError
from tests.conftest import Party
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


class TestDecodeInviteUseCase:
    """Tests for DecodeInviteUseCase."""

    @pytest.mark.asyncio
    async def test_decode_invite_link(self, unit_env):
        """A link from another inbox previews its public contents."""
        # Arrange
        creator = Party()
        conversation = await creator.create_conversation()
        slug = await creator.invite_service.generate_invite(
            conversation,
            expires_at=datetime.now(timezone.utc) - timedelta(minutes=5),
        )
        use_case = await unit_env.get(DecodeInviteUseCase)

        # Act
        response = await use_case.execute(
            DecodeInviteRequest(invite=creator.invite_service.invite_url(slug))
        )

        # Assert
        assert response.invite_tag == str(conversation.invite_tag)
        assert response.creator_inbox_id == str(creator.inbox_id)
        assert response.signer_public_key == (await creator.keys.get_public_key()).hex()
        assert response.name == "Book Club"
        assert response.single_use is False
        assert response.has_expired is True
        assert response.conversation_has_expired is False

    @pytest.mark.asyncio
    async def test_decode_own_invite(self, unit_env):
        """Our own invites decode with our own key as signer."""
        # Arrange
        use_case = await unit_env.get(DecodeInviteUseCase)
        key_provider = await unit_env.get(KeyProvider)
        invite_service = await unit_env.get(InviteService)
        conversation = await invite_service.create_conversation(
            ConversationId("conv-123")
        )
        slug = await invite_service.generate_invite(conversation)

        # Act
        response = await use_case.execute(DecodeInviteRequest(invite=slug))

        # Assert
        assert response.signer_public_key == (await key_provider.get_public_key()).hex()

    @pytest.mark.asyncio
    async def test_decode_garbage(self, unit_env):
        """Malformed invites raise EncodingError."""
        use_case = await unit_env.get(DecodeInviteUseCase)

        with pytest.raises(EncodingError):
            await use_case.execute(DecodeInviteRequest(invite="%%%"))
