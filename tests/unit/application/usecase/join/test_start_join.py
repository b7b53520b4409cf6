"""Tests for start join use case."""

import pytest

from convo.adapter.messaging import InMemoryMessagingTransport
from convo.application.usecase.join import StartJoinRequest, StartJoinUseCase
from convo.domain.model import MembershipEvent
from convo.domain.value import JoinState
from tests.conftest import Party
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


class TestStartJoinUseCase:
    """Tests for StartJoinUseCase."""

    @pytest.mark.asyncio
    async def test_join(self, unit_env):
        """Joining ends with the verified conversation."""
        # Arrange
        creator = Party()
        conversation = await creator.create_conversation()
        slug = await creator.invite_service.generate_invite(conversation)

        transport = await unit_env.get(InMemoryMessagingTransport)

        async def deliver(to_inbox_id, text):
            transport.emit(
                MembershipEvent(conversation=conversation, added_by=creator.inbox_id)
            )

        transport.direct_message_handler = deliver
        use_case = await unit_env.get(StartJoinUseCase)

        # Act
        response = await use_case.execute(StartJoinRequest(invite=slug))

        # Assert
        assert response.state == JoinState.TAG_VERIFIED
        assert response.conversation_id == "conv-123"
        assert response.invite_tag == str(conversation.invite_tag)
        assert response.security_warning is False
        assert transport.sent_messages == [(creator.inbox_id, slug)]

    @pytest.mark.asyncio
    async def test_invalid_invite(self, unit_env):
        """Garbage input ends in the invalid state."""
        use_case = await unit_env.get(StartJoinUseCase)

        response = await use_case.execute(StartJoinRequest(invite="nope nope"))

        assert response.state == JoinState.INVALID
        assert response.invite_tag is None
