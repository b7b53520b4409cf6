"""Test configuration and fixtures."""

from datetime import datetime

from convo.adapter.keys import InMemoryKeyProvider
from convo.adapter.messaging import InMemoryMessagingTransport
from convo.domain.model import (
    Conversation,
    InvitePayload,
    JoinErrorEvent,
    MembershipEvent,
)
from convo.domain.service import ConversationLocks, InviteService, JoinFlowCoordinator
from convo.domain.value import (
    ConversationId,
    InboxId,
    InviteTag,
    JoinRequestState,
)
from convo.persistence.repository.inmemory import (
    InMemoryConversationRepository,
    InMemoryPendingInviteRepository,
    InMemoryUnitOfWork,
)
from convo.protocol.codec import InviteCodec
from convo.protocol.token_cipher import ConversationTokenCipher

# secp256k1 secret of 0x01 repeated, used where a fixed key keeps vectors stable
FIXED_PRIVATE_KEY = bytes([0x01] * 32)
# Inbox id bytes 0x01..0x20
FIXED_INBOX_BYTES = bytes(range(1, 33))


def make_payload(
    tag: str = "aB3dE7gH1k",
    creator_inbox_id: bytes = FIXED_INBOX_BYTES,
    conversation_token: bytes = b"\x01" + b"\x00" * 44,
    **kwargs,
) -> InvitePayload:
    """Build an invite payload with sensible defaults."""
    return InvitePayload(
        conversation_token=conversation_token,
        creator_inbox_id=creator_inbox_id,
        tag=InviteTag(tag),
        **kwargs,
    )


class Party:
    """One inbox with its own in-memory collaborators.

    Joiner and creator tests need two inboxes that do not share storage,
    which a single DI container cannot express.
    """

    def __init__(self, join_timeout: float | None = 5.0) -> None:
        self.keys = InMemoryKeyProvider()
        self.transport = InMemoryMessagingTransport()
        self.conversations = InMemoryConversationRepository()
        self.pending_invites = InMemoryPendingInviteRepository()
        self.unit_of_work = InMemoryUnitOfWork()
        self.invite_service = InviteService(
            conversation_repository=self.conversations,
            key_provider=self.keys,
            codec=InviteCodec(),
            cipher=ConversationTokenCipher(),
        )
        self.join_flow = JoinFlowCoordinator(
            invite_service=self.invite_service,
            conversation_repository=self.conversations,
            pending_invite_repository=self.pending_invites,
            transport=self.transport,
            key_provider=self.keys,
            locks=ConversationLocks(),
            unit_of_work=self.unit_of_work,
            join_timeout=join_timeout,
        )

    @property
    def inbox_id(self) -> InboxId:
        return self.keys.inbox_id

    async def create_conversation(
        self,
        conversation_id: str = "conv-123",
        name: str | None = "Book Club",
        expires_at: datetime | None = None,
    ) -> Conversation:
        return await self.invite_service.create_conversation(
            ConversationId(conversation_id), name=name, expires_at=expires_at
        )


def connect(joiner: Party, creator: Party) -> None:
    """Route the joiner's direct messages to the creator's join flow.

    Accepted requests come back to the joiner as a membership event, join
    errors as a join-error event.
    """

    async def deliver(to_inbox_id: InboxId, text: str) -> None:
        if to_inbox_id != creator.inbox_id:
            return

        errors_before = len(creator.transport.join_errors)
        outcome = await creator.join_flow.handle_incoming_join_request(
            text, joiner.inbox_id
        )

        if outcome.state == JoinRequestState.ACCEPTED:
            conversation = await creator.conversations.find_by_id(
                outcome.conversation_id
            )
            joiner.transport.emit(
                MembershipEvent(conversation=conversation, added_by=creator.inbox_id)
            )

        for recipient, tag, error_type in creator.transport.join_errors[errors_before:]:
            if recipient == joiner.inbox_id:
                joiner.transport.emit(
                    JoinErrorEvent(
                        invite_tag=tag, error_type=error_type, sender=creator.inbox_id
                    )
                )

    joiner.transport.direct_message_handler = deliver
