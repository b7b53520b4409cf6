"""In-memory conversation repository for testing."""

from typing import Optional

from sqlalchemy.exc import IntegrityError

from convo.domain.model.conversation import Conversation
from convo.domain.repository.conversation import ConversationRepository
from convo.domain.value import ConversationId, InboxId, InviteTag


class InMemoryConversationRepository(ConversationRepository):
    """In-memory implementation of ConversationRepository for testing."""

    def __init__(self) -> None:
        self._conversations: dict[ConversationId, Conversation] = {}
        self._consumed_tags: dict[InviteTag, tuple[ConversationId, InboxId]] = {}

    async def find_by_id(self, conversation_id: ConversationId) -> Optional[Conversation]:
        """Find a conversation by ID."""
        return self._conversations.get(conversation_id)

    async def find_by_invite_tag(self, tag: InviteTag) -> Optional[Conversation]:
        """Find the conversation currently carrying an invite tag."""
        for conversation in self._conversations.values():
            if conversation.invite_tag == tag:
                return conversation
        return None

    async def save(self, conversation: Conversation) -> Conversation:
        """Save a conversation (create or update).

        Raises:
            IntegrityError: If another conversation already carries the tag
        """
        existing = await self.find_by_invite_tag(conversation.invite_tag)
        if existing and existing.id != conversation.id:
            raise IntegrityError("Duplicate invite tag", None, Exception())

        self._conversations[conversation.id] = conversation
        return conversation

    async def consume_invite_tag(
        self, tag: InviteTag, conversation_id: ConversationId, inbox_id: InboxId
    ) -> bool:
        """Mark a single-use tag as redeemed (no awaits, so atomic)."""
        if tag in self._consumed_tags:
            return False
        self._consumed_tags[tag] = (conversation_id, inbox_id)
        return True

    async def find_invite_tag_consumer(self, tag: InviteTag) -> Optional[InboxId]:
        """Find which inbox redeemed a single-use tag."""
        consumed = self._consumed_tags.get(tag)
        return consumed[1] if consumed else None

    async def release_invite_tag(self, tag: InviteTag) -> None:
        """Undo a consumption whose redemption failed."""
        self._consumed_tags.pop(tag, None)
