"""Conversation repository interface."""

from abc import ABC, abstractmethod

from convo.domain.model import Conversation
from convo.domain.value import ConversationId, InboxId, InviteTag


class ConversationRepository(ABC):
    """Repository for Conversation entity and single-use tag consumption.

    Defines the contract for conversation persistence operations.
    Implementations live in the infrastructure layer.
    """

    @abstractmethod
    async def find_by_id(self, conversation_id: ConversationId) -> Conversation | None:
        """Find a conversation by ID.

        Args:
            conversation_id: The conversation's identifier

        Returns:
            The conversation if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_invite_tag(self, tag: InviteTag) -> Conversation | None:
        """Find the conversation currently carrying an invite tag.

        Used by joiners to detect that they are already a member.

        Args:
            tag: The invite tag

        Returns:
            The conversation if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, conversation: Conversation) -> Conversation:
        """Save a conversation (create or update).

        Args:
            conversation: The conversation to save

        Returns:
            The saved conversation
        """
        pass

    @abstractmethod
    async def consume_invite_tag(
        self, tag: InviteTag, conversation_id: ConversationId, inbox_id: InboxId
    ) -> bool:
        """Atomically mark a single-use invite tag as redeemed.

        Check and mark happen in one step, so two concurrent redemptions
        of the same tag cannot both succeed.

        Args:
            tag: The invite tag
            conversation_id: Conversation the tag belongs to
            inbox_id: Inbox redeeming the tag

        Returns:
            True if this call consumed the tag, False if it was already consumed
        """
        pass

    @abstractmethod
    async def find_invite_tag_consumer(self, tag: InviteTag) -> InboxId | None:
        """Find which inbox redeemed a single-use tag.

        Args:
            tag: The invite tag

        Returns:
            The redeeming inbox, or None if the tag is unused
        """
        pass

    @abstractmethod
    async def release_invite_tag(self, tag: InviteTag) -> None:
        """Undo a consumption whose redemption failed.

        Args:
            tag: The invite tag
        """
        pass
