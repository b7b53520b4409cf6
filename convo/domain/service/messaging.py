"""Collaborator interfaces consumed by the invite services.

Implementations live in the adapter layer.
"""

from abc import ABC, abstractmethod
from typing import AsyncIterator

from convo.domain.model import MessagingEvent
from convo.domain.value import ConversationId, InboxId, InviteTag
from convo.protocol.signing import public_key_from_private


class MessagingTransport(ABC):
    """Group messaging transport.

    Sender identity of direct messages is guaranteed by the transport.
    """

    @abstractmethod
    async def send_direct_message(self, to_inbox_id: InboxId, text: str) -> None:
        """Send a text direct message.

        Args:
            to_inbox_id: Recipient inbox
            text: Message text

        Raises:
            MessagingError: If the message could not be sent
        """
        pass

    @abstractmethod
    async def add_member(
        self, conversation_id: ConversationId, inbox_id: InboxId
    ) -> None:
        """Add an inbox to a group conversation.

        Adding an existing member is a no-op.

        Raises:
            MessagingError: If the member could not be added
        """
        pass

    @abstractmethod
    async def set_consent_blocked(self, inbox_id: InboxId) -> None:
        """Block direct messages from an inbox.

        Raises:
            MessagingError: If the consent state could not be updated
        """
        pass

    @abstractmethod
    async def send_join_error(
        self, to_inbox_id: InboxId, invite_tag: InviteTag, error_type: str
    ) -> None:
        """Tell a joiner that their join request could not be fulfilled.

        Raises:
            MessagingError: If the message could not be sent
        """
        pass

    @abstractmethod
    async def open_event_stream(self) -> AsyncIterator[MessagingEvent]:
        """Subscribe to membership and join-error events for this inbox.

        The subscription is active once this coroutine returns, so events
        caused by messages sent afterwards are not missed. Close the
        returned iterator with ``aclose()``.
        """
        pass


class KeyProvider(ABC):
    """Supplies the identity this service signs invites with.

    Key material is never persisted by the invite services.
    """

    @abstractmethod
    async def get_inbox_id(self) -> InboxId:
        """Our own inbox id."""
        pass

    @abstractmethod
    async def get_private_key(self) -> bytes:
        """Raw 32-byte secp256k1 private key of our inbox.

        Raises:
            KeyProviderError: If no key is available
        """
        pass

    async def get_public_key(self) -> bytes:
        """Uncompressed public key matching get_private_key()."""
        return public_key_from_private(await self.get_private_key())
