"""Pending invite repository interface."""

from abc import ABC, abstractmethod

from convo.domain.model import PendingInvite
from convo.domain.value import InviteTag


class PendingInviteRepository(ABC):
    """Repository for invites this inbox is waiting to be added through."""

    @abstractmethod
    async def find_by_tag(self, tag: InviteTag) -> PendingInvite | None:
        """Find a pending invite by tag.

        Args:
            tag: The invite tag

        Returns:
            The pending invite if found, None otherwise
        """
        pass

    @abstractmethod
    async def list_all(self) -> list[PendingInvite]:
        """List pending invites, newest first."""
        pass

    @abstractmethod
    async def save(self, pending_invite: PendingInvite) -> PendingInvite:
        """Save a pending invite, replacing any with the same tag.

        Args:
            pending_invite: The pending invite to save

        Returns:
            The saved pending invite
        """
        pass

    @abstractmethod
    async def delete_by_tag(self, tag: InviteTag) -> None:
        """Delete the pending invite for a tag, if any.

        Args:
            tag: The invite tag
        """
        pass
