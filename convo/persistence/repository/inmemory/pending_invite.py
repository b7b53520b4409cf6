"""In-memory pending invite repository for testing."""

from typing import Optional

from convo.domain.model.conversation import PendingInvite
from convo.domain.repository.pending_invite import PendingInviteRepository
from convo.domain.value import InviteTag


class InMemoryPendingInviteRepository(PendingInviteRepository):
    """In-memory implementation of PendingInviteRepository for testing."""

    def __init__(self) -> None:
        self._pending: dict[InviteTag, PendingInvite] = {}

    async def find_by_tag(self, tag: InviteTag) -> Optional[PendingInvite]:
        """Find a pending invite by tag."""
        return self._pending.get(tag)

    async def list_all(self) -> list[PendingInvite]:
        """List pending invites, newest first."""
        return sorted(
            self._pending.values(), key=lambda invite: invite.created_at, reverse=True
        )

    async def save(self, pending_invite: PendingInvite) -> PendingInvite:
        """Save a pending invite, replacing any with the same tag."""
        self._pending[pending_invite.invite_tag] = pending_invite
        return pending_invite

    async def delete_by_tag(self, tag: InviteTag) -> None:
        """Delete the pending invite for a tag, if any."""
        self._pending.pop(tag, None)
