"""Conversation and pending invite entities."""

from datetime import datetime, timezone
from typing import Optional

from pydantic import Field, field_validator

from convo.domain.model.common import DomainModel, utcnow
from convo.domain.value import ConversationId, InboxId, InviteTag, PendingInviteId


class Conversation(DomainModel):
    """A group conversation as known to this inbox.

    Business rules:
    - ``invite_tag`` is unique per conversation
    - Rotating the tag invalidates future redemptions of invites issued so far,
      their signatures stay valid
    - ``expires_at`` is the self-destruct time, after which nobody can join
    """

    id: ConversationId
    invite_tag: InviteTag
    creator_inbox_id: Optional[InboxId] = None
    name: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    expires_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=utcnow)

    @field_validator("expires_at")
    @classmethod
    def ensure_timezone(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Treat naive timestamps as UTC."""
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    def has_expired(self, now: Optional[datetime] = None) -> bool:
        """Whether the conversation has self-destructed."""
        if self.expires_at is None:
            return False
        return (now or utcnow()) > self.expires_at


class PendingInvite(DomainModel):
    """An invite this inbox has asked to join and is waiting on.

    Stored before the join request is sent so the UI can render the
    conversation preview while waiting to be added.
    """

    id: PendingInviteId
    invite_tag: InviteTag
    creator_inbox_id: InboxId
    slug: str
    name: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    expires_at: Optional[datetime] = None
    conversation_expires_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=utcnow)
