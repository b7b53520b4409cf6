"""Invite value objects.

An invite is self-contained: everything a joiner needs to find the creator
and everything the creator needs to find the conversation travels inside
the signed payload. There is no server-side invite record.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import field_validator

from convo.domain.model.common import DomainModel, utcnow
from convo.domain.value import InboxId, InviteTag


class InvitePayload(DomainModel):
    """Unsigned invite contents.

    Optional fields are None when absent, never empty strings, so that
    "no name" and "empty name" stay distinguishable on the wire.

    Expiry timestamps are whole seconds in UTC, matching their unix
    representation on the wire.
    """

    conversation_token: bytes  # Encrypted conversation id, only the creator can open it
    creator_inbox_id: bytes  # Raw identity bytes, not hex text
    tag: InviteTag
    name: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    expires_at: Optional[datetime] = None  # Invite expiry
    conversation_expires_at: Optional[datetime] = None  # Conversation self-destruct
    expires_after_use: bool = False  # Single use

    @field_validator("expires_at", "conversation_expires_at")
    @classmethod
    def normalize_timestamp(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Make timestamps timezone aware and truncate to whole seconds."""
        if v is None:
            return None
        if v.tzinfo is None:
            v = v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc).replace(microsecond=0)

    @property
    def creator_inbox(self) -> InboxId:
        """Creator inbox id as a hex value object."""
        return InboxId.from_bytes(self.creator_inbox_id)

    def has_expired(self, now: Optional[datetime] = None) -> bool:
        """Whether the invite itself has expired."""
        if self.expires_at is None:
            return False
        return (now or utcnow()) > self.expires_at

    def conversation_has_expired(self, now: Optional[datetime] = None) -> bool:
        """Whether the conversation this invite points to has self-destructed."""
        if self.conversation_expires_at is None:
            return False
        return (now or utcnow()) > self.conversation_expires_at


class SignedInvite(DomainModel):
    """Invite payload together with its recoverable signature.

    ``payload`` holds the exact bytes that were signed. They are carried
    verbatim and never re-serialized, otherwise the signature would no
    longer match. ``invite_payload`` is the parsed view of those bytes.
    """

    payload: bytes
    signature: bytes  # r || s || recovery id, 65 bytes
    invite_payload: InvitePayload

    @property
    def tag(self) -> InviteTag:
        """Invite tag."""
        return self.invite_payload.tag

    @property
    def expires_at(self) -> Optional[datetime]:
        """Invite expiry, if any."""
        return self.invite_payload.expires_at

    @property
    def conversation_expires_at(self) -> Optional[datetime]:
        """Conversation self-destruct time, if any."""
        return self.invite_payload.conversation_expires_at

    @property
    def expires_after_use(self) -> bool:
        """Whether the invite may only be redeemed once."""
        return self.invite_payload.expires_after_use

    @property
    def name(self) -> Optional[str]:
        """Conversation name if present."""
        return self.invite_payload.name

    @property
    def description(self) -> Optional[str]:
        """Conversation description if present."""
        return self.invite_payload.description

    @property
    def image_url(self) -> Optional[str]:
        """Conversation image URL if present."""
        return self.invite_payload.image_url

    def has_expired(self, now: Optional[datetime] = None) -> bool:
        """Whether the invite has expired."""
        return self.invite_payload.has_expired(now)

    def conversation_has_expired(self, now: Optional[datetime] = None) -> bool:
        """Whether the conversation has self-destructed."""
        return self.invite_payload.conversation_has_expired(now)
