"""Join flow results.

Join attempts end in a typed outcome rather than an exception, so callers
can render every terminal state without inspecting error classes.
"""

from typing import Optional

from convo.domain.model.common import DomainModel
from convo.domain.model.invite import SignedInvite
from convo.domain.value import (
    ConversationId,
    InboxId,
    InviteTag,
    JoinRequestState,
    JoinState,
    RejectionReason,
)


class DecodedInvite(DomainModel):
    """A decoded invite together with the public key that signed it."""

    signed_invite: SignedInvite
    signer_public_key: bytes  # 65-byte uncompressed


class JoinOutcome(DomainModel):
    """Terminal state of a joiner-side join attempt."""

    state: JoinState
    tag: Optional[InviteTag] = None
    conversation_id: Optional[ConversationId] = None
    error_type: Optional[str] = None  # Set for JOIN_FAILED
    message: Optional[str] = None

    @property
    def is_security_warning(self) -> bool:
        """Whether this outcome must be surfaced as a security anomaly."""
        return self.state == JoinState.TAG_MISMATCH


class JoinRequestOutcome(DomainModel):
    """Terminal state of a creator-side join request."""

    state: JoinRequestState
    sender: InboxId
    tag: Optional[InviteTag] = None
    conversation_id: Optional[ConversationId] = None
    reason: Optional[RejectionReason] = None
    message: Optional[str] = None
