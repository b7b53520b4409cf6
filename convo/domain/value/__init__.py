"""Domain value objects for the invite protocol."""

from convo.domain.value.identifiers import ConversationId, PendingInviteId
from convo.domain.value.types import (
    InboxId,
    InviteTag,
    JoinErrorType,
    JoinRequestState,
    JoinState,
    RejectionReason,
)

__all__ = [
    # Identifiers
    "ConversationId",
    "PendingInviteId",
    # Types
    "InboxId",
    "InviteTag",
    "JoinErrorType",
    "JoinRequestState",
    "JoinState",
    "RejectionReason",
]
