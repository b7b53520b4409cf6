"""Domain model entities for the invite protocol."""

from convo.domain.model.conversation import Conversation, PendingInvite
from convo.domain.model.events import JoinErrorEvent, MembershipEvent, MessagingEvent
from convo.domain.model.invite import InvitePayload, SignedInvite
from convo.domain.model.join import DecodedInvite, JoinOutcome, JoinRequestOutcome

__all__ = [
    "Conversation",
    "DecodedInvite",
    "InvitePayload",
    "JoinErrorEvent",
    "JoinOutcome",
    "JoinRequestOutcome",
    "MembershipEvent",
    "MessagingEvent",
    "PendingInvite",
    "SignedInvite",
]
