"""Events delivered by the messaging transport."""

from datetime import datetime
from typing import Union

from pydantic import Field

from convo.domain.model.common import DomainModel, utcnow
from convo.domain.model.conversation import Conversation
from convo.domain.value import InboxId, InviteTag, JoinErrorType


class MembershipEvent(DomainModel):
    """This inbox was added to a conversation."""

    conversation: Conversation
    added_by: InboxId


class JoinErrorEvent(DomainModel):
    """A creator reported that a join request could not be fulfilled.

    ``error_type`` keeps unknown values verbatim.
    """

    invite_tag: InviteTag
    error_type: str
    sender: InboxId
    timestamp: datetime = Field(default_factory=utcnow)

    @property
    def user_facing_message(self) -> str:
        """Message suitable for display."""
        if self.error_type == JoinErrorType.CONVERSATION_EXPIRED.value:
            return "This conversation is no longer available"
        return "Failed to join conversation"


MessagingEvent = Union[MembershipEvent, JoinErrorEvent]
