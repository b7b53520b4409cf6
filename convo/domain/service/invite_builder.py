"""Invite payload assembly."""

import secrets
import string
from datetime import datetime
from typing import Optional

from convo.domain.model import Conversation, InvitePayload
from convo.domain.value import InviteTag

TAG_ALPHABET = string.ascii_letters + string.digits
DEFAULT_TAG_LENGTH = 10


def generate_invite_tag(length: int = DEFAULT_TAG_LENGTH) -> InviteTag:
    """Generate a random alphanumeric invite tag.

    Args:
        length: Number of characters

    Returns:
        New invite tag
    """
    return InviteTag("".join(secrets.choice(TAG_ALPHABET) for _ in range(length)))


def build_invite_payload(
    conversation: Conversation,
    conversation_token: bytes,
    creator_inbox_id: bytes,
    expires_at: Optional[datetime] = None,
    expires_after_use: bool = False,
) -> InvitePayload:
    """Assemble an unsigned invite payload from conversation state.

    Display fields are copied only when present on the conversation, so
    they stay absent in the invite rather than becoming empty strings.

    Args:
        conversation: Conversation the invite points to
        conversation_token: Encrypted conversation id
        creator_inbox_id: Raw inbox id bytes of the creator
        expires_at: Optional invite expiry
        expires_after_use: Whether the invite may only be redeemed once

    Returns:
        Unsigned invite payload
    """
    return InvitePayload(
        conversation_token=conversation_token,
        creator_inbox_id=creator_inbox_id,
        tag=conversation.invite_tag,
        name=conversation.name or None,
        description=conversation.description or None,
        image_url=conversation.image_url or None,
        expires_at=expires_at,
        conversation_expires_at=conversation.expires_at,
        expires_after_use=expires_after_use,
    )
