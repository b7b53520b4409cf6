"""Strongly typed identifiers for invite domain entities."""

from typing import NewType
from uuid import UUID

# Conversation ids are opaque strings assigned by the messaging transport
ConversationId = NewType("ConversationId", str)
PendingInviteId = NewType("PendingInviteId", UUID)
