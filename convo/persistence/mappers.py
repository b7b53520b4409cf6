"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.
"""

from typing import Any, Dict
from uuid import UUID

from convo.domain.model import Conversation, PendingInvite
from convo.domain.value import ConversationId, InboxId, InviteTag, PendingInviteId


def row_to_conversation(row: Dict[str, Any]) -> Conversation:
    """Convert database row to Conversation domain model.

    Args:
        row: Database row as dict

    Returns:
        Conversation domain model
    """
    creator = row.get("creator_inbox_id")
    return Conversation(
        id=ConversationId(row["id"]),
        invite_tag=InviteTag(row["invite_tag"]),
        creator_inbox_id=InboxId(creator) if creator else None,
        name=row.get("name"),
        description=row.get("description"),
        image_url=row.get("image_url"),
        expires_at=row.get("expires_at"),
        created_at=row["created_at"],
    )


def conversation_to_dict(conversation: Conversation) -> Dict[str, Any]:
    """Convert Conversation domain model to database dict.

    Args:
        conversation: Conversation domain model

    Returns:
        Dict suitable for database insertion/update
    """
    data = conversation.model_dump()
    data["invite_tag"] = str(conversation.invite_tag)
    data["creator_inbox_id"] = (
        str(conversation.creator_inbox_id) if conversation.creator_inbox_id else None
    )
    return data


def row_to_pending_invite(row: Dict[str, Any]) -> PendingInvite:
    """Convert database row to PendingInvite domain model."""
    return PendingInvite(
        id=PendingInviteId(UUID(row["id"]) if isinstance(row["id"], str) else row["id"]),
        invite_tag=InviteTag(row["invite_tag"]),
        creator_inbox_id=InboxId(row["creator_inbox_id"]),
        slug=row["slug"],
        name=row.get("name"),
        description=row.get("description"),
        image_url=row.get("image_url"),
        expires_at=row.get("expires_at"),
        conversation_expires_at=row.get("conversation_expires_at"),
        created_at=row["created_at"],
    )


def pending_invite_to_dict(pending_invite: PendingInvite) -> Dict[str, Any]:
    """Convert PendingInvite domain model to database dict."""
    data = pending_invite.model_dump()
    data["invite_tag"] = str(pending_invite.invite_tag)
    data["creator_inbox_id"] = str(pending_invite.creator_inbox_id)
    return data
