"""Create conversation use case."""

from datetime import datetime

import logfire
from pydantic import BaseModel

from convo.application.usecase.base import BaseUseCase
from convo.domain.service import InviteService
from convo.domain.value import ConversationId


class CreateConversationRequest(BaseModel):
    """Request to register a conversation for invites."""

    conversation_id: str
    name: str | None = None
    description: str | None = None
    image_url: str | None = None
    expires_at: datetime | None = None


class CreateConversationResponse(BaseModel):
    """Registered conversation."""

    conversation_id: str
    invite_tag: str
    creator_inbox_id: str | None
    name: str | None
    description: str | None
    image_url: str | None
    expires_at: datetime | None
    created_at: datetime


class CreateConversationUseCase(
    BaseUseCase[CreateConversationRequest, CreateConversationResponse]
):
    """Use case for registering a conversation this inbox created."""

    def __init__(self, invite_service: InviteService) -> None:
        """Initialize use case.

        Args:
            invite_service: Invite domain service
        """
        self.invite_service = invite_service

    async def execute(
        self, request: CreateConversationRequest
    ) -> CreateConversationResponse:
        """Create the conversation with a fresh invite tag.

        Raises:
            AlreadyExistsError: If the conversation id is already registered
        """
        with logfire.span(
            "create_conversation.execute", conversation_id=request.conversation_id
        ):
            conversation = await self.invite_service.create_conversation(
                ConversationId(request.conversation_id),
                name=request.name,
                description=request.description,
                image_url=request.image_url,
                expires_at=request.expires_at,
            )

            return CreateConversationResponse(
                conversation_id=conversation.id,
                invite_tag=str(conversation.invite_tag),
                creator_inbox_id=(
                    str(conversation.creator_inbox_id)
                    if conversation.creator_inbox_id
                    else None
                ),
                name=conversation.name,
                description=conversation.description,
                image_url=conversation.image_url,
                expires_at=conversation.expires_at,
                created_at=conversation.created_at,
            )
