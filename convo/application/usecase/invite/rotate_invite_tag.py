"""Rotate invite tag use case."""

import logfire
from pydantic import BaseModel

from convo.application.usecase.base import BaseUseCase
from convo.domain.service import InviteService
from convo.domain.value import ConversationId


class RotateInviteTagRequest(BaseModel):
    """Request to revoke all outstanding invites of a conversation."""

    conversation_id: str


class RotateInviteTagResponse(BaseModel):
    """Rotation result."""

    conversation_id: str
    previous_tag: str
    invite_tag: str


class RotateInviteTagUseCase(
    BaseUseCase[RotateInviteTagRequest, RotateInviteTagResponse]
):
    """Use case for rotating a conversation's invite tag."""

    def __init__(self, invite_service: InviteService) -> None:
        """Initialize use case.

        Args:
            invite_service: Invite domain service
        """
        self.invite_service = invite_service

    async def execute(self, request: RotateInviteTagRequest) -> RotateInviteTagResponse:
        """Rotate the tag so previously issued invites can no longer be redeemed.

        Raises:
            NotFoundError: If the conversation is not registered
        """
        conversation_id = ConversationId(request.conversation_id)

        with logfire.span(
            "rotate_invite_tag.execute", conversation_id=conversation_id
        ):
            previous = await self.invite_service.get_conversation(conversation_id)
            rotated = await self.invite_service.rotate_invite_tag(conversation_id)

            return RotateInviteTagResponse(
                conversation_id=rotated.id,
                previous_tag=str(previous.invite_tag),
                invite_tag=str(rotated.invite_tag),
            )
