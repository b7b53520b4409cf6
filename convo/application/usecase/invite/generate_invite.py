"""Generate invite use case."""

from datetime import datetime

import logfire
from pydantic import BaseModel

from convo.application.usecase.base import BaseUseCase
from convo.domain.service import InviteService
from convo.domain.value import ConversationId


class GenerateInviteRequest(BaseModel):
    """Request to issue an invite for a conversation."""

    conversation_id: str
    expires_at: datetime | None = None
    single_use: bool = False


class GenerateInviteResponse(BaseModel):
    """Issued invite."""

    slug: str
    invite_url: str
    invite_tag: str
    expires_at: datetime | None
    single_use: bool


class GenerateInviteUseCase(BaseUseCase[GenerateInviteRequest, GenerateInviteResponse]):
    """Use case for issuing a signed invite."""

    def __init__(self, invite_service: InviteService) -> None:
        """Initialize use case.

        Args:
            invite_service: Invite domain service
        """
        self.invite_service = invite_service

    async def execute(self, request: GenerateInviteRequest) -> GenerateInviteResponse:
        """Issue an invite for the conversation's current tag.

        Raises:
            NotFoundError: If the conversation is not registered
        """
        with logfire.span(
            "generate_invite.execute",
            conversation_id=request.conversation_id,
            single_use=request.single_use,
        ):
            conversation = await self.invite_service.get_conversation(
                ConversationId(request.conversation_id)
            )
            slug = await self.invite_service.generate_invite(
                conversation,
                expires_at=request.expires_at,
                single_use=request.single_use,
            )

            return GenerateInviteResponse(
                slug=slug,
                invite_url=self.invite_service.invite_url(slug),
                invite_tag=str(conversation.invite_tag),
                expires_at=request.expires_at,
                single_use=request.single_use,
            )
