"""Conversation routes (creator side)."""

from datetime import datetime

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError

from convo.adapter.error import AdapterError
from convo.application.usecase.conversation import (
    CreateConversationRequest,
    CreateConversationResponse,
    CreateConversationUseCase,
)
from convo.application.usecase.invite import (
    GenerateInviteRequest,
    GenerateInviteResponse,
    GenerateInviteUseCase,
    RotateInviteTagRequest,
    RotateInviteTagResponse,
    RotateInviteTagUseCase,
)
from convo.domain.error import AlreadyExistsError, DomainError
from convo.interface.error import to_http_exception
from convo.protocol.error import ProtocolError

router = APIRouter(
    prefix="/conversations", tags=["conversations"], route_class=DishkaRoute
)


class GenerateInviteAPIRequest(BaseModel):
    """API request for issuing an invite."""

    expires_at: datetime | None = None
    single_use: bool = False


@router.post(
    "", response_model=CreateConversationResponse, status_code=status.HTTP_201_CREATED
)
async def create_conversation(
    request: CreateConversationRequest,
    create_conversation_use_case: FromDishka[CreateConversationUseCase],
) -> CreateConversationResponse:
    """Register a conversation so invites can be issued for it.

    Raises:
        HTTPException: If the conversation is already registered
    """
    try:
        return await create_conversation_use_case.execute(request)
    except (AlreadyExistsError, IntegrityError):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Conversation already registered: {request.conversation_id}",
        )
    except AdapterError as e:
        raise to_http_exception(e)


@router.post(
    "/{conversation_id}/invites",
    response_model=GenerateInviteResponse,
    status_code=status.HTTP_201_CREATED,
)
async def generate_invite(
    conversation_id: str,
    request: GenerateInviteAPIRequest,
    generate_invite_use_case: FromDishka[GenerateInviteUseCase],
) -> GenerateInviteResponse:
    """Issue a signed invite for a conversation.

    Raises:
        HTTPException: If the conversation is unknown or no key is configured
    """
    try:
        return await generate_invite_use_case.execute(
            GenerateInviteRequest(
                conversation_id=conversation_id,
                expires_at=request.expires_at,
                single_use=request.single_use,
            )
        )
    except (DomainError, ProtocolError, AdapterError) as e:
        raise to_http_exception(e)


@router.post(
    "/{conversation_id}/invite-tag/rotate", response_model=RotateInviteTagResponse
)
async def rotate_invite_tag(
    conversation_id: str,
    rotate_invite_tag_use_case: FromDishka[RotateInviteTagUseCase],
) -> RotateInviteTagResponse:
    """Rotate the invite tag, revoking every invite issued so far.

    Raises:
        HTTPException: If the conversation is unknown
    """
    try:
        return await rotate_invite_tag_use_case.execute(
            RotateInviteTagRequest(conversation_id=conversation_id)
        )
    except DomainError as e:
        raise to_http_exception(e)
