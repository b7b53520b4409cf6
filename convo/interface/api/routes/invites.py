"""Invite routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter

from convo.application.usecase.invite import (
    DecodeInviteRequest,
    DecodeInviteResponse,
    DecodeInviteUseCase,
)
from convo.interface.error import to_http_exception
from convo.protocol.error import ProtocolError

router = APIRouter(prefix="/invites", tags=["invites"], route_class=DishkaRoute)


@router.post("/decode", response_model=DecodeInviteResponse)
async def decode_invite(
    request: DecodeInviteRequest,
    decode_invite_use_case: FromDishka[DecodeInviteUseCase],
) -> DecodeInviteResponse:
    """Preview an invite without joining.

    Raises:
        HTTPException: 400 if the invite is malformed or its signature unusable
    """
    try:
        return await decode_invite_use_case.execute(request)
    except (ProtocolError, ValueError) as e:
        raise to_http_exception(e)
