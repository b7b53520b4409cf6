"""Invite use cases."""

from convo.application.usecase.invite.decode_invite import (
    DecodeInviteRequest,
    DecodeInviteResponse,
    DecodeInviteUseCase,
)
from convo.application.usecase.invite.generate_invite import (
    GenerateInviteRequest,
    GenerateInviteResponse,
    GenerateInviteUseCase,
)
from convo.application.usecase.invite.rotate_invite_tag import (
    RotateInviteTagRequest,
    RotateInviteTagResponse,
    RotateInviteTagUseCase,
)

__all__ = [
    "DecodeInviteRequest",
    "DecodeInviteResponse",
    "DecodeInviteUseCase",
    "GenerateInviteRequest",
    "GenerateInviteResponse",
    "GenerateInviteUseCase",
    "RotateInviteTagRequest",
    "RotateInviteTagResponse",
    "RotateInviteTagUseCase",
]
