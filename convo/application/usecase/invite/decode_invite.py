"""Decode invite use case."""

from datetime import datetime

import logfire
from pydantic import BaseModel

from convo.application.usecase.base import BaseUseCase
from convo.config import InviteSettings
from convo.domain.service import InviteService
from convo.domain.service.base import redact_slug
from convo.protocol.codec import extract_invite_code


class DecodeInviteRequest(BaseModel):
    """Invite slug or invite link to preview."""

    invite: str


class DecodeInviteResponse(BaseModel):
    """Public contents of an invite.

    The conversation token stays opaque, only the creator can open it.
    """

    invite_tag: str
    creator_inbox_id: str
    signer_public_key: str  # Hex, uncompressed
    name: str | None
    description: str | None
    image_url: str | None
    expires_at: datetime | None
    conversation_expires_at: datetime | None
    single_use: bool
    has_expired: bool
    conversation_has_expired: bool


class DecodeInviteUseCase(BaseUseCase[DecodeInviteRequest, DecodeInviteResponse]):
    """Use case for previewing an invite without joining.

    Lets a client render the conversation name and image before the user
    commits to sending a join request.
    """

    def __init__(
        self, invite_service: InviteService, invite_settings: InviteSettings
    ) -> None:
        """Initialize use case.

        Args:
            invite_service: Invite domain service
            invite_settings: Invite protocol settings
        """
        self.invite_service = invite_service
        self.invite_settings = invite_settings

    async def execute(self, request: DecodeInviteRequest) -> DecodeInviteResponse:
        """Decode an invite and recover its signer.

        Raises:
            EncodingError: If the invite is malformed
            InvalidSignature: If no signer can be recovered
        """
        slug = extract_invite_code(
            request.invite,
            query_param=self.invite_settings.query_param,
            app_url_scheme=self.invite_settings.app_url_scheme,
        )

        with logfire.span("decode_invite.execute", slug=redact_slug(slug)):
            decoded = self.invite_service.decode_invite(slug)
            signed_invite = decoded.signed_invite

            return DecodeInviteResponse(
                invite_tag=str(signed_invite.tag),
                creator_inbox_id=signed_invite.invite_payload.creator_inbox_id.hex(),
                signer_public_key=decoded.signer_public_key.hex(),
                name=signed_invite.name,
                description=signed_invite.description,
                image_url=signed_invite.image_url,
                expires_at=signed_invite.expires_at,
                conversation_expires_at=signed_invite.conversation_expires_at,
                single_use=signed_invite.expires_after_use,
                has_expired=signed_invite.has_expired(),
                conversation_has_expired=signed_invite.conversation_has_expired(),
            )
