"""Invite domain service."""

from datetime import datetime
from typing import Optional

import logfire

from convo.domain.error import AlreadyExistsError, NotFoundError
from convo.domain.model import Conversation, DecodedInvite, SignedInvite
from convo.domain.repository import ConversationRepository
from convo.domain.service.invite_builder import (
    DEFAULT_TAG_LENGTH,
    build_invite_payload,
    generate_invite_tag,
)
from convo.domain.service.messaging import KeyProvider
from convo.domain.value import ConversationId
from convo.protocol.codec import InviteCodec
from convo.protocol.signing import recover_invite_signer, sign_invite
from convo.protocol.token_cipher import ConversationTokenCipher

from .base import Service, redact_slug


class InviteService(Service):
    """Domain service for issuing, decoding and revoking invites."""

    def __init__(
        self,
        conversation_repository: ConversationRepository,
        key_provider: KeyProvider,
        codec: InviteCodec,
        cipher: ConversationTokenCipher,
        tag_length: int = DEFAULT_TAG_LENGTH,
        invite_base_url: str = "https://convos.org/v2",
        query_param: str = "i",
    ) -> None:
        """Initialize invite service.

        Args:
            conversation_repository: Conversation repository
            key_provider: Source of our inbox id and signing key
            codec: Slug codec
            cipher: Conversation token cipher
            tag_length: Length of newly generated invite tags
            invite_base_url: Base URL of shareable invite links
            query_param: Query parameter carrying the slug in links
        """
        self.conversation_repository = conversation_repository
        self.key_provider = key_provider
        self.codec = codec
        self.cipher = cipher
        self.tag_length = tag_length
        self.invite_base_url = invite_base_url
        self.query_param = query_param

    async def create_conversation(
        self,
        conversation_id: ConversationId,
        name: Optional[str] = None,
        description: Optional[str] = None,
        image_url: Optional[str] = None,
        expires_at: Optional[datetime] = None,
    ) -> Conversation:
        """Register a conversation we created, with a fresh invite tag.

        Args:
            conversation_id: Transport-assigned conversation id
            name: Optional display name
            description: Optional description
            image_url: Optional image URL
            expires_at: Optional self-destruct time

        Returns:
            Saved conversation

        Raises:
            AlreadyExistsError: If the conversation is already registered
        """
        with logfire.span(
            "invite_service.create_conversation", conversation_id=conversation_id
        ):
            if await self.conversation_repository.find_by_id(conversation_id):
                logfire.warn(
                    "Conversation already registered", conversation_id=conversation_id
                )
                raise AlreadyExistsError("Conversation", conversation_id)

            conversation = Conversation(
                id=conversation_id,
                invite_tag=generate_invite_tag(self.tag_length),
                creator_inbox_id=await self.key_provider.get_inbox_id(),
                name=name,
                description=description,
                image_url=image_url,
                expires_at=expires_at,
            )
            saved = await self.conversation_repository.save(conversation)
            logfire.info(
                "Conversation created",
                conversation_id=conversation_id,
                tag=str(saved.invite_tag),
            )
            return saved

    async def get_conversation(self, conversation_id: ConversationId) -> Conversation:
        """Get a conversation by ID.

        Raises:
            NotFoundError: If the conversation does not exist
        """
        conversation = await self.conversation_repository.find_by_id(conversation_id)
        if not conversation:
            raise NotFoundError("Conversation", conversation_id)
        return conversation

    async def generate_invite(
        self,
        conversation: Conversation,
        expires_at: Optional[datetime] = None,
        single_use: bool = False,
    ) -> str:
        """Issue a signed invite slug for a conversation.

        Args:
            conversation: Conversation to invite into
            expires_at: Optional invite expiry
            single_use: Whether the invite may only be redeemed once

        Returns:
            Invite slug
        """
        with logfire.span(
            "invite_service.generate_invite",
            conversation_id=conversation.id,
            tag=str(conversation.invite_tag),
            single_use=single_use,
        ):
            inbox_id, private_key = await self._identity()

            token = self.cipher.encrypt(conversation.id, inbox_id.raw, private_key)
            payload = build_invite_payload(
                conversation,
                conversation_token=token,
                creator_inbox_id=inbox_id.raw,
                expires_at=expires_at,
                expires_after_use=single_use,
            )
            slug = self.codec.encode(sign_invite(payload, private_key))

            logfire.info(
                "Invite generated",
                conversation_id=conversation.id,
                tag=str(conversation.invite_tag),
                slug_length=len(slug),
            )
            return slug

    def decode_invite(self, slug: str) -> DecodedInvite:
        """Decode a slug and recover the key that signed it.

        Nothing is checked against our own identity here, which makes this
        usable by joiners and for previews.

        Args:
            slug: Invite slug

        Returns:
            Decoded invite with the signer's public key

        Raises:
            EncodingError: If the slug is malformed
            InvalidSignature: If no public key can be recovered
        """
        with logfire.span("invite_service.decode_invite", slug=redact_slug(slug)):
            signed_invite = self.codec.decode(slug)
            signer = recover_invite_signer(signed_invite)
            logfire.info(
                "Invite decoded",
                tag=str(signed_invite.tag),
                creator_inbox_id=signed_invite.invite_payload.creator_inbox_id.hex(),
            )
            return DecodedInvite(signed_invite=signed_invite, signer_public_key=signer)

    async def decrypt_conversation_id(
        self, signed_invite: SignedInvite
    ) -> ConversationId:
        """Open the conversation token of an invite we issued.

        Raises:
            DecryptionError: If the token was not issued by our inbox
        """
        inbox_id, private_key = await self._identity()
        return ConversationId(
            self.cipher.decrypt(
                signed_invite.invite_payload.conversation_token,
                inbox_id.raw,
                private_key,
            )
        )

    def invite_url(self, slug: str) -> str:
        """Build a shareable invite link."""
        return f"{self.invite_base_url}?{self.query_param}={slug}"

    async def rotate_invite_tag(self, conversation_id: ConversationId) -> Conversation:
        """Give a conversation a new invite tag.

        Invites issued under the old tag keep valid signatures but can no
        longer be redeemed.

        Args:
            conversation_id: Conversation to rotate

        Returns:
            Updated conversation

        Raises:
            NotFoundError: If the conversation does not exist
        """
        with logfire.span(
            "invite_service.rotate_invite_tag", conversation_id=conversation_id
        ):
            conversation = await self.get_conversation(conversation_id)

            new_tag = generate_invite_tag(self.tag_length)
            while new_tag == conversation.invite_tag:
                new_tag = generate_invite_tag(self.tag_length)

            rotated = conversation.model_copy(update={"invite_tag": new_tag})
            saved = await self.conversation_repository.save(rotated)
            logfire.info(
                "Invite tag rotated",
                conversation_id=conversation_id,
                old_tag=str(conversation.invite_tag),
                new_tag=str(new_tag),
            )
            return saved
