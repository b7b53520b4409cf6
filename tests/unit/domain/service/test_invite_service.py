"""Unit tests for InviteService."""

from datetime import datetime, timedelta, timezone

import pytest

from convo.adapter.keys import InMemoryKeyProvider
from convo.domain.error import NotFoundError
from convo.domain.model import Conversation
from convo.domain.repository import ConversationRepository
from convo.domain.service import InviteService, KeyProvider
from convo.domain.value import ConversationId, InboxId, InviteTag
from convo.persistence.repository.inmemory import InMemoryConversationRepository
from convo.protocol.codec import InviteCodec
from convo.protocol.error import DecryptionError, EncodingError
from convo.protocol.signing import public_key_from_private
from convo.protocol.token_cipher import ConversationTokenCipher
from tests.conftest import FIXED_INBOX_BYTES, FIXED_PRIVATE_KEY
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked, no docker needed
unit_env = create_env_fixture()


def fixed_invite_service() -> InviteService:
    """Invite service signing with a fixed identity."""
    return InviteService(
        conversation_repository=InMemoryConversationRepository(),
        key_provider=InMemoryKeyProvider(
            inbox_id=InboxId.from_bytes(FIXED_INBOX_BYTES),
            private_key=FIXED_PRIVATE_KEY,
        ),
        codec=InviteCodec(),
        cipher=ConversationTokenCipher(),
    )


class TestCreateConversation:
    """Tests for create_conversation method."""

    @pytest.mark.asyncio
    async def test_create_conversation_assigns_tag(self, unit_env):
        """New conversations get a fresh 10 character tag and our inbox."""
        # Arrange
        invite_service = await unit_env.get(InviteService)
        conversation_repo = await unit_env.get(ConversationRepository)
        key_provider = await unit_env.get(KeyProvider)

        # Act
        result = await invite_service.create_conversation(
            ConversationId("conv-123"), name="Book Club"
        )

        # Assert
        assert len(result.invite_tag.root) == 10
        assert result.creator_inbox_id == await key_provider.get_inbox_id()
        assert result.name == "Book Club"

        saved = await conversation_repo.find_by_id(ConversationId("conv-123"))
        assert saved == result

    @pytest.mark.asyncio
    async def test_get_conversation_not_found(self, unit_env):
        """Unknown conversations raise NotFoundError."""
        invite_service = await unit_env.get(InviteService)

        with pytest.raises(NotFoundError):
            await invite_service.get_conversation(ConversationId("missing"))


class TestGenerateAndDecode:
    """Tests for issuing and decoding invites."""

    @pytest.mark.asyncio
    async def test_invite_with_fixed_identity(self):
        """An issued invite carries the tag and opens to the conversation id."""
        # Arrange
        invite_service = fixed_invite_service()
        conversation = await invite_service.conversation_repository.save(
            Conversation(
                id=ConversationId("conv-123"),
                invite_tag=InviteTag("aB3dE7gH1k"),
                creator_inbox_id=InboxId.from_bytes(FIXED_INBOX_BYTES),
            )
        )

        # Act
        slug = await invite_service.generate_invite(conversation)
        decoded = invite_service.decode_invite(slug)

        # Assert
        signed = decoded.signed_invite
        assert signed.tag == InviteTag("aB3dE7gH1k")
        assert signed.invite_payload.creator_inbox_id == FIXED_INBOX_BYTES
        assert signed.expires_after_use is False
        assert signed.name is None
        assert decoded.signer_public_key == public_key_from_private(FIXED_PRIVATE_KEY)
        assert await invite_service.decrypt_conversation_id(signed) == "conv-123"

    @pytest.mark.asyncio
    async def test_invite_carries_display_fields_and_expiry(self, unit_env):
        """Display fields, expiry and single use travel in the invite."""
        # Arrange
        invite_service = await unit_env.get(InviteService)
        conversation_expiry = datetime(2031, 1, 1, tzinfo=timezone.utc)
        invite_expiry = datetime(2030, 12, 1, tzinfo=timezone.utc)
        conversation = await invite_service.create_conversation(
            ConversationId("conv-123"),
            name="Book Club",
            description="Monthly reads",
            expires_at=conversation_expiry,
        )

        # Act
        slug = await invite_service.generate_invite(
            conversation, expires_at=invite_expiry, single_use=True
        )
        signed = invite_service.decode_invite(slug).signed_invite

        # Assert
        assert signed.name == "Book Club"
        assert signed.description == "Monthly reads"
        assert signed.image_url is None
        assert signed.expires_at == invite_expiry
        assert signed.conversation_expires_at == conversation_expiry
        assert signed.expires_after_use is True

    @pytest.mark.asyncio
    async def test_decode_needs_no_identity(self, unit_env):
        """Any service can decode an invite issued by another identity."""
        # Arrange
        issuer = fixed_invite_service()
        conversation = await issuer.conversation_repository.save(
            Conversation(
                id=ConversationId("conv-123"), invite_tag=InviteTag("aB3dE7gH1k")
            )
        )
        slug = await issuer.generate_invite(conversation)
        invite_service = await unit_env.get(InviteService)

        # Act
        decoded = invite_service.decode_invite(slug)

        # Assert
        assert decoded.signed_invite.tag == InviteTag("aB3dE7gH1k")
        assert decoded.signer_public_key == public_key_from_private(FIXED_PRIVATE_KEY)

    @pytest.mark.asyncio
    async def test_foreign_token_cannot_be_decrypted(self, unit_env):
        """Only the issuing identity can open the conversation token."""
        # Arrange
        issuer = fixed_invite_service()
        conversation = await issuer.conversation_repository.save(
            Conversation(
                id=ConversationId("conv-123"), invite_tag=InviteTag("aB3dE7gH1k")
            )
        )
        signed = issuer.decode_invite(
            await issuer.generate_invite(conversation)
        ).signed_invite
        invite_service = await unit_env.get(InviteService)

        # Act & Assert
        with pytest.raises(DecryptionError):
            await invite_service.decrypt_conversation_id(signed)

    def test_decode_garbage_raises(self):
        """Malformed slugs raise EncodingError."""
        invite_service = fixed_invite_service()

        with pytest.raises(EncodingError):
            invite_service.decode_invite("not a valid slug!")

    def test_invite_url(self):
        """Links put the slug in the configured query parameter."""
        invite_service = fixed_invite_service()

        assert invite_service.invite_url("abc") == "https://convos.org/v2?i=abc"


class TestRotateInviteTag:
    """Tests for rotate_invite_tag method."""

    @pytest.mark.asyncio
    async def test_rotate_changes_tag(self, unit_env):
        """Rotation stores a different tag on the conversation."""
        # Arrange
        invite_service = await unit_env.get(InviteService)
        conversation_repo = await unit_env.get(ConversationRepository)
        original = await invite_service.create_conversation(ConversationId("conv-123"))

        # Act
        rotated = await invite_service.rotate_invite_tag(ConversationId("conv-123"))

        # Assert
        assert rotated.invite_tag != original.invite_tag
        assert await conversation_repo.find_by_invite_tag(original.invite_tag) is None
        saved = await conversation_repo.find_by_id(ConversationId("conv-123"))
        assert saved.invite_tag == rotated.invite_tag

    @pytest.mark.asyncio
    async def test_old_invites_keep_valid_signatures(self, unit_env):
        """Invites issued before rotation still decode with the old tag."""
        # Arrange
        invite_service = await unit_env.get(InviteService)
        conversation = await invite_service.create_conversation(
            ConversationId("conv-123")
        )
        slug = await invite_service.generate_invite(conversation)

        # Act
        await invite_service.rotate_invite_tag(conversation.id)
        decoded = invite_service.decode_invite(slug)

        # Assert
        assert decoded.signed_invite.tag == conversation.invite_tag

    @pytest.mark.asyncio
    async def test_rotate_unknown_conversation(self, unit_env):
        """Rotating an unknown conversation raises NotFoundError."""
        invite_service = await unit_env.get(InviteService)

        with pytest.raises(NotFoundError):
            await invite_service.rotate_invite_tag(ConversationId("missing"))
