"""Unit tests for invite payload assembly."""

from datetime import datetime, timezone

from convo.domain.model import Conversation
from convo.domain.service import build_invite_payload, generate_invite_tag
from convo.domain.service.invite_builder import TAG_ALPHABET
from convo.domain.value import ConversationId, InviteTag
from tests.conftest import FIXED_INBOX_BYTES


class TestGenerateInviteTag:
    """Tests for generate_invite_tag."""

    def test_default_length(self):
        """Tags are 10 alphanumeric characters by default."""
        tag = generate_invite_tag()

        assert len(tag.root) == 10
        assert set(tag.root) <= set(TAG_ALPHABET)

    def test_tags_are_random(self):
        """Consecutive tags differ."""
        tags = {generate_invite_tag().root for _ in range(50)}

        assert len(tags) == 50


class TestBuildInvitePayload:
    """Tests for build_invite_payload."""

    def test_copies_conversation_state(self):
        """Tag, display fields and self-destruct time come from the conversation."""
        # Arrange
        conversation = Conversation(
            id=ConversationId("conv-123"),
            invite_tag=InviteTag("aB3dE7gH1k"),
            name="Book Club",
            expires_at=datetime(2031, 1, 1, tzinfo=timezone.utc),
        )

        # Act
        payload = build_invite_payload(
            conversation,
            conversation_token=b"token",
            creator_inbox_id=FIXED_INBOX_BYTES,
            expires_after_use=True,
        )

        # Assert
        assert payload.tag == InviteTag("aB3dE7gH1k")
        assert payload.name == "Book Club"
        assert payload.conversation_expires_at == conversation.expires_at
        assert payload.expires_after_use is True
        assert payload.expires_at is None

    def test_empty_display_fields_omitted(self):
        """Empty strings on the conversation become absent fields."""
        conversation = Conversation(
            id=ConversationId("conv-123"),
            invite_tag=InviteTag("aB3dE7gH1k"),
            name="",
            description="",
        )

        payload = build_invite_payload(
            conversation, conversation_token=b"token", creator_inbox_id=FIXED_INBOX_BYTES
        )

        assert payload.name is None
        assert payload.description is None
        assert payload.image_url is None
