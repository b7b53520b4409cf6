"""Unit tests for the in-memory repositories."""

from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from convo.domain.model import Conversation, PendingInvite
from convo.domain.value import ConversationId, InboxId, InviteTag, PendingInviteId
from convo.persistence.repository.inmemory import (
    InMemoryConversationRepository,
    InMemoryPendingInviteRepository,
)

JOINER = InboxId("bb" * 32)


def conversation(conversation_id: str = "conv-123", tag: str = "aB3dE7gH1k"):
    return Conversation(id=ConversationId(conversation_id), invite_tag=InviteTag(tag))


class TestInMemoryConversationRepository:
    """Tests for InMemoryConversationRepository."""

    @pytest.mark.asyncio
    async def test_find_by_tag_follows_rotation(self):
        """Lookups by tag only see the current tag."""
        repo = InMemoryConversationRepository()
        await repo.save(conversation())
        await repo.save(conversation(tag="zZ9yY8xX7w"))

        assert await repo.find_by_invite_tag(InviteTag("aB3dE7gH1k")) is None
        found = await repo.find_by_invite_tag(InviteTag("zZ9yY8xX7w"))
        assert found.id == "conv-123"

    @pytest.mark.asyncio
    async def test_duplicate_tag_rejected(self):
        """Two conversations cannot share a tag."""
        repo = InMemoryConversationRepository()
        await repo.save(conversation())

        with pytest.raises(IntegrityError):
            await repo.save(conversation(conversation_id="conv-456"))

    @pytest.mark.asyncio
    async def test_consume_release(self):
        """A tag is consumed once until released."""
        repo = InMemoryConversationRepository()
        tag = InviteTag("aB3dE7gH1k")

        assert await repo.consume_invite_tag(tag, ConversationId("conv-123"), JOINER)
        assert not await repo.consume_invite_tag(
            tag, ConversationId("conv-123"), InboxId("cc" * 32)
        )
        assert await repo.find_invite_tag_consumer(tag) == JOINER

        await repo.release_invite_tag(tag)

        assert await repo.find_invite_tag_consumer(tag) is None


class TestInMemoryPendingInviteRepository:
    """Tests for InMemoryPendingInviteRepository."""

    @pytest.mark.asyncio
    async def test_save_replaces_by_tag(self):
        """Saving again for the same tag replaces the pending invite."""
        repo = InMemoryPendingInviteRepository()
        tag = InviteTag("aB3dE7gH1k")

        for slug in ("first", "second"):
            await repo.save(
                PendingInvite(
                    id=PendingInviteId(uuid4()),
                    invite_tag=tag,
                    creator_inbox_id=JOINER,
                    slug=slug,
                )
            )

        assert [p.slug for p in await repo.list_all()] == ["second"]

        await repo.delete_by_tag(tag)

        assert await repo.find_by_tag(tag) is None
