"""PostgreSQL implementation of Conversation repository."""

from typing import Optional

from sqlalchemy import delete, insert, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from convo.domain.model import Conversation
from convo.domain.repository import ConversationRepository
from convo.domain.value import ConversationId, InboxId, InviteTag
from convo.persistence.mappers import conversation_to_dict, row_to_conversation
from convo.persistence.tables import conversations_table, consumed_invite_tags_table


class PostgresConversationRepository(ConversationRepository):
    """PostgreSQL implementation of ConversationRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, conversation_id: ConversationId) -> Optional[Conversation]:
        stmt = select(conversations_table).where(
            conversations_table.c.id == conversation_id
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_conversation(dict(row)) if row else None

    async def find_by_invite_tag(self, tag: InviteTag) -> Optional[Conversation]:
        stmt = select(conversations_table).where(
            conversations_table.c.invite_tag == tag.root
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_conversation(dict(row)) if row else None

    async def save(self, conversation: Conversation) -> Conversation:
        """Save a conversation (create or update).

        Args:
            conversation: Conversation to save

        Returns:
            Saved conversation
        """
        conversation_dict = conversation_to_dict(conversation)

        existing = await self.find_by_id(conversation.id)

        if existing:
            # created_at is set once
            conversation_dict.pop("created_at")
            stmt = (
                update(conversations_table)
                .where(conversations_table.c.id == conversation.id)
                .values(**conversation_dict)
            )
            await self.session.execute(stmt)
        else:
            stmt = insert(conversations_table).values(**conversation_dict)
            await self.session.execute(stmt)

        await self.session.flush()
        return conversation

    async def consume_invite_tag(
        self, tag: InviteTag, conversation_id: ConversationId, inbox_id: InboxId
    ) -> bool:
        """Atomically mark a single-use invite tag as redeemed.

        Relies on the primary key of consumed_invite_tags: of two concurrent
        inserts only one affects a row.
        """
        stmt = (
            pg_insert(consumed_invite_tags_table)
            .values(tag=tag.root, conversation_id=conversation_id, inbox_id=inbox_id.root)
            .on_conflict_do_nothing(index_elements=["tag"])
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount == 1

    async def find_invite_tag_consumer(self, tag: InviteTag) -> Optional[InboxId]:
        stmt = select(consumed_invite_tags_table.c.inbox_id).where(
            consumed_invite_tags_table.c.tag == tag.root
        )
        result = await self.session.execute(stmt)
        inbox_id = result.scalar()
        return InboxId(inbox_id) if inbox_id else None

    async def release_invite_tag(self, tag: InviteTag) -> None:
        stmt = delete(consumed_invite_tags_table).where(
            consumed_invite_tags_table.c.tag == tag.root
        )
        await self.session.execute(stmt)
        await self.session.flush()
