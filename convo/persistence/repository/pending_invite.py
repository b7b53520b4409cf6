"""PostgreSQL implementation of PendingInvite repository."""

from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from convo.domain.model import PendingInvite
from convo.domain.repository import PendingInviteRepository
from convo.domain.value import InviteTag
from convo.persistence.mappers import pending_invite_to_dict, row_to_pending_invite
from convo.persistence.tables import pending_invites_table


class PostgresPendingInviteRepository(PendingInviteRepository):
    """PostgreSQL implementation of PendingInviteRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_tag(self, tag: InviteTag) -> Optional[PendingInvite]:
        stmt = select(pending_invites_table).where(
            pending_invites_table.c.invite_tag == tag.root
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_pending_invite(dict(row)) if row else None

    async def list_all(self) -> list[PendingInvite]:
        stmt = select(pending_invites_table).order_by(
            pending_invites_table.c.created_at.desc()
        )
        result = await self.session.execute(stmt)
        rows = result.mappings().all()
        return [row_to_pending_invite(dict(row)) for row in rows]

    async def save(self, pending_invite: PendingInvite) -> PendingInvite:
        """Save a pending invite, replacing any with the same tag.

        Args:
            pending_invite: Pending invite to save

        Returns:
            Saved pending invite
        """
        values = pending_invite_to_dict(pending_invite)
        stmt = pg_insert(pending_invites_table).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=["invite_tag"],
            set_={k: stmt.excluded[k] for k in values if k != "invite_tag"},
        )
        await self.session.execute(stmt)
        await self.session.flush()
        return pending_invite

    async def delete_by_tag(self, tag: InviteTag) -> None:
        stmt = delete(pending_invites_table).where(
            pending_invites_table.c.invite_tag == tag.root
        )
        await self.session.execute(stmt)
        await self.session.flush()
