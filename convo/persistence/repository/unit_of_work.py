"""SQLAlchemy unit of work."""

import logfire
from sqlalchemy.ext.asyncio import AsyncSession

from convo.domain.repository import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """Commits the request-scoped session.

    After a commit the session hands its connection back to the pool; the
    next statement starts a new transaction on a fresh connection.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def commit(self) -> None:
        await self.session.commit()
        logfire.debug("Session committed early")
