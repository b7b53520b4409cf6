"""Persistence infrastructure providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide
import logfire
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from convo.config import Settings
from convo.domain.repository import (
    ConversationRepository,
    PendingInviteRepository,
    UnitOfWork,
)
from convo.persistence.database import create_engine, create_session_factory
from convo.persistence.repository import (
    PostgresConversationRepository,
    PostgresPendingInviteRepository,
    SqlAlchemyUnitOfWork,
)
from convo.util.di.base import ProviderBase
from convo.util.observability import instrument_sqlalchemy


class PersistenceProvider(ProviderBase):
    """Persistence component base."""

    __mock_component__ = "persistence"


class ProdPersistenceProvider(PersistenceProvider):
    """Production persistence provider using PostgreSQL."""

    __is_mock__ = False

    scope = Scope.APP

    @provide(scope=Scope.APP)
    async def get_engine(self, settings: Settings) -> AsyncIterator[AsyncEngine]:
        """Provide database engine, disposed when the container closes."""
        engine = create_engine(settings)
        instrument_sqlalchemy(engine)
        yield engine
        await engine.dispose()

    @provide(scope=Scope.APP)
    def get_session_factory(
        self, engine: AsyncEngine
    ) -> async_sessionmaker[AsyncSession]:
        """Provide session factory."""
        return create_session_factory(engine)

    @provide(scope=Scope.REQUEST)
    async def get_session(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> AsyncIterator[AsyncSession]:
        """Provide database session for request scope.

        The session is committed at the end of the request if no exception
        occurred, or rolled back if one was raised.
        """
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception as e:
                logfire.warn("Session rollback", error=str(e))
                await session.rollback()
                raise

    @provide(scope=Scope.REQUEST)
    def get_conversation_repository(
        self, session: AsyncSession
    ) -> ConversationRepository:
        """Provide Conversation repository."""
        return PostgresConversationRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_pending_invite_repository(
        self, session: AsyncSession
    ) -> PendingInviteRepository:
        """Provide PendingInvite repository."""
        return PostgresPendingInviteRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_unit_of_work(self, session: AsyncSession) -> UnitOfWork:
        """Provide unit of work over the request session."""
        return SqlAlchemyUnitOfWork(session)
