"""Async engine and session factory for the invite tables."""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from convo.config import Settings


def create_engine(settings: Settings) -> AsyncEngine:
    """Create the async PostgreSQL engine.

    SQL is echoed only in debug mode. Pre-ping keeps long-lived join flows
    from failing on connections the server has already dropped.
    """
    return create_async_engine(
        settings.database_url,
        echo=settings.debug,
        pool_pre_ping=True,
        pool_size=settings.database.pool_size,
        max_overflow=settings.database.max_overflow,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create the session factory used per request.

    Rows are mapped into frozen domain models right after loading, so
    nothing needs refreshing after commit.
    """
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=False)
