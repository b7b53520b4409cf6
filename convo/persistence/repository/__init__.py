"""PostgreSQL repository implementations."""

from convo.persistence.repository.conversation import PostgresConversationRepository
from convo.persistence.repository.pending_invite import PostgresPendingInviteRepository
from convo.persistence.repository.unit_of_work import SqlAlchemyUnitOfWork

__all__ = [
    "PostgresConversationRepository",
    "PostgresPendingInviteRepository",
    "SqlAlchemyUnitOfWork",
]
