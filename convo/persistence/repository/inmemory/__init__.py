"""In-memory repository implementations for testing."""

from .conversation import InMemoryConversationRepository
from .pending_invite import InMemoryPendingInviteRepository
from .unit_of_work import InMemoryUnitOfWork

__all__ = [
    "InMemoryConversationRepository",
    "InMemoryPendingInviteRepository",
    "InMemoryUnitOfWork",
]
