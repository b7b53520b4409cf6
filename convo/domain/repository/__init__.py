"""Repository interfaces for the invite domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the infrastructure layer.
"""

from convo.domain.repository.conversation import ConversationRepository
from convo.domain.repository.pending_invite import PendingInviteRepository
from convo.domain.repository.unit_of_work import UnitOfWork

__all__ = [
    "ConversationRepository",
    "PendingInviteRepository",
    "UnitOfWork",
]
