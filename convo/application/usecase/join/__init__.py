"""Join use cases."""

from convo.application.usecase.join.handle_join_request import (
    HandleJoinRequestRequest,
    HandleJoinRequestResponse,
    HandleJoinRequestUseCase,
)
from convo.application.usecase.join.list_pending_joins import (
    ListPendingJoinsRequest,
    ListPendingJoinsResponse,
    ListPendingJoinsUseCase,
    PendingJoin,
)
from convo.application.usecase.join.start_join import (
    StartJoinRequest,
    StartJoinResponse,
    StartJoinUseCase,
)

__all__ = [
    "HandleJoinRequestRequest",
    "HandleJoinRequestResponse",
    "HandleJoinRequestUseCase",
    "ListPendingJoinsRequest",
    "ListPendingJoinsResponse",
    "ListPendingJoinsUseCase",
    "PendingJoin",
    "StartJoinRequest",
    "StartJoinResponse",
    "StartJoinUseCase",
]
