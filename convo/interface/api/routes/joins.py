"""Join routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter

from convo.adapter.error import AdapterError
from convo.application.usecase.join import (
    HandleJoinRequestRequest,
    HandleJoinRequestResponse,
    HandleJoinRequestUseCase,
    ListPendingJoinsRequest,
    ListPendingJoinsResponse,
    ListPendingJoinsUseCase,
    StartJoinRequest,
    StartJoinResponse,
    StartJoinUseCase,
)
from convo.interface.error import to_http_exception

router = APIRouter(prefix="/joins", tags=["joins"], route_class=DishkaRoute)


@router.post("", response_model=StartJoinResponse)
async def start_join(
    request: StartJoinRequest,
    start_join_use_case: FromDishka[StartJoinUseCase],
) -> StartJoinResponse:
    """Join a conversation through an invite.

    Blocks until the join resolves or times out. Every terminal state is
    returned as 200 with ``state`` set.

    Raises:
        HTTPException: If the messaging gateway is unreachable
    """
    try:
        return await start_join_use_case.execute(request)
    except AdapterError as e:
        raise to_http_exception(e)


@router.post("/requests", response_model=HandleJoinRequestResponse)
async def handle_join_request(
    request: HandleJoinRequestRequest,
    handle_join_request_use_case: FromDishka[HandleJoinRequestUseCase],
) -> HandleJoinRequestResponse:
    """Process a direct message received by this inbox as a join request.

    Raises:
        HTTPException: If the sender is malformed or the gateway fails
    """
    try:
        return await handle_join_request_use_case.execute(request)
    except (AdapterError, ValueError) as e:
        raise to_http_exception(e)


@router.get("/pending", response_model=ListPendingJoinsResponse)
async def list_pending_joins(
    list_pending_joins_use_case: FromDishka[ListPendingJoinsUseCase],
) -> ListPendingJoinsResponse:
    """List joins still waiting for the creator to add us."""
    return await list_pending_joins_use_case.execute(ListPendingJoinsRequest())
