"""Handle join request use case."""

import logfire
from pydantic import BaseModel

from convo.application.usecase.base import BaseUseCase
from convo.domain.service import JoinFlowCoordinator
from convo.domain.value import InboxId, JoinRequestState, RejectionReason


class HandleJoinRequestRequest(BaseModel):
    """A direct message received by the creator's inbox."""

    sender_inbox_id: str
    text: str


class HandleJoinRequestResponse(BaseModel):
    """Terminal state of the join request."""

    state: JoinRequestState
    sender_inbox_id: str
    invite_tag: str | None = None
    conversation_id: str | None = None
    reason: RejectionReason | None = None
    message: str | None = None


class HandleJoinRequestUseCase(
    BaseUseCase[HandleJoinRequestRequest, HandleJoinRequestResponse]
):
    """Use case for processing an incoming join request as the creator."""

    def __init__(self, join_flow: JoinFlowCoordinator) -> None:
        """Initialize use case.

        Args:
            join_flow: Join flow coordinator
        """
        self.join_flow = join_flow

    async def execute(
        self, request: HandleJoinRequestRequest
    ) -> HandleJoinRequestResponse:
        """Validate the request and add the sender if it may join.

        Raises:
            ValueError: If the sender inbox id is not hex
        """
        sender = InboxId(request.sender_inbox_id)

        with logfire.span("handle_join_request.execute", sender=str(sender)):
            outcome = await self.join_flow.handle_incoming_join_request(
                request.text, sender
            )

            return HandleJoinRequestResponse(
                state=outcome.state,
                sender_inbox_id=str(outcome.sender),
                invite_tag=str(outcome.tag) if outcome.tag else None,
                conversation_id=outcome.conversation_id,
                reason=outcome.reason,
                message=outcome.message,
            )
