"""Start join use case."""

import logfire
from pydantic import BaseModel

from convo.application.usecase.base import BaseUseCase
from convo.domain.service import JoinFlowCoordinator
from convo.domain.value import JoinState


class StartJoinRequest(BaseModel):
    """Invite slug or invite link to redeem."""

    invite: str


class StartJoinResponse(BaseModel):
    """Terminal state of the join attempt."""

    state: JoinState
    invite_tag: str | None = None
    conversation_id: str | None = None
    error_type: str | None = None
    message: str | None = None
    security_warning: bool = False


class StartJoinUseCase(BaseUseCase[StartJoinRequest, StartJoinResponse]):
    """Use case for joining a conversation through an invite.

    Runs until the creator adds us, reports an error, or the wait times out.
    """

    def __init__(self, join_flow: JoinFlowCoordinator) -> None:
        """Initialize use case.

        Args:
            join_flow: Join flow coordinator
        """
        self.join_flow = join_flow

    async def execute(self, request: StartJoinRequest) -> StartJoinResponse:
        """Run the joiner side of the join flow."""
        with logfire.span("start_join.execute"):
            outcome = await self.join_flow.start_join(request.invite)

            return StartJoinResponse(
                state=outcome.state,
                invite_tag=str(outcome.tag) if outcome.tag else None,
                conversation_id=outcome.conversation_id,
                error_type=outcome.error_type,
                message=outcome.message,
                security_warning=outcome.is_security_warning,
            )
