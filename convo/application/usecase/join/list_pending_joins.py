"""List pending joins use case."""

from datetime import datetime

import logfire
from pydantic import BaseModel

from convo.application.usecase.base import BaseUseCase
from convo.domain.service import JoinFlowCoordinator


class ListPendingJoinsRequest(BaseModel):
    """No parameters; pending joins belong to this inbox."""


class PendingJoin(BaseModel):
    """Conversation preview of a join we are waiting on.

    The slug is left out; it is a credential for joining.
    """

    invite_tag: str
    creator_inbox_id: str
    name: str | None
    description: str | None
    image_url: str | None
    expires_at: datetime | None
    conversation_expires_at: datetime | None
    requested_at: datetime


class ListPendingJoinsResponse(BaseModel):
    """Pending joins, newest first."""

    pending: list[PendingJoin]


class ListPendingJoinsUseCase(
    BaseUseCase[ListPendingJoinsRequest, ListPendingJoinsResponse]
):
    """Use case for rendering joins that have not resolved yet."""

    def __init__(self, join_flow: JoinFlowCoordinator) -> None:
        """Initialize use case.

        Args:
            join_flow: Join flow coordinator
        """
        self.join_flow = join_flow

    async def execute(
        self, request: ListPendingJoinsRequest
    ) -> ListPendingJoinsResponse:
        """List pending joins of this inbox."""
        with logfire.span("list_pending_joins.execute"):
            pending_invites = await self.join_flow.list_pending_joins()

            return ListPendingJoinsResponse(
                pending=[
                    PendingJoin(
                        invite_tag=str(invite.invite_tag),
                        creator_inbox_id=str(invite.creator_inbox_id),
                        name=invite.name,
                        description=invite.description,
                        image_url=invite.image_url,
                        expires_at=invite.expires_at,
                        conversation_expires_at=invite.conversation_expires_at,
                        requested_at=invite.created_at,
                    )
                    for invite in pending_invites
                ]
            )
