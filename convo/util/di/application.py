"""Application layer DI providers."""

from dishka import Scope, provide

from convo.application.usecase.conversation import CreateConversationUseCase
from convo.application.usecase.invite import (
    DecodeInviteUseCase,
    GenerateInviteUseCase,
    RotateInviteTagUseCase,
)
from convo.application.usecase.join import (
    HandleJoinRequestUseCase,
    ListPendingJoinsUseCase,
    StartJoinUseCase,
)
from convo.config import InviteSettings
from convo.domain.service import InviteService, JoinFlowCoordinator
from convo.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    # Conversation use cases
    @provide(scope=Scope.REQUEST)
    def get_create_conversation_use_case(
        self, invite_service: InviteService
    ) -> CreateConversationUseCase:
        """Provide create conversation use case."""
        return CreateConversationUseCase(invite_service=invite_service)

    # Invite use cases
    @provide(scope=Scope.REQUEST)
    def get_generate_invite_use_case(
        self, invite_service: InviteService
    ) -> GenerateInviteUseCase:
        """Provide generate invite use case."""
        return GenerateInviteUseCase(invite_service=invite_service)

    @provide(scope=Scope.REQUEST)
    def get_decode_invite_use_case(
        self, invite_service: InviteService, invite_settings: InviteSettings
    ) -> DecodeInviteUseCase:
        """Provide decode invite use case."""
        return DecodeInviteUseCase(
            invite_service=invite_service, invite_settings=invite_settings
        )

    @provide(scope=Scope.REQUEST)
    def get_rotate_invite_tag_use_case(
        self, invite_service: InviteService
    ) -> RotateInviteTagUseCase:
        """Provide rotate invite tag use case."""
        return RotateInviteTagUseCase(invite_service=invite_service)

    # Join use cases
    @provide(scope=Scope.REQUEST)
    def get_start_join_use_case(
        self, join_flow: JoinFlowCoordinator
    ) -> StartJoinUseCase:
        """Provide start join use case."""
        return StartJoinUseCase(join_flow=join_flow)

    @provide(scope=Scope.REQUEST)
    def get_handle_join_request_use_case(
        self, join_flow: JoinFlowCoordinator
    ) -> HandleJoinRequestUseCase:
        """Provide handle join request use case."""
        return HandleJoinRequestUseCase(join_flow=join_flow)

    @provide(scope=Scope.REQUEST)
    def get_list_pending_joins_use_case(
        self, join_flow: JoinFlowCoordinator
    ) -> ListPendingJoinsUseCase:
        """Provide list pending joins use case."""
        return ListPendingJoinsUseCase(join_flow=join_flow)
