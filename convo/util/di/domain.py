"""Domain layer DI providers."""

from dishka import Scope, provide

from convo.config import InviteSettings
from convo.domain.repository import (
    ConversationRepository,
    PendingInviteRepository,
    UnitOfWork,
)
from convo.domain.service import (
    ConversationLocks,
    InviteService,
    JoinFlowCoordinator,
    KeyProvider,
    MessagingTransport,
)
from convo.protocol.codec import InviteCodec
from convo.protocol.token_cipher import ConversationTokenCipher
from convo.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    """

    scope = Scope.REQUEST

    @provide
    def get_invite_service(
        self,
        conversation_repository: ConversationRepository,
        key_provider: KeyProvider,
        codec: InviteCodec,
        cipher: ConversationTokenCipher,
        invite_settings: InviteSettings,
    ) -> InviteService:
        """Provide invite domain service."""
        return InviteService(
            conversation_repository=conversation_repository,
            key_provider=key_provider,
            codec=codec,
            cipher=cipher,
            tag_length=invite_settings.tag_length,
            invite_base_url=invite_settings.invite_base_url,
            query_param=invite_settings.query_param,
        )

    @provide
    def get_join_flow_coordinator(
        self,
        invite_service: InviteService,
        conversation_repository: ConversationRepository,
        pending_invite_repository: PendingInviteRepository,
        transport: MessagingTransport,
        key_provider: KeyProvider,
        locks: ConversationLocks,
        unit_of_work: UnitOfWork,
        invite_settings: InviteSettings,
    ) -> JoinFlowCoordinator:
        """Provide join flow coordinator."""
        return JoinFlowCoordinator(
            invite_service=invite_service,
            conversation_repository=conversation_repository,
            pending_invite_repository=pending_invite_repository,
            transport=transport,
            key_provider=key_provider,
            locks=locks,
            unit_of_work=unit_of_work,
            join_timeout=invite_settings.join_timeout_seconds,
            query_param=invite_settings.query_param,
            app_url_scheme=invite_settings.app_url_scheme,
        )
