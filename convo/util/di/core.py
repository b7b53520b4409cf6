"""Core DI providers (non-mockable)."""

from dishka import Scope, provide

from convo.config import InviteSettings, Settings
from convo.domain.service import ConversationLocks
from convo.protocol.codec import InviteCodec
from convo.protocol.token_cipher import ConversationTokenCipher
from convo.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are loaded from environment variables and .env file automatically.
    Protocol objects are stateless and shared for the app lifetime.
    """

    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        """Provide application settings from environment."""
        return Settings()

    @provide(scope=Scope.APP)
    def provide_invite_settings(self, settings: Settings) -> InviteSettings:
        """Provide invite protocol settings."""
        return settings.invite

    @provide(scope=Scope.APP)
    def provide_codec(self, invite_settings: InviteSettings) -> InviteCodec:
        """Provide invite slug codec."""
        return InviteCodec(
            compression_threshold=invite_settings.compression_threshold,
            max_decompressed_size=invite_settings.max_decompressed_size,
            separator_interval=invite_settings.separator_interval,
        )

    @provide(scope=Scope.APP)
    def provide_cipher(self, invite_settings: InviteSettings) -> ConversationTokenCipher:
        """Provide conversation token cipher."""
        return ConversationTokenCipher(salt=invite_settings.token_salt.encode("utf-8"))

    @provide(scope=Scope.APP)
    def provide_locks(self) -> ConversationLocks:
        """Provide per-conversation locks, shared by all requests."""
        return ConversationLocks()
