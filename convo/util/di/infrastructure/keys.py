"""Key infrastructure providers."""

from dishka import Scope, provide

from convo.adapter.keys import SettingsKeyProvider
from convo.config import Settings
from convo.domain.service import KeyProvider
from convo.util.di.base import ProviderBase
from convo.util.error import ConfigurationError


class KeysProvider(ProviderBase):
    """Keys component base."""

    __mock_component__ = "keys"


class ProdKeysProvider(KeysProvider):
    """Production keys provider reading the inbox identity from settings."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_key_provider(self, settings: Settings) -> KeyProvider:
        """Provide key provider.

        Raises:
            ConfigurationError: If a non-development environment has no identity
        """
        messaging = settings.messaging

        if (
            settings.environment in ("staging", "production")
            and not messaging.identity_configured
        ):
            raise ConfigurationError(
                "MESSAGING__INBOX_ID and MESSAGING__PRIVATE_KEY must be configured"
            )

        return SettingsKeyProvider(
            inbox_id=messaging.inbox_id,
            private_key=messaging.private_key.get_secret_value(),
        )
