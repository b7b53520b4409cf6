"""Mock key providers for testing."""

from dishka import Scope, provide

from convo.adapter.keys import InMemoryKeyProvider
from convo.domain.service import KeyProvider
from convo.util.di.infrastructure.keys import KeysProvider


class MockKeysProvider(KeysProvider):
    """Mock keys provider with a freshly generated identity per container."""

    __is_mock__ = True

    @provide(scope=Scope.APP)
    def get_key_provider(self) -> KeyProvider:
        """Provide in-memory key provider."""
        return InMemoryKeyProvider()
