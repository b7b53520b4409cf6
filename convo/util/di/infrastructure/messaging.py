"""Messaging infrastructure providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide
import httpx

from convo.adapter.messaging import HttpMessagingTransport
from convo.config import Settings
from convo.domain.service import MessagingTransport
from convo.util.di.base import ProviderBase
from convo.util.observability import instrument_httpx


class MessagingProvider(ProviderBase):
    """Messaging component base."""

    __mock_component__ = "messaging"


class ProdMessagingProvider(MessagingProvider):
    """Production messaging provider talking to the messaging gateway."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    async def get_gateway_client(
        self, settings: Settings
    ) -> AsyncIterator[httpx.AsyncClient]:
        """Provide HTTP client for the messaging gateway."""
        client = httpx.AsyncClient(
            base_url=settings.messaging.gateway_url,
            timeout=settings.messaging.timeout,
        )
        instrument_httpx(client)
        yield client
        await client.aclose()

    @provide(scope=Scope.APP)
    def get_messaging_transport(
        self, client: httpx.AsyncClient, settings: Settings
    ) -> MessagingTransport:
        """Provide messaging transport."""
        return HttpMessagingTransport(client=client, timeout=settings.messaging.timeout)
