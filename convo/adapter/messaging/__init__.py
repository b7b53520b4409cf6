"""Messaging gateway adapter."""

from .transport import (
    GatewayEventStream,
    HttpMessagingTransport,
    InMemoryEventStream,
    InMemoryMessagingTransport,
)

__all__ = [
    "GatewayEventStream",
    "HttpMessagingTransport",
    "InMemoryEventStream",
    "InMemoryMessagingTransport",
]
