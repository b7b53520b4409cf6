"""Mock providers for testing."""

from .keys import MockKeysProvider
from .messaging import MockMessagingProvider
from .persistence import MockPersistenceProvider
from .container import build_test_container

__all__ = [
    "MockKeysProvider",
    "MockMessagingProvider",
    "MockPersistenceProvider",
    "build_test_container",
]
