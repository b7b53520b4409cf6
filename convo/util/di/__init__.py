"""Dependency injection module."""

from typing import Type

from convo.util.di.application import ProdApplicationProvider
from convo.util.di.base import Component, ProviderBase
from convo.util.di.core import ProdConfigProvider
from convo.util.di.domain import ProdDomainProvider
from convo.util.di.infrastructure import (
    KeysProvider,
    MessagingProvider,
    PersistenceProvider,
    ProdKeysProvider,
    ProdMessagingProvider,
    ProdPersistenceProvider,
)
from convo.util.error import DependencyInjectionError

# Order matters only for readability; dishka resolves by type
PROVIDERS: list[Type[ProviderBase]] = [
    ProdConfigProvider,
    ProdDomainProvider,
    ProdApplicationProvider,
    PersistenceProvider,
    MessagingProvider,
    KeysProvider,
]


def get_provider(
    base: Type[ProviderBase], use_mock: bool = False
) -> Type[ProviderBase]:
    """Pick the implementation of a provider entry.

    Concrete providers are returned as-is. For a component base, the
    subclass whose ``__is_mock__`` matches ``use_mock`` is returned; mock
    subclasses only exist once ``tests.di`` has been imported.

    Raises:
        DependencyInjectionError: If the requested implementation is missing
    """
    if not base.is_mockable():
        return base

    impl = next(
        (c for c in base.__subclasses__() if c.__is_mock__ == use_mock),
        None,
    )
    if impl is None:
        kind = "mock" if use_mock else "production"
        raise DependencyInjectionError(
            f"No {kind} implementation for {base.__mock_component__}"
        )
    return impl


__all__ = [
    "Component",
    "ProviderBase",
    "PROVIDERS",
    "get_provider",
    "ProdConfigProvider",
    "ProdDomainProvider",
    "ProdApplicationProvider",
    "KeysProvider",
    "MessagingProvider",
    "PersistenceProvider",
    "ProdKeysProvider",
    "ProdMessagingProvider",
    "ProdPersistenceProvider",
]
