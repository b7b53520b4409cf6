"""Test container builder with selective unmocking."""

from dishka import AsyncContainer, Provider, make_async_container

from convo.util.di import PROVIDERS, Component, get_provider
from convo.util.di.base import COMPONENTS


def build_test_container(
    *extra_providers: Provider, unmock: set[Component] | None = None
) -> AsyncContainer:
    """Build a container with mocks for every component not unmocked.

    Settings are loaded from environment variables.

    Args:
        *extra_providers: Additional providers, e.g. FastapiProvider for routes
        unmock: Components to use production implementations for

    Returns:
        Configured test container

    Raises:
        ValueError: If unknown components are requested

    Examples:
        # Unit tests - in-memory storage, transport and a generated identity
        container = build_test_container()

        # Integration tests - real persistence, postgres must be running
        container = build_test_container(unmock={"persistence"})
    """
    unmock = unmock or set()
    unknown = unmock - COMPONENTS
    if unknown:
        raise ValueError(f"Unknown components: {unknown}")

    provider_instances = []
    for base in PROVIDERS:
        use_mock = base.is_mockable() and base.__mock_component__ not in unmock
        provider_instances.append(get_provider(base, use_mock=use_mock)())

    return make_async_container(*provider_instances, *extra_providers)
