"""Container fixtures for unit and integration tests.

Unit tests run against in-memory repositories, an in-memory transport and
a freshly generated inbox identity. Integration tests swap in PostgreSQL,
which must be running and migrated; configure it through DATABASE__URL.
"""

from dishka import Provider
import pytest_asyncio

from convo.util.di import Component
from tests.di import build_test_container


def create_env_fixture(
    *extra_providers: Provider, unmock: set[Component] | None = None
):
    """Create a fixture yielding a request-scoped container.

    Args:
        *extra_providers: Providers added on top of the component set
        unmock: Components to use production implementations for

    Returns:
        Pytest fixture function that yields AsyncContainer

    Usage:
        unit_env = create_env_fixture()
        integration_env = create_env_fixture(unmock={"persistence"})

        @pytest.mark.asyncio
        async def test_generate_invite(unit_env):
            invite_service = await unit_env.get(InviteService)
            ...
    """

    @pytest_asyncio.fixture
    async def _test_environment():
        container = build_test_container(*extra_providers, unmock=unmock)

        async with container() as request_container:
            yield request_container

        await container.close()

    return _test_environment
