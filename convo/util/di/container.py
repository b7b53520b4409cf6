"""Dependency injection container."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from dishka import AsyncContainer, make_async_container
from dishka.integrations.fastapi import FastapiProvider, setup_dishka
from fastapi import FastAPI
import logfire

from convo.util.di import PROVIDERS, get_provider


def create_container() -> AsyncContainer:
    """Build the production container.

    Settings are loaded from environment variables when first requested.
    """
    provider_instances = [get_provider(base, use_mock=False)() for base in PROVIDERS]
    return make_async_container(*provider_instances, FastapiProvider())


@asynccontextmanager
async def container_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Close the app's container on shutdown.

    Closing finalizes APP-scoped generators: the database engine is disposed
    and the messaging gateway client closed.
    """
    yield
    logfire.info("Closing DI container")
    await app.state.dishka_container.close()


def setup_di(app: FastAPI, container: AsyncContainer) -> None:
    """Attach the container to the app so DishkaRoute handlers can resolve."""
    setup_dishka(container, app)
