"""FastAPI application."""

from fastapi import FastAPI

from convo.interface.api.routes import conversations, health, invites, joins
from convo.util.di.container import container_lifespan, create_container, setup_di
from convo.util.observability import instrument_fastapi


def create_app() -> FastAPI:
    """Create the invite service application.

    Logfire should be configured before this is called; start_app.py does
    that in production.
    """
    app_instance = FastAPI(
        title="Convos Invite Service",
        description="Issues, decodes and redeems signed conversation invites",
        version="0.1.0",
        lifespan=container_lifespan,
    )

    instrument_fastapi(app_instance)
    setup_di(app_instance, create_container())

    for module in (health, conversations, invites, joins):
        app_instance.include_router(module.router)

    return app_instance


app = create_app()
