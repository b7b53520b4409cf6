"""Logfire setup for the invite service.

Spans follow the ``<component>.<operation>`` naming used across the domain
services, e.g. ``join_flow.start_join``. Never pass private keys, full
invite slugs or decrypted conversation ids of foreign invites as
attributes; :func:`convo.domain.service.base.redact_slug` exists for slugs.
"""

import httpx
import logfire
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncEngine

from convo.config import ObservabilitySettings, Settings

SERVICE_NAME = "convo-invites"
SERVICE_VERSION = "0.1.0"

# Attribute names whose values are bearer material for joining a conversation
SCRUB_PATTERNS = [
    r"conversation[._ -]?token",
    r"invite[._ -]?(url|link|slug)",
]

# Polled by orchestrators every few seconds
UNTRACED_URLS = ["/health"]


def should_send(observability: ObservabilitySettings) -> bool:
    """Whether spans go to Logfire cloud.

    An explicit OBSERVABILITY__SEND_TO_LOGFIRE wins; otherwise a configured
    token turns sending on.
    """
    if observability.send_to_logfire is not None:
        return observability.send_to_logfire
    return bool(observability.logfire_token)


def configure_logfire(settings: Settings) -> None:
    """Configure Logfire once per process, before the app is imported."""
    observability = settings.observability
    send_to_logfire = should_send(observability)

    logfire.configure(
        service_name=SERVICE_NAME,
        service_version=SERVICE_VERSION,
        environment=settings.environment,
        send_to_logfire=send_to_logfire,
        token=observability.logfire_token,
        scrubbing=logfire.ScrubbingOptions(extra_patterns=SCRUB_PATTERNS),
        console=logfire.ConsoleOptions(
            colors="auto",
            span_style="show-parents",
            include_timestamps=True,
            verbose=settings.debug,
        ),
    )

    logfire.info(
        "Observability configured",
        environment=settings.environment,
        git_sha=settings.git_sha,
        send_to_logfire=send_to_logfire,
    )


def _request_attributes(request, attributes):
    # Path only: invite links may carry the slug in the query string
    return {**attributes, "method": request.method, "path": request.url.path}


def instrument_fastapi(app: FastAPI) -> None:
    """Trace API requests, except health checks."""
    logfire.instrument_fastapi(
        app,
        capture_headers=False,
        request_attributes_mapper=_request_attributes,
        excluded_urls=UNTRACED_URLS,
    )


def instrument_sqlalchemy(engine: AsyncEngine) -> None:
    """Trace conversation and pending invite queries."""
    logfire.instrument_sqlalchemy(engine=engine.sync_engine, enable_commenter=True)


def instrument_httpx(client: httpx.AsyncClient) -> None:
    """Trace calls to the messaging gateway."""
    logfire.instrument_httpx(client)
