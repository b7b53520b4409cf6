#!/usr/bin/env python3
"""Serve the invite API, reporting startup failures to Logfire."""

import sys

import logfire
import uvicorn

from convo.config import Settings
from convo.util.logging import setup_logging
from convo.util.observability import configure_logfire


def main() -> int:
    """Configure telemetry, then hand over to uvicorn."""
    settings = Settings()

    setup_logging(settings)
    configure_logfire(settings)

    if not settings.messaging.identity_configured:
        logfire.warn(
            "No inbox identity configured, issuing and joining are unavailable",
            environment=settings.environment,
        )

    try:
        logfire.info(
            "Starting invite service",
            host=settings.host,
            port=settings.port,
            inbox_id=settings.messaging.inbox_id or None,
            gateway_url=settings.messaging.gateway_url,
        )
        uvicorn.run(
            "convo.interface.api.app:app",
            host=settings.host,
            port=settings.port,
            log_level="debug" if settings.debug else "info",
        )
        return 0

    except Exception as e:
        logfire.error(
            "Invite service failed to start",
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        raise


if __name__ == "__main__":
    sys.exit(main())
