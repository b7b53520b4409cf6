"""Logging configuration for the application."""

import logging
import sys

from convo.config import Settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Third-party loggers that drown out join-flow logs at their default levels
_NOISY_LOGGERS = ("sqlalchemy.engine", "dishka", "asyncio")


def setup_logging(settings: Settings) -> None:
    """Configure stdlib logging for the service.

    Logfire handles spans; this covers plain ``logging`` records such as
    the codec's debug output and uvicorn's access log.
    """
    level = logging.DEBUG if settings.debug else logging.INFO

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True,
    )

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    # The event stream polls the gateway; keep request lines for debugging only
    gateway_level = logging.DEBUG if settings.debug else logging.WARNING
    logging.getLogger("httpx").setLevel(gateway_level)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    logging.getLogger("convo").setLevel(level)

    logging.getLogger(__name__).info(
        "Logging configured: environment=%s, level=%s",
        settings.environment,
        logging.getLevelName(level),
    )
