#!/usr/bin/env python3
"""Bring the conversations and pending_invites tables up to date."""

import sys

import logfire
from alembic import command
from alembic.config import Config

from convo.config import Settings
from convo.util.logging import setup_logging
from convo.util.observability import configure_logfire


def main(revision: str = "head") -> int:
    """Upgrade the schema to ``revision``, logging failures to Logfire."""
    settings = Settings()

    setup_logging(settings)
    configure_logfire(settings)

    with logfire.span(
        "run_migrations", revision=revision, git_sha=settings.git_sha
    ):
        try:
            command.upgrade(Config("alembic.ini"), revision)
        except Exception as e:
            logfire.error(
                "Schema migration failed",
                revision=revision,
                error=str(e),
                error_type=type(e).__name__,
                _exc_info=sys.exc_info(),
            )
            # A half-migrated schema must stop the deploy
            raise

    logfire.info("Schema up to date", revision=revision)
    return 0


if __name__ == "__main__":
    sys.exit(main(*sys.argv[1:2]))
