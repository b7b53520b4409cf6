"""Shared base for invite protocol entities."""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict


def utcnow() -> datetime:
    """Current time as an aware UTC datetime.

    Every expiry comparison in the domain goes through aware datetimes, so
    naive values never meet the wire timestamps.
    """
    return datetime.now(timezone.utc)


class DomainModel(BaseModel):
    """Immutable entity.

    Updates go through ``model_copy(update=...)``, which keeps invite tags
    and expiry fields from changing under a running join flow.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)
