"""Base class for domain services."""

from convo.domain.service.messaging import KeyProvider
from convo.domain.value import InboxId


def redact_slug(slug: str) -> str:
    """Shorten a slug for logs and spans.

    A full slug is a bearer credential for joining, so it never leaves the
    process in telemetry.
    """
    return slug[:8] + "..."


class Service:
    """Base class for domain services acting as this inbox."""

    key_provider: KeyProvider

    async def _identity(self) -> tuple[InboxId, bytes]:
        """Our inbox id and secp256k1 private key."""
        return (
            await self.key_provider.get_inbox_id(),
            await self.key_provider.get_private_key(),
        )
