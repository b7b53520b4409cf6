"""Key providers for the inbox this service acts as."""

import secrets

from coincurve import PrivateKey

from convo.adapter.error import KeyProviderError
from convo.domain.service.messaging import KeyProvider
from convo.domain.value import InboxId


class SettingsKeyProvider(KeyProvider):
    """Key provider reading the inbox identity from configuration.

    Both values are hex encoded. Validation happens on first use so the
    app can start without an identity when it only decodes invites.
    """

    def __init__(self, inbox_id: str, private_key: str) -> None:
        """Initialize settings key provider.

        Args:
            inbox_id: Hex encoded inbox id
            private_key: Hex encoded 32-byte secp256k1 private key
        """
        self._inbox_id = inbox_id
        self._private_key = private_key

    async def get_inbox_id(self) -> InboxId:
        if not self._inbox_id:
            raise KeyProviderError("Inbox id is not configured")
        try:
            return InboxId(self._inbox_id)
        except ValueError as e:
            raise KeyProviderError(f"Configured inbox id is invalid: {e}") from e

    async def get_private_key(self) -> bytes:
        if not self._private_key:
            raise KeyProviderError("Private key is not configured")
        try:
            key = bytes.fromhex(self._private_key.removeprefix("0x"))
        except ValueError as e:
            raise KeyProviderError("Configured private key is not hex") from e
        if len(key) != 32:
            raise KeyProviderError("Private key must be 32 bytes")
        return key


class InMemoryKeyProvider(KeyProvider):
    """Key provider with a freshly generated identity, for testing."""

    def __init__(
        self, inbox_id: InboxId | None = None, private_key: bytes | None = None
    ) -> None:
        """Initialize in-memory key provider.

        Args:
            inbox_id: Inbox id to use, random 32 bytes if omitted
            private_key: Private key to use, generated if omitted
        """
        self.inbox_id = inbox_id or InboxId.from_bytes(secrets.token_bytes(32))
        self.private_key = private_key or PrivateKey().secret

    async def get_inbox_id(self) -> InboxId:
        return self.inbox_id

    async def get_private_key(self) -> bytes:
        return self.private_key
