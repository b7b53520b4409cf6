"""Unit tests for key providers."""

import pytest

from convo.adapter.error import KeyProviderError
from convo.adapter.keys import InMemoryKeyProvider, SettingsKeyProvider
from convo.domain.value import InboxId
from convo.protocol.signing import public_key_from_private


class TestSettingsKeyProvider:
    """Tests for SettingsKeyProvider."""

    @pytest.mark.asyncio
    async def test_reads_configured_identity(self):
        """Hex values are parsed, a 0x prefix is tolerated."""
        provider = SettingsKeyProvider(inbox_id="AB" * 32, private_key="0x" + "01" * 32)

        assert await provider.get_inbox_id() == InboxId("ab" * 32)
        assert await provider.get_private_key() == bytes([1] * 32)
        assert await provider.get_public_key() == public_key_from_private(
            bytes([1] * 32)
        )

    @pytest.mark.asyncio
    async def test_missing_identity(self):
        """Missing values raise KeyProviderError on use."""
        provider = SettingsKeyProvider(inbox_id="", private_key="")

        with pytest.raises(KeyProviderError):
            await provider.get_inbox_id()
        with pytest.raises(KeyProviderError):
            await provider.get_private_key()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("private_key", ["zz" * 32, "01" * 31])
    async def test_invalid_private_key(self, private_key):
        """Keys must be 32 bytes of hex."""
        provider = SettingsKeyProvider(inbox_id="ab", private_key=private_key)

        with pytest.raises(KeyProviderError):
            await provider.get_private_key()

    @pytest.mark.asyncio
    async def test_invalid_inbox_id(self):
        """Inbox ids must be hex."""
        provider = SettingsKeyProvider(inbox_id="not-hex", private_key="01" * 32)

        with pytest.raises(KeyProviderError):
            await provider.get_inbox_id()


class TestInMemoryKeyProvider:
    """Tests for InMemoryKeyProvider."""

    @pytest.mark.asyncio
    async def test_generates_distinct_identities(self):
        """Each provider gets its own inbox and key."""
        first, second = InMemoryKeyProvider(), InMemoryKeyProvider()

        assert await first.get_inbox_id() != await second.get_inbox_id()
        assert len(await first.get_private_key()) == 32
        assert await first.get_private_key() != await second.get_private_key()
