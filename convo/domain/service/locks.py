"""Per-conversation critical sections."""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator
from weakref import WeakValueDictionary

from convo.domain.value import ConversationId


class ConversationLocks:
    """Hands out one asyncio.Lock per conversation.

    Join requests for different conversations proceed in parallel; requests
    for the same conversation are processed one at a time. A lock is dropped
    once nobody holds or waits on it.
    """

    def __init__(self) -> None:
        self._locks: WeakValueDictionary[ConversationId, asyncio.Lock] = (
            WeakValueDictionary()
        )

    def get(self, conversation_id: ConversationId) -> asyncio.Lock:
        """Get the lock for a conversation, creating it if needed."""
        lock = self._locks.get(conversation_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[conversation_id] = lock
        return lock

    @asynccontextmanager
    async def hold(self, conversation_id: ConversationId) -> AsyncIterator[None]:
        """Hold the lock for a conversation for the duration of the block."""
        lock = self.get(conversation_id)
        async with lock:
            yield
