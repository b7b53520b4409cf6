"""Messaging transport implementations.

The real transport talks JSON to a messaging gateway that owns the group
messaging client for our inbox. Events are streamed as newline-delimited
JSON from ``GET /events``.
"""

import asyncio
import json
import logging
from datetime import datetime
from typing import Any, Awaitable, Callable, Optional

import httpx
import logfire
from pydantic import ValidationError

from convo.adapter.error import MessagingError
from convo.domain.model import (
    Conversation,
    JoinErrorEvent,
    MembershipEvent,
    MessagingEvent,
)
from convo.domain.service.messaging import MessagingTransport
from convo.domain.value import ConversationId, InboxId, InviteTag

logger = logging.getLogger(__name__)

DirectMessageHandler = Callable[[InboxId, str], Awaitable[None]]


class HttpMessagingTransport(MessagingTransport):
    """Messaging transport backed by an HTTP messaging gateway."""

    def __init__(self, client: httpx.AsyncClient, timeout: float = 10.0) -> None:
        """Initialize HTTP messaging transport.

        Args:
            client: HTTP client with the gateway as base URL
            timeout: Timeout for regular gateway requests in seconds
        """
        self.client = client
        self.timeout = timeout

    async def send_direct_message(self, to_inbox_id: InboxId, text: str) -> None:
        await self._post("/dms", {"to_inbox_id": str(to_inbox_id), "text": text})

    async def add_member(
        self, conversation_id: ConversationId, inbox_id: InboxId
    ) -> None:
        await self._post(
            f"/conversations/{conversation_id}/members",
            {"inbox_id": str(inbox_id)},
        )

    async def set_consent_blocked(self, inbox_id: InboxId) -> None:
        await self._post("/consent/block", {"inbox_id": str(inbox_id)})

    async def send_join_error(
        self, to_inbox_id: InboxId, invite_tag: InviteTag, error_type: str
    ) -> None:
        await self._post(
            "/join-errors",
            {
                "to_inbox_id": str(to_inbox_id),
                "invite_tag": str(invite_tag),
                "error_type": error_type,
            },
        )

    async def get_conversation(self, conversation_id: ConversationId) -> Conversation:
        """Fetch conversation metadata from the gateway.

        Raises:
            MessagingError: If the gateway request fails
        """
        try:
            response = await self.client.get(
                f"/conversations/{conversation_id}", timeout=self.timeout
            )
        except httpx.HTTPError as e:
            logfire.error("Messaging gateway HTTP error", error=str(e))
            raise MessagingError(f"HTTP error fetching conversation: {e}") from e

        if response.status_code != 200:
            logfire.error(
                "Messaging gateway request failed",
                path=f"/conversations/{conversation_id}",
                status_code=response.status_code,
            )
            raise MessagingError(
                f"Conversation lookup failed: {response.status_code}"
            )

        data = response.json()
        try:
            return Conversation(
                id=ConversationId(data["id"]),
                invite_tag=data["invite_tag"],
                creator_inbox_id=data.get("creator_inbox_id"),
                name=data.get("name"),
                description=data.get("description"),
                image_url=data.get("image_url"),
                expires_at=data.get("expires_at"),
            )
        except (KeyError, ValidationError) as e:
            raise MessagingError(f"Malformed conversation from gateway: {e}") from e

    async def open_event_stream(self) -> "GatewayEventStream":
        request = self.client.build_request(
            "GET",
            "/events",
            timeout=httpx.Timeout(self.timeout, read=None),
        )
        try:
            response = await self.client.send(request, stream=True)
        except httpx.HTTPError as e:
            logfire.error("Messaging gateway HTTP error", error=str(e))
            raise MessagingError(f"HTTP error opening event stream: {e}") from e

        if response.status_code != 200:
            await response.aclose()
            raise MessagingError(f"Event stream failed: {response.status_code}")

        return GatewayEventStream(self, response)

    async def _post(self, path: str, body: dict[str, Any]) -> None:
        try:
            response = await self.client.post(path, json=body, timeout=self.timeout)
        except httpx.HTTPError as e:
            logfire.error("Messaging gateway HTTP error", path=path, error=str(e))
            raise MessagingError(f"HTTP error calling {path}: {e}") from e

        if response.status_code >= 300:
            logfire.error(
                "Messaging gateway request failed",
                path=path,
                status_code=response.status_code,
                error=response.text,
            )
            raise MessagingError(f"Request to {path} failed: {response.status_code}")


class GatewayEventStream:
    """Async iterator over events from an open gateway event stream."""

    def __init__(
        self, transport: HttpMessagingTransport, response: httpx.Response
    ) -> None:
        self._transport = transport
        self._response = response
        self._lines = response.aiter_lines()

    def __aiter__(self) -> "GatewayEventStream":
        return self

    async def __anext__(self) -> MessagingEvent:
        while True:
            try:
                line = await self._lines.__anext__()
            except httpx.HTTPError as e:
                logger.warning(f"Event stream interrupted: {e}")
                raise StopAsyncIteration from e

            if not line.strip():
                continue

            event = await self._parse(line)
            if event is not None:
                return event

    async def aclose(self) -> None:
        await self._response.aclose()

    async def _parse(self, line: str) -> Optional[MessagingEvent]:
        try:
            data = json.loads(line)
            event_type = data.get("type")

            if event_type == "membership":
                conversation = await self._transport.get_conversation(
                    ConversationId(data["conversation_id"])
                )
                return MembershipEvent(
                    conversation=conversation, added_by=InboxId(data["added_by"])
                )

            if event_type == "join_error":
                fields: dict[str, Any] = {
                    "invite_tag": InviteTag(data["invite_tag"]),
                    "error_type": data["error_type"],
                    "sender": InboxId(data["sender"]),
                }
                if data.get("timestamp"):
                    fields["timestamp"] = datetime.fromisoformat(data["timestamp"])
                return JoinErrorEvent(**fields)
        except (
            json.JSONDecodeError,
            AttributeError,
            KeyError,
            ValueError,
            MessagingError,
        ) as e:
            logger.warning(f"Skipping malformed gateway event: {e}")
            return None

        logger.debug(f"Ignoring gateway event of type {event_type!r}")
        return None


class InMemoryEventStream:
    """Event stream fed from an in-process queue."""

    def __init__(self, transport: "InMemoryMessagingTransport") -> None:
        self._transport = transport
        self._queue: asyncio.Queue[Optional[MessagingEvent]] = asyncio.Queue()
        self.closed = False

    def __aiter__(self) -> "InMemoryEventStream":
        return self

    async def __anext__(self) -> MessagingEvent:
        if self.closed:
            raise StopAsyncIteration
        event = await self._queue.get()
        if event is None:
            raise StopAsyncIteration
        return event

    def put(self, event: Optional[MessagingEvent]) -> None:
        self._queue.put_nowait(event)

    async def aclose(self) -> None:
        self.closed = True
        self._transport.streams.discard(self)


class InMemoryMessagingTransport(MessagingTransport):
    """In-process messaging transport for testing.

    Records every side effect instead of talking to a gateway. Tests push
    events to subscribers with ``emit``.
    """

    def __init__(self, direct_message_handler: DirectMessageHandler | None = None):
        """Initialize in-memory transport.

        Args:
            direct_message_handler: Awaited with (recipient, text) for every
                direct message sent, after it is recorded
        """
        self.direct_message_handler = direct_message_handler
        self.sent_messages: list[tuple[InboxId, str]] = []
        self.members: dict[ConversationId, list[InboxId]] = {}
        self.blocked: list[InboxId] = []
        self.join_errors: list[tuple[InboxId, InviteTag, str]] = []
        self.streams: set[InMemoryEventStream] = set()

        # Failure injection
        self.fail_send = False
        self.fail_add_member = False
        self.add_member_calls = 0

    async def send_direct_message(self, to_inbox_id: InboxId, text: str) -> None:
        if self.fail_send:
            raise MessagingError("Direct message failed")
        self.sent_messages.append((to_inbox_id, text))
        if self.direct_message_handler is not None:
            await self.direct_message_handler(to_inbox_id, text)

    async def add_member(
        self, conversation_id: ConversationId, inbox_id: InboxId
    ) -> None:
        self.add_member_calls += 1
        # Yield so concurrent redemptions interleave
        await asyncio.sleep(0)
        if self.fail_add_member:
            raise MessagingError("Add member failed")
        members = self.members.setdefault(conversation_id, [])
        if inbox_id not in members:
            members.append(inbox_id)

    async def set_consent_blocked(self, inbox_id: InboxId) -> None:
        if inbox_id not in self.blocked:
            self.blocked.append(inbox_id)

    async def send_join_error(
        self, to_inbox_id: InboxId, invite_tag: InviteTag, error_type: str
    ) -> None:
        self.join_errors.append((to_inbox_id, invite_tag, error_type))

    async def open_event_stream(self) -> InMemoryEventStream:
        stream = InMemoryEventStream(self)
        self.streams.add(stream)
        return stream

    def emit(self, event: MessagingEvent) -> None:
        """Deliver an event to every open stream."""
        for stream in list(self.streams):
            stream.put(event)

    def end_streams(self) -> None:
        """End every open stream as if the gateway disconnected."""
        for stream in list(self.streams):
            stream.put(None)
