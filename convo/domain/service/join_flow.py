"""Join flow coordination for both sides of an invite.

Joiner::

    Decoding -> LocalLookup -> AlreadyJoined
                            -> SendingJoinRequest -> WaitingForAdd -> TagVerified
                                                                   -> TagMismatch
                                                                   -> JoinFailed
                                                                   -> TimedOut

Creator::

    Received -> ValidatingSignature -> Blocked
                                    -> ValidatingConditions -> Rejected
                                                            -> Accepted

The join request itself is nothing more than the invite slug sent to the
creator as a direct message.
"""

import asyncio
from typing import AsyncIterator, Optional
from uuid import uuid4

import logfire

from convo.adapter.error import MessagingError
from convo.domain.error import (
    AlreadyUsedError,
    DomainError,
    ExpiredError,
    NotFoundError,
    TagMismatchError,
)
from convo.domain.model import (
    Conversation,
    JoinErrorEvent,
    JoinOutcome,
    JoinRequestOutcome,
    MembershipEvent,
    MessagingEvent,
    PendingInvite,
    SignedInvite,
)
from convo.domain.repository import (
    ConversationRepository,
    PendingInviteRepository,
    UnitOfWork,
)
from convo.domain.service.invite_service import InviteService
from convo.domain.service.locks import ConversationLocks
from convo.domain.service.messaging import KeyProvider, MessagingTransport
from convo.domain.value import (
    ConversationId,
    InboxId,
    InviteTag,
    JoinErrorType,
    JoinRequestState,
    JoinState,
    PendingInviteId,
    RejectionReason,
)
from convo.protocol.codec import extract_invite_code
from convo.protocol.error import DecryptionError, InvalidSignature, ProtocolError
from convo.protocol.signing import verify_invite

from .base import Service, redact_slug

_REJECTION_REASONS = {
    ExpiredError: RejectionReason.EXPIRED,
    NotFoundError: RejectionReason.CONVERSATION_NOT_FOUND,
    TagMismatchError: RejectionReason.TAG_MISMATCH,
    AlreadyUsedError: RejectionReason.ALREADY_USED,
}


class JoinFlowCoordinator(Service):
    """Runs invite redemption for joiners and creators."""

    def __init__(
        self,
        invite_service: InviteService,
        conversation_repository: ConversationRepository,
        pending_invite_repository: PendingInviteRepository,
        transport: MessagingTransport,
        key_provider: KeyProvider,
        locks: ConversationLocks,
        unit_of_work: UnitOfWork,
        join_timeout: Optional[float] = None,
        query_param: str = "i",
        app_url_scheme: str = "convos",
    ) -> None:
        """Initialize join flow coordinator.

        Args:
            invite_service: Invite domain service
            conversation_repository: Conversation repository
            pending_invite_repository: Pending invite repository
            transport: Messaging transport
            key_provider: Source of our inbox id and signing key
            locks: Per-conversation locks shared across requests
            unit_of_work: Commits the pending invite before waiting
            join_timeout: Seconds to wait for the add, None waits until cancelled
            query_param: Query parameter carrying invite codes in links
            app_url_scheme: Custom URL scheme of the app
        """
        self.invite_service = invite_service
        self.conversation_repository = conversation_repository
        self.pending_invite_repository = pending_invite_repository
        self.transport = transport
        self.key_provider = key_provider
        self.locks = locks
        self.unit_of_work = unit_of_work
        self.join_timeout = join_timeout
        self.query_param = query_param
        self.app_url_scheme = app_url_scheme

    # Joiner side

    async def start_join(self, text: str) -> JoinOutcome:
        """Redeem an invite as the joiner.

        Cancelling the calling task stops the wait for the add event. The
        join request already sent is not retracted.

        Args:
            text: Invite slug or invite link as entered by the user

        Returns:
            Terminal join outcome
        """
        slug = extract_invite_code(text, self.query_param, self.app_url_scheme)

        with logfire.span("join_flow.start_join", slug=redact_slug(slug)):
            # Decoding
            try:
                decoded = self.invite_service.decode_invite(slug)
                creator = decoded.signed_invite.invite_payload.creator_inbox
            except (ProtocolError, ValueError) as e:
                logfire.warn("Invite could not be decoded", error=str(e))
                return JoinOutcome(state=JoinState.INVALID, message=str(e))

            signed_invite = decoded.signed_invite
            tag = signed_invite.tag

            try:
                self._ensure_not_expired(signed_invite)
            except ExpiredError as e:
                logfire.info("Invite expired", tag=str(tag), what=e.what)
                return JoinOutcome(state=JoinState.EXPIRED, tag=tag, message=str(e))

            # LocalLookup
            existing = await self.conversation_repository.find_by_invite_tag(tag)
            if existing:
                logfire.info(
                    "Already a member", tag=str(tag), conversation_id=existing.id
                )
                return JoinOutcome(
                    state=JoinState.ALREADY_JOINED,
                    tag=tag,
                    conversation_id=existing.id,
                )

            await self.pending_invite_repository.save(
                PendingInvite(
                    id=PendingInviteId(uuid4()),
                    invite_tag=tag,
                    creator_inbox_id=creator,
                    slug=slug,
                    name=signed_invite.name,
                    description=signed_invite.description,
                    image_url=signed_invite.image_url,
                    expires_at=signed_invite.expires_at,
                    conversation_expires_at=signed_invite.conversation_expires_at,
                )
            )
            # Visible to other readers while we wait; no connection is held meanwhile
            await self.unit_of_work.commit()

            # Subscribe before sending so the add event cannot be missed
            events = await self.transport.open_event_stream()
            try:
                # SendingJoinRequest
                try:
                    await self.transport.send_direct_message(creator, slug)
                except MessagingError as e:
                    logfire.error(
                        "Join request could not be sent", tag=str(tag), error=str(e)
                    )
                    await self.pending_invite_repository.delete_by_tag(tag)
                    return JoinOutcome(
                        state=JoinState.JOIN_FAILED,
                        tag=tag,
                        error_type=JoinErrorType.GENERIC_FAILURE.value,
                        message=str(e),
                    )
                logfire.info("Join request sent", tag=str(tag), creator=str(creator))

                # WaitingForAdd
                try:
                    return await asyncio.wait_for(
                        self._wait_for_add(events, tag, creator),
                        timeout=self.join_timeout,
                    )
                except asyncio.TimeoutError:
                    logfire.warn(
                        "Timed out waiting to be added",
                        tag=str(tag),
                        timeout=self.join_timeout,
                    )
                    return JoinOutcome(
                        state=JoinState.TIMED_OUT,
                        tag=tag,
                        message="Timed out waiting to be added",
                    )
            finally:
                await events.aclose()

    @staticmethod
    def _ensure_not_expired(signed_invite: SignedInvite) -> None:
        if signed_invite.has_expired():
            raise ExpiredError("Invite")
        if signed_invite.conversation_has_expired():
            raise ExpiredError("Conversation")

    async def _wait_for_add(
        self,
        events: AsyncIterator[MessagingEvent],
        tag: InviteTag,
        creator: InboxId,
    ) -> JoinOutcome:
        async for event in events:
            if isinstance(event, JoinErrorEvent):
                if event.invite_tag != tag or event.sender != creator:
                    continue
                logfire.warn(
                    "Creator reported join error",
                    tag=str(tag),
                    error_type=event.error_type,
                )
                await self.pending_invite_repository.delete_by_tag(tag)
                return JoinOutcome(
                    state=JoinState.JOIN_FAILED,
                    tag=tag,
                    error_type=event.error_type,
                    message=event.user_facing_message,
                )

            if isinstance(event, MembershipEvent) and event.added_by == creator:
                return await self._verify_added(event.conversation, tag, creator)

        await self.pending_invite_repository.delete_by_tag(tag)
        return JoinOutcome(
            state=JoinState.JOIN_FAILED,
            tag=tag,
            error_type=JoinErrorType.GENERIC_FAILURE.value,
            message="Event stream closed before being added",
        )

    async def _verify_added(
        self, conversation: Conversation, tag: InviteTag, creator: InboxId
    ) -> JoinOutcome:
        if conversation.creator_inbox_id is None:
            conversation = conversation.model_copy(update={"creator_inbox_id": creator})
        await self.conversation_repository.save(conversation)
        await self.pending_invite_repository.delete_by_tag(tag)

        if conversation.invite_tag != tag:
            logfire.error(
                "Added to a conversation whose tag does not match the invite",
                invite_tag=str(tag),
                conversation_tag=str(conversation.invite_tag),
                conversation_id=conversation.id,
            )
            return JoinOutcome(
                state=JoinState.TAG_MISMATCH,
                tag=tag,
                conversation_id=conversation.id,
                message=str(TagMismatchError(str(conversation.invite_tag), str(tag))),
            )

        logfire.info("Joined conversation", tag=str(tag), conversation_id=conversation.id)
        return JoinOutcome(
            state=JoinState.TAG_VERIFIED, tag=tag, conversation_id=conversation.id
        )

    async def list_pending_joins(self) -> list[PendingInvite]:
        """Invites we have sent join requests for and are still waiting on.

        Includes joins that timed out, which stay pending until retried.
        """
        return await self.pending_invite_repository.list_all()

    # Creator side

    async def handle_incoming_join_request(
        self, text: str, sender: InboxId
    ) -> JoinRequestOutcome:
        """Process a direct message that may be a join request.

        Invalid invites get the sender blocked. Valid but unredeemable
        invites are rejected without blocking.

        Args:
            text: Direct message text
            sender: Inbox that sent the message, as guaranteed by the transport

        Returns:
            Terminal outcome of the request
        """
        with logfire.span("join_flow.handle_incoming_join_request", sender=str(sender)):
            own_inbox = await self.key_provider.get_inbox_id()
            if sender == own_inbox:
                return JoinRequestOutcome(state=JoinRequestState.IGNORED, sender=sender)

            # ValidatingSignature
            try:
                signed_invite = await self._validate_signature(text, own_inbox)
            except (ProtocolError, ValueError) as e:
                return await self._block(sender, f"Invalid join request: {e}")

            tag = signed_invite.tag
            if signed_invite.has_expired():
                logfire.info("Join request for expired invite", tag=str(tag))
                return self._rejected(sender, tag, None, ExpiredError())

            try:
                conversation_id = await self.invite_service.decrypt_conversation_id(
                    signed_invite
                )
            except DecryptionError as e:
                return await self._block(sender, f"Undecryptable conversation token: {e}")

            # ValidatingConditions and Accepted run under the conversation lock
            async with self.locks.hold(conversation_id):
                return await self._redeem(signed_invite, conversation_id, sender)

    async def _validate_signature(
        self, text: str, own_inbox: InboxId
    ) -> SignedInvite:
        slug = extract_invite_code(text, self.query_param, self.app_url_scheme)
        signed_invite = self.invite_service.codec.decode(slug)

        creator = signed_invite.invite_payload.creator_inbox
        if creator != own_inbox:
            raise InvalidSignature("Invite was not issued by this inbox")

        public_key = await self.key_provider.get_public_key()
        if not verify_invite(signed_invite, public_key):
            raise InvalidSignature("Invite signature does not match our key")

        return signed_invite

    async def _redeem(
        self,
        signed_invite: SignedInvite,
        conversation_id: ConversationId,
        sender: InboxId,
    ) -> JoinRequestOutcome:
        tag = signed_invite.tag

        try:
            consumed = await self._validate_conditions(
                signed_invite, conversation_id, sender
            )
        except NotFoundError as e:
            await self._send_join_error(sender, tag, JoinErrorType.CONVERSATION_EXPIRED)
            return self._rejected(sender, tag, conversation_id, e)
        except ExpiredError as e:
            await self._send_join_error(sender, tag, JoinErrorType.CONVERSATION_EXPIRED)
            return self._rejected(
                sender,
                tag,
                conversation_id,
                e,
                reason=RejectionReason.CONVERSATION_EXPIRED,
            )
        except DomainError as e:
            return self._rejected(sender, tag, conversation_id, e)

        try:
            await self.transport.add_member(conversation_id, sender)
        except MessagingError as e:
            logfire.error(
                "Failed to add member",
                conversation_id=conversation_id,
                sender=str(sender),
                error=str(e),
            )
            if consumed:
                await self.conversation_repository.release_invite_tag(tag)
            await self._send_join_error(sender, tag, JoinErrorType.GENERIC_FAILURE)
            return JoinRequestOutcome(
                state=JoinRequestState.REJECTED,
                sender=sender,
                tag=tag,
                conversation_id=conversation_id,
                reason=RejectionReason.ADD_FAILED,
                message=str(e),
            )

        logfire.info(
            "Join request accepted",
            conversation_id=conversation_id,
            sender=str(sender),
            tag=str(tag),
        )
        return JoinRequestOutcome(
            state=JoinRequestState.ACCEPTED,
            sender=sender,
            tag=tag,
            conversation_id=conversation_id,
        )

    async def _validate_conditions(
        self,
        signed_invite: SignedInvite,
        conversation_id: ConversationId,
        sender: InboxId,
    ) -> bool:
        """Check redemption conditions, consuming single-use tags.

        Returns:
            True if this request consumed a single-use tag

        Raises:
            NotFoundError: If the conversation is unknown
            ExpiredError: If the conversation has self-destructed
            TagMismatchError: If the conversation's tag was rotated
            AlreadyUsedError: If a single-use tag was redeemed by someone else
        """
        tag = signed_invite.tag

        conversation = await self.conversation_repository.find_by_id(conversation_id)
        if not conversation:
            raise NotFoundError("Conversation", conversation_id)

        if signed_invite.conversation_has_expired() or conversation.has_expired():
            raise ExpiredError("Conversation")

        if conversation.invite_tag != tag:
            raise TagMismatchError(str(conversation.invite_tag), str(tag))

        if not signed_invite.expires_after_use:
            return False

        if await self.conversation_repository.consume_invite_tag(
            tag, conversation_id, sender
        ):
            return True

        # A retry by the inbox that already redeemed the tag is an idempotent add
        consumer = await self.conversation_repository.find_invite_tag_consumer(tag)
        if consumer != sender:
            raise AlreadyUsedError(str(tag))
        return False

    def _rejected(
        self,
        sender: InboxId,
        tag: InviteTag,
        conversation_id: Optional[ConversationId],
        error: DomainError,
        reason: Optional[RejectionReason] = None,
    ) -> JoinRequestOutcome:
        reason = reason or _REJECTION_REASONS[type(error)]
        logfire.info(
            "Join request rejected",
            sender=str(sender),
            tag=str(tag),
            reason=reason.value,
        )
        return JoinRequestOutcome(
            state=JoinRequestState.REJECTED,
            sender=sender,
            tag=tag,
            conversation_id=conversation_id,
            reason=reason,
            message=str(error),
        )

    async def _block(self, sender: InboxId, message: str) -> JoinRequestOutcome:
        logfire.warn("Blocking join request sender", sender=str(sender), error=message)
        await self.transport.set_consent_blocked(sender)
        return JoinRequestOutcome(
            state=JoinRequestState.BLOCKED, sender=sender, message=message
        )

    async def _send_join_error(
        self, sender: InboxId, tag: InviteTag, error_type: JoinErrorType
    ) -> None:
        try:
            await self.transport.send_join_error(sender, tag, error_type.value)
        except MessagingError as e:
            # The rejection stands, the joiner will time out instead
            logfire.warn(
                "Failed to send join error",
                sender=str(sender),
                tag=str(tag),
                error=str(e),
            )
