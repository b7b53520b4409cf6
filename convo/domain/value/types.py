"""Domain value objects for the invite protocol.

Value objects are immutable and defined by their values, not identity.
"""

import re
from enum import Enum

from pydantic import field_validator

from convo.domain.value.common import RootValueObject

_HEX_PATTERN = re.compile(r"^(?:[0-9a-f]{2})+$")
_TAG_PATTERN = re.compile(r"^[A-Za-z0-9]{1,64}$")


class InboxId(RootValueObject[str]):
    """Messaging identity, hex encoded.

    On the wire the raw bytes are used (see ``raw``), never the hex text.
    """

    @field_validator("root")
    @classmethod
    def validate_inbox_id(cls, v: str) -> str:
        """Normalize to lowercase and require whole bytes of hex."""
        v = v.strip().lower()
        if not _HEX_PATTERN.match(v):
            raise ValueError("Inbox id must be a non-empty hex string")
        return v

    @classmethod
    def from_bytes(cls, raw: bytes) -> "InboxId":
        """Build an inbox id from raw identity bytes."""
        return cls(raw.hex())

    @property
    def raw(self) -> bytes:
        """Raw identity bytes."""
        return bytes.fromhex(self.root)


class InviteTag(RootValueObject[str]):
    """Random alphanumeric tag bound to a conversation.

    Generated tags are 10 characters. Invites from other clients are
    accepted with any alphanumeric tag up to 64 characters.
    """

    @field_validator("root")
    @classmethod
    def validate_tag(cls, v: str) -> str:
        """Validate tag format."""
        if not _TAG_PATTERN.match(v):
            raise ValueError("Invite tag must be 1-64 alphanumeric characters")
        return v


class JoinState(str, Enum):
    """Terminal states of the joiner side of the join flow."""

    ALREADY_JOINED = "already_joined"
    TAG_VERIFIED = "tag_verified"
    # Added to a conversation whose tag differs from the invite
    TAG_MISMATCH = "tag_mismatch"
    JOIN_FAILED = "join_failed"
    TIMED_OUT = "timed_out"
    EXPIRED = "expired"
    INVALID = "invalid"


class JoinRequestState(str, Enum):
    """Terminal states of the creator side of the join flow."""

    IGNORED = "ignored"
    BLOCKED = "blocked"
    REJECTED = "rejected"
    ACCEPTED = "accepted"


class RejectionReason(str, Enum):
    """Why a cryptographically valid join request was rejected."""

    EXPIRED = "expired"
    CONVERSATION_NOT_FOUND = "conversation_not_found"
    CONVERSATION_EXPIRED = "conversation_expired"
    TAG_MISMATCH = "tag_mismatch"
    ALREADY_USED = "already_used"
    ADD_FAILED = "add_failed"


class JoinErrorType(str, Enum):
    """Error types a creator reports back to a joiner.

    Unknown values received from newer clients are kept as plain strings.
    """

    CONVERSATION_EXPIRED = "conversation_expired"
    GENERIC_FAILURE = "generic_failure"
