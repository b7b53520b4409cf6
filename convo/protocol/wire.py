"""Protobuf wire schema for invites.

The schema is registered at import time from a descriptor built in code, so
no generated ``_pb2`` module has to be kept in sync. Fields use proto2
presence semantics: an absent optional field stays absent after a round trip
instead of turning into an empty string or zero.

    message InvitePayload {
      optional bytes conversation_token = 1;
      optional bytes creator_inbox_id = 2;
      optional string tag = 3;
      optional string name = 4;
      optional string description = 5;
      optional string image_url = 6;
      optional sfixed64 conversation_expires_at_unix = 7;
      optional sfixed64 expires_at_unix = 8;
      optional bool expires_after_use = 9;
    }

    message SignedInvite {
      optional bytes payload = 1;
      optional bytes signature = 2;
    }
"""

from datetime import datetime, timezone

from google.protobuf import descriptor_pb2, descriptor_pool
from google.protobuf.message import DecodeError
from google.protobuf.message_factory import GetMessageClass

from convo.domain.model.invite import InvitePayload, SignedInvite
from convo.domain.value import InviteTag
from convo.protocol.error import EncodingError

_PACKAGE = "convo.invite.v1"

_FieldType = descriptor_pb2.FieldDescriptorProto

_INVITE_PAYLOAD_FIELDS = [
    ("conversation_token", 1, _FieldType.TYPE_BYTES),
    ("creator_inbox_id", 2, _FieldType.TYPE_BYTES),
    ("tag", 3, _FieldType.TYPE_STRING),
    ("name", 4, _FieldType.TYPE_STRING),
    ("description", 5, _FieldType.TYPE_STRING),
    ("image_url", 6, _FieldType.TYPE_STRING),
    ("conversation_expires_at_unix", 7, _FieldType.TYPE_SFIXED64),
    ("expires_at_unix", 8, _FieldType.TYPE_SFIXED64),
    ("expires_after_use", 9, _FieldType.TYPE_BOOL),
]

_SIGNED_INVITE_FIELDS = [
    ("payload", 1, _FieldType.TYPE_BYTES),
    ("signature", 2, _FieldType.TYPE_BYTES),
]


def _build_file_descriptor() -> descriptor_pb2.FileDescriptorProto:
    file_proto = descriptor_pb2.FileDescriptorProto()
    file_proto.name = "convo/invite/v1/invite.proto"
    file_proto.package = _PACKAGE
    file_proto.syntax = "proto2"

    for message_name, fields in (
        ("InvitePayload", _INVITE_PAYLOAD_FIELDS),
        ("SignedInvite", _SIGNED_INVITE_FIELDS),
    ):
        message = file_proto.message_type.add()
        message.name = message_name
        for field_name, number, field_type in fields:
            field = message.field.add()
            field.name = field_name
            field.number = number
            field.type = field_type
            field.label = _FieldType.LABEL_OPTIONAL

    return file_proto


_pool = descriptor_pool.DescriptorPool()
_pool.Add(_build_file_descriptor())

InvitePayloadMessage = GetMessageClass(
    _pool.FindMessageTypeByName(f"{_PACKAGE}.InvitePayload")
)
SignedInviteMessage = GetMessageClass(
    _pool.FindMessageTypeByName(f"{_PACKAGE}.SignedInvite")
)


def serialize_payload(payload: InvitePayload) -> bytes:
    """Serialize an InvitePayload to its canonical protobuf bytes.

    Optional fields are only written when present.
    """
    message = InvitePayloadMessage()
    message.conversation_token = payload.conversation_token
    message.creator_inbox_id = payload.creator_inbox_id
    message.tag = payload.tag.root

    if payload.name is not None:
        message.name = payload.name
    if payload.description is not None:
        message.description = payload.description
    if payload.image_url is not None:
        message.image_url = payload.image_url
    if payload.conversation_expires_at is not None:
        message.conversation_expires_at_unix = int(
            payload.conversation_expires_at.timestamp()
        )
    if payload.expires_at is not None:
        message.expires_at_unix = int(payload.expires_at.timestamp())
    if payload.expires_after_use:
        message.expires_after_use = True

    return message.SerializeToString(deterministic=True)


def parse_payload(data: bytes) -> InvitePayload:
    """Parse protobuf bytes into an InvitePayload.

    Raises:
        EncodingError: If the bytes are not a valid InvitePayload
    """
    message = InvitePayloadMessage()
    try:
        message.ParseFromString(data)
        return InvitePayload(
            conversation_token=message.conversation_token,
            creator_inbox_id=message.creator_inbox_id,
            tag=InviteTag(message.tag),
            name=message.name if message.HasField("name") else None,
            description=(
                message.description if message.HasField("description") else None
            ),
            image_url=message.image_url if message.HasField("image_url") else None,
            conversation_expires_at=(
                _from_unix(message.conversation_expires_at_unix)
                if message.HasField("conversation_expires_at_unix")
                else None
            ),
            expires_at=(
                _from_unix(message.expires_at_unix)
                if message.HasField("expires_at_unix")
                else None
            ),
            expires_after_use=message.expires_after_use,
        )
    except (DecodeError, ValueError, OverflowError, OSError) as e:
        raise EncodingError(f"Malformed invite payload: {e}") from e


def serialize_signed_invite(signed_invite: SignedInvite) -> bytes:
    """Serialize a SignedInvite, carrying the payload bytes verbatim."""
    message = SignedInviteMessage()
    message.payload = signed_invite.payload
    message.signature = signed_invite.signature
    return message.SerializeToString(deterministic=True)


def parse_signed_invite(data: bytes) -> SignedInvite:
    """Parse protobuf bytes into a SignedInvite.

    Raises:
        EncodingError: If the envelope or the embedded payload is malformed
    """
    message = SignedInviteMessage()
    try:
        message.ParseFromString(data)
    except DecodeError as e:
        raise EncodingError(f"Malformed signed invite: {e}") from e

    if not message.HasField("payload") or not message.HasField("signature"):
        raise EncodingError("Signed invite is missing payload or signature")

    return SignedInvite(
        payload=message.payload,
        signature=message.signature,
        invite_payload=parse_payload(message.payload),
    )


def _from_unix(seconds: int) -> datetime:
    return datetime.fromtimestamp(seconds, tz=timezone.utc)
