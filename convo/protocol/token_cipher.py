"""Encrypted conversation tokens.

A conversation token hides the conversation id inside a public invite so that
only the creator, who holds the private key, can read it back.

Binary format::

    | version (1) | nonce (12) | ciphertext (variable) | auth tag (16) |

The ciphertext decrypts to a packed conversation id::

    | 0x01 | uuid (16) |                      UUID ids
    | 0x02 | len (1) | utf8 |                 1-255 byte ids
    | 0x02 | 0x00 | len (2, big endian) | utf8    256-65535 byte ids
"""

import os
import struct
from uuid import UUID

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import ChaCha20Poly1305
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from convo.protocol.error import DecryptionError, TokenError

TOKEN_VERSION = 1
NONCE_LENGTH = 12
AUTH_TAG_LENGTH = 16
KEY_LENGTH = 32
MIN_TOKEN_LENGTH = 1 + NONCE_LENGTH + AUTH_TAG_LENGTH
MAX_ID_LENGTH = 65535

DEFAULT_SALT = b"ConvosInviteV1"

_TAG_UUID = 0x01
_TAG_UTF8 = 0x02


class ConversationTokenCipher:
    """Seals conversation ids into tokens bound to a creator identity.

    The symmetric key is derived on every call with HKDF-SHA256 from the
    creator's private key, so nothing besides the private key has to be
    stored to decrypt tokens later. The creator's raw inbox id is used as
    associated data: a token copied into an invite from another creator
    fails authentication instead of decrypting to garbage.

    Attributes:
        salt: HKDF salt, fixed per protocol version
    """

    def __init__(self, salt: bytes = DEFAULT_SALT) -> None:
        self.salt = salt

    def encrypt(
        self, conversation_id: str, creator_inbox_id: bytes, private_key: bytes
    ) -> bytes:
        """Encrypt a conversation id into a token.

        Args:
            conversation_id: Conversation identifier (UUIDs are packed into 16 bytes)
            creator_inbox_id: Raw inbox id bytes of the creator
            private_key: Creator's signing private key

        Returns:
            Token bytes: version || nonce || ciphertext+tag

        Raises:
            TokenError: If the id is empty or too long, or the key is empty
        """
        key = self.derive_key(private_key, creator_inbox_id)
        plaintext = pack_conversation_id(conversation_id)
        nonce = os.urandom(NONCE_LENGTH)

        sealed = ChaCha20Poly1305(key).encrypt(nonce, plaintext, creator_inbox_id)
        return bytes([TOKEN_VERSION]) + nonce + sealed

    def decrypt(
        self, token: bytes, creator_inbox_id: bytes, private_key: bytes
    ) -> str:
        """Decrypt a token back into the conversation id.

        Args:
            token: Token bytes produced by encrypt()
            creator_inbox_id: Raw inbox id bytes used when encrypting
            private_key: Private key used when encrypting

        Returns:
            The conversation id

        Raises:
            DecryptionError: If the token is truncated, has an unknown version,
                or fails authentication
        """
        if len(token) < MIN_TOKEN_LENGTH:
            raise DecryptionError(
                f"Token too short: {len(token)} bytes, minimum {MIN_TOKEN_LENGTH}"
            )

        version = token[0]
        if version != TOKEN_VERSION:
            raise DecryptionError(f"Unsupported token version: {version}")

        try:
            key = self.derive_key(private_key, creator_inbox_id)
        except TokenError as e:
            raise DecryptionError(str(e)) from e

        nonce = token[1 : 1 + NONCE_LENGTH]
        sealed = token[1 + NONCE_LENGTH :]

        try:
            plaintext = ChaCha20Poly1305(key).decrypt(nonce, sealed, creator_inbox_id)
        except InvalidTag as e:
            raise DecryptionError("Token authentication failed") from e

        return unpack_conversation_id(plaintext)

    def derive_key(self, private_key: bytes, creator_inbox_id: bytes) -> bytes:
        """Derive the 256-bit token key for a creator.

        Args:
            private_key: Input key material
            creator_inbox_id: Raw inbox id bytes, bound through the HKDF info

        Returns:
            32-byte symmetric key

        Raises:
            TokenError: If the private key is empty
        """
        if not private_key:
            raise TokenError("Private key material is empty")

        info = ("inbox:" + creator_inbox_id.hex()).encode("utf-8")
        hkdf = HKDF(
            algorithm=hashes.SHA256(),
            length=KEY_LENGTH,
            salt=self.salt,
            info=info,
        )
        return hkdf.derive(private_key)


def pack_conversation_id(conversation_id: str) -> bytes:
    """Pack a conversation id into the token plaintext layout.

    Raises:
        TokenError: If the id is empty or longer than 65535 UTF-8 bytes
    """
    if not conversation_id:
        raise TokenError("Conversation id cannot be empty")

    try:
        uuid = UUID(conversation_id)
    except ValueError:
        uuid = None

    # Only canonical hyphenated UUIDs are packed, anything else round-trips verbatim
    if uuid is not None and str(uuid) == conversation_id:
        return bytes([_TAG_UUID]) + uuid.bytes

    encoded = conversation_id.encode("utf-8")
    length = len(encoded)
    if length > MAX_ID_LENGTH:
        raise TokenError(
            f"Conversation id too long: {length} bytes, max {MAX_ID_LENGTH}"
        )

    if length <= 255:
        return bytes([_TAG_UTF8, length]) + encoded
    return bytes([_TAG_UTF8, 0]) + struct.pack(">H", length) + encoded


def unpack_conversation_id(plaintext: bytes) -> str:
    """Unpack the token plaintext back into a conversation id.

    Raises:
        DecryptionError: If the plaintext layout is malformed
    """
    if not plaintext:
        raise DecryptionError("Token plaintext is empty")

    tag, body = plaintext[0], plaintext[1:]

    if tag == _TAG_UUID:
        if len(body) != 16:
            raise DecryptionError("UUID token payload must be 16 bytes")
        return str(UUID(bytes=body))

    if tag == _TAG_UTF8:
        if not body:
            raise DecryptionError("String token payload is missing its length")
        length, offset = body[0], 1
        if length == 0:
            if len(body) < 3:
                raise DecryptionError("String token payload is missing its length")
            (length,) = struct.unpack(">H", body[1:3])
            offset = 3
        encoded = body[offset:]
        if len(encoded) != length:
            raise DecryptionError("String token payload length mismatch")
        try:
            return encoded.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecryptionError("String token payload is not valid UTF-8") from e

    raise DecryptionError(f"Unknown token payload type: {tag}")
