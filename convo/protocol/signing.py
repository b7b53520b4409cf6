"""Recoverable secp256k1 signatures over invite payloads.

Signatures are 65 bytes: the 64-byte compact ECDSA signature (r || s)
followed by a one-byte recovery id in [0, 3]. The signer's public key is
not transmitted; verifiers recover it from the signature and the payload.
"""

import hmac
from hashlib import sha256

from coincurve import PrivateKey, PublicKey

from convo.domain.model.invite import InvitePayload, SignedInvite
from convo.protocol.error import InvalidSignature
from convo.protocol.wire import serialize_payload

SIGNATURE_LENGTH = 65
COMPACT_SIGNATURE_LENGTH = 64
UNCOMPRESSED_KEY_LENGTH = 65
COMPRESSED_KEY_LENGTH = 33


def sign_payload(payload: bytes, private_key: bytes) -> bytes:
    """Sign payload bytes with a recoverable signature.

    Args:
        payload: Exact bytes to sign (serialized InvitePayload)
        private_key: 32-byte secp256k1 secret

    Returns:
        65-byte signature: r || s || recovery id

    Raises:
        InvalidSignature: If the private key is not a valid secp256k1 secret
    """
    try:
        key = PrivateKey(private_key)
    except (TypeError, ValueError) as e:
        raise InvalidSignature(f"Invalid private key: {e}") from e

    digest = sha256(payload).digest()
    return key.sign_recoverable(digest, hasher=None)


def recover_public_key(payload: bytes, signature: bytes) -> bytes:
    """Recover the signer's public key.

    Args:
        payload: Bytes the signature was made over
        signature: 65-byte recoverable signature

    Returns:
        65-byte uncompressed public key

    Raises:
        InvalidSignature: If the signature is malformed or recovery fails
    """
    if len(signature) != SIGNATURE_LENGTH:
        raise InvalidSignature(
            f"Signature must be {SIGNATURE_LENGTH} bytes, got {len(signature)}"
        )

    recovery_id = signature[COMPACT_SIGNATURE_LENGTH]
    if recovery_id > 3:
        raise InvalidSignature(f"Recovery id out of range: {recovery_id}")

    digest = sha256(payload).digest()
    try:
        recovered = PublicKey.from_signature_and_message(
            bytes(signature), digest, hasher=None
        )
    except (TypeError, ValueError) as e:
        raise InvalidSignature(f"Public key recovery failed: {e}") from e

    return recovered.format(compressed=False)


def verify_signature(
    expected_public_key: bytes, payload: bytes, signature: bytes
) -> bool:
    """Check that a signature was made by the expected key.

    Keys may be given compressed (33 bytes) or uncompressed (65 bytes).
    When the two forms differ both are normalized to compressed form.
    The byte comparison is constant time.

    Args:
        expected_public_key: Public key the signature must recover to
        payload: Signed bytes
        signature: 65-byte recoverable signature

    Returns:
        True if the recovered key equals the expected key

    Raises:
        InvalidSignature: If the signature cannot be parsed or recovered
    """
    recovered = recover_public_key(payload, signature)

    if len(recovered) != len(expected_public_key):
        try:
            recovered = normalize_public_key(recovered)
            expected_public_key = normalize_public_key(expected_public_key)
        except InvalidSignature:
            return False

    return constant_time_equals(recovered, expected_public_key)


def public_key_from_private(private_key: bytes, compressed: bool = False) -> bytes:
    """Derive the public key for a secp256k1 secret.

    Raises:
        InvalidSignature: If the private key is not a valid secp256k1 secret
    """
    try:
        return PrivateKey(private_key).public_key.format(compressed=compressed)
    except (TypeError, ValueError) as e:
        raise InvalidSignature(f"Invalid private key: {e}") from e


def normalize_public_key(public_key: bytes) -> bytes:
    """Convert a public key to its 33-byte compressed form.

    Raises:
        InvalidSignature: If the bytes are not a valid secp256k1 point
    """
    if len(public_key) not in (COMPRESSED_KEY_LENGTH, UNCOMPRESSED_KEY_LENGTH):
        raise InvalidSignature(f"Invalid public key length: {len(public_key)}")
    try:
        return PublicKey(bytes(public_key)).format(compressed=True)
    except (TypeError, ValueError) as e:
        raise InvalidSignature(f"Invalid public key: {e}") from e


def constant_time_equals(a: bytes, b: bytes) -> bool:
    """Compare two byte strings without leaking where they differ.

    Only a difference in total length returns early.
    """
    if len(a) != len(b):
        return False
    return hmac.compare_digest(a, b)


def sign_invite(payload: InvitePayload, private_key: bytes) -> SignedInvite:
    """Serialize and sign an invite payload.

    The serialized bytes are kept on the result so that the signature can
    always be checked against exactly what was signed.

    Args:
        payload: Unsigned invite payload
        private_key: Creator's 32-byte secp256k1 secret

    Returns:
        Signed invite
    """
    payload_bytes = serialize_payload(payload)
    return SignedInvite(
        payload=payload_bytes,
        signature=sign_payload(payload_bytes, private_key),
        invite_payload=payload,
    )


def recover_invite_signer(signed_invite: SignedInvite) -> bytes:
    """Recover the uncompressed public key that signed an invite.

    Raises:
        InvalidSignature: If the signature is malformed or recovery fails
    """
    return recover_public_key(signed_invite.payload, signed_invite.signature)


def verify_invite(signed_invite: SignedInvite, expected_public_key: bytes) -> bool:
    """Check that an invite was signed by the expected key.

    Raises:
        InvalidSignature: If the signature is malformed or recovery fails
    """
    return verify_signature(
        expected_public_key, signed_invite.payload, signed_invite.signature
    )
