"""Invite protocol errors.

Every failure raised by the cryptographic and wire-format layer is one of
these. Library exceptions (cryptography, coincurve, protobuf, zlib, base64)
never escape this package unwrapped.
"""


class ProtocolError(Exception):
    """Base invite protocol error."""

    pass


class EncodingError(ProtocolError):
    """Malformed slug, base64 or protobuf structure."""

    pass


class DecompressionBombError(EncodingError):
    """Compressed invite expands beyond the allowed ceiling."""

    def __init__(self, limit: int):
        self.limit = limit
        super().__init__(f"Decompressed invite exceeds {limit} bytes")


class InvalidSignature(ProtocolError):
    """Signature is malformed or no public key can be recovered from it."""

    pass


class DecryptionError(ProtocolError):
    """Conversation token could not be authenticated or decrypted."""

    pass


class TokenError(ProtocolError):
    """Conversation token cannot be produced from the given inputs."""

    pass
