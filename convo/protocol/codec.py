"""Invite slug encoding.

A slug is the text form of a signed invite that travels through links,
QR codes and chat messages::

    base64url( [0x1F] || SignedInvite protobuf )

The optional 0x1F marker means the remainder is raw DEFLATE. A "*" is
inserted every 300 characters; it carries no data and is stripped before
decoding.
"""

import base64
import binascii
import logging
import re
import zlib
from urllib.parse import parse_qs, urlsplit

from convo.domain.model.invite import SignedInvite
from convo.protocol.error import DecompressionBombError, EncodingError
from convo.protocol.wire import parse_signed_invite, serialize_signed_invite

logger = logging.getLogger(__name__)

COMPRESSION_MARKER = 0x1F
SEPARATOR = "*"

DEFAULT_COMPRESSION_THRESHOLD = 100
DEFAULT_MAX_DECOMPRESSED_SIZE = 1024 * 1024
DEFAULT_SEPARATOR_INTERVAL = 300

# Raw DEFLATE stream, no zlib header or checksum
_WBITS = -zlib.MAX_WBITS
_CHUNK_SIZE = 64 * 1024

_BASE64URL_PATTERN = re.compile(r"^[A-Za-z0-9_-]*$")


class InviteCodec:
    """Encodes signed invites to slugs and back.

    Attributes:
        compression_threshold: Serialized invites must be larger than this to be compressed
        max_decompressed_size: Decompression ceiling in bytes
        separator_interval: Characters between "*" separators
    """

    def __init__(
        self,
        compression_threshold: int = DEFAULT_COMPRESSION_THRESHOLD,
        max_decompressed_size: int = DEFAULT_MAX_DECOMPRESSED_SIZE,
        separator_interval: int = DEFAULT_SEPARATOR_INTERVAL,
    ) -> None:
        self.compression_threshold = compression_threshold
        self.max_decompressed_size = max_decompressed_size
        self.separator_interval = separator_interval

    def encode(self, signed_invite: SignedInvite) -> str:
        """Encode a signed invite into a slug.

        Args:
            signed_invite: Invite to encode

        Returns:
            URL-safe slug
        """
        serialized = serialize_signed_invite(signed_invite)
        data = self.compress_if_smaller(serialized)
        encoded = base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")
        return insert_separators(encoded, self.separator_interval)

    def decode(self, slug: str) -> SignedInvite:
        """Decode a slug into a signed invite.

        The signature is not checked here, see
        :func:`convo.protocol.signing.recover_invite_signer`.

        Args:
            slug: Slug produced by encode(), separators included or not

        Returns:
            Signed invite with its payload bytes preserved verbatim

        Raises:
            EncodingError: If the slug, base64 or protobuf structure is malformed
            DecompressionBombError: If the compressed invite expands past the ceiling
        """
        data = base64url_decode(slug.replace(SEPARATOR, ""))
        if not data:
            raise EncodingError("Invite is empty")

        if data[0] == COMPRESSION_MARKER:
            data = self.decompress(data[1:])

        return parse_signed_invite(data)

    def compress_if_smaller(self, data: bytes) -> bytes:
        """Compress when the input is large enough and compression helps.

        Returns:
            ``0x1F || deflate(data)`` or ``data`` unchanged
        """
        if len(data) <= self.compression_threshold:
            return data

        compressor = zlib.compressobj(zlib.Z_BEST_COMPRESSION, zlib.DEFLATED, _WBITS)
        compressed = compressor.compress(data) + compressor.flush()

        if len(compressed) + 1 >= len(data):
            return data
        return bytes([COMPRESSION_MARKER]) + compressed

    def decompress(self, data: bytes) -> bytes:
        """Inflate a raw DEFLATE stream without exceeding the ceiling.

        Output is produced in bounded chunks, so an oversized stream is
        rejected as soon as the ceiling is crossed instead of after it has
        been fully expanded in memory.

        Raises:
            DecompressionBombError: If the output would exceed max_decompressed_size
            EncodingError: If the stream is corrupt or truncated
        """
        decompressor = zlib.decompressobj(_WBITS)
        output = bytearray()
        pending = data

        try:
            while True:
                budget = self.max_decompressed_size + 1 - len(output)
                chunk = decompressor.decompress(pending, min(budget, _CHUNK_SIZE))
                output.extend(chunk)
                if len(output) > self.max_decompressed_size:
                    logger.warning(
                        "Rejected compressed invite exceeding %d bytes",
                        self.max_decompressed_size,
                    )
                    raise DecompressionBombError(self.max_decompressed_size)

                pending = decompressor.unconsumed_tail
                if not pending:
                    break

            tail = decompressor.flush()
        except zlib.error as e:
            raise EncodingError(f"Corrupt compressed invite: {e}") from e

        output.extend(tail)
        if len(output) > self.max_decompressed_size:
            raise DecompressionBombError(self.max_decompressed_size)
        if not decompressor.eof:
            raise EncodingError("Truncated compressed invite")

        return bytes(output)


def insert_separators(text: str, interval: int) -> str:
    """Insert "*" every ``interval`` characters."""
    if interval <= 0 or len(text) <= interval:
        return text
    return SEPARATOR.join(
        text[i : i + interval] for i in range(0, len(text), interval)
    )


def base64url_decode(text: str) -> bytes:
    """Decode unpadded base64url.

    Raises:
        EncodingError: If the text is not valid base64url
    """
    text = text.strip()
    if not _BASE64URL_PATTERN.match(text):
        raise EncodingError("Invalid base64url: unexpected characters")
    if len(text) % 4 == 1:
        raise EncodingError("Invalid base64url length")

    padded = text + "=" * (-len(text) % 4)
    try:
        return base64.b64decode(padded, altchars=b"-_", validate=True)
    except (binascii.Error, ValueError) as e:
        raise EncodingError(f"Invalid base64url: {e}") from e


def extract_invite_code(
    text: str, query_param: str = "i", app_url_scheme: str = "convos"
) -> str:
    """Pull the invite code out of user input.

    Accepts a bare code, a link carrying the code in a query parameter
    (``https://convos.org/v2?i=<code>``), or an app link
    (``convos://join/<code>`` or ``convos://join?i=<code>``). Surrounding
    whitespace from copy and paste is ignored. Anything that does not parse
    as one of the link forms is returned as a bare code.

    Args:
        text: Raw user input
        query_param: Query parameter name carrying the code
        app_url_scheme: Custom URL scheme of the app

    Returns:
        The invite code
    """
    trimmed = text.strip()

    try:
        parts = urlsplit(trimmed)
    except ValueError:
        return trimmed

    scheme = parts.scheme.lower()
    if scheme not in ("http", "https", app_url_scheme.lower()):
        return trimmed

    # parse_qs would turn "+" into a space; codes never contain either
    values = parse_qs(parts.query.replace("+", "%2B")).get(query_param)
    if values and values[0].strip():
        return values[0].strip()

    if scheme == app_url_scheme.lower():
        # convos://join/<code> puts "join" in the netloc
        segments = [s for s in parts.path.split("/") if s]
        if segments:
            return segments[-1]

    return trimmed
