"""Unit tests for invite slug encoding."""

import base64
import random
import zlib

import pytest

from convo.protocol.codec import (
    COMPRESSION_MARKER,
    SEPARATOR,
    InviteCodec,
    base64url_decode,
    extract_invite_code,
    insert_separators,
)
from convo.protocol.error import DecompressionBombError, EncodingError
from convo.protocol.signing import sign_invite
from tests.conftest import FIXED_PRIVATE_KEY, make_payload


def _raw_deflate(data: bytes) -> bytes:
    compressor = zlib.compressobj(9, zlib.DEFLATED, -zlib.MAX_WBITS)
    return compressor.compress(data) + compressor.flush()


def _slug_for(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


class TestEncodeDecode:
    """Tests for InviteCodec.encode/decode."""

    def test_roundtrip(self):
        """Decoding an encoded invite should give back the same invite."""
        # Arrange
        codec = InviteCodec()
        signed = sign_invite(make_payload(name="Book Club"), FIXED_PRIVATE_KEY)

        # Act
        slug = codec.encode(signed)
        decoded = codec.decode(slug)

        # Assert
        assert decoded == signed

    def test_slug_is_url_safe(self):
        """Slugs only use the base64url alphabet and separators."""
        codec = InviteCodec()
        signed = sign_invite(
            make_payload(description="x" * 2000), FIXED_PRIVATE_KEY
        )

        slug = codec.encode(signed)

        allowed = set(
            "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_*"
        )
        assert set(slug) <= allowed
        assert "=" not in slug

    def test_long_invite_gets_separators(self):
        """A "*" is inserted every 300 characters."""
        codec = InviteCodec()
        noise = random.Random(0).randbytes(900)
        image_url = "https://example.com/" + base64.urlsafe_b64encode(noise).decode(
            "ascii"
        )
        signed = sign_invite(make_payload(image_url=image_url), FIXED_PRIVATE_KEY)

        slug = codec.encode(signed)

        segments = slug.split(SEPARATOR)
        assert len(segments) > 1
        assert all(len(segment) == 300 for segment in segments[:-1])
        assert codec.decode(slug) == signed

    def test_decode_ignores_surrounding_whitespace(self):
        """Copy and paste whitespace should not break decoding."""
        codec = InviteCodec()
        signed = sign_invite(make_payload(), FIXED_PRIVATE_KEY)

        assert codec.decode("  " + codec.encode(signed) + "\n") == signed

    @pytest.mark.parametrize("slug", ["", "!!!!", "a", "QUJD"])
    def test_malformed_slug_rejected(self, slug):
        """Garbage slugs should raise EncodingError."""
        with pytest.raises(EncodingError):
            InviteCodec().decode(slug)


class TestCompression:
    """Tests for compress_if_smaller/decompress."""

    def test_small_input_never_compressed(self):
        """Inputs at or below the threshold are returned unchanged."""
        data = b"a" * 100

        assert InviteCodec().compress_if_smaller(data) == data

    def test_compressible_input_is_compressed(self):
        """Large repetitive inputs get the marker and shrink."""
        data = b"a" * 1000

        result = InviteCodec().compress_if_smaller(data)

        assert result[0] == COMPRESSION_MARKER
        assert len(result) < len(data)

    def test_incompressible_input_kept(self):
        """Compression is skipped when it does not help."""
        data = bytes(range(256))

        assert InviteCodec().compress_if_smaller(data) == data

    def test_compressed_invite_decodes(self):
        """Encoding a large repetitive invite should compress it."""
        codec = InviteCodec()
        signed = sign_invite(
            make_payload(description="lorem ipsum " * 100), FIXED_PRIVATE_KEY
        )

        slug = codec.encode(signed)

        assert base64url_decode(slug.replace(SEPARATOR, ""))[0] == COMPRESSION_MARKER
        assert codec.decode(slug) == signed

    def test_decompression_bomb_rejected(self):
        """Inputs expanding past the ceiling are rejected."""
        codec = InviteCodec(max_decompressed_size=1024 * 1024)
        bomb = bytes([COMPRESSION_MARKER]) + _raw_deflate(b"\x00" * (2 * 1024 * 1024))

        with pytest.raises(DecompressionBombError):
            codec.decode(_slug_for(bomb))

    def test_output_at_ceiling_allowed(self):
        """Exactly max_decompressed_size bytes is still accepted."""
        codec = InviteCodec(max_decompressed_size=4096)

        assert codec.decompress(_raw_deflate(b"\x00" * 4096)) == b"\x00" * 4096

    def test_corrupt_stream_rejected(self):
        """Data after the marker that is not DEFLATE should be rejected."""
        with pytest.raises(EncodingError):
            InviteCodec().decompress(b"\xff\xff\xff\xff")

    def test_truncated_stream_rejected(self):
        """A DEFLATE stream cut short should be rejected."""
        compressed = _raw_deflate(bytes(range(256)) * 8)

        with pytest.raises(EncodingError):
            InviteCodec().decompress(compressed[: len(compressed) // 2])


class TestHelpers:
    """Tests for separator and base64 helpers."""

    def test_insert_separators(self):
        """Separators go between full segments only."""
        assert insert_separators("abcdefg", 3) == "abc*def*g"
        assert insert_separators("abcdef", 3) == "abc*def"
        assert insert_separators("abc", 3) == "abc"

    def test_base64url_decode_without_padding(self):
        """Unpadded base64url decodes."""
        assert base64url_decode("_-8") == b"\xff\xef"

    def test_base64url_decode_rejects_standard_alphabet(self):
        """"+" and "/" are not part of base64url."""
        with pytest.raises(EncodingError):
            base64url_decode("+/8A")


class TestExtractInviteCode:
    """Tests for extract_invite_code."""

    @pytest.mark.parametrize(
        "text",
        [
            "abc123",
            "  abc123  \n",
            "https://convos.org/v2?i=abc123",
            "https://convos.org/v2?foo=bar&i=abc123",
            "http://localhost:3000/v2?i=abc123",
            "convos://join/abc123",
            "convos://join?i=abc123",
        ],
    )
    def test_extracts_code(self, text):
        """Bare codes and all link forms yield the code."""
        assert extract_invite_code(text) == "abc123"

    def test_keeps_separators(self):
        """Separators in the code are left for the decoder."""
        assert extract_invite_code("https://convos.org/v2?i=abc*def") == "abc*def"

    def test_link_without_code_returned_verbatim(self):
        """A link without the query parameter is treated as a bare code."""
        assert (
            extract_invite_code("https://convos.org/v2")
            == "https://convos.org/v2"
        )

    def test_custom_query_param(self):
        """The query parameter name is configurable."""
        assert (
            extract_invite_code("https://example.com/join?code=abc", query_param="code")
            == "abc"
        )
