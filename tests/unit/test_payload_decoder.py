"""
Unit tests for the payload decoder.

Tests cover:
- Data URI prefix stripping
- Base64 decoding of payload entries
- Content-addressed key derivation
"""

import base64
import hashlib

import pytest

from tests.utils.event_generator import OTHER_PNG, SMALL_PNG, to_data_uri


class TestStripDataUriPrefix:
    """Tests for strip_data_uri_prefix."""

    def test_strips_png_prefix(self):
        from lambdas.upload_relay.payload_decoder import strip_data_uri_prefix

        assert strip_data_uri_prefix("data:image/png;base64,AAAA") == "AAAA"

    def test_strips_other_mime_prefix(self):
        from lambdas.upload_relay.payload_decoder import strip_data_uri_prefix

        assert strip_data_uri_prefix("data:image/jpeg;base64,/9j/") == "/9j/"

    def test_bare_base64_untouched(self):
        from lambdas.upload_relay.payload_decoder import strip_data_uri_prefix

        assert strip_data_uri_prefix("iVBORw0KGgo=") == "iVBORw0KGgo="

    def test_only_first_comma_consumed(self):
        from lambdas.upload_relay.payload_decoder import strip_data_uri_prefix

        assert strip_data_uri_prefix("data:x;base64,AA,BB") == "AA,BB"

    def test_prefix_must_lead(self):
        """A 'data' marker in the middle of the string is not a prefix."""
        from lambdas.upload_relay.payload_decoder import strip_data_uri_prefix

        assert strip_data_uri_prefix("AAAAdata:x,BB") == "AAAAdata:x,BB"


class TestDecodeInlineImage:
    """Tests for decode_inline_image."""

    def test_decodes_data_uri(self):
        from lambdas.upload_relay.payload_decoder import decode_inline_image

        assert decode_inline_image(to_data_uri(SMALL_PNG)) == SMALL_PNG

    def test_decodes_bare_base64(self):
        from lambdas.upload_relay.payload_decoder import decode_inline_image

        encoded = base64.b64encode(OTHER_PNG).decode("ascii")
        assert decode_inline_image(encoded) == OTHER_PNG

    def test_ignores_line_breaks(self):
        """MIME-style wrapped base64 still decodes."""
        from lambdas.upload_relay.payload_decoder import decode_inline_image

        encoded = base64.encodebytes(OTHER_PNG * 20).decode("ascii")
        assert "\n" in encoded
        assert decode_inline_image(encoded) == OTHER_PNG * 20

    def test_missing_padding_restored(self):
        """Encoders that drop trailing `=` still produce decodable entries."""
        from lambdas.upload_relay.payload_decoder import decode_inline_image

        encoded = base64.b64encode(SMALL_PNG).decode("ascii")
        assert encoded.endswith("==")

        assert decode_inline_image("data:image/png;base64," + encoded.rstrip("=")) == SMALL_PNG

    def test_wrapped_and_unpadded(self):
        from lambdas.upload_relay.payload_decoder import decode_inline_image

        content = OTHER_PNG + b"\x04"
        encoded = base64.b64encode(content).decode("ascii")
        assert encoded.endswith("==")

        wrapped = encoded[:8] + "\r\n" + encoded[8:].rstrip("=")

        assert decode_inline_image(wrapped) == content

    def test_impossible_length_raises_invalid_payload(self):
        """Five data characters cannot come from any byte string."""
        from lambdas.upload_relay.payload_decoder import decode_inline_image
        from relay.shared.exceptions import InvalidPayloadError, InvalidRequestError

        with pytest.raises(InvalidPayloadError) as exc_info:
            decode_inline_image("data:image/png;base64,abcde", index=3)

        assert exc_info.value.index == 3
        assert isinstance(exc_info.value, InvalidRequestError)


class TestDeriveStorageKey:
    """Tests for derive_storage_key."""

    def test_key_is_sha256_hex_with_png_extension(self):
        from lambdas.upload_relay.payload_decoder import derive_storage_key

        expected = hashlib.sha256(SMALL_PNG).hexdigest() + ".png"
        assert derive_storage_key(SMALL_PNG) == expected

    def test_same_bytes_same_key(self):
        from lambdas.upload_relay.payload_decoder import derive_storage_key

        assert derive_storage_key(bytes(SMALL_PNG)) == derive_storage_key(bytes(SMALL_PNG))

    def test_different_bytes_different_key(self):
        from lambdas.upload_relay.payload_decoder import derive_storage_key

        assert derive_storage_key(SMALL_PNG) != derive_storage_key(OTHER_PNG)

    def test_known_digest_is_stable(self):
        """Empty input hashes to the published SHA-256 empty digest."""
        from lambdas.upload_relay.payload_decoder import derive_storage_key

        assert derive_storage_key(b"") == (
            "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855.png"
        )


class TestDecodePayload:
    """Tests for decode_payload."""

    def test_preserves_input_order(self):
        from lambdas.upload_relay.payload_decoder import decode_payload

        stored = decode_payload([to_data_uri(OTHER_PNG), to_data_uri(SMALL_PNG)])

        assert [s.content for s in stored] == [OTHER_PNG, SMALL_PNG]

    def test_jpeg_declared_entry_still_stored_as_png(self):
        """The declared MIME type is ignored; every image is stored as PNG."""
        from lambdas.upload_relay.payload_decoder import decode_payload

        stored = decode_payload([to_data_uri(SMALL_PNG, mime="image/jpeg")])

        assert stored[0].key.endswith(".png")
        assert stored[0].content_type == "image/png"

    def test_round_trip_is_reproducible(self):
        from lambdas.upload_relay.payload_decoder import decode_payload

        first = decode_payload([to_data_uri(SMALL_PNG)])
        second = decode_payload([to_data_uri(SMALL_PNG)])

        assert first == second

    def test_reports_index_of_bad_entry(self):
        from lambdas.upload_relay.payload_decoder import decode_payload
        from relay.shared.exceptions import InvalidPayloadError

        with pytest.raises(InvalidPayloadError) as exc_info:
            decode_payload([to_data_uri(SMALL_PNG), "data:image/png;base64,A"])

        assert exc_info.value.index == 1
