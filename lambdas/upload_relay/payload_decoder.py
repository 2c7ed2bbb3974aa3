"""
Payload Decoder Module

Turns inline-encoded images (data URIs or bare base64) into bytes and
derives their content-addressed storage keys.
"""

import base64
import binascii
import hashlib
import re

from relay.shared.exceptions import InvalidPayloadError
from relay.shared.models import IMAGE_CONTENT_TYPE, IMAGE_EXTENSION, StoredObject

# Everything up to and including the first comma after a leading "data"
DATA_URI_PREFIX = re.compile(r"^data[^,]+,")

NON_BASE64_CHARS = re.compile(r"[^A-Za-z0-9+/=]")


def strip_data_uri_prefix(entry: str) -> str:
    """Remove a leading `data:<mime>;base64,` prefix if present."""
    return DATA_URI_PREFIX.sub("", entry, count=1)


def _restore_padding(text: str) -> str:
    text = NON_BASE64_CHARS.sub("", text)
    return text + "=" * (-len(text) % 4)


def decode_inline_image(entry: str, *, index: int = 0) -> bytes:
    """
    Decode one payload entry into raw bytes.

    Characters outside the base64 alphabet (line breaks, spaces) are
    discarded and missing trailing `=` padding is restored before decoding.

    Raises:
        InvalidPayloadError: If the remaining text is not valid base64
    """
    try:
        return base64.b64decode(_restore_padding(strip_data_uri_prefix(entry)))
    except (binascii.Error, ValueError) as e:
        raise InvalidPayloadError(index=index, error_message=str(e)) from e


def derive_storage_key(content: bytes) -> str:
    """`<sha256 hex>.png` for the given bytes."""
    return f"{hashlib.sha256(content).hexdigest()}.{IMAGE_EXTENSION}"


def build_stored_object(entry: str, *, index: int = 0) -> StoredObject:
    """Decode an entry and pair it with its key."""
    content = decode_inline_image(entry, index=index)
    return StoredObject(
        key=derive_storage_key(content),
        content=content,
        content_type=IMAGE_CONTENT_TYPE,
    )


def decode_payload(payload: list[str]) -> list[StoredObject]:
    """Decode every entry, in input order, before anything is written."""
    return [build_stored_object(entry, index=i) for i, entry in enumerate(payload)]
