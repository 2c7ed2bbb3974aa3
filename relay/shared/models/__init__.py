# Shared Models
"""
Pydantic models and dataclasses shared by the relay entry points.
"""

from relay.shared.models.upload import (
    IMAGE_CONTENT_TYPE,
    IMAGE_EXTENSION,
    EmailAttachment,
    EmailSendRequest,
    StoredObject,
    UploadRequest,
)

__all__ = [
    "IMAGE_CONTENT_TYPE",
    "IMAGE_EXTENSION",
    "EmailAttachment",
    "EmailSendRequest",
    "StoredObject",
    "UploadRequest",
]
