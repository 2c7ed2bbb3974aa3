"""
Upload and Email Models

Pydantic models for the upload request body and the email send request
relayed to the provider, plus the per-image StoredObject.
"""

import base64
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

IMAGE_EXTENSION = "png"
IMAGE_CONTENT_TYPE = "image/png"


class UploadRequest(BaseModel):
    """Body of PUT /upload."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    receiver: str = Field(..., description="Destination email address")
    payload: list[str] = Field(
        ...,
        description="Inline-encoded images, usually data:<mime>;base64,<bytes>",
    )
    email_subject: str | None = Field(
        default=None,
        alias="emailSubject",
        description="Subject line; a fixed fallback is used when empty",
    )
    email_body: str | None = Field(
        default=None,
        alias="emailBody",
        description="HTML body; the configured fallback is used when empty",
    )

    @field_validator("receiver")
    @classmethod
    def receiver_not_blank(cls, v: str) -> str:
        if not v:
            raise ValueError("receiver must not be empty")
        return v

    @field_validator("payload")
    @classmethod
    def payload_not_empty(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("payload must contain at least one image")
        return v


@dataclass(frozen=True)
class StoredObject:
    """
    One decoded payload entry and the key it is stored under.

    The key is `<sha256 hex>.png`, so identical bytes always land on the
    same object.
    """

    key: str
    content: bytes
    content_type: str = IMAGE_CONTENT_TYPE

    @property
    def size_bytes(self) -> int:
        return len(self.content)


class EmailAttachment(BaseModel):
    """Attachment carried by the outbound email."""

    content: bytes = Field(..., description="Raw attachment bytes")
    filename: str = Field(..., description="Storage key of the image")

    @classmethod
    def from_stored_object(cls, stored: StoredObject) -> "EmailAttachment":
        return cls(content=stored.content, filename=stored.key)

    def to_provider_dict(self) -> dict[str, str]:
        """Wire form: bytes travel as base64 text."""
        return {
            "content": base64.b64encode(self.content).decode("ascii"),
            "filename": self.filename,
        }


class EmailSendRequest(BaseModel):
    """Structured send request accepted by the email provider."""

    model_config = ConfigDict(populate_by_name=True)

    from_address: str = Field(..., alias="from", description="Sender address")
    to: str = Field(..., description="Recipient address")
    subject: str = Field(..., description="Subject line")
    html: str = Field(..., description="HTML body")
    attachments: list[EmailAttachment] = Field(
        default_factory=list,
        description="Images in payload order",
    )

    def to_provider_payload(self) -> dict[str, Any]:
        """Serialize for the provider's JSON API."""
        return {
            "from": self.from_address,
            "to": self.to,
            "subject": self.subject,
            "html": self.html,
            "attachments": [a.to_provider_dict() for a in self.attachments],
        }
