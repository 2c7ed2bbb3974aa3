"""
Custom Exceptions for the Image Mail Relay

All exceptions follow the pattern of specific, actionable errors
with context needed for debugging and logging.
"""

from dataclasses import dataclass
from typing import Any


class RelayError(Exception):
    """Base exception for the image mail relay."""

    def __init__(self, message: str, **context: Any) -> None:
        self.message = message
        self.context = context
        super().__init__(message)

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


@dataclass
class InvalidRequestError(RelayError):
    """Request body rejected before any side effect."""

    reason: str

    def __init__(self, reason: str, **context: Any) -> None:
        self.reason = reason
        super().__init__(reason, **context)


@dataclass
class InvalidPayloadError(InvalidRequestError):
    """A payload entry could not be decoded into bytes."""

    index: int

    def __init__(self, index: int, error_message: str | None = None) -> None:
        self.index = index
        super().__init__(
            "payload entries must be base64 encoded images",
            index=index,
            error_message=error_message,
        )


@dataclass
class NoAttachmentsError(InvalidRequestError):
    """Processing finished without a single attachment to send."""

    payload_count: int

    def __init__(self, payload_count: int) -> None:
        self.payload_count = payload_count
        super().__init__("no attachments found", payload_count=payload_count)


@dataclass
class UnauthorizedError(RelayError):
    """Bearer credential missing or not accepted."""

    reason: str
    challenge: str | None = None  # "invalid_request" | "invalid_token"

    def __init__(self, reason: str, challenge: str | None = None) -> None:
        self.reason = reason
        self.challenge = challenge
        super().__init__(f"Unauthorized: {reason}", reason=reason, challenge=challenge)


@dataclass
class StorageError(RelayError):
    """S3 operation failed."""

    operation: str  # "put"
    bucket: str
    key: str | None = None

    def __init__(
        self,
        operation: str,
        bucket: str,
        key: str | None = None,
        error_message: str | None = None,
    ) -> None:
        self.operation = operation
        self.bucket = bucket
        self.key = key
        super().__init__(
            f"S3 {operation} failed for s3://{bucket}/{key or '*'}: "
            f"{error_message or 'Unknown error'}",
            operation=operation,
            bucket=bucket,
            key=key,
            error_message=error_message,
        )


@dataclass
class EmailRelayError(RelayError):
    """Email provider could not be reached."""

    host: str
    recipient: str | None = None

    def __init__(
        self,
        host: str,
        recipient: str | None = None,
        error_message: str | None = None,
    ) -> None:
        self.host = host
        self.recipient = recipient
        super().__init__(
            f"Email relay to {host} failed{f' for {recipient}' if recipient else ''}: "
            f"{error_message or 'Unknown error'}",
            host=host,
            recipient=recipient,
            error_message=error_message,
        )
