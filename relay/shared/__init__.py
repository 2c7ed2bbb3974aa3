# Shared Infrastructure for the Image Mail Relay
"""
Shared infrastructure components for the relay entry points.

This package provides:
- Pydantic models for the upload body and the email send request
- Tool implementations for S3 and the email provider
- Configuration management
- Custom exceptions
"""

from relay.shared.exceptions import (
    RelayError,
    InvalidRequestError,
    InvalidPayloadError,
    NoAttachmentsError,
    UnauthorizedError,
    StorageError,
    EmailRelayError,
)
from relay.shared.config import Settings, get_settings

__all__ = [
    # Exceptions
    "RelayError",
    "InvalidRequestError",
    "InvalidPayloadError",
    "NoAttachmentsError",
    "UnauthorizedError",
    "StorageError",
    "EmailRelayError",
    # Config
    "Settings",
    "get_settings",
]
