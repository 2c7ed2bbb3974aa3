# Shared Tools
"""
Tool implementations for the relay entry points.

S3 writes are idempotent (content-addressed keys); the email client performs
exactly one provider call per send.
"""

from relay.shared.tools.email import (
    EmailProviderClient,
    gather_response,
)
from relay.shared.tools.s3 import S3ObjectStore

__all__ = [
    # Email tools
    "EmailProviderClient",
    "gather_response",
    # S3 tools
    "S3ObjectStore",
]
