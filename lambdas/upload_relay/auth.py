"""
Bearer Auth Gate

Rejects requests whose Authorization header does not carry the configured
bearer token. Runs before routing, so unknown paths are gated too.

Outcomes follow RFC 6750:
- no header: 401 with a bare `Bearer realm=""` challenge
- header not of the form `Bearer <token>`: 400, `error="invalid_request"`
- token mismatch: 401, `error="invalid_token"`
"""

import re
import secrets
from collections.abc import Mapping

import structlog

from relay.shared.exceptions import UnauthorizedError

log = structlog.get_logger()

# RFC 6750 b64token, optionally surrounded by spaces
BEARER_PATTERN = re.compile(r"^Bearer +([A-Za-z0-9._~+/-]+=*) *$")

INVALID_REQUEST = "invalid_request"
INVALID_TOKEN = "invalid_token"


def _get_header(headers: Mapping[str, str] | None, name: str) -> str | None:
    """Case-insensitive header lookup (API Gateway v1 keeps the client's casing)."""
    if not headers:
        return None
    lowered = name.lower()
    for key, value in headers.items():
        if key.lower() == lowered:
            return value
    return None


def verify_bearer_token(headers: Mapping[str, str] | None, expected_token: str) -> None:
    """
    Check the Authorization header against the expected token.

    Raises:
        UnauthorizedError: If the header is missing, malformed, or the token
            does not match. `challenge` tells the caller which case it was.
    """
    authorization = _get_header(headers, "authorization")
    if not authorization:
        raise UnauthorizedError("missing bearer token")

    match = BEARER_PATTERN.match(authorization)
    if not match:
        raise UnauthorizedError("malformed authorization header", challenge=INVALID_REQUEST)

    if not expected_token:
        # An unset key matches nothing
        log.error("auth_key_not_configured")
        raise UnauthorizedError("auth key not configured", challenge=INVALID_TOKEN)

    if not secrets.compare_digest(match.group(1).encode(), expected_token.encode()):
        raise UnauthorizedError("invalid bearer token", challenge=INVALID_TOKEN)
