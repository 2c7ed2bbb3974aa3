"""
UploadRelay Lambda Handler

Main entry point for PUT /upload behind API Gateway or a Lambda Function URL.
Gates on the bearer token, then stores the posted images and relays them by
email.

Trigger: API Gateway REST (v1) / HTTP API or Function URL (v2) proxy event
Output: Proxy response with the email provider's answer as text

Flow:
1. Check Authorization: Bearer <auth_key>
2. Route (only PUT /upload exists)
3. Parse the JSON body
4. Store images to S3 and relay the email
5. Map domain errors to status codes
"""

import base64
import binascii
import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import structlog

from lambdas.upload_relay.auth import INVALID_REQUEST, verify_bearer_token
from lambdas.upload_relay.relay_service import INVALID_REQUEST_MESSAGE, UploadRelayService
from relay.shared.config import Settings, get_settings
from relay.shared.exceptions import (
    InvalidRequestError,
    RelayError,
    UnauthorizedError,
)

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)
logging.basicConfig(format="%(message)s", level=get_settings().log_level)

log = structlog.get_logger()

UPLOAD_ROUTE = ("PUT", "/upload")
TEXT_CONTENT_TYPE = "text/plain; charset=UTF-8"
NOT_FOUND_BODY = "404 Not Found"


@dataclass
class HttpResponse:
    """Transport-neutral response shared by the Lambda and local server."""

    status_code: int
    body: str
    headers: dict[str, str] = field(
        default_factory=lambda: {"Content-Type": TEXT_CONTENT_TYPE}
    )

    def to_proxy_response(self) -> dict[str, Any]:
        """API Gateway / Function URL proxy response."""
        return {
            "statusCode": self.status_code,
            "headers": dict(self.headers),
            "body": self.body,
            "isBase64Encoded": False,
        }


def _parse_json_body(raw_body: str | bytes | None) -> Any:
    """Decode the request body; anything that is not JSON is an invalid request."""
    if raw_body is None or raw_body in ("", b""):
        raise InvalidRequestError(INVALID_REQUEST_MESSAGE, body="empty")

    try:
        return json.loads(raw_body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InvalidRequestError(INVALID_REQUEST_MESSAGE, body="not json") from e


def _error_response(error: Exception) -> HttpResponse:
    """
    Map a failure to the caller-visible response.

    Only invalid requests and auth failures are surfaced as such (a malformed
    Authorization header is a 400, a missing or wrong token a 401); storage,
    relay and unclassified failures all collapse to a bare 404 so internal
    detail never leaks.
    """
    if isinstance(error, InvalidRequestError):
        return HttpResponse(status_code=400, body=error.reason)

    if isinstance(error, UnauthorizedError):
        if error.challenge == INVALID_REQUEST:
            status_code, body = 400, "Bad Request"
        else:
            status_code, body = 401, "Unauthorized"

        if error.challenge:
            challenge = f'Bearer error="{error.challenge}"'
        else:
            challenge = 'Bearer realm=""'

        return HttpResponse(
            status_code=status_code,
            body=body,
            headers={
                "Content-Type": TEXT_CONTENT_TYPE,
                "WWW-Authenticate": challenge,
            },
        )

    return HttpResponse(status_code=404, body=NOT_FOUND_BODY)


def dispatch_request(
    method: str,
    path: str,
    headers: Mapping[str, str] | None,
    body: str | bytes | None,
    *,
    settings: Settings | None = None,
    service: UploadRelayService | None = None,
) -> HttpResponse:
    """
    Gate, route and execute one HTTP request.

    Args:
        method: HTTP method
        path: Request path without query string
        headers: Request headers (any casing)
        body: Raw request body
        settings: Override settings (tests)
        service: Override the relay service (tests)

    Returns:
        HttpResponse ready to be adapted by the caller's transport
    """
    settings = settings or get_settings()

    try:
        verify_bearer_token(headers, settings.auth_key)

        if (method.upper(), path) != UPLOAD_ROUTE:
            log.info("route_not_found", method=method, path=path)
            return HttpResponse(status_code=404, body=NOT_FOUND_BODY)

        relay_service = service or UploadRelayService(settings)
        result = relay_service.handle(_parse_json_body(body))

        return HttpResponse(status_code=200, body=result)

    except UnauthorizedError as e:
        log.warning("request_unauthorized", method=method, path=path, reason=e.reason)
        return _error_response(e)

    except InvalidRequestError as e:
        log.warning("invalid_upload_request", reason=e.reason, **e.context)
        return _error_response(e)

    except RelayError as e:
        log.error(
            "upload_relay_failed",
            error_type=type(e).__name__,
            error=str(e),
        )
        return _error_response(e)

    except Exception as e:
        log.error("upload_relay_unhandled_error", error=str(e), exc_info=True)
        return _error_response(e)


def _strip_stage(path: str, stage: str | None) -> str:
    """Drop the `/<stage>` prefix HTTP APIs add for named stages."""
    if not stage or stage == "$default":
        return path
    prefix = f"/{stage}"
    if path == prefix:
        return "/"
    if path.startswith(prefix + "/"):
        return path[len(prefix):]
    return path


def _extract_request(event: dict[str, Any]) -> tuple[str, str, dict[str, str], str | bytes | None]:
    """
    Pull method, path, headers and body out of a proxy event.

    Handles both payload format 2.0 (HTTP API, Function URL) and 1.0 (REST API).
    """
    request_context = event.get("requestContext") or {}
    http_context = request_context.get("http")

    if http_context:
        method = http_context.get("method", "")
        path = event.get("rawPath") or http_context.get("path", "")
        path = _strip_stage(path, request_context.get("stage"))
    else:
        method = event.get("httpMethod", "")
        path = event.get("path", "")

    headers = event.get("headers") or {}
    body = event.get("body")

    if body is not None and event.get("isBase64Encoded"):
        try:
            body = base64.b64decode(body)
        except (binascii.Error, ValueError) as e:
            log.warning("undecodable_event_body", error=str(e))
            body = None

    return method, path, headers, body


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """
    AWS Lambda handler for image uploads.

    Args:
        event: API Gateway / Function URL proxy event
        context: Lambda context

    Returns:
        Proxy response dict
    """
    request_id = getattr(context, "aws_request_id", "local")

    method, path, headers, body = _extract_request(event)

    log.info(
        "processing_request",
        request_id=request_id,
        method=method,
        path=path,
    )

    response = dispatch_request(method, path, headers, body)

    log.info(
        "request_completed",
        request_id=request_id,
        status_code=response.status_code,
    )

    return response.to_proxy_response()
