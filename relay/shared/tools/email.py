"""
Email Tools

Relays an EmailSendRequest to the transactional email provider over HTTP
and translates the provider's answer into text for the caller.
"""

import json

import httpx
import structlog

from relay.shared.config import Settings, get_settings
from relay.shared.exceptions import EmailRelayError
from relay.shared.models import EmailSendRequest

log = structlog.get_logger()


def gather_response(response: httpx.Response) -> str:
    """
    Render a provider response as text.

    JSON bodies are parsed and re-serialized compactly; anything else is
    passed through unchanged.
    """
    content_type = response.headers.get("content-type", "")

    if "application/json" in content_type:
        return json.dumps(response.json(), separators=(",", ":"), ensure_ascii=False)
    return response.text


class EmailProviderClient:
    """Small wrapper around the provider's send endpoint."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._transport = transport

    @property
    def host(self) -> str:
        return self._settings.email_api_host

    def send(self, request: EmailSendRequest) -> str:
        """
        POST the send request and return the translated response text.

        Provider-side error statuses are relayed as-is; only transport
        failures raise.

        Raises:
            EmailRelayError: If the provider cannot be reached
        """
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._settings.email_api_key}",
        }

        log.info(
            "relaying_email",
            host=self.host,
            to=request.to,
            subject=request.subject[:50],
            attachment_count=len(request.attachments),
        )

        try:
            with httpx.Client(
                transport=self._transport,
                timeout=self._settings.email_api_timeout,
            ) as client:
                response = client.post(
                    self.host,
                    json=request.to_provider_payload(),
                    headers=headers,
                )
                body = gather_response(response)
        except httpx.HTTPError as e:
            log.error(
                "email_relay_failed",
                host=self.host,
                to=request.to,
                error=str(e),
            )
            raise EmailRelayError(
                host=self.host,
                recipient=request.to,
                error_message=str(e),
            ) from e

        if response.is_error:
            log.warning(
                "email_provider_returned_error",
                status_code=response.status_code,
                to=request.to,
                body=body[:200],
            )
        else:
            log.info(
                "email_relayed",
                status_code=response.status_code,
                to=request.to,
            )

        return body
