"""
Upload Relay Service

Validates an upload body, stores every image under its content-addressed
key, and relays one email carrying the images to the provider.

Flow:
1. Validate receiver/payload (no side effects)
2. Decode every payload entry
3. Write all images to S3 concurrently, join before continuing
4. Assemble the EmailSendRequest
5. Send it and return the provider's translated response
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Any

import structlog
from pydantic import ValidationError

from lambdas.upload_relay.payload_decoder import decode_payload
from relay.shared.config import Settings, get_settings
from relay.shared.exceptions import InvalidRequestError, NoAttachmentsError
from relay.shared.models import (
    EmailAttachment,
    EmailSendRequest,
    StoredObject,
    UploadRequest,
)
from relay.shared.tools.email import EmailProviderClient
from relay.shared.tools.s3 import S3ObjectStore

log = structlog.get_logger()

DEFAULT_EMAIL_SUBJECT = "hello world"
INVALID_REQUEST_MESSAGE = "receiver and a non-empty payload are required"


def validate_upload_request(body: Any) -> UploadRequest:
    """
    Check the parsed body before anything else runs.

    Raises:
        InvalidRequestError: If receiver is empty or payload is not a
            non-empty list of strings
    """
    if not isinstance(body, dict):
        raise InvalidRequestError(INVALID_REQUEST_MESSAGE, body_type=type(body).__name__)

    try:
        return UploadRequest.model_validate(body)
    except ValidationError as e:
        raise InvalidRequestError(
            INVALID_REQUEST_MESSAGE,
            errors=[".".join(str(p) for p in err["loc"]) for err in e.errors()],
        ) from e


def build_email_request(
    request: UploadRequest,
    stored_objects: list[StoredObject],
    settings: Settings,
) -> EmailSendRequest:
    """Assemble the provider request; attachments keep payload order."""
    return EmailSendRequest(
        from_address=settings.sender_email,
        to=request.receiver,
        subject=request.email_subject or DEFAULT_EMAIL_SUBJECT,
        html=request.email_body or settings.default_email_body,
        attachments=[EmailAttachment.from_stored_object(s) for s in stored_objects],
    )


class UploadRelayService:
    """Handles one PUT /upload body end to end."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        object_store: S3ObjectStore | None = None,
        email_client: EmailProviderClient | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._object_store = object_store or S3ObjectStore(self._settings)
        self._email_client = email_client or EmailProviderClient(self._settings)

    def store_images(self, stored_objects: list[StoredObject]) -> list[StoredObject]:
        """
        Write every object and wait for all writes.

        Executor.map yields in submission order, so the result matches
        payload order whatever order the writes finish in. The first
        failure is re-raised once the pool has drained.

        Raises:
            StorageError: If any write fails
        """
        if not stored_objects:
            return []

        workers = min(self._settings.max_upload_workers, len(stored_objects))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = pool.map(self._object_store.put, stored_objects)
            keys = list(results)

        log.info("images_stored", count=len(keys), unique_keys=len(set(keys)))
        return stored_objects

    def handle(self, body: Any) -> str:
        """
        Run the full upload-and-relay flow for a parsed JSON body.

        Returns:
            Provider response as text

        Raises:
            InvalidRequestError: Bad body, undecodable entry, or no attachments
            StorageError: An image could not be written
            EmailRelayError: The provider could not be reached
        """
        request = validate_upload_request(body)

        log.info(
            "upload_received",
            receiver=request.receiver,
            payload_count=len(request.payload),
        )

        stored_objects = self.store_images(decode_payload(request.payload))

        if not stored_objects:
            raise NoAttachmentsError(payload_count=len(request.payload))

        email_request = build_email_request(request, stored_objects, self._settings)
        return self._email_client.send(email_request)
