"""
UploadRelay Lambda

Stores inline-encoded images in S3 under content-addressed keys and emails
them to the requested receiver through the transactional email provider.

Flow:
    Client PUT /upload
    → Bearer auth gate
    → This Lambda
    → S3 (one object per image) + Email provider
"""

from lambdas.upload_relay.handler import HttpResponse, dispatch_request, lambda_handler
from lambdas.upload_relay.payload_decoder import (
    decode_inline_image,
    decode_payload,
    derive_storage_key,
    strip_data_uri_prefix,
)
from lambdas.upload_relay.relay_service import (
    UploadRelayService,
    build_email_request,
    validate_upload_request,
)

__all__ = [
    "HttpResponse",
    "UploadRelayService",
    "build_email_request",
    "decode_inline_image",
    "decode_payload",
    "derive_storage_key",
    "dispatch_request",
    "lambda_handler",
    "strip_data_uri_prefix",
    "validate_upload_request",
]
