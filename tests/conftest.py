"""
Pytest Configuration and Shared Fixtures

Provides moto S3 mocking, a recording fake email provider, sample images,
and test utilities.
"""

import os
from typing import Any

import boto3
import pytest
from moto import mock_aws

# Set test environment before importing application modules
os.environ["RELAY_S3_BUCKET_NAME"] = "test-relay-images"
os.environ["RELAY_AUTH_KEY"] = "test-auth-key"
os.environ["RELAY_EMAIL_API_HOST"] = "https://email.test/emails"
os.environ["RELAY_EMAIL_API_KEY"] = "test-email-key"
os.environ["RELAY_SENDER_EMAIL"] = "sender@example.com"
os.environ["RELAY_AWS_REGION"] = "us-east-1"
os.environ["AWS_DEFAULT_REGION"] = "us-east-1"
os.environ["AWS_ACCESS_KEY_ID"] = "testing"
os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"

from relay.shared.config import Settings
from tests.utils.event_generator import (
    AUTH_KEY,
    OTHER_PNG,
    SMALL_PNG,
    RecordingProvider,
    to_data_uri,
)

TEST_BUCKET = "test-relay-images"
EMAIL_API_HOST = "https://email.test/emails"


# --- Settings Fixtures ---


@pytest.fixture
def test_settings() -> Settings:
    """Explicit settings so tests never depend on cached environment state."""
    return Settings(
        auth_key=AUTH_KEY,
        email_api_host=EMAIL_API_HOST,
        email_api_key="test-email-key",
        sender_email="sender@example.com",
        default_email_body="<strong>it works!</strong>",
        s3_bucket_name=TEST_BUCKET,
        aws_region="us-east-1",
        max_upload_workers=4,
    )


# --- AWS Mocking Fixtures ---


@pytest.fixture
def aws_credentials():
    """Mock AWS credentials for moto."""
    return {
        "aws_access_key_id": "testing",
        "aws_secret_access_key": "testing",
        "region_name": "us-east-1",
    }


@pytest.fixture
def mock_s3(aws_credentials):
    """Create a mocked S3 bucket."""
    with mock_aws():
        s3 = boto3.client("s3", **aws_credentials)
        s3.create_bucket(Bucket=TEST_BUCKET)
        yield s3


# --- Email Provider Fixtures ---


@pytest.fixture
def fake_provider() -> RecordingProvider:
    """Recording email provider answering 200 JSON by default."""
    return RecordingProvider()


@pytest.fixture
def relay_service(test_settings, mock_s3, fake_provider):
    """UploadRelayService wired to moto S3 and the fake provider."""
    from lambdas.upload_relay.relay_service import UploadRelayService
    from relay.shared.tools.email import EmailProviderClient
    from relay.shared.tools.s3 import S3ObjectStore

    return UploadRelayService(
        test_settings,
        object_store=S3ObjectStore(test_settings, client=mock_s3),
        email_client=EmailProviderClient(test_settings, transport=fake_provider.transport),
    )


# --- Payload Fixtures ---


@pytest.fixture
def small_png() -> bytes:
    """Ten-byte PNG-prefixed image."""
    return SMALL_PNG


@pytest.fixture
def other_png() -> bytes:
    """A second, different image."""
    return OTHER_PNG


@pytest.fixture
def upload_body(small_png: bytes) -> dict[str, Any]:
    """Minimal valid PUT /upload body."""
    return {
        "receiver": "a@b.com",
        "payload": [to_data_uri(small_png)],
    }


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Headers carrying the configured bearer token."""
    return {
        "authorization": f"Bearer {AUTH_KEY}",
        "content-type": "application/json",
    }
