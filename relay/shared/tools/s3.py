"""
S3 Tools

Idempotent image storage in an S3-compatible bucket (AWS S3, Cloudflare R2,
MinIO). Keys are content-addressed, so rewriting the same bytes is harmless.
"""

from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError
import structlog

from relay.shared.config import Settings, get_settings
from relay.shared.exceptions import StorageError
from relay.shared.models import StoredObject

log = structlog.get_logger()


class S3ObjectStore:
    """Writes StoredObjects to the configured bucket."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        client: Any | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._client = client

    @property
    def bucket(self) -> str:
        return self._settings.s3_bucket_name

    @property
    def client(self):
        """S3 client, created on first use. boto3 clients are thread-safe."""
        if self._client is None:
            self._client = boto3.client("s3", **self._settings.s3_config)
        return self._client

    def put(self, stored: StoredObject) -> str:
        """
        Write one object under its content-addressed key.

        Args:
            stored: Decoded image and its key

        Returns:
            The key written

        Raises:
            StorageError: If the bucket rejects the write
        """
        log.info(
            "storing_image",
            bucket=self.bucket,
            key=stored.key,
            content_type=stored.content_type,
            size_bytes=stored.size_bytes,
        )

        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=stored.key,
                Body=stored.content,
                ContentType=stored.content_type,
            )
        except (ClientError, BotoCoreError) as e:
            log.error(
                "s3_put_failed",
                bucket=self.bucket,
                key=stored.key,
                error=str(e),
            )
            raise StorageError(
                operation="put",
                bucket=self.bucket,
                key=stored.key,
                error_message=str(e),
            ) from e

        log.info("image_stored", s3_uri=f"s3://{self.bucket}/{stored.key}")

        return stored.key
