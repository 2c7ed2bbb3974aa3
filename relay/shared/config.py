"""
Configuration Management

Pydantic-settings based configuration for the image mail relay.
All settings can be overridden via environment variables.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Environment variables are prefixed with RELAY_ and are case-insensitive.
    Example: RELAY_S3_BUCKET_NAME=my-images
    """

    model_config = SettingsConfigDict(
        env_prefix="RELAY_",
        env_file=[".env.local", ".env"],  # Try .env.local first
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Inbound Auth
    auth_key: str = Field(
        default="",
        description="Bearer token callers must present on every request",
    )

    # Email Provider Configuration
    email_api_host: str = Field(
        default="https://api.resend.com/emails",
        description="URL the email send request is POSTed to",
    )
    email_api_key: str = Field(
        default="",
        description="Bearer token for the email provider (not the inbound auth key)",
    )
    email_api_timeout: float | None = Field(
        default=None,
        description="Seconds to wait on the email provider; unset waits indefinitely",
    )
    sender_email: str = Field(
        default="images@relay.example.com",
        description="From address for outbound emails",
    )
    default_email_body: str = Field(
        default="<strong>it works!</strong>",
        description="HTML body used when the caller sends none",
    )

    # S3 Configuration
    s3_bucket_name: str = Field(
        default="relay-images",
        description="Bucket that stores uploaded images",
    )
    s3_endpoint_url: str | None = Field(
        default=None,
        description="S3 endpoint URL (R2/MinIO, or 'mock' for local)",
    )
    max_upload_workers: int = Field(
        default=8,
        ge=1,
        description="Worker threads used to write one request's images",
    )

    # AWS Configuration
    aws_region: str = Field(
        default="us-east-1",
        description="AWS region (use 'auto' for Cloudflare R2)",
    )

    # Application Configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level",
    )

    @property
    def s3_config(self) -> dict:
        """S3 client configuration."""
        config = {"region_name": self.aws_region}
        if self.s3_endpoint_url and self.s3_endpoint_url != "mock":
            config["endpoint_url"] = self.s3_endpoint_url
        return config


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses lru_cache to ensure settings are loaded only once.
    Call Settings.model_validate({}) in tests to override.
    """
    return Settings()
