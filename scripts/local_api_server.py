"""
FastAPI Server for Local Development

Serves PUT /upload on localhost against an in-memory (moto) S3 bucket.
Every request goes through the same dispatch function as the Lambda, so auth,
routing and error mapping behave identically.

When RELAY_EMAIL_API_HOST is not set, emails go to an in-process fake
provider that answers with a JSON id instead of sending anything.
"""

import os
import sys
from contextlib import asynccontextmanager
from uuid import uuid4

# Set environment for local mode BEFORE any other imports
USE_FAKE_PROVIDER = not os.environ.get("RELAY_EMAIL_API_HOST")

os.environ["RELAY_S3_ENDPOINT_URL"] = "mock"
os.environ.setdefault("RELAY_S3_BUCKET_NAME", "relay-images-local")
os.environ.setdefault("RELAY_AUTH_KEY", "local-dev-key")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")

from moto import mock_aws

mock = mock_aws()
mock.start()

import boto3
import httpx
import structlog
from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response

from lambdas.upload_relay.handler import dispatch_request
from lambdas.upload_relay.relay_service import UploadRelayService
from relay.shared.config import get_settings
from relay.shared.tools.email import EmailProviderClient

# Configure logging (replaces the JSON renderer set up by the handler module)
structlog.configure(
    processors=[
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

log = structlog.get_logger()

# Clear settings cache so new env vars take effect
get_settings.cache_clear()


def _fake_provider(request: httpx.Request) -> httpx.Response:
    """Stand-in email provider: accepts every send."""
    log.info("fake_provider_received_email", url=str(request.url))
    return httpx.Response(200, json={"id": str(uuid4())})


def build_service() -> UploadRelayService:
    """Relay service wired to the local bucket and, if needed, the fake provider."""
    settings = get_settings()
    transport = httpx.MockTransport(_fake_provider) if USE_FAKE_PROVIDER else None
    return UploadRelayService(
        settings,
        email_client=EmailProviderClient(settings, transport=transport),
    )


def setup_local_s3():
    """Create S3 bucket for local development."""
    settings = get_settings()
    s3 = boto3.client("s3", region_name=settings.aws_region)

    try:
        s3.create_bucket(Bucket=settings.s3_bucket_name)
        log.info("s3_bucket_created", bucket_name=settings.s3_bucket_name)
    except Exception as e:
        if "BucketAlreadyOwnedByYou" not in str(e) and "BucketAlreadyExists" not in str(e):
            log.warning("s3_bucket_setup_error", error=str(e))


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown logic."""
    setup_local_s3()
    app.state.relay_service = build_service()
    log.info(
        "local_resources_initialized",
        fake_provider=USE_FAKE_PROVIDER,
        bucket=get_settings().s3_bucket_name,
    )
    yield
    log.info("shutting_down")
    mock.stop()


app = FastAPI(
    title="Image Mail Relay",
    description="Local development server for the upload relay",
    lifespan=lifespan,
)


@app.api_route("/{path:path}", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
async def relay(request: Request, path: str):
    """Forward any request to the relay dispatcher."""
    body = await request.body()
    result = await run_in_threadpool(
        dispatch_request,
        request.method,
        request.url.path,
        dict(request.headers),
        body,
        service=request.app.state.relay_service,
    )
    return Response(
        content=result.body,
        status_code=result.status_code,
        headers=result.headers,
    )


if __name__ == "__main__":
    import uvicorn

    port = int(sys.argv[1]) if len(sys.argv) > 1 else 8000
    log.info("starting_local_api_server", host="0.0.0.0", port=port)
    uvicorn.run(app, host="0.0.0.0", port=port, log_level="info")
