#!/usr/bin/env python3
"""
Demo Script: Upload Images and Relay Them by Email

Reads image files, inline-encodes them as data URIs and PUTs them to a
running relay (the local FastAPI server by default).

Usage:
    # Dry run - show the request that would be sent
    python scripts/run_demo.py photo.png --receiver me@example.com --dry-run

    # Send to the local server (python scripts/local_api_server.py)
    python scripts/run_demo.py photo.png scan.png --receiver me@example.com

    # Send to a deployed Function URL
    python scripts/run_demo.py photo.png --receiver me@example.com \\
        --url https://abc.lambda-url.us-east-1.on.aws/upload --token $RELAY_AUTH_KEY
"""

import argparse
import base64
import json
import mimetypes
import sys
from pathlib import Path
from typing import Any

import httpx
import structlog

log = structlog.get_logger()

DEFAULT_URL = "http://localhost:8000/upload"
DEFAULT_TOKEN = "local-dev-key"


def encode_image(path: Path) -> str:
    """Data URI for a file, using its guessed MIME type."""
    mime, _ = mimetypes.guess_type(path.name)
    encoded = base64.b64encode(path.read_bytes()).decode("ascii")
    return f"data:{mime or 'image/png'};base64,{encoded}"


def build_body(args: argparse.Namespace) -> dict[str, Any]:
    body: dict[str, Any] = {
        "receiver": args.receiver,
        "payload": [encode_image(Path(p)) for p in args.images],
    }
    if args.subject:
        body["emailSubject"] = args.subject
    if args.body:
        body["emailBody"] = args.body
    return body


def main() -> int:
    parser = argparse.ArgumentParser(description="Upload images to the relay")
    parser.add_argument("images", nargs="+", help="Image files to upload")
    parser.add_argument("--receiver", required=True, help="Email address to send to")
    parser.add_argument("--subject", help="Email subject")
    parser.add_argument("--body", help="Email HTML body")
    parser.add_argument("--url", default=DEFAULT_URL, help="Upload endpoint")
    parser.add_argument("--token", default=DEFAULT_TOKEN, help="Bearer token")
    parser.add_argument("--dry-run", action="store_true", help="Print the request only")
    args = parser.parse_args()

    body = build_body(args)

    if args.dry_run:
        preview = {**body, "payload": [p[:60] + "..." for p in body["payload"]]}
        print(json.dumps(preview, indent=2))
        return 0

    log.info("uploading_images", url=args.url, count=len(body["payload"]))

    response = httpx.put(
        args.url,
        json=body,
        headers={"Authorization": f"Bearer {args.token}"},
        timeout=60.0,
    )

    log.info("upload_finished", status_code=response.status_code)
    print(response.text)

    return 0 if response.is_success else 1


if __name__ == "__main__":
    sys.exit(main())
