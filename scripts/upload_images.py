#!/usr/bin/env python3
"""
Upload demo images through issued upload URLs.

Asks the running service for UPLOAD_COUNT upload URLs, then PUTs a tiny
in-memory PNG straight to blob storage with each one.

Usage:
    python scripts/upload_images.py

Reads (env or .env):
    API_BASE_URL             where the service listens (default http://localhost:3000)
    UPLOAD_COUNT             URLs to request (default 5)
    STORAGE_PUBLIC_ENDPOINT  e.g. http://localhost:10000 when the service
                             reaches the emulator as http://azurite:10000
    API_KEY                  shared secret, if the service requires one
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path so we can import our modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

import httpx

from upload_links.config import get_settings
from upload_links.core.models import UploadOutcome
from upload_links.core.upload_agent import UploadAgent, UploadAgentError


def print_outcome(outcome: UploadOutcome) -> None:
    if outcome.succeeded:
        print(f"[STATUS] Success! Uploaded to: {outcome.blob_name}")
        print(f"[INFO]    File URL: {outcome.file_url}\n")
    elif outcome.status_code is not None:
        print(f"[ERROR] Failed to upload {outcome.blob_name}", file=sys.stderr)
        print(f"[ERROR]    Status: {outcome.status_code}", file=sys.stderr)
        print(f"[ERROR]    {outcome.error}\n", file=sys.stderr)
    else:
        print(f"[ERROR] Error uploading {outcome.blob_name}: {outcome.error}\n", file=sys.stderr)


async def run() -> int:
    settings = get_settings()

    async with httpx.AsyncClient(timeout=settings.http_timeout_seconds) as http:
        try:
            agent = UploadAgent(
                http,
                api_base_url=settings.api_base_url,
                public_endpoint=settings.storage_public_endpoint,
                api_key=settings.api_key,
            )
            records = await agent.request_upload_urls(settings.upload_count)
        except UploadAgentError as e:
            print(f"[ERROR] {e}", file=sys.stderr)
            return 1

        print(f"Received {len(records)} upload URL(s)")
        for record in records:
            print(f"   {record.blob_name}")

        print(f"\nCreated fake image: {agent.payload_size} bytes")
        print("\nStarting uploads...\n")

        report = await agent.upload_all(records, on_outcome=print_outcome)

    print(f"Upload process completed! {report.succeeded} succeeded, {report.failed} failed.")
    return 0


def main():
    sys.exit(asyncio.run(run()))


if __name__ == '__main__':
    main()
