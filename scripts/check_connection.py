#!/usr/bin/env python3
"""
Check that the storage account (or Azurite) is reachable.

Creates a test container if it doesn't exist and reports the outcome,
including the HTTP status and request id when the service rejects us.

Usage:
    python scripts/check_connection.py [--container test-container]
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path so we can import our modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from azure.core.exceptions import HttpResponseError

from upload_links.config import get_settings
from upload_links.infrastructure.storage import AzureBlobStorageClient


async def run(container_name: str) -> int:
    settings = get_settings()

    try:
        client = AzureBlobStorageClient.from_connection_string(settings.require_connection_string())
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print("Testing connection to blob storage...")
    print("BlobServiceClient URL:", client.url)

    try:
        print(f"\nAttempting to create container {container_name!r}...")
        created = await client.ensure_container(container_name)
        print("Success! Container created." if created else "Success! Container already exists.")
        return 0
    except Exception as e:
        print("Error:", e, file=sys.stderr)
        cause = e.__cause__
        if isinstance(cause, HttpResponseError):
            print("Status Code:", cause.status_code, file=sys.stderr)
            request_id = cause.response.headers.get("x-ms-request-id") if cause.response else None
            print("Request ID:", request_id, file=sys.stderr)
        return 1
    finally:
        await client.close()


def main():
    parser = argparse.ArgumentParser(description='Check blob storage connectivity')
    parser.add_argument('--container', default='test-container', help='Probe container name')
    args = parser.parse_args()

    sys.exit(asyncio.run(run(args.container)))


if __name__ == '__main__':
    main()
