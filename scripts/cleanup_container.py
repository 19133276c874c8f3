#!/usr/bin/env python3
"""
Delete every blob in the upload container.

Lists all blobs in CONTAINER_NAME (default "images") and deletes each one,
snapshots included. Failed deletes are reported and skipped. Safe to run
repeatedly: a missing or empty container just means nothing to do.

Usage:
    python scripts/cleanup_container.py

Requires:
    AZURE_STORAGE_CONNECTION_STRING (env or .env)

Exit status is 1 only when the container cannot be checked or listed.
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path so we can import our modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from upload_links.config import get_settings
from upload_links.core.models import SweepReport
from upload_links.core.sweep import ContainerSweeper
from upload_links.infrastructure.storage import create_storage_client

RULE = "=" * 60


def print_report(report: SweepReport) -> None:
    if not report.container_existed:
        print(f'[INFO] Container "{report.container_name}" does not exist. Nothing to clean up.')
        return

    print(f'[INFO] Container "{report.container_name}" exists. Listing blobs...')

    for entry in report.found:
        print(f"   [INFO] Found: {entry.name} ({entry.size} bytes)")

    if report.total_found == 0:
        print("\n[INFO] Container is already empty. Nothing to delete.")
        return

    print(f"\n[INFO] Found {report.total_found} blob(s) to delete.\n")

    for outcome in report.outcomes:
        if outcome.already_absent:
            print(f"   [INFO] Already gone: {outcome.blob_name}")
        elif outcome.succeeded:
            print(f"   [INFO] Successfully deleted: {outcome.blob_name}")
        else:
            print(f"   [ERROR] Failed to delete {outcome.blob_name}: {outcome.error}", file=sys.stderr)

    print("\n" + RULE)
    print("[INFO] CLEANUP SUMMARY")
    print(RULE)
    print(f"[INFO] Total blobs found:    {report.total_found}")
    print(f"[INFO] Successfully deleted: {report.succeeded}")
    print(f"[INFO] Failed to delete:     {report.failed}")
    print(RULE + "\n")

    if report.succeeded == report.total_found:
        print("[INFO] All blobs deleted successfully!")
    elif report.succeeded > 0:
        print("[WARN] Some blobs could not be deleted. Check errors above.")
    else:
        print("[ERROR] No blobs were deleted. Check errors above.")


async def run() -> int:
    settings = get_settings()
    container_name = settings.container_name

    print("[INFO] Starting blob storage cleanup...")
    print(f'\n[STATUS] Cleaning up container: "{container_name}"\n')

    try:
        store = create_storage_client(
            connection_string=settings.require_connection_string(),
            mock_mode=settings.storage_mock_mode,
        )
    except Exception as e:
        print(f"\n[ERROR] Cleanup failed: {e}", file=sys.stderr)
        return 1

    try:
        report = await ContainerSweeper(store).sweep(container_name)
    except Exception as e:
        print(f"\n[ERROR] Cleanup failed: {e}", file=sys.stderr)
        return 1
    finally:
        await store.close()

    print_report(report)
    print("\n[INFO] Cleanup completed!\n")
    return 0


def main():
    sys.exit(asyncio.run(run()))


if __name__ == '__main__':
    main()
