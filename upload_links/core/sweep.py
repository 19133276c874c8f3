"""
Container sweep: delete every blob in a container.

The sweep is one logical pass: check the container exists, list all blobs
(pagination is the store's concern), then delete them one by one. A
failing delete is recorded and the sweep moves on; only a failure to check
or list the container escapes, because without a listing there is nothing
meaningful to report.
"""

import logging

from .models import BlobEntry, DeletionOutcome, SweepReport
from .protocols import BlobStore

logger = logging.getLogger(__name__)


class ContainerSweeper:
    """Empties containers through a BlobStore."""

    def __init__(self, store: BlobStore) -> None:
        self._store = store

    async def sweep(self, container_name: str) -> SweepReport:
        if not await self._store.container_exists(container_name):
            logger.info(
                "Container does not exist, nothing to clean up",
                extra={"container": container_name}
            )
            return SweepReport(container_name=container_name, container_existed=False)

        found = await self.collect(container_name)
        report = SweepReport(container_name=container_name, found=found)

        for entry in found:
            report.outcomes.append(await self._delete(container_name, entry))

        logger.info(
            "Sweep finished",
            extra={
                "container": container_name,
                "found": report.total_found,
                "succeeded": report.succeeded,
                "failed": report.failed,
            }
        )

        return report

    async def collect(self, container_name: str) -> list[BlobEntry]:
        """List every blob name first so deletes don't disturb the listing."""
        found = [entry async for entry in self._store.list_blobs(container_name)]
        logger.debug(
            "Listed blobs",
            extra={"container": container_name, "count": len(found)}
        )
        return found

    async def _delete(self, container_name: str, entry: BlobEntry) -> DeletionOutcome:
        try:
            deleted = await self._store.delete_blob(container_name, entry.name)
        except Exception as e:
            logger.error(
                "Failed to delete blob",
                extra={"container": container_name, "blob": entry.name, "error": str(e)}
            )
            return DeletionOutcome(blob_name=entry.name, succeeded=False, error=str(e))

        if not deleted:
            logger.info(
                "Blob already gone",
                extra={"container": container_name, "blob": entry.name}
            )

        return DeletionOutcome(
            blob_name=entry.name,
            succeeded=True,
            already_absent=not deleted,
        )
