"""
Unit tests for the container sweep.

Uses the in-memory storage client, plus small subclasses that fail in
specific ways to exercise the error accounting.
"""

import pytest

from upload_links.core.sweep import ContainerSweeper
from upload_links.infrastructure.storage import MockStorageClient, StorageError


class FlakyDeleteStore(MockStorageClient):
    """Refuses to delete the named blobs."""

    def __init__(self, locked: set[str]) -> None:
        super().__init__()
        self._locked = locked

    async def delete_blob(self, container_name, blob_name):
        if blob_name in self._locked:
            raise StorageError(f"Delete failed: lease held on {blob_name}")
        return await super().delete_blob(container_name, blob_name)


class VanishingStore(MockStorageClient):
    """Lists blobs that are already gone by the time they are deleted."""

    async def delete_blob(self, container_name, blob_name):
        await super().delete_blob(container_name, blob_name)
        return False


class BrokenListingStore(MockStorageClient):
    async def list_blobs(self, container_name):
        raise StorageError("Listing failed: authorization failure")
        yield  # pragma: no cover


def fill(store: MockStorageClient, count: int) -> None:
    for i in range(count):
        store.put_blob("images", f"image-{i}.jpg", b"\x89PNG")


class TestContainerSweeper:
    """Tests for emptying a container."""

    @pytest.mark.asyncio
    async def test_missing_container_is_nothing_to_do(self):
        report = await ContainerSweeper(MockStorageClient()).sweep("images")

        assert not report.container_existed
        assert report.attempted == 0

    @pytest.mark.asyncio
    async def test_empty_container_attempts_nothing(self):
        store = MockStorageClient()
        await store.ensure_container("images")

        report = await ContainerSweeper(store).sweep("images")

        assert report.container_existed
        assert report.total_found == 0
        assert report.attempted == 0

    @pytest.mark.asyncio
    async def test_deletes_every_blob(self):
        store = MockStorageClient()
        fill(store, 4)

        report = await ContainerSweeper(store).sweep("images")

        assert report.total_found == 4
        assert report.succeeded == 4
        assert report.failed == 0
        assert store.blob_names("images") == []

    @pytest.mark.asyncio
    async def test_failed_delete_does_not_stop_the_sweep(self):
        store = FlakyDeleteStore(locked={"image-1.jpg"})
        fill(store, 3)

        report = await ContainerSweeper(store).sweep("images")

        assert report.total_found == 3
        assert report.succeeded == 2
        assert report.failed == 1
        assert report.succeeded + report.failed == report.total_found
        assert report.failures[0].blob_name == "image-1.jpg"
        assert "lease held" in report.failures[0].error
        assert store.blob_names("images") == ["image-1.jpg"]

    @pytest.mark.asyncio
    async def test_already_absent_blob_counts_as_success(self):
        store = VanishingStore()
        fill(store, 2)

        report = await ContainerSweeper(store).sweep("images")

        assert report.succeeded == 2
        assert all(o.already_absent for o in report.outcomes)

    @pytest.mark.asyncio
    async def test_listing_failure_propagates(self):
        store = BrokenListingStore()
        fill(store, 2)

        with pytest.raises(StorageError, match="Listing failed"):
            await ContainerSweeper(store).sweep("images")

    @pytest.mark.asyncio
    async def test_second_run_finds_nothing(self):
        store = MockStorageClient()
        fill(store, 3)
        sweeper = ContainerSweeper(store)

        first = await sweeper.sweep("images")
        second = await sweeper.sweep("images")

        assert first.total_found == 3
        assert second.total_found == 0
        assert second.failed == 0
