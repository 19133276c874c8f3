"""
Blob storage client for containers and blobs.

Supports Azure Blob Storage (and the Azurite emulator, which speaks the
same API) with a mock mode for local development.

The Azure client uses the SDK's asyncio flavour so listing and deleting
only suspend the calling coroutine. SDK retries are disabled: a failed
call surfaces immediately and the caller decides what it means.

Mock mode keeps containers in memory, enabling API testing without a
storage account or emulator.
"""

import logging
from collections.abc import AsyncIterator
from typing import Optional

from azure.core.exceptions import AzureError, ResourceExistsError, ResourceNotFoundError
from azure.storage.blob.aio import BlobServiceClient

from ...core.models import BlobEntry
from ...core.protocols import BlobStore

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when storage operations fail."""
    pass


class AzureBlobStorageClient:
    """
    Azure Blob Storage client.

    Implements core.protocols.BlobStore on top of
    azure.storage.blob.aio.BlobServiceClient. One instance is created per
    process and reused; call close() when done.
    """

    def __init__(self, service: BlobServiceClient) -> None:
        self._service = service

        logger.info(
            "Initialized blob storage client",
            extra={"account_url": self._service.url}
        )

    @classmethod
    def from_connection_string(cls, connection_string: str) -> "AzureBlobStorageClient":
        """Client for the account in connection_string, with SDK retries disabled."""
        return cls(BlobServiceClient.from_connection_string(
            connection_string,
            retry_total=0,
        ))

    @property
    def url(self) -> str:
        return self._service.url

    async def ensure_container(self, container_name: str) -> bool:
        container = self._service.get_container_client(container_name)
        try:
            await container.create_container()
        except ResourceExistsError:
            return False
        except AzureError as e:
            logger.error(
                "Failed to create container",
                extra={"container": container_name, "error": str(e)}
            )
            raise StorageError(f"Container creation failed: {e}") from e
        return True

    async def container_exists(self, container_name: str) -> bool:
        container = self._service.get_container_client(container_name)
        try:
            return await container.exists()
        except AzureError as e:
            logger.error(
                "Failed to check container",
                extra={"container": container_name, "error": str(e)}
            )
            raise StorageError(f"Container check failed: {e}") from e

    async def list_blobs(self, container_name: str) -> AsyncIterator[BlobEntry]:
        """
        Yield every blob in the container.

        The SDK pager fetches further pages as iteration proceeds, so
        callers see a single sequence regardless of page count.
        """
        container = self._service.get_container_client(container_name)
        try:
            async for blob in container.list_blobs():
                yield BlobEntry(
                    name=blob.name,
                    size=blob.size,
                    last_modified=blob.last_modified,
                )
        except AzureError as e:
            logger.error(
                "Failed to list blobs",
                extra={"container": container_name, "error": str(e)}
            )
            raise StorageError(f"Listing failed: {e}") from e

    async def delete_blob(self, container_name: str, blob_name: str) -> bool:
        container = self._service.get_container_client(container_name)
        try:
            await container.delete_blob(blob_name, delete_snapshots="include")
        except ResourceNotFoundError:
            return False
        except AzureError as e:
            raise StorageError(f"Delete failed: {e}") from e

        logger.debug(
            "Deleted blob",
            extra={"container": container_name, "blob": blob_name}
        )
        return True

    async def close(self) -> None:
        await self._service.close()


# ---------------------------------------------------------------------------
# Mock Storage for Local Development
# ---------------------------------------------------------------------------

class MockStorageClient:
    """
    In-memory storage for local development.

    Containers are dicts of {blob_name: bytes}. Issuance works unchanged
    against it (signing never talks to storage); the returned URLs just
    don't point anywhere real.

    Not suitable for production, but perfect for development and testing.
    """

    def __init__(self) -> None:
        self._containers: dict[str, dict[str, bytes]] = {}
        logger.info("Initialized mock storage client (in-memory)")

    async def ensure_container(self, container_name: str) -> bool:
        if container_name in self._containers:
            return False
        self._containers[container_name] = {}
        return True

    async def container_exists(self, container_name: str) -> bool:
        return container_name in self._containers

    async def list_blobs(self, container_name: str) -> AsyncIterator[BlobEntry]:
        if container_name not in self._containers:
            raise StorageError(f"Container not found: {container_name}")
        for name, data in list(self._containers[container_name].items()):
            yield BlobEntry(name=name, size=len(data))

    async def delete_blob(self, container_name: str, blob_name: str) -> bool:
        blobs = self._containers.get(container_name, {})
        return blobs.pop(blob_name, None) is not None

    async def close(self) -> None:
        pass

    def put_blob(self, container_name: str, blob_name: str, data: bytes) -> None:
        """Store a blob directly, standing in for a client's PUT."""
        self._containers.setdefault(container_name, {})[blob_name] = data

    def blob_names(self, container_name: str) -> list[str]:
        return sorted(self._containers.get(container_name, {}))


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------

def create_storage_client(
    connection_string: Optional[str] = None,
    mock_mode: bool = False,
) -> BlobStore:
    """
    Create storage client based on configuration.

    Args:
        connection_string: Storage connection string (required if not mock_mode)
        mock_mode: If True, return in-memory client for testing

    Returns:
        BlobStore implementation (Azure or Mock)
    """
    if mock_mode:
        return MockStorageClient()

    if not connection_string:
        raise ValueError("connection_string is required when not in mock mode")

    return AzureBlobStorageClient.from_connection_string(connection_string)
