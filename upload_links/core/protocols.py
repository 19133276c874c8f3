"""
Protocols the core logic depends on.

The infrastructure layer implements these; tests can substitute fakes
without touching the storage SDK.
"""

from datetime import datetime
from typing import AsyncIterator, Protocol

from .models import BlobEntry


class BlobStore(Protocol):
    """Container and blob operations against the storage service."""

    async def ensure_container(self, container_name: str) -> bool:
        """Create the container if absent. Returns True if it was created."""
        ...

    async def container_exists(self, container_name: str) -> bool:
        ...

    def list_blobs(self, container_name: str) -> AsyncIterator[BlobEntry]:
        """Iterate every blob in the container, across all result pages."""
        ...

    async def delete_blob(self, container_name: str, blob_name: str) -> bool:
        """
        Delete a blob together with its snapshots.

        Returns False if the blob did not exist.
        """
        ...

    async def close(self) -> None:
        ...


class TokenSigner(Protocol):
    """Produces signed, write-only access tokens for single blobs."""

    def sign_write_token(
        self,
        container_name: str,
        blob_name: str,
        starts_on: datetime,
        expires_on: datetime,
    ) -> str:
        """Return the serialized query string (without leading '?')."""
        ...
