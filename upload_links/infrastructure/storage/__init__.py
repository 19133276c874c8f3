"""
Blob storage integration.

Supports Azure Blob Storage and the Azurite emulator through the Azure SDK,
plus an in-memory mock for local development without credentials.
"""

from .client import (
    AzureBlobStorageClient,
    MockStorageClient,
    StorageError,
    create_storage_client,
)
from .sas import SasTokenSigner

__all__ = [
    "AzureBlobStorageClient",
    "MockStorageClient",
    "SasTokenSigner",
    "StorageError",
    "create_storage_client",
]
