"""
Core logic for upload URL issuance, direct uploads and container cleanup.

This package is framework-agnostic - it doesn't import FastAPI or the
storage SDK. Storage access goes through the protocols in `protocols`,
implemented in the infrastructure layer.
"""

from .issuance import UploadUrlIssuer, generate_blob_name, parse_count
from .models import (
    BlobEntry,
    ConnectionStringError,
    DeletionOutcome,
    StorageCredential,
    SweepReport,
    UploadOutcome,
    UploadReport,
    UploadURLRecord,
    parse_connection_string,
)
from .sweep import ContainerSweeper

__all__ = [
    "BlobEntry",
    "ConnectionStringError",
    "ContainerSweeper",
    "DeletionOutcome",
    "StorageCredential",
    "SweepReport",
    "UploadOutcome",
    "UploadReport",
    "UploadURLRecord",
    "UploadUrlIssuer",
    "generate_blob_name",
    "parse_connection_string",
    "parse_count",
]
