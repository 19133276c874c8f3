"""
Upload Links - time-limited, write-only upload URLs for blob storage.

This package contains the complete application:
- core: Framework-agnostic issuance, upload and sweep logic
- infrastructure: Blob storage integration (Azure SDK + in-memory mock)
- api: FastAPI routes and dependencies
- config: Application configuration
"""

__version__ = "0.1.0"
