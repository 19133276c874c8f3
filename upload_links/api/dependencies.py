"""
FastAPI dependency injection.

The credential, storage client and issuer are built once in the
application lifespan (see main.py) and kept on app.state. These
dependencies hand them to route handlers, so routes never construct
their own clients and tests can swap them via dependency_overrides.
"""

import logging
import secrets
from typing import Annotated, Optional

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import APIKeyHeader

from ..config.settings import Settings
from ..core.issuance import UploadUrlIssuer
from ..core.protocols import BlobStore

logger = logging.getLogger(__name__)

# API Key security scheme
api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


def get_storage_client(request: Request) -> BlobStore:
    """Process-wide storage client created at startup."""
    return request.app.state.storage_client


def get_upload_url_issuer(request: Request) -> UploadUrlIssuer:
    """Process-wide issuer created at startup."""
    return request.app.state.issuer


# ---------------------------------------------------------------------------
# Authentication
# ---------------------------------------------------------------------------

async def verify_api_key(
    settings: Annotated[Settings, Depends(get_app_settings)],
    api_key: Optional[str] = Security(api_key_header),
) -> Optional[str]:
    """
    Validate the shared secret from the X-API-Key header.

    Only enforced when API_KEY is configured; otherwise every caller is
    accepted. Raises 403 if the key is missing or wrong.
    """
    if not settings.api_key:
        return None

    if not api_key:
        logger.warning("Request missing API key")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="API key required. Provide X-API-Key header.",
        )

    if not secrets.compare_digest(api_key, settings.api_key):
        logger.warning("Invalid API key attempt")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid API key",
        )

    return api_key


# ---------------------------------------------------------------------------
# Convenience Type Aliases
# ---------------------------------------------------------------------------

AuthenticatedCaller = Annotated[Optional[str], Depends(verify_api_key)]
SettingsDep = Annotated[Settings, Depends(get_app_settings)]
StorageClientDep = Annotated[BlobStore, Depends(get_storage_client)]
UploadUrlIssuerDep = Annotated[UploadUrlIssuer, Depends(get_upload_url_issuer)]
