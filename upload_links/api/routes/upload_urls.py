"""
Upload URL endpoint.

Hands out short-lived, write-only URLs so clients upload straight to blob
storage. This service only signs; file bytes never pass through it.

    POST /upload-urls?count=3

    {"urls": [{"blobName": ..., "uploadUrl": ..., "fileUrl": ..., "expiresAt": ...}]}
"""

import html
import logging
from typing import Optional

from fastapi import APIRouter, Query, status
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field

from ...core.issuance import parse_count
from ..dependencies import AuthenticatedCaller, SettingsDep, UploadUrlIssuerDep

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Response Models
# ---------------------------------------------------------------------------

class UploadUrlItem(BaseModel):
    """One upload slot."""
    blobName: str = Field(description="Name of the blob the URL writes to")
    uploadUrl: str = Field(description="Blob URL with write-only SAS token; PUT the file here")
    fileUrl: str = Field(description="Blob URL without token; where the file lives afterwards")
    expiresAt: str = Field(description="When uploadUrl stops working (ISO 8601, UTC)")


class UploadUrlsResponse(BaseModel):
    """Upload slots in generation order."""
    urls: list[UploadUrlItem]


def error_page(message: str) -> HTMLResponse:
    return HTMLResponse(
        content=f"<h1>Error</h1><p>{html.escape(message)}</p>",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post(
    "",
    response_model=UploadUrlsResponse,
    status_code=status.HTTP_200_OK,
    summary="Issue upload URLs",
    description=(
        "Creates the container if needed and returns `count` upload URLs, each "
        "valid for a few minutes and allowing only a write of its own blob."
    ),
    responses={
        500: {
            "description": "Storage or signing failure",
            "content": {"text/html": {}},
        }
    },
)
async def create_upload_urls(
    settings: SettingsDep,
    issuer: UploadUrlIssuerDep,
    api_key: AuthenticatedCaller = None,
    count: Optional[str] = Query(
        default=None,
        description="How many URLs to issue. Defaults to 1; capped at MAX_URLS_PER_REQUEST.",
    ),
):
    num_urls = None
    try:
        num_urls = parse_count(count, settings.max_urls_per_request)
        records = await issuer.issue(num_urls)
    except Exception as e:
        logger.exception(
            "Failed to issue upload URLs",
            extra={"container": issuer.container_name, "count": num_urls}
        )
        return error_page(str(e))

    return UploadUrlsResponse(
        urls=[
            UploadUrlItem(
                blobName=record.blob_name,
                uploadUrl=record.upload_url,
                fileUrl=record.file_url,
                expiresAt=record.expires_on.isoformat().replace("+00:00", "Z"),
            )
            for record in records
        ]
    )
