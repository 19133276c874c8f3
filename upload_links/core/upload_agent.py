"""
Upload agent: the client side of the upload URL flow.

Asks the service for upload URLs (control path), then PUTs the payload
straight to storage with each one (data path). The service never sees the
bytes.

Transfers run one after another in the order received. Each token scopes a
distinct blob, so running them concurrently would be safe too; sequential
keeps the output readable. A failed transfer is recorded and the next one
is attempted. There are no retries.
"""

import logging
from datetime import datetime
from typing import Callable, Optional
from urllib.parse import urlsplit, urlunsplit

import httpx

from .models import UploadOutcome, UploadReport, UploadURLRecord

logger = logging.getLogger(__name__)

BLOB_TYPE_HEADER = "x-ms-blob-type"
BLOCK_BLOB = "BlockBlob"

# 1x1 PNG: signature, IHDR, IDAT and IEND chunks.
DEMO_PNG = bytes([
    0x89, 0x50, 0x4E, 0x47, 0x0D, 0x0A, 0x1A, 0x0A,
    0x00, 0x00, 0x00, 0x0D, 0x49, 0x48, 0x44, 0x52,
    0x00, 0x00, 0x00, 0x01, 0x00, 0x00, 0x00, 0x01,
    0x08, 0x06, 0x00, 0x00, 0x00, 0x1F, 0x15, 0xC4,
    0x89,
    0x00, 0x00, 0x00, 0x0A, 0x49, 0x44, 0x41,
    0x54, 0x78, 0x9C, 0x63, 0x00, 0x01, 0x00, 0x00,
    0x05, 0x00, 0x01, 0x0D, 0x0A, 0x2D, 0xB4,
    0x00, 0x00, 0x00, 0x00, 0x49, 0x45, 0x4E, 0x44, 0xAE,
    0x42, 0x60, 0x82,
])


class UploadAgentError(Exception):
    """Raised when the agent is misconfigured or upload URLs cannot be obtained."""
    pass


def rewrite_endpoint(upload_url: str, public_endpoint: str) -> str:
    """
    Swap scheme and host:port of upload_url for those of public_endpoint.

    Path and query (the token) are kept as issued. Only valid when both
    addresses reach the same storage instance, e.g. an emulator known as
    azurite:10000 inside a compose network and localhost:10000 outside.
    """
    if not public_endpoint:
        return upload_url

    target = urlsplit(public_endpoint)
    if not target.scheme or not target.netloc:
        raise ValueError(f"Public endpoint must include scheme and host: {public_endpoint!r}")

    original = urlsplit(upload_url)
    return urlunsplit((target.scheme, target.netloc, original.path, original.query, original.fragment))


def _parse_expiry(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


class UploadAgent:
    """Requests upload URLs and transfers a fixed payload to each."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        api_base_url: str,
        public_endpoint: str = "",
        payload: bytes = DEMO_PNG,
        content_type: str = "image/png",
        api_key: str = "",
    ) -> None:
        self._http = http
        if public_endpoint:
            target = urlsplit(public_endpoint)
            if not target.scheme or not target.netloc:
                raise UploadAgentError(
                    f"Public endpoint must include scheme and host, e.g. http://localhost:10000: {public_endpoint!r}"
                )

        self._api_base_url = api_base_url.rstrip("/")
        self._public_endpoint = public_endpoint
        self._payload = payload
        self._content_type = content_type
        self._api_key = api_key

    @property
    def payload_size(self) -> int:
        return len(self._payload)

    async def request_upload_urls(self, count: int) -> list[UploadURLRecord]:
        """POST /upload-urls?count=N and parse the returned records."""
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["X-API-Key"] = self._api_key

        try:
            response = await self._http.post(
                f"{self._api_base_url}/upload-urls",
                params={"count": count},
                headers=headers,
            )
        except httpx.HTTPError as e:
            raise UploadAgentError(f"Could not reach upload URL service: {e}") from e

        if not response.is_success:
            raise UploadAgentError(
                f"Upload URL service returned {response.status_code}: {response.text[:300]}"
            )

        try:
            items = response.json()["urls"]
            return [
                UploadURLRecord(
                    blob_name=item["blobName"],
                    upload_url=item["uploadUrl"],
                    file_url=item["fileUrl"],
                    expires_on=_parse_expiry(item.get("expiresAt")),
                )
                for item in items
            ]
        except (ValueError, KeyError, TypeError) as e:
            raise UploadAgentError(f"Malformed upload URL response: {e}") from e

    async def upload(self, record: UploadURLRecord) -> UploadOutcome:
        """PUT the payload to one upload URL. Never raises for transfer errors."""
        url = rewrite_endpoint(record.upload_url, self._public_endpoint)

        try:
            response = await self._http.put(
                url,
                content=self._payload,
                headers={
                    BLOB_TYPE_HEADER: BLOCK_BLOB,
                    "Content-Type": self._content_type,
                },
            )
        except httpx.HTTPError as e:
            logger.warning(
                "Upload transport error",
                extra={"blob": record.blob_name, "error": str(e)}
            )
            return UploadOutcome(
                blob_name=record.blob_name,
                file_url=record.file_url,
                succeeded=False,
                error=str(e) or type(e).__name__,
            )

        if response.is_success:
            return UploadOutcome(
                blob_name=record.blob_name,
                file_url=record.file_url,
                succeeded=True,
                status_code=response.status_code,
            )

        logger.warning(
            "Upload rejected",
            extra={"blob": record.blob_name, "status_code": response.status_code}
        )
        return UploadOutcome(
            blob_name=record.blob_name,
            file_url=record.file_url,
            succeeded=False,
            status_code=response.status_code,
            error=response.text,
        )

    async def upload_all(
        self,
        records: list[UploadURLRecord],
        on_outcome: Optional[Callable[[UploadOutcome], None]] = None,
    ) -> UploadReport:
        """Upload to each record in order; on_outcome sees each result as it lands."""
        report = UploadReport()
        for record in records:
            outcome = await self.upload(record)
            report.outcomes.append(outcome)
            if on_outcome is not None:
                on_outcome(outcome)
        return report

    async def run(self, count: int) -> UploadReport:
        """Request `count` URLs and upload to each of them."""
        records = await self.request_upload_urls(count)
        return await self.upload_all(records)
