"""
Upload URL issuance.

Given a count, produce that many upload slots: a fresh blob name, a token
scoped to exactly that blob with write-only permission and a short validity
window, and the URLs composed from them.

The signing itself is delegated to a TokenSigner (the storage SDK in
production). This module only decides names, windows and URL layout.
No record of issued tokens is kept, so a token cannot be revoked early;
it simply stops working when its window closes.
"""

import logging
import re
import secrets
import string
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from .models import StorageCredential, UploadURLRecord
from .protocols import BlobStore, TokenSigner

logger = logging.getLogger(__name__)

DEFAULT_COUNT = 1
DEFAULT_EXPIRY = timedelta(minutes=5)
SUFFIX_LENGTH = 11

_BASE36 = string.digits + string.ascii_lowercase
_LEADING_INT = re.compile(r"^\s*([+-]?)(\d+)")
MAX_COUNT_DIGITS = 9


def parse_count(raw: Optional[str], max_count: int) -> int:
    """
    Turn the raw count query value into a number of URLs to issue.

    Reads a leading integer ("3abc" -> 3). Absent, non-numeric and zero
    values fall back to 1; the result is clamped to [1, max_count],
    including digit runs far too long to convert.
    """
    if raw is None:
        return DEFAULT_COUNT

    match = _LEADING_INT.match(raw)
    if not match:
        return DEFAULT_COUNT

    sign, digits = match.groups()
    digits = digits.lstrip("0") or "0"
    if len(digits) > MAX_COUNT_DIGITS:
        # Too long to be meaningful; clamp by sign without converting.
        return DEFAULT_COUNT if sign == "-" else max_count

    value = int(sign + digits)
    if value == 0:
        return DEFAULT_COUNT

    return max(1, min(value, max_count))


def generate_blob_name(now: datetime) -> str:
    """image-<epoch millis>-<random base36 suffix>.jpg"""
    millis = int(now.timestamp() * 1000)
    suffix = "".join(secrets.choice(_BASE36) for _ in range(SUFFIX_LENGTH))
    return f"image-{millis}-{suffix}.jpg"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UploadUrlIssuer:
    """
    Issues write-only upload URLs for one container.

    Built once at startup with the process-wide credential and signer,
    then shared by all requests. Holds no mutable state.
    """

    def __init__(
        self,
        store: BlobStore,
        signer: TokenSigner,
        credential: StorageCredential,
        container_name: str = "images",
        expiry: timedelta = DEFAULT_EXPIRY,
        clock: Callable[[], datetime] = _utcnow,
        name_factory: Callable[[datetime], str] = generate_blob_name,
    ) -> None:
        self._store = store
        self._signer = signer
        self._credential = credential
        self._container_name = container_name
        self._expiry = expiry
        self._clock = clock
        self._name_factory = name_factory

    @property
    def container_name(self) -> str:
        return self._container_name

    async def issue(self, count: int) -> list[UploadURLRecord]:
        """
        Ensure the container exists, then build `count` upload records.

        Records come back in generation order with distinct blob names.
        Any failure propagates; nothing needs rolling back because the
        only side effect is the idempotent container creation.
        """
        created = await self._store.ensure_container(self._container_name)
        if created:
            logger.info(
                "Created container",
                extra={"container": self._container_name}
            )

        records: list[UploadURLRecord] = []
        used_names: set[str] = set()

        for _ in range(count):
            record = self._issue_one(used_names)
            used_names.add(record.blob_name)
            records.append(record)

        logger.info(
            "Issued upload URLs",
            extra={
                "container": self._container_name,
                "count": len(records),
                "expiry_seconds": int(self._expiry.total_seconds()),
            }
        )

        return records

    def _issue_one(self, used_names: set[str]) -> UploadURLRecord:
        starts_on = self._clock()
        expires_on = starts_on + self._expiry

        blob_name = self._name_factory(starts_on)
        while blob_name in used_names:
            blob_name = self._name_factory(starts_on)

        token = self._signer.sign_write_token(
            container_name=self._container_name,
            blob_name=blob_name,
            starts_on=starts_on,
            expires_on=expires_on,
        )

        file_url = self._credential.object_url(self._container_name, blob_name)

        return UploadURLRecord(
            blob_name=blob_name,
            upload_url=f"{file_url}?{token}",
            file_url=file_url,
            expires_on=expires_on,
        )
