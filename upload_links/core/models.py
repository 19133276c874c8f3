"""
Domain models for upload URL issuance and container cleanup.

These models represent the core concepts: the account credential, the
records handed to clients, and the outcome of batch operations. They have
no dependencies on FastAPI or the storage SDK.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from urllib.parse import quote

DEFAULT_ENDPOINT_SUFFIX = "core.windows.net"
DEFAULT_ENDPOINT_PROTOCOL = "https"


class ConnectionStringError(ValueError):
    """Raised when a connection string lacks what is needed to sign tokens."""
    pass


def parse_connection_string(connection_string: str) -> dict[str, str]:
    """
    Parse a `key=value;key=value` connection string into a dict.

    Values are split on the first '=' only: account keys are base64 and
    usually end in '=' padding. Empty segments and segments without a
    value are skipped.
    """
    parsed: dict[str, str] = {}
    for segment in connection_string.split(";"):
        key, sep, value = segment.strip().partition("=")
        if key and sep and value:
            parsed[key] = value
    return parsed


@dataclass(frozen=True)
class StorageCredential:
    """
    Account name, secret key and blob endpoint of the storage account.

    Frozen because the credential is built once at startup and shared
    read-only by every request. The key is excluded from repr so it
    never ends up in logs or tracebacks.
    """
    account_name: str
    account_key: str = field(repr=False)
    blob_endpoint: str

    @classmethod
    def from_connection_string(cls, connection_string: str) -> "StorageCredential":
        parts = parse_connection_string(connection_string)

        missing = [key for key in ("AccountName", "AccountKey") if not parts.get(key)]
        if missing:
            raise ConnectionStringError(
                f"Connection string is missing {', '.join(missing)}"
            )

        account_name = parts["AccountName"]
        blob_endpoint = parts.get("BlobEndpoint")
        if not blob_endpoint:
            protocol = parts.get("DefaultEndpointsProtocol", DEFAULT_ENDPOINT_PROTOCOL)
            suffix = parts.get("EndpointSuffix", DEFAULT_ENDPOINT_SUFFIX)
            blob_endpoint = f"{protocol}://{account_name}.blob.{suffix}"

        return cls(
            account_name=account_name,
            account_key=parts["AccountKey"],
            blob_endpoint=blob_endpoint.rstrip("/"),
        )

    def object_url(self, container_name: str, blob_name: str) -> str:
        """Unsigned URL of a blob: {endpoint}/{container}/{blob}."""
        return f"{self.blob_endpoint}/{container_name}/{quote(blob_name, safe='~/')}"


@dataclass(frozen=True)
class UploadURLRecord:
    """
    One upload slot handed to a client.

    upload_url carries the signed token; file_url is the same object
    without it (where the file lives once uploaded). Nothing about
    issued records is kept server-side.
    """
    blob_name: str
    upload_url: str
    file_url: str
    expires_on: Optional[datetime] = None


@dataclass(frozen=True)
class BlobEntry:
    """A blob seen while listing a container."""
    name: str
    size: Optional[int] = None
    last_modified: Optional[datetime] = None


# ---------------------------------------------------------------------------
# Batch outcomes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class UploadOutcome:
    """Result of one direct PUT to an upload URL."""
    blob_name: str
    file_url: str
    succeeded: bool
    status_code: Optional[int] = None
    error: Optional[str] = None


@dataclass
class UploadReport:
    """Aggregated outcomes of an upload agent run."""
    outcomes: list[UploadOutcome] = field(default_factory=list)

    @property
    def attempted(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.succeeded)

    @property
    def failed(self) -> int:
        return self.attempted - self.succeeded


@dataclass(frozen=True)
class DeletionOutcome:
    """
    Result of deleting one blob.

    already_absent marks a blob that vanished between listing and
    deletion. It counts as a success: the goal state is reached.
    """
    blob_name: str
    succeeded: bool
    already_absent: bool = False
    error: Optional[str] = None


@dataclass
class SweepReport:
    """
    Aggregated result of emptying a container.

    Invariant: succeeded + failed == total_found once the sweep ran,
    since every listed blob gets exactly one deletion attempt.
    """
    container_name: str
    container_existed: bool = True
    found: list[BlobEntry] = field(default_factory=list)
    outcomes: list[DeletionOutcome] = field(default_factory=list)

    @property
    def total_found(self) -> int:
        return len(self.found)

    @property
    def attempted(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.succeeded)

    @property
    def failed(self) -> int:
        return self.attempted - self.succeeded

    @property
    def failures(self) -> list[DeletionOutcome]:
        return [o for o in self.outcomes if not o.succeeded]
