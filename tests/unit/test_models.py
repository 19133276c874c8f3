"""
Unit tests for the domain models.

These tests verify connection string parsing and the report arithmetic
without touching external services.
"""

import pytest

from upload_links.core.models import (
    BlobEntry,
    ConnectionStringError,
    DeletionOutcome,
    StorageCredential,
    SweepReport,
    UploadOutcome,
    UploadReport,
    parse_connection_string,
)


# ---------------------------------------------------------------------------
# Connection String Tests
# ---------------------------------------------------------------------------

class TestParseConnectionString:
    """Tests for key=value;key=value parsing."""

    def test_keeps_base64_padding_in_values(self):
        """Only the first '=' separates key from value."""
        parsed = parse_connection_string("AccountName=acct;AccountKey=abc123==;")

        assert parsed == {"AccountName": "acct", "AccountKey": "abc123=="}

    def test_skips_empty_and_valueless_segments(self):
        parsed = parse_connection_string(";;Foo;Bar=;AccountName=acct")

        assert parsed == {"AccountName": "acct"}

    def test_keeps_unknown_keys(self):
        """Unknown keys are parsed; the credential just ignores them."""
        parsed = parse_connection_string("QueueEndpoint=http://q;AccountName=a")

        assert parsed["QueueEndpoint"] == "http://q"


class TestStorageCredential:
    """Tests for building the credential from a connection string."""

    def test_reads_azurite_connection_string(self, connection_string):
        credential = StorageCredential.from_connection_string(connection_string)

        assert credential.account_name == "devstoreaccount1"
        assert credential.account_key.endswith("==")
        assert credential.blob_endpoint == "http://127.0.0.1:10000/devstoreaccount1"

    def test_derives_endpoint_when_blob_endpoint_absent(self):
        credential = StorageCredential.from_connection_string(
            "DefaultEndpointsProtocol=https;AccountName=prod;AccountKey=a2V5;EndpointSuffix=core.windows.net"
        )

        assert credential.blob_endpoint == "https://prod.blob.core.windows.net"

    def test_strips_trailing_slash_from_endpoint(self):
        credential = StorageCredential.from_connection_string(
            "AccountName=a;AccountKey=k;BlobEndpoint=http://host:10000/a/"
        )

        assert credential.blob_endpoint == "http://host:10000/a"

    @pytest.mark.parametrize("connection_string", [
        "",
        "AccountName=only",
        "AccountKey=only==",
        "garbage",
    ])
    def test_rejects_incomplete_connection_strings(self, connection_string):
        with pytest.raises(ConnectionStringError, match="missing"):
            StorageCredential.from_connection_string(connection_string)

    def test_repr_hides_account_key(self, connection_string):
        credential = StorageCredential.from_connection_string(connection_string)

        assert credential.account_key not in repr(credential)

    def test_object_url_joins_endpoint_container_and_blob(self, connection_string):
        credential = StorageCredential.from_connection_string(connection_string)

        url = credential.object_url("images", "image-1-abc.jpg")

        assert url == "http://127.0.0.1:10000/devstoreaccount1/images/image-1-abc.jpg"


# ---------------------------------------------------------------------------
# Report Tests
# ---------------------------------------------------------------------------

class TestSweepReport:
    """Tests for sweep outcome accounting."""

    def test_counts_add_up_to_found(self):
        report = SweepReport(
            container_name="images",
            found=[BlobEntry("a"), BlobEntry("b"), BlobEntry("c")],
            outcomes=[
                DeletionOutcome("a", succeeded=True),
                DeletionOutcome("b", succeeded=True, already_absent=True),
                DeletionOutcome("c", succeeded=False, error="locked"),
            ],
        )

        assert report.total_found == 3
        assert report.succeeded == 2
        assert report.failed == 1
        assert report.succeeded + report.failed == report.total_found
        assert [o.blob_name for o in report.failures] == ["c"]

    def test_missing_container_reports_nothing(self):
        report = SweepReport(container_name="images", container_existed=False)

        assert report.total_found == 0
        assert report.attempted == 0


class TestUploadReport:
    """Tests for upload outcome accounting."""

    def test_counts_successes_and_failures(self):
        report = UploadReport(outcomes=[
            UploadOutcome("a", "http://x/a", succeeded=True, status_code=201),
            UploadOutcome("b", "http://x/b", succeeded=False, status_code=403, error="denied"),
            UploadOutcome("c", "http://x/c", succeeded=False, error="connection refused"),
        ])

        assert report.attempted == 3
        assert report.succeeded == 1
        assert report.failed == 2
