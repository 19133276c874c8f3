"""
Tests for the cleanup command-line script.

The script is loaded from its file and its settings and storage factory
are replaced, so no storage account is needed.
"""

import importlib.util
from pathlib import Path

import pytest

from upload_links.infrastructure.storage import MockStorageClient, StorageError

SCRIPT_PATH = Path(__file__).resolve().parents[2] / "scripts" / "cleanup_container.py"


class LockedStore(MockStorageClient):
    async def delete_blob(self, container_name, blob_name):
        raise StorageError(f"Delete failed: lease held on {blob_name}")


class BrokenListingStore(MockStorageClient):
    async def list_blobs(self, container_name):
        raise StorageError("Listing failed: authorization failure")
        yield  # pragma: no cover


def load_script():
    module_spec = importlib.util.spec_from_file_location("cleanup_container", SCRIPT_PATH)
    module = importlib.util.module_from_spec(module_spec)
    module_spec.loader.exec_module(module)
    return module


@pytest.fixture
def script(monkeypatch, mock_settings):
    module = load_script()
    monkeypatch.setattr(module, "get_settings", lambda: mock_settings)
    return module


def use_store(monkeypatch, module, store):
    monkeypatch.setattr(module, "create_storage_client", lambda **kwargs: store)


class TestCleanupScript:
    """Exit status and report output of scripts/cleanup_container.py."""

    @pytest.mark.asyncio
    async def test_deletes_everything_and_exits_zero(self, script, monkeypatch, capsys):
        store = MockStorageClient()
        store.put_blob("images", "a.jpg", b"1")
        store.put_blob("images", "b.jpg", b"22")
        use_store(monkeypatch, script, store)

        assert await script.run() == 0

        out = capsys.readouterr().out
        assert 'Container "images" exists. Listing blobs...' in out
        assert "Found 2 blob(s) to delete." in out
        assert "All blobs deleted successfully!" in out
        assert store.blob_names("images") == []

    @pytest.mark.asyncio
    async def test_failed_deletes_still_exit_zero(self, script, monkeypatch, capsys):
        store = LockedStore()
        store.put_blob("images", "a.jpg", b"1")
        use_store(monkeypatch, script, store)

        assert await script.run() == 0

        captured = capsys.readouterr()
        assert "Failed to delete:     1" in captured.out
        assert "Failed to delete a.jpg" in captured.err

    @pytest.mark.asyncio
    async def test_listing_failure_exits_one(self, script, monkeypatch, capsys):
        store = BrokenListingStore()
        store.put_blob("images", "a.jpg", b"1")
        use_store(monkeypatch, script, store)

        assert await script.run() == 1

        assert "Cleanup failed: Listing failed" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_missing_container_is_nothing_to_do(self, script, monkeypatch, capsys):
        use_store(monkeypatch, script, MockStorageClient())

        assert await script.run() == 0

        out = capsys.readouterr().out
        assert "does not exist. Nothing to clean up." in out
        assert "Listing blobs" not in out
