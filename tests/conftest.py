"""Shared test fixtures."""

import pytest

from upload_links.config.settings import Settings

# Public development account of the Azurite emulator. Signing is local,
# so tokens can be generated in tests without any storage running.
AZURITE_CONNECTION_STRING = (
    "AccountName=devstoreaccount1;"
    "AccountKey=Eby8vdM02xNOcqFlqUwJPLlmEtlCDXJ1OUzFT50uSRZ6IFsuFq2UVErCz4I6tq/K1SZFPTOtr/KBHBeksoGMGw==;"
    "DefaultEndpointsProtocol=http;"
    "BlobEndpoint=http://127.0.0.1:10000/devstoreaccount1;"
    "QueueEndpoint=http://127.0.0.1:10001/devstoreaccount1;"
    "TableEndpoint=http://127.0.0.1:10002/devstoreaccount1;"
)


@pytest.fixture
def connection_string() -> str:
    return AZURITE_CONNECTION_STRING


@pytest.fixture
def mock_settings() -> Settings:
    """Settings for an app backed by in-memory storage."""
    return Settings(
        _env_file=None,
        azure_storage_connection_string=AZURITE_CONNECTION_STRING,
        storage_mock_mode=True,
        max_urls_per_request=10,
        container_name="images",
        sas_expiry_minutes=5,
        api_key="",
        cors_origins="*",
        log_level="INFO",
    )
