"""
Application configuration using Pydantic settings.

Configuration is loaded from environment variables with sensible defaults.
The same Settings class serves the API and the standalone scripts, so the
upload agent and the sweep read the container name and connection string
from the same place the service does.

Mock mode enables local development without a storage emulator.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when required configuration is missing or malformed."""
    pass


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    For lists (like cors_origins), use comma-separated values in env.
    """

    # API Configuration
    api_title: str = "Upload Links API"
    api_version: str = "v1"
    api_key: str = Field(
        default="",
        description="Optional shared secret expected in X-API-Key. Empty disables the check."
    )
    port: int = Field(
        default=3000,
        description="Port uvicorn listens on when started via python -m upload_links.main"
    )

    # Storage Configuration
    azure_storage_connection_string: str = Field(
        default="",
        description="Storage connection string: AccountName=...;AccountKey=...;BlobEndpoint=..."
    )
    container_name: str = Field(
        default="images",
        description="Container that receives uploads and that the sweep empties"
    )
    sas_expiry_minutes: int = Field(
        default=5,
        ge=1,
        description="Validity window of each issued upload URL"
    )
    max_urls_per_request: int = Field(
        default=100,
        ge=1,
        description="Upper bound applied to the count query parameter"
    )
    storage_mock_mode: bool = Field(
        default=False,
        description="Use in-memory storage instead of a real account. Enables local dev without Azurite."
    )

    # Upload agent
    api_base_url: str = Field(
        default="http://localhost:3000",
        description="Base URL the upload agent uses to reach this service"
    )
    upload_count: int = Field(
        default=5,
        ge=1,
        description="Number of upload URLs the agent requests per run"
    )
    storage_public_endpoint: str = Field(
        default="",
        description=(
            "Scheme and host the agent should use instead of the one embedded in "
            "uploadUrl, e.g. http://localhost:10000 when the service sees the "
            "emulator as http://azurite:10000. Empty means use URLs as issued."
        )
    )
    http_timeout_seconds: float = Field(
        default=30.0,
        description="Timeout for the agent's HTTP calls"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    # CORS
    cors_origins: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins."
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    def validate_required_fields(self) -> list[str]:
        """
        Validate that required fields are set.

        Returns list of missing required fields. The connection string is
        still needed in mock mode because it carries the signing key.
        """
        missing = []

        if not self.azure_storage_connection_string.strip():
            missing.append("AZURE_STORAGE_CONNECTION_STRING")

        return missing

    def require_connection_string(self) -> str:
        """Return the connection string or raise ConfigurationError."""
        missing = self.validate_required_fields()
        if missing:
            raise ConfigurationError(
                f"Missing required configuration: {', '.join(missing)}"
            )
        return self.azure_storage_connection_string


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache means we only load settings once per process.
    For tests, call get_settings.cache_clear() or pass Settings explicitly.
    """
    return Settings()
