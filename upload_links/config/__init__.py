"""
Application configuration using Pydantic settings.

Configuration comes from environment variables (and an optional .env file).
Supports a mock storage mode for local development.
"""

from .settings import ConfigurationError, Settings, get_settings

__all__ = ["ConfigurationError", "Settings", "get_settings"]
