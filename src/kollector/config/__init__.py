"""Application configuration helpers."""

from __future__ import annotations

from .catalog import DEFAULT_CURRENCY, CatalogConfig, get_catalog_config
from .env import env_flag, optional_env
from .errors import ConfigurationError
from .logging import configure_logging
from .storage import (
    DatabaseConfig,
    StorageConfig,
    get_database_config,
    get_database_uri,
    get_storage_config,
)

__all__ = [
    "DEFAULT_CURRENCY",
    "CatalogConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "StorageConfig",
    "configure_logging",
    "env_flag",
    "get_catalog_config",
    "get_database_config",
    "get_database_uri",
    "get_storage_config",
    "optional_env",
]
