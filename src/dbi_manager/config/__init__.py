"""Configuration management."""

from dbi_manager.config.secrets import (
    DatabaseCredentials,
    clear_credentials_cache,
    get_env_credentials,
    get_source_credentials,
)
from dbi_manager.config.settings import ManagerSettings, get_settings

__all__ = [
    "DatabaseCredentials",
    "ManagerSettings",
    "clear_credentials_cache",
    "get_env_credentials",
    "get_settings",
    "get_source_credentials",
]
