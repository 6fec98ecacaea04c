"""Registry configuration using pydantic-settings.

Loads configuration from environment variables with sensible defaults.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class ManagerSettings(BaseSettings):
    """Configuration for building a SourceRegistry.

    All settings can be overridden via environment variables.
    The prefix DBI_ is used for all settings.

    Example:
        export DBI_SOURCES='{"default": "prod/primary", "reporting": "prod/replica"}'
        export DBI_USE_ENV_CREDENTIALS=false
    """

    model_config = SettingsConfigDict(
        env_prefix="DBI_",
        case_sensitive=False,
    )

    # Source name -> AWS Secrets Manager secret id
    sources: dict[str, str] = {}

    # Register a source from DB_* environment variables when they are set
    use_env_credentials: bool = True
    env_source_name: str = "default"

    # Passed to asyncpg.connect() when a source opens its own handle
    connect_timeout: float = 10.0


@lru_cache
def get_settings() -> ManagerSettings:
    """Get cached settings instance.

    Returns:
        ManagerSettings loaded from environment.
    """
    return ManagerSettings()
