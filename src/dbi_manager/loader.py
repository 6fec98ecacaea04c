"""Build a SourceRegistry from configuration.

Usage:
    from dbi_manager.loader import build_registry

    # DBI_SOURCES='{"default": "prod/primary", "reporting": "prod/replica"}'
    registry = build_registry()
    source = registry.default_source()
"""

from __future__ import annotations

import logging

from dbi_manager.config.secrets import get_env_credentials, get_source_credentials
from dbi_manager.config.settings import ManagerSettings, get_settings
from dbi_manager.exceptions import DuplicateNameError
from dbi_manager.registry import SourceRegistry
from dbi_manager.source import Source

logger = logging.getLogger(__name__)


def build_registry(
    settings: ManagerSettings | None = None,
    registry: SourceRegistry | None = None,
) -> SourceRegistry:
    """Register the sources described by the settings.

    Each entry in settings.sources becomes a source whose credentials come
    from the given AWS secret. If use_env_credentials is set and the DB_*
    environment variables are present, one more source named
    env_source_name is added from them.

    Args:
        settings: Settings to read. Defaults to get_settings().
        registry: Registry to add to. A new one is created if not given.

    Returns:
        The populated registry.

    Raises:
        SecretsManagerError: If a configured secret cannot be read.
        DuplicateNameError: If a configured name is already registered,
                            or the env source reuses a configured name.

    The registry is only modified once every source has been built, so
    on error it is left as it was.
    """
    if settings is None:
        settings = get_settings()
    registry = registry if registry is not None else SourceRegistry()

    pending: list[tuple[Source, str]] = []
    for name, secret_id in settings.sources.items():
        credentials = get_source_credentials(secret_id)
        pending.append(
            (
                Source.from_credentials(
                    credentials,
                    name=name,
                    connect_timeout=settings.connect_timeout,
                ),
                f"secret {secret_id!r}",
            )
        )

    if settings.use_env_credentials:
        credentials = get_env_credentials()
        if credentials is not None:
            pending.append(
                (
                    Source.from_credentials(
                        credentials,
                        name=settings.env_source_name,
                        connect_timeout=settings.connect_timeout,
                    ),
                    "environment variables",
                )
            )

    seen: set[str] = set()
    for source, _ in pending:
        name = source.name or ""
        if name in seen or registry.has_source(name):
            raise DuplicateNameError(name)
        seen.add(name)

    for source, origin in pending:
        registry.add_source(source)
        logger.info(f"Registered source {source.name!r} from {origin}")

    return registry
