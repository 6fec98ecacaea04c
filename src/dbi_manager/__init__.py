"""Manage a set of named database sources.

Example:
    from dbi_manager import SourceRegistry

    registry = SourceRegistry()
    registry.add_source(handle=conn)
    source = registry.default_source()
"""

from dbi_manager.exceptions import (
    DBIManagerError,
    DuplicateNameError,
    NoDefaultSourceError,
    NoSourcesError,
    RegistryError,
    SecretsManagerError,
    SourceConfigurationError,
    SourceConnectionError,
    SourceNotFoundError,
)
from dbi_manager.loader import build_registry
from dbi_manager.registry import DEFAULT_SOURCE_NAME, SourceRegistry
from dbi_manager.resolvers import (
    DefaultSourceResolver,
    NamedSourceResolver,
    SourceResolver,
)
from dbi_manager.source import Source

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_SOURCE_NAME",
    "DBIManagerError",
    "DefaultSourceResolver",
    "DuplicateNameError",
    "NamedSourceResolver",
    "NoDefaultSourceError",
    "NoSourcesError",
    "RegistryError",
    "SecretsManagerError",
    "Source",
    "SourceConfigurationError",
    "SourceConnectionError",
    "SourceNotFoundError",
    "SourceRegistry",
    "SourceResolver",
    "build_registry",
]
