"""Exception hierarchy for dbi_manager.

All errors raised by the package derive from DBIManagerError so callers can
catch the whole family with a single except clause:

    try:
        source = registry.default_source()
    except NoDefaultSourceError:
        source = registry.get_source("primary")
"""

from __future__ import annotations


class DBIManagerError(Exception):
    """Base exception for dbi_manager errors."""

    def __init__(
        self,
        message: str,
        source_name: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize the error.

        Args:
            message: Human-readable error description
            source_name: Name of the source involved, if any
            cause: Original exception that caused this error
        """
        super().__init__(message)
        self.source_name = source_name
        self.cause = cause

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.source_name:
            parts.append(f"source={self.source_name}")
        return " ".join(parts)


class RegistryError(DBIManagerError):
    """Raised when a registry operation cannot be satisfied."""


class DuplicateNameError(RegistryError):
    """Raised when adding a source whose name is already registered."""

    def __init__(self, source_name: str) -> None:
        super().__init__(
            f'You already have a source named "{source_name}".',
            source_name=source_name,
        )


class NoSourcesError(RegistryError):
    """Raised when a default source is requested from an empty registry."""

    def __init__(self) -> None:
        super().__init__(
            "This registry has no default source because it has no sources at all."
        )


class NoDefaultSourceError(RegistryError):
    """Raised when several sources exist and none is named as the default."""

    def __init__(self, default_name: str = "default") -> None:
        super().__init__(
            f'This registry has multiple sources, but none are named "{default_name}".'
        )
        self.default_name = default_name


class SourceNotFoundError(RegistryError):
    """Raised when a resolver asks for a source that is not registered."""

    def __init__(self, source_name: str) -> None:
        super().__init__(f"No source named {source_name!r}.", source_name=source_name)


class SourceConfigurationError(DBIManagerError):
    """Raised when a Source is constructed with unusable parameters."""


class SourceConnectionError(DBIManagerError):
    """Raised when a Source fails to open its connection handle."""


class SecretsManagerError(DBIManagerError):
    """Raised when credentials cannot be retrieved."""
