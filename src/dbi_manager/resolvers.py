"""Source resolution policies.

A resolver decides which registered source a query should run against.
Using Python's Protocol (structural subtyping) allows for flexible
implementations without requiring inheritance.

Example usage:
    class ReportingResolver:
        def resolve(self, query: Any, registry: SourceRegistry) -> Source:
            if getattr(query, "is_report", False):
                return registry.get_source("reporting") or registry.default_source()
            return registry.default_source()

    registry = SourceRegistry(resolver=ReportingResolver())
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from dbi_manager.exceptions import SourceNotFoundError

if TYPE_CHECKING:
    from dbi_manager.registry import SourceRegistry
    from dbi_manager.source import Source


@runtime_checkable
class SourceResolver(Protocol):
    """Protocol for choosing the source a query should use."""

    def resolve(self, query: Any, registry: SourceRegistry) -> Source:
        """Pick a source for a query.

        Args:
            query: The query object. Opaque; may be None.
            registry: The registry to pick from.

        Returns:
            The source the query should run against.

        Raises:
            RegistryError: If no suitable source is registered.
        """
        ...


class DefaultSourceResolver:
    """Always resolve to the registry's default source, ignoring the query."""

    def resolve(self, query: Any, registry: SourceRegistry) -> Source:
        return registry.default_source()


class NamedSourceResolver:
    """Always resolve to one fixed source by name."""

    def __init__(self, name: str) -> None:
        self.name = name

    def resolve(self, query: Any, registry: SourceRegistry) -> Source:
        source = registry.get_source(self.name)
        if source is None:
            raise SourceNotFoundError(self.name)
        return source

    def __repr__(self) -> str:
        return f"NamedSourceResolver(name={self.name!r})"
