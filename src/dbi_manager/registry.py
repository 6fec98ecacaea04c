"""Registry of named database sources.

SourceRegistry is the single place an application declares its database
connections. It stores sources by name, refuses duplicate names, and decides
which source is the default when a caller does not ask for one explicitly.

Example usage:
    registry = SourceRegistry()
    registry.add_source(name="default", handle=primary)
    registry.add_source(Source("reporting", handle=replica))

    source = registry.default_source()     # the "default" source
    source = registry.source_for_sql(sql)  # routed by the resolver

Unnamed sources:
    Any number of unnamed sources may be registered. The first one is held
    under the None key, so get_source(None) and has_source(None) see it.
    The rest are kept in registration order and only show up in sources()
    and source_count(). remove_source(None) drops all of them.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from dbi_manager.exceptions import (
    DuplicateNameError,
    NoDefaultSourceError,
    NoSourcesError,
)
from dbi_manager.resolvers import DefaultSourceResolver
from dbi_manager.source import Source

if TYPE_CHECKING:
    from dbi_manager.resolvers import SourceResolver

logger = logging.getLogger(__name__)

DEFAULT_SOURCE_NAME = "default"


class SourceRegistry:
    """In-memory collection of sources keyed by name.

    Not safe for concurrent mutation. Callers sharing a registry across
    threads must serialize add_source() and remove_source() themselves.

    Attributes:
        resolver: Policy used by source_for_sql().
    """

    def __init__(self, *, resolver: SourceResolver | None = None) -> None:
        """Initialize an empty registry.

        Args:
            resolver: Policy for source_for_sql(). Defaults to
                      DefaultSourceResolver.
        """
        self.resolver: SourceResolver = resolver or DefaultSourceResolver()
        self._named: dict[str, Source] = {}
        self._unnamed: list[Source] = []

    # Registration

    def add_source(self, source: Source | None = None, /, **params: Any) -> Source:
        """Add a source, either pre-built or from constructor parameters.

        Args:
            source: A Source instance.
            **params: Keyword arguments for Source(), used when no
                      instance is passed.

        Returns:
            The source that was added.

        Raises:
            TypeError: If both or neither of source and params are given.
            DuplicateNameError: If a source with the same name exists.
        """
        if source is not None and params:
            raise TypeError("Pass either a Source or Source parameters, not both")
        if source is not None:
            return self.add_source_object(source)
        if not params:
            raise TypeError("add_source() needs a Source or Source parameters")
        return self.add_source_from_params(**params)

    def add_source_object(self, source: Source) -> Source:
        """Add a pre-built source.

        Raises:
            DuplicateNameError: If a source with the same name exists.
        """
        name = source.name
        if name is None:
            self._unnamed.append(source)
            logger.debug(f"Added unnamed source ({len(self._unnamed)} unnamed)")
            return source

        if name in self._named:
            raise DuplicateNameError(name)

        self._named[name] = source
        logger.debug(f"Added source {name!r}")
        return source

    def add_source_from_params(self, **params: Any) -> Source:
        """Build a Source from keyword arguments and add it.

        The source is constructed before the registry is touched, so a
        construction error leaves the registry unchanged.
        """
        return self.add_source_object(Source(**params))

    def remove_source(self, name: str | None) -> None:
        """Remove the named source. Does nothing if it is not registered."""
        if name is None:
            if self._unnamed:
                logger.debug(f"Removed {len(self._unnamed)} unnamed source(s)")
            self._unnamed.clear()
            return

        if self._named.pop(name, None) is not None:
            logger.debug(f"Removed source {name!r}")

    # Lookup

    def get_source(self, name: str | None) -> Source | None:
        """Return the named source, or None if it is not registered."""
        if name is None:
            return self._unnamed[0] if self._unnamed else None
        return self._named.get(name)

    def has_source(self, name: str | None) -> bool:
        """Check if a source with this name is registered."""
        if name is None:
            return bool(self._unnamed)
        return name in self._named

    def sources(self) -> list[Source]:
        """Return all registered sources, named first, then unnamed."""
        return [*self._named.values(), *self._unnamed]

    def source_count(self) -> int:
        """Return the number of registered sources."""
        return len(self._named) + len(self._unnamed)

    def __len__(self) -> int:
        return self.source_count()

    def __contains__(self, name: object) -> bool:
        if name is not None and not isinstance(name, str):
            return False
        return self.has_source(name)

    # Resolution

    def default_source(self) -> Source:
        """Return the default source.

        With a single source, that source is the default whatever its name.
        With several, the one named "default" is returned.

        Raises:
            NoSourcesError: If the registry is empty.
            NoDefaultSourceError: If there are several sources and none is
                                  named "default".
        """
        count = self.source_count()
        if count == 0:
            raise NoSourcesError()
        if count == 1:
            return self.sources()[0]

        source = self._named.get(DEFAULT_SOURCE_NAME)
        if source is None:
            raise NoDefaultSourceError(DEFAULT_SOURCE_NAME)
        return source

    def source_for_sql(self, query: Any) -> Source:
        """Return the source a query should run against.

        The default resolver ignores the query and returns default_source().
        Pass a different resolver, or override this method in a subclass,
        to route queries by content.
        """
        return self.resolver.resolve(query, self)

    def __repr__(self) -> str:
        names = [s.name for s in self.sources()]
        return f"SourceRegistry(sources={names!r})"
