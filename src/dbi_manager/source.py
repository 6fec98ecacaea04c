"""A named database connection source.

A Source wraps a single database connection handle. The handle is opaque to
the registry: it can be any object the caller already holds (an asyncpg
connection, a SQLAlchemy engine, a test double), or it can be opened lazily
from credentials the first time connect() is awaited.

Usage:
    from dbi_manager import Source

    # Wrap an existing handle
    source = Source("default", handle=conn)

    # Or open one on demand
    source = Source.from_credentials(
        get_source_credentials("prod/replica"), name="reporting"
    )
    async with source as conn:
        await conn.fetchval("SELECT 1")
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

import asyncpg

from dbi_manager.config.secrets import DatabaseCredentials
from dbi_manager.exceptions import SourceConfigurationError, SourceConnectionError

logger = logging.getLogger(__name__)

# Keyword arguments set from credentials and connect_timeout
RESERVED_ATTRIBUTES = frozenset(
    {"dsn", "host", "port", "database", "user", "password", "timeout"}
)


class Source:
    """A named handle to a database connection.

    The name, credentials and attributes are fixed at construction. The only
    state that changes afterwards is the handle opened by connect().

    Attributes:
        name: Source name, or None for an anonymous source.
        credentials: Parameters used to open a handle, if no handle was given.
        attributes: Extra keyword arguments passed to asyncpg.connect().
        connect_timeout: Timeout in seconds for opening a handle.
    """

    __slots__ = (
        "_attributes",
        "_connect_timeout",
        "_connect_lock",
        "_credentials",
        "_handle",
        "_name",
        "_owns_handle",
    )

    def __init__(
        self,
        name: str | None = None,
        *,
        handle: Any | None = None,
        credentials: DatabaseCredentials | None = None,
        attributes: Mapping[str, Any] | None = None,
        connect_timeout: float = 10.0,
    ) -> None:
        """Initialize the source.

        Args:
            name: Source name. Leave unset for a single anonymous source.
            handle: An already open connection handle.
            credentials: Credentials to open a handle from when none is given.
            attributes: Driver options for asyncpg.connect().
            connect_timeout: Timeout in seconds for opening a handle.

        Raises:
            SourceConfigurationError: If neither handle nor credentials is given,
                or attributes set a connection parameter.
        """
        if handle is None and credentials is None:
            raise SourceConfigurationError(
                "A source needs either a handle or credentials", source_name=name
            )
        clashes = RESERVED_ATTRIBUTES.intersection(attributes or {})
        if clashes:
            raise SourceConfigurationError(
                f"Attributes may not set connection parameters: {sorted(clashes)}",
                source_name=name,
            )
        self._name = name
        self._handle = handle
        self._credentials = credentials
        self._attributes: Mapping[str, Any] = MappingProxyType(dict(attributes or {}))
        self._connect_timeout = connect_timeout
        self._owns_handle = False
        self._connect_lock = asyncio.Lock()

    @classmethod
    def from_credentials(
        cls,
        credentials: DatabaseCredentials,
        *,
        name: str | None = None,
        **kwargs: Any,
    ) -> Source:
        """Create a source that opens its handle from credentials."""
        return cls(name, credentials=credentials, **kwargs)

    @property
    def name(self) -> str | None:
        return self._name

    @property
    def credentials(self) -> DatabaseCredentials | None:
        return self._credentials

    @property
    def attributes(self) -> Mapping[str, Any]:
        return self._attributes

    @property
    def connect_timeout(self) -> float:
        return self._connect_timeout

    @property
    def dsn(self) -> str | None:
        """Connection string built from the credentials, if any."""
        if self._credentials is None:
            return None
        return self._credentials.connection_string

    @property
    def handle(self) -> Any | None:
        """The current handle, or None if none has been opened yet."""
        return self._handle

    @property
    def is_connected(self) -> bool:
        """Check if the source holds a handle."""
        return self._handle is not None

    async def connect(self) -> Any:
        """Return the handle, opening one from the credentials if needed.

        Concurrent callers share one handle: only the first opens it.

        Returns:
            The connection handle.

        Raises:
            SourceConnectionError: If the driver fails to connect.
        """
        if self._handle is not None:
            return self._handle

        async with self._connect_lock:
            if self._handle is not None:
                return self._handle

            credentials = self._credentials
            assert credentials is not None

            try:
                self._handle = await asyncpg.connect(
                    **credentials.dsn,
                    timeout=self._connect_timeout,
                    **self._attributes,
                )
            except Exception as e:
                raise SourceConnectionError(
                    f"Failed to connect to database: {e}",
                    source_name=self._name,
                    cause=e,
                ) from e

            self._owns_handle = True
            logger.info(
                f"Source {self._name!r} connected to "
                f"{credentials.database}@{credentials.host}"
            )
            return self._handle

    async def disconnect(self) -> None:
        """Close a handle this source opened itself.

        Handles supplied by the caller are left open; the caller owns them.
        """
        if self._handle is not None and self._owns_handle:
            await self._handle.close()
            self._handle = None
            self._owns_handle = False
            logger.info(f"Source {self._name!r} connection closed")

    async def __aenter__(self) -> Any:
        """Async context manager entry."""
        return await self.connect()

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        """Async context manager exit."""
        await self.disconnect()

    def __repr__(self) -> str:
        return f"Source(name={self._name!r}, connected={self.is_connected})"
