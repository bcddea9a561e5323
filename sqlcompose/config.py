"""Database configuration base class."""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, ClassVar, Generic, Optional, TypeVar

from sqlcompose.base import Database

if TYPE_CHECKING:
    from collections.abc import Generator

    from sqlglot.dialects.dialect import DialectType

    from sqlcompose.protocols import SchemaInspectorProtocol

__all__ = ("DatabaseConfig",)

ConnectionT = TypeVar("ConnectionT")
DriverT = TypeVar("DriverT")


class DatabaseConfig(ABC, Generic[ConnectionT, DriverT]):
    """Connection settings for one database, and the factory for its handles."""

    driver_type: "ClassVar[type[Any]]"
    dialect: "DialectType" = None

    def __init__(
        self,
        *,
        connection_config: "Optional[dict[str, Any]]" = None,
        dialect: "DialectType" = None,
        inspector: "Optional[SchemaInspectorProtocol]" = None,
    ) -> None:
        self.connection_config = dict(connection_config or {})
        if dialect is not None:
            self.dialect = dialect
        self.inspector = inspector

    def __repr__(self) -> str:
        return f"{type(self).__name__}(connection_config={self.connection_config!r})"

    @abstractmethod
    def create_connection(self) -> ConnectionT:
        """Open a new connection."""
        raise NotImplementedError

    @contextmanager
    def provide_connection(self) -> "Generator[ConnectionT, None, None]":
        """Yield a new connection and close it afterwards."""
        connection = self.create_connection()
        try:
            yield connection
        finally:
            connection.close()  # type: ignore[attr-defined]

    def create_database(self) -> Database:
        """Return a :class:`Database` owning a fresh connection. Closing it closes the connection."""
        driver = self.driver_type(self.create_connection())
        return Database(driver, dialect=self.dialect, inspector=self.inspector)

    @contextmanager
    def provide_database(self) -> "Generator[Database, None, None]":
        """Yield a :class:`Database` and close it afterwards."""
        database = self.create_database()
        try:
            yield database
        finally:
            database.close()
