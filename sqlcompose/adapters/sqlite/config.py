"""SQLite database configuration."""

import sqlite3
from typing import TYPE_CHECKING, Any, ClassVar, Optional, TypedDict, Union, cast

from typing_extensions import NotRequired

from sqlcompose.adapters.sqlite.driver import SqliteDriver, handle_database_exceptions
from sqlcompose.config import DatabaseConfig
from sqlcompose.utils.logging import get_logger

if TYPE_CHECKING:
    from sqlglot.dialects.dialect import DialectType

    from sqlcompose.protocols import SchemaInspectorProtocol

__all__ = ("SqliteConfig", "SqliteConnectionParams")

logger = get_logger("adapters.sqlite")


class SqliteConnectionParams(TypedDict, total=False):
    """SQLite connection parameters."""

    database: NotRequired[str]
    timeout: NotRequired[float]
    detect_types: NotRequired[int]
    isolation_level: "NotRequired[Optional[str]]"
    check_same_thread: NotRequired[bool]
    cached_statements: NotRequired[int]
    uri: NotRequired[bool]


class SqliteConfig(DatabaseConfig[sqlite3.Connection, SqliteDriver]):
    """SQLite configuration. Each :meth:`create_connection` call opens a new connection."""

    driver_type: "ClassVar[type[SqliteDriver]]" = SqliteDriver
    dialect: "DialectType" = "sqlite"

    def __init__(
        self,
        *,
        connection_config: "Optional[Union[SqliteConnectionParams, dict[str, Any]]]" = None,
        dialect: "DialectType" = None,
        inspector: "Optional[SchemaInspectorProtocol]" = None,
    ) -> None:
        """Initialize SQLite configuration.

        Args:
            connection_config: Keyword arguments for :func:`sqlite3.connect`; ``database`` defaults to ``:memory:``.
            dialect: Dialect used to quote identifiers; defaults to ``sqlite``.
            inspector: Schema inspector handed to every created :class:`~sqlcompose.base.Database`.
        """
        config = dict(cast("dict[str, Any]", connection_config or {}))
        config.setdefault("database", ":memory:")
        database_path = str(config["database"])
        if database_path.startswith("file:") and not config.get("uri"):
            logger.debug("Database URI detected (%s) but uri=True not set; enabling URI mode.", database_path)
            config["uri"] = True
        super().__init__(connection_config=config, dialect=dialect, inspector=inspector)

    def create_connection(self) -> sqlite3.Connection:
        """Open a SQLite connection.

        Returns:
            sqlite3.Connection: A new connection.
        """
        logger.debug("Opening SQLite connection to %s", self.connection_config["database"])
        with handle_database_exceptions():
            return sqlite3.connect(**self.connection_config)
