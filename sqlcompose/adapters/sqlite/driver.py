import contextlib
import logging
import sqlite3
from collections.abc import Mapping
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Optional

from sqlcompose.exceptions import DatabaseError
from sqlcompose.utils.logging import get_logger, log_with_context

if TYPE_CHECKING:
    from collections.abc import Generator, Sequence
    from types import TracebackType

__all__ = ("SqliteDriver", "SqliteRows")

logger = get_logger("adapters.sqlite")


class SqliteRows:
    """Result set backed by an open :class:`sqlite3.Cursor`."""

    __slots__ = ("_columns", "cursor")

    def __init__(self, cursor: "sqlite3.Cursor") -> None:
        self.cursor = cursor
        self._columns = tuple(column[0] for column in cursor.description or ())

    @property
    def columns(self) -> "Sequence[str]":
        return self._columns

    def fetchone(self) -> "Optional[tuple[Any, ...]]":
        with handle_database_exceptions():
            row = self.cursor.fetchone()
        return tuple(row) if row is not None else None

    def fetchall(self) -> "list[tuple[Any, ...]]":
        with handle_database_exceptions():
            return [tuple(row) for row in self.cursor.fetchall()]

    def close(self) -> None:
        with contextlib.suppress(sqlite3.ProgrammingError):
            self.cursor.close()

    def __enter__(self) -> "SqliteRows":
        return self

    def __exit__(
        self,
        exc_type: "Optional[type[BaseException]]",
        exc_val: "Optional[BaseException]",
        exc_tb: "Optional[TracebackType]",
    ) -> None:
        self.close()


@contextmanager
def handle_database_exceptions() -> "Generator[None, None, None]":
    """Wrap SQLite errors in :class:`DatabaseError`."""
    try:
        yield
    except sqlite3.Error as e:
        msg = f"SQLite database error: {e}"
        raise DatabaseError(msg) from e


class SqliteDriver:
    """Synchronous SQLite driver using named-colon placeholders."""

    dialect = "sqlite"

    def __init__(self, connection: "sqlite3.Connection") -> None:
        self.connection = connection

    def execute(self, sql: str, parameters: "Mapping[str, Any]") -> SqliteRows:
        log_with_context(logger, logging.DEBUG, "Executing SQL", sql=sql, parameter_count=len(parameters))
        cursor = self.connection.cursor()
        try:
            with handle_database_exceptions():
                cursor.execute(sql, dict(parameters))
        except DatabaseError:
            cursor.close()
            raise
        return SqliteRows(cursor)

    def execute_no_result(self, sql: str, parameters: "Mapping[str, Any]") -> None:
        log_with_context(logger, logging.DEBUG, "Executing SQL", sql=sql, parameter_count=len(parameters))
        with handle_database_exceptions():
            self.connection.execute(sql, dict(parameters)).close()
            if self.connection.in_transaction:
                self.connection.commit()

    def close(self) -> None:
        logger.debug("Closing SQLite connection")
        with handle_database_exceptions():
            self.connection.close()
