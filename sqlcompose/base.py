"""The database handle queries are created from and executed against."""

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Optional

from sqlcompose.builder import SelectQuery
from sqlcompose.dialect import IdentifierQuoter
from sqlcompose.utils.logging import get_logger
from sqlcompose.utils.schema import SchemaInspector

if TYPE_CHECKING:
    from types import TracebackType

    from sqlglot.dialects.dialect import DialectType

    from sqlcompose.protocols import DriverProtocol, RowsProtocol, SchemaInspectorProtocol

__all__ = ("Database",)

logger = get_logger("base")


class Database:
    """Couples a driver with the dialect used to quote identifiers.

    Example:
        >>> with Database(driver, dialect="sqlite") as db:
        ...     users = db.select("id", "name").from_("users").all(list[User])
    """

    __slots__ = ("dialect", "driver", "inspector", "quoter")

    def __init__(
        self,
        driver: "DriverProtocol",
        dialect: "DialectType" = None,
        inspector: "Optional[SchemaInspectorProtocol]" = None,
    ) -> None:
        self.driver = driver
        self.quoter = IdentifierQuoter(dialect)
        self.dialect = self.quoter.dialect
        self.inspector: SchemaInspectorProtocol = inspector if inspector is not None else SchemaInspector()

    def __repr__(self) -> str:
        return f"Database(driver={type(self.driver).__name__}, dialect={self.dialect!r})"

    def __enter__(self) -> "Database":
        return self

    def __exit__(
        self,
        exc_type: "Optional[type[BaseException]]",
        exc_val: "Optional[BaseException]",
        exc_tb: "Optional[TracebackType]",
    ) -> None:
        self.close()

    def select(self, *columns: str) -> SelectQuery:
        """Start a SELECT query bound to this database.

        Args:
            *columns: Columns to select. If not provided, selects all columns.

        Returns:
            SelectQuery: A builder that can render and execute.
        """
        return SelectQuery(database=self).select(*columns)

    def execute(self, sql: str, parameters: "Optional[Mapping[str, Any]]" = None) -> None:
        """Run a statement that returns no rows (DDL, INSERT, UPDATE...)."""
        self.driver.execute_no_result(sql, dict(parameters or {}))

    def query(self, sql: str, parameters: "Optional[Mapping[str, Any]]" = None) -> "RowsProtocol":
        """Run a raw statement and return its open result set. The caller must close it."""
        return self.driver.execute(sql, dict(parameters or {}))

    def quote_table_name(self, name: str) -> str:
        return self.quoter.quote_table_name(name)

    def quote_column_name(self, name: str) -> str:
        return self.quoter.quote_column_name(name)

    def close(self) -> None:
        logger.debug("Closing database handle %r", self)
        self.driver.close()
