"""Runtime-checkable protocols for the collaborators sqlcompose talks to.

Drivers execute SQL text with named parameters and hand back a
:class:`RowsProtocol`; the schema inspector describes how a schema type maps
onto a table.
"""

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Optional, Protocol, runtime_checkable

if TYPE_CHECKING:
    from sqlcompose.utils.schema import FieldInfo

__all__ = ("DriverProtocol", "RowsProtocol", "SchemaInspectorProtocol")


@runtime_checkable
class RowsProtocol(Protocol):
    """An open result set. Must be closed by whoever obtained it."""

    @property
    def columns(self) -> "Sequence[str]":
        """Names of the selected columns, in select-list order."""
        ...

    def fetchone(self) -> "Optional[tuple[Any, ...]]":
        """Return the next row, or ``None`` when exhausted."""
        ...

    def fetchall(self) -> "list[tuple[Any, ...]]":
        """Return every remaining row."""
        ...

    def close(self) -> None:
        """Release the result set."""
        ...


@runtime_checkable
class DriverProtocol(Protocol):
    """Executes rendered statements against a database connection."""

    def execute(self, sql: str, parameters: "Mapping[str, Any]") -> RowsProtocol:
        """Run a statement that produces rows."""
        ...

    def execute_no_result(self, sql: str, parameters: "Mapping[str, Any]") -> None:
        """Run a statement whose result set, if any, is discarded."""
        ...

    def close(self) -> None:
        """Close the underlying connection."""
        ...


@runtime_checkable
class SchemaInspectorProtocol(Protocol):
    """Describes the table mapping of schema classes."""

    def fields(self, schema: Any) -> "tuple[FieldInfo, ...]":
        """Return all mapped fields of ``schema``."""
        ...

    def primary_key_fields(self, schema: Any) -> "tuple[FieldInfo, ...]":
        """Return the primary key fields of ``schema`` in declaration order."""
        ...

    def table_name(self, schema: Any) -> str:
        """Return the table ``schema`` is stored in."""
        ...
