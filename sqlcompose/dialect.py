"""Identifier quoting for the supported SQL dialects."""

import re
from functools import lru_cache
from typing import Final

from sqlglot import exp
from sqlglot.dialects.dialect import Dialect, DialectType

__all__ = ("DEFAULT_DIALECT", "IdentifierQuoter")

DEFAULT_DIALECT: Final = "mysql"

# "name AS alias" or "name alias"; the alias is a plain (optionally dotted) word.
_ALIAS_RE: Final = re.compile(r"(?i:\s+as\s+|\s+)([\w\-.]+)$")
_DIRECTION_RE: Final = re.compile(r"\s+((?i:ASC|DESC))$")
_VERBATIM_MARKERS: Final = ("(", "{{", "[[")


@lru_cache(maxsize=1024)
def _quote_simple(name: str, dialect: str) -> str:
    return exp.to_identifier(name, quoted=True).sql(dialect=dialect)


class IdentifierQuoter:
    """Quotes table and column names the way ``dialect`` expects.

    Quoting is delegated to sqlglot, so ``mysql`` produces backticks while
    ``sqlite`` and ``postgres`` produce double quotes. Raw expression text is
    never routed through this class.
    """

    __slots__ = ("_dialect_name", "dialect")

    def __init__(self, dialect: "DialectType" = None) -> None:
        self.dialect = dialect if dialect is not None else DEFAULT_DIALECT
        self._dialect_name = self._resolve_name(self.dialect)

    @staticmethod
    def _resolve_name(dialect: "DialectType") -> str:
        if isinstance(dialect, str):
            return dialect
        instance = Dialect.get_or_raise(dialect)
        return type(instance).__name__.lower()

    def __repr__(self) -> str:
        return f"IdentifierQuoter(dialect={self._dialect_name!r})"

    def quote_simple_name(self, name: str) -> str:
        """Quote a single identifier segment. ``*`` and pre-quoted names are left alone."""
        if name == "*" or self._is_quoted(name):
            return name
        return _quote_simple(name, self._dialect_name)

    def quote_table_name(self, name: str) -> str:
        """Quote a possibly schema-qualified table name (``schema.table``)."""
        if any(marker in name for marker in _VERBATIM_MARKERS):
            return name
        return ".".join(self.quote_simple_name(part) for part in name.split("."))

    def quote_column_name(self, name: str) -> str:
        """Quote a possibly table-qualified column name (``table.column``)."""
        if any(marker in name for marker in _VERBATIM_MARKERS):
            return name
        prefix = ""
        if "." in name:
            table, name = name.rsplit(".", 1)
            prefix = self.quote_table_name(table) + "."
        return prefix + self.quote_simple_name(name)

    def quote_table_with_alias(self, table: str) -> str:
        """Quote ``table``, ``table alias`` or ``table AS alias``."""
        table = table.strip()
        match = _ALIAS_RE.search(table)
        if match is None:
            return self.quote_table_name(table)
        name = table[: match.start()]
        return f"{self.quote_table_name(name)} {self.quote_simple_name(match.group(1))}"

    def quote_select_column(self, column: str) -> str:
        """Quote a select-list entry, keeping an ``AS alias`` suffix."""
        column = column.strip()
        match = _ALIAS_RE.search(column)
        if match is None:
            return self.quote_column_name(column)
        name = column[: match.start()]
        return f"{self.quote_column_name(name)} AS {self.quote_simple_name(match.group(1))}"

    def quote_order_column(self, column: str) -> str:
        """Quote an ORDER BY entry; a trailing ``ASC``/``DESC`` is passed through."""
        column = column.strip()
        match = _DIRECTION_RE.search(column)
        if match is None:
            return self.quote_column_name(column)
        return f"{self.quote_column_name(column[: match.start()])} {match.group(1)}"

    def _is_quoted(self, name: str) -> bool:
        return len(name) > 1 and name[0] == name[-1] and name[0] in "`\""
