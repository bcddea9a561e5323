"""Fluent SELECT statement building.

This module provides the :class:`SelectQuery` builder and the rendered
:class:`Query` it produces.
"""

from typing import Optional

from sqlglot.dialects.dialect import DialectType

from sqlcompose.builder._base import Query
from sqlcompose.builder._clauses import Join, JoinType, SelectClauses, SetOperation, SetOperator
from sqlcompose.builder._render import render_select
from sqlcompose.builder._select import SelectQuery

__all__ = (
    "Join",
    "JoinType",
    "Query",
    "SelectClauses",
    "SelectQuery",
    "SetOperation",
    "SetOperator",
    "render_select",
    "select",
)


def select(*columns: str, dialect: Optional[DialectType] = None) -> SelectQuery:
    """Create a SELECT builder that is not bound to a database.

    Args:
        *columns: Optional columns to select. If not provided, selects all columns.
        dialect: SQL dialect used to quote identifiers; defaults to ``mysql``.

    Returns:
        SelectQuery: A new builder; it can render but not execute.
    """
    return SelectQuery(dialect=dialect).select(*columns)
