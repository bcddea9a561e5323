"""Clause state accumulated by :class:`~sqlcompose.builder.SelectQuery`."""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from sqlcompose.expressions import Expression

__all__ = ("Join", "JoinType", "SelectClauses", "SetOperation", "SetOperator")


class JoinType(str, Enum):
    INNER = "INNER"
    LEFT = "LEFT"
    RIGHT = "RIGHT"
    CROSS = "CROSS"


class SetOperator(str, Enum):
    UNION = "UNION"
    UNION_ALL = "UNION ALL"


@dataclass(frozen=True)
class Join:
    join_type: JoinType
    table: str
    on: "Optional[Expression]" = None


@dataclass(frozen=True)
class SetOperation:
    """A statement appended with UNION / UNION ALL, captured as rendered text."""

    operator: SetOperator
    sql: str
    params: "dict[str, Any]" = field(default_factory=dict)


@dataclass
class SelectClauses:
    """Everything a SELECT statement is rendered from.

    ``limit``/``offset`` of ``None`` mean the clause is absent.
    """

    columns: "list[str]" = field(default_factory=list)
    distinct: bool = False
    option: str = ""
    tables: "list[str]" = field(default_factory=list)
    joins: "list[Join]" = field(default_factory=list)
    where: "Optional[Expression]" = None
    group_by: "list[str]" = field(default_factory=list)
    having: "Optional[Expression]" = None
    order_by: "list[str]" = field(default_factory=list)
    limit: "Optional[int]" = None
    offset: "Optional[int]" = None
    unions: "list[SetOperation]" = field(default_factory=list)
    bound_params: "dict[str, Any]" = field(default_factory=dict)

    def copy(self) -> "SelectClauses":
        """Return an independent copy; expressions are immutable and shared."""
        return replace(
            self,
            columns=list(self.columns),
            tables=list(self.tables),
            joins=list(self.joins),
            group_by=list(self.group_by),
            order_by=list(self.order_by),
            unions=list(self.unions),
            bound_params=dict(self.bound_params),
        )
