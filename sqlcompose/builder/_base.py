"""The rendered, immutable form of a composed statement."""

from dataclasses import dataclass, field
from typing import Any

__all__ = ("Query",)


@dataclass(frozen=True)
class Query:
    """SQL text with named (``:name``) placeholders and the values bound to them."""

    sql: str
    params: "dict[str, Any]" = field(default_factory=dict)

    def __str__(self) -> str:
        return self.sql
