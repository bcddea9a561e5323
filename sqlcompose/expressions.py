"""Boolean expression fragments used by WHERE, HAVING and JOIN ... ON.

An expression is one of :class:`RawExp`, :class:`HashExp`,
:class:`CompoundExp` or ``None`` (no filter). :func:`render_expression`
is the only renderer; it appends each fragment's parameters to the
parameter set it is given and returns the SQL text.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional, Union

from sqlcompose.exceptions import SQLBuilderError
from sqlcompose.parameters import ParameterSet

if TYPE_CHECKING:
    from sqlcompose.dialect import IdentifierQuoter

__all__ = (
    "CompoundExp",
    "Connector",
    "Expression",
    "ExpressionLike",
    "HashExp",
    "RawExp",
    "and_",
    "as_expression",
    "combine",
    "new_exp",
    "or_",
    "param_names",
    "render_expression",
)


class Connector(str, Enum):
    """Boolean connector joining the parts of a :class:`CompoundExp`."""

    AND = "AND"
    OR = "OR"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class RawExp:
    """A literal SQL fragment with the parameters its placeholders refer to."""

    sql: str
    params: "Mapping[str, Any]" = field(default_factory=dict)


@dataclass(frozen=True)
class HashExp:
    """Column/value equality pairs ANDed together.

    ``None`` renders ``col IS NULL``; a list, tuple or set renders
    ``col IN (...)`` (``0=1`` when empty).
    """

    values: "Mapping[str, Any]" = field(default_factory=dict)


@dataclass(frozen=True)
class CompoundExp:
    """Ordered ``(connector, expression)`` pairs; the first connector is ignored."""

    parts: "tuple[tuple[Connector, Expression], ...]" = ()

    def connectors(self) -> "set[Connector]":
        return {connector for connector, _ in self.parts[1:]}


Expression = Union[RawExp, HashExp, CompoundExp]
ExpressionLike = Union[Expression, str, Mapping[str, Any], None]

_COLLECTION_TYPES = (list, tuple, set, frozenset)


def new_exp(sql: str, params: "Optional[Mapping[str, Any]]" = None) -> RawExp:
    """Create a raw SQL fragment, e.g. ``new_exp("age > :age", {"age": 30})``."""
    return RawExp(sql, dict(params or {}))


def as_expression(value: ExpressionLike) -> "Optional[Expression]":
    """Coerce builder arguments: ``str`` becomes :class:`RawExp`, a mapping becomes :class:`HashExp`."""
    if value is None or isinstance(value, (RawExp, HashExp, CompoundExp)):
        return value
    if isinstance(value, str):
        return RawExp(value)
    if isinstance(value, Mapping):
        return HashExp(dict(value))
    msg = f"Cannot use {type(value).__name__} as a SQL expression"
    raise SQLBuilderError(msg)


def combine(
    left: "Optional[Expression]", right: "Optional[Expression]", connector: Connector
) -> "Optional[Expression]":
    """Join two expressions with ``connector``.

    A missing operand yields the other one unchanged. A compound that only
    uses ``connector`` is extended in place of being nested, so repeated
    ANDs stay flat while mixing AND and OR keeps the grouping.
    """
    if left is None:
        return right
    if right is None:
        return left
    if isinstance(left, CompoundExp) and left.connectors() <= {connector}:
        left_parts = left.parts
    else:
        left_parts = ((connector, left),)
    if isinstance(right, CompoundExp) and right.connectors() <= {connector} and right.parts:
        right_parts = tuple((connector, exp) for _, exp in right.parts)
    else:
        right_parts = ((connector, right),)
    return CompoundExp(left_parts + right_parts)


def _join(connector: Connector, expressions: "tuple[ExpressionLike, ...]") -> "Optional[Expression]":
    result: "Optional[Expression]" = None
    for value in expressions:
        result = combine(result, as_expression(value), connector)
    return result


def and_(*expressions: ExpressionLike) -> "Optional[Expression]":
    """AND together any number of expressions, skipping ``None``."""
    return _join(Connector.AND, expressions)


def or_(*expressions: ExpressionLike) -> "Optional[Expression]":
    """OR together any number of expressions, skipping ``None``."""
    return _join(Connector.OR, expressions)


def param_names(exp: "Optional[Expression]") -> "set[str]":
    """Return the names bound by raw fragments anywhere inside ``exp``."""
    if isinstance(exp, RawExp):
        return set(exp.params)
    if isinstance(exp, CompoundExp):
        names: "set[str]" = set()
        for _, part in exp.parts:
            names.update(param_names(part))
        return names
    return set()


def _render_hash(exp: HashExp, quoter: "IdentifierQuoter", params: "ParameterSet") -> str:
    parts = []
    for column in sorted(exp.values):
        value = exp.values[column]
        quoted = quoter.quote_column_name(column)
        if value is None:
            parts.append(f"{quoted} IS NULL")
        elif isinstance(value, _COLLECTION_TYPES):
            items = sorted(value, key=repr) if isinstance(value, (set, frozenset)) else list(value)
            if not items:
                parts.append("0=1")
            else:
                placeholders = ", ".join(params.add(item) for item in items)
                parts.append(f"{quoted} IN ({placeholders})")
        else:
            parts.append(f"{quoted}={params.add(value)}")
    return " AND ".join(parts)


def _render_compound(exp: CompoundExp, quoter: "IdentifierQuoter", params: "ParameterSet") -> str:
    rendered = []
    for connector, part in exp.parts:
        sql = render_expression(part, quoter, params)
        if sql:
            rendered.append((connector, sql))
    if not rendered:
        return ""
    if len(rendered) == 1:
        return rendered[0][1]
    text = f"({rendered[0][1]})"
    for connector, sql in rendered[1:]:
        text = f"{text} {connector} ({sql})"
    return text


def render_expression(
    exp: "Optional[Expression]", quoter: "IdentifierQuoter", params: "ParameterSet"
) -> str:
    """Render ``exp`` to SQL text, adding its parameters to ``params``.

    Rendering is pure with respect to ``exp``: the same expression rendered
    into equal parameter sets produces identical text and parameters.
    """
    if exp is None:
        return ""
    if isinstance(exp, RawExp):
        params.update(exp.params)
        return exp.sql
    if isinstance(exp, HashExp):
        return _render_hash(exp, quoter, params)
    if isinstance(exp, CompoundExp):
        return _render_compound(exp, quoter, params)
    msg = f"Unsupported expression type: {type(exp).__name__}"
    raise SQLBuilderError(msg)
