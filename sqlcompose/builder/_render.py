"""Turns :class:`SelectClauses` into SQL text and an ordered parameter set."""

from typing import TYPE_CHECKING

from sqlcompose.builder._base import Query
from sqlcompose.expressions import param_names, render_expression
from sqlcompose.parameters import ParameterSet

if TYPE_CHECKING:
    from sqlcompose.builder._clauses import SelectClauses
    from sqlcompose.dialect import IdentifierQuoter

__all__ = ("clause_param_names", "render_select")


def clause_param_names(clauses: "SelectClauses") -> "set[str]":
    """Names the statement binds explicitly: raw fragment, union and ``bind()`` parameters."""
    names = set(clauses.bound_params)
    names.update(param_names(clauses.where))
    names.update(param_names(clauses.having))
    for join in clauses.joins:
        names.update(param_names(join.on))
    for union in clauses.unions:
        names.update(union.params)
    return names


def _select_list(clauses: "SelectClauses", quoter: "IdentifierQuoter") -> str:
    parts = ["SELECT"]
    if clauses.distinct:
        parts.append("DISTINCT")
    if clauses.option:
        parts.append(clauses.option)
    if clauses.columns:
        parts.append(", ".join(quoter.quote_select_column(column) for column in clauses.columns))
    else:
        parts.append("*")
    return " ".join(parts)


def render_select(clauses: "SelectClauses", quoter: "IdentifierQuoter") -> Query:
    """Render ``clauses`` in fixed clause order.

    SELECT, FROM, JOIN, WHERE, GROUP BY, HAVING, ORDER BY, LIMIT/OFFSET and
    finally the UNION tail. Empty clauses are omitted. Parameters follow the
    same order; values from ``bind``/``and_bind`` come last.
    """
    reserved = clause_param_names(clauses)
    params = ParameterSet(reserved=reserved)

    parts = [_select_list(clauses, quoter)]

    if clauses.tables:
        parts.append("FROM " + ", ".join(quoter.quote_table_with_alias(table) for table in clauses.tables))

    for join in clauses.joins:
        text = f"{join.join_type.value} JOIN {quoter.quote_table_with_alias(join.table)}"
        on = render_expression(join.on, quoter, params)
        if on:
            text = f"{text} ON {on}"
        parts.append(text)

    where = render_expression(clauses.where, quoter, params)
    if where:
        parts.append(f"WHERE {where}")

    if clauses.group_by:
        parts.append("GROUP BY " + ", ".join(quoter.quote_column_name(column) for column in clauses.group_by))

    having = render_expression(clauses.having, quoter, params)
    if having:
        parts.append(f"HAVING {having}")

    if clauses.order_by:
        parts.append("ORDER BY " + ", ".join(quoter.quote_order_column(column) for column in clauses.order_by))

    if clauses.limit is not None and clauses.limit >= 0:
        parts.append(f"LIMIT {clauses.limit}")
    if clauses.offset is not None and clauses.offset >= 0:
        parts.append(f"OFFSET {clauses.offset}")

    sql = " ".join(parts)

    if clauses.unions:
        sql = f"({sql})" + "".join(f" {union.operator.value} ({union.sql})" for union in clauses.unions)
        for union in clauses.unions:
            params.update(union.params)

    params.update(clauses.bound_params)
    return Query(sql=sql, params=dict(params))
