"""Fluent SELECT statement builder.

Every clause method either *replaces* its clause (``select``, ``from_``,
``where``, ``order_by``, ``group_by``, ``having``, ``limit``, ``offset``,
``bind``) or *appends* to it (``and_select``, ``and_where``/``or_where``,
the join methods, ``and_order_by``, ``and_group_by``,
``and_having``/``or_having``, ``and_bind``, ``union``/``union_all``).
Rendering is a pure function of the accumulated state, so a query may be
built, changed and built again.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional, Union, get_args

from sqlcompose.builder._base import Query
from sqlcompose.builder._clauses import Join, JoinType, SelectClauses, SetOperation, SetOperator
from sqlcompose.builder._render import clause_param_names, render_select
from sqlcompose.dialect import IdentifierQuoter
from sqlcompose.driver._binding import bind_all, bind_one, scan_column
from sqlcompose.exceptions import (
    BindingTypeError,
    CompositePrimaryKeyError,
    ImproperConfigurationError,
    MissingPrimaryKeyError,
    NoRowsError,
    SQLBuilderError,
)
from sqlcompose.expressions import Connector, ExpressionLike, HashExp, as_expression, combine
from sqlcompose.hooks import HookChain
from sqlcompose.parameters import rename_placeholders
from sqlcompose.utils.schema import SchemaInspector
from sqlcompose.utils.type_guards import is_list_alias, is_schema_instance, is_schema_type

if TYPE_CHECKING:
    from sqlglot.dialects.dialect import DialectType

    from sqlcompose.base import Database
    from sqlcompose.protocols import RowsProtocol, SchemaInspectorProtocol
    from sqlcompose.typing import AllHook, ExecHook, OneHook
    from sqlcompose.utils.schema import FieldInfo

__all__ = ("SelectQuery",)


@dataclass
class SelectQuery:
    """Builder for SELECT statements.

    Created by :meth:`sqlcompose.base.Database.select` (bound to a database,
    so it can execute) or :func:`sqlcompose.builder.select` (render only).
    Instances are not thread-safe; build separate queries per thread.
    """

    database: "Optional[Database]" = None
    dialect: "DialectType" = None
    _clauses: SelectClauses = field(default_factory=SelectClauses, init=False, repr=False)
    _hooks: HookChain = field(default_factory=HookChain, init=False, repr=False)
    _quoter: IdentifierQuoter = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.dialect is None and self.database is not None:
            self._quoter = self.database.quoter
        else:
            self._quoter = IdentifierQuoter(self.dialect)

    @property
    def clauses(self) -> SelectClauses:
        """The accumulated clause state. Treat as read-only."""
        return self._clauses

    @property
    def quoter(self) -> IdentifierQuoter:
        return self._quoter

    def copy(self) -> "SelectQuery":
        """Return an independent copy sharing the database handle."""
        clone = SelectQuery(database=self.database, dialect=self.dialect)
        clone._clauses = self._clauses.copy()
        clone._hooks = self._hooks.copy()
        return clone

    # -- SELECT list --
    def select(self, *columns: str) -> "SelectQuery":
        """Replace the selected columns. No columns means ``*``."""
        self._clauses.columns = list(columns)
        return self

    def and_select(self, *columns: str) -> "SelectQuery":
        """Append to the selected columns."""
        self._clauses.columns.extend(columns)
        return self

    def distinct(self, flag: bool = True) -> "SelectQuery":
        self._clauses.distinct = flag
        return self

    def select_option(self, option: str) -> "SelectQuery":
        """Set a verbatim option emitted after ``SELECT [DISTINCT]``, e.g. ``SQL_CALC_FOUND_ROWS``."""
        self._clauses.option = option
        return self

    # -- FROM / JOIN --
    def from_(self, *tables: str) -> "SelectQuery":
        """Replace the source tables. Each entry may carry an alias (``"users u"``)."""
        self._clauses.tables = list(tables)
        return self

    def join(self, join_type: "Union[JoinType, str]", table: str, on: ExpressionLike = None) -> "SelectQuery":
        """Append a join. ``on=None`` renders the join without an ``ON`` clause.

        Raises:
            SQLBuilderError: If ``join_type`` is not INNER, LEFT, RIGHT or CROSS.
        """
        if not isinstance(join_type, JoinType):
            try:
                join_type = JoinType(join_type.upper())
            except ValueError as exc:
                msg = f"Unsupported join type: {join_type}"
                raise SQLBuilderError(msg) from exc
        self._clauses.joins.append(Join(join_type, table, as_expression(on)))
        return self

    def inner_join(self, table: str, on: ExpressionLike = None) -> "SelectQuery":
        return self.join(JoinType.INNER, table, on)

    def left_join(self, table: str, on: ExpressionLike = None) -> "SelectQuery":
        return self.join(JoinType.LEFT, table, on)

    def right_join(self, table: str, on: ExpressionLike = None) -> "SelectQuery":
        return self.join(JoinType.RIGHT, table, on)

    def cross_join(self, table: str) -> "SelectQuery":
        return self.join(JoinType.CROSS, table)

    # -- WHERE --
    def where(self, expression: ExpressionLike) -> "SelectQuery":
        """Replace the WHERE condition."""
        self._clauses.where = as_expression(expression)
        return self

    def and_where(self, expression: ExpressionLike) -> "SelectQuery":
        """AND ``expression`` onto the WHERE condition (or set it when there is none)."""
        self._clauses.where = combine(self._clauses.where, as_expression(expression), Connector.AND)
        return self

    def or_where(self, expression: ExpressionLike) -> "SelectQuery":
        """OR ``expression`` onto the WHERE condition (or set it when there is none)."""
        self._clauses.where = combine(self._clauses.where, as_expression(expression), Connector.OR)
        return self

    # -- GROUP BY / HAVING --
    def group_by(self, *columns: str) -> "SelectQuery":
        self._clauses.group_by = list(columns)
        return self

    def and_group_by(self, *columns: str) -> "SelectQuery":
        self._clauses.group_by.extend(columns)
        return self

    def having(self, expression: ExpressionLike) -> "SelectQuery":
        self._clauses.having = as_expression(expression)
        return self

    def and_having(self, expression: ExpressionLike) -> "SelectQuery":
        self._clauses.having = combine(self._clauses.having, as_expression(expression), Connector.AND)
        return self

    def or_having(self, expression: ExpressionLike) -> "SelectQuery":
        self._clauses.having = combine(self._clauses.having, as_expression(expression), Connector.OR)
        return self

    # -- ORDER BY / LIMIT / OFFSET --
    def order_by(self, *columns: str) -> "SelectQuery":
        """Replace the ordering. Entries may end in ``ASC`` or ``DESC``."""
        self._clauses.order_by = list(columns)
        return self

    def and_order_by(self, *columns: str) -> "SelectQuery":
        self._clauses.order_by.extend(columns)
        return self

    def limit(self, limit: int) -> "SelectQuery":
        """Set the LIMIT; a negative value removes it."""
        self._clauses.limit = limit if limit >= 0 else None
        return self

    def offset(self, offset: int) -> "SelectQuery":
        """Set the OFFSET; a negative value removes it."""
        self._clauses.offset = offset if offset >= 0 else None
        return self

    # -- parameters --
    def bind(self, params: "Mapping[str, Any]") -> "SelectQuery":
        """Replace the explicitly bound parameters."""
        self._clauses.bound_params = dict(params)
        return self

    def and_bind(self, params: "Mapping[str, Any]") -> "SelectQuery":
        """Merge into the explicitly bound parameters; later keys win."""
        self._clauses.bound_params.update(params)
        return self

    # -- set operations --
    def union(self, query: "Union[Query, SelectQuery]") -> "SelectQuery":
        return self._add_set_operation(SetOperator.UNION, query)

    def union_all(self, query: "Union[Query, SelectQuery]") -> "SelectQuery":
        return self._add_set_operation(SetOperator.UNION_ALL, query)

    def _add_set_operation(self, operator: SetOperator, query: "Union[Query, SelectQuery]") -> "SelectQuery":
        built = query.build() if isinstance(query, SelectQuery) else query
        taken = clause_param_names(self._clauses)
        renames: "dict[str, str]" = {}
        index = len(self._clauses.unions) + 1
        for name in built.params:
            if name in taken:
                candidate = f"u{index}_{name}"
                while candidate in taken or candidate in built.params:
                    candidate = f"_{candidate}"
                renames[name] = candidate
        params = {renames.get(name, name): value for name, value in built.params.items()}
        self._clauses.unions.append(SetOperation(operator, rename_placeholders(built.sql, renames), params))
        return self

    # -- hooks --
    def with_exec_hook(self, hook: "ExecHook") -> "SelectQuery":
        """Register a hook around the physical execution of every operation."""
        self._hooks.exec_hooks.append(hook)
        return self

    def with_one_hook(self, hook: "OneHook") -> "SelectQuery":
        """Register a hook around single-row binding (:meth:`one`, :meth:`model`).

        The hook receives the query :meth:`one` was called on. Under
        :meth:`model` that is the lookup query carrying the primary-key condition.
        """
        self._hooks.one_hooks.append(hook)
        return self

    def with_all_hook(self, hook: "AllHook") -> "SelectQuery":
        """Register a hook around multi-row binding (:meth:`all`).

        The hook receives the query :meth:`all` was called on.
        """
        self._hooks.all_hooks.append(hook)
        return self

    # -- rendering --
    def build(self) -> Query:
        """Render the current state into a :class:`Query`."""
        return render_select(self._clauses, self._quoter)

    def to_sql(self) -> str:
        return self.build().sql

    def __str__(self) -> str:
        return self.to_sql()

    # -- execution --
    @property
    def inspector(self) -> "SchemaInspectorProtocol":
        if self.database is not None:
            return self.database.inspector
        return SchemaInspector()

    def _execute(self, query: Query) -> "RowsProtocol":
        if self.database is None:
            msg = "This query is not bound to a database; create it with Database.select() to execute it."
            raise ImproperConfigurationError(msg)
        return self.database.driver.execute(query.sql, query.params)

    def row(self) -> "Optional[tuple[Any, ...]]":
        """Execute and return the first row as a tuple.

        Raises:
            NoRowsError: If the statement returns no rows.
        """
        built = self.build()

        def operation() -> "tuple[Any, ...]":
            rows = self._execute(built)
            try:
                row = rows.fetchone()
            finally:
                rows.close()
            if row is None:
                raise NoRowsError
            return tuple(row)

        return self._hooks.run_exec(self, operation)

    def rows(self) -> "Optional[RowsProtocol]":
        """Execute and return the open result set. The caller must close it."""
        built = self.build()
        return self._hooks.run_exec(self, lambda: self._execute(built))

    def one(self, destination: Any = None) -> Any:
        """Execute and bind the first row into ``destination``.

        ``destination`` may be ``None`` (execute only), a schema class or
        scalar type (a new value is returned) or a schema instance / ``dict``
        (filled in place). Without ``from_()``, a schema destination supplies
        the table name.

        Raises:
            NoRowsError: If the statement returns no rows.
            BindingTypeError: If ``destination`` cannot receive the row.

        Returns:
            The bound value.
        """
        query = self._for_destination(destination)
        built = query.build()
        inspector = query.inspector

        def operation(target: Any) -> Any:
            rows = query._execute(built)
            try:
                return bind_one(rows, target, inspector)
            finally:
                rows.close()

        return query._hooks.run_one(self, destination, operation)

    def all(self, destination: Any = None) -> Any:
        """Execute and bind every row.

        ``destination`` may be ``None`` (execute only), a ``list`` (refilled
        with one ``dict`` per row), ``list[T]`` or a row type ``T`` (a new
        list of ``T``).

        Raises:
            BindingTypeError: If ``destination`` cannot receive rows.

        Returns:
            The bound list.
        """
        query = self._for_destination(destination)
        built = query.build()
        inspector = query.inspector

        def operation(target: Any) -> Any:
            rows = query._execute(built)
            try:
                return bind_all(rows, target, inspector)
            finally:
                rows.close()

        return query._hooks.run_all(self, destination, operation)

    def column(self, destination: "Optional[list[Any]]" = None) -> "Optional[list[Any]]":
        """Execute and collect the first selected column of every row, in row order."""
        built = self.build()

        def operation() -> "list[Any]":
            rows = self._execute(built)
            try:
                return scan_column(rows, destination)
            finally:
                rows.close()

        return self._hooks.run_exec(self, operation)

    def model(self, pk: Any, destination: Any) -> Any:
        """Load the row whose primary key equals ``pk`` into ``destination``.

        ``destination`` is a schema class or instance. Composite keys take a
        tuple (in key order) or a mapping of field name to value. Any WHERE
        condition already present is ANDed with the key condition. The
        receiving query is not modified.

        Raises:
            BindingTypeError: If ``destination`` is not a schema class or instance.
            MissingPrimaryKeyError: If the schema declares no primary key.
            CompositePrimaryKeyError: If a single value is given for a composite key.
            NoRowsError: If no row matches.

        Returns:
            The bound schema instance.
        """
        if not (is_schema_type(destination) or is_schema_instance(destination)):
            msg = "must be a schema class or a schema instance"
            raise BindingTypeError(msg)
        schema_type = destination if isinstance(destination, type) else type(destination)
        keys = self.inspector.primary_key_fields(schema_type)
        if not keys:
            raise MissingPrimaryKeyError(schema_type)
        condition = _primary_key_condition(pk, keys, schema_type)
        query = self._for_destination(destination)
        if query is self:
            query = self.copy()
        query.and_where(HashExp(condition))
        return query.one(destination)

    def _for_destination(self, destination: Any) -> "SelectQuery":
        """Return a copy reading from the destination's table when no FROM was given."""
        if self._clauses.tables:
            return self
        schema = get_args(destination)[0] if is_list_alias(destination) else destination
        if not (is_schema_type(schema) or is_schema_instance(schema)):
            return self
        clone = self.copy()
        clone._clauses.tables = [self.inspector.table_name(schema)]
        return clone


def _primary_key_condition(
    pk: Any, keys: "tuple[FieldInfo, ...]", schema_type: "type[Any]"
) -> "dict[str, Any]":
    names = tuple(key.name for key in keys)
    if isinstance(pk, Mapping):
        if set(pk) != set(names):
            raise CompositePrimaryKeyError(schema_type, names)
        return {key.column: pk[key.name] for key in keys}
    if isinstance(pk, tuple):
        if len(pk) != len(keys):
            raise CompositePrimaryKeyError(schema_type, names)
        return {key.column: value for key, value in zip(keys, pk)}
    if len(keys) > 1:
        raise CompositePrimaryKeyError(schema_type, names)
    return {keys[0].column: pk}
