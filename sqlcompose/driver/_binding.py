"""Row-binding collaborator: copies result rows into destinations."""

from typing import TYPE_CHECKING, Any, Optional, get_args

from sqlcompose.exceptions import BindingTypeError, NoRowsError
from sqlcompose.utils.schema import SchemaInspector, convert_scalar, populate_schema, to_schema
from sqlcompose.utils.type_guards import (
    is_dict,
    is_list_alias,
    is_scalar_type,
    is_schema_instance,
    is_schema_type,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlcompose.protocols import RowsProtocol, SchemaInspectorProtocol

__all__ = ("bind_all", "bind_one", "row_to_dict", "scan_column")


def row_to_dict(columns: "Sequence[str]", row: "Sequence[Any]") -> "dict[str, Any]":
    return dict(zip(columns, row))


def _is_row_type(target: Any) -> bool:
    return target is dict or target is tuple or is_scalar_type(target) or is_schema_type(target)


def _check_width(columns: "Sequence[str]", target: Any) -> None:
    if is_scalar_type(target) and len(columns) != 1:
        msg = f"cannot bind a row of {len(columns)} columns into {target.__name__}"
        raise BindingTypeError(msg)


def _convert(
    columns: "Sequence[str]", row: "Sequence[Any]", target: Any, inspector: "SchemaInspectorProtocol"
) -> Any:
    if target is tuple:
        return tuple(row)
    if target is dict:
        return row_to_dict(columns, row)
    if is_scalar_type(target):
        return convert_scalar(row[0], target)
    if is_schema_type(target):
        return to_schema(row_to_dict(columns, row), target, inspector)  # type: ignore[arg-type]
    return populate_schema(target, row_to_dict(columns, row), inspector)  # type: ignore[arg-type]


def bind_one(
    rows: "RowsProtocol", destination: Any, inspector: "Optional[SchemaInspectorProtocol]" = None
) -> Any:
    """Bind the first row of ``rows`` into ``destination``.

    ``destination`` may be ``None`` (nothing is fetched), a schema class,
    scalar type, ``dict`` or ``tuple`` (a new value is returned), or a schema
    instance or ``dict`` instance (updated in place and returned).

    Raises:
        BindingTypeError: If ``destination`` cannot receive a row.
        NoRowsError: If the result set is empty.

    Returns:
        The bound value.
    """
    if destination is None:
        return None
    if is_list_alias(destination) or not (
        _is_row_type(destination) or is_schema_instance(destination) or is_dict(destination)
    ):
        msg = f"cannot bind a row into {destination!r}: must be a schema type or instance, a dict, or a scalar type"
        raise BindingTypeError(msg)
    _check_width(rows.columns, destination)
    row = rows.fetchone()
    if row is None:
        raise NoRowsError
    return _convert(rows.columns, row, destination, inspector or SchemaInspector())


def bind_all(
    rows: "RowsProtocol", destination: Any, inspector: "Optional[SchemaInspectorProtocol]" = None
) -> Any:
    """Bind every row of ``rows`` into a list.

    ``destination`` may be ``None`` (nothing is fetched), a ``list`` instance
    (cleared, then filled with one ``dict`` per row), a ``list[T]`` alias or
    a bare row type ``T`` (a new ``list[T]`` is returned).

    Raises:
        BindingTypeError: If ``destination`` cannot receive rows.

    Returns:
        The bound list; empty when there are no rows.
    """
    if destination is None:
        return None
    if isinstance(destination, list):
        target: Any = dict
    elif is_list_alias(destination):
        target = get_args(destination)[0]
    else:
        target = destination
    if not _is_row_type(target):
        msg = f"cannot bind rows into {destination!r}: must be a list, list[T] or a row type"
        raise BindingTypeError(msg)
    _check_width(rows.columns, target)
    resolved = inspector or SchemaInspector()
    columns = rows.columns
    values = [_convert(columns, row, target, resolved) for row in rows.fetchall()]
    if isinstance(destination, list):
        destination[:] = values
        return destination
    return values


def scan_column(rows: "RowsProtocol", destination: "Optional[list[Any]]" = None) -> "list[Any]":
    """Collect the first column of every row, in row order.

    Raises:
        BindingTypeError: If ``destination`` is neither ``None`` nor a list.

    Returns:
        ``destination`` (or a new list) holding one value per row.
    """
    if destination is None:
        destination = []
    elif not isinstance(destination, list):
        msg = f"cannot collect a column into {type(destination).__name__}: must be a list"
        raise BindingTypeError(msg)
    destination[:] = [row[0] for row in rows.fetchall()]
    return destination
