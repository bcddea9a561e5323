"""Schema introspection and row conversion.

The default :class:`SchemaInspector` discovers a schema's column mapping,
primary key and table name, and the module-level helpers convert row
mappings into dataclasses, msgspec structs, pydantic models, attrs classes
or plain annotated classes.
"""

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Final, get_type_hints

import msgspec

from sqlcompose.exceptions import BindingTypeError
from sqlcompose.utils.text import snake_case
from sqlcompose.utils.type_guards import (
    is_attrs_schema,
    is_dataclass,
    is_msgspec_struct,
    is_pydantic_model,
    is_schema,
)

__all__ = (
    "FieldInfo",
    "SchemaInspector",
    "convert_scalar",
    "populate_schema",
    "to_schema",
)

PRIMARY_KEY_ATTRIBUTE: Final = "__primary_key__"
TABLE_NAME_ATTRIBUTE: Final = "__tablename__"
DEFAULT_PRIMARY_KEY: Final = "id"


@dataclass(frozen=True)
class FieldInfo:
    """A schema attribute and the column it is stored in."""

    name: str
    column: str
    primary_key: bool = False


def _schema_class(obj: Any) -> "type[Any]":
    return obj if isinstance(obj, type) else type(obj)


def _dataclass_fields(cls: "type[Any]") -> "list[tuple[str, str, bool]]":
    return [
        (f.name, f.metadata.get("column", f.name), bool(f.metadata.get("primary_key", False)))
        for f in dataclasses.fields(cls)
    ]


def _msgspec_fields(cls: "type[Any]") -> "list[tuple[str, str, bool]]":
    return [(f.name, f.encode_name, False) for f in msgspec.structs.fields(cls)]


def _pydantic_fields(cls: "type[Any]") -> "list[tuple[str, str, bool]]":
    result = []
    for name, info in cls.model_fields.items():
        extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
        result.append((name, info.alias or name, bool(extra.get("primary_key", False))))
    return result


def _attrs_fields(cls: "type[Any]") -> "list[tuple[str, str, bool]]":
    return [
        (a.name, a.metadata.get("column", a.name), bool(a.metadata.get("primary_key", False)))
        for a in cls.__attrs_attrs__
    ]


def _annotated_fields(cls: "type[Any]") -> "list[tuple[str, str, bool]]":
    try:
        hints = get_type_hints(cls)
    except (NameError, TypeError):
        hints = dict(getattr(cls, "__annotations__", {}))
    return [(name, name, False) for name in hints if not name.startswith("_")]


@lru_cache(maxsize=256)
def _inspect_fields(cls: "type[Any]") -> "tuple[FieldInfo, ...]":
    if is_dataclass(cls):
        raw = _dataclass_fields(cls)
    elif is_msgspec_struct(cls):
        raw = _msgspec_fields(cls)
    elif is_pydantic_model(cls):
        raw = _pydantic_fields(cls)
    elif is_attrs_schema(cls):
        raw = _attrs_fields(cls)
    else:
        raw = _annotated_fields(cls)

    declared = getattr(cls, PRIMARY_KEY_ATTRIBUTE, None)
    if isinstance(declared, str):
        declared = (declared,)
    if declared is not None:
        keys = set(declared)
    else:
        keys = {name for name, _, primary_key in raw if primary_key}
        if not keys:
            keys = {name for name, _, _ in raw if name == DEFAULT_PRIMARY_KEY}
    return tuple(FieldInfo(name=name, column=column, primary_key=name in keys) for name, column, _ in raw)


class SchemaInspector:
    """Default schema-introspection collaborator.

    Column names come from dataclass/attrs field metadata ``column``, the
    msgspec ``encode_name`` or the pydantic ``alias``, falling back to the
    attribute name. Primary keys are read from a ``__primary_key__`` class
    attribute, then from ``primary_key`` field metadata (pydantic:
    ``json_schema_extra``), then from a field named ``id``.
    """

    __slots__ = ()

    def fields(self, schema: Any) -> "tuple[FieldInfo, ...]":
        """Return the field descriptors of a schema class or instance."""
        cls = _schema_class(schema)
        if not is_schema(cls):
            msg = f"{cls.__name__} is not a schema type"
            raise BindingTypeError(msg)
        return _inspect_fields(cls)

    def primary_key_fields(self, schema: Any) -> "tuple[FieldInfo, ...]":
        """Return the primary key descriptors in declaration order."""
        return tuple(f for f in self.fields(schema) if f.primary_key)

    def table_name(self, schema: Any) -> str:
        """Return the table a schema is stored in."""
        cls = _schema_class(schema)
        name = getattr(cls, TABLE_NAME_ATTRIBUTE, None)
        if isinstance(name, str) and name:
            return name
        return snake_case(cls.__name__)


def _field_values(row: "Mapping[str, Any]", fields: "tuple[FieldInfo, ...]") -> "dict[str, Any]":
    """Map row columns onto attribute names, dropping columns with no field."""
    return {f.name: row[f.column] for f in fields if f.column in row}


def to_schema(row: "Mapping[str, Any]", schema_type: "type[Any]", inspector: "SchemaInspector | None" = None) -> Any:
    """Convert a row mapping into a new ``schema_type`` instance.

    Raises:
        BindingTypeError: If ``schema_type`` is not a supported schema or the row does not fit it.

    Returns:
        The constructed schema instance.
    """
    inspector = inspector or SchemaInspector()
    fields = inspector.fields(schema_type)
    try:
        if is_msgspec_struct(schema_type):
            data = {f.column: row[f.column] for f in fields if f.column in row}
            return msgspec.convert(data, type=schema_type, strict=False)
        if is_pydantic_model(schema_type):
            data = {f.column: row[f.column] for f in fields if f.column in row}
            return schema_type.model_validate(data)
        values = _field_values(row, fields)
        if is_dataclass(schema_type) or is_attrs_schema(schema_type):
            return schema_type(**values)
        instance = schema_type()
    except (TypeError, ValueError, msgspec.ValidationError) as exc:
        msg = f"cannot bind row to {schema_type.__name__}: {exc}"
        raise BindingTypeError(msg) from exc
    for name, value in values.items():
        setattr(instance, name, value)
    return instance


def populate_schema(
    instance: Any, row: "Mapping[str, Any]", inspector: "SchemaInspector | None" = None
) -> Any:
    """Copy matching row columns onto an existing schema instance (or ``dict``)."""
    if isinstance(instance, dict):
        instance.update(row)
        return instance
    inspector = inspector or SchemaInspector()
    for name, value in _field_values(row, inspector.fields(instance)).items():
        setattr(instance, name, value)
    return instance


def convert_scalar(value: Any, scalar_type: "type[Any]") -> Any:
    """Convert a single column value into ``scalar_type``.

    ``None`` is returned unchanged so that SQL ``NULL`` survives the conversion.
    """
    if value is None or isinstance(value, scalar_type):
        return value
    if scalar_type is bytes and isinstance(value, str):
        return value.encode()
    try:
        return msgspec.convert(value, type=scalar_type, strict=False)
    except msgspec.ValidationError as exc:
        msg = f"cannot convert {value!r} to {scalar_type.__name__}"
        raise BindingTypeError(msg) from exc
