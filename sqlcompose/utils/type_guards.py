"""Type guard functions for runtime type checking in sqlcompose.

These checks tell the result binder which kind of destination it has been
handed: a schema class, a schema instance, a scalar type, or a list alias.
"""

import datetime
import decimal
import uuid
from typing import TYPE_CHECKING, Any, get_args, get_origin

import msgspec

from sqlcompose.typing import PYDANTIC_INSTALLED

if TYPE_CHECKING:
    from typing_extensions import TypeGuard

__all__ = (
    "SCALAR_TYPES",
    "is_attrs_schema",
    "is_dataclass",
    "is_dataclass_instance",
    "is_dict",
    "is_list_alias",
    "is_msgspec_struct",
    "is_pydantic_model",
    "is_scalar_type",
    "is_schema",
    "is_schema_instance",
    "is_schema_type",
)

SCALAR_TYPES: "frozenset[type[Any]]" = frozenset(
    {
        int,
        float,
        str,
        bytes,
        bool,
        decimal.Decimal,
        datetime.datetime,
        datetime.date,
        datetime.time,
        uuid.UUID,
    }
)


def _is_class(obj: Any) -> bool:
    """Plain classes only; parametrized aliases such as ``list[int]`` are excluded."""
    return isinstance(obj, type) and get_origin(obj) is None


def is_dataclass_instance(obj: Any) -> bool:
    """Check if an object is a dataclass instance.

    Args:
        obj: An object to check.

    Returns:
        True if the object is a dataclass instance.
    """
    return not _is_class(obj) and hasattr(type(obj), "__dataclass_fields__")


def is_dataclass(obj: Any) -> bool:
    """Check if an object is a dataclass class or instance.

    Args:
        obj: Value to check.

    Returns:
        bool
    """
    if _is_class(obj) and hasattr(obj, "__dataclass_fields__"):
        return True
    return is_dataclass_instance(obj)


def is_pydantic_model(obj: Any) -> bool:
    """Check if a value is a pydantic model class or instance.

    Args:
        obj: Value to check.

    Returns:
        bool
    """
    if not PYDANTIC_INSTALLED:
        return False
    from pydantic import BaseModel

    if _is_class(obj):
        return issubclass(obj, BaseModel)
    return isinstance(obj, BaseModel)


def is_msgspec_struct(obj: Any) -> bool:
    """Check if a value is a msgspec struct class or instance.

    Args:
        obj: Value to check.

    Returns:
        bool
    """
    if _is_class(obj):
        return issubclass(obj, msgspec.Struct)
    return isinstance(obj, msgspec.Struct)


def is_attrs_schema(obj: Any) -> bool:
    """Check if a value is an attrs class or instance.

    Args:
        obj: Value to check.

    Returns:
        bool
    """
    cls = obj if _is_class(obj) else type(obj)
    return hasattr(cls, "__attrs_attrs__")


def is_dict(obj: Any) -> "TypeGuard[dict[str, Any]]":
    """Check if a value is a dictionary.

    Args:
        obj: Value to check.

    Returns:
        bool
    """
    return isinstance(obj, dict)


def is_scalar_type(obj: Any) -> "TypeGuard[type[Any]]":
    """Check if a value is a type that receives a single column value."""
    return _is_class(obj) and any(issubclass(obj, scalar) for scalar in SCALAR_TYPES)


def is_schema(obj: Any) -> bool:
    """Check if a value is a structured schema (class or instance).

    Structured schemas are dataclasses, msgspec structs, pydantic models,
    attrs classes, and plain classes carrying field annotations.
    """
    if is_dataclass(obj) or is_msgspec_struct(obj) or is_pydantic_model(obj) or is_attrs_schema(obj):
        return True
    cls = obj if _is_class(obj) else type(obj)
    if cls.__module__ == "builtins" or is_scalar_type(cls):
        return False
    return bool(getattr(cls, "__annotations__", None))


def is_schema_type(obj: Any) -> "TypeGuard[type[Any]]":
    """Check if a value is a structured schema class."""
    return _is_class(obj) and is_schema(obj)


def is_schema_instance(obj: Any) -> bool:
    """Check if a value is an instance of a structured schema class."""
    return not _is_class(obj) and is_schema(obj)


def is_list_alias(obj: Any) -> bool:
    """Check if a value is a parametrized list alias such as ``list[User]``."""
    return get_origin(obj) is list and len(get_args(obj)) == 1
