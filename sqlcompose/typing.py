from collections.abc import Callable
from importlib.util import find_spec
from typing import TYPE_CHECKING, Any

from sqlglot.dialects.dialect import DialectType
from typing_extensions import TypeAlias

if TYPE_CHECKING:
    from sqlcompose.builder import SelectQuery

__all__ = (
    "PYDANTIC_INSTALLED",
    "AllHook",
    "DialectType",
    "ExecHook",
    "OneHook",
    "module_available",
)


def module_available(module_name: str) -> bool:
    """Return ``True`` when ``module_name`` can be imported in this environment."""
    try:
        return find_spec(module_name) is not None
    except (ImportError, ValueError):
        return False


PYDANTIC_INSTALLED = module_available("pydantic")

ExecHook: TypeAlias = "Callable[[SelectQuery, Callable[[], Any]], Any]"
"""Interceptor around the physical execution: ``hook(query, operation)``."""
OneHook: TypeAlias = "Callable[[SelectQuery, Any, Callable[[Any], Any]], Any]"
"""Interceptor around single-row binding: ``hook(query, destination, operation)``."""
AllHook: TypeAlias = "Callable[[SelectQuery, Any, Callable[[Any], Any]], Any]"
"""Interceptor around multi-row binding: ``hook(query, destination, operation)``."""
