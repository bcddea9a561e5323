"""Named parameter bookkeeping for rendered statements."""

import re
from collections.abc import Iterable, Mapping
from typing import Any, Final

__all__ = ("PLACEHOLDER_PREFIX", "ParameterSet", "rename_placeholders")

PLACEHOLDER_PREFIX: Final = ":"

# ``:name`` outside of quoted literals; ``::`` casts are not placeholders.
_PLACEHOLDER_RE: Final = re.compile(r"'(?:[^']|'')*'|\"(?:[^\"]|\"\")*\"|(?<![:\w]):([A-Za-z_]\w*)")


class ParameterSet(dict[str, Any]):
    """Insertion-ordered bound values keyed by placeholder name.

    Names in ``reserved`` are never handed out by :meth:`add`, which lets a
    renderer keep generated names clear of parameters merged in later.
    """

    __slots__ = ("reserved",)

    def __init__(self, values: "Mapping[str, Any] | None" = None, *, reserved: "Iterable[str]" = ()) -> None:
        super().__init__(values or {})
        self.reserved = frozenset(reserved)

    def add(self, value: Any, prefix: str = "p") -> str:
        """Store ``value`` under a fresh ``p<N>`` name and return the placeholder text."""
        index = len(self)
        name = f"{prefix}{index}"
        while name in self or name in self.reserved:
            index += 1
            name = f"{prefix}{index}"
        self[name] = value
        return f"{PLACEHOLDER_PREFIX}{name}"


def rename_placeholders(sql: str, renames: "Mapping[str, str]") -> str:
    """Rewrite ``:old`` placeholders in ``sql`` to ``:new`` for every ``old -> new`` in ``renames``."""
    if not renames:
        return sql

    def _replace(match: "re.Match[str]") -> str:
        name = match.group(1)
        if name is None or name not in renames:
            return match.group(0)
        return f"{PLACEHOLDER_PREFIX}{renames[name]}"

    return _PLACEHOLDER_RE.sub(_replace, sql)
