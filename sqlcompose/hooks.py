"""Interceptor chains around statement execution and result binding.

Three independent lists are kept: *exec* hooks wrap the physical
execution, *one* hooks wrap single-row binding and *all* hooks wrap
multi-row binding. Hooks run in registration order; each receives the
downstream operation as an explicit argument and decides whether to call
it. Exceptions raised by a hook propagate to the caller untouched.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from sqlcompose.builder import SelectQuery
    from sqlcompose.typing import AllHook, ExecHook, OneHook

__all__ = ("HookChain",)


def _wrap_exec(hook: "ExecHook", query: "SelectQuery", downstream: "Callable[[], Any]") -> "Callable[[], Any]":
    def operation() -> Any:
        return hook(query, downstream)

    return operation


def _wrap_bind(
    hook: "OneHook | AllHook", query: "SelectQuery", downstream: "Callable[[Any], Any]"
) -> "Callable[[Any], Any]":
    def operation(destination: Any) -> Any:
        return hook(query, destination, downstream)

    return operation


@dataclass
class HookChain:
    """Ordered hook lists owned by a single :class:`~sqlcompose.builder.SelectQuery`."""

    exec_hooks: "list[ExecHook]" = field(default_factory=list)
    one_hooks: "list[OneHook]" = field(default_factory=list)
    all_hooks: "list[AllHook]" = field(default_factory=list)

    def copy(self) -> "HookChain":
        return HookChain(list(self.exec_hooks), list(self.one_hooks), list(self.all_hooks))

    def run_exec(self, query: "SelectQuery", operation: "Callable[[], Any]") -> Any:
        """Run ``operation`` inside every exec hook, first-registered outermost."""
        for hook in reversed(self.exec_hooks):
            operation = _wrap_exec(hook, query, operation)
        return operation()

    def run_one(self, query: "SelectQuery", destination: Any, operation: "Callable[[Any], Any]") -> Any:
        """Run the single-row ``operation`` through the one hooks, inside the exec hooks."""
        bind = self._chain(self.one_hooks, query, operation)
        return self.run_exec(query, lambda: bind(destination))

    def run_all(self, query: "SelectQuery", destination: Any, operation: "Callable[[Any], Any]") -> Any:
        """Run the multi-row ``operation`` through the all hooks, inside the exec hooks."""
        bind = self._chain(self.all_hooks, query, operation)
        return self.run_exec(query, lambda: bind(destination))

    @staticmethod
    def _chain(
        hooks: "list[OneHook] | list[AllHook]", query: "SelectQuery", operation: "Callable[[Any], Any]"
    ) -> "Callable[[Any], Any]":
        for hook in reversed(hooks):
            operation = _wrap_bind(hook, query, operation)
        return operation
