# actionfsm/runtime/context.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
"""
Immutable key-value contexts with inherited cancellation.

The engine works with two flavours of context. ``EventContext`` lives for a
single ``process_event`` call and carries the event plus whatever the caller
attached. ``FsmContext`` is the machine's memory; it is replaced, never
mutated, every time a transition commits.
"""

from __future__ import annotations

import threading
from types import MappingProxyType
from typing import Any, Callable, Hashable, Iterator, Mapping, Optional, Tuple, Type, TypeVar

from actionfsm.core.errors import ContextCancelledError

C = TypeVar("C", bound="Context")
T = TypeVar("T")


class CancelScope:
    """
    Explicit cancellation token. A scope counts as cancelled once it or any of
    its ancestors has been cancelled; cancellation cannot be undone.
    """

    def __init__(self, parent: Optional["CancelScope"] = None) -> None:
        self._parent = parent
        self._cancelled = threading.Event()

    @property
    def parent(self) -> Optional["CancelScope"]:
        return self._parent

    @property
    def cancelled(self) -> bool:
        scope = self
        while scope is not None:
            if scope._cancelled.is_set():
                return True
            scope = scope._parent
        return False

    def cancel(self) -> None:
        """Cancel this scope and every scope derived from it. Safe to repeat."""
        self._cancelled.set()

    def child(self) -> "CancelScope":
        """Create a scope that inherits this scope's cancellation."""
        return CancelScope(self)


class Context:
    """
    Immutable carrier of key/value pairs bound to a cancellation scope.

    Deriving a context with ``with_value`` or ``with_cancel`` never changes the
    parent. Contexts derived with ``with_value`` share their parent's scope,
    so cancelling the parent cancels them too.
    """

    __slots__ = ("_values", "_scope")

    def __init__(self, values: Optional[Mapping[Hashable, Any]] = None, scope: Optional[CancelScope] = None) -> None:
        self._values = MappingProxyType(dict(values or {}))
        self._scope = scope if scope is not None else CancelScope()

    @classmethod
    def background(cls: Type[C]) -> C:
        """Return a fresh root context: no values, never cancelled."""
        return cls()

    @classmethod
    def derive(cls: Type[C], parent: "Context") -> C:
        """
        Re-type ``parent`` as this context class, keeping its values and sharing
        its cancellation scope.
        """
        if type(parent) is cls:
            return parent
        return cls(parent._values, parent._scope)

    @property
    def scope(self) -> CancelScope:
        return self._scope

    @property
    def cancelled(self) -> bool:
        return self._scope.cancelled

    def with_value(self: C, key: Hashable, value: Any) -> C:
        values = dict(self._values)
        values[key] = value
        return type(self)(values, self._scope)

    def with_cancel(self: C) -> Tuple[C, Callable[[], None]]:
        """
        Return a child context plus the function that cancels it. Cancelling the
        child leaves this context untouched.
        """
        scope = self._scope.child()
        return type(self)(self._values, scope), scope.cancel

    def value(self, key: Hashable, default: Any = None) -> Any:
        return self._values.get(key, default)

    def typed_value(self, key: Hashable, type_: Type[T]) -> T:
        """
        Read ``key`` and check it is an instance of ``type_``.

        :raises KeyError: if the key is absent or holds a value of another type.
        """
        if key not in self._values:
            raise KeyError(key)
        value = self._values[key]
        if not isinstance(value, type_):
            raise KeyError(key)
        return value

    def err(self) -> Optional[ContextCancelledError]:
        """Return the cancellation error, or None while the context is live."""
        if self._scope.cancelled:
            return ContextCancelledError()
        return None

    def raise_if_cancelled(self) -> None:
        error = self.err()
        if error is not None:
            raise error

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled else "active"
        return f"{type(self).__name__}(keys={len(self._values)}, {state})"


class EventContext(Context):
    """Context scoped to a single ``process_event`` call."""

    __slots__ = ()


class FsmContext(Context):
    """The machine's evolving memory, threaded through every transition."""

    __slots__ = ()


def ensure_context(ctx: Optional[Context]) -> Context:
    """Replace a missing context with a fresh background one."""
    if ctx is None:
        return Context.background()
    if not isinstance(ctx, Context):
        raise TypeError(f"expected a Context, got {type(ctx).__name__}")
    return ctx


def first_error(*contexts: Context) -> Optional[ContextCancelledError]:
    """Return the cancellation error of the first cancelled context, if any."""
    for ctx in contexts:
        error = ctx.err()
        if error is not None:
            return error
    return None
