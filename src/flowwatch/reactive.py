"""
Reactive containers with explicit dependency registration.

A ``Signal`` holds a value; a ``Computed`` derives a value from an explicit tuple of
upstream nodes and memoizes it until one of them changes. There is no ambient
dependency tracking: every edge of the graph is registered when the ``Computed`` is
built.

Semantics
- ``Signal.write`` replaces the value and, unless it is the same object (or ``equal``
  says so), marks every transitive dependent stale, then calls subscribed listeners.
- ``Computed.read`` re-evaluates only when stale. Evaluation first reads all its
  dependencies (which refresh themselves if stale) and only then calls the derive
  function, so one evaluation always sees a single consistent snapshot upstream.
- Exceptions raised by a derive function propagate to the reader; the node stays stale.

Examples:
    >>> from flowwatch.reactive import Signal, derive
    >>> items = Signal((1, 2, 3))
    >>> total = derive(lambda xs: sum(xs), items)
    >>> total.read()
    6
    >>> items.write((1, 2))
    True
    >>> total.read()
    3
"""

from __future__ import annotations

import weakref
from collections.abc import Callable
from typing import Any, Generic, TypeVar

__all__ = ["Signal", "Computed", "derive"]

T = TypeVar("T")

Listener = Callable[[], None]

_UNSET: Any = object()


def _identical(a: Any, b: Any) -> bool:
    return a is b


class _Node:
    """Shared dependent and listener bookkeeping."""

    def __init__(self) -> None:
        self._dependents: weakref.WeakSet[Computed[Any]] = weakref.WeakSet()
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _invalidate_dependents(self) -> None:
        touched: list[_Node] = [self]
        seen: set[int] = {id(self)}
        queue: list[_Node] = [self]
        while queue:
            node = queue.pop()
            for dep in list(node._dependents):
                if id(dep) in seen:
                    continue
                seen.add(id(dep))
                dep._stale = True
                touched.append(dep)
                queue.append(dep)
        # Listeners run only after the whole graph is marked, so they read fresh values.
        for node in touched:
            for listener in list(node._listeners):
                listener()


class Signal(_Node, Generic[T]):
    """
    Writable reactive value.

    Args:
        value: Initial value.
        equal: Optional comparator; a write whose value compares equal to the current
            one is ignored. Defaults to object identity.
    """

    def __init__(self, value: T, *, equal: Callable[[T, T], bool] | None = None) -> None:
        super().__init__()
        self._value = value
        self._equal = equal or _identical
        self._version = 0

    def read(self) -> T:
        return self._value

    @property
    def version(self) -> int:
        """Number of accepted writes so far."""
        return self._version

    def write(self, value: T) -> bool:
        """Replace the value; returns True if dependents were invalidated."""
        if self._equal(self._value, value):
            return False
        self._value = value
        self._version += 1
        self._invalidate_dependents()
        return True

    def update(self, fn: Callable[[T], T]) -> bool:
        return self.write(fn(self._value))


class Computed(_Node, Generic[T]):
    """
    Lazily evaluated, memoized value derived from explicit dependencies.

    Args:
        fn: Derive function; receives the dependency values positionally.
        deps: Upstream ``Signal`` or ``Computed`` nodes.
    """

    def __init__(self, fn: Callable[..., T], deps: tuple[Signal[Any] | Computed[Any], ...]) -> None:
        super().__init__()
        self._fn = fn
        self._deps = tuple(deps)
        self._stale = True
        self._value: T = _UNSET
        for dep in self._deps:
            dep._dependents.add(self)

    @property
    def stale(self) -> bool:
        return self._stale

    def read(self) -> T:
        if self._stale:
            values = [dep.read() for dep in self._deps]
            self._value = self._fn(*values)
            self._stale = False
        return self._value


def derive(fn: Callable[..., T], *deps: Signal[Any] | Computed[Any]) -> Computed[T]:
    """Build a ``Computed`` over ``deps``."""
    return Computed(fn, deps)
