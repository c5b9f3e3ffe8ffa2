"""Ordered middleware pipelines for the HTTP client.

The :class:`~servstore.client.HTTPClient` owns three pipelines:

* **request** -- callbacks receive the outgoing :class:`httpx.Request`
  before it is sent and may mutate it (headers, URL params) in place.
* **response** -- callbacks receive every successful :class:`httpx.Response`.
* **response-error** -- callbacks receive the
  :class:`~servstore.exceptions.ResponseError` raised for an HTTP error
  status. Failures without a response never reach this pipeline.

Callbacks are synchronous and run in registration order. They observe and
mutate; their return values are ignored and they cannot stop the pipeline.
Registration returns a :class:`MiddlewareHandle` whose
:meth:`~MiddlewareHandle.remove` takes the callback out again.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Generic, TypeVar

T = TypeVar("T")

Middleware = Callable[[T], Any]


class MiddlewareHandle:
    """Token returned by :meth:`MiddlewareRegistry.register`.

    Calling :meth:`remove` unregisters the one registration this handle was
    returned for; calling it again is a no-op.
    """

    def __init__(self, registry: MiddlewareRegistry[Any]) -> None:
        self._registry = registry
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def remove(self) -> None:
        if not self._active:
            return
        self._registry._remove(self)
        self._active = False


class MiddlewareRegistry(Generic[T]):
    """An ordered list of callbacks run against one value.

    Args:
        name: Pipeline name, used in ``repr`` and diagnostics.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._entries: list[tuple[MiddlewareHandle, Middleware[T]]] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"MiddlewareRegistry({self.name!r}, callbacks={len(self._entries)})"

    def register(self, callback: Middleware[T]) -> MiddlewareHandle:
        """Append *callback* to the pipeline and return its handle."""
        handle = MiddlewareHandle(self)
        self._entries.append((handle, callback))
        return handle

    def run(self, value: T) -> T:
        """Call every callback with *value* in registration order and return *value*.

        The callback list is snapshotted first, so callbacks registered or
        removed while the pipeline runs take effect on the next run.
        Exceptions raised by a callback propagate to the caller.
        """
        for _, callback in list(self._entries):
            callback(value)
        return value

    def clear(self) -> None:
        self._entries.clear()

    def _remove(self, handle: MiddlewareHandle) -> None:
        # Match on the handle: the same function may be registered twice.
        for index, (registered, _) in enumerate(self._entries):
            if registered is handle:
                del self._entries[index]
                return
