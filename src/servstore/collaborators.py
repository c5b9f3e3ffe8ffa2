"""Interfaces to the routing and translation layers.

The store core only consumes these; applications plug in their own router
and translation backends. :class:`DictTranslator` is a small in-memory
translator good enough for scripts and tests.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional, Protocol, runtime_checkable


@runtime_checkable
class Router(Protocol):
    """Navigation backend used by :class:`~servstore.controllers.ResourceController`."""

    def go_to_route(
        self, name: str, id: Any = None, query: Optional[Mapping[str, Any]] = None
    ) -> None: ...

    def get_current_route_id(self) -> Any: ...


@runtime_checkable
class Translator(Protocol):
    """Label lookups keyed by resource name."""

    def set_translation(self, name: str, translation: Mapping[str, str]) -> None: ...

    def get_singular(self, name: str) -> str: ...

    def get_plural(self, name: str) -> str: ...


class DictTranslator:
    """Translator backed by a dict of ``{"singular": ..., "plural": ...}`` per resource.

    Missing labels fall back to the resource name itself.
    """

    def __init__(self) -> None:
        self._translations: dict[str, dict[str, str]] = {}

    def set_translation(self, name: str, translation: Mapping[str, str]) -> None:
        self._translations[name] = dict(translation)

    def get_singular(self, name: str) -> str:
        return self._translations.get(name, {}).get("singular", name)

    def get_plural(self, name: str) -> str:
        return self._translations.get(name, {}).get("plural", name)
