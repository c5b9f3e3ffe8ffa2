"""Rules for response-driven sync.

Any successful API response may carry data for resources other than the one
that was requested; a composite endpoint can answer
``{"users": [...], "roles": [...]}``. A :class:`SyncRule` names a resource and
the path of keys leading to its data inside a response body. The
:class:`~servstore.store.service.StoreService` installs the rule
``(name,)`` for every module it registers and checks all rules against every
response body.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

_MISSING = object()


@dataclass(frozen=True)
class SyncRule:
    """Where to find data for *resource* in a response body."""

    resource: str
    path: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.path:
            raise ValueError("sync rule path must contain at least one key")

    def extract(self, body: Any) -> Any:
        """Follow :attr:`path` into *body*; returns ``_MISSING`` when any key is absent."""
        node = body
        for key in self.path:
            if not isinstance(node, Mapping) or key not in node:
                return _MISSING
            node = node[key]
        return node


class SyncRules:
    """Ordered collection of :class:`SyncRule` objects."""

    def __init__(self) -> None:
        self._rules: list[SyncRule] = []

    def __iter__(self) -> Iterator[SyncRule]:
        return iter(list(self._rules))

    def __len__(self) -> int:
        return len(self._rules)

    def add(self, resource: str, path: Sequence[str]) -> SyncRule:
        """Add a rule unless an identical one exists; returns the stored rule."""
        rule = SyncRule(resource, tuple(path))
        if rule not in self._rules:
            self._rules.append(rule)
        return rule

    def remove(self, resource: str, path: Sequence[str]) -> bool:
        rule = SyncRule(resource, tuple(path))
        if rule in self._rules:
            self._rules.remove(rule)
            return True
        return False

    def for_resource(self, resource: str) -> list[SyncRule]:
        return [rule for rule in self._rules if rule.resource == resource]

    def matches(self, body: Any) -> Iterator[tuple[SyncRule, Any]]:
        """Yield ``(rule, value)`` for every rule that resolves to a non-``None`` value."""
        for rule in list(self._rules):
            value = rule.extract(body)
            if value is _MISSING or value is None:
                continue
            yield rule, value
