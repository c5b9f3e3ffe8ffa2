"""The unit of state registered per resource.

A :class:`StoreModule` bundles the state of one resource with the functions
allowed to read and change it:

* **state** -- a dict; the item list lives under
  ``conventions.all_items_state`` (``"data"`` by default).
* **getters** -- ``getter(state, *args)``; pure reads.
* **mutations** -- ``mutation(state, payload)``; the only code that writes
  state.
* **actions** -- ``async action(ctx, payload)``; talk to the API and commit
  mutations through the :class:`ActionContext`.

Every category is keyed by suffix string so resource-specific extras can be
merged in next to the defaults.
"""

from __future__ import annotations

import copy
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

from servstore.exceptions import StoreError
from servstore.models import Item
from servstore.store.conventions import Member, Mutation, NamingConventions, Operation

State = dict[str, Any]
Getter = Callable[..., Any]
MutationFn = Callable[[State, Any], None]
Action = Callable[["ActionContext", Any], Awaitable[Any]]

CATEGORIES = ("state", "actions", "getters", "mutations")


def same_id(left: Any, right: Any) -> bool:
    """Compare item ids, treating ``1`` and ``"1"`` as the same id."""
    if left is None or right is None:
        return False
    return left == right or str(left) == str(right)


def is_item_payload(value: Any) -> bool:
    """True for what ``SET_ALL`` accepts: a list of mappings, or one mapping with an ``id``."""
    if isinstance(value, list):
        return all(isinstance(item, Mapping) for item in value)
    return isinstance(value, Mapping) and "id" in value


@dataclass
class ActionContext:
    """What an action may touch: its module's state, commits, and sibling actions."""

    module: StoreModule
    commit: Callable[[Member, Any], None]
    dispatch: Callable[[Member, Any], Awaitable[Any]]

    @property
    def state(self) -> State:
        return self.module.state


@dataclass
class StoreModule:
    """State, getters, mutations and actions for one resource.

    Attributes:
        name: The resource name; namespace of every identifier.
        endpoint: API endpoint of the resource list.
        conventions: Naming table the module was built with.
    """

    name: str
    endpoint: str
    conventions: NamingConventions
    state: State = field(default_factory=dict)
    actions: dict[str, Action] = field(default_factory=dict)
    getters: dict[str, Getter] = field(default_factory=dict)
    mutations: dict[str, MutationFn] = field(default_factory=dict)

    @property
    def items(self) -> list[Item]:
        """The live item list (not a copy)."""
        return self.state.setdefault(self.conventions.all_items_state, [])

    def action(self, member: Member) -> Action:
        return self._lookup(self.actions, "action", member)

    def getter(self, member: Member) -> Getter:
        return self._lookup(self.getters, "getter", member)

    def mutation(self, member: Member) -> MutationFn:
        return self._lookup(self.mutations, "mutation", member)

    def merge(self, extra: Mapping[str, Mapping[str, Any]]) -> None:
        """Add or override members, keyed by category (``state``, ``actions``, ...)."""
        for category, members in extra.items():
            if category not in CATEGORIES:
                raise StoreError(
                    f"Unknown store module category {category!r} for {self.name!r}; "
                    f"expected one of {', '.join(CATEGORIES)}"
                )
            target: dict[str, Any] = getattr(self, category)
            for key, value in members.items():
                target[key] = value

    def _lookup(self, table: dict[str, Any], kind: str, member: Member) -> Any:
        suffix = self.conventions.suffix(member)
        try:
            return table[suffix]
        except KeyError:
            identifier = self.conventions.identifier(self.name, member)
            raise StoreError(f"Unknown {kind} {identifier!r}") from None


# --------------------------------------------------------------------- #
# Default getters and mutations
# --------------------------------------------------------------------- #


def make_default_getters(conventions: NamingConventions) -> dict[str, Getter]:
    state_key = conventions.all_items_state

    def read_all(state: State) -> list[Item]:
        return copy.deepcopy(state.get(state_key, []))

    def read_by_id(state: State, item_id: Any) -> Optional[Item]:
        for item in state.get(state_key, []):
            if same_id(item.get("id"), item_id):
                return copy.deepcopy(item)
        return None

    return {
        conventions.suffix(Operation.READ_ALL): read_all,
        conventions.suffix(Operation.READ_BY_ID): read_by_id,
    }


def make_default_mutations(conventions: NamingConventions) -> dict[str, MutationFn]:
    state_key = conventions.all_items_state

    def set_all(state: State, payload: Any) -> None:
        """Replace the item list with a list payload; replace or add a single item payload."""
        if isinstance(payload, Mapping):
            if "id" not in payload:
                raise ValueError("a single item must carry an 'id'")
            item = copy.deepcopy(dict(payload))
            items = [
                existing
                for existing in state.get(state_key, [])
                if not same_id(existing.get("id"), item["id"])
            ]
            items.append(item)
            state[state_key] = items
            return
        if isinstance(payload, (list, tuple)):
            state[state_key] = copy.deepcopy(list(payload))
            return
        raise TypeError(f"cannot set items from {type(payload).__name__}")

    def delete(state: State, item_id: Any) -> None:
        state[state_key] = [
            item for item in state.get(state_key, []) if not same_id(item.get("id"), item_id)
        ]

    return {
        conventions.suffix(Mutation.SET_ALL): set_all,
        conventions.suffix(Mutation.DELETE): delete,
    }
