"""Naming conventions shared by every store module.

Each store module exposes the same set of actions, getters, mutations and
state keys, addressed by a suffix string and namespaced by the module name
(``users/read``, ``users/byId``). The suffixes live in one frozen
:class:`NamingConventions` value that is handed to the
:class:`~servstore.store.factory.StoreModuleFactory` and from there to every
module it builds, so generic lookups in the
:class:`~servstore.store.service.StoreService` work for any resource.

Code addresses the built-in members through the :class:`Operation` and
:class:`Mutation` enums rather than raw strings; strings remain available
for extra, resource-specific actions.
"""

from __future__ import annotations

import enum
from typing import Union

from pydantic import BaseModel, ConfigDict, model_validator


class Operation(enum.Enum):
    """Actions and getters every default store module provides."""

    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DESTROY = "destroy"
    SET_ALL = "set_all"
    READ_ALL = "read_all"
    READ_BY_ID = "read_by_id"

    @property
    def is_getter(self) -> bool:
        return self in (Operation.READ_ALL, Operation.READ_BY_ID)


class Mutation(enum.Enum):
    """State mutations every default store module provides."""

    SET_ALL = "set_all"
    DELETE = "delete"


Member = Union[Operation, Mutation, str]


class NamingConventions(BaseModel):
    """Suffixes and separator used to derive every store identifier.

    The defaults produce ``<name>/read``, ``<name>/all``, ``<name>/SET_ALL``
    and so on. Instances are immutable and validated: no suffix may be empty
    and no two suffixes may collide.
    """

    model_config = ConfigDict(frozen=True)

    separator: str = "/"

    read_action: str = "read"
    create_action: str = "create"
    update_action: str = "update"
    destroy_action: str = "destroy"
    set_all_action: str = "setAll"

    read_all_getter: str = "all"
    read_by_id_getter: str = "byId"

    all_items_state: str = "data"

    set_all_mutation: str = "SET_ALL"
    delete_mutation: str = "DELETE"

    @model_validator(mode="after")
    def _check_suffixes(self) -> NamingConventions:
        if not self.separator:
            raise ValueError("separator must be non-empty")
        suffixes = [value for key, value in self if key != "separator"]
        for suffix in suffixes:
            if not suffix:
                raise ValueError("naming suffixes must be non-empty")
            if self.separator in suffix:
                raise ValueError(f"suffix {suffix!r} contains the separator {self.separator!r}")
        if len(set(suffixes)) != len(suffixes):
            raise ValueError("naming suffixes must be unique")
        return self

    def suffix(self, member: Member) -> str:
        """Return the suffix string for an operation or mutation; strings pass through."""
        if isinstance(member, Operation):
            return {
                Operation.READ: self.read_action,
                Operation.CREATE: self.create_action,
                Operation.UPDATE: self.update_action,
                Operation.DESTROY: self.destroy_action,
                Operation.SET_ALL: self.set_all_action,
                Operation.READ_ALL: self.read_all_getter,
                Operation.READ_BY_ID: self.read_by_id_getter,
            }[member]
        if isinstance(member, Mutation):
            return {
                Mutation.SET_ALL: self.set_all_mutation,
                Mutation.DELETE: self.delete_mutation,
            }[member]
        return member

    def identifier(self, module_name: str, member: Member) -> str:
        """Fully namespaced identifier, e.g. ``users/read``."""
        return f"{module_name}{self.separator}{self.suffix(member)}"


DEFAULT_CONVENTIONS = NamingConventions()
