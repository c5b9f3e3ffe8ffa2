"""Convention-driven CRUD store modules kept in sync with a REST API."""

from servstore.store.container import StateContainer
from servstore.store.conventions import (
    DEFAULT_CONVENTIONS,
    Member,
    Mutation,
    NamingConventions,
    Operation,
)
from servstore.store.factory import StoreModuleFactory
from servstore.store.module import ActionContext, StoreModule
from servstore.store.service import StoreService
from servstore.store.sync import SyncRule, SyncRules

__all__ = [
    "ActionContext",
    "DEFAULT_CONVENTIONS",
    "Member",
    "Mutation",
    "NamingConventions",
    "Operation",
    "StateContainer",
    "StoreModule",
    "StoreModuleFactory",
    "StoreService",
    "SyncRule",
    "SyncRules",
]
