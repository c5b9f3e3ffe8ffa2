"""Store service -- the single owner of the shared state container.

:class:`StoreService` registers store modules, guards every namespaced
lookup with an existence check, and keeps module state in step with the
API through a response middleware installed on the HTTP client:
every successful response body is matched against the registered
:class:`~servstore.store.sync.SyncRule` objects and each hit is committed
through the module's ``SET_ALL`` mutation.

Typical usage::

    async with HTTPClient(config, ledger) as http:
        store = StoreService(http)
        store.generate_and_set_default_store_module("users")
        await store.read("users")
        users = store.get_all_from_store("users")
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any, Optional

import httpx

from servstore.client import HTTPClient, MiddlewareHandle
from servstore.client.response import extract_json
from servstore.exceptions import ModuleAlreadyRegisteredError, StoreModuleNotFoundError
from servstore.models import Item
from servstore.output import debug
from servstore.store.container import StateContainer
from servstore.store.conventions import Member, Mutation, NamingConventions, Operation
from servstore.store.factory import StoreModuleFactory
from servstore.store.module import Action, StoreModule, is_item_payload
from servstore.store.sync import SyncRule, SyncRules

logger = logging.getLogger(__name__)


class StoreService:
    """Registers store modules and routes every store call to them.

    Args:
        http: The HTTP client. The service installs its sync middleware on
            it at construction.
        conventions: Naming table for every module. Ignored when *factory*
            is given, except that the two must agree.
        factory: Factory to build default modules with. Defaults to a
            :class:`StoreModuleFactory` over *http* and *conventions*.

    Raises:
        ValueError: *factory* was built with different conventions than
            *conventions*.
    """

    def __init__(
        self,
        http: HTTPClient,
        conventions: Optional[NamingConventions] = None,
        factory: Optional[StoreModuleFactory] = None,
    ) -> None:
        if factory is None:
            factory = StoreModuleFactory(http, conventions)
        elif conventions is not None and factory.conventions != conventions:
            raise ValueError("factory conventions differ from the conventions given to the store")

        self._factory = factory
        self._container = StateContainer()
        self._names: list[str] = []
        self._sync_rules = SyncRules()
        self._sync_handle: Optional[MiddlewareHandle] = http.register_response_middleware(
            self._sync_from_response
        )

    # ------------------------------------------------------------------ #
    # Properties
    # ------------------------------------------------------------------ #

    @property
    def conventions(self) -> NamingConventions:
        """The naming table shared by every module of this store."""
        return self._factory.conventions

    @property
    def factory(self) -> StoreModuleFactory:
        return self._factory

    @property
    def module_names(self) -> list[str]:
        """Registered module names, in registration order."""
        return list(self._names)

    @property
    def sync_rules(self) -> list[SyncRule]:
        return list(self._sync_rules)

    def has_module(self, name: str) -> bool:
        return name in self._names

    def module(self, name: str) -> StoreModule:
        self._require(name)
        return self._container.module(name)

    def close(self) -> None:
        """Remove the sync middleware from the HTTP client."""
        if self._sync_handle is not None:
            self._sync_handle.remove()
            self._sync_handle = None

    # ------------------------------------------------------------------ #
    # Registration
    # ------------------------------------------------------------------ #

    def generate_and_set_default_store_module(
        self,
        name: str,
        endpoint: Optional[str] = None,
        extra: Optional[Mapping[str, Mapping[str, Any]]] = None,
        *,
        replace: bool = False,
    ) -> StoreModule:
        """Build the default module for *name*, merge *extra* into it, and register it.

        Args:
            name: Resource name.
            endpoint: API endpoint; defaults to *name*.
            extra: Additional members keyed by category: ``state``,
                ``actions``, ``getters``, ``mutations``.
            replace: Swap out an already registered module of the same name.

        Returns:
            The registered module.
        """
        if not replace and name in self._names:
            raise ModuleAlreadyRegisteredError(f"Store module {name!r} is already registered")
        module = self._factory.create_default_module(name, endpoint)
        if extra:
            module.merge(extra)
        self.register_module(name, module, replace=replace)
        return module

    def register_module(self, name: str, module: StoreModule, *, replace: bool = False) -> None:
        """Attach *module* to the container under *name*.

        Also installs the default sync rule ``(name,)`` so that any response
        with a top-level *name* key refreshes the module.

        Raises:
            ModuleAlreadyRegisteredError: *name* is registered and *replace*
                is false.
        """
        if name in self._names:
            if not replace:
                raise ModuleAlreadyRegisteredError(f"Store module {name!r} is already registered")
            logger.debug("Replacing store module %r", name)
        else:
            self._names.append(name)
        self._container.register_module(name, module)
        self._sync_rules.add(name, (name,))
        logger.debug("Registered store module %r (endpoint %r)", name, module.endpoint)

    def add_sync_rule(self, name: str, path: Sequence[str]) -> SyncRule:
        """Also refresh module *name* from the value at *path* in response bodies."""
        self._require(name)
        return self._sync_rules.add(name, path)

    def remove_sync_rule(self, name: str, path: Sequence[str]) -> bool:
        self._require(name)
        return self._sync_rules.remove(name, path)

    # ------------------------------------------------------------------ #
    # Namespaced access
    # ------------------------------------------------------------------ #

    def get(self, name: str, getter: Member, *args: Any) -> Any:
        """Call getter *getter* of module *name*.

        Raises:
            StoreModuleNotFoundError: *name* is not registered.
            StoreError: The module has no such getter.
        """
        self._require(name)
        return self._container.get(name, getter, *args)

    async def dispatch(self, name: str, action: Member, payload: Any = None) -> Any:
        """Run action *action* of module *name* with *payload*.

        The existence check runs before any action code, so an unknown name
        fails without sending a request.

        Raises:
            StoreModuleNotFoundError: *name* is not registered.
        """
        self._require(name)
        return await self._container.dispatch(name, action, payload)

    def commit(self, name: str, mutation: Member, payload: Any = None) -> None:
        self._require(name)
        self._container.commit(name, mutation, payload)

    # ------------------------------------------------------------------ #
    # Convenience wrappers
    # ------------------------------------------------------------------ #

    def get_all_from_store(self, name: str) -> list[Item]:
        return self.get(name, Operation.READ_ALL)

    def get_by_id_from_store(self, name: str, item_id: Any) -> Optional[Item]:
        return self.get(name, Operation.READ_BY_ID, item_id)

    async def create(self, name: str, item: Item) -> httpx.Response:
        return await self.dispatch(name, Operation.CREATE, item)

    async def update(self, name: str, item: Item) -> httpx.Response:
        return await self.dispatch(name, Operation.UPDATE, item)

    async def destroy(self, name: str, item_id: Any) -> httpx.Response:
        return await self.dispatch(name, Operation.DESTROY, item_id)

    async def read(self, name: str) -> Optional[httpx.Response]:
        """Fetch the item list of *name*; ``None`` when the GET was suppressed."""
        return await self.dispatch(name, Operation.READ)

    async def show(self, name: str, item_id: Any) -> Optional[httpx.Response]:
        """Fetch one item of *name*; ``None`` when the GET was suppressed."""
        return await self.dispatch(name, Operation.READ, item_id)

    async def set_all_in_store(self, name: str, items: Any) -> None:
        await self.dispatch(name, Operation.SET_ALL, items)

    def create_extra_get_action(
        self, endpoint: str, options: Optional[Mapping[str, Any]] = None
    ) -> Action:
        return self._factory.create_extra_get_action(endpoint, options)

    def create_extra_post_action(self, endpoint: str, action_name: Optional[str] = None) -> Action:
        return self._factory.create_extra_post_action(endpoint, action_name)

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _require(self, name: str) -> None:
        if name not in self._names:
            known = ", ".join(self._names) or "none"
            raise StoreModuleNotFoundError(
                f"Store module {name!r} not found (registered: {known})"
            )

    def _sync_from_response(self, response: httpx.Response) -> None:
        body = extract_json(response)
        if body is None:
            return
        for rule, value in self._sync_rules.matches(body):
            if rule.resource not in self._names:
                continue
            if is_item_payload(value):
                self._container.commit(rule.resource, Mutation.SET_ALL, value)
                debug(f"Synced {rule.resource} from {response.request.url.path}")
            else:
                debug(
                    f"Skipped sync of {rule.resource}: {type(value).__name__} is not an item list"
                )
