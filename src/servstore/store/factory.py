"""Builds convention-driven CRUD store modules for any resource.

The :class:`StoreModuleFactory` holds the HTTP client and one
:class:`~servstore.store.conventions.NamingConventions` value, given at
construction. Every module it builds shares that value, so a resource's
actions and getters can be addressed generically by
:class:`~servstore.store.conventions.Operation`.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

import httpx

from servstore.client import HTTPClient
from servstore.client.response import extract_json
from servstore.output import debug
from servstore.store.conventions import DEFAULT_CONVENTIONS, Mutation, NamingConventions, Operation
from servstore.store.module import (
    Action,
    ActionContext,
    StoreModule,
    is_item_payload,
    make_default_getters,
    make_default_mutations,
)


def item_endpoint(endpoint: str, item_id: Any) -> str:
    return f"{endpoint.rstrip('/')}/{item_id}"


def extract_items(name: str, body: Any) -> Any:
    """Pull the items for resource *name* out of a response body.

    A list body is the item list itself; a mapping carries the list under
    the resource name, or is a single item when it has an ``id``. Returns
    ``None`` when nothing usable is found.
    """
    if isinstance(body, list):
        return body
    if isinstance(body, Mapping):
        if name in body:
            return body[name]
        if "id" in body:
            return body
    return None


class StoreModuleFactory:
    """Creates :class:`~servstore.store.module.StoreModule` objects.

    Args:
        http: Client every generated action sends its requests through.
        conventions: Naming table shared by every module this factory
            builds. Defaults to :data:`DEFAULT_CONVENTIONS`.
    """

    def __init__(self, http: HTTPClient, conventions: Optional[NamingConventions] = None) -> None:
        self._http = http
        self._conventions = conventions or DEFAULT_CONVENTIONS

    @property
    def conventions(self) -> NamingConventions:
        return self._conventions

    @property
    def http(self) -> HTTPClient:
        return self._http

    def create_default_module(self, name: str, endpoint: Optional[str] = None) -> StoreModule:
        """Build the default CRUD module for resource *name*.

        Args:
            name: Resource name; namespace of the module.
            endpoint: API endpoint of the resource list. Defaults to *name*.

        Raises:
            ValueError: *name* is empty.
        """
        if not name:
            raise ValueError("resource name must be non-empty")
        endpoint = endpoint or name
        conventions = self._conventions

        module = StoreModule(
            name=name,
            endpoint=endpoint,
            conventions=conventions,
            state={conventions.all_items_state: []},
            getters=make_default_getters(conventions),
            mutations=make_default_mutations(conventions),
        )
        module.actions = {
            conventions.suffix(Operation.READ): self._read_action(name, endpoint),
            conventions.suffix(Operation.CREATE): self._create_action(endpoint),
            conventions.suffix(Operation.UPDATE): self._update_action(endpoint),
            conventions.suffix(Operation.DESTROY): self._destroy_action(endpoint),
            conventions.suffix(Operation.SET_ALL): self._set_all_action(),
        }
        return module

    # ------------------------------------------------------------------ #
    # Extra actions
    # ------------------------------------------------------------------ #

    def create_extra_get_action(
        self, endpoint: str, options: Optional[Mapping[str, Any]] = None
    ) -> Action:
        """Action that GETs *endpoint*, or ``endpoint/<payload>`` when given a payload.

        The response is returned as is; response-driven sync takes care of
        any resource data it carries.
        """
        http = self._http

        async def extra_get(ctx: ActionContext, payload: Any = None) -> Optional[httpx.Response]:
            target = endpoint if payload is None else item_endpoint(endpoint, payload)
            return await http.get(target, options)

        return extra_get

    def create_extra_post_action(self, endpoint: str, action_name: Optional[str] = None) -> Action:
        """Action that POSTs its payload to *endpoint* or ``endpoint/action_name``."""
        http = self._http
        target = endpoint if action_name is None else item_endpoint(endpoint, action_name)

        async def extra_post(ctx: ActionContext, payload: Any = None) -> httpx.Response:
            return await http.post(target, payload)

        return extra_post

    # ------------------------------------------------------------------ #
    # Default actions
    # ------------------------------------------------------------------ #

    def _read_action(self, name: str, endpoint: str) -> Action:
        http = self._http

        async def read(ctx: ActionContext, payload: Any = None) -> Optional[httpx.Response]:
            target = endpoint if payload is None else item_endpoint(endpoint, payload)
            response = await http.get(target)
            if response is None:
                return None
            items = extract_items(name, extract_json(response))
            if items is None:
                debug(f"No {name} data in response from {target}")
            elif not is_item_payload(items):
                debug(f"Skipped {name} from {target}: {type(items).__name__} is not an item list")
            else:
                ctx.commit(Mutation.SET_ALL, items)
            return response

        return read

    def _create_action(self, endpoint: str) -> Action:
        http = self._http

        async def create(ctx: ActionContext, payload: Any = None) -> httpx.Response:
            return await http.post(endpoint, payload)

        return create

    def _update_action(self, endpoint: str) -> Action:
        http = self._http

        async def update(ctx: ActionContext, payload: Any = None) -> httpx.Response:
            if not isinstance(payload, Mapping) or "id" not in payload:
                raise ValueError("update needs an item with an 'id'")
            return await http.post(item_endpoint(endpoint, payload["id"]), payload)

        return update

    def _destroy_action(self, endpoint: str) -> Action:
        http = self._http

        async def destroy(ctx: ActionContext, payload: Any = None) -> httpx.Response:
            response = await http.delete(item_endpoint(endpoint, payload))
            ctx.commit(Mutation.DELETE, payload)
            return response

        return destroy

    @staticmethod
    def _set_all_action() -> Action:
        async def set_all(ctx: ActionContext, payload: Any = None) -> None:
            ctx.commit(Mutation.SET_ALL, payload)

        return set_all
