"""Per-resource facade over the store service.

A :class:`ResourceController` is what application code holds for one
resource: it registers the resource's store module on construction and
exposes CRUD calls, store reads, and navigation without any networking or
state code of its own.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

import httpx

from servstore.collaborators import Router, Translator
from servstore.exceptions import ServstoreError
from servstore.models import Item
from servstore.store import StoreService

OVERVIEW_PAGE = "overview"
SHOW_PAGE = "show"
EDIT_PAGE = "edit"
CREATE_PAGE = "create"


class ResourceController:
    """CRUD, store access and navigation for resource *name*.

    Args:
        name: Resource name; also the store module name.
        store: Store service the module is registered with.
        endpoint: API endpoint; defaults to *name*.
        router: Navigation backend for the ``go_to_*`` helpers and the
            current-route lookups.
        translator: Label backend.
        translation: Labels for this resource, handed to *translator* on
            construction.
    """

    def __init__(
        self,
        name: str,
        store: StoreService,
        *,
        endpoint: Optional[str] = None,
        router: Optional[Router] = None,
        translator: Optional[Translator] = None,
        translation: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.name = name
        self.store = store
        self.router = router
        self.translator = translator

        store.generate_and_set_default_store_module(name, endpoint)
        if translator is not None and translation is not None:
            translator.set_translation(name, translation)

    # ------------------------------------------------------------------ #
    # API calls
    # ------------------------------------------------------------------ #

    async def read(self) -> Optional[httpx.Response]:
        return await self.store.read(self.name)

    async def show(self, item_id: Any) -> Optional[httpx.Response]:
        return await self.store.show(self.name, item_id)

    async def show_by_current_route_id(self) -> Optional[httpx.Response]:
        return await self.show(self._require_router().get_current_route_id())

    async def create(self, item: Item) -> httpx.Response:
        return await self.store.create(self.name, item)

    async def update(self, item: Item) -> httpx.Response:
        return await self.store.update(self.name, item)

    async def destroy(self, item_id: Any) -> httpx.Response:
        return await self.store.destroy(self.name, item_id)

    # ------------------------------------------------------------------ #
    # Store reads
    # ------------------------------------------------------------------ #

    @property
    def get_all(self) -> list[Item]:
        return self.store.get_all_from_store(self.name)

    def get_by_id(self, item_id: Any) -> Optional[Item]:
        return self.store.get_by_id_from_store(self.name, item_id)

    @property
    def get_by_current_route_id(self) -> Optional[Item]:
        return self.get_by_id(self._require_router().get_current_route_id())

    # ------------------------------------------------------------------ #
    # Labels
    # ------------------------------------------------------------------ #

    @property
    def singular(self) -> str:
        return self.translator.get_singular(self.name) if self.translator else self.name

    @property
    def plural(self) -> str:
        return self.translator.get_plural(self.name) if self.translator else self.name

    # ------------------------------------------------------------------ #
    # Navigation
    # ------------------------------------------------------------------ #

    def go_to_overview_page(self) -> None:
        self._require_router().go_to_route(self._route(OVERVIEW_PAGE))

    def go_to_show_page(self, item_id: Any) -> None:
        self._require_router().go_to_route(self._route(SHOW_PAGE), item_id)

    def go_to_edit_page(self, item_id: Any, query: Optional[Mapping[str, Any]] = None) -> None:
        self._require_router().go_to_route(self._route(EDIT_PAGE), item_id, query)

    def go_to_create_page(self, query: Optional[Mapping[str, Any]] = None) -> None:
        self._require_router().go_to_route(self._route(CREATE_PAGE), None, query)

    def _route(self, page: str) -> str:
        return f"{self.name}.{page}"

    def _require_router(self) -> Router:
        if self.router is None:
            raise ServstoreError(f"No router configured for {self.name!r}")
        return self.router
