"""The shared state container holding every registered store module."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any, Optional

from servstore.store.conventions import Member
from servstore.store.module import ActionContext, StoreModule

logger = logging.getLogger(__name__)


class StateContainer:
    """Registry of store modules with namespaced getter/commit/dispatch access.

    The container does not know which names are valid for callers; the
    :class:`~servstore.store.service.StoreService` checks that before any
    call reaches it.
    """

    def __init__(self) -> None:
        self._modules: dict[str, StoreModule] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._modules

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._modules))

    def __len__(self) -> int:
        return len(self._modules)

    def module(self, name: str) -> StoreModule:
        return self._modules[name]

    def register_module(self, name: str, module: StoreModule) -> None:
        """Attach *module* under *name*, replacing any module already there."""
        if name in self._modules:
            logger.debug("Replacing store module %r", name)
        self._modules[name] = module

    def unregister_module(self, name: str) -> Optional[StoreModule]:
        return self._modules.pop(name, None)

    def get(self, name: str, getter: Member, *args: Any) -> Any:
        module = self._modules[name]
        return module.getter(getter)(module.state, *args)

    def commit(self, name: str, mutation: Member, payload: Any = None) -> None:
        module = self._modules[name]
        module.mutation(mutation)(module.state, payload)

    async def dispatch(self, name: str, action: Member, payload: Any = None) -> Any:
        module = self._modules[name]
        handler = module.action(action)
        return await handler(self._context(name, module), payload)

    def _context(self, name: str, module: StoreModule) -> ActionContext:
        async def dispatch(action: Member, payload: Any = None) -> Any:
            return await self.dispatch(name, action, payload)

        def commit(mutation: Member, payload: Any = None) -> None:
            self.commit(name, mutation, payload)

        return ActionContext(module=module, commit=commit, dispatch=dispatch)
