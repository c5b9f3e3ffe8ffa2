"""Endpoint -> last-fetch timestamp ledger used to suppress repeated GETs.

Unlike a response cache, the ledger stores no bodies: a fresh entry means
"this endpoint was fetched moments ago, the store already holds its data",
and the client answers the repeat GET with ``None`` instead of a response.

The whole mapping is persisted as one JSON string under :data:`CACHE_KEY`
after every update. Persistence is best-effort: storage failures are
reported as warnings and never propagate to the request that triggered them.
An entry that could not be persisted is forgotten, so the endpoint counts as
a cache miss next time.

See Also:
    :class:`~servstore.models.CacheConfig` -- the ``enabled`` flag and
    ``duration_seconds`` default.
"""

from __future__ import annotations

import json
import time
from collections.abc import Callable
from typing import Optional

from servstore.models import CacheConfig
from servstore.output import debug, warning
from servstore.storage import Storage

CACHE_KEY = "HTTP_CACHE"
"""Storage key holding the JSON-serialised ledger."""


def _now() -> int:
    """Current Unix time in whole seconds."""
    return int(time.time())


class CacheLedger:
    """Persistent map of endpoint to Unix-second timestamp of its last fetch.

    Args:
        storage: Backend the ledger is loaded from and persisted to.
        config: Suppression settings. ``enabled=False`` makes
            :meth:`is_fresh` always answer ``False``.
        clock: Returns the current Unix time in seconds. Injected by tests.

    Example::

        ledger = CacheLedger(MemoryStorage(), CacheConfig(duration_seconds=10))
        ledger.touch("users")
        ledger.is_fresh("users")   # True for the next 10 seconds
    """

    def __init__(
        self,
        storage: Storage,
        config: Optional[CacheConfig] = None,
        clock: Callable[[], int] = _now,
    ) -> None:
        self._storage = storage
        self._config = config or CacheConfig()
        self._duration = self._config.duration_seconds
        self._clock = clock
        self._entries: dict[str, int] = self._load()

    @property
    def duration(self) -> int:
        """Seconds an entry stays fresh."""
        return self._duration

    @duration.setter
    def duration(self, value: int) -> None:
        if value < 0:
            raise ValueError(f"cache duration must be >= 0, got {value}")
        self._duration = value

    def now(self) -> int:
        """Current time according to the ledger's clock."""
        return self._clock()

    def is_fresh(self, endpoint: str, now: Optional[int] = None) -> bool:
        """Return True if *endpoint* was fetched less than :attr:`duration` seconds ago."""
        if not self._config.enabled:
            return False
        fetched_at = self._entries.get(endpoint)
        if fetched_at is None:
            return False
        current = self._clock() if now is None else now
        return current - fetched_at < self._duration

    def touch(self, endpoint: str, now: Optional[int] = None) -> None:
        """Record a successful fetch of *endpoint* and persist the ledger.

        If the ledger cannot be persisted the entry is dropped again, so the
        next GET of *endpoint* goes to the network.
        """
        self._entries[endpoint] = self._clock() if now is None else now
        if not self.persist():
            del self._entries[endpoint]

    def get(self, endpoint: str) -> Optional[int]:
        """Timestamp of the last recorded fetch of *endpoint*, or ``None``."""
        return self._entries.get(endpoint)

    def entries(self) -> dict[str, int]:
        """A copy of all recorded endpoints and their timestamps."""
        return dict(self._entries)

    def invalidate(self, endpoint: str) -> bool:
        """Forget *endpoint*. Returns True if it was recorded."""
        if self._entries.pop(endpoint, None) is None:
            return False
        self.persist()
        return True

    def clear(self) -> None:
        """Forget every endpoint."""
        self._entries.clear()
        self.persist()

    def persist(self) -> bool:
        """Write the whole ledger to storage.

        Failures are downgraded to a warning; returns False when the write failed.
        """
        try:
            self._storage.set_item(CACHE_KEY, json.dumps(self._entries))
        except Exception as exc:
            warning(f"Could not persist cache ledger: {exc}")
            return False
        return True

    def _load(self) -> dict[str, int]:
        try:
            raw = self._storage.get_item(CACHE_KEY)
        except Exception as exc:
            warning(f"Could not read cache ledger: {exc}")
            return {}
        if not raw:
            return {}
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, TypeError):
            debug("Discarding corrupt cache ledger")
            return {}
        if not isinstance(data, dict):
            return {}
        return {
            str(endpoint): int(ts)
            for endpoint, ts in data.items()
            if isinstance(ts, (int, float)) and not isinstance(ts, bool)
        }
