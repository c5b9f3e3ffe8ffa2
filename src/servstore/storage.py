"""Client-local persistent key/value storage.

The cache ledger persists itself through a :class:`Storage` backend rather
than touching the filesystem directly. Two backends are provided:

* :class:`DiskStorage` -- backed by :mod:`diskcache`, living in the XDG
  cache directory so it survives across sessions.
* :class:`MemoryStorage` -- a plain dict, for tests and for callers that do
  not want anything written to disk.

Values are strings; callers serialise structured data themselves.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Protocol

import diskcache


class Storage(Protocol):
    """Structural interface for string key/value storage backends."""

    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStorage:
    """In-process storage; contents are lost when the object is dropped."""

    def __init__(self) -> None:
        self._items: dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class DiskStorage:
    """Disk-backed storage using a :class:`diskcache.Cache` directory.

    Args:
        directory: Root directory for the storage. A ``storage/``
            subdirectory is created inside it.

    Example::

        from servstore.config import get_cache_dir
        from servstore.storage import DiskStorage

        storage = DiskStorage(get_cache_dir())
        storage.set_item("HTTP_CACHE", "{}")
    """

    def __init__(self, directory: str | Path) -> None:
        self._directory = Path(directory) / "storage"
        self._cache: Optional[diskcache.Cache] = diskcache.Cache(str(self._directory))

    @property
    def directory(self) -> Path:
        return self._directory

    def get_item(self, key: str) -> Optional[str]:
        if self._cache is None:
            return None
        value = self._cache.get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        if self._cache is None:
            raise RuntimeError("storage is closed")
        self._cache.set(key, value)

    def remove_item(self, key: str) -> None:
        if self._cache is not None:
            self._cache.delete(key)

    def close(self) -> None:
        """Close the underlying :class:`diskcache.Cache`. Safe to call twice."""
        if self._cache is not None:
            self._cache.close()
            self._cache = None
