"""GET suppression for servstore.

This package provides :class:`CacheLedger`, a record of when each endpoint
was last fetched. The :class:`~servstore.client.HTTPClient` consults it
before every option-less GET and skips the request while the previous fetch
is still fresh. The ledger is persisted through a
:class:`~servstore.storage.Storage` backend so suppression survives process
restarts.
"""

from servstore.cache.ledger import CACHE_KEY, CacheLedger

__all__ = ["CACHE_KEY", "CacheLedger"]
