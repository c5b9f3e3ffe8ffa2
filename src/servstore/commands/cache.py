"""Cache commands -- inspect and clear the persisted cache ledger.

The ledger lives in the servstore cache directory (see
:func:`~servstore.config.get_cache_dir`) and is shared by every process
that uses the default disk storage, so clearing an entry here makes the
next GET of that endpoint hit the network again.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Optional

import typer

from servstore.output import info, print_records, warning

if TYPE_CHECKING:
    from servstore.cache import CacheLedger


cache_app = typer.Typer(no_args_is_help=True)


@contextmanager
def disk_ledger() -> Iterator[CacheLedger]:
    """Open the persisted ledger with the configured cache settings."""
    from servstore.cache import CacheLedger
    from servstore.config import get_cache_dir, resolve_client_config
    from servstore.storage import DiskStorage

    config = resolve_client_config()
    storage = DiskStorage(get_cache_dir())
    try:
        yield CacheLedger(storage, config.cache)
    finally:
        storage.close()


@cache_app.command("list")
def cache_list() -> None:
    """List recorded endpoints with the age of their last fetch.

    Example::

        servstore cache list
        servstore --json cache list
    """
    with disk_ledger() as ledger:
        entries = ledger.entries()
        now = ledger.now()
        duration = ledger.duration

    if not entries:
        info("Cache ledger is empty.")
        return

    rows = [
        {
            "endpoint": endpoint,
            "fetched_at": fetched_at,
            "age_seconds": now - fetched_at,
            "fresh": now - fetched_at < duration,
        }
        for endpoint, fetched_at in sorted(entries.items())
    ]

    print_records(
        {
            "endpoint": "Endpoint",
            "fetched_at": "Fetched at",
            "age_seconds": "Age (s)",
            "fresh": "Fresh",
        },
        rows,
    )


@cache_app.command("clear")
def cache_clear(
    endpoint: Optional[str] = typer.Argument(
        None, help="Endpoint to forget. Omit to clear the whole ledger."
    ),
) -> None:
    """Forget one endpoint, or every endpoint.

    Example::

        servstore cache clear users
        servstore cache clear
    """
    with disk_ledger() as ledger:
        if endpoint is None:
            ledger.clear()
            info("Cache ledger cleared.")
            return
        if ledger.invalidate(endpoint):
            info(f"Forgot {endpoint}.")
        else:
            warning(f"{endpoint} is not in the cache ledger.")
