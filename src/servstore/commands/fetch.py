"""Fetch command -- GET one endpoint through the servstore HTTP client.

The request goes through the same path the store uses: the persisted cache
ledger is consulted first, so fetching an endpoint twice within the cache
duration prints a notice instead of sending a second request.
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional

import httpx
import typer

from servstore.client.response import extract_json
from servstore.exit_codes import EXIT_INVALID_USAGE
from servstore.output import debug, error, info, print_body


def _parse_params(params: list[str]) -> dict[str, str]:
    """Turn ``key=value`` strings into a query-parameter dict."""
    parsed: dict[str, str] = {}
    for raw in params:
        key, sep, value = raw.partition("=")
        if not sep or not key:
            error(f"Invalid parameter {raw!r}, expected key=value")
            raise typer.Exit(code=EXIT_INVALID_USAGE)
        parsed[key] = value
    return parsed


async def _fetch(
    endpoint: str, options: Optional[dict[str, Any]], refresh: bool
) -> Optional[httpx.Response]:
    from servstore.client import HTTPClient
    from servstore.commands.cache import disk_ledger
    from servstore.config import resolve_client_config

    config = resolve_client_config()
    with disk_ledger() as ledger:
        if refresh:
            ledger.invalidate(endpoint)
        async with HTTPClient(config, ledger) as http:
            response = await http.get(endpoint, options)
    return response


def fetch_command(
    endpoint: str = typer.Argument(help="Endpoint relative to the API base URL, e.g. 'users'."),
    param: list[str] = typer.Option(
        [], "--param", "-P", help="Query parameter as key=value. Bypasses the cache ledger."
    ),
    refresh: bool = typer.Option(
        False, "--refresh", "-r", help="Forget the ledger entry before fetching."
    ),
) -> None:
    """GET an endpoint and print its JSON body.

    Example::

        servstore fetch users
        servstore fetch users --param page=2
        servstore --json fetch users/1 --refresh
    """
    options = {"params": _parse_params(param)} if param else None
    response = asyncio.run(_fetch(endpoint, options, refresh))
    if response is None:
        info(f"{endpoint} was fetched recently; nothing new (use --refresh to force).")
        return

    debug(f"HTTP {response.status_code} from {response.request.url}")
    body = extract_json(response)
    if body is None:
        info(f"HTTP {response.status_code}, no JSON body.")
        return
    print_body(body)
