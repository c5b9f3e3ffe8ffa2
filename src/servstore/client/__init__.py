"""HTTP client module for servstore.

Provides :class:`HTTPClient`, an asynchronous wrapper around
:class:`httpx.AsyncClient` with ledger-based GET suppression, request /
response / response-error middleware pipelines, and file downloads.

Example::

    from servstore.client import HTTPClient

    async with HTTPClient(config) as http:
        http.register_request_middleware(lambda request: request.headers.update(token))
        response = await http.get("users")
"""

from servstore.client.http_client import Download, HTTPClient
from servstore.client.middleware import MiddlewareHandle, MiddlewareRegistry

__all__ = ["Download", "HTTPClient", "MiddlewareHandle", "MiddlewareRegistry"]
