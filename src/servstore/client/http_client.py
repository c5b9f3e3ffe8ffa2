"""Asynchronous HTTP client with GET suppression and middleware pipelines.

This module provides :class:`HTTPClient`, the only component in servstore
that talks to the network. It wraps :class:`httpx.AsyncClient` and layers on:

- **GET suppression** -- an option-less GET to an endpoint fetched less than
  ``cache_duration`` seconds ago returns ``None`` instead of hitting the
  network. See :class:`~servstore.cache.CacheLedger`.
- **Middleware** -- request, response and response-error pipelines (see
  :mod:`servstore.client.middleware`).
- **Error mapping** -- transport failures raise
  :class:`~servstore.exceptions.ConnectionError_`; HTTP error statuses raise
  a :class:`~servstore.exceptions.ResponseError` subclass.
- **Downloads** -- binary responses saved to disk with a resolved media type.

Nothing is retried; recovery belongs to the caller.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import httpx

from servstore.cache import CacheLedger
from servstore.client.middleware import Middleware, MiddlewareHandle, MiddlewareRegistry
from servstore.client.response import error_message, resolve_media_type
from servstore.config import get_download_dir
from servstore.exceptions import (
    AuthError,
    ConnectionError_,
    NotFoundError,
    ResponseError,
    ServerError,
    ServstoreError,
    UnprocessableEntityError,
)
from servstore.models import ClientConfig
from servstore.output import debug
from servstore.storage import MemoryStorage


@dataclass
class Download:
    """Result of :meth:`HTTPClient.download`."""

    path: Path
    media_type: Optional[str]
    response: httpx.Response


class HTTPClient:
    """Asynchronous client for the REST API behind the store.

    Must be used as an async context manager so that the underlying
    :class:`httpx.AsyncClient` is opened and closed. Middleware can be
    registered before the client is entered.

    Args:
        config: Base URL, default headers, timeout and cache settings.
            Defaults to :class:`~servstore.models.ClientConfig`.
        ledger: The cache ledger consulted for GET suppression. Defaults to
            an in-memory ledger built from ``config.cache``.
        transport: Optional httpx transport, e.g. :class:`httpx.MockTransport`
            in tests.

    Example::

        async with HTTPClient(config, ledger) as http:
            response = await http.get("users")
            if response is None:
                ...  # fetched within the last cache_duration seconds
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        ledger: Optional[CacheLedger] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._config = config or ClientConfig()
        self._ledger = ledger or CacheLedger(MemoryStorage(), self._config.cache)
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

        self._request_middleware: MiddlewareRegistry[httpx.Request] = MiddlewareRegistry("request")
        self._response_middleware: MiddlewareRegistry[httpx.Response] = MiddlewareRegistry(
            "response"
        )
        self._response_error_middleware: MiddlewareRegistry[ResponseError] = MiddlewareRegistry(
            "response-error"
        )

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> HTTPClient:
        request = self._config.request
        self._client = httpx.AsyncClient(
            base_url=self._config.base_url,
            headers=self._config.headers,
            timeout=request.timeout,
            verify=request.verify_ssl,
            follow_redirects=True,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *args: object) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    # ------------------------------------------------------------------ #
    # Properties
    # ------------------------------------------------------------------ #

    @property
    def ledger(self) -> CacheLedger:
        return self._ledger

    @property
    def cache_duration(self) -> int:
        """Seconds an option-less GET suppresses repeats of the same endpoint."""
        return self._ledger.duration

    @cache_duration.setter
    def cache_duration(self, value: int) -> None:
        self._ledger.duration = value

    # ------------------------------------------------------------------ #
    # Middleware registration
    # ------------------------------------------------------------------ #

    def register_request_middleware(self, callback: Middleware[httpx.Request]) -> MiddlewareHandle:
        """Run *callback* on every outgoing :class:`httpx.Request` before it is sent."""
        return self._request_middleware.register(callback)

    def register_response_middleware(
        self, callback: Middleware[httpx.Response]
    ) -> MiddlewareHandle:
        """Run *callback* on every successful :class:`httpx.Response`."""
        return self._response_middleware.register(callback)

    def register_response_error_middleware(
        self, callback: Middleware[ResponseError]
    ) -> MiddlewareHandle:
        """Run *callback* on every :class:`ResponseError` before it is raised."""
        return self._response_error_middleware.register(callback)

    # ------------------------------------------------------------------ #
    # Public request methods
    # ------------------------------------------------------------------ #

    async def request(self, method: str, endpoint: str, **kwargs: Any) -> httpx.Response:
        """Send a request through the middleware pipelines.

        Args:
            method: HTTP method.
            endpoint: Path relative to the configured base URL.
            **kwargs: Forwarded to :meth:`httpx.AsyncClient.build_request`
                (``json``, ``params``, ``headers``, ...).

        Returns:
            The successful :class:`httpx.Response`.

        Raises:
            ConnectionError_: No response was received. Response-error
                middleware does not run.
            ResponseError: The server answered with status >= 400. The
                response-error middleware has already run.
        """
        client = self._require_client()
        request = client.build_request(method, endpoint, **kwargs)
        self._request_middleware.run(request)

        debug(f"{request.method} {request.url}")
        try:
            response = await client.send(request)
        except httpx.TransportError as exc:
            raise ConnectionError_(f"{method} {endpoint} failed: {exc}") from exc

        if response.status_code >= 400:
            error = self._map_response_error(response)
            self._response_error_middleware.run(error)
            raise error

        self._response_middleware.run(response)
        return response

    async def get(
        self, endpoint: str, options: Optional[Mapping[str, Any]] = None
    ) -> Optional[httpx.Response]:
        """Send a GET request unless the endpoint was fetched very recently.

        When *options* is omitted and the ledger holds a fresh entry for
        *endpoint*, no request is sent and ``None`` is returned: the caller
        already has this data. Otherwise the request is sent; a successful
        option-less GET records the time the call was made in the ledger.
        GETs with *options* bypass the ledger entirely.

        Args:
            endpoint: Path relative to the configured base URL.
            options: Per-call request arguments (``params``, ``headers``, ...).

        Returns:
            The :class:`httpx.Response`, or ``None`` when suppressed.
        """
        now = self._ledger.now()
        if options is None and self._ledger.is_fresh(endpoint, now):
            debug(f"GET {endpoint} suppressed (fetched less than {self.cache_duration}s ago)")
            return None

        response = await self.request("GET", endpoint, **dict(options or {}))

        if options is None:
            self._ledger.touch(endpoint, now)
        return response

    async def post(self, endpoint: str, data: Any = None) -> httpx.Response:
        """Send a POST request with *data* as the JSON body."""
        return await self.request("POST", endpoint, json=data)

    async def delete(self, endpoint: str) -> httpx.Response:
        """Send a DELETE request."""
        return await self.request("DELETE", endpoint)

    async def download(
        self,
        endpoint: str,
        name: str,
        media_type: Optional[str] = None,
        directory: Optional[str | Path] = None,
    ) -> Download:
        """Fetch a binary document and save it to disk.

        The GET is never suppressed. When *media_type* is not given it is
        resolved from the response ``content-type`` header.

        Args:
            endpoint: Path relative to the configured base URL.
            name: File name to save the document under. Directory
                components are stripped.
            media_type: Explicit media type of the document.
            directory: Target directory. Defaults to the configured download
                directory.

        Returns:
            A :class:`Download` with the written path and media type.
        """
        response = await self.request("GET", endpoint)
        if not media_type:
            media_type = resolve_media_type(response.headers.get("content-type"))

        target_dir = Path(directory) if directory is not None else get_download_dir(self._config)
        target_dir.mkdir(parents=True, exist_ok=True)
        path = target_dir / Path(name).name
        path.write_bytes(response.content)
        debug(f"Saved {endpoint} to {path} ({media_type or 'unknown type'})")
        return Download(path=path, media_type=media_type, response=response)

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _require_client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise ServstoreError("Client not initialised -- use 'async with HTTPClient(...)'")
        return self._client

    @staticmethod
    def _map_response_error(response: httpx.Response) -> ResponseError:
        """Build the typed exception for an error HTTP status."""
        status = response.status_code
        message = error_message(response)
        if status in (401, 403):
            return AuthError(message, response)
        if status == 404:
            return NotFoundError(message, response)
        if status == 422:
            return UnprocessableEntityError(message, response)
        if status >= 500:
            return ServerError(message, response)
        return ResponseError(message, response)
