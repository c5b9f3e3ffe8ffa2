"""Shared test fixtures for servstore.

Provides isolated config environments, output state management, an
in-memory ledger with a controllable clock, and helpers for building an
:class:`~servstore.client.HTTPClient` on top of :class:`httpx.MockTransport`.
These fixtures are automatically discovered by pytest.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import httpx
import pytest

from servstore.cache import CacheLedger
from servstore.models import CacheConfig, ClientConfig
from servstore.output import OutputFormat, OutputManager, reset_output, set_output
from servstore.storage import MemoryStorage


BASE_URL = "https://api.example.com/api"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches Console objects bound to sys.stdout/sys.stderr
    at creation time. When Typer's CliRunner redirects those streams the
    cached references go stale, so a fresh manager is created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points XDG_CONFIG_HOME, XDG_CACHE_HOME and XDG_DOWNLOAD_DIR at
    subdirectories of tmp_path, forces the XDG layout, and clears
    SERVSTORE_APP_URL so tests never touch real user settings.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    monkeypatch.setenv("XDG_DOWNLOAD_DIR", str(tmp_path / "downloads"))
    monkeypatch.delenv("SERVSTORE_APP_URL", raising=False)
    monkeypatch.setattr("servstore.config._is_xdg_platform", lambda: True)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# Ledger and client helpers
# ---------------------------------------------------------------------------


class FakeClock:
    """Settable clock returning whole Unix seconds."""

    def __init__(self, now: int = 1_700_000_000) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def ledger(clock: FakeClock) -> CacheLedger:
    """In-memory ledger with the default 10 second duration and a fake clock."""
    return CacheLedger(MemoryStorage(), CacheConfig(), clock=clock)


@pytest.fixture
def client_config() -> ClientConfig:
    return ClientConfig(base_url=BASE_URL)


def json_response(data: Any, status_code: int = 200) -> httpx.Response:
    """Build a JSON response for a MockTransport handler."""
    return httpx.Response(status_code=status_code, json=data)


class RecordingHandler:
    """MockTransport handler that records requests and answers from a route table.

    Routes map ``(method, path)`` to a JSON body, a ``(status, body)`` tuple,
    or a callable taking the request and returning an :class:`httpx.Response`.
    A ``(status, None)`` route answers with no content. Paths are relative to the API
    base path (``users/1``). Unknown routes answer 404.
    """

    def __init__(self, routes: dict[tuple[str, str], Any] | None = None) -> None:
        self.routes: dict[tuple[str, str], Any] = dict(routes or {})
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/api/")
        route = self.routes.get((request.method, path))
        if route is None:
            return json_response({"message": "not found"}, status_code=404)
        if callable(route):
            return route(request)
        status, body = route if isinstance(route, tuple) else (200, route)
        if body is None:
            return httpx.Response(status_code=status)
        return json_response(body, status_code=status)

    def calls(self, method: str | None = None) -> list[str]:
        return [
            f"{r.method} {r.url.path.removeprefix('/api/')}"
            for r in self.requests
            if method is None or r.method == method
        ]


@pytest.fixture
def handler() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture
def transport(handler: RecordingHandler) -> httpx.MockTransport:
    return httpx.MockTransport(handler)


@pytest.fixture
def http(client_config: ClientConfig, ledger: CacheLedger, transport: httpx.MockTransport):
    """An HTTPClient over the mock transport; enter it with ``async with http:``."""
    from servstore.client import HTTPClient

    return HTTPClient(client_config, ledger, transport=transport)
