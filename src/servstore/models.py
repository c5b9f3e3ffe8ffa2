"""Canonical Pydantic models shared across all servstore modules.

This is the single source of truth for configuration shapes in the project.
The models are serialised as JSON in the user's config directory:
:class:`RequestConfig`, :class:`CacheConfig`, :class:`ClientConfig` and
:class:`GlobalConfig`.

The :data:`Item` alias describes the records kept in the store; items are
plain JSON mappings with at least an ``id`` key.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field

Item = dict[str, Any]
"""A JSON record held by a store module. Identity is its ``id`` key."""

DEFAULT_BASE_URL = "http://localhost/api"

DEFAULT_HEADERS: dict[str, str] = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}


class RequestConfig(BaseModel):
    """Default HTTP request settings applied to every API call."""

    timeout: int = Field(default=30, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")


class CacheConfig(BaseModel):
    """GET suppression settings for the cache ledger."""

    enabled: bool = Field(default=True, description="Suppress repeated GET requests")
    duration_seconds: int = Field(
        default=10, ge=0, description="Seconds a fetched endpoint stays fresh"
    )


class ClientConfig(BaseModel):
    """Connection settings for :class:`~servstore.client.HTTPClient`."""

    base_url: str = Field(default=DEFAULT_BASE_URL, description="API base URL")
    headers: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_HEADERS))
    download_dir: Optional[str] = Field(
        default=None, description="Directory downloads are saved to"
    )
    request: RequestConfig = Field(default_factory=RequestConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/servstore/config.json``.

    Loaded and saved by :func:`~servstore.config.load_global_config` and
    :func:`~servstore.config.save_global_config`.  The ``SERVSTORE_APP_URL``
    environment variable takes precedence over ``client.base_url``; see
    :func:`~servstore.config.resolve_client_config`.
    """

    client: ClientConfig = Field(default_factory=ClientConfig)
