"""Helpers for reading :class:`httpx.Response` objects.

Response-driven sync, the store actions, and the CLI all need the decoded
JSON body of a response while tolerating empty or non-JSON payloads
(downloads, ``204 No Content``). :func:`extract_json` centralises that.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx

HEADERS_TO_TYPE: dict[str, str] = {
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": "application/xlsx",
}
"""Content types that are saved under a different media type than the server reports."""


def extract_json(response: Optional[httpx.Response]) -> Any:
    """Return the decoded JSON body of *response*.

    Returns ``None`` when *response* is ``None`` (a suppressed GET), when the
    body is empty, or when it is not valid JSON.
    """
    if response is None or not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None


def resolve_media_type(content_type: Optional[str]) -> Optional[str]:
    """Map a ``content-type`` header value to the media type a download is saved as.

    Header parameters (``; charset=...``) are dropped before the lookup in
    :data:`HEADERS_TO_TYPE`. Types without an override are returned as-is.
    """
    if not content_type:
        return None
    base = content_type.split(";", 1)[0].strip().lower()
    return HEADERS_TO_TYPE.get(base, base)


def error_message(response: httpx.Response) -> str:
    """Build a one-line ``HTTP <status>: <detail>`` description of an error response."""
    try:
        detail = response.json()
        if isinstance(detail, dict):
            msg = detail.get("message") or detail.get("error") or detail.get("detail") or ""
        else:
            msg = str(detail)
    except ValueError:
        msg = response.text[:200] if response.text else ""

    prefix = f"HTTP {response.status_code}"
    return f"{prefix}: {msg}" if msg else prefix
