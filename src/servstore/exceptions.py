"""Exception hierarchy for servstore.

All exceptions inherit from :class:`ServstoreError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`servstore.exit_codes`.
The CLI entry point in :func:`servstore.app.main` catches ``ServstoreError``
and exits with the appropriate code; library callers catch the specific
subclasses.

Subclass hierarchy::

    ServstoreError                  (exit 1)
    +-- ConfigError                 (exit 1)
    +-- ConnectionError_            (exit 6)
    +-- ResponseError               (exit 5)
    |   +-- AuthError               (exit 3)
    |   +-- NotFoundError           (exit 4)
    |   +-- UnprocessableEntityError (exit 5)
    |   +-- ServerError             (exit 5)
    +-- StoreError                  (exit 8)
        +-- StoreModuleNotFoundError
        +-- ModuleAlreadyRegisteredError
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from servstore.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_NOT_FOUND,
    EXIT_SERVER_ERROR,
    EXIT_STORE_ERROR,
)

if TYPE_CHECKING:
    import httpx


class ServstoreError(Exception):
    """Base exception for all servstore errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`servstore.exit_codes`.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigError(ServstoreError):
    """Raised for configuration problems (invalid JSON, failed validation)."""

    exit_code = EXIT_GENERIC_FAILURE


class ConnectionError_(ServstoreError):
    """Raised on network-level failures where no response was received.

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.  The originating :class:`httpx.TransportError` is
    available as ``__cause__``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class ResponseError(ServstoreError):
    """Raised when the API answered with an HTTP error status.

    The failing :class:`httpx.Response` is kept on the exception so that
    response-error middleware (e.g. a validation-message display) can
    inspect it.

    Args:
        message: Human-readable error description.
        response: The error response returned by the server.
    """

    exit_code = EXIT_SERVER_ERROR

    def __init__(self, message: str, response: httpx.Response):
        super().__init__(message)
        self.response = response

    @property
    def status_code(self) -> int:
        """HTTP status code of the failing response."""
        return self.response.status_code

    @property
    def body(self) -> Optional[Any]:
        """Decoded JSON body of the failing response, or ``None``."""
        try:
            return self.response.json()
        except ValueError:
            return None


class AuthError(ResponseError):
    """Raised when the API returns HTTP 401 or 403."""

    exit_code = EXIT_AUTH_FAILURE


class NotFoundError(ResponseError):
    """Raised when the API returns HTTP 404 (resource not found)."""

    exit_code = EXIT_NOT_FOUND


class UnprocessableEntityError(ResponseError):
    """Raised when the API returns HTTP 422 (validation failed)."""


class ServerError(ResponseError):
    """Raised when the API returns an HTTP 5xx server error."""


class StoreError(ServstoreError):
    """Base class for store registration and lookup errors."""

    exit_code = EXIT_STORE_ERROR


class StoreModuleNotFoundError(StoreError):
    """Raised when an operation addresses a module name that is not registered."""


class ModuleAlreadyRegisteredError(StoreError):
    """Raised when a module name is registered a second time without ``replace=True``."""
