"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~servstore.exceptions.ServstoreError` subclass.
The ``servstore`` CLI exits with these codes so shell wrappers can tell
failure classes apart without parsing stderr.

Example::

    $ servstore fetch users
    $ echo $?
    6   # EXIT_CONNECTION_ERROR -- the API could not be reached
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_AUTH_FAILURE = 3
"""The API rejected the request as unauthenticated or forbidden (HTTP 401/403)."""

EXIT_NOT_FOUND = 4
"""The requested resource was not found (HTTP 404)."""

EXIT_SERVER_ERROR = 5
"""The remote API returned an HTTP error response (4xx other than the above, or 5xx)."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_STORE_ERROR = 8
"""A store module was addressed that is not registered, or was registered twice."""
