"""servstore -- keep an in-memory entity store in sync with a REST API.

The package pairs a convention-based CRUD store-module factory with an
asynchronous HTTP client that suppresses repeated GETs through a persisted
timestamp ledger. Any API response can refresh the store: registered sync
rules pick resource data out of response bodies.

Typical usage::

    async with HTTPClient(resolve_client_config(), ledger) as http:
        store = StoreService(http)
        users = ResourceController("users", store)
        await users.read()
        users.get_all

Modules:
    app: Typer application and CLI entry point.
    cache: Endpoint -> timestamp ledger used for GET suppression.
    client: Async HTTP client with middleware pipelines.
    store: Naming conventions, module factory, container and service.
    controllers: Per-resource facade over the store service.
    collaborators: Router and translator interfaces.
    models: Pydantic configuration models.
    config: XDG-aware configuration loading and saving.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting with Rich support.
    storage: Key-value storage backends for the ledger.
"""

__version__ = "0.1.0"
