"""Built-in CLI sub-commands for servstore.

* :mod:`~servstore.commands.cache` -- inspect and clear the persisted
  cache ledger.
* :mod:`~servstore.commands.config` -- view and modify global settings.
* :mod:`~servstore.commands.fetch` -- GET an endpoint through the client.

Multi-command groups export a :class:`typer.Typer` sub-application;
single commands export a plain callback registered on the root app.
"""
