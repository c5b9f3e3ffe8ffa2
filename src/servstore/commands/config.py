"""Config commands -- show the effective client settings and change the common ones.

Each ``set-*`` command changes one field of the settings file; anything else
is edited in ``config.json`` directly (``servstore config show`` prints its
location).
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import typer

from servstore.models import ClientConfig
from servstore.output import info, print_body

config_app = typer.Typer(no_args_is_help=True)


def _update_client(change: Callable[[ClientConfig], None], summary: str) -> None:
    from servstore.config import load_global_config, save_global_config

    config = load_global_config()
    change(config.client)
    save_global_config(config)
    info(summary)


@config_app.command("show")
def config_show() -> None:
    """Show the effective client settings, ``SERVSTORE_APP_URL`` applied.

    Example::

        servstore --json config show
    """
    from servstore.config import config_path, resolve_client_config

    info(f"Settings file: {config_path()}")
    print_body({"client": resolve_client_config().model_dump(mode="json")})


@config_app.command("set-url")
def config_set_url(
    base_url: str = typer.Argument(help="API base URL, e.g. 'https://example.com/api'."),
) -> None:
    """Set the API base URL used when ``SERVSTORE_APP_URL`` is not set."""

    def change(client: ClientConfig) -> None:
        client.base_url = base_url.rstrip("/")

    _update_client(change, f"Base URL set to {base_url.rstrip('/')}.")


@config_app.command("set-duration")
def config_set_duration(
    seconds: int = typer.Argument(min=0, help="Seconds a fetched endpoint counts as fresh."),
) -> None:
    """Set how long a GET suppresses repeats of the same endpoint. 0 turns suppression off."""

    def change(client: ClientConfig) -> None:
        client.cache.duration_seconds = seconds

    _update_client(change, f"Cache duration set to {seconds}s.")


@config_app.command("set-download-dir")
def config_set_download_dir(
    directory: Path = typer.Argument(help="Directory downloads are saved to."),
) -> None:
    def change(client: ClientConfig) -> None:
        client.download_dir = str(directory.expanduser())

    _update_client(change, f"Downloads will be saved to {directory}.")
