"""The ``servstore`` command line: inspect the cache ledger, manage settings, fetch endpoints.

:func:`main` is the console-script entry point; it reports a
:class:`~servstore.exceptions.ServstoreError` on stderr and exits with the
error's ``exit_code``.
"""

from __future__ import annotations

import sys

import typer

from servstore import __version__
from servstore.commands.cache import cache_app
from servstore.commands.config import config_app
from servstore.commands.fetch import fetch_command
from servstore.exceptions import ServstoreError
from servstore.output import OutputFormat, OutputManager, error, set_output

app = typer.Typer(
    name="servstore",
    help="Inspect the servstore cache ledger and fetch API endpoints.",
    no_args_is_help=True,
    add_completion=False,
)
app.add_typer(cache_app, name="cache", help="Inspect or clear the cache ledger.")
app.add_typer(config_app, name="config", help="Show or change client settings.")
app.command("fetch")(fetch_command)


def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"servstore {__version__}")
        raise typer.Exit()


@app.callback()
def configure_output(
    version: bool = typer.Option(
        False, "--version", callback=_print_version, is_eager=True, help="Show version and exit."
    ),
    json_output: bool = typer.Option(False, "--json", help="Write data as JSON."),
    plain: bool = typer.Option(False, "--plain", help="Write data as tab-separated text."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colour."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Hide status messages."),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show cache and sync decisions."
    ),
) -> None:
    """Install the output settings every sub-command writes through."""
    if json_output:
        fmt = OutputFormat.JSON
    elif plain:
        fmt = OutputFormat.PLAIN
    else:
        fmt = OutputFormat.AUTO
    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))


def main() -> None:
    try:
        app()
    except ServstoreError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
