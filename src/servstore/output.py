"""Where servstore's messages and data go.

Diagnostics (ledger persistence problems, sync decisions, CLI status lines)
are written to stderr; response bodies and ledger listings are written to
stdout. Library code calls the module-level helpers (:func:`debug`,
:func:`warning`, ...), which delegate to one process-wide
:class:`OutputManager`. The CLI installs its own with :func:`set_output`.
"""

from __future__ import annotations

import json
import os
import sys
from collections.abc import Iterator, Mapping, Sequence
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table


class OutputFormat(str, Enum):
    """How stdout data is rendered. ``AUTO`` means ``RICH`` on a colour TTY, else ``PLAIN``."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


# level -> (prefix, Rich style)
_LEVELS: dict[str, tuple[str, str]] = {
    "debug": ("[debug] ", "dim"),
    "info": ("", ""),
    "warning": ("Warning: ", "yellow"),
    "error": ("Error: ", "bold red"),
}


class OutputManager:
    """Renders data on stdout and diagnostics on stderr.

    Args:
        format: stdout format; ``AUTO`` is resolved once, here.
        no_color: Disable colour. ``NO_COLOR`` and ``TERM=dumb`` imply it.
        quiet: Drop ``info`` messages.
        verbose: Show ``debug`` messages.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self.no_color = no_color or _color_disabled()
        self.quiet = quiet
        self.verbose = verbose
        if format == OutputFormat.AUTO:
            format = OutputFormat.RICH if _is_tty() and not self.no_color else OutputFormat.PLAIN
        self.format = format
        self._stdout = Console(
            file=sys.stdout, no_color=self.no_color, force_terminal=format == OutputFormat.RICH
        )
        self._stderr = Console(
            file=sys.stderr, stderr=True, no_color=self.no_color, highlight=False
        )

    def print_body(self, body: Any) -> None:
        """Write a decoded JSON response body."""
        if self.format == OutputFormat.JSON:
            _write(json.dumps(body, indent=2, ensure_ascii=False, default=str))
        elif self.format == OutputFormat.RICH:
            self._stdout.print_json(json.dumps(body, ensure_ascii=False, default=str))
        else:
            for line in _plain_lines(body):
                _write(line)

    def print_records(
        self, columns: Mapping[str, str], records: Sequence[Mapping[str, Any]]
    ) -> None:
        """Write *records* as a table whose *columns* map record keys to headings.

        In JSON mode the records themselves are written, keyed as given.
        """
        if self.format == OutputFormat.JSON:
            self.print_body(list(records))
            return
        rows = [[_cell(record.get(key)) for key in columns] for record in records]
        if self.format == OutputFormat.PLAIN:
            _write("\t".join(columns.values()))
            for row in rows:
                _write("\t".join(row))
            return
        table = Table(header_style="bold cyan")
        for heading in columns.values():
            table.add_column(heading)
        for row in rows:
            table.add_row(*row)
        self._stdout.print(table)

    def log(self, level: str, message: str) -> None:
        """Write a diagnostic at *level* (``debug``, ``info``, ``warning`` or ``error``)."""
        if (level == "debug" and not self.verbose) or (level == "info" and self.quiet):
            return
        prefix, style = _LEVELS[level]
        if self.no_color:
            print(f"{prefix}{message}", file=sys.stderr, flush=True)
        elif style:
            self._stderr.print(f"[{style}]{escape(prefix)}[/{style}]{escape(message)}")
        else:
            self._stderr.print(escape(message))


def _write(line: str) -> None:
    print(line, file=sys.stdout, flush=True)


def _plain_lines(body: Any) -> Iterator[str]:
    if isinstance(body, Mapping):
        for key, value in body.items():
            yield f"{key}\t{value}"
    elif isinstance(body, list):
        for item in body:
            if isinstance(item, Mapping):
                yield "\t".join(str(value) for value in item.values())
            else:
                yield str(item)
    else:
        yield str(body)


def _cell(value: Any) -> str:
    if isinstance(value, bool):
        return "yes" if value else "no"
    return "" if value is None else str(value)


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _color_disabled() -> bool:
    return os.environ.get("NO_COLOR") is not None or os.environ.get("TERM") == "dumb"


_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager; the next call creates a default one."""
    global _output
    _output = None


def print_body(body: Any) -> None:
    get_output().print_body(body)


def print_records(columns: Mapping[str, str], records: Sequence[Mapping[str, Any]]) -> None:
    get_output().print_records(columns, records)


def debug(message: str) -> None:
    get_output().log("debug", message)


def info(message: str) -> None:
    get_output().log("info", message)


def warning(message: str) -> None:
    get_output().log("warning", message)


def error(message: str) -> None:
    get_output().log("error", message)
