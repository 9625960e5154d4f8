"""Command-line front end of siteaudit.

The typer app lives here; global options only record logging preferences
(see helpers), command bodies live in ``commands/`` and all rich rendering
goes through ``output``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from siteaudit import __version__

# Tests reset the logging state held in helpers
from . import helpers as helpers
from .commands import phases, plan, playlists, tests, validate
from .helpers import (
    configure_global_logging,
    set_log_file,
    set_log_format,
    set_log_level,
)
from .output import console

# =============================================================================
# Typer app definition
# =============================================================================

app = typer.Typer(
    name="siteaudit",
    help="Plan website audit test runs",
    add_completion=False,
    no_args_is_help=True,
)


# =============================================================================
# Global option callbacks
# =============================================================================


def version_callback(value: bool) -> None:
    """Eager --version handler."""
    if value:
        console.print(f"siteaudit v{__version__}")
        raise typer.Exit()


def log_level_callback(value: str | None) -> str | None:
    if value:
        set_log_level(value)
    return value


def log_file_callback(value: Path | None) -> Path | None:
    if value:
        set_log_file(value)
    return value


def log_format_callback(value: str | None) -> str | None:
    if value:
        set_log_format(value)
    return value


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Print the siteaudit version",
    ),
    log_level: Annotated[
        str | None,
        typer.Option(
            "--log-level",
            "-L",
            callback=log_level_callback,
            help="Minimum level of emitted log events: DEBUG, INFO, WARNING or ERROR",
            envvar="SITEAUDIT_LOG_LEVEL",
        ),
    ] = None,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            callback=log_file_callback,
            help="Also write log events to this file",
            envvar="SITEAUDIT_LOG_FILE",
        ),
    ] = None,
    log_format: Annotated[
        str | None,
        typer.Option(
            "--log-format",
            callback=log_format_callback,
            help="console (stderr), json, or both (console plus --log-file)",
            envvar="SITEAUDIT_LOG_FORMAT",
        ),
    ] = None,
) -> None:
    """siteaudit - plan which audit tests run when, and how many pages at once."""
    configure_global_logging(console)


# =============================================================================
# Command registration
# =============================================================================

app.command()(plan)
app.command()(validate)

# Registry listings
app.command()(tests)
app.command()(phases)
app.command()(playlists)


# =============================================================================
# Public API
# =============================================================================

__all__ = [
    "app",
    "main",
    "console",
]
