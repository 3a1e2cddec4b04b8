"""tablemap CLI: inspect record mappings and compile named-parameter statements."""

from __future__ import annotations

import logging
import sys

import structlog
import typer

from tablemap.cli import compile_cmd, inspect_cmd

app = typer.Typer(
    name="tablemap",
    help="tablemap CLI: inspect record-to-table mappings and compiled statements.",
    no_args_is_help=True,
)


class _State:
    """Global CLI state shared across subcommands."""

    json_output: bool = False
    verbose: bool = False


state = _State()


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def _version_callback(value: bool) -> None:
    if value:
        from tablemap import __version__

        print(f"tablemap {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    json_output: bool = typer.Option(False, "--json", help="JSON output"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug events to stderr"),
    version: bool = typer.Option(
        False, "--version", help="Show version", is_eager=True, callback=_version_callback
    ),
) -> None:
    """Global options for all tablemap commands."""
    state.json_output = json_output
    state.verbose = verbose
    configure_logging(verbose)


app.command(name="inspect")(inspect_cmd.inspect_cmd)
app.command(name="compile")(compile_cmd.compile_cmd)


def main() -> None:
    """Entry point for the tablemap CLI."""
    app()
