"""tablemap compile: rewrite named placeholders for a dialect."""

from __future__ import annotations

import typer

from tablemap.cli import _exitcodes as ec
from tablemap.cli._output import print_error, print_json
from tablemap.dialects import get_dialect
from tablemap.errors import CompilationError
from tablemap.statement import compile_named


def compile_cmd(
    template: str = typer.Argument(..., help="Query with :name placeholders"),
    dialect: str = typer.Option("sqlite", "--dialect", help="sqlite, mysql or postgresql"),
) -> None:
    """Show the driver-ready query and the ordered parameter names."""
    from tablemap.cli import state

    try:
        d = get_dialect(dialect)
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(ec.USAGE_ERROR)

    try:
        query, params = compile_named(template, d.placeholder())
    except CompilationError as e:
        print_error(str(e))
        raise typer.Exit(ec.MAPPING_ERROR)

    if state.json_output:
        print_json({"query": query, "params": params, "dialect": d.name})
        return

    print(query)
    print(f"params: {', '.join(params)}")
