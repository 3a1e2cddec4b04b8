"""tablemap inspect: show the column bindings and standard statements of a record type."""

from __future__ import annotations

from typing import Any, Optional

import typer

from tablemap.cli import _exitcodes as ec
from tablemap.cli._loader import load_records
from tablemap.cli._output import print_error, print_json, print_table
from tablemap.dialects import get_dialect
from tablemap.errors import TablemapError
from tablemap.statement import compile_named
from tablemap.table import TableDescriptor, build_table


def _roles(f: Any) -> str:
    return ",".join(r for r in ("id", "auto", "created", "modified") if getattr(f, r))


def _describe(tbl: TableDescriptor, dialect_name: str) -> dict[str, Any]:
    dialect = get_dialect(dialect_name)
    suffix = dialect.insert_suffix(tbl) if dialect.insert_suffix is not None else ""
    templates = {
        "insert": tbl.insert_sql(suffix),
        "update": tbl.update_sql(),
        "delete": tbl.delete_sql(),
    }
    statements = {}
    for kind, template in templates.items():
        query, params = compile_named(template, dialect.placeholder())
        statements[kind] = {"query": query, "params": params}

    return {
        "record_type": tbl.record_type.__name__,
        "table": tbl.name,
        "dialect": dialect.name,
        "columns": [
            {"column": col, "path": ".".join(f.path), "kind": f.kind.__name__, "roles": _roles(f)}
            for col, f in tbl.fields.items()
        ],
        "num_field": tbl.num_field,
        "num_field_auto": tbl.num_field_auto,
        "statements": statements,
    }


def inspect_cmd(
    type_name: str = typer.Option(..., "--type", help="Record class name"),
    table: str = typer.Option(..., "--table", help="Table name"),
    models: Optional[str] = typer.Option(None, "--models", help="Python import path for models"),
    models_path: Optional[str] = typer.Option(
        None, "--models-path", help="Filesystem path to models"
    ),
    dialect: str = typer.Option("sqlite", "--dialect", help="sqlite, mysql or postgresql"),
) -> None:
    """Show how a record type maps to a table."""
    from tablemap.cli import state

    if models is None and models_path is None:
        print_error("One of --models or --models-path is required")
        raise typer.Exit(ec.USAGE_ERROR)

    try:
        get_dialect(dialect)
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(ec.USAGE_ERROR)

    try:
        records = load_records(models, models_path)
    except Exception as e:
        print_error(f"Failed to load models: {e}")
        raise typer.Exit(ec.GENERAL_ERROR)

    record_type = records.get(type_name)
    if record_type is None:
        print_error(f"Record type '{type_name}' not found. Available: {sorted(records)}")
        raise typer.Exit(ec.USAGE_ERROR)

    try:
        data = _describe(build_table(record_type, table), dialect)
    except TablemapError as e:
        print_error(str(e))
        raise typer.Exit(ec.MAPPING_ERROR)

    if state.json_output:
        print_json(data)
        return

    print(f"{data['record_type']} -> {data['table']} ({data['dialect']})")
    print()
    print_table(
        ["column", "path", "kind", "roles"],
        [[c["column"], c["path"], c["kind"], c["roles"]] for c in data["columns"]],
    )
    print()
    for kind, stmt in data["statements"].items():
        print(f"{kind}: {stmt['query']}")
        print(f"  params: {', '.join(stmt['params'])}")
