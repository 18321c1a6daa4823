"""sqlbridge CLI: run SQL against a database file by path."""

import json
import logging
import sys
from pathlib import Path
from typing import Annotated

import typer

from sqlbridge import commands
from sqlbridge.cli import output
from sqlbridge.cli.errors import error_feedback
from sqlbridge.lib import config
from sqlbridge.lib.store import registry

app = typer.Typer(
    invoke_without_command=True,
    add_completion=False,
    help="Run SQL against SQLite files by path. Params are JSON arrays.",
)

NoForeignKeys = Annotated[
    bool, typer.Option("--no-fk", help="Disable foreign key enforcement for this session.")
]
Params = Annotated[
    str, typer.Option("--params", "-p", help='JSON array, e.g. \'[1, "Bob"]\' or \'[[1], [2]]\'.')
]


@app.callback(context_settings={"help_option_names": ["-h", "--help"]})
def main_callback(
    ctx: typer.Context,
    json_output: bool = typer.Option(False, "--json", "-j", help="Output in JSON format."),
    quiet_output: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log connection activity."),
):
    output.set_flags(ctx, json_output, quiet_output)
    if verbose:
        logging.getLogger("sqlbridge").setLevel(logging.DEBUG)

    if ctx.resilient_parsing:
        return

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())


def _parse_params(raw: str) -> list:
    parsed = json.loads(raw) if raw else []
    if not isinstance(parsed, list):
        raise ValueError("--params must be a JSON array")
    return parsed


def _open(path: str, no_fk: bool) -> None:
    commands.open(path, {"disable_foreign_keys": no_fk})


@app.command("select")
@error_feedback
def select_cmd(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Database file"),
    sql: str = typer.Argument(..., help="SELECT statement"),
    params: Params = "",
    first: bool = typer.Option(False, "--first", help="Return only the first row."),
    no_fk: NoForeignKeys = False,
):
    """Run a query and print its rows."""
    _open(path, no_fk)
    bound = _parse_params(params)
    if first:
        rows = [commands.select_first(path, sql, bound)]
    else:
        rows = commands.select(path, sql, bound)
    output.echo_rows(rows, ctx)


@app.command("execute")
@error_feedback
def execute_cmd(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Database file"),
    sql: str = typer.Argument(..., help="Write or DDL statement"),
    params: Params = "",
    no_fk: NoForeignKeys = False,
):
    """Execute one statement (once per row when params is an array of arrays)."""
    _open(path, no_fk)
    commands.execute(path, sql, _parse_params(params))
    if output.is_json_mode(ctx):
        typer.echo(output.out_json({"ok": True}))
    else:
        output.echo_text("OK", ctx)


@app.command("batch")
@error_feedback
def batch_cmd(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Database file"),
    source: str = typer.Argument("-", help="JSON file of [sql, params] pairs, '-' for stdin"),
    no_fk: NoForeignKeys = False,
):
    """Execute a list of statements in one transaction (rollback on error)."""
    raw = sys.stdin.read() if source == "-" else Path(source).read_text()
    statements = json.loads(raw)
    if not isinstance(statements, list):
        raise ValueError("Batch input must be a JSON array of [sql, params] pairs")
    _open(path, no_fk)
    commands.batch(path, statements)
    if output.is_json_mode(ctx):
        typer.echo(output.out_json({"ok": True, "statements": len(statements)}))
    else:
        output.echo_text(f"OK ({len(statements)} statements)", ctx)


@app.command("pragma")
@error_feedback
def pragma_cmd(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Database file"),
    key: str = typer.Argument(..., help="Pragma name"),
    value: str = typer.Argument(..., help="Pragma value"),
):
    """Set a pragma for the session."""
    _open(path, False)
    commands.set_pragma(path, key, value)
    output.echo_text(f"PRAGMA {key} = {value}", ctx)


@app.command("load")
@error_feedback
def load_cmd(
    ctx: typer.Context,
    no_fk: NoForeignKeys = False,
):
    """Open the default database in the data dir and print its path."""
    path = commands.load({"disable_foreign_keys": no_fk})
    if output.is_json_mode(ctx):
        typer.echo(output.out_json({"path": path}))
    else:
        typer.echo(path)


def main() -> None:
    """Entry point for the sqlbridge script."""
    logging.basicConfig(
        level=config.log_level(),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    try:
        app()
    finally:
        registry.shutdown()
