import json as json_lib

import typer

from sqlbridge.lib import codec


def set_flags(ctx: typer.Context, json_output: bool, quiet_output: bool) -> None:
    if ctx.obj is None or not isinstance(ctx.obj, dict):
        ctx.obj = {}
    ctx.obj["json_output"] = json_output
    ctx.obj["quiet_output"] = quiet_output


def is_json_mode(ctx: typer.Context) -> bool:
    return ctx.obj.get("json_output", False) if ctx.obj else False


def is_quiet_mode(ctx: typer.Context) -> bool:
    return ctx.obj.get("quiet_output", False) if ctx.obj else False


def out_json(data) -> str:
    return json_lib.dumps(data, indent=2)


def echo_text(msg: str, ctx: typer.Context) -> None:
    """Echo message only if not in quiet mode."""
    if not is_quiet_mode(ctx):
        typer.echo(msg)


def format_rows(rows: list[dict]) -> str:
    """Render rows as a plain tab-separated table with a header line."""
    if not rows:
        return "(no rows)"
    columns = list(rows[0])
    lines = ["\t".join(columns)]
    for row in rows:
        lines.append("\t".join("NULL" if row.get(c) is None else str(row.get(c)) for c in columns))
    return "\n".join(lines)


def echo_rows(rows: list[dict], ctx: typer.Context) -> None:
    rendered = [codec.row_to_dynamic(row) for row in rows]
    if is_json_mode(ctx):
        typer.echo(out_json(rendered))
        return
    typer.echo(format_rows(rendered))
