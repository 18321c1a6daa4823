"""CLI error handling: report errors on stderr instead of tracebacks."""

from functools import wraps

import typer
from click.exceptions import Exit

from sqlbridge.errors import SqlBridgeError


def error_feedback(f):
    """Wrap command to echo failures to stderr and exit with status 1."""

    @wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except (SystemExit, Exit):
            raise
        except SqlBridgeError as e:
            typer.echo(f"{type(e).__name__}: {e}", err=True)
            raise typer.Exit(1) from e
        except (ValueError, KeyError, TypeError) as e:
            typer.echo(f"Invalid input: {e}", err=True)
            raise typer.Exit(1) from e
        except OSError as e:
            typer.echo(f"File error: {e}", err=True)
            raise typer.Exit(1) from e
        except Exception as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(1) from e

    return wrapper
