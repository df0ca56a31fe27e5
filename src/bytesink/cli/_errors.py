"""CLI error handling."""

from __future__ import annotations

import functools
from typing import Any, Callable

import typer


def handle_error(msg: str) -> None:
    """Print an error message and exit."""
    typer.echo(f"Error: {msg}", err=True)
    raise typer.Exit(1)


def contract_errors(f: Callable) -> Callable:
    """Turn caller mistakes (bad values, bad ranges) into a clean exit 1.

    I/O failures are reported the same way but keep their own message.
    """

    @functools.wraps(f)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return f(*args, **kwargs)
        except (ValueError, TypeError) as e:
            handle_error(str(e))
        except (OSError, EOFError) as e:
            handle_error(f"I/O failure: {e}")

    return wrapper
