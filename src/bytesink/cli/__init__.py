"""bytesink CLI -- typer-based command interface.

Commands:
    bytesink encode int32 <value>        Show the wire bytes of a value
    bytesink encode string <text>        (also int16/int64/vint/vlong/zint/zlong)
    bytesink encode map k=v ...          String map / set encodings
    bytesink copy <src> <dst>            Copy a byte range between files
"""

from __future__ import annotations

from typing import Optional

import typer

from bytesink.cli import copy_cmd, encode
from bytesink.config import get_config
from bytesink.logging import setup_logging

app = typer.Typer(
    name="bytesink",
    help="Encode values in the bytesink wire format and copy byte ranges.",
    no_args_is_help=True,
)

app.add_typer(encode.app, name="encode")
app.command("copy")(copy_cmd.copy)


@app.callback()
def _configure(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override BYTESINK_LOG_LEVEL."),
) -> None:
    config = get_config()
    if log_level:
        config.log_level = log_level
    setup_logging(config)


def main() -> None:
    """Entry point for the bytesink CLI."""
    app()
