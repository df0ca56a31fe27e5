"""CLI command for copying a byte range between files via copy_bytes()."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from bytesink.cli._errors import contract_errors, handle_error
from bytesink.logging import get_logger
from bytesink.sinks import StreamSink
from bytesink.source import StreamSource


@contract_errors
def copy(
    src: Path = typer.Argument(..., help="File to read from."),
    dst: Path = typer.Argument(..., help="File to write to."),
    skip: int = typer.Option(0, "--skip", help="Bytes to skip at the start of SRC."),
    count: Optional[int] = typer.Option(None, "--count", "-n", help="Bytes to copy (default: rest of SRC)."),
    append: bool = typer.Option(False, "--append/--truncate", help="Append to DST instead of replacing it."),
) -> None:
    """Copy COUNT bytes of SRC, starting at SKIP, into DST."""
    if not src.is_file():
        handle_error(f"{src} is not a file")
    if not append and dst.exists() and src.samefile(dst):
        handle_error(f"{dst} is the source file; truncating it would lose the data (use --append)")
    size = src.stat().st_size
    if skip < 0 or skip > size:
        handle_error(f"--skip {skip} outside {src} ({size} bytes)")
    if count is None:
        count = size - skip

    with src.open("rb") as fin, StreamSink(dst.open("ab" if append else "wb")) as sink:
        fin.seek(skip)
        sink.copy_bytes(StreamSource(fin), count)
        written = sink.bytes_written

    get_logger(__name__).info("copy.completed", src=str(src), dst=str(dst), skip=skip, bytes=written)
    typer.echo(f"Copied {written} bytes from {src} to {dst}")
