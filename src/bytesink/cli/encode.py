"""CLI commands that show or save the wire encoding of a value.

Negative numbers must follow ``--`` so they are not read as options:

    bytesink encode zint -- -3
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

import typer

from bytesink.cli._errors import contract_errors, handle_error
from bytesink.logging import get_logger
from bytesink.sink import ByteSink
from bytesink.sinks import MemorySink, StreamSink

app = typer.Typer(help="Encode a value and print its bytes as hex (or write them to a file).")

_OUT = typer.Option(None, "--out", "-o", help="Append the encoded bytes to this file instead.")
_SEP = typer.Option(" ", "--sep", help="Separator between hex bytes.")


def _emit(write: Callable[[ByteSink], None], out: Optional[Path], sep: str) -> None:
    if out is not None:
        with StreamSink(out.open("ab")) as sink:
            write(sink)
            written = sink.bytes_written
        get_logger(__name__).info("encode.written", path=str(out), bytes=written)
        typer.echo(f"Wrote {written} bytes to {out}")
        return
    sink = MemorySink()
    write(sink)
    typer.echo(sep.join(f"{b:02x}" for b in sink.getvalue()))


@app.command("int16")
@contract_errors
def int16(value: int = typer.Argument(...), out: Optional[Path] = _OUT, sep: str = _SEP) -> None:
    """Fixed 2-byte big-endian integer."""
    _emit(lambda s: s.write_int16(value), out, sep)


@app.command("int32")
@contract_errors
def int32(value: int = typer.Argument(...), out: Optional[Path] = _OUT, sep: str = _SEP) -> None:
    """Fixed 4-byte big-endian integer."""
    _emit(lambda s: s.write_int32(value), out, sep)


@app.command("int64")
@contract_errors
def int64(value: int = typer.Argument(...), out: Optional[Path] = _OUT, sep: str = _SEP) -> None:
    """Fixed 8-byte big-endian integer."""
    _emit(lambda s: s.write_int64(value), out, sep)


@app.command("vint")
@contract_errors
def vint(value: int = typer.Argument(...), out: Optional[Path] = _OUT, sep: str = _SEP) -> None:
    """Variable-length 32-bit integer (1-5 bytes)."""
    _emit(lambda s: s.write_vint(value), out, sep)


@app.command("vlong")
@contract_errors
def vlong(value: int = typer.Argument(...), out: Optional[Path] = _OUT, sep: str = _SEP) -> None:
    """Variable-length non-negative 64-bit integer (1-9 bytes)."""
    _emit(lambda s: s.write_vlong(value), out, sep)


@app.command("zint")
@contract_errors
def zint(value: int = typer.Argument(...), out: Optional[Path] = _OUT, sep: str = _SEP) -> None:
    """Zigzag-encoded signed 32-bit integer."""
    _emit(lambda s: s.write_zint32(value), out, sep)


@app.command("zlong")
@contract_errors
def zlong(value: int = typer.Argument(...), out: Optional[Path] = _OUT, sep: str = _SEP) -> None:
    """Zigzag-encoded signed 64-bit integer."""
    _emit(lambda s: s.write_zint64(value), out, sep)


@app.command("string")
@contract_errors
def string(value: str = typer.Argument(...), out: Optional[Path] = _OUT, sep: str = _SEP) -> None:
    """VInt length prefix followed by UTF-8 bytes."""
    _emit(lambda s: s.write_string(value), out, sep)


@app.command("map")
@contract_errors
def string_map(
    entries: Optional[list[str]] = typer.Argument(None, help="KEY=VALUE pairs, in order."),
    out: Optional[Path] = _OUT,
    sep: str = _SEP,
) -> None:
    """Int32 count followed by key/value strings."""
    mapping: dict[str, str] = {}
    for entry in entries or []:
        key, eq, value = entry.partition("=")
        if not eq:
            handle_error(f"expected KEY=VALUE, got {entry!r}")
        mapping[key] = value
    _emit(lambda s: s.write_string_map(mapping), out, sep)


@app.command("set")
@contract_errors
def string_set(
    items: Optional[list[str]] = typer.Argument(None, help="Elements; duplicates are dropped."),
    out: Optional[Path] = _OUT,
    sep: str = _SEP,
) -> None:
    """Int32 count followed by each element as a string."""
    # dict.fromkeys keeps first-seen order
    _emit(lambda s: s.write_string_set(dict.fromkeys(items or [])), out, sep)
