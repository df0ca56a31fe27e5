"""Logging setup for the CLI and for applications embedding bytesink.

Two independent choices, both taken from :class:`BytesinkConfig`:

    log_formatter    structlog (default) | stdlib
    log_destination  stderr (default)    | jsonl  (appends to jsonl_path)

Library modules only ever call ``logging.getLogger(__name__)``. The
structlog formatter bridges those stdlib records through the same
processor chain as structlog's own events, so everything reaching the
handler is rendered the same way (JSON or console).

setup_logging() owns exactly one root handler. Calling it again swaps that
handler and leaves any others (pytest's caplog, an application's own)
alone.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from bytesink.config import BytesinkConfig

_MANAGED_ATTR = "_bytesink_managed"
_DEFAULT_JSONL = "bytesink.jsonl"

_handler: logging.Handler | None = None
_use_structlog = False


def _structlog_formatter(config: BytesinkConfig) -> logging.Formatter:
    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
    ]
    renderer: structlog.types.Processor
    if config.log_format == "console":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *pre_chain,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=pre_chain,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
    )


def _stdlib_formatter(config: BytesinkConfig) -> logging.Formatter:
    if config.log_format == "console":
        return logging.Formatter(
            "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    return JsonLineFormatter()


_FORMATTERS = {
    "structlog": _structlog_formatter,
    "stdlib": _stdlib_formatter,
}


def _stderr_handler(config: BytesinkConfig) -> logging.Handler:
    return logging.StreamHandler(sys.stderr)


def _jsonl_handler(config: BytesinkConfig) -> logging.Handler:
    path = Path(config.jsonl_path or _DEFAULT_JSONL)
    path.parent.mkdir(parents=True, exist_ok=True)
    return logging.FileHandler(path, mode="a", encoding="utf-8")


_DESTINATIONS = {
    "stderr": _stderr_handler,
    "jsonl": _jsonl_handler,
}


class JsonLineFormatter(logging.Formatter):
    """One JSON object per record, without structlog.

    Keyword fields given to a :class:`KeyValueLogger` call are merged into
    the object.
    """

    def format(self, record: logging.LogRecord) -> str:
        out: dict[str, Any] = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "event": record.getMessage(),
        }
        out.update(getattr(record, "fields", {}))
        if record.exc_info:
            out["exception"] = self.formatException(record.exc_info)
        return json.dumps(out, default=str)


class KeyValueLogger:
    """structlog-style ``log.info("event", key=value)`` on top of a stdlib logger."""

    def __init__(self, name: str) -> None:
        self._logger = logging.getLogger(name)

    def _log(self, level: int, event: str, fields: dict[str, Any]) -> None:
        if self._logger.isEnabledFor(level):
            self._logger.log(level, event, extra={"fields": fields})

    def debug(self, event: str, **fields: Any) -> None:
        self._log(logging.DEBUG, event, fields)

    def info(self, event: str, **fields: Any) -> None:
        self._log(logging.INFO, event, fields)

    def warning(self, event: str, **fields: Any) -> None:
        self._log(logging.WARNING, event, fields)

    def error(self, event: str, **fields: Any) -> None:
        self._log(logging.ERROR, event, fields)


def setup_logging(config: BytesinkConfig) -> logging.Handler:
    """Install the configured handler on the root logger and return it.

    Raises:
        ValueError: unknown formatter or destination name.
    """
    global _handler, _use_structlog

    make_formatter = _FORMATTERS.get(config.log_formatter)
    if make_formatter is None:
        raise ValueError(
            f"Unknown log formatter: {config.log_formatter!r}. Available: {list(_FORMATTERS)}"
        )
    make_handler = _DESTINATIONS.get(config.log_destination)
    if make_handler is None:
        raise ValueError(
            f"Unknown log destination: {config.log_destination!r}. Available: {list(_DESTINATIONS)}"
        )

    handler = make_handler(config)
    handler.setFormatter(make_formatter(config))
    setattr(handler, _MANAGED_ATTR, True)

    root = logging.getLogger()
    for old in [h for h in root.handlers if getattr(h, _MANAGED_ATTR, False)]:
        root.removeHandler(old)
        old.close()
    root.addHandler(handler)
    root.setLevel(getattr(logging, config.log_level.upper(), logging.INFO))

    _handler = handler
    _use_structlog = config.log_formatter == "structlog"
    return handler


def get_logger(name: str = "bytesink") -> Any:
    """Logger accepting keyword fields, matching the active formatter.

    Before setup_logging() runs this is a :class:`KeyValueLogger`.
    """
    if _use_structlog:
        return structlog.get_logger(name)
    return KeyValueLogger(name)


def shutdown_logging() -> None:
    """Detach and close the handler installed by setup_logging()."""
    global _handler, _use_structlog
    if _handler is not None:
        logging.getLogger().removeHandler(_handler)
        _handler.close()
    _handler = None
    _use_structlog = False
