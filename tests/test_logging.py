"""Tests for logging setup: formatter x destination, handler ownership."""

from __future__ import annotations

import json
import logging

import pytest

from bytesink.config import BytesinkConfig
from bytesink.logging import (
    JsonLineFormatter,
    KeyValueLogger,
    get_logger,
    setup_logging,
    shutdown_logging,
)
from bytesink.sinks import MemorySink
from bytesink.source import MemorySource


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    shutdown_logging()
    root.handlers = handlers
    root.setLevel(level)


def _read_jsonl(path) -> list[dict]:
    return [json.loads(line) for line in path.read_text().splitlines() if line.strip()]


class TestSetup:
    def test_unknown_formatter_raises(self):
        with pytest.raises(ValueError, match="Unknown log formatter"):
            setup_logging(BytesinkConfig(log_formatter="nonexistent"))

    def test_unknown_destination_raises(self):
        with pytest.raises(ValueError, match="Unknown log destination"):
            setup_logging(BytesinkConfig(log_destination="nonexistent"))

    def test_stderr_is_default(self):
        handler = setup_logging(BytesinkConfig())
        assert isinstance(handler, logging.StreamHandler)
        assert not isinstance(handler, logging.FileHandler)

    def test_stdlib_json_formatter(self):
        handler = setup_logging(BytesinkConfig(log_formatter="stdlib"))
        assert isinstance(handler.formatter, JsonLineFormatter)

    def test_jsonl_creates_parent_dir(self, tmp_path):
        path = tmp_path / "logs" / "run.jsonl"
        handler = setup_logging(BytesinkConfig(log_destination="jsonl", jsonl_path=str(path)))
        assert isinstance(handler, logging.FileHandler)
        assert path.parent.is_dir()

    def test_replaces_only_own_handler(self):
        root = logging.getLogger()
        foreign = logging.NullHandler()
        root.addHandler(foreign)
        first = setup_logging(BytesinkConfig())
        second = setup_logging(BytesinkConfig())
        assert first not in root.handlers
        assert second in root.handlers
        assert foreign in root.handlers

    def test_level_applied(self):
        setup_logging(BytesinkConfig(log_level="warning"))
        assert logging.getLogger().level == logging.WARNING

    def test_shutdown_detaches_handler(self):
        handler = setup_logging(BytesinkConfig())
        shutdown_logging()
        assert handler not in logging.getLogger().handlers


class TestGetLogger:
    def test_before_setup_accepts_fields(self):
        lg = get_logger("bytesink.test")
        assert isinstance(lg, KeyValueLogger)
        lg.info("event.name", key="value")

    def test_stdlib_formatter_gives_key_value_logger(self):
        setup_logging(BytesinkConfig(log_formatter="stdlib"))
        assert isinstance(get_logger("bytesink.test"), KeyValueLogger)


class TestOutput:
    def test_stdlib_jsonl_records_library_logs(self, tmp_path):
        path = tmp_path / "out.jsonl"
        setup_logging(
            BytesinkConfig(
                log_formatter="stdlib",
                log_destination="jsonl",
                log_level="DEBUG",
                jsonl_path=str(path),
            )
        )
        MemorySink().copy_bytes(MemorySource(b"abc"), 3)
        get_logger("bytesink.test").info("structured.event", size=3)
        shutdown_logging()

        events = {rec["event"]: rec for rec in _read_jsonl(path)}
        assert events["copied 3 bytes in 1 chunk(s)"]["logger"] == "bytesink.sink"
        assert events["structured.event"]["size"] == 3
        assert events["structured.event"]["level"] == "info"

    def test_structlog_jsonl_renders_stdlib_records(self, tmp_path):
        path = tmp_path / "out.jsonl"
        setup_logging(
            BytesinkConfig(log_destination="jsonl", log_level="DEBUG", jsonl_path=str(path))
        )
        MemorySink().copy_bytes(MemorySource(b"abcd"), 4)
        shutdown_logging()

        records = _read_jsonl(path)
        assert any(rec["event"] == "copied 4 bytes in 1 chunk(s)" for rec in records)

    def test_below_level_is_dropped(self, tmp_path):
        path = tmp_path / "out.jsonl"
        setup_logging(
            BytesinkConfig(
                log_formatter="stdlib",
                log_destination="jsonl",
                log_level="WARNING",
                jsonl_path=str(path),
            )
        )
        get_logger("bytesink.test").info("quiet")
        get_logger("bytesink.test").warning("loud", code=7)
        shutdown_logging()

        records = _read_jsonl(path)
        assert [r["event"] for r in records] == ["loud"]
        assert records[0]["code"] == 7
