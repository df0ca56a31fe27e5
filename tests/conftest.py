"""Shared fixtures: isolated config and a minimal wire reader for round-trips."""

from __future__ import annotations

import pytest
from hypothesis import HealthCheck, settings

from bytesink.bits import to_int32, to_int64, zigzag_decode32, zigzag_decode64
from bytesink.config import reset_config

# The fixtures below are stateless per example; safe to share across @given runs.
settings.register_profile("bytesink", suppress_health_check=[HealthCheck.function_scoped_fixture])
settings.load_profile("bytesink")


class WireReader:
    """Mirror of the encode side, just enough to check round-trips."""

    def __init__(self, data: bytes) -> None:
        self.data = data
        self.pos = 0

    def at_end(self) -> bool:
        return self.pos == len(self.data)

    def byte(self) -> int:
        b = self.data[self.pos]
        self.pos += 1
        return b

    def raw(self, n: int) -> bytes:
        out = self.data[self.pos : self.pos + n]
        assert len(out) == n, "truncated"
        self.pos += n
        return out

    def int16(self) -> int:
        return int.from_bytes(self.raw(2), "big", signed=True)

    def int32(self) -> int:
        return int.from_bytes(self.raw(4), "big", signed=True)

    def int64(self) -> int:
        return int.from_bytes(self.raw(8), "big", signed=True)

    def _varint(self) -> int:
        shift = 0
        value = 0
        while True:
            b = self.byte()
            value |= (b & 0x7F) << shift
            if not b & 0x80:
                return value
            shift += 7

    def vint(self) -> int:
        return to_int32(self._varint())

    def vlong(self) -> int:
        return to_int64(self._varint())

    def zint32(self) -> int:
        return zigzag_decode32(self._varint())

    def zint64(self) -> int:
        return zigzag_decode64(self._varint())

    def string(self) -> str:
        return self.raw(self.vint()).decode("utf-8")

    def string_map(self) -> dict[str, str]:
        return {self.string(): self.string() for _ in range(self.int32())}

    def string_set(self) -> set[str]:
        return {self.string() for _ in range(self.int32())}


@pytest.fixture
def reader():
    """Factory: reader(data) -> WireReader."""
    return WireReader


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch, tmp_path):
    """No user config file or BYTESINK_* env leaks into tests."""
    import os

    for key in list(os.environ):
        if key.startswith("BYTESINK_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("BYTESINK_CONFIG", str(tmp_path / "no-config.yaml"))
    reset_config()
    yield
    reset_config()
