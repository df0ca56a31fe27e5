"""Concrete ByteSink destinations.

    MemorySink       growable in-memory buffer
    FixedMemorySink  fixed caller-owned region; full region -> EOFError
    StreamSink       any binary writable (file, socket.makefile('wb'), BytesIO)
    CountingSink     discards bytes, counts them
"""

from __future__ import annotations

import logging
from typing import BinaryIO

from bytesink.bits import MASK8
from bytesink.sink import ByteSink

logger = logging.getLogger(__name__)


class MemorySink(ByteSink):
    """Appends into a bytearray that grows as needed."""

    def __init__(self, surrogate_policy: str | None = None) -> None:
        super().__init__(surrogate_policy)
        self._buf = bytearray()
        self._pos = 0

    @property
    def position(self) -> int:
        return self._pos

    def write_byte(self, b: int) -> None:
        if self._pos == len(self._buf):
            self._buf.append(b & MASK8)
        else:
            self._buf[self._pos] = b & MASK8
        self._pos += 1

    def write_bytes_range(self, buffer, offset: int, length: int) -> None:
        self._buf[self._pos : self._pos + length] = memoryview(buffer)[offset : offset + length]
        self._pos += length

    def getvalue(self) -> bytes:
        """Bytes written since creation or the last reset()."""
        return bytes(self._buf[: self._pos])

    def reset(self) -> None:
        """Rewind to position 0, keeping the allocated buffer."""
        self._pos = 0


class FixedMemorySink(ByteSink):
    """Writes into a fixed window of a caller-provided bytearray.

    Running out of room is reported as EOFError, the same way a full
    device would surface from a file-backed sink.
    """

    def __init__(
        self,
        buffer: bytearray,
        offset: int = 0,
        length: int | None = None,
        surrogate_policy: str | None = None,
    ) -> None:
        super().__init__(surrogate_policy)
        if length is None:
            length = len(buffer) - offset
        if offset < 0 or length < 0 or offset + length > len(buffer):
            raise ValueError(
                f"region offset={offset} length={length} outside buffer of {len(buffer)} bytes"
            )
        self._buf = buffer
        self._start = offset
        self._end = offset + length
        self._pos = offset

    @property
    def position(self) -> int:
        """Absolute position within the backing buffer."""
        return self._pos

    def remaining(self) -> int:
        return self._end - self._pos

    def write_byte(self, b: int) -> None:
        if self._pos >= self._end:
            raise EOFError("sink region is full")
        self._buf[self._pos] = b & MASK8
        self._pos += 1

    def write_bytes_range(self, buffer, offset: int, length: int) -> None:
        if length > self.remaining():
            raise EOFError(
                f"sink region is full: {length} bytes requested, {self.remaining()} left"
            )
        self._buf[self._pos : self._pos + length] = memoryview(buffer)[offset : offset + length]
        self._pos += length

    def reset(self, offset: int | None = None) -> None:
        """Move the cursor back to the region start (or to an absolute offset inside it)."""
        target = self._start if offset is None else offset
        if not self._start <= target <= self._end:
            raise ValueError(f"offset {target} outside region [{self._start}, {self._end}]")
        self._pos = target


class StreamSink(ByteSink):
    """Writes to a binary stream. The stream's OSErrors propagate unchanged."""

    def __init__(
        self,
        stream: BinaryIO,
        name: str | None = None,
        surrogate_policy: str | None = None,
    ) -> None:
        super().__init__(surrogate_policy)
        self._stream = stream
        self._name = name or getattr(stream, "name", repr(stream))
        self._written = 0

    @property
    def bytes_written(self) -> int:
        return self._written

    def write_byte(self, b: int) -> None:
        self._stream.write(bytes((b & MASK8,)))
        self._written += 1

    def write_bytes_range(self, buffer, offset: int, length: int) -> None:
        self._stream.write(memoryview(buffer)[offset : offset + length])
        self._written += length

    def flush(self) -> None:
        self._stream.flush()

    def close(self) -> None:
        self._stream.close()
        logger.debug("closed stream sink %s after %d bytes", self._name, self._written)

    def __enter__(self) -> StreamSink:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


class CountingSink(ByteSink):
    """Measures encoded sizes without keeping the bytes."""

    def __init__(self, surrogate_policy: str | None = None) -> None:
        super().__init__(surrogate_policy)
        self.count = 0

    def write_byte(self, b: int) -> None:
        self.count += 1

    def write_bytes_range(self, buffer, offset: int, length: int) -> None:
        self.count += length
