"""Byte sources: the collaborator copy_bytes() reads from."""

from __future__ import annotations

from typing import BinaryIO, Protocol, runtime_checkable


@runtime_checkable
class ByteSource(Protocol):
    """Anything that can fill a caller-provided buffer on demand."""

    def read_bytes(self, buffer: bytearray, offset: int, length: int) -> None:
        """Fill buffer[offset:offset + length] with the next `length` bytes.

        Raises:
            EOFError: fewer than `length` bytes remain.
        """
        ...


class MemorySource:
    """Reads sequentially from an in-memory bytes-like object."""

    def __init__(self, data: bytes | bytearray | memoryview, offset: int = 0) -> None:
        self._data = memoryview(data).cast("B")
        if not 0 <= offset <= len(self._data):
            raise ValueError(f"offset {offset} outside source of {len(self._data)} bytes")
        self._pos = offset

    @property
    def position(self) -> int:
        return self._pos

    def remaining(self) -> int:
        return len(self._data) - self._pos

    def read_byte(self) -> int:
        if self._pos >= len(self._data):
            raise EOFError("read past end of source")
        b = self._data[self._pos]
        self._pos += 1
        return b

    def read_bytes(self, buffer: bytearray, offset: int, length: int) -> None:
        if length > self.remaining():
            raise EOFError(
                f"read past end of source: wanted {length} bytes, {self.remaining()} left"
            )
        buffer[offset : offset + length] = self._data[self._pos : self._pos + length]
        self._pos += length


class StreamSource:
    """Reads from a binary file-like object (file, socket.makefile('rb'), BytesIO).

    Short reads are retried until the request is satisfied or the stream
    reports end-of-file. Errors raised by the stream propagate unchanged.
    """

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream

    def read_bytes(self, buffer: bytearray, offset: int, length: int) -> None:
        view = memoryview(buffer)[offset : offset + length]
        filled = 0
        while filled < length:
            chunk = self._stream.read(length - filled)
            if not chunk:
                raise EOFError(f"stream ended after {filled} of {length} bytes")
            view[filled : filled + len(chunk)] = chunk
            filled += len(chunk)
