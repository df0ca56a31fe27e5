"""ByteSink: sequential writer of primitive values.

Concrete destinations supply two primitives:

    write_byte(b)                              one byte
    write_bytes_range(buffer, offset, length)  a validated slice of buffer

Every other operation (fixed-width ints, VInt/VLong, zigzag, strings, bulk
copy, string collections) is implemented once here in terms of those two.

Wire shapes (big-endian fixed width; 7 payload bits per varint byte, low
group first, high bit = continuation):

    write_int16          2 bytes
    write_int32          4 bytes
    write_int64          8 bytes
    write_vint           1-5 bytes
    write_vlong          1-9 bytes
    write_zint32/64      zigzag(v) as VInt / unsigned VLong
    write_string         VInt(len(utf8)) + utf8
    write_string_map     Int32(count) + count x (key, value) strings
    write_string_set     Int32(count) + count x string

Instances are single-threaded: the write cursor belongs to the destination
and nothing here locks. Errors raised by the destination propagate as-is.
"""

from __future__ import annotations

import logging
import struct
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping

from bytesink import utf8
from bytesink.bits import MASK16, MASK32, MASK64, zigzag_encode32, zigzag_encode64
from bytesink.config import get_config
from bytesink.source import ByteSource

logger = logging.getLogger(__name__)

COPY_BUFFER_SIZE = 16384

_INT16 = struct.Struct(">H")
_INT32 = struct.Struct(">I")
_INT64 = struct.Struct(">Q")


def _check_width(v: int, bits: int) -> None:
    """Accept anything representable as a signed or unsigned `bits`-wide int."""
    if not -(1 << (bits - 1)) <= v < (1 << bits):
        raise ValueError(f"{v} does not fit in {bits} bits")


def _varint(v: int) -> bytearray:
    """Continuation-bit encoding of an already-unsigned value."""
    out = bytearray()
    while v & ~0x7F:
        out.append((v & 0x7F) | 0x80)
        v >>= 7
    out.append(v)
    return out


class ByteSink(ABC):
    """Abstract destination for encoded values.

    Subclasses must call ``super().__init__()`` and implement
    :meth:`write_byte` and :meth:`write_bytes_range`.
    """

    def __init__(self, surrogate_policy: str | None = None) -> None:
        if surrogate_policy is None:
            surrogate_policy = get_config().surrogate_policy
        self._surrogate_policy = utf8.check_policy(surrogate_policy)
        # Allocated by the first copy_bytes() call, then reused.
        self._copy_buffer: bytearray | None = None

    @property
    def surrogate_policy(self) -> str:
        return self._surrogate_policy

    # ------------------------------------------------------------------
    # Primitives
    # ------------------------------------------------------------------

    @abstractmethod
    def write_byte(self, b: int) -> None:
        """Append one byte. Only the low 8 bits of b are written."""
        ...

    @abstractmethod
    def write_bytes_range(self, buffer: bytes | bytearray | memoryview, offset: int, length: int) -> None:
        """Append buffer[offset:offset + length].

        Called only through :meth:`write_bytes`, so the range is already
        known to lie inside buffer and length is > 0.
        """
        ...

    def write_bytes(
        self,
        buffer: bytes | bytearray | memoryview,
        offset: int = 0,
        length: int | None = None,
    ) -> None:
        """Append `length` bytes of buffer starting at offset.

        ``write_bytes(buf, 0, n)`` is the two-argument form; omitting length
        writes everything from offset to the end. length == 0 is a no-op.

        Raises:
            ValueError: the range falls outside buffer.
        """
        size = len(buffer)
        if length is None:
            length = size - offset
        if offset < 0 or length < 0 or offset + length > size:
            raise ValueError(
                f"range offset={offset} length={length} outside buffer of {size} bytes"
            )
        if length:
            self.write_bytes_range(buffer, offset, length)

    # ------------------------------------------------------------------
    # Fixed width
    # ------------------------------------------------------------------

    def write_int16(self, v: int) -> None:
        """Low 16 bits of v, most significant byte first."""
        _check_width(v, 16)
        self.write_bytes(_INT16.pack(v & MASK16))

    def write_int32(self, v: int) -> None:
        """32-bit two's complement, big-endian."""
        _check_width(v, 32)
        self.write_bytes(_INT32.pack(v & MASK32))

    def write_int64(self, v: int) -> None:
        """64-bit two's complement, big-endian (high word then low word)."""
        _check_width(v, 64)
        self.write_bytes(_INT64.pack(v & MASK64))

    # ------------------------------------------------------------------
    # Variable length
    # ------------------------------------------------------------------

    def write_vint(self, v: int) -> None:
        """1-5 byte varint over the unsigned 32-bit pattern of v.

        Negative values are legal but always take 5 bytes.
        """
        _check_width(v, 32)
        self.write_bytes(_varint(v & MASK32))

    def write_vlong(self, v: int) -> None:
        """1-9 byte varint of a non-negative 64-bit value."""
        if not 0 <= v < (1 << 63):
            raise ValueError(f"write_vlong requires 0 <= v < 2**63, got {v}")
        self._write_unsigned_vlong(v)

    def _write_unsigned_vlong(self, v: int) -> None:
        # No sign check: zigzag-64 output spans the full unsigned range.
        self.write_bytes(_varint(v & MASK64))

    def write_zint32(self, v: int) -> None:
        """Zigzag-encoded signed 32-bit value written as a VInt."""
        _check_width(v, 32)
        self.write_vint(zigzag_encode32(v))

    def write_zint64(self, v: int) -> None:
        """Zigzag-encoded signed 64-bit value written as an unsigned VLong."""
        _check_width(v, 64)
        self._write_unsigned_vlong(zigzag_encode64(v))

    # ------------------------------------------------------------------
    # Strings and collections
    # ------------------------------------------------------------------

    def write_string(self, s: str) -> None:
        """VInt byte length followed by the UTF-8 bytes, no terminator."""
        data = utf8.encode(s, self._surrogate_policy)
        self.write_vint(len(data))
        self.write_bytes(data)

    def write_string_map(self, mapping: Mapping[str, str] | None) -> None:
        """Int32 entry count, then key/value string pairs in iteration order."""
        if not mapping:
            self.write_int32(0)
            return
        items = list(mapping.items())
        for key, value in items:
            if not isinstance(key, str) or not isinstance(value, str):
                raise TypeError(
                    f"string map entries must be str -> str, got "
                    f"{type(key).__name__} -> {type(value).__name__}"
                )
        self.write_int32(len(items))
        for key, value in items:
            self.write_string(key)
            self.write_string(value)

    def write_string_set(self, values: Iterable[str] | None) -> None:
        """Int32 element count, then each element in iteration order."""
        items = list(values) if values is not None else []
        for item in items:
            if not isinstance(item, str):
                raise TypeError(f"string set elements must be str, got {type(item).__name__}")
        self.write_int32(len(items))
        for item in items:
            self.write_string(item)

    # ------------------------------------------------------------------
    # Bulk copy
    # ------------------------------------------------------------------

    def copy_bytes(self, source: ByteSource, count: int) -> None:
        """Move `count` bytes from source into this sink.

        Goes through a private 16 KiB scratch buffer, so the output is the
        same as copying one byte at a time. A failing read or write stops
        the copy; bytes already written stay written.
        """
        if count < 0:
            raise ValueError(f"copy_bytes count must be >= 0, got {count}")
        if self._copy_buffer is None:
            self._copy_buffer = bytearray(COPY_BUFFER_SIZE)
        buf = self._copy_buffer
        left = count
        chunks = 0
        while left > 0:
            n = min(left, COPY_BUFFER_SIZE)
            source.read_bytes(buf, 0, n)
            self.write_bytes(buf, 0, n)
            left -= n
            chunks += 1
        logger.debug("copied %d bytes in %d chunk(s)", count, chunks)
