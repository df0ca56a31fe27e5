"""Integer helpers for the wire encodings.

Python ints are unbounded, so every fixed-width rule (Java-style int/long
overflow, arithmetic vs. logical shifts) is expressed here with explicit
masks. Nothing in this module performs I/O.
"""

from __future__ import annotations

MASK8 = 0xFF
MASK16 = 0xFFFF
MASK32 = 0xFFFFFFFF
MASK64 = 0xFFFFFFFFFFFFFFFF


def to_int32(v: int) -> int:
    """Wrap v to a signed 32-bit value (two's complement)."""
    v &= MASK32
    return v - (1 << 32) if v & 0x80000000 else v


def to_int64(v: int) -> int:
    """Wrap v to a signed 64-bit value (two's complement)."""
    v &= MASK64
    return v - (1 << 64) if v & 0x8000000000000000 else v


def zigzag_encode32(v: int) -> int:
    """Map a signed 32-bit int onto an unsigned one: 0, -1, 1, -2 -> 0, 1, 2, 3."""
    v = to_int32(v)
    # Python's >> is already arithmetic on signed ints.
    return ((v << 1) ^ (v >> 31)) & MASK32


def zigzag_encode64(v: int) -> int:
    """64-bit zigzag. The result may use all 64 unsigned bits."""
    v = to_int64(v)
    return ((v << 1) ^ (v >> 63)) & MASK64


def zigzag_decode32(v: int) -> int:
    v &= MASK32
    return to_int32((v >> 1) ^ -(v & 1))


def zigzag_decode64(v: int) -> int:
    v &= MASK64
    return to_int64((v >> 1) ^ -(v & 1))


def _varint_size(v: int) -> int:
    size = 1
    while v & ~0x7F:
        v >>= 7
        size += 1
    return size


def vint_size(v: int) -> int:
    """Number of bytes write_vint(v) emits (1-5)."""
    return _varint_size(v & MASK32)


def vlong_size(v: int) -> int:
    """Number of bytes a VLong of v occupies (1-9 for non-negative, 10 for the full unsigned range)."""
    return _varint_size(v & MASK64)
