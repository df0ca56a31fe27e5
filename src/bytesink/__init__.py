"""bytesink: byte-exact output primitives for search-index storage formats.

Public API:
    ByteSink        — abstract writer; subclass with write_byte + write_bytes_range
    MemorySink      — growable in-memory destination
    FixedMemorySink — fixed-region in-memory destination
    StreamSink      — binary stream destination (files, sockets)
    CountingSink    — size-only destination
    ByteSource      — protocol consumed by ByteSink.copy_bytes
    MemorySource / StreamSource — stock sources

Configuration and logging:
    get_config() / reset_config()   — env + YAML settings
    setup_logging(config)           — structlog or stdlib, stderr or JSONL
"""

from bytesink.bits import (
    vint_size,
    vlong_size,
    zigzag_decode32,
    zigzag_decode64,
    zigzag_encode32,
    zigzag_encode64,
)
from bytesink.config import BytesinkConfig, get_config, reset_config
from bytesink.logging import get_logger, setup_logging
from bytesink.sink import COPY_BUFFER_SIZE, ByteSink
from bytesink.sinks import CountingSink, FixedMemorySink, MemorySink, StreamSink
from bytesink.source import ByteSource, MemorySource, StreamSource

__all__ = [
    # Sinks
    "ByteSink",
    "COPY_BUFFER_SIZE",
    "CountingSink",
    "FixedMemorySink",
    "MemorySink",
    "StreamSink",
    # Sources
    "ByteSource",
    "MemorySource",
    "StreamSource",
    # Bit helpers
    "vint_size",
    "vlong_size",
    "zigzag_decode32",
    "zigzag_decode64",
    "zigzag_encode32",
    "zigzag_encode64",
    # Config / logging
    "BytesinkConfig",
    "get_config",
    "get_logger",
    "reset_config",
    "setup_logging",
]
