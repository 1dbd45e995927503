"""
Length-prefixed message framing for the browser native messaging protocol.

Each message is a 4-byte little-endian unsigned length followed by exactly
that many bytes of UTF-8 JSON. There are no delimiters and no padding.
"""
from __future__ import annotations

import struct
from typing import BinaryIO

from ..errors import FramingError, StreamClosed

HEADER = struct.Struct("<I")
MAX_MESSAGE_SIZE = 2 ** 32 - 1
DEFAULT_MAX_READ_SIZE = 64 * 1024 * 1024
READ_CHUNK_SIZE = 64 * 1024


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    """Read up to size bytes, looping over short reads until EOF.

    Reads are bounded by READ_CHUNK_SIZE so memory grows only with the data
    that actually arrives, not with the announced length.
    """
    chunks = []
    remaining = size
    while remaining > 0:
        chunk = stream.read(min(remaining, READ_CHUNK_SIZE))
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def get_message_length(header: bytes) -> int:
    if len(header) < HEADER.size:
        raise FramingError("not enough bytes read to determine message size")
    return HEADER.unpack(header[:HEADER.size])[0]


def read_message(stream: BinaryIO, max_size: int = DEFAULT_MAX_READ_SIZE) -> bytes:
    """Read one complete frame and return its payload.

    Raises:
        StreamClosed: If the stream ends before any header byte
        FramingError: If the header or the payload is truncated, or the
            announced length exceeds max_size
    """
    header = _read_exact(stream, HEADER.size)
    if not header:
        raise StreamClosed("not enough bytes read to determine message size")
    length = get_message_length(header)
    # Never buffer more than max_size, whatever the header announces
    wanted = min(length, max_size)
    payload = _read_exact(stream, wanted)
    if len(payload) < wanted:
        raise FramingError("incomplete message read")
    if length > max_size:
        raise FramingError(f"message of {length} bytes exceeds the limit of {max_size} bytes")
    return payload


def encode_message(payload: bytes) -> bytes:
    if len(payload) > MAX_MESSAGE_SIZE:
        raise FramingError(f"message of {len(payload)} bytes exceeds the frame size limit")
    return HEADER.pack(len(payload)) + payload


def write_message(stream: BinaryIO, payload: bytes) -> None:
    """Write one frame as a single write and flush the stream."""
    stream.write(encode_message(payload))
    flush = getattr(stream, "flush", None)
    if flush is not None:
        flush()
