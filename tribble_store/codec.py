"""
Length-prefixed record codec.

Wire format:

    Frame := uint32 little-endian payload length || payload bytes
    File  := zero or more Frame, concatenated in write order

The codec is pure: no I/O, no state. A truncated or corrupted buffer
fails the same way every time it is decoded.
"""

from __future__ import annotations

import struct
from collections.abc import Iterator
from typing import NamedTuple

from .exceptions import PayloadTooLargeError, TooShortForPrefixError, TruncatedPayloadError

PREFIX_WIDTH = 4
MAX_PAYLOAD_LENGTH = 2**32 - 1
MAX_FRAME_LENGTH = MAX_PAYLOAD_LENGTH + PREFIX_WIDTH

_PREFIX = struct.Struct("<I")


class DecodedFrame(NamedTuple):
    """A decoded payload and the offset just past its frame."""

    payload: bytes
    end: int


def encode(payload: bytes) -> bytes:
    """Prefix a payload with its little-endian length.

    Args:
        payload: Raw record bytes

    Returns:
        Frame bytes: 4-byte length prefix followed by the payload

    Raises:
        PayloadTooLargeError: If the payload is longer than MAX_PAYLOAD_LENGTH
    """
    size = len(payload)
    if size > MAX_PAYLOAD_LENGTH:
        raise PayloadTooLargeError(size, MAX_PAYLOAD_LENGTH)
    return _PREFIX.pack(size) + bytes(payload)


def decode_frame(data: bytes, offset: int = 0) -> DecodedFrame:
    """Decode the frame starting at ``offset``.

    Never reads past the declared frame boundary and never returns a
    payload shorter than declared.

    Args:
        data: Buffer holding one or more frames
        offset: Position of the frame's length prefix

    Returns:
        DecodedFrame with the payload and the absolute end offset

    Raises:
        TooShortForPrefixError: Fewer than PREFIX_WIDTH bytes at offset
        TruncatedPayloadError: Fewer payload bytes than the prefix declares
        ValueError: If offset is negative
    """
    if offset < 0:
        raise ValueError(f"offset must be >= 0, got {offset}")

    available = len(data) - offset
    if available < PREFIX_WIDTH:
        raise TooShortForPrefixError(max(available, 0), offset)

    (declared,) = _PREFIX.unpack_from(data, offset)
    start = offset + PREFIX_WIDTH
    end = start + declared
    if len(data) < end:
        raise TruncatedPayloadError(declared, len(data) - start, offset)

    return DecodedFrame(bytes(data[start:end]), end)


def decode(data: bytes) -> bytes:
    """Decode the first frame of a buffer and return its payload.

    Raises:
        TooShortForPrefixError: Fewer than PREFIX_WIDTH bytes
        PayloadTooLargeError: Buffer longer than MAX_FRAME_LENGTH
        TruncatedPayloadError: Fewer payload bytes than the prefix declares
    """
    # Whole-buffer limit; decode_frame only bounds the frame itself.
    if len(data) > MAX_FRAME_LENGTH:
        raise PayloadTooLargeError(len(data), MAX_FRAME_LENGTH)
    return decode_frame(data).payload


def iter_frames(data: bytes) -> Iterator[bytes]:
    """Yield every payload in a buffer of concatenated frames.

    Stops at the end of the buffer. A malformed trailing frame raises
    instead of being skipped.
    """
    offset = 0
    while offset < len(data):
        frame = decode_frame(data, offset)
        yield frame.payload
        offset = frame.end
