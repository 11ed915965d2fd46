"""CBOR utilities module.

This module provides a unified interface for CBOR operations, isolating the
underlying CBOR library implementation from the conversion logic.

Currently uses cbor2 as the underlying implementation. Containers are
walked header by header here so that map pairs keep their order and
multiplicity; cbor2 decodes the individual scalar items.
"""

import math
import struct
from typing import Any, Optional

import cbor2

# Type aliases for CBOR special values
CBORSimpleValue = cbor2.CBORSimpleValue
CBORDecodeError = cbor2.CBORDecodeError
CBORDecodeEOF = cbor2.CBORDecodeEOF
CBOREncodeError = cbor2.CBOREncodeError
undefined = cbor2.undefined

# Major types
MAJOR_ARRAY = 4
MAJOR_MAP = 5
MAJOR_TAG = 6
MAJOR_SPECIAL = 7

BREAK = 0xFF

# Major types that may use the indefinite-length encoding
_INDEFINITE_MAJORS = (2, 3, MAJOR_ARRAY, MAJOR_MAP)


class TrailingDataError(CBORDecodeError):
    """Raised when bytes remain after the single top-level item."""


class MapPairs:
    """Map entries written in order, without collapsing keys that hash equal."""

    __slots__ = ("pairs",)

    def __init__(self, pairs: list[tuple[Any, Any]]):
        self.pairs = pairs


class ShortestFloat:
    """Float written in the narrowest width that preserves its value."""

    __slots__ = ("value",)

    def __init__(self, value: float):
        self.value = value


def encode(obj: Any) -> bytes:
    """Encode an object to CBOR bytes.

    Dict keys keep their insertion order; canonical mode would sort them.
    ``MapPairs`` and ``ShortestFloat`` wrappers are also accepted.

    Args:
        obj: The object to encode

    Returns:
        CBOR-encoded bytes
    """
    return cbor2.dumps(obj, default=_encode_wrapped)


def _encode_wrapped(encoder: Any, value: Any) -> None:
    if isinstance(value, MapPairs):
        encoder.write(encode_header(MAJOR_MAP, len(value.pairs)))
        for key, item in value.pairs:
            encoder.encode(key)
            encoder.encode(item)
    elif isinstance(value, ShortestFloat):
        encoder.write(pack_float(value.value))
    else:
        raise CBOREncodeError(f"cannot serialize type {type(value).__name__}")


def encode_header(major: int, length: int) -> bytes:
    """Encode a major type and its length or value argument."""
    if length < 24:
        return bytes([major << 5 | length])
    for info, size in ((24, 1), (25, 2), (26, 4), (27, 8)):
        if length < 1 << (8 * size):
            return bytes([major << 5 | info]) + length.to_bytes(size, "big")
    raise CBOREncodeError(f"length {length} does not fit a CBOR header")


def pack_float(value: float) -> bytes:
    """Encode a float as half, single or double precision, whichever is exact.

    Args:
        value: The float to encode

    Returns:
        The complete CBOR float item
    """
    if math.isnan(value):
        return b"\xf9\x7e\x00"
    for initial, fmt in ((0xF9, ">e"), (0xFA, ">f")):
        try:
            packed = struct.pack(fmt, value)
        except (OverflowError, struct.error):
            continue
        if struct.unpack(fmt, packed)[0] == value:
            return bytes([initial]) + packed
    return b"\xfb" + struct.pack(">d", value)


def decode(data: bytes) -> Any:
    """Decode exactly one CBOR item from bytes.

    Args:
        data: CBOR-encoded bytes

    Returns:
        The decoded object

    Raises:
        CBORDecodeError: If the data is not a single well-formed CBOR item
    """
    end = item_end(data)
    if end != len(data):
        raise TrailingDataError(f"{len(data) - end} trailing bytes after top-level item")
    return cbor2.loads(data)


def read_header(data: bytes, pos: int) -> tuple[int, Optional[int], int]:
    """Read the item header starting at ``pos``.

    Args:
        data: CBOR-encoded bytes
        pos: Offset of the initial byte

    Returns:
        Tuple of (major type, argument or None for indefinite length,
        offset just past the header)

    Raises:
        CBORDecodeError: If the header is truncated, reserved or misplaced
    """
    if pos >= len(data):
        raise CBORDecodeEOF("premature end of stream")
    major, info = data[pos] >> 5, data[pos] & 0x1F
    pos += 1

    if info < 24:
        return major, info, pos
    if info < 28:
        size = 1 << (info - 24)
        if pos + size > len(data):
            raise CBORDecodeEOF("premature end of stream")
        return major, int.from_bytes(data[pos : pos + size], "big"), pos + size
    if info < 31:
        raise CBORDecodeError(f"invalid additional information {info}")
    if major == MAJOR_SPECIAL:
        raise CBORDecodeError("break marker outside indefinite-length item")
    if major not in _INDEFINITE_MAJORS:
        raise CBORDecodeError(f"indefinite length not allowed for major type {major}")
    return major, None, pos


def at_break(data: bytes, pos: int) -> bool:
    """Whether the byte at ``pos`` ends an indefinite-length item."""
    if pos >= len(data):
        raise CBORDecodeEOF("premature end of stream")
    return data[pos] == BREAK


def item_end(data: bytes, pos: int = 0) -> int:
    """Return the offset just past the CBOR item starting at ``pos``.

    Only item headers are inspected; contents are validated by cbor2.

    Raises:
        CBORDecodeError: If the item is truncated or has an invalid header
    """
    major, length, pos = read_header(data, pos)
    if length is None:
        # Indefinite length: items (or chunks) until the break marker
        while not at_break(data, pos):
            pos = item_end(data, pos)
        return pos + 1
    if major in (2, 3):
        if pos + length > len(data):
            raise CBORDecodeEOF("premature end of stream")
        return pos + length
    if major == MAJOR_TAG:
        return item_end(data, pos)
    if major in (MAJOR_ARRAY, MAJOR_MAP):
        for _ in range(length * 2 if major == MAJOR_MAP else length):
            pos = item_end(data, pos)
    return pos


def is_simple_value(obj: Any) -> bool:
    """Check if an object is a CBOR simple value."""
    return isinstance(obj, CBORSimpleValue)


def is_undefined(obj: Any) -> bool:
    """Check if an object is the CBOR ``undefined`` simple value."""
    return obj is undefined
