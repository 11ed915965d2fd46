"""Structural conversion between CBOR, JSON and the value model.

``parse_binary`` and ``render_binary`` translate between CBOR bytes and
``Value`` trees; ``parse_text`` and ``render_text`` do the same for JSON
text. CBOR-only information (tags, undefined, simple values, non-text map
keys) is mapped onto the closest JSON form instead of being rejected.
"""

import json
import logging
import math
from typing import Any

from . import cbor_utils
from .errors import DecodeError, EncodeError, ErrorKind
from .sniffer import URL_SAFE_NO_PAD
from .values import (
    Array,
    Bool,
    Bytes,
    Float,
    Integer,
    Map,
    Null,
    Text,
    Value,
)

logger = logging.getLogger(__name__)

# Longest decimal literal (without sign) that can fall inside the CBOR range
_MAX_INTEGER_DIGITS = len(str(2**64))

# Chunk used to render integers longer than the interpreter's str() limit
_DECIMAL_CHUNK_DIGITS = 1000
_DECIMAL_CHUNK = 10**_DECIMAL_CHUNK_DIGITS

# Positive and negative bignum tags
_BIGNUM_TAGS = (2, 3)


# -- CBOR -> Value ---------------------------------------------------------


def parse_binary(data: bytes) -> Value:
    """Parse a single CBOR item into a value tree.

    Map pairs are kept in order, including keys that repeat. Tags are
    replaced by their content, except bignums which become integers.

    Args:
        data: CBOR-encoded bytes

    Returns:
        The decoded value

    Raises:
        DecodeError: BINARY_MALFORMED if the bytes are not exactly one
            well-formed CBOR item
    """
    try:
        value, end = _read_item(data, 0)
        if end != len(data):
            raise cbor_utils.TrailingDataError(
                f"{len(data) - end} trailing bytes after top-level item"
            )
    except (cbor_utils.CBORDecodeError, ValueError, TypeError, EOFError) as e:
        raise DecodeError(ErrorKind.BINARY_MALFORMED, "failed to decode CBOR", e) from e
    except RecursionError as e:
        raise DecodeError(
            ErrorKind.BINARY_MALFORMED, "CBOR item is nested too deeply", e
        ) from e
    return value


def _read_item(data: bytes, pos: int) -> tuple[Value, int]:
    """Read the item at ``pos``; returns the value and the offset after it."""
    major, length, body = cbor_utils.read_header(data, pos)

    if major == cbor_utils.MAJOR_ARRAY:
        items = []
        pos = body
        if length is None:
            while not cbor_utils.at_break(data, pos):
                item, pos = _read_item(data, pos)
                items.append(item)
            return Array(tuple(items)), pos + 1
        for _ in range(length):
            item, pos = _read_item(data, pos)
            items.append(item)
        return Array(tuple(items)), pos

    if major == cbor_utils.MAJOR_MAP:
        pairs = []
        pos = body
        if length is None:
            while not cbor_utils.at_break(data, pos):
                key, pos = _read_item(data, pos)
                item, pos = _read_item(data, pos)
                pairs.append((key, item))
            return Map(tuple(pairs)), pos + 1
        for _ in range(length):
            key, pos = _read_item(data, pos)
            item, pos = _read_item(data, pos)
            pairs.append((key, item))
        return Map(tuple(pairs)), pos

    if major == cbor_utils.MAJOR_TAG:
        content, end = _read_item(data, body)
        return _from_tag(length, content), end

    # Scalars, including chunked strings, are decoded by cbor2
    end = cbor_utils.item_end(data, pos)
    return _from_scalar(cbor_utils.decode(data[pos:end])), end


def _from_tag(tag: int, content: Value) -> Value:
    if tag in _BIGNUM_TAGS and isinstance(content, Bytes):
        magnitude = int.from_bytes(content.value, "big")
        return Integer(magnitude if tag == 2 else -1 - magnitude)
    logger.debug("Dropping CBOR tag %d", tag)
    return content


def _from_scalar(obj: Any) -> Value:
    """Map a scalar decoded by cbor2 onto the value model."""
    if obj is None or cbor_utils.is_undefined(obj):
        return Null()
    if isinstance(obj, bool):
        return Bool(obj)
    if isinstance(obj, int):
        return Integer(obj)
    if isinstance(obj, float):
        return Float(obj)
    if isinstance(obj, str):
        return Text(obj)
    if isinstance(obj, bytes):
        return Bytes(obj)
    if cbor_utils.is_simple_value(obj):
        return Integer(obj.value)
    raise TypeError(f"Unexpected CBOR scalar: {type(obj).__name__}")


# -- Value -> JSON ---------------------------------------------------------


def render_text(value: Value) -> str:
    """Render a value tree as compact JSON text.

    Args:
        value: The value to render

    Returns:
        JSON text

    Raises:
        EncodeError: UNREPRESENTABLE_VALUE if a map key is an array or map
    """
    parts: list[str] = []
    _write_json(value, parts)
    return "".join(parts)


def _write_json(value: Value, out: list[str]) -> None:
    if isinstance(value, Array):
        out.append("[")
        for index, item in enumerate(value.items):
            if index:
                out.append(",")
            _write_json(item, out)
        out.append("]")
    elif isinstance(value, Map):
        out.append("{")
        for index, (key, item) in enumerate(value.pairs):
            if index:
                out.append(",")
            out.append(json.dumps(map_key_text(key), ensure_ascii=False))
            out.append(":")
            _write_json(item, out)
        out.append("}")
    elif isinstance(value, Bytes):
        # Byte strings become arrays of octets
        out.append("[" + ",".join(str(octet) for octet in value.value) + "]")
    elif isinstance(value, Float):
        out.append(_float_text(value.value) if math.isfinite(value.value) else "null")
    else:
        out.append(_scalar_text(value))


def _scalar_text(value: Value) -> str:
    if isinstance(value, Null):
        return "null"
    if isinstance(value, Bool):
        return "true" if value.value else "false"
    if isinstance(value, Integer):
        return _integer_text(value.value)
    if isinstance(value, Text):
        return json.dumps(value.value, ensure_ascii=False)
    raise TypeError(f"Not a scalar value: {value!r}")


def map_key_text(key: Value) -> str:
    """Coerce a map key to the text form used as a JSON object key.

    Args:
        key: The map key

    Returns:
        Canonical text form of the key

    Raises:
        EncodeError: UNREPRESENTABLE_VALUE for array and map keys
    """
    if isinstance(key, Text):
        return key.value
    if isinstance(key, Float):
        value = key.value
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        return _float_text(value)
    if isinstance(key, Bytes):
        return URL_SAFE_NO_PAD.encode(key.value)
    if not key.is_scalar:
        raise EncodeError(
            ErrorKind.UNREPRESENTABLE_VALUE,
            f"{key.kind} map key cannot be represented as JSON",
        )
    return _scalar_text(key)


def _float_text(value: float) -> str:
    return float.__repr__(value)


def _integer_text(value: int) -> str:
    try:
        return str(value)
    except ValueError:
        # Exceeds sys.get_int_max_str_digits(); render in fixed-size chunks
        sign = "-" if value < 0 else ""
        remaining = abs(value)
        chunks = []
        while remaining:
            remaining, chunk = divmod(remaining, _DECIMAL_CHUNK)
            chunks.append(chunk)
        head = str(chunks.pop())
        tail = "".join(str(chunk).zfill(_DECIMAL_CHUNK_DIGITS) for chunk in reversed(chunks))
        return sign + head + tail


# -- JSON -> Value ---------------------------------------------------------


def parse_text(text: str) -> Value:
    """Parse JSON text into a value tree.

    Repeated object keys keep the last value at the first key's position.

    Args:
        text: JSON text

    Returns:
        The parsed value

    Raises:
        DecodeError: TEXT_MALFORMED on any JSON syntax violation
    """
    try:
        obj = json.loads(
            text,
            parse_int=_parse_json_int,
            parse_float=_parse_json_float,
            parse_constant=_reject_json_constant,
        )
    except ValueError as e:
        raise DecodeError(ErrorKind.TEXT_MALFORMED, "failed to decode JSON", e) from e
    except RecursionError as e:
        raise DecodeError(
            ErrorKind.TEXT_MALFORMED, "JSON document is nested too deeply", e
        ) from e

    try:
        return _from_json(obj)
    except UnicodeEncodeError as e:
        raise DecodeError(
            ErrorKind.TEXT_MALFORMED, "JSON string is not valid unicode", e
        ) from e


def _parse_json_int(literal: str) -> Any:
    digits = literal.lstrip("-")
    if len(digits) <= _MAX_INTEGER_DIGITS:
        number = Integer(int(literal))
        if number.in_native_range:
            return number.value
    # Outside the CBOR integer range: fold to a float
    return _parse_json_float(literal)


def _parse_json_float(literal: str) -> float:
    number = float(literal)
    if math.isinf(number):
        raise ValueError(f"number out of range: {literal[:32]}")
    return number


def _reject_json_constant(name: str) -> Any:
    raise ValueError(f"invalid literal {name}")


def _from_json(obj: Any) -> Value:
    if obj is None:
        return Null()
    if isinstance(obj, bool):
        return Bool(obj)
    if isinstance(obj, int):
        return Integer(obj)
    if isinstance(obj, float):
        return Float(obj)
    if isinstance(obj, str):
        return Text(_checked_text(obj))
    if isinstance(obj, list):
        return Array(tuple(_from_json(item) for item in obj))
    if isinstance(obj, dict):
        return Map(
            tuple((Text(_checked_text(key)), _from_json(value)) for key, value in obj.items())
        )
    raise TypeError(f"Unexpected JSON object: {type(obj).__name__}")


def _checked_text(text: str) -> str:
    # Lone surrogate escapes such as "\ud800" decode but cannot be UTF-8 encoded
    text.encode("utf-8")
    return text


# -- Value -> CBOR ---------------------------------------------------------


def render_binary(value: Value) -> bytes:
    """Encode a value tree as a single CBOR item.

    Map pairs are written in order, so keys that compare equal in Python
    (such as 1, 1.0 and true) stay distinct. Floats use the shortest
    exact width.

    Args:
        value: The value to encode

    Returns:
        CBOR-encoded bytes
    """
    return cbor_utils.encode(_to_cbor(value))


def _to_cbor(value: Value) -> Any:
    if isinstance(value, Null):
        return None
    if isinstance(value, Float):
        return cbor_utils.ShortestFloat(value.value)
    if isinstance(value, (Bool, Integer, Text, Bytes)):
        return value.value
    if isinstance(value, Array):
        return [_to_cbor(item) for item in value.items]
    if isinstance(value, Map):
        pairs = [(_to_cbor(key), _to_cbor(item)) for key, item in value.pairs]
        return cbor_utils.MapPairs(pairs)
    raise TypeError(f"Unknown value type: {type(value).__name__}")
