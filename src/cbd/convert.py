"""End-to-end conversions between CBOR (raw or base64) and JSON."""

import logging
from typing import Union

from . import bridge, edn_utils
from .errors import CbdError, DecodeError, EncodeError, ErrorKind
from .sniffer import encode_base64, resolve_binary

logger = logging.getLogger(__name__)


def decode(data: bytes) -> str:
    """Decode raw or base64-wrapped CBOR into JSON text.

    Base64 is tried first, then the input is parsed as raw CBOR.

    Args:
        data: Input bytes

    Returns:
        Compact JSON text

    Raises:
        DecodeError: If the CBOR cannot be parsed or rendered as JSON
    """
    cbor = resolve_binary(data)
    try:
        return bridge.render_text(bridge.parse_binary(cbor))
    except CbdError as e:
        raise DecodeError(e.kind, "failed to decode binary data", e) from e


def decode_to_diagnostic(data: bytes) -> str:
    """Decode raw or base64-wrapped CBOR into diagnostic notation.

    Args:
        data: Input bytes

    Returns:
        CBOR diagnostic notation text

    Raises:
        DecodeError: If the input is not a single well-formed CBOR item
    """
    cbor = resolve_binary(data)
    try:
        bridge.parse_binary(cbor)
    except CbdError as e:
        raise DecodeError(e.kind, "failed to decode binary data", e) from e

    try:
        return edn_utils.cbor_to_diag(cbor)
    except edn_utils.DiagnosticError as e:
        raise DecodeError(
            ErrorKind.BINARY_MALFORMED, "failed to render diagnostic notation", e
        ) from e


def encode(text: Union[str, bytes], base64: bool = False) -> bytes:
    """Encode JSON text as CBOR.

    Surrounding whitespace is ignored.

    Args:
        text: JSON text, or UTF-8 bytes holding it
        base64: Whether to wrap the CBOR in URL-safe unpadded base64

    Returns:
        CBOR bytes, or ASCII base64 bytes when ``base64`` is set

    Raises:
        DecodeError: If the input is not UTF-8 text
        EncodeError: If the input is not valid JSON
    """
    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(
                ErrorKind.TEXT_MALFORMED, "failed to decode input as utf8", e
            ) from e

    try:
        cbor = bridge.render_binary(bridge.parse_text(text.strip()))
    except CbdError as e:
        raise EncodeError(e.kind, "failed to encode JSON data", e) from e

    logger.debug("Encoded %d bytes of CBOR", len(cbor))
    if base64:
        return encode_base64(cbor)
    return cbor
