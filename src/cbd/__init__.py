"""cbd: convert between CBOR (raw or base64) and JSON."""

__version__ = "0.1.0"

from .bridge import parse_binary, parse_text, render_binary, render_text  # noqa: E402
from .convert import decode, decode_to_diagnostic, encode  # noqa: E402
from .errors import CbdError, DecodeError, EncodeError, ErrorKind  # noqa: E402
from .sniffer import (  # noqa: E402
    STANDARD,
    STANDARD_NO_PAD,
    URL_SAFE,
    URL_SAFE_NO_PAD,
    VARIANTS,
    Base64Variant,
    encode_base64,
    resolve_binary,
)
from .values import (  # noqa: E402
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

__all__ = [
    "__version__",
    # End-to-end conversions
    "decode",
    "decode_to_diagnostic",
    "encode",
    # Value model conversions
    "parse_binary",
    "render_text",
    "parse_text",
    "render_binary",
    # Base64 detection
    "resolve_binary",
    "encode_base64",
    "Base64Variant",
    "URL_SAFE_NO_PAD",
    "STANDARD",
    "URL_SAFE",
    "STANDARD_NO_PAD",
    "VARIANTS",
    # Errors
    "CbdError",
    "DecodeError",
    "EncodeError",
    "ErrorKind",
    # Value model
    "Value",
    "Null",
    "Bool",
    "Integer",
    "Float",
    "Text",
    "Bytes",
    "Array",
    "Map",
]
