"""Detection of base64-wrapped CBOR input.

Input handed to the decoder is either raw CBOR or a base64 rendering of it.
Base64 alphabets overlap, so a string may decode under several variants to
different bytes; the variants are therefore tried in a fixed priority order
and the first strict decode wins.
"""

import base64
import binascii
import logging
import re
from dataclasses import dataclass

from .errors import CbdError, ErrorKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Base64Variant:
    """One base64 alphabet/padding convention."""

    name: str
    url_safe: bool
    padded: bool

    @property
    def _pattern(self) -> "re.Pattern[str]":
        chars = "A-Za-z0-9\\-_" if self.url_safe else "A-Za-z0-9+/"
        padding = "={0,2}" if self.padded else ""
        return re.compile(f"[{chars}]*{padding}")

    def encode(self, data: bytes) -> str:
        """Encode bytes with this variant.

        Args:
            data: Bytes to encode

        Returns:
            ASCII base64 text
        """
        if self.url_safe:
            text = base64.urlsafe_b64encode(data).decode("ascii")
        else:
            text = base64.b64encode(data).decode("ascii")
        return text if self.padded else text.rstrip("=")

    def decode(self, text: str) -> bytes:
        """Strictly decode text with this variant.

        Only the variant's own alphabet is accepted, padding must match the
        variant exactly and unused trailing bits must be zero.

        Args:
            text: Base64 text

        Returns:
            Decoded bytes

        Raises:
            ValueError: If the text is not a canonical encoding for this variant
        """
        if not self._pattern.fullmatch(text):
            raise ValueError(f"invalid character for {self.name} alphabet")
        if self.padded:
            if len(text) % 4:
                raise ValueError("padded input length is not a multiple of 4")
            padded_text = text
        else:
            if len(text) % 4 == 1:
                raise ValueError("invalid input length")
            padded_text = text + "=" * (-len(text) % 4)

        altchars = b"-_" if self.url_safe else None
        try:
            data = base64.b64decode(padded_text, altchars=altchars, validate=True)
        except binascii.Error as e:
            raise ValueError(str(e)) from e

        # Rejects non-zero trailing bits and non-canonical padding
        if self.encode(data) != text:
            raise ValueError(f"non-canonical {self.name} encoding")
        return data


URL_SAFE_NO_PAD = Base64Variant("url-safe-no-pad", url_safe=True, padded=False)
STANDARD = Base64Variant("standard", url_safe=False, padded=True)
URL_SAFE = Base64Variant("url-safe", url_safe=True, padded=True)
STANDARD_NO_PAD = Base64Variant("standard-no-pad", url_safe=False, padded=False)

# Priority order used during detection
VARIANTS: tuple[Base64Variant, ...] = (URL_SAFE_NO_PAD, STANDARD, URL_SAFE, STANDARD_NO_PAD)


def try_base64_decode(data: bytes) -> bytes:
    """Decode input as base64 text, trying each variant in priority order.

    Args:
        data: Raw input bytes

    Returns:
        Bytes decoded by the first variant that accepts the input

    Raises:
        CbdError: UTF8_INVALID if the input is not UTF-8 text,
            BASE64_INVALID if no variant accepts it
    """
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise CbdError(
            ErrorKind.UTF8_INVALID, "failed to decode input as utf8", e
        ) from e

    text = text.rstrip()
    for variant in VARIANTS:
        try:
            decoded = variant.decode(text)
        except ValueError:
            continue
        logger.debug("Input decoded as %s base64 (%d bytes)", variant.name, len(decoded))
        return decoded

    raise CbdError(ErrorKind.BASE64_INVALID, "failed to decode base64")


def resolve_binary(data: bytes) -> bytes:
    """Return the CBOR bytes carried by the input.

    Base64 is tried first; when the input is not UTF-8 text or no variant
    accepts it, the input itself is returned as raw CBOR. Validation of the
    result is left to the CBOR parser.

    Args:
        data: Raw input bytes

    Returns:
        CBOR bytes to parse
    """
    try:
        return try_base64_decode(data)
    except CbdError as e:
        logger.debug("Treating input as raw CBOR: %s", e.describe())
        return data


def encode_base64(data: bytes) -> bytes:
    """Encode CBOR output for transport (URL-safe alphabet, no padding)."""
    return URL_SAFE_NO_PAD.encode(data).encode("ascii")
