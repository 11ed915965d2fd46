"""Error taxonomy for cbd conversions.

Every failure raised by the conversion core is a ``CbdError`` carrying a
``kind`` tag and, optionally, the underlying exception that caused it.
The command-line layer is the only place where errors become exit codes.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Kinds of failure the converter distinguishes."""

    UTF8_INVALID = "utf8-invalid"
    BASE64_INVALID = "base64-invalid"
    BINARY_MALFORMED = "binary-malformed"
    TEXT_MALFORMED = "text-malformed"
    UNREPRESENTABLE_VALUE = "unrepresentable-value"


class CbdError(Exception):
    """Base error for all conversion failures."""

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        cause: Optional[BaseException] = None,
    ) -> None:
        """Initialize the error.

        Args:
            kind: The failure kind
            message: Short human-readable description
            cause: Optional underlying exception
        """
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        return self.message

    def describe(self) -> str:
        """Describe the error together with its chain of causes.

        Returns:
            ``"message: cause: cause-of-cause"`` style description
        """
        parts = [self.message]
        seen = {id(self)}
        current = self.cause if self.cause is not None else self.__cause__
        while current is not None and id(current) not in seen:
            seen.add(id(current))
            text = str(current)
            parts.append(text or type(current).__name__)
            if isinstance(current, CbdError) and current.cause is not None:
                current = current.cause
            else:
                current = current.__cause__
        return ": ".join(parts)


class DecodeError(CbdError):
    """Raised when input bytes or text cannot be parsed."""


class EncodeError(CbdError):
    """Raised when a value cannot be rendered in the target format."""
