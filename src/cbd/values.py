"""Value model shared by the CBOR and JSON conversions.

A ``Value`` is a closed tagged union. Each conversion builds a fresh tree
of these immutable nodes and discards it once the output is produced.
"""

from dataclasses import dataclass, field
from typing import ClassVar

# Range of the CBOR major type 0/1 integer encoding
INTEGER_MIN = -(2**64)
INTEGER_MAX = 2**64 - 1


class Value:
    """Base class of every node in a value tree."""

    kind: ClassVar[str] = "value"

    @property
    def is_scalar(self) -> bool:
        """True for every variant except Array and Map."""
        return not isinstance(self, (Array, Map))


@dataclass(frozen=True)
class Null(Value):
    """The null value (CBOR null and undefined)."""

    kind: ClassVar[str] = "null"


@dataclass(frozen=True)
class Bool(Value):
    """A boolean."""

    kind: ClassVar[str] = "bool"
    value: bool


@dataclass(frozen=True)
class Integer(Value):
    """A signed integer of any width; bignums land here too."""

    kind: ClassVar[str] = "integer"
    value: int

    @property
    def in_native_range(self) -> bool:
        """Whether the integer fits the CBOR native integer encoding."""
        return INTEGER_MIN <= self.value <= INTEGER_MAX


@dataclass(frozen=True)
class Float(Value):
    """A double precision float, possibly NaN or infinite."""

    kind: ClassVar[str] = "float"
    value: float


@dataclass(frozen=True)
class Text(Value):
    """A Unicode string that can be encoded as UTF-8."""

    kind: ClassVar[str] = "text"
    value: str


@dataclass(frozen=True)
class Bytes(Value):
    """An arbitrary byte string."""

    kind: ClassVar[str] = "bytes"
    value: bytes


@dataclass(frozen=True)
class Array(Value):
    """An ordered sequence of values."""

    kind: ClassVar[str] = "array"
    items: tuple[Value, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.items)


@dataclass(frozen=True)
class Map(Value):
    """Ordered key/value pairs. Keys may be any value and may repeat."""

    kind: ClassVar[str] = "map"
    pairs: tuple[tuple[Value, Value], ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.pairs)
