"""
Integer type layer.

An IntType describes a fixed-width machine integer: how many bits it has
and whether it is signed.  Python ints are unbounded, so every operation in
this library takes the IntType as a parameter and treats it as the *domain*
of its operands and results.

Operations depend only on the IntegerType protocol below - any object that
exposes the same bounds and helpers can stand in for IntType.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

SUPPORTED_WIDTHS = (8, 16, 32, 64)


class IntegerType(Protocol):
    """Capabilities a fixed-width integer type must expose."""

    bits: int
    signed: bool

    @property
    def min(self) -> int: ...

    @property
    def max(self) -> int: ...

    @property
    def digits(self) -> int: ...

    @property
    def approx_max_root(self) -> int: ...

    def contains(self, value: int) -> bool: ...

    def wrap(self, raw: int) -> int: ...


@dataclass(frozen=True)
class IntType:
    """
    A two's-complement (signed) or plain binary (unsigned) integer type.

    ``bits`` is the storage width; ``width`` keeps its bounded-domain meaning
    of "number of representable values".
    """

    bits: int
    signed: bool

    def __post_init__(self):
        if self.bits not in SUPPORTED_WIDTHS:
            raise ValueError(
                f"bits ({self.bits}) must be one of {SUPPORTED_WIDTHS}"
            )

    @property
    def min(self) -> int:
        return -(1 << (self.bits - 1)) if self.signed else 0

    @property
    def max(self) -> int:
        if self.signed:
            return (1 << (self.bits - 1)) - 1
        return (1 << self.bits) - 1

    @property
    def digits(self) -> int:
        """Number of value bits (the sign bit is not a digit)."""
        return self.bits - 1 if self.signed else self.bits

    @property
    def width(self) -> int:
        """Total number of representable values."""
        return 1 << self.bits

    @property
    def name(self) -> str:
        return f"{'' if self.signed else 'u'}int{self.bits}"

    @property
    def approx_max_root(self) -> int:
        """Cheap upper bound on the square root of any value of this type.

        Always strictly greater than sqrt(max), and close to it: the
        result has about half as many digits as the type.
        """
        return (self.max >> (self.digits // 2)) + 1

    def contains(self, value: int) -> bool:
        return self.min <= value <= self.max

    def wrap(self, raw: int) -> int:
        """Truncate a raw result to this type (modular wrap-around)."""
        if self.min <= raw <= self.max:
            return raw
        return self.min + (raw - self.min) % self.width

    def all_values(self) -> range:
        return range(self.min, self.max + 1)

    def __str__(self) -> str:
        return self.name


# ---------------------------------------------------------------------------
# Presets
# ---------------------------------------------------------------------------

INT8 = IntType(bits=8, signed=True)
UINT8 = IntType(bits=8, signed=False)
INT16 = IntType(bits=16, signed=True)
UINT16 = IntType(bits=16, signed=False)
INT32 = IntType(bits=32, signed=True)
UINT32 = IntType(bits=32, signed=False)
INT64 = IntType(bits=64, signed=True)
UINT64 = IntType(bits=64, signed=False)

ALL_TYPES = (INT8, UINT8, INT16, UINT16, INT32, UINT32, INT64, UINT64)
SIGNED_TYPES = tuple(t for t in ALL_TYPES if t.signed)
UNSIGNED_TYPES = tuple(t for t in ALL_TYPES if not t.signed)
