"""
Overflow-detecting arithmetic.

Each operation returns the truncated (wrapped) result together with a flag
telling whether the mathematical result fit in the type.  Overflow is never
raised - callers must check the flag before trusting the value.

Two strategies compute the same answers:

NATIVE    evaluate with Python's arbitrary-precision ints (the checked
          primitive) and test the exact result against the bounds.
PORTABLE  never leave the type's range; decide overflow from the operands
          with comparisons and truncating division only.

They are interchangeable; the portable one exists so the native one can be
cross-checked, and as the fallback where no checked primitive exists.
"""

from __future__ import annotations

from enum import Enum, auto
from typing import Callable, NamedTuple

from inttypes import IntegerType


class Strategy(Enum):
    """How overflow is detected."""

    NATIVE = auto()      # Exact arithmetic, then a range check
    PORTABLE = auto()    # Operand comparisons within the type's range


# CPython ints never overflow, so the exact path is always available.
NATIVE_AVAILABLE = True

DEFAULT_STRATEGY = Strategy.NATIVE if NATIVE_AVAILABLE else Strategy.PORTABLE


class OverflowResult(NamedTuple):
    """Truncated result plus overflow flag.

    ``value`` is only meaningful when ``overflowed`` is False.
    """

    value: int
    overflowed: bool


def resolve_strategy(strategy: Strategy | None) -> Strategy:
    if strategy is None:
        return DEFAULT_STRATEGY
    if strategy is Strategy.NATIVE and not NATIVE_AVAILABLE:
        return Strategy.PORTABLE
    return strategy


def validate(int_type: IntegerType, *values: int) -> None:
    """Reject operands that are not values of ``int_type``."""
    for v in values:
        if not int_type.contains(v):
            raise ValueError(
                f"{v} is outside {int_type} range "
                f"[{int_type.min}, {int_type.max}]"
            )


def truncdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero (not floor division)."""
    q, r = divmod(a, b)
    # divmod rounds toward -inf; adjust when the quotient is negative
    # and there is a remainder.
    if r != 0 and (a < 0) != (b < 0):
        q += 1
    return q


# ---------------------------------------------------------------------------
# Native strategy
# ---------------------------------------------------------------------------

def _checked(raw: int, t: IntegerType) -> OverflowResult:
    return OverflowResult(t.wrap(raw), not t.contains(raw))


def _native_add(a: int, b: int, t: IntegerType) -> OverflowResult:
    return _checked(a + b, t)


def _native_sub(a: int, b: int, t: IntegerType) -> OverflowResult:
    return _checked(a - b, t)


def _native_mul(a: int, b: int, t: IntegerType) -> OverflowResult:
    return _checked(a * b, t)


# ---------------------------------------------------------------------------
# Portable strategy
# ---------------------------------------------------------------------------

def _portable_add(a: int, b: int, t: IntegerType) -> OverflowResult:
    if t.signed:
        overflowed = (b > 0 and a > t.max - b) or (b < 0 and a < t.min - b)
    else:
        overflowed = a > t.max - b
    return OverflowResult(t.wrap(a + b), overflowed)


def _portable_sub(a: int, b: int, t: IntegerType) -> OverflowResult:
    if t.signed:
        overflowed = (b < 0 and a > t.max + b) or (b > 0 and a < t.min + b)
    else:
        overflowed = a < b
    return OverflowResult(t.wrap(a - b), overflowed)


def _signed_mul_overflows(a: int, b: int, t: IntegerType) -> bool:
    if a == 0 or b == 0:
        return False
    # -1 * MIN is the one product of magnitude one that does not fit
    if a == -1:
        return b == t.min
    if b == -1:
        return a == t.min
    if a < 0 and b < 0:
        # a * b > MAX  <=>  a < MAX / b, and MAX / b < 0 rounds up toward 0
        return a < truncdiv(t.max, b)
    if a < 0:
        # a * b < MIN  <=>  a < MIN / b
        return a < truncdiv(t.min, b)
    if b < 0:
        return b < truncdiv(t.min, a)
    return a > t.max // b


def _portable_mul(a: int, b: int, t: IntegerType) -> OverflowResult:
    if t.signed:
        overflowed = _signed_mul_overflows(a, b, t)
    else:
        overflowed = a != 0 and b != 0 and a > t.max // b
    return OverflowResult(t.wrap(a * b), overflowed)


_Op = Callable[[int, int, IntegerType], OverflowResult]

_OPERATIONS: dict[Strategy, dict[str, _Op]] = {
    Strategy.NATIVE: {
        "add": _native_add,
        "sub": _native_sub,
        "mul": _native_mul,
    },
    Strategy.PORTABLE: {
        "add": _portable_add,
        "sub": _portable_sub,
        "mul": _portable_mul,
    },
}


def operation(name: str, strategy: Strategy | None = None) -> _Op:
    """Look up the unchecked implementation of ``name`` for a strategy.

    Operands are not validated; use the public functions unless the inputs
    are already known to be in range.
    """
    return _OPERATIONS[resolve_strategy(strategy)][name]


# ---------------------------------------------------------------------------
# Public operations
# ---------------------------------------------------------------------------

def add_overflow(
    a: int, b: int, int_type: IntegerType, strategy: Strategy | None = None
) -> OverflowResult:
    """``a + b`` truncated to ``int_type``, with an overflow flag."""
    validate(int_type, a, b)
    return operation("add", strategy)(a, b, int_type)


def sub_overflow(
    a: int, b: int, int_type: IntegerType, strategy: Strategy | None = None
) -> OverflowResult:
    """``a - b`` truncated to ``int_type``, with an overflow flag."""
    validate(int_type, a, b)
    return operation("sub", strategy)(a, b, int_type)


def mul_overflow(
    a: int, b: int, int_type: IntegerType, strategy: Strategy | None = None
) -> OverflowResult:
    """``a * b`` truncated to ``int_type``, with an overflow flag."""
    validate(int_type, a, b)
    return operation("mul", strategy)(a, b, int_type)
