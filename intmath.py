"""
Generic integer math primitives.

mean    floor of (a + b) / 2 without forming a + b
isqrt   floor of sqrt(val) using only integer comparisons, halving and
        overflow-checked multiplication

Both are parameterized by an IntegerType.  ``IntMath`` binds one type and
one overflow strategy so callers can use the whole API through a single
object.
"""

from __future__ import annotations

from dataclasses import dataclass

import diagnostics
from inttypes import IntegerType, IntType
from overflow import (
    DEFAULT_STRATEGY,
    OverflowResult,
    Strategy,
    add_overflow,
    mul_overflow,
    operation,
    sub_overflow,
    validate,
)


def mean(a: int, b: int, int_type: IntegerType) -> int:
    """Overflow-safe floored mean of ``a`` and ``b``."""
    validate(int_type, a, b)
    # (a + b) / 2 == a / 2 + b / 2, plus the 1 lost when both are odd
    return (a // 2) + (b // 2) + (a & b & 1)


def isqrt(
    val: int, int_type: IntegerType, strategy: Strategy | None = None
) -> int:
    """
    Floor square root of ``val``.

    A negative ``val`` (signed types only) is a domain error: it is recorded
    in the calling thread's diagnostics (EDOM + invalid operation) and -1 is
    returned.
    """
    validate(int_type, val)

    if val < 0:
        diagnostics.raise_domain_error("isqrt", val)
        return -1
    if val == 0:
        return 0
    if val < 4:
        return 1

    mul = operation("mul", strategy)

    # The root always lies in [left, right]
    left = 2
    right = min(val // 2, int_type.approx_max_root)

    while right - left >= 2:
        middle = (left + right) // 2
        square, overflowed = mul(middle, middle, int_type)

        if overflowed or square > val:
            right = middle
        elif square < val:
            left = middle
        else:
            return middle

    return left


@dataclass(frozen=True)
class IntMath:
    """
    The primitives bound to one integer type and overflow strategy.
    """

    int_type: IntType
    strategy: Strategy = DEFAULT_STRATEGY

    @classmethod
    def for_type(
        cls, bits: int, signed: bool, strategy: Strategy = DEFAULT_STRATEGY
    ) -> IntMath:
        return cls(int_type=IntType(bits=bits, signed=signed), strategy=strategy)

    # -- core operations --------------------------------------------------

    def mean(self, a: int, b: int) -> int:
        return mean(a, b, self.int_type)

    def add_overflow(self, a: int, b: int) -> OverflowResult:
        return add_overflow(a, b, self.int_type, self.strategy)

    def sub_overflow(self, a: int, b: int) -> OverflowResult:
        return sub_overflow(a, b, self.int_type, self.strategy)

    def mul_overflow(self, a: int, b: int) -> OverflowResult:
        return mul_overflow(a, b, self.int_type, self.strategy)

    def isqrt(self, val: int) -> int:
        return isqrt(val, self.int_type, self.strategy)
