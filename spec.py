"""
Contract layer for the integer primitives.

A Spec defines the *contract* an implementation must satisfy.  It is
purely declarative - it says WHAT must be true, not HOW.

Each property is named, described, and carries a predicate whose first
argument is the operation under test and whose remaining arguments are
values of the integer type.  The factory infers the arity from the
predicate signature and feeds it every (or a sample of) operand
combination.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

from inttypes import IntType
from overflow import Strategy, operation


# ---------------------------------------------------------------------------
# Core spec primitives
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Property:
    """A single verifiable property of an implementation."""

    name: str
    description: str
    predicate: Callable[..., bool]
    int_type: IntType

    def check(self, *args: Any) -> bool:
        """Evaluate the property predicate with the given arguments."""
        return self.predicate(*args)


@dataclass
class Spec:
    """An ordered collection of properties that together form a contract."""

    name: str
    properties: list[Property] = field(default_factory=list)

    def add(self, prop: Property) -> None:
        self.properties.append(prop)

    def __iter__(self):
        return iter(self.properties)

    def __len__(self):
        return len(self.properties)


# ---------------------------------------------------------------------------
# Spec builders
# ---------------------------------------------------------------------------

def mean_spec(int_type: IntType) -> Spec:
    """Build the specification for the overflow-safe mean."""
    lo, hi = int_type.min, int_type.max

    spec = Spec(name=f"mean[{int_type}]")

    spec.add(Property(
        name="closure",
        description="Result stays within the type",
        predicate=lambda mean, a, b: lo <= mean(a, b) <= hi,
        int_type=int_type,
    ))

    spec.add(Property(
        name="commutativity",
        description="mean(a, b) == mean(b, a)",
        predicate=lambda mean, a, b: mean(a, b) == mean(b, a),
        int_type=int_type,
    ))

    spec.add(Property(
        name="floor_mean",
        description="mean(a, b) == floor((a + b) / 2)",
        predicate=lambda mean, a, b: mean(a, b) == (a + b) // 2,
        int_type=int_type,
    ))

    return spec


_EXACT: dict[str, Callable[[int, int], int]] = {
    "add": lambda a, b: a + b,
    "sub": lambda a, b: a - b,
    "mul": lambda a, b: a * b,
}


def overflow_spec(op_name: str, int_type: IntType) -> Spec:
    """
    Build the specification for one overflow-detecting operation.

    ``op_name`` is "add", "sub" or "mul".  The exact result computed with
    unbounded ints is the oracle for both the value and the flag.
    """
    exact = _EXACT[op_name]
    native = operation(op_name, Strategy.NATIVE)
    portable = operation(op_name, Strategy.PORTABLE)

    spec = Spec(name=f"{op_name}_overflow[{int_type}]")

    spec.add(Property(
        name="result_correct",
        description="value is the wrapped exact result",
        predicate=lambda op, a, b: op(a, b).value == int_type.wrap(exact(a, b)),
        int_type=int_type,
    ))

    spec.add(Property(
        name="flag_correct",
        description="overflowed iff the exact result is out of range",
        predicate=lambda op, a, b: (
            op(a, b).overflowed == (not int_type.contains(exact(a, b)))
        ),
        int_type=int_type,
    ))

    spec.add(Property(
        name="strategy_parity",
        description="native and portable strategies agree bit for bit",
        predicate=lambda op, a, b: (
            op(a, b) == native(a, b, int_type) == portable(a, b, int_type)
        ),
        int_type=int_type,
    ))

    if op_name in ("add", "mul"):
        spec.add(Property(
            name="commutativity",
            description=f"{op_name}(a, b) == {op_name}(b, a)",
            predicate=lambda op, a, b: op(a, b) == op(b, a),
            int_type=int_type,
        ))

    return spec


def isqrt_spec(int_type: IntType) -> Spec:
    """Build the specification for the integer square root."""
    mul = operation("mul", Strategy.NATIVE)

    spec = Spec(name=f"isqrt[{int_type}]")

    spec.add(Property(
        name="floor_root",
        description="r*r <= val < (r+1)*(r+1) for val >= 0",
        predicate=lambda isqrt, val: val < 0 or (
            isqrt(val) ** 2 <= val < (isqrt(val) + 1) ** 2
        ),
        int_type=int_type,
    ))

    spec.add(Property(
        name="domain_error",
        description="isqrt(val) == -1 for val < 0",
        predicate=lambda isqrt, val: val >= 0 or isqrt(val) == -1,
        int_type=int_type,
    ))

    spec.add(Property(
        name="square_fits",
        description="isqrt(val) * isqrt(val) does not overflow for val >= 0",
        predicate=lambda isqrt, val: val < 0 or (
            not mul(isqrt(val), isqrt(val), int_type).overflowed
        ),
        int_type=int_type,
    ))

    return spec
