"""
The verifying factory.

The factory does NOT just construct IntMath objects - it *verifies* them
against their specs before releasing them.

Flow:
  1. Caller requests an IntMath for a given IntType (and strategy).
  2. Factory builds the implementation.
  3. Factory runs every spec against it: mean, the three overflow
     operations, and isqrt.
  4. If verification passes  -> return the instance.
     If verification fails   -> raise, never hand out a broken instance.

8-bit types are checked exhaustively over every operand combination.
Wider types are checked on edge values plus a seeded random sample.
"""

from __future__ import annotations

import inspect
import itertools
import logging
import random
from dataclasses import dataclass, field
from typing import Any

import diagnostics
from intmath import IntMath
from inttypes import IntType
from overflow import Strategy, resolve_strategy
from spec import Property, Spec, isqrt_spec, mean_spec, overflow_spec

logger = logging.getLogger(__name__)


@dataclass
class VerificationResult:
    """Outcome of verifying one property."""

    property_name: str
    passed: bool
    counterexample: tuple | None = None
    tests_run: int = 0

    def __repr__(self) -> str:
        status = "PASS" if self.passed else "FAIL"
        ce = f"  counterexample={self.counterexample}" if self.counterexample else ""
        return f"[{status}] {self.property_name} ({self.tests_run} tests){ce}"


@dataclass
class VerificationReport:
    """Aggregate result of verifying an entire spec."""

    spec_name: str
    results: list[VerificationResult] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return all(r.passed for r in self.results)

    def summary(self) -> str:
        lines = [f"--- {self.spec_name} ---"]
        for r in self.results:
            lines.append(f"  {r}")
        status = "ALL PASSED" if self.passed else "FAILED"
        lines.append(f"  => {status}")
        return "\n".join(lines)


class VerificationError(Exception):
    """Raised when an implementation fails its spec."""

    def __init__(self, report: VerificationReport):
        self.report = report
        super().__init__(f"Verification failed:\n{report.summary()}")


# ---------------------------------------------------------------------------
# The factory
# ---------------------------------------------------------------------------

class IntMathFactory:
    """
    Produces IntMath instances that are proven correct for their type.
    """

    EXHAUSTIVE_THRESHOLD = 256  # max number of values for brute-force check
    DEFAULT_SAMPLES = 10_000
    SEED = 0

    @classmethod
    def create(
        cls,
        int_type: IntType,
        strategy: Strategy | None = None,
        samples: int = DEFAULT_SAMPLES,
    ) -> IntMath:
        """Build, verify, and return an IntMath."""
        impl = IntMath(int_type=int_type, strategy=resolve_strategy(strategy))
        logger.info(f"Verifying {int_type} primitives ({impl.strategy.name})")
        cls._verify_all(impl, samples)
        return impl

    # -- internal ---------------------------------------------------------

    @classmethod
    def _verify_all(cls, impl: IntMath, samples: int) -> None:
        t = impl.int_type
        specs_and_ops = [
            (mean_spec(t), impl.mean),
            (overflow_spec("add", t), impl.add_overflow),
            (overflow_spec("sub", t), impl.sub_overflow),
            (overflow_spec("mul", t), impl.mul_overflow),
            (isqrt_spec(t), impl.isqrt),
        ]
        # isqrt records domain errors; keep them out of the caller's state
        with diagnostics.capture():
            for spec, op in specs_and_ops:
                report = cls._verify_spec(spec, op, t, samples)
                if not report.passed:
                    logger.warning(f"Verification failed:\n{report.summary()}")
                    raise VerificationError(report)
                logger.debug(report.summary())

    @classmethod
    def _verify_spec(
        cls, spec: Spec, op: Any, int_type: IntType,
        samples: int = DEFAULT_SAMPLES,
    ) -> VerificationReport:
        report = VerificationReport(spec_name=spec.name)
        for prop in spec:
            result = cls._verify_property(prop, op, int_type, samples)
            report.results.append(result)
        return report

    @classmethod
    def _verify_property(
        cls, prop: Property, op: Any, int_type: IntType,
        samples: int = DEFAULT_SAMPLES,
    ) -> VerificationResult:
        arity = _predicate_arity(prop)

        if int_type.width <= cls.EXHAUSTIVE_THRESHOLD:
            combos = itertools.product(int_type.all_values(), repeat=arity)
        else:
            combos = _generate_samples(
                int_type, arity, count=samples, rng=random.Random(cls.SEED)
            )

        tests_run = 0
        for combo in combos:
            tests_run += 1
            if not prop.check(op, *combo):
                return VerificationResult(
                    property_name=prop.name,
                    passed=False,
                    counterexample=combo,
                    tests_run=tests_run,
                )

        return VerificationResult(
            property_name=prop.name,
            passed=True,
            tests_run=tests_run,
        )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _predicate_arity(prop: Property) -> int:
    """
    Infer how many *value* arguments a property predicate expects
    (excluding the operation callable which is always the first arg).
    """
    sig = inspect.signature(prop.predicate)
    return len(sig.parameters) - 1


def edge_values(int_type: IntType) -> list[int]:
    """Values around the type's boundaries and midpoints."""
    lo, hi = int_type.min, int_type.max
    candidates = [
        lo, lo + 1, lo // 2 - 1, lo // 2, lo // 2 + 1, -2, -1,
        0, 1, 2, 3, 4,
        hi // 2 - 1, hi // 2, hi // 2 + 1, hi - 1, hi,
        int_type.approx_max_root - 1, int_type.approx_max_root,
    ]
    values = []
    for v in candidates:
        if int_type.contains(v) and v not in values:
            values.append(v)
    return values


def _generate_samples(
    int_type: IntType, arity: int, count: int, rng: random.Random
) -> list[tuple[int, ...]]:
    """Generate edge-case + random samples for property checking."""
    samples: list[tuple[int, ...]] = list(
        itertools.product(edge_values(int_type), repeat=arity)
    )

    while len(samples) < count:
        combo = tuple(
            rng.randint(int_type.min, int_type.max) for _ in range(arity)
        )
        samples.append(combo)

    return samples
