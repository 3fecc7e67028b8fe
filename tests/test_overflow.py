"""
Tests for overflow-detecting arithmetic.

The boundary tables are checked for every integer type under both
strategies.  Strategy parity is checked exhaustively for 8-bit types and
with Hypothesis for the wider ones.
"""

from __future__ import annotations

import itertools

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from inttypes import ALL_TYPES, INT8, SIGNED_TYPES, UINT8, UINT16, IntType
from overflow import (
    DEFAULT_STRATEGY,
    NATIVE_AVAILABLE,
    OverflowResult,
    Strategy,
    add_overflow,
    mul_overflow,
    resolve_strategy,
    sub_overflow,
    truncdiv,
)

WIDE_TYPES = tuple(t for t in ALL_TYPES if t.bits > 8)
OPERATIONS = {
    "add": (add_overflow, lambda a, b: a + b),
    "sub": (sub_overflow, lambda a, b: a - b),
    "mul": (mul_overflow, lambda a, b: a * b),
}


@pytest.fixture(params=list(Strategy), ids=lambda s: s.name.lower())
def strategy(request):
    return request.param


# ---------------------------------------------------------------------------
# Boundary tables
# ---------------------------------------------------------------------------

def add_cases(t: IntType) -> list[tuple[int, int, bool]]:
    lo, hi, s = t.min, t.max, t.signed
    return [
        (0, 0, False),
        (0, hi, False),
        (1, hi, True),
        (hi, hi, True),
        (hi // 2, hi // 2, False),
        (hi // 2, hi // 2 + 1, False),
        (hi // 2 + 1, hi // 2 + 1, True),
        (lo, lo, s),
        (lo, hi, False),
        (lo // 2, lo // 2, False),
        (t.wrap(lo // 2 - 1), lo // 2, s),
    ]


def sub_cases(t: IntType) -> list[tuple[int, int, bool]]:
    lo, hi, s = t.min, t.max, t.signed
    return [
        (0, 0, False),
        (0, 1, not s),
        (0, hi, not s),
        (hi, hi, False),
        (hi // 2, hi // 2, False),
        (hi // 2, hi // 2 + 1, not s),
        (hi // 2 + 1, hi // 2, False),
        (lo, 0, False),
        (lo, 1, True),
        (lo // 2, lo // 2, False),
        (lo // 2, lo // 2 + 1, not s),
        (lo // 2, hi // 2, not s),
        (lo // 2, hi // 2 + 1, not s),
        (lo // 2, hi // 2 + 2, True),
    ]


def mul_cases(t: IntType) -> list[tuple[int, int, bool]]:
    lo, hi = t.min, t.max
    cases = [
        (0, 0, False),
        (1, 1, False),
        (0, hi, False),
        (1, hi, False),
        (2, hi, True),
        (2, hi // 2, False),
        (3, hi // 2, True),
        (2, hi // 2 + 1, True),
    ]
    if t.signed:
        cases += [
            (-1, -1, False),
            (1, lo, False),
            (2, lo, True),
            (-1, lo, True),
        ]
    return cases


class TestBoundaryTables:
    def test_add(self, int_type, strategy):
        for a, b, expected in add_cases(int_type):
            assert add_overflow(a, b, int_type, strategy).overflowed is expected, (a, b)
            assert add_overflow(b, a, int_type, strategy).overflowed is expected, (b, a)

    def test_sub(self, int_type, strategy):
        for a, b, expected in sub_cases(int_type):
            assert sub_overflow(a, b, int_type, strategy).overflowed is expected, (a, b)

    def test_mul(self, int_type, strategy):
        for a, b, expected in mul_cases(int_type):
            assert mul_overflow(a, b, int_type, strategy).overflowed is expected, (a, b)
            assert mul_overflow(b, a, int_type, strategy).overflowed is expected, (b, a)


class TestBoundaryProperties:
    def test_half_max_sum(self, int_type, strategy):
        half = int_type.max // 2
        assert not add_overflow(half, half, int_type, strategy).overflowed
        assert add_overflow(half + 1, half + 1, int_type, strategy).overflowed

    @pytest.mark.parametrize("t", SIGNED_TYPES, ids=str)
    def test_minus_one_times_min(self, t, strategy):
        assert mul_overflow(-1, t.min, t, strategy).overflowed
        assert mul_overflow(t.min, -1, t, strategy).overflowed
        assert mul_overflow(1, t.min, t, strategy) == (t.min, False)

    def test_minus_one_times_min_wraps_to_min(self, strategy):
        assert mul_overflow(-1, INT8.min, INT8, strategy) == (-128, True)

    @given(a=st.integers(0, UINT16.max), b=st.integers(0, UINT16.max))
    def test_unsigned_sub_overflows_iff_less(self, a, b):
        for s in Strategy:
            assert sub_overflow(a, b, UINT16, s).overflowed == (a < b)


# ---------------------------------------------------------------------------
# Truncated result
# ---------------------------------------------------------------------------

class TestTruncatedResult:
    def test_add_wraps(self, strategy):
        assert add_overflow(127, 1, INT8, strategy) == (-128, True)
        assert add_overflow(255, 1, UINT8, strategy) == (0, True)

    def test_sub_wraps(self, strategy):
        assert sub_overflow(-128, 1, INT8, strategy) == (127, True)
        assert sub_overflow(0, 1, UINT8, strategy) == (255, True)

    def test_mul_wraps(self, strategy):
        assert mul_overflow(16, 16, UINT8, strategy) == (0, True)
        assert mul_overflow(64, 2, INT8, strategy) == (-128, True)

    def test_result_is_named_tuple(self):
        result = add_overflow(1, 2, INT8)
        assert isinstance(result, OverflowResult)
        assert result.value == 3
        assert result.overflowed is False
        value, overflowed = result
        assert (value, overflowed) == (3, False)


# ---------------------------------------------------------------------------
# Strategy parity
# ---------------------------------------------------------------------------

class TestStrategyParityExhaustive:
    @pytest.mark.parametrize("t", [INT8, UINT8], ids=str)
    @pytest.mark.parametrize("op_name", sorted(OPERATIONS))
    def test_parity_and_exactness(self, t, op_name):
        op, exact = OPERATIONS[op_name]
        for a, b in itertools.product(t.all_values(), repeat=2):
            raw = exact(a, b)
            expected = (t.wrap(raw), not t.contains(raw))
            assert op(a, b, t, Strategy.NATIVE) == expected, (a, b)
            assert op(a, b, t, Strategy.PORTABLE) == expected, (a, b)


def _operands(t: IntType):
    """Uniform values plus values clustered around the interesting edges."""
    edges = st.sampled_from(
        [v for v in (t.min, t.min + 1, -2, -1, 0, 1, 2, t.max - 1, t.max)
         if t.contains(v)]
    )
    near_root = st.integers(
        max(t.min, -t.approx_max_root * 2), t.approx_max_root * 2
    )
    return st.one_of(edges, near_root, st.integers(t.min, t.max))


class TestStrategyParitySampled:
    @pytest.mark.parametrize("t", WIDE_TYPES, ids=str)
    @pytest.mark.parametrize("op_name", sorted(OPERATIONS))
    @settings(max_examples=500)
    @given(data=st.data())
    def test_parity_and_exactness(self, t, op_name, data):
        op, exact = OPERATIONS[op_name]
        a = data.draw(_operands(t), label="a")
        b = data.draw(_operands(t), label="b")
        raw = exact(a, b)
        expected = (t.wrap(raw), not t.contains(raw))
        assert op(a, b, t, Strategy.NATIVE) == expected
        assert op(a, b, t, Strategy.PORTABLE) == expected


# ---------------------------------------------------------------------------
# Validation and configuration
# ---------------------------------------------------------------------------

class TestValidation:
    @pytest.mark.parametrize("op", [add_overflow, sub_overflow, mul_overflow])
    def test_out_of_range_operand_raises(self, op):
        with pytest.raises(ValueError, match="outside int8 range"):
            op(128, 0, INT8)
        with pytest.raises(ValueError, match="outside uint8 range"):
            op(0, -1, UINT8)


class TestStrategyResolution:
    def test_default_is_native_when_available(self):
        assert NATIVE_AVAILABLE
        assert DEFAULT_STRATEGY is Strategy.NATIVE
        assert resolve_strategy(None) is Strategy.NATIVE

    def test_explicit_strategy_kept(self):
        assert resolve_strategy(Strategy.PORTABLE) is Strategy.PORTABLE

    def test_portable_fallback(self, monkeypatch):
        import overflow

        monkeypatch.setattr(overflow, "NATIVE_AVAILABLE", False)
        assert resolve_strategy(Strategy.NATIVE) is Strategy.PORTABLE


class TestTruncdiv:
    @pytest.mark.parametrize(
        "a, b, expected",
        [(7, 2, 3), (-7, 2, -3), (7, -2, -3), (-7, -2, 3), (-128, 3, -42), (127, -11, -11)],
    )
    def test_truncates_toward_zero(self, a, b, expected):
        assert truncdiv(a, b) == expected
