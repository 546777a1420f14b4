"""Property-based tests using Hypothesis.

These tests check the engine against exact integer arithmetic over the
whole 32-bit range.  They complement the white-box tests by exploring
the input space broadly rather than targeting specific branches.
"""
from __future__ import annotations

import pytest
from hypothesis import assume, given, settings
from hypothesis.strategies import integers

from alu import ALUEngine, Operation
from bounds import INT32
from errors import ArithmeticOverflowError, DivisionByZeroError, InvalidArgumentError
from spec import truncdiv, truncmod

# ---------------------------------------------------------------------------
# Shared configuration
# ---------------------------------------------------------------------------

INT_MIN = INT32.lo
INT_MAX = INT32.hi

ALU = ALUEngine()
word = integers(min_value=INT_MIN, max_value=INT_MAX)
small = integers(min_value=-46_340, max_value=46_340)
valid_shift = integers(min_value=0, max_value=31)
bad_shift = integers(min_value=-1000, max_value=-1) | integers(min_value=32, max_value=1000)


# ===================================================================
# ARITHMETIC
# ===================================================================

class TestCheckedArithmetic:

    @given(a=word, b=word)
    def test_add_exact_or_overflow(self, a, b):
        if INT32.contains(a + b):
            assert ALU.add(a, b) == a + b
        else:
            with pytest.raises(ArithmeticOverflowError):
                ALU.add(a, b)

    @given(a=word, b=word)
    def test_subtract_exact_or_overflow(self, a, b):
        if INT32.contains(a - b):
            assert ALU.subtract(a, b) == a - b
        else:
            with pytest.raises(ArithmeticOverflowError):
                ALU.subtract(a, b)

    @given(a=word, b=word)
    def test_multiply_exact_or_overflow(self, a, b):
        if INT32.contains(a * b):
            assert ALU.multiply(a, b) == a * b
        else:
            with pytest.raises(ArithmeticOverflowError):
                ALU.multiply(a, b)

    @given(a=small, b=small)
    def test_multiply_small_never_overflows(self, a, b):
        assert ALU.multiply(a, b) == a * b

    @given(a=word, b=word)
    def test_add_commutes(self, a, b):
        assume(INT32.contains(a + b))
        assert ALU.add(a, b) == ALU.add(b, a)


class TestDivision:

    @given(a=word, b=word)
    def test_divide_truncates(self, a, b):
        assume(b != 0)
        assume(not (a == INT_MIN and b == -1))
        assert ALU.divide(a, b) == truncdiv(a, b)

    @given(a=word, b=word)
    def test_modulo_sign_of_dividend(self, a, b):
        assume(b != 0)
        r = ALU.modulo(a, b)
        assert r == truncmod(a, b)
        assert r == 0 or (r < 0) == (a < 0)
        assert abs(r) < abs(b)

    @given(a=word)
    def test_zero_divisor_always_rejected(self, a):
        with pytest.raises(DivisionByZeroError):
            ALU.divide(a, 0)
        with pytest.raises(DivisionByZeroError):
            ALU.modulo(a, 0)

    @given(a=word, b=word)
    @settings(max_examples=300)
    def test_quotient_remainder_identity(self, a, b):
        assume(b != 0)
        assume(not (a == INT_MIN and b == -1))
        assert ALU.divide(a, b) * b + ALU.modulo(a, b) == a


# ===================================================================
# BITWISE AND SHIFTS
# ===================================================================

class TestBitwise:

    @given(a=word)
    def test_not_is_involution(self, a):
        assert ALU.bitwise_not(ALU.bitwise_not(a)) == a

    @given(a=word)
    def test_not_flips_every_bit(self, a):
        assert INT32.to_unsigned(ALU.bitwise_not(a)) == INT32.mask ^ INT32.to_unsigned(a)

    @given(a=word, b=word)
    def test_and_or_match_unsigned_patterns(self, a, b):
        ua, ub = INT32.to_unsigned(a), INT32.to_unsigned(b)
        assert INT32.to_unsigned(ALU.bitwise_and(a, b)) == ua & ub
        assert INT32.to_unsigned(ALU.bitwise_or(a, b)) == ua | ub

    @given(a=word, s=valid_shift)
    def test_left_shift_keeps_low_bits(self, a, s):
        assert INT32.to_unsigned(ALU.left_shift(a, s)) == (a << s) & INT32.mask

    @given(a=word, s=valid_shift)
    def test_right_shift_floors(self, a, s):
        assert ALU.right_shift(a, s) == a // (2 ** s)

    @given(a=word, s=bad_shift)
    def test_bad_shift_rejected(self, a, s):
        with pytest.raises(InvalidArgumentError):
            ALU.left_shift(a, s)
        with pytest.raises(InvalidArgumentError):
            ALU.right_shift(a, s)


# ===================================================================
# RESULTS STAY IN THE WORD
# ===================================================================

class TestClosure:

    @given(a=word, b=word)
    def test_every_successful_result_in_bounds(self, a, b):
        for op in Operation:
            second = b % 32 if op.is_shift else b
            try:
                result = ALU.calculate(op, a, second)
            except (ArithmeticOverflowError, DivisionByZeroError):
                continue
            assert INT32.contains(result), f"{op.label}({a}, {second}) = {result}"

    @given(a=word, b=word)
    def test_recorded_history_bounded(self, a, b):
        engine = ALUEngine()
        for _ in range(12):
            engine.execute(Operation.OR, a, b)
        assert len(engine.get_history()) == 10
