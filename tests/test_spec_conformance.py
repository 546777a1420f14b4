"""Spec conformance tests.

These tests are *driven by* the spec: they iterate over every
postcondition, error condition, and algebraic property defined in
``spec.build_spec`` and verify the engine satisfies them.

If the spec changes (e.g. a new postcondition is added), these tests
automatically cover it; no manual test authoring is required for the
new predicate.
"""
from __future__ import annotations

import pytest
from hypothesis import given, settings
from hypothesis.strategies import integers

from alu import ALUEngine, Operation
from bounds import INT4, INT32
from errors import ALUError
from spec import build_spec

# ---------------------------------------------------------------------------
# Configuration: full word for random checks, 4 bits for exhaustive ones
# ---------------------------------------------------------------------------

SPEC = build_spec(INT32)
ALU = ALUEngine(INT32)
word = integers(min_value=INT32.lo, max_value=INT32.hi)
shift = integers(min_value=-4, max_value=36)

TINY_SPEC = build_spec(INT4)
TINY_ALU = ALUEngine(INT4)


def _check_call(alu, op_spec, args):
    """Run one call and hold it to the error conditions and postconditions."""
    method = getattr(alu, op_spec.method)
    ec = op_spec.expected_error(*args)
    if ec is not None:
        with pytest.raises(ec.exception):
            method(*args)
        return
    result = method(*args)
    for post in op_spec.postconditions:
        assert post.check(*args, result), (
            f"Postcondition '{post.name}' failed: "
            f"{op_spec.operation.label}{args} = {result}"
        )


# ===================================================================
# SPEC SHAPE
# ===================================================================

class TestSpecShape:

    def test_every_operation_specified(self):
        assert set(SPEC.operations) == set(Operation)

    def test_methods_exist(self):
        for op_spec in SPEC.operations.values():
            assert callable(getattr(ALU, op_spec.method))

    def test_every_operation_has_properties(self):
        for op_spec in SPEC.operations.values():
            assert op_spec.properties, op_spec.operation

    def test_left_shift_agrees_with_multiply(self):
        names = [p.name for p in SPEC.operations[Operation.LEFT_SHIFT].properties]
        assert "multiply_agreement" in names


# ===================================================================
# POSTCONDITIONS AND ERROR CONDITIONS: property-based, 32-bit
# ===================================================================

class TestContract32:

    @pytest.mark.parametrize("op", [
        op for op in Operation if op.arity == 2 and not op.is_shift
    ])
    @given(a=word, b=word)
    @settings(max_examples=200)
    def test_binary_operations(self, op, a, b):
        _check_call(ALU, SPEC.operations[op], (a, b))

    @pytest.mark.parametrize("op", [Operation.LEFT_SHIFT, Operation.RIGHT_SHIFT])
    @given(a=word, s=shift)
    @settings(max_examples=200)
    def test_shifts(self, op, a, s):
        _check_call(ALU, SPEC.operations[op], (a, s))

    @given(a=word)
    def test_not(self, a):
        _check_call(ALU, SPEC.operations[Operation.NOT], (a,))

    @pytest.mark.parametrize("op,args", [
        (Operation.ADD, (INT32.hi, 1)),
        (Operation.SUBTRACT, (INT32.lo, 1)),
        (Operation.MULTIPLY, (65_536, 65_536)),
        (Operation.DIVIDE, (INT32.lo, -1)),
        (Operation.DIVIDE, (7, 0)),
        (Operation.MODULO, (7, 0)),
        (Operation.LEFT_SHIFT, (1, 32)),
        (Operation.RIGHT_SHIFT, (1, -1)),
    ])
    def test_boundary_errors_are_specified(self, op, args):
        op_spec = SPEC.operations[op]
        assert op_spec.expected_error(*args) is not None
        _check_call(ALU, op_spec, args)


# ===================================================================
# ALGEBRAIC PROPERTIES: property-based, 32-bit
# ===================================================================

class TestAlgebraicProperties:

    @given(a=word, b=word)
    @settings(max_examples=300)
    def test_binary_properties(self, a, b):
        for op, prop in SPEC.all_properties:
            if prop.arity != 2:
                continue
            try:
                ok = prop.check(ALU, a, b)
            except ALUError:
                continue
            assert ok, f"Property '{prop.name}' failed for {op.label}({a}, {b})"

    @given(a=word)
    @settings(max_examples=300)
    def test_unary_properties(self, a):
        for op, prop in SPEC.all_properties:
            if prop.arity != 1:
                continue
            try:
                ok = prop.check(ALU, a)
            except ALUError:
                continue
            assert ok, f"Property '{prop.name}' failed for {op.label}({a})"


# ===================================================================
# EXHAUSTIVE VERIFICATION: 4-bit word
# ===================================================================

class TestExhaustive:
    """For a 4-bit word, check *every* operand tuple against the spec."""

    @pytest.mark.parametrize("op", list(Operation))
    def test_all_inputs(self, op):
        op_spec = TINY_SPEC.operations[op]
        checked = 0
        for a in INT4.all_values():
            if op.arity == 1:
                _check_call(TINY_ALU, op_spec, (a,))
                checked += 1
                continue
            second = range(-2, INT4.bits + 2) if op.is_shift else INT4.all_values()
            for b in second:
                _check_call(TINY_ALU, op_spec, (a, b))
                checked += 1
        assert checked > 0

    def test_all_properties(self):
        for op, prop in TINY_SPEC.all_properties:
            cases = (
                [(a, b) for a in INT4.all_values() for b in INT4.all_values()]
                if prop.arity == 2
                else [(a,) for a in INT4.all_values()]
            )
            for args in cases:
                try:
                    ok = prop.check(TINY_ALU, *args)
                except ALUError:
                    continue
                assert ok, f"Property '{prop.name}' failed for {op.label}{args}"

    def test_exhaustive_pair_count(self):
        """Sanity: confirm the expected number of pairs."""
        assert INT4.width == 16
        assert INT4.width ** 2 == 256


class TestCounterexampleSearch:
    """The standalone search tool agrees with the tests on a 4-bit word."""

    def test_int4_has_no_counterexamples(self):
        from validation.counterexample_search import run_search

        report = run_search(INT4)
        assert report.passed, report.summary()
        assert report.checks_run > INT4.width ** 2
