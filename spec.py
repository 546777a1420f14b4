"""Formal specification for the ALU engine.

Each operation is specified as a collection of:
- postconditions: what the output must satisfy given accepted inputs
- error conditions: what inputs must cause specific exceptions
- algebraic properties: relationships that must hold between operations

The spec is machine-readable.  The conformance tests and the
counterexample search iterate over it instead of restating each rule.

Reference results are computed on unbounded integers with helpers that
are independent of the engine's own arithmetic.

Layers
------
Postcondition / ErrorCondition / AlgebraicProperty   spec building blocks
OperationSpec   per-operation contract
ALUSpec         the full contract for one word width
build_spec()    constructs an ALUSpec for given bounds
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from alu import Operation
from bounds import Bounds
from errors import ArithmeticOverflowError, DivisionByZeroError, InvalidArgumentError


# ---------------------------------------------------------------------------
# Spec building blocks
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Postcondition:
    name: str
    description: str
    check: Callable[..., bool]


@dataclass(frozen=True)
class ErrorCondition:
    name: str
    description: str
    trigger: Callable[..., bool]
    exception: type


@dataclass(frozen=True)
class AlgebraicProperty:
    name: str
    description: str
    arity: int          # how many free input values the check needs
    check: Callable[..., bool]


@dataclass(frozen=True)
class OperationSpec:
    operation: Operation
    method: str         # engine method implementing the operation
    reference: Callable[..., int]
    postconditions: list[Postcondition]
    error_conditions: list[ErrorCondition]
    properties: list[AlgebraicProperty]

    @property
    def arity(self) -> int:
        return self.operation.arity

    def expected_error(self, *args: int) -> ErrorCondition | None:
        """First error condition triggered by ``args``, if any."""
        for ec in self.error_conditions:
            if ec.trigger(*args):
                return ec
        return None


@dataclass(frozen=True)
class ALUSpec:
    """Complete contract for an engine of a given word width."""

    bounds: Bounds
    operations: dict[Operation, OperationSpec]

    @property
    def all_properties(self) -> list[tuple[Operation, AlgebraicProperty]]:
        out: list[tuple[Operation, AlgebraicProperty]] = []
        for op, op_spec in self.operations.items():
            for prop in op_spec.properties:
                out.append((op, prop))
        return out


# ---------------------------------------------------------------------------
# Helpers used inside the spec predicates
# ---------------------------------------------------------------------------

def truncdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero (not floor division)."""
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


def truncmod(a: int, b: int) -> int:
    """Remainder matching ``truncdiv``: it carries the sign of ``a``."""
    return a - b * truncdiv(a, b)


def to_signed(pattern: int, bits: int) -> int:
    """Reinterpret the low ``bits`` bits of ``pattern`` as a signed word."""
    pattern &= (1 << bits) - 1
    return pattern - (1 << bits) if pattern >> (bits - 1) else pattern


# ---------------------------------------------------------------------------
# Spec builder
# ---------------------------------------------------------------------------

def build_spec(bounds: Bounds) -> ALUSpec:
    """Construct the full ALU specification for a word width."""

    bits = bounds.bits

    def in_bounds(*args: int) -> bool:
        return all(bounds.contains(v) for v in args)

    def overflows(reference: Callable[[int, int], int]) -> Callable[[int, int], bool]:
        return lambda a, b: not bounds.contains(reference(a, b))

    def shift_out_of_range(a: int, s: int) -> bool:
        return s < 0 or s >= bits

    def correct(reference: Callable[..., int]) -> Postcondition:
        return Postcondition(
            "result_correct",
            "Result equals the reference computation",
            lambda *args: args[-1] == reference(*args[:-1]),
        )

    result_in_bounds = Postcondition(
        "result_in_bounds",
        "Result is within bounds",
        lambda *args: bounds.contains(args[-1]),
    )

    def checked(reference, error_conditions, properties, op, method):
        return OperationSpec(
            operation=op,
            method=method,
            reference=reference,
            postconditions=[result_in_bounds, correct(reference)],
            error_conditions=error_conditions,
            properties=properties,
        )

    # -------------------------------------------------------------- add
    add_ref = lambda a, b: a + b  # noqa: E731
    add_spec = checked(
        add_ref,
        [
            ErrorCondition(
                "overflow_error",
                "ArithmeticOverflowError when the sum leaves the word",
                overflows(add_ref),
                ArithmeticOverflowError,
            ),
        ],
        [
            AlgebraicProperty(
                "commutativity", "add(a, b) == add(b, a)", 2,
                lambda alu, a, b: alu.add(a, b) == alu.add(b, a),
            ),
            AlgebraicProperty(
                "identity", "add(a, 0) == a", 1,
                lambda alu, a: alu.add(a, 0) == a,
            ),
        ],
        Operation.ADD, "add",
    )

    # -------------------------------------------------------------- subtract
    sub_ref = lambda a, b: a - b  # noqa: E731
    sub_spec = checked(
        sub_ref,
        [
            ErrorCondition(
                "overflow_error",
                "ArithmeticOverflowError when the difference leaves the word",
                overflows(sub_ref),
                ArithmeticOverflowError,
            ),
        ],
        [
            AlgebraicProperty(
                "identity", "subtract(a, 0) == a", 1,
                lambda alu, a: alu.subtract(a, 0) == a,
            ),
            AlgebraicProperty(
                "self_inverse", "subtract(a, a) == 0", 1,
                lambda alu, a: alu.subtract(a, a) == 0,
            ),
        ],
        Operation.SUBTRACT, "subtract",
    )

    # -------------------------------------------------------------- multiply
    mul_ref = lambda a, b: a * b  # noqa: E731
    mul_spec = checked(
        mul_ref,
        [
            ErrorCondition(
                "overflow_error",
                "ArithmeticOverflowError when the product leaves the word",
                overflows(mul_ref),
                ArithmeticOverflowError,
            ),
        ],
        [
            AlgebraicProperty(
                "commutativity", "multiply(a, b) == multiply(b, a)", 2,
                lambda alu, a, b: alu.multiply(a, b) == alu.multiply(b, a),
            ),
            AlgebraicProperty(
                "identity", "multiply(a, 1) == a", 1,
                lambda alu, a: alu.multiply(a, 1) == a,
            ),
            AlgebraicProperty(
                "zero", "multiply(a, 0) == 0", 1,
                lambda alu, a: alu.multiply(a, 0) == 0,
            ),
        ],
        Operation.MULTIPLY, "multiply",
    )

    # -------------------------------------------------------------- divide
    div_spec = checked(
        truncdiv,
        [
            ErrorCondition(
                "div_by_zero_error",
                "DivisionByZeroError when the divisor is zero",
                lambda a, b: b == 0,
                DivisionByZeroError,
            ),
            ErrorCondition(
                "overflow_error",
                "ArithmeticOverflowError for the most negative word / -1",
                lambda a, b: b != 0 and not bounds.contains(truncdiv(a, b)),
                ArithmeticOverflowError,
            ),
        ],
        [
            AlgebraicProperty(
                "identity", "divide(a, 1) == a", 1,
                lambda alu, a: alu.divide(a, 1) == a,
            ),
            AlgebraicProperty(
                "self", "divide(a, a) == 1 for a != 0", 1,
                lambda alu, a: a == 0 or alu.divide(a, a) == 1,
            ),
            AlgebraicProperty(
                "division_identity",
                "divide(a, b) * b + modulo(a, b) == a for b != 0", 2,
                lambda alu, a, b: (
                    b == 0
                    or alu.divide(a, b) * b + alu.modulo(a, b) == a
                ),
            ),
        ],
        Operation.DIVIDE, "divide",
    )

    # -------------------------------------------------------------- modulo
    mod_spec = checked(
        truncmod,
        [
            ErrorCondition(
                "div_by_zero_error",
                "DivisionByZeroError when the divisor is zero",
                lambda a, b: b == 0,
                DivisionByZeroError,
            ),
        ],
        [
            AlgebraicProperty(
                "sign_of_dividend",
                "modulo(a, b) is zero or has the sign of a", 2,
                lambda alu, a, b: (
                    b == 0
                    or alu.modulo(a, b) == 0
                    or (alu.modulo(a, b) < 0) == (a < 0)
                ),
            ),
            AlgebraicProperty(
                "magnitude",
                "abs(modulo(a, b)) < abs(b)", 2,
                lambda alu, a, b: b == 0 or abs(alu.modulo(a, b)) < abs(b),
            ),
        ],
        Operation.MODULO, "modulo",
    )

    # -------------------------------------------------------------- and / or
    and_ref = lambda a, b: to_signed(a & b, bits)  # noqa: E731
    and_spec = checked(
        and_ref, [],
        [
            AlgebraicProperty(
                "commutativity", "and(a, b) == and(b, a)", 2,
                lambda alu, a, b: alu.bitwise_and(a, b) == alu.bitwise_and(b, a),
            ),
            AlgebraicProperty(
                "idempotence", "and(a, a) == a", 1,
                lambda alu, a: alu.bitwise_and(a, a) == a,
            ),
            AlgebraicProperty(
                "annihilator", "and(a, 0) == 0", 1,
                lambda alu, a: alu.bitwise_and(a, 0) == 0,
            ),
        ],
        Operation.AND, "bitwise_and",
    )

    or_ref = lambda a, b: to_signed(a | b, bits)  # noqa: E731
    or_spec = checked(
        or_ref, [],
        [
            AlgebraicProperty(
                "commutativity", "or(a, b) == or(b, a)", 2,
                lambda alu, a, b: alu.bitwise_or(a, b) == alu.bitwise_or(b, a),
            ),
            AlgebraicProperty(
                "identity", "or(a, 0) == a", 1,
                lambda alu, a: alu.bitwise_or(a, 0) == a,
            ),
            AlgebraicProperty(
                "all_ones", "or(a, -1) == -1", 1,
                lambda alu, a: alu.bitwise_or(a, -1) == -1,
            ),
        ],
        Operation.OR, "bitwise_or",
    )

    # -------------------------------------------------------------- not
    not_ref = lambda a: to_signed((1 << bits) - 1 - bounds.to_unsigned(a), bits)  # noqa: E731
    not_spec = checked(
        not_ref, [],
        [
            AlgebraicProperty(
                "involution", "not(not(a)) == a", 1,
                lambda alu, a: alu.bitwise_not(alu.bitwise_not(a)) == a,
            ),
            AlgebraicProperty(
                "complement", "and(a, not(a)) == 0", 1,
                lambda alu, a: alu.bitwise_and(a, alu.bitwise_not(a)) == 0,
            ),
            AlgebraicProperty(
                "de_morgan", "not(or(a, b)) == and(not(a), not(b))", 2,
                lambda alu, a, b: (
                    alu.bitwise_not(alu.bitwise_or(a, b))
                    == alu.bitwise_and(alu.bitwise_not(a), alu.bitwise_not(b))
                ),
            ),
        ],
        Operation.NOT, "bitwise_not",
    )

    # -------------------------------------------------------------- shifts
    shl_ref = lambda a, s: to_signed(bounds.to_unsigned(a) << s, bits)  # noqa: E731
    shl_spec = checked(
        shl_ref,
        [
            ErrorCondition(
                "shift_out_of_range",
                f"InvalidArgumentError unless 0 <= s < {bits}",
                shift_out_of_range,
                InvalidArgumentError,
            ),
        ],
        [
            AlgebraicProperty(
                "zero_shift", "left_shift(a, 0) == a", 1,
                lambda alu, a: alu.left_shift(a, 0) == a,
            ),
            AlgebraicProperty(
                "multiply_agreement", "left_shift(a, s) == wrap(a * 2**s)", 1,
                lambda alu, a: all(
                    alu.left_shift(a, s) == bounds.wrap(a * 2 ** s)
                    for s in range(bits)
                ),
            ),
        ],
        Operation.LEFT_SHIFT, "left_shift",
    )

    # Sign-extending: fill from the top with copies of the sign bit.
    shr_ref = lambda a, s: to_signed(  # noqa: E731
        (bounds.to_unsigned(a) >> s)
        | (((1 << s) - 1) << (bits - s) if a < 0 else 0),
        bits,
    )
    shr_spec = checked(
        shr_ref,
        [
            ErrorCondition(
                "shift_out_of_range",
                f"InvalidArgumentError unless 0 <= s < {bits}",
                shift_out_of_range,
                InvalidArgumentError,
            ),
        ],
        [
            AlgebraicProperty(
                "zero_shift", "right_shift(a, 0) == a", 1,
                lambda alu, a: alu.right_shift(a, 0) == a,
            ),
            AlgebraicProperty(
                "sign_preserved", "right_shift(a, s) < 0 iff a < 0", 1,
                lambda alu, a: all(
                    (alu.right_shift(a, s) < 0) == (a < 0) for s in range(bits)
                ),
            ),
        ],
        Operation.RIGHT_SHIFT, "right_shift",
    )

    return ALUSpec(
        bounds=bounds,
        operations={
            s.operation: s
            for s in (
                add_spec, sub_spec, mul_spec, div_spec, mod_spec,
                and_spec, or_spec, not_spec, shl_spec, shr_spec,
            )
        },
    )
