"""Counterexample search: discovers gaps in the engine or its tests.

This module runs independently of the test suite.  For a narrow word
width it walks every operand pair and searches for:

1. Postcondition violations: inputs where the engine's result doesn't
   match the spec's reference computation.
2. Error condition violations: inputs that should raise but don't (or
   raise the wrong exception), and inputs that raise unexpectedly.
3. Property violations: algebraic relationships that fail for some
   input combination.
4. State violations: a failing call that changed the result register
   or the history.

Run directly::

    python -m validation.counterexample_search
"""
from __future__ import annotations

import sys
from dataclasses import dataclass, field

from alu import ALUEngine
from bounds import Bounds, INT4, INT8
from errors import ALUError
from spec import ALUSpec, OperationSpec, build_spec


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass
class Counterexample:
    category: str
    operation: str
    inputs: tuple
    expected: str
    actual: str
    description: str


@dataclass
class SearchReport:
    counterexamples: list[Counterexample] = field(default_factory=list)
    checks_run: int = 0

    @property
    def passed(self) -> bool:
        return len(self.counterexamples) == 0

    def summary(self) -> str:
        lines = [
            "Counterexample Search Report",
            "=" * 40,
            f"Total checks: {self.checks_run}",
            f"Counterexamples found: {len(self.counterexamples)}",
        ]
        if self.counterexamples:
            lines.append("")
            for i, cx in enumerate(self.counterexamples, 1):
                lines.append(f"  [{i}] {cx.category} / {cx.operation}")
                lines.append(f"      Inputs:   {cx.inputs}")
                lines.append(f"      Expected: {cx.expected}")
                lines.append(f"      Actual:   {cx.actual}")
                lines.append(f"      {cx.description}")
        else:
            lines.append("\nNo counterexamples found.")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Input enumeration
# ---------------------------------------------------------------------------

def _inputs(op_spec: OperationSpec, bounds: Bounds):
    """Every operand tuple for the operation, including bad shift counts."""
    if op_spec.arity == 1:
        for a in bounds.all_values():
            yield (a,)
        return
    if op_spec.operation.is_shift:
        second = range(-2, bounds.bits + 2)
    else:
        second = bounds.all_values()
    for a in bounds.all_values():
        for b in second:
            yield (a, b)


# ---------------------------------------------------------------------------
# Search functions
# ---------------------------------------------------------------------------

def search_operation_violations(
    engine: ALUEngine,
    spec: ALUSpec,
) -> tuple[list[Counterexample], int]:
    """Check results, errors and untouched state for every operand tuple."""
    cxs: list[Counterexample] = []
    checks = 0

    for op, op_spec in spec.operations.items():
        method = getattr(engine, op_spec.method)
        for args in _inputs(op_spec, spec.bounds):
            checks += 1
            ec = op_spec.expected_error(*args)
            before = (engine.state(), engine.get_history())

            try:
                result = method(*args)
            except ALUError as e:
                if ec is None:
                    cxs.append(Counterexample(
                        category="unexpected_error",
                        operation=op.label,
                        inputs=args,
                        expected="no error",
                        actual=f"{type(e).__name__}: {e}",
                        description="Operation raised an unexpected exception",
                    ))
                elif not isinstance(e, ec.exception):
                    cxs.append(Counterexample(
                        category="wrong_error",
                        operation=op.label,
                        inputs=args,
                        expected=ec.exception.__name__,
                        actual=f"{type(e).__name__}: {e}",
                        description=f"Wrong exception type for '{ec.name}'",
                    ))
                if (engine.state(), engine.get_history()) != before:
                    cxs.append(Counterexample(
                        category="state_violation",
                        operation=op.label,
                        inputs=args,
                        expected=f"state unchanged: {before!r}",
                        actual=f"result={engine.result}",
                        description="Failing call mutated engine state",
                    ))
                continue

            if ec is not None:
                cxs.append(Counterexample(
                    category="missing_error",
                    operation=op.label,
                    inputs=args,
                    expected=ec.exception.__name__,
                    actual=f"result={result}",
                    description=(
                        f"Error condition '{ec.name}' should have "
                        f"triggered but didn't"
                    ),
                ))
                continue

            for post in op_spec.postconditions:
                if not post.check(*args, result):
                    cxs.append(Counterexample(
                        category="postcondition_violation",
                        operation=op.label,
                        inputs=args,
                        expected=post.description,
                        actual=f"result={result}",
                        description=f"Postcondition '{post.name}' violated",
                    ))

    return cxs, checks


def search_property_violations(
    engine: ALUEngine,
    spec: ALUSpec,
) -> tuple[list[Counterexample], int]:
    """Exhaustively check every algebraic property."""
    cxs: list[Counterexample] = []
    checks = 0

    for op, prop in spec.all_properties:
        if prop.arity == 2:
            cases = [
                (a, b)
                for a in spec.bounds.all_values()
                for b in spec.bounds.all_values()
            ]
        else:
            cases = [(a,) for a in spec.bounds.all_values()]

        for args in cases:
            checks += 1
            try:
                ok = prop.check(engine, *args)
            except ALUError:
                continue
            if not ok:
                cxs.append(Counterexample(
                    category="property_violation",
                    operation=op.label,
                    inputs=args,
                    expected=prop.description,
                    actual="property does not hold",
                    description=f"Property '{prop.name}' violated",
                ))

    return cxs, checks


# ---------------------------------------------------------------------------
# Top-level runner
# ---------------------------------------------------------------------------

def run_search(bounds: Bounds) -> SearchReport:
    """Run the complete counterexample search for one word width."""
    engine = ALUEngine(bounds)
    spec = build_spec(bounds)
    report = SearchReport()

    for search_fn in (
        search_operation_violations,
        search_property_violations,
    ):
        cxs, checks = search_fn(engine, spec)
        report.counterexamples.extend(cxs)
        report.checks_run += checks

    return report


def main() -> None:
    """Run the counterexample search across several word widths."""
    configs = [
        ("INT4  [-8, 7]", INT4),
        ("INT8  [-128, 127]", INT8),
    ]

    all_passed = True
    for name, bounds in configs:
        print(f"\n--- Word width: {name} ---")
        report = run_search(bounds)
        print(report.summary())
        if not report.passed:
            all_passed = False

    print("\n" + "=" * 40)
    if all_passed:
        print("ALL WORD WIDTHS PASSED")
    else:
        print("SOME WORD WIDTHS HAD COUNTEREXAMPLES")
        sys.exit(1)


if __name__ == "__main__":
    main()
