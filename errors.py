"""Exceptions raised by the ALU engine.

Each error also derives from the closest built-in exception, so callers
that only know about ``OverflowError`` or ``ZeroDivisionError`` still
catch them.
"""

from __future__ import annotations


class ALUError(Exception):
    """Base class for every error the engine signals."""


class ArithmeticOverflowError(ALUError, OverflowError):
    """Raised when an exact result does not fit the word."""

    def __init__(self, operation: str, raw: int, lo: int, hi: int) -> None:
        self.operation = operation
        self.raw = raw
        self.lo = lo
        self.hi = hi
        super().__init__(
            f"{operation.capitalize()} overflow: {raw} is outside [{lo}, {hi}]"
        )


class DivisionByZeroError(ALUError, ZeroDivisionError):
    """Raised by divide and modulo when the divisor is zero."""

    def __init__(self, operation: str, dividend: int) -> None:
        self.operation = operation
        self.dividend = dividend
        super().__init__(f"{operation.capitalize()} by zero")


class InvalidArgumentError(ALUError, ValueError):
    """Raised for arguments an operation cannot accept.

    The usual case is a shift count outside [0, bits).
    """

    def __init__(self, operation: str, value: int | None, reason: str) -> None:
        self.operation = operation
        self.value = value
        self.reason = reason
        super().__init__(reason)


class ParseError(ALUError, ValueError):
    """Raised when text is not a numeral of the selected base."""

    def __init__(self, text: str | None, base: object, reason: str) -> None:
        self.text = text
        self.base = base
        self.reason = reason
        base_name = getattr(base, "value", base)
        super().__init__(f"{text!r} is not a valid {base_name} number: {reason}")
