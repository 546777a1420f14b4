"""ALU engine.

Performs the ten ALU operations on signed words, keeps the last result
and a ring buffer of formatted history entries, and notifies listeners
whenever either changes.

Every operation validates its operands, computes on unbounded Python
integers, and narrows the result back into the word before any state is
touched.  A failing call raises and leaves result, history and listeners
exactly as they were.

State lives behind one re-entrant lock, so an engine can be shared by
several callers (the HTTP app does this) without a result being paired
with another call's history entry.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from bases import NumberBase, format_binary_grouped
from bounds import Bounds, INT32, OverflowStrategy
from config import EngineConfig
from errors import ALUError, DivisionByZeroError, InvalidArgumentError
from history import HISTORY_CAPACITY, HistoryBuffer, format_entry

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------

class Operation(str, Enum):
    """ALU operations, valued by the label used in history entries."""

    ADD = "ADD"
    SUBTRACT = "SUBTRACT"
    MULTIPLY = "MULTIPLY"
    DIVIDE = "DIVIDE"
    MODULO = "MODULO"
    AND = "AND"
    OR = "OR"
    NOT = "NOT"
    LEFT_SHIFT = "LEFT SHIFT"
    RIGHT_SHIFT = "RIGHT SHIFT"

    @property
    def label(self) -> str:
        return self.value

    @property
    def arity(self) -> int:
        return 1 if self is Operation.NOT else 2

    @property
    def is_shift(self) -> bool:
        return self in (Operation.LEFT_SHIFT, Operation.RIGHT_SHIFT)


# ---------------------------------------------------------------------------
# Change notification
# ---------------------------------------------------------------------------

RESULT = "result"
BINARY_RESULT = "binary_result"
HISTORY = "history"


@dataclass(frozen=True)
class ChangeEvent:
    """A property of the engine changed from ``old_value`` to ``new_value``."""

    property_name: str
    old_value: Any
    new_value: Any


Listener = Callable[[ChangeEvent], None]


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

class ALUEngine:
    """Fixed-width ALU with a last-result register and a bounded history."""

    def __init__(
        self,
        bounds: Bounds = INT32,
        history_capacity: int = HISTORY_CAPACITY,
    ) -> None:
        self.bounds = bounds
        self._history = HistoryBuffer(history_capacity)
        self._result = 0
        self._binary_result = format_binary_grouped(0, bounds)
        self._listeners: list[tuple[str | None, Listener]] = []
        self._lock = threading.RLock()

    @classmethod
    def from_config(cls, config: EngineConfig) -> ALUEngine:
        return cls(Bounds(config.word_bits), config.history_capacity)

    # -- observable state ---------------------------------------------------

    @property
    def result(self) -> int:
        return self._result

    @property
    def binary_result(self) -> str:
        return self._binary_result

    def state(self) -> tuple[int, str]:
        """The result and its binary form, read together."""
        with self._lock:
            return self._result, self._binary_result

    def get_history(self) -> tuple[str, ...]:
        """Recorded entries, oldest first."""
        with self._lock:
            return self._history.snapshot()

    def recent_history(self) -> list[str]:
        """Recorded entries, newest first."""
        return list(reversed(self.get_history()))

    def clear_history(self) -> None:
        with self._lock:
            self._history.clear()
            self._fire(HISTORY, None, self._history.snapshot())

    # -- listeners ----------------------------------------------------------

    def subscribe(
        self, listener: Listener, property_name: str | None = None
    ) -> Callable[[], None]:
        """Register ``listener`` for one property, or for all when None.

        Returns a callable that removes the registration.
        """
        entry = (property_name, listener)
        with self._lock:
            self._listeners.append(entry)

        def unsubscribe() -> None:
            with self._lock:
                if entry in self._listeners:
                    self._listeners.remove(entry)

        return unsubscribe

    def _fire(self, property_name: str, old_value: Any, new_value: Any) -> None:
        event = ChangeEvent(property_name, old_value, new_value)
        for wanted, listener in list(self._listeners):
            if wanted is None or wanted == property_name:
                listener(event)

    def _update_result(self, new_result: int) -> None:
        old_result = self._result
        self._result = new_result
        self._binary_result = format_binary_grouped(new_result, self.bounds)
        self._fire(RESULT, old_result, new_result)
        self._fire(BINARY_RESULT, None, self._binary_result)

    # -- internal helpers ---------------------------------------------------

    def _validate(self, label: str, *values: int) -> None:
        for v in values:
            if not self.bounds.contains(v):
                raise InvalidArgumentError(
                    label,
                    v,
                    f"Operand {v} is outside "
                    f"[{self.bounds.lo}, {self.bounds.hi}]",
                )

    def _check_shift(self, operation: Operation, amount: int) -> None:
        if amount < 0 or amount >= self.bounds.bits:
            raise InvalidArgumentError(
                operation.label,
                amount,
                f"Shift amount must be between 0 and {self.bounds.bits - 1}",
            )

    def _compute(self, operation: Operation, a: int, b: int | None) -> int:
        """Pure arithmetic step.  Raises before anything is mutated."""
        if operation is Operation.NOT:
            self._validate(operation.label, a)
            return ~a

        if b is None:
            raise InvalidArgumentError(
                operation.label, None, f"{operation.label} needs two operands"
            )

        if operation.is_shift:
            self._validate(operation.label, a)
            self._check_shift(operation, b)
            if operation is Operation.LEFT_SHIFT:
                return self.bounds.apply(a << b, OverflowStrategy.WRAP)
            return a >> b

        self._validate(operation.label, a, b)

        if operation is Operation.ADD:
            return self.bounds.apply(a + b, operation="addition")
        if operation is Operation.SUBTRACT:
            return self.bounds.apply(a - b, operation="subtraction")
        if operation is Operation.MULTIPLY:
            return self.bounds.apply(a * b, operation="multiplication")
        if operation is Operation.AND:
            return a & b
        if operation is Operation.OR:
            return a | b

        if b == 0:
            name = "division" if operation is Operation.DIVIDE else "modulo"
            raise DivisionByZeroError(name, a)

        # Truncating division toward zero.  Python's divmod floors, so
        # step the quotient back up when signs differ and there is a
        # remainder.
        q, r = divmod(a, b)
        if r != 0 and (a < 0) != (b < 0):
            q += 1

        if operation is Operation.DIVIDE:
            return self.bounds.apply(q, operation="division")
        # Remainder takes the sign of the dividend.
        return a - b * q

    # -- public operations --------------------------------------------------

    def calculate(self, operation: Operation, a: int, b: int | None = None) -> int:
        """Run ``operation`` and update the result register.  Does not record."""
        operation = Operation(operation)
        with self._lock:
            try:
                result = self._compute(operation, a, b)
            except ALUError as e:
                logger.info("%s rejected for (%s, %s): %s", operation.label, a, b, e)
                raise
            self._update_result(result)
        logger.debug("%s(%s, %s) = %s", operation.label, a, b, result)
        return result

    def add(self, a: int, b: int) -> int:
        return self.calculate(Operation.ADD, a, b)

    def subtract(self, a: int, b: int) -> int:
        return self.calculate(Operation.SUBTRACT, a, b)

    def multiply(self, a: int, b: int) -> int:
        return self.calculate(Operation.MULTIPLY, a, b)

    def divide(self, a: int, b: int) -> int:
        """Integer quotient, truncated toward zero."""
        return self.calculate(Operation.DIVIDE, a, b)

    def modulo(self, a: int, b: int) -> int:
        """Remainder of truncating division; takes the sign of ``a``."""
        return self.calculate(Operation.MODULO, a, b)

    def bitwise_and(self, a: int, b: int) -> int:
        return self.calculate(Operation.AND, a, b)

    def bitwise_or(self, a: int, b: int) -> int:
        return self.calculate(Operation.OR, a, b)

    def bitwise_not(self, a: int) -> int:
        return self.calculate(Operation.NOT, a)

    def left_shift(self, a: int, amount: int) -> int:
        """Shift left, dropping bits that leave the word."""
        return self.calculate(Operation.LEFT_SHIFT, a, amount)

    def right_shift(self, a: int, amount: int) -> int:
        """Arithmetic (sign-extending) shift right."""
        return self.calculate(Operation.RIGHT_SHIFT, a, amount)

    # -- history ------------------------------------------------------------

    def record_history(
        self,
        operation: Operation | str,
        a: int,
        b: int | None,
        result: int,
        base: NumberBase = NumberBase.DECIMAL,
    ) -> str:
        """Append a formatted entry to the history and return it.

        Unary operations are rendered without a second operand whatever
        ``b`` holds.  Numbers outside the word raise
        ``InvalidArgumentError`` and nothing is recorded.
        """
        try:
            op = Operation(operation)
        except ValueError:
            label, unary = str(operation), b is None
        else:
            label, unary = op.label, op.arity == 1
        if unary:
            b = None

        self._validate(label, *(v for v in (a, b, result) if v is not None))
        entry = format_entry(label, a, b, result, NumberBase(base), self.bounds)
        with self._lock:
            self._history.append(entry)
            self._fire(HISTORY, None, self._history.snapshot())
        return entry

    def perform(
        self,
        operation: Operation,
        a: int,
        b: int | None = None,
        base: NumberBase = NumberBase.DECIMAL,
    ) -> tuple[int, str]:
        """Run ``operation`` and record it, as one indivisible step.

        Returns the result together with the history entry it produced.
        """
        operation = Operation(operation)
        base = NumberBase(base)
        if operation.arity == 1:
            b = None
        with self._lock:
            result = self.calculate(operation, a, b)
            entry = self.record_history(operation, a, b, result, base)
        return result, entry

    def execute(
        self,
        operation: Operation,
        a: int,
        b: int | None = None,
        base: NumberBase = NumberBase.DECIMAL,
    ) -> int:
        """Run ``operation`` and record it; returns only the result."""
        return self.perform(operation, a, b, base)[0]
