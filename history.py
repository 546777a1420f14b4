"""Bounded calculation history.

The buffer is a fixed list of slots and a write cursor.  Once every slot
is filled, each new entry overwrites the oldest one.  Entries are plain
display strings: the base they were rendered in is baked in at the
time they are recorded.
"""

from __future__ import annotations

from bases import NumberBase, format_number
from bounds import Bounds, INT32

HISTORY_CAPACITY = 10


def format_entry(
    label: str,
    a: int,
    b: int | None,
    result: int,
    base: NumberBase,
    bounds: Bounds = INT32,
) -> str:
    """Render ``A OP B = RESULT``, or ``A OP = RESULT`` when ``b`` is None."""
    fmt_a = format_number(a, base, bounds)
    fmt_result = format_number(result, base, bounds)
    if b is None:
        return f"{fmt_a} {label} = {fmt_result}"
    return f"{fmt_a} {label} {format_number(b, base, bounds)} = {fmt_result}"


class HistoryBuffer:
    """Ring buffer of at most ``capacity`` history entries."""

    def __init__(self, capacity: int = HISTORY_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError(f"capacity ({capacity}) must be >= 1")
        self._slots: list[str | None] = [None] * capacity
        self._cursor = 0
        self._size = 0

    @property
    def capacity(self) -> int:
        return len(self._slots)

    @property
    def cursor(self) -> int:
        """Index of the slot the next entry will be written to."""
        return self._cursor

    def append(self, entry: str) -> None:
        self._slots[self._cursor] = entry
        self._cursor = (self._cursor + 1) % self.capacity
        self._size = min(self._size + 1, self.capacity)

    def snapshot(self) -> tuple[str, ...]:
        """Live entries, oldest first."""
        if self._size < self.capacity:
            return tuple(self._slots[: self._size])
        return tuple(self._slots[self._cursor:] + self._slots[: self._cursor])

    def clear(self) -> None:
        self._slots = [None] * self.capacity
        self._cursor = 0
        self._size = 0

    def __len__(self) -> int:
        return self._size

    def __iter__(self):
        return iter(self.snapshot())
