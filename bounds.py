"""
Word-width layer for the ALU.

Bounds define the signed two's-complement domain the ALU computes in.
Every operand and every result is guaranteed to live in [lo, hi].
Arithmetic is carried out on Python's unbounded integers and only then
narrowed back into the word, either by checking (raise on overflow) or
by wrapping (drop the high bits, as hardware shifts do).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from errors import ArithmeticOverflowError


class OverflowStrategy(Enum):
    """What to do when a raw result would exceed the word."""

    WRAP = auto()        # Two's-complement wrap-around
    ERROR = auto()       # Raise ArithmeticOverflowError


@dataclass(frozen=True)
class Bounds:
    """
    A signed integer word of ``bits`` bits.

    lo and hi follow from the width: [-2**(bits-1), 2**(bits-1) - 1].
    """

    bits: int

    def __post_init__(self):
        if self.bits < 1:
            raise ValueError(f"bits ({self.bits}) must be >= 1")

    @property
    def lo(self) -> int:
        return -(1 << (self.bits - 1))

    @property
    def hi(self) -> int:
        return (1 << (self.bits - 1)) - 1

    @property
    def mask(self) -> int:
        """All-ones bit pattern of the word."""
        return (1 << self.bits) - 1

    @property
    def width(self) -> int:
        """Total number of representable values."""
        return 1 << self.bits

    def contains(self, value: int) -> bool:
        return self.lo <= value <= self.hi

    def all_values(self) -> range:
        return range(self.lo, self.hi + 1)

    def wrap(self, raw: int) -> int:
        """Narrow an unbounded integer to the word, keeping the low bits."""
        pattern = raw & self.mask
        if pattern > self.hi:
            return pattern - self.width
        return pattern

    def to_unsigned(self, value: int) -> int:
        """The word's bit pattern read as an unsigned integer."""
        return value & self.mask

    def apply(self, raw: int, strategy: OverflowStrategy = OverflowStrategy.ERROR,
              operation: str = "operation") -> int:
        """Apply the overflow strategy to bring a raw result into bounds."""
        if self.lo <= raw <= self.hi:
            return raw

        if strategy == OverflowStrategy.WRAP:
            return self.wrap(raw)

        raise ArithmeticOverflowError(operation, raw, self.lo, self.hi)


# ---------------------------------------------------------------------------
# Common word widths
# ---------------------------------------------------------------------------

INT32 = Bounds(bits=32)
INT16 = Bounds(bits=16)
INT8 = Bounds(bits=8)

# Small enough for exhaustive verification of every operand pair
INT4 = Bounds(bits=4)
