"""Number bases: parsing and formatting of ALU words as text.

The base is always an explicit argument.  Nothing in here remembers
which base a display happens to be showing.

Parsing is strict: a numeral must match the base's syntax exactly
(surrounding whitespace included) and its value must fit the signed
word.  Formatting renders the word's two's-complement bit pattern for
binary and hexadecimal, and the signed value for decimal.
"""

from __future__ import annotations

import re
from enum import Enum

from bounds import Bounds, INT32
from errors import ParseError


class NumberBase(str, Enum):
    DECIMAL = "Decimal"
    BINARY = "Binary"
    HEXADECIMAL = "Hexadecimal"

    @property
    def radix(self) -> int:
        return _RADIX[self]


_RADIX = {
    NumberBase.DECIMAL: 10,
    NumberBase.BINARY: 2,
    NumberBase.HEXADECIMAL: 16,
}

_NUMERAL = {
    NumberBase.DECIMAL: re.compile(r"[+-]?[0-9]+"),
    NumberBase.BINARY: re.compile(r"[01]+"),
    NumberBase.HEXADECIMAL: re.compile(r"(?:0[xX])?(?P<digits>[0-9a-fA-F]+)"),
}

GROUP_SIZE = 8


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def parse_number(text: str | None, base: NumberBase, bounds: Bounds = INT32) -> int:
    """Parse ``text`` as a numeral of ``base`` into a signed word.

    Raises ParseError when the text is blank, malformed, or out of range.
    """
    base = NumberBase(base)
    if text is None or not text.strip():
        raise ParseError(text, base, "input is empty")

    match = _NUMERAL[base].fullmatch(text)
    if match is None:
        raise ParseError(text, base, "unexpected characters")

    digits = match.groupdict().get("digits") or match.group(0)
    value = int(digits, base.radix)
    if not bounds.contains(value):
        raise ParseError(
            text, base, f"value is outside [{bounds.lo}, {bounds.hi}]"
        )
    return value


def is_valid_input(text: str | None, base: NumberBase, bounds: Bounds = INT32) -> bool:
    """True iff ``text`` parses as an in-range numeral of ``base``."""
    try:
        parse_number(text, base, bounds)
    except ParseError:
        return False
    return True


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------

def format_number(value: int, base: NumberBase, bounds: Bounds = INT32) -> str:
    """Render a word in ``base``.

    Decimal keeps the sign.  Binary and hexadecimal show the unsigned
    bit pattern without padding, hexadecimal with an ``0x`` prefix and
    upper-case digits.
    """
    base = NumberBase(base)
    if base == NumberBase.DECIMAL:
        return str(value)
    pattern = bounds.to_unsigned(value)
    if base == NumberBase.BINARY:
        return format(pattern, "b")
    return f"0x{pattern:X}"


def format_binary_grouped(value: int, bounds: Bounds = INT32) -> str:
    """Full-width binary split into 8-bit groups, e.g. ``00000000 ... 00000101``."""
    bits = format(bounds.to_unsigned(value), f"0{bounds.bits}b")
    groups = [bits[i:i + GROUP_SIZE] for i in range(0, len(bits), GROUP_SIZE)]
    return " ".join(groups)


def to_hex_string(value: int, bounds: Bounds = INT32) -> str:
    """Zero-padded hexadecimal, e.g. ``0x0000002A``."""
    digits = -(-bounds.bits // 4)
    return f"0x{bounds.to_unsigned(value):0{digits}X}"


def binary_preview(text: str | None, base: NumberBase, bounds: Bounds = INT32) -> str | None:
    """Grouped binary of an input field's text, or None if it does not parse."""
    try:
        value = parse_number(text, base, bounds)
    except ParseError:
        return None
    return format_binary_grouped(value, bounds)
