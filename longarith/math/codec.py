"""Decimal text <-> binary word conversion.

Conversion works on ASCII digit strings rather than on native integers so the
binary expansion is exact for any number of digits:

- the integer part is halved repeatedly (grade-school long division by two);
  each remainder is the next bit, least-significant first
- the fractional part is doubled repeatedly; when doubling produces an extra
  leading digit that digit is the next bit, most-significant first
"""

from __future__ import annotations

import re
from decimal import Decimal

from longarith.constants import WORD_BITS
from longarith.errors import InvalidFormat
from longarith.math.words import words_for_bits

__all__ = [
    "DECIMAL_PATTERN",
    "parse_decimal",
    "halve_decimal",
    "double_decimal",
    "integer_digits_to_words",
    "fraction_digits_to_words",
    "float_to_text",
]

# [sign]digits[.digits]; "5." and ".5" are accepted, a lone "." is not
DECIMAL_PATTERN = re.compile(r"^(?P<sign>[+-]?)(?P<int>[0-9]*)(?:\.(?P<frac>[0-9]*))?$")


def parse_decimal(text: str) -> tuple[bool, str, str]:
    """Split numeric text into sign, integer digits and fraction digits.

    Args:
        text: Decimal text such as "-12.50"; surrounding whitespace is ignored

    Returns:
        (negative, integer digits without leading zeros, fraction digits)

    Raises:
        InvalidFormat: If the text is not [sign]digits[.digits]
    """
    if not isinstance(text, str):
        raise InvalidFormat(f"Expected decimal text, got {type(text).__name__}")
    match = DECIMAL_PATTERN.match(text.strip())
    if match is None:
        raise InvalidFormat(f"Malformed decimal number: '{text}'")

    int_digits = match.group("int")
    frac_digits = match.group("frac") or ""
    if not int_digits and not frac_digits:
        raise InvalidFormat(f"Malformed decimal number: '{text}'")

    int_digits = int_digits.lstrip("0") or "0"
    return match.group("sign") == "-", int_digits, frac_digits


def halve_decimal(digits: str) -> tuple[str, int]:
    """Divide a decimal digit string by two.

    Returns:
        (quotient digits without leading zeros, remainder bit)
    """
    remainder = 0
    quotient = []
    for char in digits:
        current = remainder * 10 + (ord(char) - ord("0"))
        quotient.append(chr(ord("0") + current // 2))
        remainder = current % 2
    return "".join(quotient).lstrip("0") or "0", remainder


def double_decimal(digits: str) -> str:
    """Multiply a decimal digit string by two, keeping leading zeros.

    The result is one digit longer than the input exactly when the doubling
    carried out of the leading digit.
    """
    carry = 0
    result = []
    for char in reversed(digits):
        value = (ord(char) - ord("0")) * 2 + carry
        carry = value // 10
        result.append(chr(ord("0") + value % 10))
    if carry:
        result.append(chr(ord("0") + carry))
    return "".join(reversed(result))


def integer_digits_to_words(digits: str) -> list[int]:
    """Convert integer digits to 32-bit words, least-significant word first."""
    words = [0]
    current = digits.lstrip("0") or "0"
    bit_index = 0
    while current != "0":
        current, bit = halve_decimal(current)
        word_index, offset = divmod(bit_index, WORD_BITS)
        if word_index == len(words):
            words.append(0)
        words[word_index] |= bit << offset
        bit_index += 1
    return words


def fraction_digits_to_words(digits: str, fractional_bits: int) -> list[int]:
    """Convert fraction digits (after the point) to left-justified words.

    Exactly `fractional_bits` bits of the binary expansion are produced,
    truncated, most-significant first. The result always holds
    ceil(fractional_bits / 32) words.
    """
    words = [0] * words_for_bits(fractional_bits)
    current = digits
    width = len(current)
    for bit_index in range(fractional_bits):
        if not current.strip("0"):
            # Remaining expansion is all zeros
            break
        doubled = double_decimal(current)
        if len(doubled) > width:
            word_index, offset = divmod(bit_index, WORD_BITS)
            words[word_index] |= 1 << (WORD_BITS - 1 - offset)
            current = doubled[1:]
        else:
            current = doubled
    return words


def float_to_text(value: float) -> str:
    """Render a float as positional decimal text.

    Uses the shortest text that round-trips to the same float, written
    without an exponent (1e-05 -> "0.00001").

    Raises:
        InvalidFormat: If value is NaN or infinite
    """
    as_decimal = Decimal(repr(value))
    if not as_decimal.is_finite():
        raise InvalidFormat(f"Cannot represent {value!r} as a fixed-point number")
    return format(as_decimal, "f")
