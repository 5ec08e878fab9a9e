"""Arbitrary-precision sign-magnitude fixed-point numbers.

A FixedPoint stores its magnitude in 32-bit words:

- `integer`: integer part, least-significant word first
- `fractional`: fractional part, most-significant word first; the occupied
  bits of a partial last word are left-justified and its unused low bits are
  zero, so len(fractional) == ceil(fractional_bits / 32)

and the sign separately in `negative`. Zero is never negative.

All operators return new instances. The only mutating operation is
set_precision(), which can only reduce the fractional precision.

Results of +, -, *, / carry whole-word precision: after trailing zero
fractional words are trimmed, fractional_bits is len(fractional) * 32.
"""

from __future__ import annotations

from decimal import Decimal, localcontext
from enum import Enum

import structlog

from longarith.constants import BITS_PER_DECIMAL_DIGIT, DEFAULT_FRACTIONAL_BITS, WORD_BITS
from longarith.errors import DivisionByZero, InvalidFormat, UnreachableState
from longarith.math.codec import (
    float_to_text,
    fraction_digits_to_words,
    integer_digits_to_words,
    parse_decimal,
)
from longarith.math.words import (
    add_flat,
    compare_flat,
    compare_magnitude,
    get_bit,
    high_bits_mask,
    is_zero_words,
    multiply_flat,
    set_bit,
    shift_in_bit,
    shift_left_flat,
    shift_right_flat,
    split_flat,
    subtract_flat,
    to_flat,
    trim_fractional,
    trim_integer,
    words_for_bits,
)

__all__ = [
    "FixedPoint",
    "OpBehavior",
    "select_behavior",
]

logger = structlog.get_logger()


class OpBehavior(Enum):
    """What an addition or subtraction does to the operand magnitudes."""

    ADD_MAGNITUDES = "add_magnitudes"
    SUBTRACT_MAGNITUDES = "subtract_magnitudes"


def select_behavior(a_negative: bool, b_negative: bool, op: str) -> OpBehavior:
    """Look up the magnitude operation for `a op b` from the operand signs.

    | op | same signs          | opposite signs      |
    |----|---------------------|---------------------|
    | +  | add magnitudes      | subtract magnitudes |
    | -  | subtract magnitudes | add magnitudes      |

    Raises:
        UnreachableState: If op is neither "+" nor "-"
    """
    sign_xor = a_negative != b_negative
    if op == "+":
        return OpBehavior.SUBTRACT_MAGNITUDES if sign_xor else OpBehavior.ADD_MAGNITUDES
    if op == "-":
        return OpBehavior.ADD_MAGNITUDES if sign_xor else OpBehavior.SUBTRACT_MAGNITUDES
    raise UnreachableState(f"No add/subtract behavior for operator '{op}'")


class FixedPoint:
    """Sign-magnitude binary fixed-point number of arbitrary size.

    Attributes:
        negative: True for values below zero
        integer: Integer part as 32-bit words, least-significant first
        fractional: Fractional part as 32-bit words, most-significant first
        fractional_bits: Declared fractional precision in bits

    Examples:
        >>> (FixedPoint("10.5") + FixedPoint("20.25")).to_string()
        '30.75'
        >>> FixedPoint("-7.0").divide_with_remainder(FixedPoint("2.0"))
        (FixedPoint('-3.0', fractional_bits=0), FixedPoint('-1.0', fractional_bits=32))
    """

    __slots__ = ("negative", "integer", "fractional", "fractional_bits")
    __hash__ = None  # type: ignore[assignment]  # Unhashable: set_precision mutates

    negative: bool
    integer: list[int]
    fractional: list[int]
    fractional_bits: int

    def __init__(
        self,
        value: str | int | float | Decimal | FixedPoint = "0",
        fractional_bits: int = DEFAULT_FRACTIONAL_BITS,
    ) -> None:
        """Create a FixedPoint from decimal text, a number, or another FixedPoint.

        Args:
            value: Decimal text "[sign]digits[.digits]", an int, a Decimal, a float
                (converted through its shortest round-trip decimal text), or a
                FixedPoint to copy (its own precision is kept)
            fractional_bits: Binary digits kept after the point; the expansion
                is truncated, not rounded

        Raises:
            InvalidFormat: If text is malformed or a float/Decimal is not finite
            ValueError: If fractional_bits is negative
            TypeError: If value has an unsupported type
        """
        if isinstance(value, FixedPoint):
            self.negative = value.negative
            self.integer = list(value.integer)
            self.fractional = list(value.fractional)
            self.fractional_bits = value.fractional_bits
            return

        if isinstance(fractional_bits, bool) or not isinstance(fractional_bits, int):
            raise TypeError(
                f"fractional_bits must be int, got {type(fractional_bits).__name__}"
            )
        if fractional_bits < 0:
            raise ValueError(f"fractional_bits must be non-negative, got {fractional_bits}")

        if isinstance(value, str):
            text = value
        elif isinstance(value, bool):
            raise TypeError("FixedPoint does not accept bool")
        elif isinstance(value, int):
            text = str(value)
        elif isinstance(value, float):
            text = float_to_text(value)
        elif isinstance(value, Decimal):
            if not value.is_finite():
                raise InvalidFormat(f"Cannot represent {value} as a fixed-point number")
            text = format(value, "f")
        else:
            raise TypeError(
                f"FixedPoint requires str, int, float or Decimal, got {type(value).__name__}"
            )

        negative, integer_digits, fraction_digits = parse_decimal(text)
        self.negative = negative
        self.integer = integer_digits_to_words(integer_digits)
        self.fractional = fraction_digits_to_words(fraction_digits, fractional_bits)
        self.fractional_bits = fractional_bits
        self._normalize_sign()

    @classmethod
    def _from_parts(
        cls, negative: bool, integer: list[int], fractional: list[int], fractional_bits: int
    ) -> FixedPoint:
        """Wrap already-built word lists without parsing."""
        result = cls.__new__(cls)
        result.negative = negative
        result.integer = integer
        result.fractional = fractional
        result.fractional_bits = fractional_bits
        result._normalize_sign()
        return result

    @classmethod
    def _from_result(cls, negative: bool, integer: list[int], fractional: list[int]) -> FixedPoint:
        """Trim an arithmetic result and give it whole-word precision."""
        trim_integer(integer)
        trim_fractional(fractional)
        return cls._from_parts(negative, integer, fractional, len(fractional) * WORD_BITS)

    def _normalize_sign(self) -> None:
        if self.negative and self.is_zero():
            self.negative = False

    # --- Inspection ---

    def is_zero(self) -> bool:
        """True if both the integer and the fractional words are all zero."""
        return is_zero_words(self.integer) and is_zero_words(self.fractional)

    def copy(self) -> FixedPoint:
        """Independent copy (same precision, same words)."""
        return FixedPoint(self)

    def bigger_abs(self, other: FixedPoint) -> bool:
        """True if |self| > |other|."""
        return self._compare_magnitude(other) > 0

    def less_abs(self, other: FixedPoint) -> bool:
        """True if |self| < |other|."""
        return self._compare_magnitude(other) < 0

    def _compare_magnitude(self, other: FixedPoint) -> int:
        return compare_magnitude(self.integer, self.fractional, other.integer, other.fractional)

    def _compare(self, other: FixedPoint) -> int:
        magnitude = self._compare_magnitude(other)
        if not self.negative and not other.negative:
            return magnitude
        if self.negative and other.negative:
            return -magnitude
        return -1 if self.negative else 1

    # --- Arithmetic operations ---

    def _add_or_subtract(self, other: FixedPoint, op: str) -> FixedPoint:
        behavior = select_behavior(self.negative, other.negative, op)

        # Align both fractional parts to the wider bit width
        fraction_words = max(len(self.fractional), len(other.fractional))
        a = to_flat(self.integer, self.fractional, fraction_words)
        b = to_flat(other.integer, other.fractional, fraction_words)

        if behavior is OpBehavior.ADD_MAGNITUDES:
            total, carry = add_flat(a, b)
            if carry:
                total.append(carry)
            negative = self.negative
        elif behavior is OpBehavior.SUBTRACT_MAGNITUDES:
            if self._compare_magnitude(other) >= 0:
                total = subtract_flat(a, b)
                negative = self.negative
            else:
                total = subtract_flat(b, a)
                negative = not self.negative
        else:
            raise UnreachableState(f"Unhandled behavior {behavior}")

        integer, fractional = split_flat(total, fraction_words)
        return self._from_result(negative, integer, fractional)

    def __add__(self, other: FixedPoint | int | float | Decimal) -> FixedPoint:
        other_fp = _coerce(other)
        if other_fp is None:
            return NotImplemented
        return self._add_or_subtract(other_fp, "+")

    def __radd__(self, other: int | float | Decimal) -> FixedPoint:
        other_fp = _coerce(other)
        if other_fp is None:
            return NotImplemented
        return other_fp._add_or_subtract(self, "+")

    def __sub__(self, other: FixedPoint | int | float | Decimal) -> FixedPoint:
        other_fp = _coerce(other)
        if other_fp is None:
            return NotImplemented
        return self._add_or_subtract(other_fp, "-")

    def __rsub__(self, other: int | float | Decimal) -> FixedPoint:
        other_fp = _coerce(other)
        if other_fp is None:
            return NotImplemented
        return other_fp._add_or_subtract(self, "-")

    def __mul__(self, other: FixedPoint | int | float | Decimal) -> FixedPoint:
        """Multiply; the product keeps len(a.fractional) + len(b.fractional) words."""
        other_fp = _coerce(other)
        if other_fp is None:
            return NotImplemented
        product = multiply_flat(
            to_flat(self.integer, self.fractional),
            to_flat(other_fp.integer, other_fp.fractional),
        )
        fraction_words = len(self.fractional) + len(other_fp.fractional)
        integer, fractional = split_flat(product, fraction_words)
        return self._from_result(self.negative != other_fp.negative, integer, fractional)

    def __rmul__(self, other: int | float | Decimal) -> FixedPoint:
        return self.__mul__(other)

    def _divide(self, other: FixedPoint) -> tuple[list[int], list[int]]:
        """Restoring long division of the magnitudes, one bit at a time.

        The divisor is read as an integer (its value scaled by its fractional
        words). The dividend is followed by 2 * len(other.fractional) zero
        words, so the quotient carries len(self.fractional) +
        len(other.fractional) fractional words, truncated.

        Raises:
            DivisionByZero: If other has zero magnitude
        """
        divisor = trim_integer(to_flat(other.integer, other.fractional))
        if is_zero_words(divisor):
            raise DivisionByZero(f"Division by zero: {self.to_string()} / 0")

        dividend = [0] * (2 * len(other.fractional)) + to_flat(self.integer, self.fractional)
        quotient = [0] * len(dividend)
        remainder = [0]
        for position in range(len(dividend) * WORD_BITS - 1, -1, -1):
            shift_in_bit(remainder, get_bit(dividend, position))
            if compare_flat(remainder, divisor) >= 0:
                remainder = subtract_flat(remainder, divisor)
                set_bit(quotient, position)

        return split_flat(quotient, len(self.fractional) + len(other.fractional))

    def __truediv__(self, other: FixedPoint | int | float | Decimal) -> FixedPoint:
        """Divide, truncating the quotient toward zero.

        Raises:
            DivisionByZero: If other is zero
        """
        other_fp = _coerce(other)
        if other_fp is None:
            return NotImplemented
        integer, fractional = self._divide(other_fp)
        return self._from_result(self.negative != other_fp.negative, integer, fractional)

    def __rtruediv__(self, other: int | float | Decimal) -> FixedPoint:
        other_fp = _coerce(other)
        if other_fp is None:
            return NotImplemented
        return other_fp.__truediv__(self)

    def divide_with_remainder(
        self, other: FixedPoint | int | float | Decimal
    ) -> tuple[FixedPoint, FixedPoint]:
        """Truncating division with remainder.

        The quotient is self / other truncated to zero fractional bits (toward
        zero). The remainder is self - quotient * other and takes the sign of
        self, so self == quotient * other + remainder and |remainder| < |other|.

        Returns:
            (quotient, remainder)

        Raises:
            DivisionByZero: If other is zero
            TypeError: If other is not a number
        """
        other_fp = _coerce(other)
        if other_fp is None:
            raise TypeError(f"Cannot divide FixedPoint by {type(other).__name__}")
        quotient = self / other_fp
        quotient.set_precision(0)
        remainder = self - quotient * other_fp
        remainder.negative = self.negative
        remainder._normalize_sign()
        return quotient, remainder

    def __divmod__(
        self, other: FixedPoint | int | float | Decimal
    ) -> tuple[FixedPoint, FixedPoint]:
        if _coerce(other) is None:
            return NotImplemented
        return self.divide_with_remainder(other)

    def __mod__(self, other: FixedPoint | int | float | Decimal) -> FixedPoint:
        """Remainder of truncating division (sign follows self)."""
        if _coerce(other) is None:
            return NotImplemented
        return self.divide_with_remainder(other)[1]

    def __neg__(self) -> FixedPoint:
        result = self.copy()
        result.negative = not self.negative
        result._normalize_sign()
        return result

    def __pos__(self) -> FixedPoint:
        return self.copy()

    def __abs__(self) -> FixedPoint:
        result = self.copy()
        result.negative = False
        return result

    # --- Comparison operations ---

    def __eq__(self, other: object) -> bool:
        other_fp = _coerce(other)
        if other_fp is None:
            return NotImplemented
        return self.negative == other_fp.negative and self._compare_magnitude(other_fp) == 0

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return NotImplemented
        return not result

    def __lt__(self, other: FixedPoint | int | float | Decimal) -> bool:
        other_fp = _coerce(other)
        if other_fp is None:
            return NotImplemented
        return self._compare(other_fp) < 0

    def __gt__(self, other: FixedPoint | int | float | Decimal) -> bool:
        other_fp = _coerce(other)
        if other_fp is None:
            return NotImplemented
        return self._compare(other_fp) > 0

    def __le__(self, other: FixedPoint | int | float | Decimal) -> bool:
        result = self.__gt__(other)
        if result is NotImplemented:
            return NotImplemented
        return not result

    def __ge__(self, other: FixedPoint | int | float | Decimal) -> bool:
        result = self.__lt__(other)
        if result is NotImplemented:
            return NotImplemented
        return not result

    # --- Bit operations ---

    def __lshift__(self, n: int) -> FixedPoint:
        """Multiply by 2**n by moving bits across the integer/fractional boundary."""
        if isinstance(n, bool) or not isinstance(n, int):
            return NotImplemented
        _check_shift(n)
        flat = shift_left_flat(to_flat(self.integer, self.fractional), n)
        integer, fractional = split_flat(flat, len(self.fractional))
        return self._from_parts(
            self.negative, trim_integer(integer), fractional, self.fractional_bits
        )

    def __rshift__(self, n: int) -> FixedPoint:
        """Divide by 2**n; bits pushed below fractional_bits are dropped."""
        if isinstance(n, bool) or not isinstance(n, int):
            return NotImplemented
        _check_shift(n)
        flat = shift_right_flat(to_flat(self.integer, self.fractional), n)
        integer, fractional = split_flat(flat, len(self.fractional))
        if fractional:
            used = self.fractional_bits - (len(fractional) - 1) * WORD_BITS
            fractional[-1] &= high_bits_mask(used)
        return self._from_parts(
            self.negative, trim_integer(integer), fractional, self.fractional_bits
        )

    def __xor__(self, other: FixedPoint | int | float | Decimal) -> FixedPoint:
        """XOR of the magnitude bits after aligning fractional widths.

        Debugging utility: signs are ignored and the result is non-negative.
        """
        other_fp = _coerce(other)
        if other_fp is None:
            return NotImplemented
        fraction_words = max(len(self.fractional), len(other_fp.fractional))
        a = to_flat(self.integer, self.fractional, fraction_words)
        b = to_flat(other_fp.integer, other_fp.fractional, fraction_words)
        flat = [
            (a[i] if i < len(a) else 0) ^ (b[i] if i < len(b) else 0)
            for i in range(max(len(a), len(b)))
        ]
        integer, fractional = split_flat(flat, fraction_words)
        return self._from_parts(
            False,
            trim_integer(integer),
            fractional,
            max(self.fractional_bits, other_fp.fractional_bits),
        )

    # --- Precision ---

    def set_precision(self, precision: int) -> None:
        """Truncate the fractional part to `precision` bits, in place.

        Precision can only shrink: a larger value is ignored (and logged).
        No rounding is applied.

        Raises:
            ValueError: If precision is negative
        """
        if precision < 0:
            raise ValueError(f"Precision must be non-negative, got {precision}")
        if precision > self.fractional_bits:
            logger.warning(
                "precision_increase_ignored",
                requested=precision,
                current=self.fractional_bits,
            )
            return

        if precision == 0:
            self.fractional = []
        else:
            keep = words_for_bits(precision)
            del self.fractional[keep:]
            self.fractional[-1] &= high_bits_mask(precision - (keep - 1) * WORD_BITS)
        self.fractional_bits = precision
        self._normalize_sign()

    # --- Conversion ---

    def to_string(self, max_digits: int | None = None) -> str:
        """Render as decimal text, always with a decimal point.

        Integer digits come from repeated division by ten. Fraction digits come
        from repeated multiplication by ten, at most one digit per 4 bits of
        fractional precision, so output stops where the binary precision runs
        out.

        Args:
            max_digits: If given and more fraction digits were produced, keep
                this many and round half-up on the first discarded digit

        Raises:
            ValueError: If max_digits is negative
        """
        if max_digits is not None and max_digits < 0:
            raise ValueError(f"max_digits must be non-negative, got {max_digits}")

        ten = FixedPoint("10")
        whole = abs(self)
        whole.set_precision(0)
        fraction = abs(self) - whole

        integer_digits = []
        while not whole.is_zero():
            quotient = whole / ten
            quotient.set_precision(0)
            digit = whole - quotient * ten
            integer_digits.append(digit.integer[0])
            whole = quotient
        integer_digits.reverse()
        if not integer_digits:
            integer_digits = [0]

        fraction_digits = []
        budget = fraction.fractional_bits
        while not fraction.is_zero() and budget > 0:
            scaled = fraction * ten
            digit = scaled.copy()
            digit.set_precision(0)
            fraction_digits.append(digit.integer[0])
            fraction = scaled - digit
            budget -= BITS_PER_DECIMAL_DIGIT

        if max_digits is not None and len(fraction_digits) > max_digits:
            round_up = fraction_digits[max_digits] >= 5
            del fraction_digits[max_digits:]
            if round_up and _increment_digits(fraction_digits):
                if _increment_digits(integer_digits):
                    integer_digits.insert(0, 1)

        integer_text = "".join(str(d) for d in integer_digits)
        fraction_text = "".join(str(d) for d in fraction_digits) or "0"
        sign = "-" if self.negative else ""
        return f"{sign}{integer_text}.{fraction_text}"

    def to_decimal(self) -> Decimal:
        """Exact value as a Decimal."""
        scaled = 0
        for word in reversed(to_flat(self.integer, self.fractional)):
            scaled = (scaled << WORD_BITS) | word
        scale_bits = len(self.fractional) * WORD_BITS
        with localcontext() as ctx:
            # A quotient by 2**k has at most k more significant digits
            ctx.prec = len(str(scaled)) + scale_bits + 1
            value = Decimal(scaled) / (Decimal(2) ** scale_bits)
        return value.copy_negate() if self.negative else value

    def to_bin_string(self) -> str:
        """Dump sign, precision and words in binary, for debugging."""
        integer_bits = " ".join(format(word, "032b") for word in reversed(self.integer))
        fraction_bits = " ".join(format(word, "032b") for word in self.fractional)
        return "\n".join(
            [
                f"Sign: {'-' if self.negative else '+'}",
                f"Precision: {self.fractional_bits} bits",
                f"Integer bits:    {integer_bits}",
                f"Fractional bits: {fraction_bits}",
            ]
        )

    def __bool__(self) -> bool:
        """True if non-zero."""
        return not self.is_zero()

    def __repr__(self) -> str:
        return f"FixedPoint('{self.to_string()}', fractional_bits={self.fractional_bits})"

    def __str__(self) -> str:
        return self.to_string()


def _coerce(value: object) -> FixedPoint | None:
    """Turn a numeric operand into a FixedPoint (default precision), or None."""
    if isinstance(value, FixedPoint):
        return value
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        return FixedPoint(value)
    return None


def _check_shift(n: int) -> None:
    if n < 0:
        raise ValueError(f"Shift amount must be non-negative, got {n}")


def _increment_digits(digits: list[int]) -> bool:
    """Add one to a decimal digit list in place. Returns the carry out."""
    for i in range(len(digits) - 1, -1, -1):
        if digits[i] == 9:
            digits[i] = 0
        else:
            digits[i] += 1
            return False
    return True
