"""Error classes for fixed-point arithmetic.

Every error raised by the arithmetic engine derives from FixedPointError,
which itself is an ArithmeticError. The more specific classes also derive
from the matching built-in exception so callers can catch either.
"""


class FixedPointError(ArithmeticError):
    """Base error for FixedPoint operations."""

    pass


class DivisionByZero(FixedPointError, ZeroDivisionError):
    """Divisor has zero magnitude in /, %, divmod or divide_with_remainder."""

    pass


class InvalidFormat(FixedPointError, ValueError):
    """Numeric text is not of the form [sign]digits[.digits]."""

    pass


class UnreachableState(FixedPointError):
    """Sign/operator combination outside the add/subtract case table."""

    pass
