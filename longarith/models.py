"""Pydantic models for calculator requests typed at the CLI or REPL."""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, Field, model_validator

from longarith.constants import DEFAULT_FRACTIONAL_BITS
from longarith.math.codec import parse_decimal


def validate_decimal_text(value: Any) -> str:
    """Validate that a value is decimal text of the form [sign]digits[.digits].

    Args:
        value: Value to validate (string, int or Decimal)

    Returns:
        The text with surrounding whitespace removed

    Raises:
        ValueError: If value is not well-formed decimal text
    """
    if isinstance(value, bool):
        raise ValueError("Decimal text cannot be a bool")
    if isinstance(value, (int, Decimal)):
        value = str(value)
    if not isinstance(value, str):
        raise ValueError(f"Decimal text must be a string, got {type(value).__name__}")
    # InvalidFormat is a ValueError, so pydantic reports it as a validation error
    parse_decimal(value)
    return value.strip()


# Numeric operand as decimal text (validated)
DecimalText = Annotated[
    str,
    BeforeValidator(validate_decimal_text),
    Field(description="Decimal number as text, [sign]digits[.digits]"),
]


class Operator(str, Enum):
    """Operator tokens understood by the calculator."""

    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    DIVMOD = "%"
    SHIFT_LEFT = "<<"
    SHIFT_RIGHT = ">>"
    XOR = "^"
    COMPARE = "cmp"
    BINARY = "bin"

    @property
    def is_shift(self) -> bool:
        """True for << and >>, which take a bit count instead of a second number."""
        return self in (Operator.SHIFT_LEFT, Operator.SHIFT_RIGHT)

    @property
    def is_unary(self) -> bool:
        """True for operators that only read the left operand."""
        return self is Operator.BINARY


class CalculationRequest(BaseModel):
    """One calculator request: `lhs op rhs` or `lhs op bits` for shifts."""

    lhs: DecimalText
    operator: Operator
    rhs: DecimalText | None = None
    shift: int | None = Field(default=None, ge=0)
    fractional_bits: int = Field(default=DEFAULT_FRACTIONAL_BITS, ge=0)
    max_digits: int | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def check_operands(self) -> CalculationRequest:
        """Require the operand each operator consumes."""
        if self.operator.is_shift:
            if self.shift is None:
                raise ValueError(f"Operator {self.operator.value} requires a bit count")
        elif not self.operator.is_unary and self.rhs is None:
            raise ValueError(f"Operator {self.operator.value} requires a second operand")
        return self
