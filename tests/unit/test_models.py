"""Tests for calculator request models."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from longarith.models import CalculationRequest, Operator, validate_decimal_text


class TestValidateDecimalText:
    """Tests for the DecimalText validator."""

    def test_strips_whitespace(self):
        """Surrounding whitespace is removed."""
        assert validate_decimal_text(" 1.5 ") == "1.5"

    def test_numbers_become_text(self):
        """ints and Decimals are accepted as text."""
        assert validate_decimal_text(5) == "5"
        assert validate_decimal_text(Decimal("-1.25")) == "-1.25"

    @pytest.mark.parametrize("value", ["1.2.3", "abc", True, 1.5, None])
    def test_rejects(self, value):
        """Malformed text and other types raise ValueError."""
        with pytest.raises(ValueError):
            validate_decimal_text(value)


class TestOperator:
    """Tests for the Operator enum."""

    def test_tokens(self):
        """Operators parse from their tokens."""
        assert Operator("+") is Operator.ADD
        assert Operator("%") is Operator.DIVMOD
        assert Operator("cmp") is Operator.COMPARE

    def test_shift_flags(self):
        """Only << and >> are shifts."""
        assert Operator.SHIFT_LEFT.is_shift
        assert Operator.SHIFT_RIGHT.is_shift
        assert not Operator.ADD.is_shift

    def test_unary_flag(self):
        """Only bin ignores the right operand."""
        assert Operator.BINARY.is_unary
        assert not Operator.COMPARE.is_unary


class TestCalculationRequest:
    """Tests for CalculationRequest validation."""

    def test_binary_request(self):
        """A two-operand request parses."""
        request = CalculationRequest.model_validate(
            {"lhs": "10.5", "operator": "+", "rhs": "20.25"}
        )
        assert request.operator is Operator.ADD
        assert request.lhs == "10.5"
        assert request.rhs == "20.25"
        assert request.fractional_bits == 32
        assert request.max_digits is None

    def test_shift_request(self):
        """Shifts take an integer bit count."""
        request = CalculationRequest.model_validate({"lhs": "3.5", "operator": "<<", "shift": "2"})
        assert request.shift == 2
        assert request.rhs is None

    def test_unary_request(self):
        """bin needs no right operand."""
        request = CalculationRequest.model_validate({"lhs": "-1", "operator": "bin"})
        assert request.operator is Operator.BINARY

    def test_invalid_lhs(self):
        """Malformed numbers are validation errors."""
        with pytest.raises(ValidationError):
            CalculationRequest.model_validate({"lhs": "1.2.3", "operator": "+", "rhs": "1"})

    def test_invalid_operator(self):
        """Unknown tokens are rejected."""
        with pytest.raises(ValidationError):
            CalculationRequest.model_validate({"lhs": "1", "operator": "**", "rhs": "1"})

    def test_missing_rhs(self):
        """Binary operators need a right operand."""
        with pytest.raises(ValidationError, match="requires a second operand"):
            CalculationRequest.model_validate({"lhs": "1", "operator": "+"})

    def test_missing_shift(self):
        """Shifts need a bit count."""
        with pytest.raises(ValidationError, match="requires a bit count"):
            CalculationRequest.model_validate({"lhs": "1", "operator": ">>"})

    def test_negative_shift(self):
        """Bit counts are non-negative."""
        with pytest.raises(ValidationError):
            CalculationRequest.model_validate({"lhs": "1", "operator": "<<", "shift": -1})

    def test_negative_precision(self):
        """fractional_bits is non-negative."""
        with pytest.raises(ValidationError):
            CalculationRequest.model_validate(
                {"lhs": "1", "operator": "bin", "fractional_bits": -1}
            )
