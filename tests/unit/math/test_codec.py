"""Tests for decimal text <-> binary word conversion."""

from decimal import Decimal

import pytest

from longarith.errors import InvalidFormat
from longarith.math.codec import (
    double_decimal,
    float_to_text,
    fraction_digits_to_words,
    halve_decimal,
    integer_digits_to_words,
    parse_decimal,
)


class TestParseDecimal:
    """Tests for parse_decimal validation."""

    def test_signed_number(self):
        """Sign, integer digits and fraction digits are split."""
        assert parse_decimal("-12.50") == (True, "12", "50")

    def test_plus_sign_and_leading_zeros(self):
        """Leading zeros are dropped from the integer part."""
        assert parse_decimal("+007") == (False, "7", "")

    def test_missing_integer_part(self):
        """'.5' is zero point five."""
        assert parse_decimal(".5") == (False, "0", "5")

    def test_trailing_point(self):
        """'5.' has no fraction digits."""
        assert parse_decimal("5.") == (False, "5", "")

    def test_whitespace_is_ignored(self):
        """Surrounding whitespace is stripped."""
        assert parse_decimal("  3.25\n") == (False, "3", "25")

    @pytest.mark.parametrize(
        "text",
        ["", ".", "-", "1.2.3", "abc", "1e5", "--1", "1,5", "12a", "٣", "inf"],
    )
    def test_malformed_text_raises(self, text):
        """Anything but [sign]digits[.digits] is rejected."""
        with pytest.raises(InvalidFormat):
            parse_decimal(text)

    def test_invalid_format_is_value_error(self):
        """InvalidFormat can be caught as ValueError."""
        with pytest.raises(ValueError):
            parse_decimal("1.2.3")

    def test_non_string_raises(self):
        """Non-text input is rejected."""
        with pytest.raises(InvalidFormat):
            parse_decimal(12)  # type: ignore[arg-type]


class TestDecimalStringArithmetic:
    """Tests for halving and doubling digit strings."""

    def test_halve(self):
        """Quotient and remainder bit."""
        assert halve_decimal("13") == ("6", 1)
        assert halve_decimal("100") == ("50", 0)
        assert halve_decimal("1") == ("0", 1)

    def test_double(self):
        """Doubling carries through 9 -> 10 rollovers."""
        assert double_decimal("25") == "50"
        assert double_decimal("49") == "98"
        assert double_decimal("5") == "10"

    def test_double_keeps_width_without_overflow(self):
        """0.05 * 2 = 0.10 keeps two digits."""
        assert double_decimal("05") == "10"


class TestIntegerDigits:
    """Tests for integer_digits_to_words."""

    def test_zero(self):
        """Zero is a single zero word."""
        assert integer_digits_to_words("0") == [0]

    def test_small(self):
        """Ten fits in one word."""
        assert integer_digits_to_words("10") == [10]

    def test_word_boundary(self):
        """2^32 - 1 and 2^32."""
        assert integer_digits_to_words("4294967295") == [0xFFFFFFFF]
        assert integer_digits_to_words("4294967296") == [0, 1]

    def test_large(self):
        """2^64 + 5 needs three words."""
        assert integer_digits_to_words(str(2**64 + 5)) == [5, 0, 1]


class TestFractionDigits:
    """Tests for fraction_digits_to_words."""

    def test_half(self):
        """0.5 sets the top bit."""
        assert fraction_digits_to_words("5", 32) == [0x80000000]

    def test_partial_word_is_left_justified(self):
        """0.25 with 2 bits is 01 in the top bits."""
        assert fraction_digits_to_words("25", 2) == [0x40000000]

    def test_word_count_follows_precision(self):
        """40 bits need two words even for a short expansion."""
        assert fraction_digits_to_words("75", 40) == [0xC0000000, 0]

    def test_truncated_expansion(self):
        """0.1 = 0.00011001100... truncated to 8 bits."""
        assert fraction_digits_to_words("1", 8) == [0x19000000]

    def test_repeating_expansion_fills_words(self):
        """0.1 keeps repeating 0011 across words."""
        assert fraction_digits_to_words("1", 64) == [0x19999999, 0x99999999]

    def test_no_digits(self):
        """Empty fraction gives zero words."""
        assert fraction_digits_to_words("", 64) == [0, 0]

    def test_zero_precision(self):
        """Zero bits gives no words."""
        assert fraction_digits_to_words("5", 0) == []


class TestFloatToText:
    """Tests for float rendering."""

    def test_shortest_repr(self):
        """0.1 renders as written."""
        assert float_to_text(0.1) == "0.1"
        assert float_to_text(2.0) == "2.0"

    def test_no_exponent(self):
        """Small and large floats are written positionally."""
        assert float_to_text(1e-05) == "0.00001"
        assert float_to_text(1e20) == "100000000000000000000"

    def test_round_trips(self):
        """Text converts back to the same float."""
        assert Decimal(float_to_text(-3.75)) == Decimal("-3.75")

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_raises(self, value):
        """NaN and infinities are rejected."""
        with pytest.raises(InvalidFormat):
            float_to_text(value)
