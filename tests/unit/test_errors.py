"""Tests for the error hierarchy."""

import pytest

from longarith import DivisionByZero, FixedPoint, FixedPointError, InvalidFormat, UnreachableState


class TestErrorHierarchy:
    """Tests that errors can be caught by their built-in bases."""

    @pytest.mark.parametrize("error", [DivisionByZero, InvalidFormat, UnreachableState])
    def test_fixed_point_errors(self, error):
        """All errors derive from FixedPointError and ArithmeticError."""
        assert issubclass(error, FixedPointError)
        assert issubclass(error, ArithmeticError)

    def test_builtin_bases(self):
        """Specific errors match the built-in exception for the same failure."""
        assert issubclass(DivisionByZero, ZeroDivisionError)
        assert issubclass(InvalidFormat, ValueError)

    def test_catch_as_base(self):
        """A failed parse is caught as FixedPointError."""
        with pytest.raises(FixedPointError):
            FixedPoint("not a number")
