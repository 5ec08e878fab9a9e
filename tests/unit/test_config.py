"""Tests for configuration."""

import dataclasses

import pytest

from longarith.config import DEFAULT_CONFIG, ArithmeticConfig


class TestArithmeticConfig:
    """Tests for ArithmeticConfig."""

    def test_defaults(self):
        """Defaults match the documented values."""
        assert DEFAULT_CONFIG.fractional_bits == 32
        assert DEFAULT_CONFIG.pi_precision_bits == 256
        assert DEFAULT_CONFIG.pi_digits == 86

    def test_frozen(self):
        """Configuration is immutable."""
        with pytest.raises(dataclasses.FrozenInstanceError):
            DEFAULT_CONFIG.fractional_bits = 64  # type: ignore[misc]

    def test_from_env(self, monkeypatch):
        """LONGARITH_* variables override the defaults."""
        monkeypatch.setenv("LONGARITH_FRACTIONAL_BITS", "64")
        monkeypatch.setenv("LONGARITH_PI_PRECISION_BITS", "512")
        monkeypatch.setenv("LONGARITH_PI_DIGITS", "40")
        config = ArithmeticConfig.from_env()
        assert config == ArithmeticConfig(
            fractional_bits=64, pi_precision_bits=512, pi_digits=40
        )

    def test_from_env_unset(self, monkeypatch):
        """Unset or blank variables fall back to the defaults."""
        monkeypatch.delenv("LONGARITH_FRACTIONAL_BITS", raising=False)
        monkeypatch.delenv("LONGARITH_PI_PRECISION_BITS", raising=False)
        monkeypatch.setenv("LONGARITH_PI_DIGITS", " ")
        assert ArithmeticConfig.from_env() == DEFAULT_CONFIG

    @pytest.mark.parametrize("raw", ["abc", "1.5", "-1"])
    def test_from_env_invalid(self, monkeypatch, raw):
        """Non-integer or negative values are rejected."""
        monkeypatch.setenv("LONGARITH_FRACTIONAL_BITS", raw)
        with pytest.raises(ValueError, match="LONGARITH_FRACTIONAL_BITS"):
            ArithmeticConfig.from_env()
