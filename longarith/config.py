"""Runtime configuration for longarith front ends and consumers."""

from __future__ import annotations

import os
from dataclasses import dataclass

from longarith.constants import (
    DEFAULT_FRACTIONAL_BITS,
    PI_DEFAULT_DIGITS,
    PI_PRECISION_BITS,
)


def _env_int(name: str, default: int) -> int:
    """Read a non-negative integer from the environment.

    Raises:
        ValueError: If the variable is set but is not a non-negative integer
    """
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError as err:
        raise ValueError(f"{name} must be an integer, got '{raw}'") from err
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")
    return value


@dataclass(frozen=True)
class ArithmeticConfig:
    """Centralized configuration for the calculator, REPL and pi consumer.

    Attributes:
        fractional_bits: Precision given to operands parsed from text (default: 32)
        pi_precision_bits: Working precision of the BBP summation (default: 256)
        pi_digits: Number of pi decimals printed when none is requested (default: 86)
    """

    fractional_bits: int = DEFAULT_FRACTIONAL_BITS
    pi_precision_bits: int = PI_PRECISION_BITS
    pi_digits: int = PI_DEFAULT_DIGITS

    @classmethod
    def from_env(cls) -> ArithmeticConfig:
        """Build a configuration from LONGARITH_* environment variables.

        - LONGARITH_FRACTIONAL_BITS
        - LONGARITH_PI_PRECISION_BITS
        - LONGARITH_PI_DIGITS
        """
        return cls(
            fractional_bits=_env_int("LONGARITH_FRACTIONAL_BITS", DEFAULT_FRACTIONAL_BITS),
            pi_precision_bits=_env_int("LONGARITH_PI_PRECISION_BITS", PI_PRECISION_BITS),
            pi_digits=_env_int("LONGARITH_PI_DIGITS", PI_DEFAULT_DIGITS),
        )


# Default configuration instance
DEFAULT_CONFIG = ArithmeticConfig()
