"""Pi from the Bailey-Borwein-Plouffe series, summed with FixedPoint.

    pi = sum_k 16^-k * (4/(8k+1) - 2/(8k+4) - 1/(8k+5) - 1/(8k+6))

Every operand is created at one working precision (256 bits by default).
Terms are summed in chunks: each chunk accumulates its own partial sum, which
is then added to the running total.
"""

from __future__ import annotations

import structlog

from longarith.constants import PI_DEFAULT_DIGITS, PI_PRECISION_BITS
from longarith.math.fixed_point import FixedPoint

logger = structlog.get_logger()

# Roughly 1.2 decimal digits per term; terms are rounded up to a multiple of this
TERM_GRANULARITY = 16


def bbp_chunk(
    k_start: int, k_finish: int, base: FixedPoint, precision_bits: int = PI_PRECISION_BITS
) -> FixedPoint:
    """Sum terms k_start..k_finish-1 of the series.

    Args:
        k_start: First term index
        k_finish: One past the last term index
        base: 16^k_start at the working precision
        precision_bits: Working precision of every constant

    Returns:
        Partial sum of the chunk
    """
    one = FixedPoint(1, precision_bits)
    two = FixedPoint(2, precision_bits)
    four = FixedPoint(4, precision_bits)
    sixteen = FixedPoint(16, precision_bits)

    total = FixedPoint(0, precision_bits)
    for k in range(k_start, k_finish):
        term = (
            four / FixedPoint(8 * k + 1, precision_bits)
            - two / FixedPoint(8 * k + 4, precision_bits)
            - one / FixedPoint(8 * k + 5, precision_bits)
            - one / FixedPoint(8 * k + 6, precision_bits)
        )
        total += term / base
        base = base * sixteen
    return total


def compute_pi(
    digits: int = PI_DEFAULT_DIGITS, precision_bits: int = PI_PRECISION_BITS
) -> FixedPoint:
    """Compute pi to at least `digits` decimals.

    Raises:
        ValueError: If digits < 1 or precision_bits < 1
    """
    if digits < 1:
        raise ValueError(f"digits must be positive, got {digits}")
    if precision_bits < 1:
        raise ValueError(f"precision_bits must be positive, got {precision_bits}")

    terms = (digits + TERM_GRANULARITY - 1) // TERM_GRANULARITY * TERM_GRANULARITY
    chunk = terms // TERM_GRANULARITY

    pi = FixedPoint(0, precision_bits)
    base = FixedPoint(1, precision_bits)
    sixteen = FixedPoint(16, precision_bits)
    for k in range(terms + 1):
        if k % chunk == 0:
            pi += bbp_chunk(k, k + chunk, base, precision_bits)
            logger.debug("pi_chunk_summed", first_term=k, last_term=k + chunk - 1)
        base *= sixteen
    return pi


def pi_digits(digits: int = PI_DEFAULT_DIGITS, precision_bits: int = PI_PRECISION_BITS) -> str:
    """Pi as text "3." followed by exactly `digits` decimals (truncated)."""
    text = compute_pi(digits, precision_bits).to_string()
    if len(text) < digits + 2:
        raise ValueError(
            f"{precision_bits}-bit precision cannot render {digits} digits of pi"
        )
    return text[: digits + 2]
