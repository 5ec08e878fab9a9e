"""Evaluate calculator requests against FixedPoint.

Shared by the one-shot `calc` command and the interactive REPL: both build a
CalculationRequest, call evaluate(), and print the returned lines.
"""

from __future__ import annotations

import operator
from collections.abc import Callable

from longarith.math.fixed_point import FixedPoint
from longarith.models import CalculationRequest, Operator

_BINARY_OPERATIONS: dict[Operator, Callable[[FixedPoint, FixedPoint], FixedPoint]] = {
    Operator.ADD: operator.add,
    Operator.SUBTRACT: operator.sub,
    Operator.MULTIPLY: operator.mul,
    Operator.DIVIDE: operator.truediv,
    Operator.XOR: operator.xor,
}

_COMPARISONS: list[tuple[str, Callable[[FixedPoint, FixedPoint], bool]]] = [
    ("==", operator.eq),
    ("!=", operator.ne),
    ("<", operator.lt),
    (">", operator.gt),
    ("<=", operator.le),
    (">=", operator.ge),
]


def parse_expression(
    line: str, fractional_bits: int, max_digits: int | None = None
) -> CalculationRequest:
    """Parse "LHS OP [RHS]" into a validated request.

    Raises:
        ValidationError: If the tokens do not form a valid request
        ValueError: If there are more than three tokens
    """
    tokens = line.split()
    data: dict[str, object] = {
        "fractional_bits": fractional_bits,
        "max_digits": max_digits,
    }
    if tokens:
        data["lhs"] = tokens[0]
    if len(tokens) > 1:
        data["operator"] = tokens[1]
    if len(tokens) > 2:
        data["shift" if tokens[1] in ("<<", ">>") else "rhs"] = tokens[2]
    if len(tokens) > 3:
        raise ValueError(f"Expected LHS OP [RHS], got {len(tokens)} tokens: '{line.strip()}'")
    return CalculationRequest.model_validate(data)


def evaluate(request: CalculationRequest) -> list[str]:
    """Run a request and return the lines to print.

    Raises:
        FixedPointError: If the arithmetic fails (e.g. DivisionByZero)
    """
    bits = request.fractional_bits
    digits = request.max_digits
    lhs = FixedPoint(request.lhs, bits)
    op = request.operator

    if op is Operator.BINARY:
        return lhs.to_bin_string().splitlines()

    if op.is_shift:
        assert request.shift is not None
        shifted = lhs << request.shift if op is Operator.SHIFT_LEFT else lhs >> request.shift
        return [f"Result: {shifted.to_string(digits)}"]

    assert request.rhs is not None
    rhs = FixedPoint(request.rhs, bits)

    if op is Operator.DIVMOD:
        quotient, remainder = lhs.divide_with_remainder(rhs)
        return [f"Quotient: {quotient.to_string(digits)}, Remainder: {remainder.to_string(digits)}"]

    if op is Operator.COMPARE:
        left, right = lhs.to_string(digits), rhs.to_string(digits)
        return [f"{left} {symbol} {right}: {compare(lhs, rhs)}" for symbol, compare in _COMPARISONS]

    result = _BINARY_OPERATIONS[op](lhs, rhs)
    return [f"Result: {result.to_string(digits)}"]
