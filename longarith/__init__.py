"""longarith - arbitrary-precision binary fixed-point arithmetic."""

from longarith.errors import DivisionByZero, FixedPointError, InvalidFormat, UnreachableState
from longarith.math.fixed_point import FixedPoint

__version__ = "0.1.0"
__all__ = [
    "FixedPoint",
    "FixedPointError",
    "DivisionByZero",
    "InvalidFormat",
    "UnreachableState",
    "__version__",
]
