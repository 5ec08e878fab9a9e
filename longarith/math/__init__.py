"""Arithmetic engine for longarith.

This package provides the fixed-point number type and its building blocks:
- FixedPoint: sign-magnitude binary fixed-point number of arbitrary size
- codec: decimal text <-> binary word conversion
- words: word-level magnitude primitives (carry/borrow, compare, shifts)
"""

from longarith.math.fixed_point import FixedPoint

__all__ = ["FixedPoint"]
