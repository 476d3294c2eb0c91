"""
Range checks shared by the input and configuration dataclasses.

Each helper raises the error class it is given so that the same rule can
report either an input problem or a configuration problem.
"""

import math
import numbers
from typing import Type

from .errors import RoiError


def require_count(name: str, value, error: Type[RoiError], minimum: int = 0) -> None:
    """Require an integral value >= minimum."""
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise error(f"{name} must be an integer, got {value!r}")
    if value < minimum:
        raise error(f"{name} must be >= {minimum}, got {value}")


def require_finite(name: str, value, error: Type[RoiError]) -> float:
    """Require a real, finite number and return it as a float."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise error(f"{name} must be a number, got {value!r}")
    value = float(value)
    if not math.isfinite(value):
        raise error(f"{name} must be finite, got {value}")
    return value


def require_range(
    name: str,
    value,
    error: Type[RoiError],
    low: float,
    high: float,
    low_inclusive: bool = True,
    high_inclusive: bool = True,
) -> None:
    """
    Require a finite number inside an interval.

    Args:
        name: Field name used in the error message
        value: Value to check
        error: Error class to raise
        low: Lower bound (use -math.inf for none)
        high: Upper bound (use math.inf for none)
        low_inclusive: Whether the lower bound is allowed
        high_inclusive: Whether the upper bound is allowed
    """
    value = require_finite(name, value, error)

    above_low = value >= low if low_inclusive else value > low
    below_high = value <= high if high_inclusive else value < high
    if above_low and below_high:
        return

    left = "[" if low_inclusive else "("
    right = "]" if high_inclusive else ")"
    raise error(f"{name} must be in {left}{low}, {high}{right}, got {value}")
