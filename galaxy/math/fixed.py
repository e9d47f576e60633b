"""32.32 fixed-point values on top of :class:`fractions.Fraction`.

Authored quantities are stored on a 2^-32 grid so that loading the same
content always produces bit-identical values, whichever way the author
wrote them (literal float, ``f(num, denom)`` or a decimal string).
"""
from __future__ import annotations

import math
from decimal import Decimal
from fractions import Fraction

from galaxy.systems.errors import CustomSystemError

FRAC_BITS = 32
FIXED_ONE = 1 << FRAC_BITS


def _quantise(value: Fraction) -> Fraction:
    # int() on a Fraction truncates toward zero.
    return Fraction(int(value * FIXED_ONE), FIXED_ONE)


def fixed(num: int, denom: int = 1) -> Fraction:
    """Build a fixed value as ``num / denom`` (the ``f(num, denom)`` shortcut)."""

    if not isinstance(num, int) or not isinstance(denom, int):
        raise CustomSystemError("fixed() expects integer numerator and denominator")
    if denom == 0:
        raise CustomSystemError("fixed() denominator cannot be zero")
    return _quantise(Fraction(num, denom))


def fixed_from_float(value: float, round_up: bool = False) -> Fraction:
    scaled = value * FIXED_ONE
    if not math.isfinite(scaled):
        raise CustomSystemError(f"{value} is out of range for a fixed-point value")
    if round_up:
        return Fraction(math.ceil(scaled), FIXED_ONE)
    return Fraction(int(scaled), FIXED_ONE)


def to_fixed(value: object, field: str = "value") -> Fraction:
    """Normalise an authored number to the fixed grid."""

    if isinstance(value, bool):
        raise CustomSystemError(f"Bad datatype for {field}. Expected fixed or float, got bool")
    if isinstance(value, Fraction):
        return _quantise(value)
    if isinstance(value, int):
        return Fraction(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise CustomSystemError(f"{field} must be finite, got {value}")
        if not math.isfinite(value * FIXED_ONE):
            raise CustomSystemError(f"{field} is out of range, got {value}")
        return fixed_from_float(value)
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise CustomSystemError(f"{field} must be finite, got {value}")
        return _quantise(Fraction(value))
    if isinstance(value, str):
        try:
            return _quantise(Fraction(value.strip()))
        except (ValueError, ZeroDivisionError):
            raise CustomSystemError(f"{field} is not a number: {value!r}")
    raise CustomSystemError(
        f"Bad datatype for {field}. Expected fixed or float, got {type(value).__name__}"
    )


def to_real(value: object, field: str = "value") -> float:
    """Convert an authored number to a float for real-valued slots."""

    if isinstance(value, str):
        try:
            value = Fraction(value.strip())
        except (ValueError, ZeroDivisionError):
            raise CustomSystemError(f"{field} is not a number: {value!r}")
    if isinstance(value, bool) or not isinstance(value, (int, float, Fraction, Decimal)):
        raise CustomSystemError(
            f"Bad datatype for {field}. Expected number, got {type(value).__name__}"
        )
    try:
        return float(value)
    except OverflowError:
        raise CustomSystemError(f"{field} is out of range, got {value}")


__all__ = ["FIXED_ONE", "FRAC_BITS", "fixed", "fixed_from_float", "to_fixed", "to_real"]
