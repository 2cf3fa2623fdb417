"""Oracle-style REMAINDER for integers and decimals."""

from __future__ import annotations

import math
from decimal import Decimal
from fractions import Fraction
from typing import Union

Number = Union[int, float, Decimal]

_NAN = Decimal("NaN")


def _round_half_away(value: Fraction) -> int:
    """Round to the nearest integer, ties away from zero."""
    magnitude = math.floor(abs(value) + Fraction(1, 2))
    return magnitude if value >= 0 else -magnitude


def _to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError("boolean is not a number")
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        return Decimal(str(value))
    raise TypeError(f"unsupported operand type: {type(value).__name__}")


def _exponent(value: Decimal) -> int:
    exponent = value.as_tuple().exponent
    return exponent if isinstance(exponent, int) else 0


def _numeric_remainder(dividend: Decimal, divisor: Decimal) -> Decimal:
    if divisor.is_nan():
        return _NAN
    if divisor == 0:
        raise ZeroDivisionError("division by zero")
    if dividend.is_nan() or dividend.is_infinite():
        return _NAN
    if divisor.is_infinite():
        # 0 * Infinity is undefined, so the whole expression is NaN.
        return _NAN

    a = Fraction(dividend)
    b = Fraction(divisor)
    quotient = _round_half_away(a / b)
    rest = a - quotient * b

    exponent = min(_exponent(dividend), _exponent(divisor), 0)
    scaled = rest * (10 ** -exponent)
    digits = Decimal(int(scaled)).as_tuple()
    return Decimal((digits.sign, digits.digits, exponent))


def remainder(dividend: Number, divisor: Number) -> Number:
    """Return ``dividend - divisor * n`` where ``n`` is the quotient rounded
    half away from zero.

    Two integers give an integer; any other combination is computed as a
    :class:`~decimal.Decimal`.
    """
    if (
        isinstance(dividend, int)
        and isinstance(divisor, int)
        and not isinstance(dividend, bool)
        and not isinstance(divisor, bool)
    ):
        if divisor == 0:
            raise ZeroDivisionError("division by zero")
        if divisor == -1:
            return 0
        return dividend - _round_half_away(Fraction(dividend, divisor)) * divisor
    return _numeric_remainder(_to_decimal(dividend), _to_decimal(divisor))