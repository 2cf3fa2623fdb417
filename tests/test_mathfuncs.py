from decimal import Decimal

import pytest

from oracompat.mathfuncs import remainder


@pytest.mark.parametrize(
    "dividend, divisor",
    [(10, 3), (11, 4), (5, 2), (-5, 2), (7, -3), (-7, -3), (0, 5), (10**30 + 1, 10**15 + 7)],
)
def test_integer_remainder_invariants(dividend, divisor):
    result = remainder(dividend, divisor)
    assert isinstance(result, int)
    assert (dividend - result) % divisor == 0
    assert 2 * abs(result) <= abs(divisor)


def test_pinned_value():
    assert remainder(11, 4) == -1


def test_ties_round_away_from_zero_symmetric():
    assert remainder(-5, 2) == -remainder(5, 2)
    assert abs(remainder(5, 2)) == 1


@pytest.mark.parametrize("dividend", [1, 0, -9])
def test_integer_division_by_zero(dividend):
    with pytest.raises(ZeroDivisionError, match="division by zero"):
        remainder(dividend, 0)


def test_decimal_division_by_zero():
    with pytest.raises(ZeroDivisionError):
        remainder(Decimal("1.5"), Decimal("0"))


def test_decimal_matches_integer_path():
    assert remainder(Decimal("11"), Decimal("4")) == remainder(11, 4)
    assert remainder(Decimal("-7"), Decimal("3")) == remainder(-7, 3)


def test_decimal_scaled_inputs():
    result = remainder(Decimal("1.1"), Decimal("0.4"))
    assert isinstance(result, Decimal)
    assert result * 10 == remainder(11, 4)


def test_mixed_int_and_decimal():
    assert remainder(10, Decimal("3")) == remainder(10, 3)


@pytest.mark.parametrize(
    "dividend, divisor",
    [(Decimal("5.25"), Decimal("1.5")), (Decimal("-3.75"), Decimal("0.5")), (Decimal("100.01"), Decimal("7"))],
)
def test_decimal_invariants(dividend, divisor):
    result = remainder(dividend, divisor)
    quotient = (dividend - result) / divisor
    assert quotient == quotient.to_integral_value()
    assert 2 * abs(result) <= abs(divisor)


def test_infinite_dividend_gives_nan():
    assert remainder(Decimal("Infinity"), Decimal("3")).is_nan()


def test_nan_inputs_give_nan():
    assert remainder(Decimal("NaN"), Decimal("3")).is_nan()
    assert remainder(Decimal("3"), Decimal("NaN")).is_nan()


def test_infinite_divisor_gives_nan():
    assert remainder(Decimal("3"), Decimal("-Infinity")).is_nan()


def test_unsupported_type():
    with pytest.raises(TypeError):
        remainder("10", 3)