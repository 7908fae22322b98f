from decimal import Decimal

import pytest

from roomledger.utils.money import (
    add,
    decimal_places,
    format_amount,
    is_positive_money,
    is_valid_money,
    multiply,
    percentage,
    subtract,
    to_major,
    to_minor,
    total,
    within_tolerance,
)


def test_valid_money():
    assert is_valid_money(0)
    assert is_valid_money(1500)
    assert not is_valid_money(-1)
    assert not is_valid_money(10.0)
    assert not is_valid_money(True)
    assert not is_positive_money(0)
    assert is_positive_money(1)


def test_to_minor_rounds_half_up():
    assert to_minor("12.34") == 1234
    assert to_minor("0.005") == 1
    assert to_minor("0.004") == 0
    assert to_minor(0.1) == 10
    assert to_minor(Decimal("1999.995")) == 200000
    assert to_minor(7) == 700
    assert to_minor("1.5", factor=1000) == 1500


@pytest.mark.parametrize("value", ["-1", "abc", "NaN", True])
def test_to_minor_rejects_bad_input(value):
    with pytest.raises(ValueError):
        to_minor(value)


def test_to_major():
    assert to_major(1234) == Decimal("12.34")
    assert to_major(-50) == Decimal("-0.5")


def test_format_amount():
    assert format_amount(123450) == "₨1,234.50"
    assert format_amount(1100, show_sign=True) == "+₨11.00"
    assert format_amount(-1100, show_sign=True) == "-₨11.00"
    assert format_amount(-5) == "-₨0.05"
    assert format_amount(0, show_sign=True) == "₨0.00"
    assert format_amount(1500, factor=1000, symbol="$") == "$1.500"
    assert format_amount(42, factor=1, symbol="¥") == "¥42"


@pytest.mark.parametrize("factor", [3, 12, 150, 0, -10])
def test_format_amount_needs_a_power_of_ten_factor(factor):
    with pytest.raises(ValueError):
        format_amount(1500, factor=factor)


def test_decimal_places():
    assert [decimal_places(f) for f in (1, 10, 100, 1000)] == [0, 1, 2, 3]


def test_arithmetic():
    assert add(100, 200, 300) == 600
    assert add() == 0
    assert subtract(100, 250) == -150
    assert multiply(500, 2) == 1000
    assert total([1, 2, 3]) == 6


@pytest.mark.parametrize(
    "call",
    [
        lambda: add(100, -1),
        lambda: subtract(-1, 5),
        lambda: multiply(500, -1),
        lambda: multiply(500, 1.5),
        lambda: total([1, 2.5]),
    ],
)
def test_arithmetic_rejects_invalid_operands(call):
    with pytest.raises(ValueError):
        call()


def test_percentage():
    assert percentage(2000, 10) == 200
    assert percentage(1005, "12.5") == 126
    assert percentage(333, Decimal("50")) == 167
    with pytest.raises(ValueError):
        percentage(1000, 0.5)
    with pytest.raises(ValueError):
        percentage(1000, -1)


def test_within_tolerance():
    assert within_tolerance(100)
    assert within_tolerance(-100)
    assert not within_tolerance(101)
    assert within_tolerance(3, tolerance=5)
