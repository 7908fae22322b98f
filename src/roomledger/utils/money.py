"""Integer minor-unit money arithmetic.

Every amount inside the engine is an ``int`` count of minor units
(paisa, cents). Major-unit values only exist at the edges, in
``to_minor`` and ``format_amount``.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable

MINOR_UNITS = 100
CURRENCY_SYMBOL = "₨"
SETTLEMENT_TOLERANCE = 100
MAX_AMOUNT = 99_999_999_999


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def is_valid_money(value: object) -> bool:
    return _is_int(value) and value >= 0  # type: ignore[operator]


def is_positive_money(value: object) -> bool:
    return _is_int(value) and value > 0  # type: ignore[operator]


def ensure_money(value: object, label: str = "amount") -> int:
    if not is_valid_money(value):
        raise ValueError(f"{label} must be a non-negative integer of minor units, got {value!r}")
    return value  # type: ignore[return-value]


def to_minor(value: str | int | float | Decimal, factor: int = MINOR_UNITS) -> int:
    """Convert a major-unit value to minor units, rounding half up."""
    if isinstance(value, bool):
        raise ValueError("boolean is not an amount")
    try:
        decimal_value = Decimal(str(value).strip()) if not isinstance(value, Decimal) else value
    except InvalidOperation as exc:
        raise ValueError(f"invalid amount: {value!r}") from exc
    if not decimal_value.is_finite():
        raise ValueError(f"invalid amount: {value!r}")
    if decimal_value < 0:
        raise ValueError(f"amount must be non-negative, got {value!r}")
    return int((decimal_value * factor).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def to_major(amount: int, factor: int = MINOR_UNITS) -> Decimal:
    if not _is_int(amount):
        raise ValueError(f"amount must be an integer, got {amount!r}")
    return Decimal(amount) / Decimal(factor)


def decimal_places(factor: int) -> int:
    """Digits after the decimal point for a power-of-ten ``factor``."""
    if not _is_int(factor) or factor <= 0:
        raise ValueError(f"minor units factor must be a positive integer, got {factor!r}")
    places = len(str(factor)) - 1
    if factor != 10**places:
        raise ValueError(f"minor units factor must be a power of ten, got {factor!r}")
    return places


def format_amount(

    amount: int,
    factor: int = MINOR_UNITS,
    symbol: str = CURRENCY_SYMBOL,
    show_sign: bool = False,
) -> str:
    if not _is_int(amount):
        raise ValueError(f"amount must be an integer, got {amount!r}")
    places = decimal_places(factor)
    major, minor = divmod(abs(amount), factor)
    sign = ""
    if show_sign and amount != 0:
        sign = "+" if amount > 0 else "-"
    elif amount < 0:
        sign = "-"
    if places == 0:
        return f"{sign}{symbol}{major:,}"
    return f"{sign}{symbol}{major:,}.{minor:0{places}d}"


def add(*amounts: int) -> int:
    return total(amounts)


def subtract(a: int, b: int) -> int:
    """Difference of two Money values; the result may be negative."""
    ensure_money(a)
    ensure_money(b)
    return a - b


def multiply(amount: int, quantity: int) -> int:
    ensure_money(amount)
    if not _is_int(quantity) or quantity < 0:
        raise ValueError(f"quantity must be a non-negative integer, got {quantity!r}")
    return amount * quantity


def percentage(amount: int, percent: int | str | Decimal) -> int:
    ensure_money(amount)
    if isinstance(percent, (bool, float)):
        raise ValueError(f"percent must be an integer or Decimal, got {percent!r}")
    try:
        decimal_percent = Decimal(str(percent)) if not isinstance(percent, Decimal) else percent
    except InvalidOperation as exc:
        raise ValueError(f"invalid percent: {percent!r}") from exc
    if not decimal_percent.is_finite() or decimal_percent < 0:
        raise ValueError(f"percent must be non-negative, got {percent!r}")
    return int((Decimal(amount) * decimal_percent / 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def total(amounts: Iterable[int]) -> int:
    result = 0
    for amount in amounts:
        result += ensure_money(amount)
    return result


def within_tolerance(amount: int, tolerance: int = SETTLEMENT_TOLERANCE) -> bool:
    return abs(amount) <= tolerance
