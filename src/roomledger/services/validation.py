from __future__ import annotations

from typing import Mapping, Sequence

from roomledger.models import BillInput, SplitRule, UserBalance
from roomledger.utils.money import MAX_AMOUNT, SETTLEMENT_TOLERANCE, is_positive_money, is_valid_money


class BillValidationError(ValueError):
    """The bill cannot be calculated; ``errors`` lists every problem found."""

    def __init__(self, errors: Sequence[str]) -> None:
        self.errors = list(errors)
        super().__init__("bill validation failed: " + "; ".join(self.errors))


def _check_amount(errors: list[str], value: object, label: str, positive: bool, max_amount: int) -> None:
    valid = is_positive_money(value) if positive else is_valid_money(value)
    if not valid:
        kind = "positive" if positive else "non-negative"
        errors.append(f"{label} must be a {kind} integer amount, got {value!r}")
    elif value > max_amount:  # type: ignore[operator]
        errors.append(f"{label} exceeds the maximum amount of {max_amount}, got {value!r}")


def validate_bill(bill: BillInput, max_amount: int = MAX_AMOUNT) -> list[str]:
    errors: list[str] = []

    if not bill.participants:
        errors.append("No participants provided")
    members = set(bill.participants)
    if len(members) != len(bill.participants):
        errors.append("Participants must be unique")

    for item in bill.items:
        _check_amount(errors, item.price, f"Item price for {item.name!r}", True, max_amount)
        if isinstance(item.quantity, bool) or not isinstance(item.quantity, int) or item.quantity <= 0:
            errors.append(f"Item quantity for {item.name!r} must be a positive integer, got {item.quantity!r}")
        if item.user_id not in members:
            errors.append(f"Item owner not in participants: {item.user_id}")

    for extra in bill.extras:
        _check_amount(errors, extra.amount, f"Extra amount for {extra.name!r}", False, max_amount)
        if not isinstance(extra.split_rule, SplitRule):
            errors.append(f"Unknown split rule for {extra.name!r}: {extra.split_rule!r}")
        elif extra.split_rule is SplitRule.PAYER_ONLY and not bill.payers:
            errors.append(f"Extra {extra.name!r} is split among payers but the bill has no payers")

    for payer in bill.payers:
        _check_amount(errors, payer.amount_paid, f"Amount paid by {payer.user_id}", True, max_amount)
        if payer.user_id not in members:
            errors.append(f"Payer not in participants: {payer.user_id}")

    for settlement in bill.settlements:
        label = f"Settlement {settlement.from_user} -> {settlement.to_user}"
        _check_amount(errors, settlement.amount, f"{label} amount", True, max_amount)
        for user_id in (settlement.from_user, settlement.to_user):
            if user_id not in members:
                errors.append(f"{label} references a user not in participants: {user_id}")
        if settlement.from_user == settlement.to_user:
            errors.append(f"{label} pays the same user")

    return errors


def check_result(
    balances: Mapping[str, UserBalance],
    bill_total: int,
    paid_total: int,
    tolerance: int = SETTLEMENT_TOLERANCE,
) -> list[str]:
    """Conservation checks on a computed result; returns violations, never raises."""
    errors: list[str] = []
    values = list(balances.values())

    total_owed = sum(balance.owed for balance in values)
    if total_owed != bill_total:
        errors.append(f"Total owed ({total_owed}) does not match bill total ({bill_total})")

    total_covered = sum(balance.covered for balance in values)
    if total_covered != paid_total:
        errors.append(f"Total covered ({total_covered}) does not match total paid ({paid_total})")

    total_remaining = sum(balance.remaining for balance in values)
    if abs(total_remaining) > tolerance:
        errors.append(f"Remaining balances sum to {total_remaining} instead of zero")

    return errors
