from __future__ import annotations

from typing import Iterable, Mapping, Sequence

from roomledger.models import Settlement
from roomledger.utils.money import ensure_money, subtract


def calculate_net(
    owed: Mapping[str, int],
    covered: Mapping[str, int],
    participants: Sequence[str],
) -> dict[str, int]:
    """covered - owed per participant; positive means the user is owed money."""
    return {user_id: subtract(covered.get(user_id, 0), owed.get(user_id, 0)) for user_id in participants}


def apply_settlements(net: Mapping[str, int], settlements: Iterable[Settlement]) -> dict[str, int]:
    """Fold recorded payments into net balances.

    The amount is subtracted from the payer's running balance and added to
    the receiver's. Folding is a commutative sum, so order does not matter.
    """
    remaining = dict(net)
    for settlement in settlements:
        amount = ensure_money(settlement.amount, "settlement amount")
        for user_id in (settlement.from_user, settlement.to_user):
            if user_id not in remaining:
                raise ValueError(f"settlement references unknown user: {user_id}")
        remaining[settlement.from_user] -= amount
        remaining[settlement.to_user] += amount
    return remaining
