from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from roomledger.models import Extra, Item, SplitRule
from roomledger.services.distribution import distribute, distribute_evenly
from roomledger.utils.money import add, multiply


@dataclass(slots=True)
class Obligations:
    items: dict[str, int]
    extra_shares: list[dict[str, int]]
    owed: dict[str, int]

    def extras_for(self, user_id: str) -> int:
        return sum(shares.get(user_id, 0) for shares in self.extra_shares)


def item_totals(items: Sequence[Item], participants: Sequence[str]) -> dict[str, int]:
    totals = {user_id: 0 for user_id in participants}
    for item in items:
        totals[item.user_id] = add(totals[item.user_id], multiply(item.price, item.quantity))
    return totals


def split_extra(
    extra: Extra,
    base: dict[str, int],
    participants: Sequence[str],
    payer_ids: Sequence[str],
) -> dict[str, int]:
    rule = extra.split_rule
    if rule is SplitRule.PROPORTIONAL:
        return distribute(extra.amount, [(user_id, base[user_id]) for user_id in participants])
    if rule is SplitRule.FLAT:
        return distribute_evenly(extra.amount, participants)
    if rule is SplitRule.PAYER_ONLY:
        if not payer_ids:
            raise ValueError(f"extra {extra.name!r} is split among payers but the bill has none")
        return distribute_evenly(extra.amount, payer_ids)
    raise ValueError(f"unknown split rule: {rule!r}")


def calculate_owed(
    items: Sequence[Item],
    extras: Sequence[Extra],
    participants: Sequence[str],
    payer_ids: Sequence[str] = (),
) -> Obligations:
    """What each participant owes: their items plus a share of every extra.

    Proportional extras are weighted by item subtotals alone, so the order
    of extras never changes anyone's share.
    """
    base = item_totals(items, participants)
    owed = dict(base)
    extra_shares: list[dict[str, int]] = []

    for extra in extras:
        shares = split_extra(extra, base, participants, payer_ids)
        for user_id, share in shares.items():
            owed[user_id] = add(owed[user_id], share)
        extra_shares.append(shares)

    return Obligations(items=base, extra_shares=extra_shares, owed=owed)
