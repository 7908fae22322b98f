from __future__ import annotations

from typing import List, Mapping

from roomledger.logging import get_logger
from roomledger.models import ClampResult, MinimalTransfer, SettlementOpportunity, UserBalance
from roomledger.utils.money import (
    CURRENCY_SYMBOL,
    MINOR_UNITS,
    SETTLEMENT_TOLERANCE,
    format_amount,
    is_positive_money,
    within_tolerance,
)

log = get_logger(__name__)


def _remaining(balance: int | UserBalance) -> int:
    return balance.remaining if isinstance(balance, UserBalance) else balance


def _split_parties(
    balances: Mapping[str, int | UserBalance], threshold: int
) -> tuple[list[tuple[str, int]], list[tuple[str, int]]]:
    creditors: list[tuple[str, int]] = []
    debtors: list[tuple[str, int]] = []

    for user_id, balance in balances.items():
        remaining = _remaining(balance)
        if remaining > threshold:
            creditors.append((user_id, remaining))
        elif remaining < -threshold:
            debtors.append((user_id, -remaining))

    creditors.sort(key=lambda x: (-x[1], x[0]))
    debtors.sort(key=lambda x: (-x[1], x[0]))
    return creditors, debtors


def suggest_transfers(
    balances: Mapping[str, int | UserBalance],
    threshold: int = SETTLEMENT_TOLERANCE,
) -> List[MinimalTransfer]:
    """Greedy largest-debtor to largest-creditor matching.

    Not guaranteed to reach the theoretical minimum transfer count (that
    problem is NP-hard), but it terminates, never moves more than anyone
    owes or is owed, and is deterministic: ties sort by user id.
    Balances within ``threshold`` of zero are treated as settled.
    """
    creditors, debtors = _split_parties(balances, threshold)

    transfers: list[MinimalTransfer] = []
    i, j = 0, 0

    while i < len(creditors) and j < len(debtors):
        cred_id, cred_amount = creditors[i]
        debt_id, debt_amount = debtors[j]

        transfer_amount = min(cred_amount, debt_amount)
        if transfer_amount > threshold:
            transfers.append(MinimalTransfer(from_user=debt_id, to_user=cred_id, amount=transfer_amount))

        cred_amount -= transfer_amount
        debt_amount -= transfer_amount

        if cred_amount <= threshold:
            i += 1
        else:
            creditors[i] = (cred_id, cred_amount)

        if debt_amount <= threshold:
            j += 1
        else:
            debtors[j] = (debt_id, debt_amount)

    return transfers


def is_bill_settled(balances: Mapping[str, int | UserBalance], tolerance: int = SETTLEMENT_TOLERANCE) -> bool:
    return all(within_tolerance(_remaining(balance), tolerance) for balance in balances.values())


def settlement_opportunities(
    user_id: str,
    balances: Mapping[str, int | UserBalance],
) -> list[SettlementOpportunity]:
    """Who ``user_id`` should pay, and how much, to clear their debt on one bill."""
    if user_id not in balances:
        raise KeyError(user_id)
    debt = -_remaining(balances[user_id])
    if debt <= 0:
        return []

    creditors = sorted(
        ((other, _remaining(balance)) for other, balance in balances.items() if other != user_id),
        key=lambda x: (-x[1], x[0]),
    )
    opportunities: list[SettlementOpportunity] = []
    for creditor_id, owed_to_creditor in creditors:
        if debt <= 0 or owed_to_creditor <= 0:
            break
        amount = min(owed_to_creditor, debt)
        opportunities.append(SettlementOpportunity(user_id=creditor_id, amount=amount))
        debt -= amount
    return opportunities


def clamp_settlement(
    from_user: str,
    to_user: str,
    requested: int,
    balances: Mapping[str, int | UserBalance],
    factor: int = MINOR_UNITS,
    symbol: str = CURRENCY_SYMBOL,
) -> ClampResult:
    """Largest sound payment from ``from_user`` to ``to_user``, at most ``requested``."""
    if not is_positive_money(requested):
        raise ValueError(f"requested amount must be a positive integer of minor units, got {requested!r}")

    if from_user not in balances or to_user not in balances:
        log.info("settlement.rejected", from_user=from_user, to_user=to_user, reason="unknown_user")
        return ClampResult(amount=0, is_valid=False, reason="User not found in balances")

    if from_user == to_user:
        log.info("settlement.rejected", from_user=from_user, to_user=to_user, reason="same_user")
        return ClampResult(amount=0, is_valid=False, reason="Cannot settle with yourself")

    from_remaining = _remaining(balances[from_user])
    to_remaining = _remaining(balances[to_user])
    max_from_can_pay = -from_remaining if from_remaining < 0 else 0
    max_to_can_receive = to_remaining if to_remaining > 0 else 0

    allowed = min(max_from_can_pay, max_to_can_receive, requested)
    if allowed <= 0:
        log.info("settlement.rejected", from_user=from_user, to_user=to_user, reason="nothing_owed")
        return ClampResult(amount=0, is_valid=False, reason="No settlement needed between these users")

    if allowed < requested:
        log.info("settlement.clamped", from_user=from_user, to_user=to_user, requested=requested, allowed=allowed)
        return ClampResult(
            amount=allowed,
            is_valid=True,
            reason=f"Amount clamped from {format_amount(requested, factor, symbol)} to {format_amount(allowed, factor, symbol)}",
        )

    return ClampResult(amount=requested, is_valid=True)
