from __future__ import annotations

from roomledger.logging import get_logger
from roomledger.models import BillInput, CalculationResult, UserBalance
from roomledger.services.balances import apply_settlements, calculate_net
from roomledger.services.coverage import calculate_covered
from roomledger.services.obligation import calculate_owed
from roomledger.services.settlement import is_bill_settled, suggest_transfers
from roomledger.services.validation import BillValidationError, check_result, validate_bill
from roomledger.utils.money import MAX_AMOUNT, SETTLEMENT_TOLERANCE, add, multiply, total

log = get_logger(__name__)


def calculate_bill(
    bill: BillInput,
    *,
    tolerance: int = SETTLEMENT_TOLERANCE,
    max_amount: int = MAX_AMOUNT,
) -> CalculationResult:
    """Compute balances and suggested transfers for one bill.

    Raises ``BillValidationError`` for bad input. Conservation failures on
    the computed numbers are reported on the result instead.
    """
    errors = validate_bill(bill, max_amount)
    if errors:
        log.warning("bill.calculate.rejected", errors=errors)
        raise BillValidationError(errors)

    ignored = [payer.user_id for payer in bill.payers if payer.has_coverage_metadata]
    if ignored:
        log.warning("bill.payer.coverage_ignored", payers=ignored)

    participants = bill.participants
    obligations = calculate_owed(bill.items, bill.extras, participants, bill.payer_ids)
    covered = calculate_covered(bill.payers, participants)
    net = calculate_net(obligations.owed, covered, participants)
    remaining = apply_settlements(net, bill.settlements)

    items_total = total(multiply(item.price, item.quantity) for item in bill.items)
    extras_total = total(extra.amount for extra in bill.extras)
    bill_total = add(items_total, extras_total)
    paid_total = total(payer.amount_paid for payer in bill.payers)

    balances = {
        user_id: UserBalance(
            user_id=user_id,
            owed=obligations.owed[user_id],
            covered=covered[user_id],
            net=net[user_id],
            remaining=remaining[user_id],
            items=obligations.items[user_id],
            extras=obligations.extras_for(user_id),
        )
        for user_id in participants
    }
    transfers = suggest_transfers(remaining, tolerance)
    violations = check_result(balances, bill_total, paid_total, tolerance)

    if violations:
        log.warning("bill.calculate.unbalanced", errors=violations)

    result = CalculationResult(
        user_balances=balances,
        suggested_transfers=tuple(transfers),
        items_total=items_total,
        extras_total=extras_total,
        bill_total=bill_total,
        paid_total=paid_total,
        is_balanced=bill_total == paid_total and not violations,
        is_settled=is_bill_settled(remaining, tolerance),
        validation_errors=tuple(violations),
        extra_shares=tuple(obligations.extra_shares),
    )
    log.info(
        "bill.calculate.done",
        participants=len(participants),
        bill_total=bill_total,
        paid_total=paid_total,
        transfers=len(transfers),
        is_balanced=result.is_balanced,
    )
    return result
