from __future__ import annotations

from typing import Sequence

from roomledger.models import Payer
from roomledger.utils.money import add


def calculate_covered(payers: Sequence[Payer], participants: Sequence[str]) -> dict[str, int]:
    """Total handed over at the counter by each participant.

    Payer coverage metadata is not read here.
    """
    covered = {user_id: 0 for user_id in participants}
    for payer in payers:
        covered[payer.user_id] = add(covered[payer.user_id], payer.amount_paid)
    return covered
