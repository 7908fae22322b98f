"""Largest-remainder (Hamilton) apportionment of integer amounts.

Shares are computed with ``Fraction`` so remainders compare exactly; ties
go to the target that appears first in the input.
"""

from __future__ import annotations

from fractions import Fraction
from typing import Sequence, Union

from roomledger.models import AllocationLine
from roomledger.utils.money import ensure_money

Weight = Union[int, Fraction]


class DistributionError(RuntimeError):
    """Allocations do not add up to the distributed total."""


def _prepare(total: int, targets: Sequence[tuple[str, Weight]]) -> tuple[list[str], list[Fraction]]:
    ensure_money(total, "total")
    if not targets:
        raise ValueError("no targets provided for distribution")

    user_ids: list[str] = []
    weights: list[Fraction] = []
    seen: set[str] = set()
    for user_id, weight in targets:
        if user_id in seen:
            raise ValueError(f"duplicate distribution target: {user_id}")
        if isinstance(weight, bool) or not isinstance(weight, (int, Fraction)):
            raise ValueError(f"weight for {user_id} must be an integer or Fraction, got {weight!r}")
        if weight < 0:
            raise ValueError(f"negative weight not allowed: {weight} for {user_id}")
        seen.add(user_id)
        user_ids.append(user_id)
        weights.append(Fraction(weight))
    return user_ids, weights


def _exact_shares(total: int, weights: list[Fraction]) -> list[Fraction]:
    total_weight = sum(weights, Fraction(0))
    if total_weight == 0:
        return [Fraction(total, len(weights))] * len(weights)
    return [total * weight / total_weight for weight in weights]


def _apportion(total: int, exact: list[Fraction]) -> list[int]:
    allocations = [share.numerator // share.denominator for share in exact]
    shortfall = total - sum(allocations)

    order = sorted(range(len(exact)), key=lambda i: (-(exact[i] - allocations[i]), i))
    for index in order[:shortfall]:
        allocations[index] += 1

    allocated = sum(allocations)
    if allocated != total:
        raise DistributionError(f"hamilton rounding failed: allocated {allocated}, expected {total}")
    return allocations


def distribute(total: int, targets: Sequence[tuple[str, Weight]]) -> dict[str, int]:
    """Split ``total`` across ``(user_id, weight)`` targets.

    The result preserves target order and sums to ``total`` exactly. When
    every weight is zero the amount is split evenly instead.
    """
    user_ids, weights = _prepare(total, targets)
    allocations = _apportion(total, _exact_shares(total, weights))
    return dict(zip(user_ids, allocations))


def distribute_evenly(total: int, user_ids: Sequence[str]) -> dict[str, int]:
    return distribute(total, [(user_id, 1) for user_id in user_ids])


def explain_distribution(total: int, targets: Sequence[tuple[str, Weight]]) -> list[AllocationLine]:
    user_ids, weights = _prepare(total, targets)
    exact = _exact_shares(total, weights)
    allocations = _apportion(total, exact)
    return [
        AllocationLine(user_id=user_id, weight=weight, exact_share=share, allocated=allocated)
        for user_id, weight, share, allocated in zip(user_ids, weights, exact, allocations)
    ]
