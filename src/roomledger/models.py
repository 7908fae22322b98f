from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from fractions import Fraction
from types import MappingProxyType
from typing import Mapping, Optional, Sequence


class ExtraKind(str, Enum):
    TAX = "tax"
    SERVICE = "service"
    TIP = "tip"
    DELIVERY = "delivery"
    OTHER = "other"


class SplitRule(str, Enum):
    PROPORTIONAL = "proportional"
    FLAT = "flat"
    PAYER_ONLY = "payer_only"


class CoverageType(str, Enum):
    PROPORTIONAL = "proportional"
    SELF_FIRST = "self_first"
    SPECIFIC = "specific"
    CUSTOM = "custom"


@dataclass(frozen=True, slots=True)
class Item:
    user_id: str
    name: str
    price: int
    quantity: int = 1


@dataclass(frozen=True, slots=True)
class Extra:
    kind: ExtraKind
    name: str
    amount: int
    split_rule: SplitRule = SplitRule.PROPORTIONAL


@dataclass(frozen=True, slots=True)
class Payer:
    user_id: str
    amount_paid: int
    # Captured for the UI layer; the coverage calculator does not read these.
    coverage_type: Optional[CoverageType] = None
    coverage_targets: tuple[str, ...] = ()
    coverage_weights: tuple[tuple[str, float], ...] = ()

    @property
    def has_coverage_metadata(self) -> bool:
        return self.coverage_type is not None or bool(self.coverage_targets) or bool(self.coverage_weights)


@dataclass(frozen=True, slots=True)
class Settlement:
    from_user: str
    to_user: str
    amount: int


@dataclass(frozen=True, slots=True)
class BillInput:
    participants: Sequence[str]
    items: Sequence[Item] = ()
    extras: Sequence[Extra] = ()
    payers: Sequence[Payer] = ()
    settlements: Sequence[Settlement] = ()

    def __post_init__(self) -> None:
        for name in ("participants", "items", "extras", "payers", "settlements"):
            object.__setattr__(self, name, tuple(getattr(self, name)))

    @property
    def payer_ids(self) -> tuple[str, ...]:
        """Participants who paid something, in participant order."""
        paying = {payer.user_id for payer in self.payers}
        return tuple(user_id for user_id in self.participants if user_id in paying)


@dataclass(frozen=True, slots=True)
class UserBalance:
    user_id: str
    owed: int
    covered: int
    net: int
    remaining: int
    items: int = 0
    extras: int = 0


@dataclass(frozen=True, slots=True)
class MinimalTransfer:
    from_user: str
    to_user: str
    amount: int


@dataclass(frozen=True, slots=True)
class CalculationResult:
    user_balances: Mapping[str, UserBalance]
    suggested_transfers: tuple[MinimalTransfer, ...]
    items_total: int
    extras_total: int
    bill_total: int
    paid_total: int
    is_balanced: bool
    is_settled: bool
    validation_errors: tuple[str, ...] = ()
    extra_shares: tuple[Mapping[str, int], ...] = field(default=())

    def __post_init__(self) -> None:
        object.__setattr__(self, "user_balances", MappingProxyType(dict(self.user_balances)))
        object.__setattr__(self, "suggested_transfers", tuple(self.suggested_transfers))
        object.__setattr__(self, "validation_errors", tuple(self.validation_errors))
        object.__setattr__(
            self,
            "extra_shares",
            tuple(MappingProxyType(dict(shares)) for shares in self.extra_shares),
        )


@dataclass(frozen=True, slots=True)
class ClampResult:
    amount: int
    is_valid: bool
    reason: Optional[str] = None


@dataclass(frozen=True, slots=True)
class AllocationLine:
    user_id: str
    weight: Fraction
    exact_share: Fraction
    allocated: int

    @property
    def adjustment(self) -> int:
        return self.allocated - (self.exact_share.numerator // self.exact_share.denominator)


@dataclass(frozen=True, slots=True)
class SettlementOpportunity:
    user_id: str
    amount: int
