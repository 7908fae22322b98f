from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, ValidationError

from roomledger.models import (
    BillInput,
    CalculationResult,
    CoverageType,
    Extra,
    ExtraKind,
    Item,
    Payer,
    Settlement,
    SplitRule,
)
from roomledger.services.validation import BillValidationError


class ItemIn(BaseModel):
    model_config = ConfigDict(extra="forbid")

    user_id: str
    item_name: str
    price: StrictInt
    quantity: StrictInt = 1


class ExtraIn(BaseModel):
    model_config = ConfigDict(extra="forbid")

    extra_type: ExtraKind = ExtraKind.OTHER
    name: str
    amount: StrictInt
    split_rule: SplitRule = SplitRule.PROPORTIONAL


class PayerIn(BaseModel):
    model_config = ConfigDict(extra="forbid")

    user_id: str
    amount_paid: StrictInt
    coverage_type: Optional[CoverageType] = None
    coverage_targets: List[str] = Field(default_factory=list)
    coverage_weights: Dict[str, Union[StrictInt, StrictFloat]] = Field(default_factory=dict)


class SettlementIn(BaseModel):
    model_config = ConfigDict(extra="forbid")

    from_user: str
    to_user: str
    amount: StrictInt


class BillIn(BaseModel):
    """Bill payload with every amount already in minor units."""

    model_config = ConfigDict(extra="forbid")

    participants: List[str]
    items: List[ItemIn] = Field(default_factory=list)
    extras: List[ExtraIn] = Field(default_factory=list)
    payers: List[PayerIn] = Field(default_factory=list)
    settlements: List[SettlementIn] = Field(default_factory=list)

    def to_domain(self) -> BillInput:
        return BillInput(
            participants=self.participants,
            items=[
                Item(user_id=item.user_id, name=item.item_name, price=item.price, quantity=item.quantity)
                for item in self.items
            ],
            extras=[
                Extra(kind=extra.extra_type, name=extra.name, amount=extra.amount, split_rule=extra.split_rule)
                for extra in self.extras
            ],
            payers=[
                Payer(
                    user_id=payer.user_id,
                    amount_paid=payer.amount_paid,
                    coverage_type=payer.coverage_type,
                    coverage_targets=tuple(payer.coverage_targets),
                    coverage_weights=tuple(payer.coverage_weights.items()),
                )
                for payer in self.payers
            ],
            settlements=[
                Settlement(from_user=s.from_user, to_user=s.to_user, amount=s.amount) for s in self.settlements
            ],
        )


class UserBalanceOut(BaseModel):
    owed: int
    covered: int
    net: int
    remaining: int
    items: int
    extras: int


class TransferOut(BaseModel):
    from_user: str
    to_user: str
    amount: int


class CalculationOut(BaseModel):
    user_balances: Dict[str, UserBalanceOut]
    suggested_transfers: List[TransferOut]
    items_total: int
    extras_total: int
    bill_total: int
    paid_total: int
    is_balanced: bool
    is_settled: bool
    validation_errors: List[str]
    extra_shares: List[Dict[str, int]]

    @classmethod
    def from_result(cls, result: CalculationResult) -> "CalculationOut":
        return cls(
            user_balances={
                user_id: UserBalanceOut(
                    owed=balance.owed,
                    covered=balance.covered,
                    net=balance.net,
                    remaining=balance.remaining,
                    items=balance.items,
                    extras=balance.extras,
                )
                for user_id, balance in result.user_balances.items()
            },
            suggested_transfers=[
                TransferOut(from_user=t.from_user, to_user=t.to_user, amount=t.amount)
                for t in result.suggested_transfers
            ],
            items_total=result.items_total,
            extras_total=result.extras_total,
            bill_total=result.bill_total,
            paid_total=result.paid_total,
            is_balanced=result.is_balanced,
            is_settled=result.is_settled,
            validation_errors=list(result.validation_errors),
            extra_shares=[dict(shares) for shares in result.extra_shares],
        )


def _format_error(error: Mapping[str, Any]) -> str:
    location = ".".join(str(part) for part in error["loc"])
    return f"{location}: {error['msg']}" if location else error["msg"]


def load_bill(payload: Mapping[str, Any]) -> BillInput:
    try:
        bill = BillIn.model_validate(payload)
    except ValidationError as exc:
        raise BillValidationError([_format_error(error) for error in exc.errors()]) from exc
    return bill.to_domain()


def dump_result(result: CalculationResult) -> dict[str, Any]:
    return CalculationOut.from_result(result).model_dump(mode="json")
