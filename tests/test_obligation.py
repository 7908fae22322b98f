import pytest

from roomledger.models import Extra, ExtraKind, Item, SplitRule
from roomledger.services.obligation import calculate_owed, item_totals


def test_item_totals_include_idle_participants():
    items = [
        Item(user_id="a", name="Karahi", price=500, quantity=2),
        Item(user_id="b", name="Naan", price=50, quantity=4),
        Item(user_id="a", name="Lassi", price=150),
    ]
    assert item_totals(items, ["a", "b", "c"]) == {"a": 1150, "b": 200, "c": 0}


def test_proportional_extra_follows_item_totals():
    items = [
        Item(user_id="a", name="Burger", price=500, quantity=2),
        Item(user_id="b", name="Pizza", price=1000),
    ]
    extras = [Extra(kind=ExtraKind.TAX, name="GST", amount=200, split_rule=SplitRule.PROPORTIONAL)]

    result = calculate_owed(items, extras, ["a", "b"])

    assert result.owed == {"a": 1100, "b": 1100}
    assert result.items == {"a": 1000, "b": 1000}
    assert result.extra_shares == [{"a": 100, "b": 100}]
    assert result.extras_for("a") == 100


def test_proportional_extra_without_items_splits_evenly():
    extras = [Extra(kind=ExtraKind.SERVICE, name="Service", amount=101)]
    result = calculate_owed([], extras, ["a", "b"])
    assert result.owed == {"a": 51, "b": 50}


def test_flat_extra_ignores_item_totals():
    items = [Item(user_id="a", name="Steak", price=9000)]
    extras = [Extra(kind=ExtraKind.TIP, name="Tip", amount=300, split_rule=SplitRule.FLAT)]
    result = calculate_owed(items, extras, ["a", "b", "c"])
    assert result.extra_shares == [{"a": 100, "b": 100, "c": 100}]
    assert result.owed == {"a": 9100, "b": 100, "c": 100}


def test_payer_only_extra_goes_to_payers():
    items = [
        Item(user_id="a", name="Tea", price=100),
        Item(user_id="b", name="Biryani", price=5000),
    ]
    extras = [Extra(kind=ExtraKind.DELIVERY, name="Delivery", amount=100, split_rule=SplitRule.PAYER_ONLY)]

    result = calculate_owed(items, extras, ["a", "b"], payer_ids=["a"])

    assert result.extra_shares == [{"a": 100}]
    assert result.owed == {"a": 200, "b": 5000}


def test_payer_only_extra_requires_payers():
    extras = [Extra(kind=ExtraKind.DELIVERY, name="Delivery", amount=100, split_rule=SplitRule.PAYER_ONLY)]
    with pytest.raises(ValueError):
        calculate_owed([], extras, ["a"], payer_ids=[])


def test_extras_are_weighted_by_items_only():
    items = [
        Item(user_id="a", name="x", price=100),
        Item(user_id="b", name="y", price=300),
    ]
    first = Extra(kind=ExtraKind.TIP, name="Tip", amount=1000, split_rule=SplitRule.PAYER_ONLY)
    second = Extra(kind=ExtraKind.TAX, name="Tax", amount=40)

    forward = calculate_owed(items, [first, second], ["a", "b"], payer_ids=["a"])
    backward = calculate_owed(items, [second, first], ["a", "b"], payer_ids=["a"])

    assert forward.owed == backward.owed == {"a": 1110, "b": 330}


def test_obligations_conserve_bill_total():
    items = [
        Item(user_id="a", name="x", price=333, quantity=3),
        Item(user_id="b", name="y", price=101),
        Item(user_id="c", name="z", price=7, quantity=11),
    ]
    extras = [
        Extra(kind=ExtraKind.TAX, name="Tax", amount=177),
        Extra(kind=ExtraKind.SERVICE, name="Service", amount=100, split_rule=SplitRule.FLAT),
        Extra(kind=ExtraKind.TIP, name="Tip", amount=55, split_rule=SplitRule.PAYER_ONLY),
    ]
    result = calculate_owed(items, extras, ["a", "b", "c"], payer_ids=["b", "c"])
    assert sum(result.owed.values()) == 999 + 101 + 77 + 177 + 100 + 55
