"""
Tests for resource/commodity ledgers and the bank.
"""
import pytest

from catan_referee.ledger import (
    CARD_KINDS,
    RESOURCES,
    Bank,
    Commodity,
    Ledger,
    ResourceType,
    parse_card_kind,
)


def test_resource_parse_rejects_wildcard_and_unknown():
    """Resource names parse case-insensitively; the wildcard is not a hand resource."""
    assert ResourceType.parse("Wheat") is ResourceType.WHEAT
    with pytest.raises(ValueError):
        ResourceType.parse("wildcard")
    with pytest.raises(ValueError):
        ResourceType.parse("gold")


def test_commodity_from_resource():
    assert Commodity.from_resource(ResourceType.WOOD) is Commodity.PAPER
    assert Commodity.from_resource(ResourceType.SHEEP) is Commodity.CLOTH
    assert Commodity.from_resource(ResourceType.ORE) is Commodity.COIN
    assert Commodity.from_resource(ResourceType.BRICK) is None


def test_parse_card_kind_accepts_both_families():
    assert parse_card_kind("ore") is ResourceType.ORE
    assert parse_card_kind("COIN") is Commodity.COIN
    with pytest.raises(ValueError):
        parse_card_kind("diamonds")


def test_pay_is_all_or_nothing():
    """A cost the hand cannot cover leaves every count untouched."""
    hand = Ledger(CARD_KINDS, {ResourceType.WOOD: 1, ResourceType.BRICK: 0})
    with pytest.raises(ValueError):
        hand.pay({ResourceType.WOOD: 1, ResourceType.BRICK: 1})
    assert hand[ResourceType.WOOD] == 1
    assert hand[ResourceType.BRICK] == 0


def test_remove_never_goes_negative():
    hand = Ledger(RESOURCES)
    with pytest.raises(ValueError):
        hand.remove(ResourceType.ORE, 1)
    assert hand[ResourceType.ORE] == 0


def test_units_expand_whole_cards_only():
    hand = Ledger(CARD_KINDS, {ResourceType.WOOD: 2, Commodity.COIN: 1.5})
    assert sorted(k.value for k in hand.units()) == ["coin", "wood", "wood"]
    assert hand.total() == 3.5


def test_resource_only_ledger_refuses_commodities():
    hand = Ledger(RESOURCES)
    with pytest.raises(ValueError):
        hand.add(Commodity.PAPER, 1)


def test_bank_supply_and_collect():
    bank = Bank(with_commodities=True)
    assert bank[ResourceType.WHEAT] == 19
    assert bank[Commodity.CLOTH] == 12
    bank.take(ResourceType.WHEAT, 4)
    assert not bank.can_supply(ResourceType.WHEAT, 16)
    bank.collect({ResourceType.WHEAT: 4})
    assert bank[ResourceType.WHEAT] == 19


def test_base_bank_has_no_commodities():
    bank = Bank()
    assert not bank.can_supply(Commodity.PAPER, 1)
