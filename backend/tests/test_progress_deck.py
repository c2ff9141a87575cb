"""
Tests for the progress card catalog and decks.
"""
import random

import pytest

from catan_referee.improvements import Track
from catan_referee.progress import CATALOG, ProgressCard, ProgressDecks


def test_every_card_is_catalogued():
    assert set(CATALOG) == set(ProgressCard)


def test_parse_accepts_client_ids_and_names():
    assert ProgressCard.parse("resourceMonopoly") is ProgressCard.RESOURCE_MONOPOLY
    assert ProgressCard.parse("Road Building") is ProgressCard.ROAD_BUILDING
    assert ProgressCard.parse("merchant_fleet") is ProgressCard.MERCHANT_FLEET
    with pytest.raises(ValueError):
        ProgressCard.parse("knight")


def test_victory_point_cards():
    vp_cards = {card for card in ProgressCard if card.is_victory_point}
    assert vp_cards == {ProgressCard.CONSTITUTION, ProgressCard.PRINTER}


def test_decks_are_split_by_category():
    decks = ProgressDecks(random.Random(0))
    for track in Track:
        expected = sum(info.count for info in CATALOG.values() if info.category is track)
        assert decks.remaining(track) == expected
        assert all(card.category is track for card in decks.decks[track])


def test_draw_until_exhausted():
    decks = ProgressDecks(random.Random(0))
    total = decks.remaining(Track.SCIENCE)
    drawn = [decks.draw(Track.SCIENCE) for _ in range(total)]
    assert None not in drawn
    assert decks.remaining(Track.SCIENCE) == 0
    assert decks.draw(Track.SCIENCE) is None


def test_stacked_cards_come_first():
    decks = ProgressDecks(random.Random(0))
    decks.stack(Track.TRADE, [ProgressCard.MERCHANT, ProgressCard.TRADE_MONOPOLY])
    assert decks.draw(Track.TRADE) is ProgressCard.MERCHANT
    assert decks.draw(Track.TRADE) is ProgressCard.TRADE_MONOPOLY
