"""
Tests for city improvement tracks and metropolis ownership.
"""
import pytest

from catan_referee.constants import MAX_IMPROVEMENT_LEVEL
from catan_referee.improvements import CityImprovement, MetropolisRegistry, Track, assign_metropolis_cities
from catan_referee.ledger import Commodity
from helpers import corner, give_city, make_referee


def test_track_commodities():
    assert Track.TRADE.commodity is Commodity.PAPER
    assert Track.POLITICS.commodity is Commodity.COIN
    assert Track.SCIENCE.commodity is Commodity.CLOTH


def test_track_parse_is_case_insensitive():
    assert Track.parse("Politics") is Track.POLITICS
    with pytest.raises(ValueError):
        Track.parse("military")


def test_cost_equals_next_level():
    improvements = CityImprovement()
    costs = []
    for _ in range(MAX_IMPROVEMENT_LEVEL):
        costs.append(improvements.cost(Track.SCIENCE))
        improvements.advance(Track.SCIENCE)
    assert costs == [1, 2, 3, 4, 5]
    assert improvements.level(Track.SCIENCE) == MAX_IMPROVEMENT_LEVEL
    assert improvements.level(Track.TRADE) == 0


def test_cannot_advance_past_maximum():
    improvements = CityImprovement()
    improvements.levels[Track.TRADE] = MAX_IMPROVEMENT_LEVEL
    assert not improvements.can_advance(Track.TRADE)
    with pytest.raises(ValueError):
        improvements.cost(Track.TRADE)
    with pytest.raises(ValueError):
        improvements.advance(Track.TRADE)
    assert improvements.level(Track.TRADE) == MAX_IMPROVEMENT_LEVEL


def test_metropolis_eligibility_starts_at_level_four():
    improvements = CityImprovement()
    improvements.levels[Track.POLITICS] = 3
    assert not improvements.metropolis_eligible(Track.POLITICS)
    improvements.advance(Track.POLITICS)
    assert improvements.metropolis_eligible(Track.POLITICS)
    assert not improvements.metropolis_eligible(Track.TRADE)


def test_first_player_to_level_four_takes_metropolis():
    registry = MetropolisRegistry()
    contest = registry.contest(Track.POLITICS, 1, {0: 3, 1: 4})
    assert contest.transferred
    assert contest.previous_owner is None
    assert registry.owner(Track.POLITICS) == 1
    assert registry.points(1) == 2


def test_level_three_is_not_eligible():
    registry = MetropolisRegistry()
    contest = registry.contest(Track.POLITICS, 1, {1: 3})
    assert not contest.transferred
    assert registry.owner(Track.POLITICS) is None


def test_equal_level_does_not_steal():
    registry = MetropolisRegistry()
    registry.contest(Track.TRADE, 0, {0: 4, 1: 0})
    contest = registry.contest(Track.TRADE, 1, {0: 4, 1: 4})
    assert not contest.transferred
    assert registry.owner(Track.TRADE) == 0


def test_transfer_moves_points_atomically():
    """Previous owner loses exactly what the challenger gains."""
    registry = MetropolisRegistry()
    registry.contest(Track.TRADE, 0, {0: 4, 1: 0})
    before = registry.points(0) + registry.points(1)
    contest = registry.contest(Track.TRADE, 1, {0: 4, 1: 5})
    assert contest.transferred
    assert contest.previous_owner == 0
    assert registry.points(0) == 0
    assert registry.points(1) == 2
    assert registry.points(0) + registry.points(1) == before


def test_each_metropolis_gets_its_own_city():
    referee = make_referee(num_players=2, expansion=True)
    give_city(referee, 0, corner(0))
    give_city(referee, 0, corner(3))
    registry = referee.expansion.metropolis
    registry.owners[Track.TRADE] = 0
    registry.owners[Track.SCIENCE] = 0
    assignment = assign_metropolis_cities(referee.board, registry)
    assert sorted(assignment) == sorted([corner(0), corner(3)])
    assert set(assignment.values()) == {Track.TRADE, Track.SCIENCE}


def test_contest_needs_a_free_city():
    """A player whose only city already hosts a metropolis cannot win another."""
    referee = make_referee(num_players=2, expansion=True)
    give_city(referee, 0, corner(0))
    player = referee.expansion_player(0)
    referee.expansion.metropolis.owners[Track.TRADE] = 0
    player.improvements.levels[Track.SCIENCE] = 4
    contest = referee.contest_metropolis(Track.SCIENCE, 0)
    assert not contest.transferred
    assert referee.expansion.metropolis.owner(Track.SCIENCE) is None

    give_city(referee, 0, corner(3))
    contest = referee.contest_metropolis(Track.SCIENCE, 0)
    assert contest.transferred
    assert referee.public_points(0) == 2 * 2 + 2 * 2
