"""
Tests for building roads, settlements and cities, and for bank trades.
"""
from catan_referee import ResourceType, handle_command
from catan_referee.improvements import Track
from catan_referee.ledger import Commodity
from helpers import along, at, corner, edge, give, give_road, give_settlement


def test_build_road_from_settlement(rolled_base_game):
    referee = rolled_base_game
    give_settlement(referee, 0, corner(0))
    give(referee, 0, wood=1, brick=1)
    responses = handle_command(referee, "buildRoad", 0, along(edge(0)))
    assert responses[0].success
    assert referee.board.road_owner(edge(0)) == 0
    assert referee.player(0).roads_left == 14
    assert referee.player(0).hand.total() == 0
    assert referee.bank[ResourceType.WOOD] == 19


def test_unconnected_road_is_rejected_without_charge(rolled_base_game):
    referee = rolled_base_game
    give(referee, 0, wood=1, brick=1)
    responses = handle_command(referee, "buildRoad", 0, along(edge(2)))
    assert not responses[0].success
    assert referee.board.roads == {}
    assert referee.player(0).hand.total() == 2


def test_road_needs_resources(rolled_base_game):
    referee = rolled_base_game
    give_settlement(referee, 0, corner(0))
    give(referee, 0, wood=1)
    responses = handle_command(referee, "buildRoad", 0, along(edge(0)))
    assert not responses[0].success
    assert "Insufficient" in responses[0].message
    assert referee.player(0).hand[ResourceType.WOOD] == 1


def test_malformed_path_is_rejected(rolled_base_game):
    responses = handle_command(rolled_base_game, "buildRoad", 0, {"start": {"coord1": {"x": 1}}})
    assert not responses[0].success
    assert responses[0].message.startswith("Invalid parameters")


def test_build_settlement_on_road(rolled_base_game):
    referee = rolled_base_game
    give_settlement(referee, 0, corner(0))
    give_road(referee, 0, edge(0))
    give_road(referee, 0, edge(1))
    give(referee, 0, wood=2, brick=2, wheat=2, sheep=2)

    crowded = handle_command(referee, "buildSettlement", 0, at(corner(1)))
    assert not crowded[0].success

    responses = handle_command(referee, "buildSettlement", 0, at(corner(2)))
    assert responses[0].success
    assert referee.board.building_at(corner(2)).owner == 0
    assert referee.player(0).settlements_left == 3
    assert referee.public_points(0) == 2


def test_settlement_needs_own_road(rolled_base_game):
    referee = rolled_base_game
    give(referee, 0, wood=1, brick=1, wheat=1, sheep=1)
    responses = handle_command(referee, "buildSettlement", 0, at(corner(0)))
    assert not responses[0].success
    assert referee.board.building_at(corner(0)) is None


def test_build_city(rolled_base_game):
    referee = rolled_base_game
    give_settlement(referee, 0, corner(0))
    give(referee, 0, wheat=2, ore=3)
    responses = handle_command(referee, "buildCity", 0, at(corner(0)))
    assert responses[0].success
    assert referee.board.building_at(corner(0)).is_city
    player = referee.player(0)
    assert (player.cities_left, player.settlements_left) == (3, 5)
    assert referee.public_points(0) == 2


def test_city_must_replace_own_settlement(rolled_base_game):
    referee = rolled_base_game
    give_settlement(referee, 1, corner(0))
    give(referee, 0, wheat=2, ore=3)
    responses = handle_command(referee, "buildCity", 0, at(corner(0)))
    assert not responses[0].success
    assert not referee.board.building_at(corner(0)).is_city


def test_medicine_discount_is_used_once(rolled_ck_game):
    referee = rolled_ck_game
    give_settlement(referee, 0, corner(0))
    give_settlement(referee, 0, corner(3))
    give(referee, 0, wheat=3, ore=4)
    player = referee.expansion_player(0)
    player.medicine_pending = True

    assert handle_command(referee, "buildCity", 0, at(corner(0)))[0].success
    assert (player.hand[ResourceType.WHEAT], player.hand[ResourceType.ORE]) == (2, 3)
    assert not player.medicine_pending

    assert handle_command(referee, "buildCity", 0, at(corner(3)))[0].success
    assert player.hand.total() == 0


def test_four_to_one_trade(rolled_base_game):
    referee = rolled_base_game
    give(referee, 0, wood=4)
    responses = handle_command(referee, "tradeWithBank", 0, {"offer": {"wood": 4}, "request": {"brick": 1}})
    assert responses[0].success
    hand = referee.player(0).hand
    assert (hand[ResourceType.WOOD], hand[ResourceType.BRICK]) == (0, 1)
    assert referee.bank[ResourceType.WOOD] == 19


def test_trade_must_match_rate(rolled_base_game):
    referee = rolled_base_game
    give(referee, 0, wood=3)
    responses = handle_command(referee, "tradeWithBank", 0, {"offer": {"wood": 3}, "request": {"brick": 1}})
    assert not responses[0].success
    assert referee.player(0).hand[ResourceType.WOOD] == 3


def test_trade_needs_offered_cards(rolled_base_game):
    responses = handle_command(rolled_base_game, "tradeWithBank", 0, {"offer": {"ore": 4}, "request": {"wool": 1}})
    assert not responses[0].success
    responses = handle_command(rolled_base_game, "tradeWithBank", 0, {"offer": {"ore": 4}, "request": {"sheep": 1}})
    assert not responses[0].success


def test_port_trade(rolled_base_game):
    referee = rolled_base_game
    referee.board.ports[corner(0)] = ResourceType.WHEAT
    give_settlement(referee, 0, corner(0))
    give(referee, 0, wheat=4)
    responses = handle_command(referee, "tradeWithBank", 0, {"offer": {"wheat": 4}, "request": {"ore": 1, "wood": 1}})
    assert responses[0].success
    assert referee.player(0).hand[ResourceType.WHEAT] == 0


def test_trading_house_commodity_trade(rolled_ck_game):
    referee = rolled_ck_game
    referee.expansion_player(0).improvements.levels[Track.TRADE] = 3
    give(referee, 0, paper=2)
    responses = handle_command(referee, "tradeWithBank", 0, {"offer": {"paper": 2}, "request": {"coin": 1}})
    assert responses[0].success
    assert referee.player(0).hand[Commodity.COIN] == 1


def test_commodities_cannot_be_traded_in_the_base_game(rolled_base_game):
    responses = handle_command(rolled_base_game, "tradeWithBank", 0, {"offer": {"wood": 4}, "request": {"coin": 1}})
    assert not responses[0].success
