"""
Tests for setup placement, dice, production, discards and the robber.
"""
from catan_referee import GameStatus, ResourceType, handle_command
from catan_referee.actions import DropCards, MoveRobber, SetupRoad, SetupSettlement
from catan_referee.board import HexCoordinate
from catan_referee.improvements import Track
from catan_referee.ledger import Commodity
from catan_referee.progress import ProgressCard
from catan_referee.serialization import encode_hex
from helpers import along, at, corner, edge, give, give_city, give_settlement, make_referee, roll

MOUNTAINS_3 = HexCoordinate(1, -1, 0)


def test_roll_produces_for_settlements_and_cities():
    referee = make_referee(num_players=2)
    give_settlement(referee, 0, corner(0))  # mountains 3, fields 4
    give_city(referee, 1, corner(2))  # forest 3, pasture 4
    responses = roll(referee, 1, 2)
    assert responses[0].success
    assert responses[0].data["production"] == {0: {"ore": 1}, 1: {"wood": 2}}
    assert referee.player(0).hand[ResourceType.ORE] == 1
    assert referee.player(1).hand[ResourceType.WOOD] == 2
    assert referee.bank[ResourceType.ORE] == 18
    assert referee.bank[ResourceType.WOOD] == 17


def test_expansion_city_produces_a_commodity():
    referee = make_referee(num_players=2, expansion=True)
    give_city(referee, 0, corner(5))  # forest 11, mountains 3
    roll(referee, 1, 2, event=1)
    hand = referee.player(0).hand
    assert hand[ResourceType.ORE] == 1
    assert hand[Commodity.COIN] == 1
    assert referee.expansion.barbarians.position == 1


def test_robber_blocks_production():
    referee = make_referee(num_players=2)
    give_settlement(referee, 0, corner(0))
    referee.board.move_robber(MOUNTAINS_3)
    roll(referee, 1, 2)
    assert referee.player(0).hand.total() == 0


def test_bank_shortage_stops_that_kind_for_everyone():
    referee = make_referee(num_players=2)
    give_settlement(referee, 0, corner(0))
    give_settlement(referee, 1, corner(5))
    referee.bank.supply.counts[ResourceType.ORE] = 1
    roll(referee, 1, 2)
    assert referee.player(0).hand[ResourceType.ORE] == 0
    assert referee.player(1).hand[ResourceType.ORE] == 0
    assert referee.bank[ResourceType.ORE] == 1


def test_seven_queues_discards_then_robber():
    referee = make_referee(num_players=2)
    give(referee, 0, wood=8)
    give(referee, 1, brick=9)
    give_settlement(referee, 1, corner(0))
    responses = roll(referee, 3, 4)
    assert responses[0].data["discards"] == {0: 4, 1: 4}
    assert all(isinstance(f, DropCards) for f in referee.pending_follow_ups())

    blocked = handle_command(referee, "endTurn", 0, {})
    assert not blocked[0].success

    wrong = handle_command(referee, "dropCards", 1, {"cards": {"brick": 3}})
    assert not wrong[1].success
    assert referee.player(1).hand[ResourceType.BRICK] == 9
    assert handle_command(referee, "dropCards", 1, {"cards": {"brick": 4}})[1].success
    assert handle_command(referee, "dropCards", 0, {"cards": {"wood": 4}})[0].success
    assert referee.bank[ResourceType.WOOD] == 19 - 4
    assert isinstance(referee.next_follow_up(0), MoveRobber)

    no_victim = handle_command(referee, "moveRobber", 0, {"hex": encode_hex(MOUNTAINS_3)})
    assert not no_victim[0].success
    stolen = handle_command(referee, "moveRobber", 0, {"hex": encode_hex(MOUNTAINS_3), "targetPlayer": 1})
    assert stolen[0].success
    assert stolen[1].success
    assert referee.board.robber == MOUNTAINS_3
    assert referee.player(0).hand[ResourceType.BRICK] == 1
    assert referee.player(1).hand[ResourceType.BRICK] == 4
    assert referee.pending_follow_ups() == []


def test_small_hands_keep_their_cards():
    referee = make_referee(num_players=2)
    give(referee, 0, wood=7)
    responses = roll(referee, 3, 4)
    assert responses[0].data["discards"] == {}
    assert isinstance(referee.next_follow_up(0), MoveRobber)


def test_city_walls_raise_the_hand_limit():
    referee = make_referee(num_players=2, expansion=True)
    give(referee, 1, wheat=9)
    referee.expansion_player(1).city_walls = 1
    responses = roll(referee, 3, 4, event=4)
    assert responses[0].data["discards"] == {}


def test_decimal_mode_drops_exact_half():
    referee = make_referee(num_players=2, is_decimal=True)
    give(referee, 1, brick=9)
    responses = roll(referee, 3, 4)
    assert responses[0].data["discards"] == {1: 4.5}
    assert handle_command(referee, "dropCards", 1, {"cards": {"brick": 4.5}})[1].success
    assert referee.player(1).hand[ResourceType.BRICK] == 4.5


def test_robber_must_move():
    referee = make_referee(num_players=2)
    roll(referee, 3, 4)
    responses = handle_command(referee, "moveRobber", 0, {"hex": encode_hex(referee.board.robber)})
    assert not responses[0].success


def test_end_turn_passes_the_dice(rolled_base_game):
    referee = rolled_base_game
    referee.player(0).new_development_cards.append("knight")
    handle_command(referee, "endTurn", 0, {})
    assert referee.current_player_id == 1
    assert referee.has_pending_roll(1)
    assert referee.player(0).development_cards == ["knight"]
    assert referee.turn_number == 2


def test_setup_snake_order_and_second_round_resources():
    referee = make_referee(num_players=2, initial_placement=True)
    assert referee.status is GameStatus.SETUP
    assert isinstance(referee.next_follow_up(0), SetupSettlement)

    early = handle_command(referee, "rollDice", 0, {})
    assert not early[0].success

    assert handle_command(referee, "setupSettlement", 0, at(corner(0)))[0].success
    assert isinstance(referee.next_follow_up(0), SetupRoad)
    detached = handle_command(referee, "setupRoad", 0, along(edge(2)))
    assert not detached[0].success
    assert handle_command(referee, "setupRoad", 0, along(edge(0)))[0].success
    assert referee.player(0).hand.total() == 0

    assert referee.current_player_id == 1
    crowded = handle_command(referee, "setupSettlement", 1, at(corner(1)))
    assert not crowded[1].success
    assert handle_command(referee, "setupSettlement", 1, at(corner(3)))[1].success
    assert handle_command(referee, "setupRoad", 1, along(edge(3)))[1].success

    # second round runs backwards and pays out
    north = HexCoordinate(0, 2, -2)  # mountains 8, next to pasture 5
    assert referee.current_player_id == 1
    assert handle_command(referee, "setupSettlement", 1, at(corner(0, north)))[1].success
    assert handle_command(referee, "setupRoad", 1, along(edge(0, north)))[1].success
    assert referee.player(1).hand.as_dict() == {"wood": 0, "brick": 0, "wheat": 0, "sheep": 1, "ore": 1}

    east = HexCoordinate(2, -1, -1)  # fields 6
    assert referee.current_player_id == 0
    assert handle_command(referee, "setupSettlement", 0, at(corner(0, east)))[0].success
    assert handle_command(referee, "setupRoad", 0, along(edge(0, east)))[0].success
    assert referee.player(0).hand[ResourceType.WHEAT] == 1

    assert referee.status is GameStatus.PROGRESS
    assert referee.current_player_id == 0
    assert referee.has_pending_roll(0)


def _levels(referee, track, *levels):
    for pid, level in enumerate(levels):
        referee.expansion_player(pid).improvements.levels[track] = level


def test_science_gate_draws_for_levels_reaching_the_red_die():
    referee = make_referee(num_players=3, expansion=True)
    _levels(referee, Track.SCIENCE, 2, 3, 1)
    referee.expansion.decks.stack(Track.SCIENCE, [ProgressCard.SMITH, ProgressCard.CRANE])

    responses = roll(referee, 2, 3, event=6)

    assert responses[0].data["gate"] == "science"
    assert responses[0].data["progressDraws"] == [0, 1]
    assert responses[0].data["drawnCard"] == "smith"
    assert responses[1].data["drawnCard"] == "crane"
    assert "drawnCard" not in responses[2].data
    assert referee.expansion_player(0).progress_cards == [ProgressCard.SMITH]
    assert referee.expansion_player(1).progress_cards == [ProgressCard.CRANE]
    assert referee.expansion_player(2).progress_cards == []
    assert referee.expansion.barbarians.position == 0


def test_each_gate_face_selects_its_track():
    faces = ((4, Track.TRADE, ProgressCard.MERCHANT), (5, Track.POLITICS, ProgressCard.WARLORD))
    for event, track, card in faces:
        referee = make_referee(num_players=2, expansion=True)
        _levels(referee, track, 1, 0)
        referee.expansion.decks.stack(track, [card])
        responses = roll(referee, 1, 2, event=event)
        assert responses[0].data["gate"] == track.value
        assert responses[0].data["progressDraws"] == [0]
        assert referee.expansion_player(0).progress_cards == [card]


def test_full_progress_hand_skips_the_draw():
    referee = make_referee(num_players=2, expansion=True)
    _levels(referee, Track.TRADE, 5, 5)
    referee.expansion_player(0).progress_cards.extend([ProgressCard.WEDDING] * 4)
    referee.expansion.decks.stack(Track.TRADE, [ProgressCard.MERCHANT])

    responses = roll(referee, 1, 2, event=4)

    assert responses[0].data["progressDraws"] == [1]
    assert len(referee.expansion_player(0).progress_cards) == 4
    assert referee.expansion_player(1).progress_cards == [ProgressCard.MERCHANT]


def test_victory_point_cards_are_revealed_when_drawn():
    referee = make_referee(num_players=2, expansion=True)
    _levels(referee, Track.POLITICS, 1, 0)
    referee.expansion.decks.stack(Track.POLITICS, [ProgressCard.CONSTITUTION])

    responses = roll(referee, 1, 2, event=5)

    player = referee.expansion_player(0)
    assert responses[0].data["revealedPoints"] == [0]
    assert player.progress_cards == []
    assert player.progress_points == 1
    assert referee.public_points(0) == 1


def test_empty_deck_stops_the_draws():
    referee = make_referee(num_players=2, expansion=True)
    _levels(referee, Track.SCIENCE, 1, 1)
    decks = referee.expansion.decks
    decks.decks[Track.SCIENCE].clear()
    decks.stack(Track.SCIENCE, [ProgressCard.ENGINEER])

    responses = roll(referee, 1, 2, event=6)

    assert responses[0].data["progressDraws"] == [0]
    assert referee.expansion_player(1).progress_cards == []
    assert decks.remaining(Track.SCIENCE) == 0
