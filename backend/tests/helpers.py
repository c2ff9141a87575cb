"""
Helpers for building referee states in tests.
"""
import random

from catan_referee import (
    Board,
    GameSettings,
    HexCoordinate,
    IntersectionCoordinate,
    PathCoordinate,
    Referee,
    handle_command,
)
from catan_referee.knights import KnightLevel, KnightPiece

CENTER = HexCoordinate(0, 0, 0)  # desert on the standard board


class ScriptedRandom(random.Random):
    """Seeded random source whose randint() returns queued values first."""

    def __init__(self, values=(), seed=1234):
        super().__init__(seed)
        self.values = list(values)

    def queue(self, *values):
        self.values.extend(values)

    def randint(self, a, b):
        if self.values:
            return self.values.pop(0)
        return super().randint(a, b)


def corner(index, hex_coordinate=CENTER) -> IntersectionCoordinate:
    return hex_coordinate.corners()[index % 6]


def edge(index, hex_coordinate=CENTER) -> PathCoordinate:
    """Path from corner ``index`` to corner ``index + 1`` of a hex."""
    return PathCoordinate.between(corner(index, hex_coordinate), corner(index + 1, hex_coordinate))


def make_referee(num_players=2, expansion=False, rng=None, start=True, **settings) -> Referee:
    """A session on the standard board, skipping initial placement unless asked."""
    settings.setdefault("initial_placement", False)
    game_settings = GameSettings(
        num_players=num_players,
        is_cities_and_knights=expansion,
        **settings,
    )
    referee = Referee(game_settings, Board.standard(), rng or ScriptedRandom(), game_id="test_game")
    names = ["Alice", "Bob", "Carol", "Dave"]
    for i in range(num_players):
        referee.add_player(names[i])
    if start:
        referee.start_next_turn()
    return referee


def give(referee, player_id, **cards):
    """Put cards straight into a hand, taking them from the bank."""
    from catan_referee.ledger import parse_card_kind

    player = referee.player(player_id)
    for name, amount in cards.items():
        kind = parse_card_kind(name)
        referee.bank.take(kind, amount)
        player.hand.add(kind, amount)


def give_settlement(referee, player_id, intersection):
    referee.board.place_settlement(intersection, player_id)
    referee.player(player_id).settlements_left -= 1


def give_city(referee, player_id, intersection):
    if referee.board.building_at(intersection) is None:
        give_settlement(referee, player_id, intersection)
    referee.board.upgrade_to_city(intersection)
    player = referee.player(player_id)
    player.cities_left -= 1
    player.settlements_left += 1


def give_road(referee, player_id, path):
    referee.board.place_road(path, player_id)
    referee.player(player_id).roads_left -= 1


def give_knight(referee, player_id, intersection, level=KnightLevel.BASIC, active=False) -> KnightPiece:
    knight = KnightPiece(owner=player_id, position=intersection, level=level, active=active)
    referee.expansion_player(player_id).knights.append(knight)
    return knight


def roll(referee, red, white, event=None):
    """Resolve the current player's pending roll with fixed dice."""
    referee.set_overridden_dice(red, white)
    if event is not None:
        referee.rng.queue(event)
    return handle_command(referee, "rollDice", referee.current_player_id, {})


def at(intersection):
    """Parameters naming one intersection."""
    from catan_referee.serialization import encode_intersection

    return {"coordinate": encode_intersection(intersection)}


def along(path):
    """Parameters naming one path."""
    from catan_referee.serialization import encode_path

    return encode_path(path)
