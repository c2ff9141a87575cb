"""
Knight actions: place, activate, promote and move.
"""
from collections import deque
from typing import TYPE_CHECKING, Dict

from ..board import IntersectionCoordinate
from ..constants import MIGHTY_POLITICS_LEVEL
from ..errors import ActionRejected
from ..improvements import Track
from ..knights import KnightLevel, KnightPiece
from ..ledger import KNIGHT_ACTIVATION_COST, KNIGHT_COST, MIGHTY_PROMOTION_COST, STRONG_PROMOTION_COST, CardKind
from ..params import CoordinateParams, MoveKnightParams
from ..player import ExpansionPlayer
from .base import Action, ActionOutcome, charge
from .registry import ActionRegistry

if TYPE_CHECKING:
    from ..referee import Referee


def own_knight(player: ExpansionPlayer, coordinate: IntersectionCoordinate) -> KnightPiece:
    knight = player.knight_at(coordinate)
    if knight is None:
        raise ActionRejected("You have no knight at that intersection")
    return knight


def promotion_cost(player: ExpansionPlayer, knight: KnightPiece) -> Dict[CardKind, int]:
    """Cost of the next level, rejecting mighty knights and a too-low politics track."""
    target = knight.level.next_level
    if target is None:
        raise ActionRejected("A mighty knight cannot be promoted further")
    if target is KnightLevel.MIGHTY:
        if player.improvement_level(Track.POLITICS) < MIGHTY_POLITICS_LEVEL:
            raise ActionRejected(f"Promoting to mighty requires politics level {MIGHTY_POLITICS_LEVEL}")
        return MIGHTY_PROMOTION_COST
    return STRONG_PROMOTION_COST


class KnightAction(Action):
    requires_expansion = True
    params_model = CoordinateParams


@ActionRegistry.register
class PlaceKnight(KnightAction):
    """Place a new basic, inactive knight next to one of your roads."""
    kind = "placeKnight"

    def apply(self, referee: "Referee") -> ActionOutcome:
        player = referee.expansion_player(self.player_id)
        coordinate = self.params.intersection
        if not referee.board.has_intersection(coordinate):
            raise ActionRejected("That intersection is not on the board")
        if referee.is_occupied(coordinate):
            raise ActionRejected("That intersection is occupied")
        if not referee.board.touches_own_road(coordinate, player.id):
            raise ActionRejected("Knights must be placed next to one of your roads")
        charge(referee, player, KNIGHT_COST, "place a knight")
        player.knights.append(KnightPiece(owner=player.id, position=coordinate))
        return ActionOutcome("Knight placed", f"Player {player.id} placed a basic knight")


@ActionRegistry.register
class ActivateKnight(KnightAction):
    kind = "activateKnight"

    def apply(self, referee: "Referee") -> ActionOutcome:
        player = referee.expansion_player(self.player_id)
        knight = own_knight(player, self.params.intersection)
        if knight.active:
            raise ActionRejected("That knight is already active")
        charge(referee, player, KNIGHT_ACTIVATION_COST, "activate a knight")
        knight.activate()
        return ActionOutcome(
            f"Knight activated; your active strength is {player.active_strength}",
            f"Player {player.id} activated a knight",
            data={"activeStrength": player.active_strength},
        )


@ActionRegistry.register
class PromoteKnight(KnightAction):
    kind = "promoteKnight"

    def apply(self, referee: "Referee") -> ActionOutcome:
        player = referee.expansion_player(self.player_id)
        knight = own_knight(player, self.params.intersection)
        cost = promotion_cost(player, knight)
        charge(referee, player, cost, "promote a knight")
        knight.promote()
        level = knight.level.name.lower()
        return ActionOutcome(
            f"Knight promoted to {level}",
            f"Player {player.id} promoted a knight to {level}",
            data={"level": knight.level.strength},
            public_data={"level": knight.level.strength},
        )


def reachable_along_roads(referee: "Referee", owner: int, start: IntersectionCoordinate):
    """Intersections reachable from start over owner's roads without passing other pieces."""
    board = referee.board
    seen = {start}
    queue = deque([start])
    while queue:
        node = queue.popleft()
        if node != start and referee.is_occupied(node):
            building = board.building_at(node)
            if building is None or building.owner != owner or referee.knight_at(node) is not None:
                continue  # can stop here but not pass through
        for path in board.paths_touching(node):
            if board.road_owner(path) != owner:
                continue
            nxt = path.other_end(node)
            if nxt not in seen:
                seen.add(nxt)
                queue.append(nxt)
    seen.discard(start)
    return seen


@ActionRegistry.register
class MoveKnight(KnightAction):
    """Move an active knight along your roads; it ends the move inactive."""
    kind = "moveKnight"
    params_model = MoveKnightParams

    def apply(self, referee: "Referee") -> ActionOutcome:
        player = referee.expansion_player(self.player_id)
        knight = own_knight(player, self.params.coordinate.to_coordinate())
        destination = self.params.destination.to_coordinate()
        if not knight.active:
            raise ActionRejected("Only an active knight can move")
        if knight.used:
            raise ActionRejected("That knight has already acted this turn")
        if referee.is_occupied(destination):
            raise ActionRejected("The destination is occupied")
        if destination not in reachable_along_roads(referee, player.id, knight.position):
            raise ActionRejected("The destination is not connected to the knight by your roads")
        knight.move_to(destination)
        return ActionOutcome("Knight moved", f"Player {player.id} moved a knight")
