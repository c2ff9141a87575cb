"""
Roads, settlements and cities.
"""
from typing import TYPE_CHECKING

from ..errors import ActionRejected
from ..ledger import CITY_COST, MEDICINE_CITY_COST, ROAD_COST, SETTLEMENT_COST
from ..params import CoordinateParams, PathParams
from ..player import ExpansionPlayer
from .base import Action, ActionOutcome, FollowUpAction, charge
from .registry import ActionRegistry

if TYPE_CHECKING:
    from ..referee import Referee


def check_road_placement(referee: "Referee", player, path):
    if player.roads_left <= 0:
        raise ActionRejected("You have no roads left")
    if not referee.board.has_path(path):
        raise ActionRejected("That path is not on the board")
    if path in referee.board.roads:
        raise ActionRejected("There is already a road on that path")
    if not referee.board.can_extend_road(path, player.id):
        raise ActionRejected("Roads must connect to your own road or building")


@ActionRegistry.register
class BuildRoad(Action):
    kind = "buildRoad"
    params_model = PathParams

    def apply(self, referee: "Referee") -> ActionOutcome:
        player = referee.player(self.player_id)
        path = self.params.path
        check_road_placement(referee, player, path)
        charge(referee, player, ROAD_COST, "build a road")
        referee.board.place_road(path, player.id)
        player.roads_left -= 1
        return ActionOutcome("Road built", f"Player {player.id} built a road")


@ActionRegistry.register
class PlaceRoad(FollowUpAction):
    """A free road granted by a road building card."""
    kind = "placeRoad"
    prompt = "place a free road"
    params_model = PathParams

    def apply(self, referee: "Referee") -> ActionOutcome:
        player = referee.player(self.player_id)
        path = self.params.path
        check_road_placement(referee, player, path)
        referee.board.place_road(path, player.id)
        player.roads_left -= 1
        return ActionOutcome("Free road placed", f"Player {player.id} placed a free road")


@ActionRegistry.register
class BuildSettlement(Action):
    kind = "buildSettlement"
    params_model = CoordinateParams

    def apply(self, referee: "Referee") -> ActionOutcome:
        player = referee.player(self.player_id)
        board = referee.board
        coordinate = self.params.intersection
        if player.settlements_left <= 0:
            raise ActionRejected("You have no settlements left")
        if not board.has_intersection(coordinate):
            raise ActionRejected("That intersection is not on the board")
        if referee.is_occupied(coordinate):
            raise ActionRejected("That intersection is occupied")
        if not board.satisfies_distance_rule(coordinate):
            raise ActionRejected("Settlements must be at least two paths away from other buildings")
        if not board.touches_own_road(coordinate, player.id):
            raise ActionRejected("Settlements must connect to one of your roads")
        charge(referee, player, SETTLEMENT_COST, "build a settlement")
        board.place_settlement(coordinate, player.id)
        player.settlements_left -= 1
        return ActionOutcome("Settlement built", f"Player {player.id} built a settlement")


@ActionRegistry.register
class BuildCity(Action):
    """Upgrade a settlement. A pending Medicine discount lowers the cost."""
    kind = "buildCity"
    params_model = CoordinateParams

    def apply(self, referee: "Referee") -> ActionOutcome:
        player = referee.player(self.player_id)
        coordinate = self.params.intersection
        building = referee.board.building_at(coordinate)
        if player.cities_left <= 0:
            raise ActionRejected("You have no cities left")
        if building is None or building.owner != player.id or building.is_city:
            raise ActionRejected("Cities can only replace one of your settlements")
        discounted = isinstance(player, ExpansionPlayer) and player.medicine_pending
        charge(referee, player, MEDICINE_CITY_COST if discounted else CITY_COST, "build a city")
        if discounted:
            player.medicine_pending = False
        referee.board.upgrade_to_city(coordinate)
        player.cities_left -= 1
        player.settlements_left += 1
        return ActionOutcome(
            "City built" + (" with medicine" if discounted else ""),
            f"Player {player.id} built a city",
        )
