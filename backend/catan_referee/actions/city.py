"""
City walls and city improvements.
"""
from typing import TYPE_CHECKING

from ..board import IntersectionCoordinate
from ..constants import MAX_CITY_WALLS
from ..errors import ActionRejected
from ..ledger import CITY_WALL_COST
from ..params import CoordinateParams, TrackParams
from ..player import ExpansionPlayer
from .base import Action, ActionOutcome, charge
from .registry import ActionRegistry

if TYPE_CHECKING:
    from ..referee import Referee


def check_wall_site(referee: "Referee", player: ExpansionPlayer, coordinate: IntersectionCoordinate):
    building = referee.board.building_at(coordinate)
    if building is None or building.owner != player.id or not building.is_city:
        raise ActionRejected("City walls can only be built under your own city")
    if building.walled:
        raise ActionRejected("That city already has a wall")
    if player.city_walls >= MAX_CITY_WALLS:
        raise ActionRejected(f"You already have {MAX_CITY_WALLS} city walls")


def raise_wall(referee: "Referee", player: ExpansionPlayer, coordinate: IntersectionCoordinate):
    referee.board.building_at(coordinate).walled = True
    player.city_walls += 1


@ActionRegistry.register
class BuildCityWall(Action):
    kind = "buildCityWall"
    params_model = CoordinateParams
    requires_expansion = True

    def apply(self, referee: "Referee") -> ActionOutcome:
        player = referee.expansion_player(self.player_id)
        coordinate = self.params.intersection
        check_wall_site(referee, player, coordinate)
        charge(referee, player, CITY_WALL_COST, "build a city wall")
        raise_wall(referee, player, coordinate)
        return ActionOutcome(
            f"City wall built; your hand limit is now {player.hand_limit}",
            f"Player {player.id} built a city wall",
            data={"cityWalls": player.city_walls},
        )


@ActionRegistry.register
class ImproveCityTrack(Action):
    """Advance one improvement track, paying its commodity, and contest the metropolis."""
    kind = "improveCityTrack"
    params_model = TrackParams
    requires_expansion = True

    def apply(self, referee: "Referee") -> ActionOutcome:
        player = referee.expansion_player(self.player_id)
        track = self.params.track
        if player.built_cities < 1:
            raise ActionRejected("You need a city on the board to build improvements")
        if not player.improvements.can_advance(track):
            raise ActionRejected(f"Your {track.value} track is already at the maximum level")
        cost = player.improvements.cost(track)
        discounted = player.crane_pending
        if discounted:
            cost = max(cost - 1, 0)
        commodity = track.commodity
        if player.hand[commodity] < cost:
            raise ActionRejected(f"Insufficient {commodity.value}: need {cost}")

        if cost:
            charge(referee, player, {commodity: cost}, f"improve {track.value}")
        player.crane_pending = False
        level = player.improvements.advance(track)
        data = {"track": track.value, "level": level}
        message = f"{track.value.capitalize()} improved to level {level}"
        public_message = f"Player {player.id} improved {track.value} to level {level}"
        if player.improvements.metropolis_eligible(track):
            contest = referee.contest_metropolis(track, player.id)
            data["metropolisOwner"] = contest.owner
            if contest.transferred:
                message += f"; you now hold the {track.value} metropolis"
                public_message += f" and took the {track.value} metropolis"
                data["previousOwner"] = contest.previous_owner
        return ActionOutcome(message, public_message, data=data, public_data=data)
