"""
Base-game development cards. Cities & Knights replaces them with progress cards.
"""
from typing import TYPE_CHECKING

from ..constants import FREE_ROADS, YEAR_OF_PLENTY_PICKS
from ..errors import ActionRejected
from ..ledger import DEVELOPMENT_CARD_COST
from ..params import DevelopmentCardParams
from ..transfers import capped_transfer
from .base import Action, ActionOutcome, charge
from .building import PlaceRoad
from .registry import ActionRegistry
from .turn import MoveRobber

if TYPE_CHECKING:
    from ..referee import Referee


def _base_game_only(referee: "Referee"):
    if referee.is_expansion:
        raise ActionRejected("Development cards are not used with Cities & Knights")


@ActionRegistry.register
class BuyDevelopmentCard(Action):
    kind = "buyDevelopmentCard"

    def apply(self, referee: "Referee") -> ActionOutcome:
        _base_game_only(referee)
        player = referee.player(self.player_id)
        if not referee.development_deck:
            raise ActionRejected("No development cards are left")
        charge(referee, player, DEVELOPMENT_CARD_COST, "buy a development card")
        card = referee.draw_development_card()
        player.new_development_cards.append(card)
        return ActionOutcome(
            f"You bought a {card.replace('_', ' ')} card",
            f"Player {player.id} bought a development card",
            data={"card": card},
        )


@ActionRegistry.register
class PlayDevelopmentCard(Action):
    """Play a development card bought on an earlier turn (one per turn)."""
    kind = "playDevelopmentCard"
    params_model = DevelopmentCardParams

    def apply(self, referee: "Referee") -> ActionOutcome:
        _base_game_only(referee)
        player = referee.player(self.player_id)
        card = self.params.card
        if card == "victory_point":
            raise ActionRejected("Victory point cards count automatically")
        if player.played_development_card:
            raise ActionRejected("You already played a development card this turn")
        if card not in player.development_cards:
            if card in player.new_development_cards:
                raise ActionRejected("Cards cannot be played on the turn they were bought")
            raise ActionRejected(f"You do not hold a {card.replace('_', ' ')} card")

        if card == "knight":
            referee.add_follow_up([MoveRobber(player.id)])
            player.knights_played += 1
            message, data = "Knight played; move the robber", {"knightsPlayed": player.knights_played}
        elif card == "road_building":
            if player.roads_left < FREE_ROADS or not referee.board.legal_road_paths(player.id):
                raise ActionRejected("You have nowhere to build two roads")
            for _ in range(FREE_ROADS):
                referee.add_follow_up([PlaceRoad(player.id)])
            message, data = "Road building played; place two free roads", None
        elif card == "year_of_plenty":
            picks = self.params.resources
            if len(picks) != YEAR_OF_PLENTY_PICKS:
                raise ActionRejected(f"Choose exactly {YEAR_OF_PLENTY_PICKS} resources")
            wanted = {}
            for resource in picks:
                wanted[resource] = wanted.get(resource, 0) + 1
            for resource, amount in wanted.items():
                if not referee.bank.can_supply(resource, amount):
                    raise ActionRejected(f"The bank has run out of {resource.value}")
            for resource, amount in wanted.items():
                referee.bank.take(resource, amount)
                player.hand.add(resource, amount)
            message, data = "Year of plenty played", {"resources": [r.value for r in picks]}
        else:
            resource = self.params.resource
            if resource is None:
                raise ActionRejected("Name the resource to monopolize")
            taken = capped_transfer(player, referee.opponents(player.id), resource, float("inf"))
            message = f"Monopoly played; took {sum(taken.values())} {resource.value}"
            data = {"resource": resource.value, "taken": taken}

        player.development_cards.remove(card)
        player.played_development_card = True
        return ActionOutcome(
            message,
            f"Player {player.id} played {card.replace('_', ' ')}",
            data=data,
            public_data=data,
        )
