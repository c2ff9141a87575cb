"""
Follow-up decisions queued by progress cards.
"""
from typing import TYPE_CHECKING, Any, Dict

from ..constants import MASTER_MERCHANT_TAKE, RESOURCE_MONOPOLY_CAP, TRADE_MONOPOLY_CAP
from ..errors import ActionRejected
from ..params import (
    CardKindParams,
    CommodityParams,
    CoordinateParams,
    DeserterParams,
    DiceParams,
    HexParams,
    PathParams,
    ResourceParams,
    SwapHexParams,
    TargetPlayerParams,
)
from ..serialization import encode_hex
from ..transfers import capped_transfer, sample_units, steal_random_cards
from .base import ActionOutcome, ActionResponse, FollowUpAction
from .building import PlaceRoad
from .registry import ActionRegistry

if TYPE_CHECKING:
    from ..referee import Referee


def _opponent(referee: "Referee", actor_id: int, target_id: int):
    if target_id == actor_id:
        raise ActionRejected("Choose an opponent, not yourself")
    if target_id not in referee.players:
        raise ActionRejected(f"There is no player {target_id}")
    return referee.expansion_player(target_id)


@ActionRegistry.register
class ChooseResource(FollowUpAction):
    """Resource Monopoly: each opponent gives up to 2 of the named resource."""
    kind = "chooseResource"
    prompt = "name a resource to monopolize"
    params_model = ResourceParams

    def apply(self, referee: "Referee") -> ActionOutcome:
        actor = referee.player(self.player_id)
        resource = self.params.resource
        taken = capped_transfer(actor, referee.opponents(actor.id), resource, RESOURCE_MONOPOLY_CAP)
        total = sum(taken.values())
        data = {"resource": resource.value, "taken": taken}
        return ActionOutcome(
            f"You took {total} {resource.value}",
            f"Player {actor.id} took {total} {resource.value} with a resource monopoly",
            data=data,
            public_data=data,
        )


@ActionRegistry.register
class ChooseCommodity(FollowUpAction):
    """Trade Monopoly: each opponent gives 1 of the named commodity."""
    kind = "chooseCommodity"
    prompt = "name a commodity to monopolize"
    params_model = CommodityParams

    def apply(self, referee: "Referee") -> ActionOutcome:
        actor = referee.player(self.player_id)
        commodity = self.params.resource
        taken = capped_transfer(actor, referee.opponents(actor.id), commodity, TRADE_MONOPOLY_CAP)
        total = sum(taken.values())
        data = {"resource": commodity.value, "taken": taken}
        return ActionOutcome(
            f"You took {total} {commodity.value}",
            f"Player {actor.id} took {total} {commodity.value} with a trade monopoly",
            data=data,
            public_data=data,
        )


@ActionRegistry.register
class ChooseOpponentCards(FollowUpAction):
    """Master Merchant: take 2 random cards from a player with more victory points."""
    kind = "chooseOpponentCards"
    prompt = "choose a player with more victory points"
    params_model = TargetPlayerParams

    def apply(self, referee: "Referee") -> ActionOutcome:
        target = _opponent(referee, self.player_id, self.params.target_player)
        if referee.public_points(target.id) <= referee.public_points(self.player_id):
            raise ActionRejected("That player does not have more victory points than you")
        actor = referee.player(self.player_id)
        stolen = steal_random_cards(referee.rng, actor, target, MASTER_MERCHANT_TAKE)
        names = [kind.value for kind in stolen]
        outcome = ActionOutcome(
            f"You took {names} from player {target.id}",
            f"Player {actor.id} took {len(stolen)} cards from player {target.id}",
            data={"targetPlayer": target.id, "cards": names},
            public_data={"targetPlayer": target.id, "count": len(stolen)},
        )
        outcome.private[target.id] = ActionResponse(
            True, f"Player {actor.id} took {names} from you", {"cards": names}
        )
        return outcome


@ActionRegistry.register
class ChooseDice(FollowUpAction):
    """Alchemist: fix the values of the coming production roll."""
    kind = "chooseDice"
    prompt = "choose the dice values"
    params_model = DiceParams

    def apply(self, referee: "Referee") -> ActionOutcome:
        red, white = self.params.red_die, self.params.white_die
        referee.set_overridden_dice(red, white)
        return ActionOutcome(
            f"The next roll will be red {red}, white {white}",
            f"Player {self.player_id} used the alchemist",
            data={"redDie": red, "whiteDie": white},
        )


@ActionRegistry.register
class ChooseFleetResource(FollowUpAction):
    """Merchant Fleet: one kind trades 2:1 for the rest of the turn."""
    kind = "chooseFleetResource"
    prompt = "choose a resource or commodity to trade 2:1"
    params_model = CardKindParams

    def apply(self, referee: "Referee") -> ActionOutcome:
        player = referee.player(self.player_id)
        kind = self.params.resource
        if kind not in player.hand.counts:
            raise ActionRejected(f"You cannot trade {kind.value}")
        player.fleet_kind = kind
        return ActionOutcome(
            f"You trade {kind.value} 2:1 this turn",
            f"Player {player.id} trades {kind.value} 2:1 this turn",
            data={"resource": kind.value},
            public_data={"resource": kind.value},
        )


@ActionRegistry.register
class PlaceMerchant(FollowUpAction):
    """Merchant: place the merchant on a land hex next to one of your buildings."""
    kind = "placeMerchant"
    prompt = "place the merchant"
    params_model = HexParams

    def apply(self, referee: "Referee") -> ActionOutcome:
        hex_coordinate = self.params.hex.to_coordinate()
        tile = referee.board.tile_at(hex_coordinate)
        if tile is None or tile.resource is None:
            raise ActionRejected("The merchant must stand on a producing land hex")
        if self.player_id not in referee.board.owners_on_hex(hex_coordinate):
            raise ActionRejected("The merchant must be next to one of your buildings")
        previous = referee.merchant_owner
        referee.set_merchant(self.player_id, hex_coordinate)
        data = {
            "hex": encode_hex(hex_coordinate),
            "resource": tile.resource.value,
            "previousOwner": previous,
        }
        return ActionOutcome(
            f"Merchant placed; you trade {tile.resource.value} 2:1",
            f"Player {self.player_id} placed the merchant",
            data=data,
            public_data=data,
        )


@ActionRegistry.register
class RemoveRoad(FollowUpAction):
    """Diplomat: remove an open road. Removing your own lets you place it again."""
    kind = "removeRoad"
    prompt = "choose an open road to remove"
    params_model = PathParams

    def __init__(self, player_id: int):
        super().__init__(player_id)
        self.replace = False

    def apply(self, referee: "Referee") -> ActionOutcome:
        path = self.params.path
        owner = referee.board.road_owner(path)
        if owner is None:
            raise ActionRejected("There is no road on that path")
        if not referee.board.is_open_road(path):
            raise ActionRejected("Only an open road can be removed")
        referee.board.remove_road(path)
        referee.player(owner).roads_left += 1
        self.replace = owner == self.player_id
        return ActionOutcome(
            "Road removed" + ("; place it again" if self.replace else ""),
            f"Player {self.player_id} removed a road of player {owner}",
            data={"owner": owner},
            public_data={"owner": owner},
        )

    def after_resolved(self, referee: "Referee"):
        if self.replace:
            referee.add_urgent_follow_up([PlaceRoad(self.player_id)])


@ActionRegistry.register
class DeserterTarget(FollowUpAction):
    """Deserter: remove one of an opponent's knights."""
    kind = "deserterTarget"
    prompt = "choose an opponent's knight to desert"
    params_model = DeserterParams

    def apply(self, referee: "Referee") -> ActionOutcome:
        target = _opponent(referee, self.player_id, self.params.target_player)
        coordinate = self.params.coordinate.to_coordinate()
        knight = target.knight_at(coordinate)
        if knight is None:
            raise ActionRejected(f"Player {target.id} has no knight there")
        target.knights.remove(knight)
        data = {"targetPlayer": target.id, "level": knight.level.strength}
        return ActionOutcome(
            f"A knight of player {target.id} deserted",
            f"Player {self.player_id} made a knight of player {target.id} desert",
            data=data,
            public_data=data,
        )


@ActionRegistry.register
class DisplaceKnight(FollowUpAction):
    """Intrigue: drive off an opponent's knight touching one of your roads."""
    kind = "displaceKnight"
    prompt = "choose an opponent's knight next to your road"
    params_model = CoordinateParams

    def apply(self, referee: "Referee") -> ActionOutcome:
        coordinate = self.params.intersection
        knight = referee.knight_at(coordinate)
        if knight is None or knight.owner == self.player_id:
            raise ActionRejected("There is no opponent knight at that intersection")
        if not referee.board.touches_own_road(coordinate, self.player_id):
            raise ActionRejected("The knight must stand next to one of your roads")
        referee.expansion_player(knight.owner).knights.remove(knight)
        data = {"targetPlayer": knight.owner}
        return ActionOutcome(
            f"Displaced a knight of player {knight.owner}",
            f"Player {self.player_id} displaced a knight of player {knight.owner}",
            data=data,
            public_data=data,
        )


@ActionRegistry.register
class StealProgressCard(FollowUpAction):
    """Spy: take a random progress card from an opponent."""
    kind = "stealProgressCard"
    prompt = "choose a player to spy on"
    params_model = TargetPlayerParams

    def apply(self, referee: "Referee") -> ActionOutcome:
        target = _opponent(referee, self.player_id, self.params.target_player)
        if not target.progress_cards:
            raise ActionRejected(f"Player {target.id} holds no progress cards")
        actor = referee.expansion_player(self.player_id)
        card = sample_units(referee.rng, target.progress_cards, 1)[0]
        target.progress_cards.remove(card)
        actor.progress_cards.append(card)
        outcome = ActionOutcome(
            f"You stole {card.info.name} from player {target.id}",
            f"Player {actor.id} stole a progress card from player {target.id}",
            data={"targetPlayer": target.id, "card": card.value},
            public_data={"targetPlayer": target.id},
        )
        outcome.private[target.id] = ActionResponse(
            True, f"Player {actor.id} stole your {card.info.name}", {"card": card.value}
        )
        return outcome


@ActionRegistry.register
class SwapHexNumbers(FollowUpAction):
    """Inventor: swap two number tokens."""
    kind = "swapHexNumbers"
    prompt = "choose two hexes to swap numbers"
    params_model = SwapHexParams

    def apply(self, referee: "Referee") -> ActionOutcome:
        first, second = self.params.hex1.to_coordinate(), self.params.hex2.to_coordinate()
        try:
            referee.board.swap_roll_numbers(first, second)
        except ValueError as exc:
            raise ActionRejected(str(exc))
        data: Dict[str, Any] = {
            "hex1": {**encode_hex(first), "number": referee.board.tile_at(first).number},
            "hex2": {**encode_hex(second), "number": referee.board.tile_at(second).number},
        }
        return ActionOutcome(
            "Numbers swapped",
            f"Player {self.player_id} swapped two number tokens",
            data=data,
            public_data=data,
        )
