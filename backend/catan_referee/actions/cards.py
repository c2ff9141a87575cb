"""
Progress cards: the effect registry and the action that plays a card.

Each card has exactly one registered effect. An effect either resolves
completely or queues the follow-ups that finish it. Effects raise
ActionRejected before changing anything when the card cannot be used,
and the card goes back to the hand.
"""
from typing import TYPE_CHECKING, Callable, Dict

from ..board import TileType
from ..constants import FREE_ROADS, PRODUCTION_CARD_YIELD, SMITH_PROMOTIONS, WEDDING_GIFT
from ..errors import ActionRejected
from ..ledger import CARD_KINDS, COMMODITIES, MEDICINE_CITY_COST, RESOURCES, ResourceType
from ..params import ProgressCardParams
from ..player import ExpansionPlayer
from ..progress import ProgressCard
from ..transfers import steal_random_cards, threshold_amounts, threshold_transfer
from .base import Action, ActionOutcome
from .building import PlaceRoad
from .choices import (
    ChooseCommodity,
    ChooseDice,
    ChooseFleetResource,
    ChooseOpponentCards,
    ChooseResource,
    DeserterTarget,
    DisplaceKnight,
    PlaceMerchant,
    RemoveRoad,
    StealProgressCard,
    SwapHexNumbers,
)
from .city import check_wall_site, raise_wall
from .knights import promotion_cost
from .registry import ActionRegistry
from .turn import MoveRobber

if TYPE_CHECKING:
    from ..referee import Referee

ProgressEffect = Callable[["Referee", ExpansionPlayer], ActionOutcome]

PROGRESS_EFFECTS: Dict[ProgressCard, ProgressEffect] = {}


def progress_effect(card: ProgressCard):
    """Register the effect for one card."""
    def decorator(func: ProgressEffect) -> ProgressEffect:
        PROGRESS_EFFECTS[card] = func
        return func
    return decorator


def _queue(referee: "Referee", follow_up, message: str) -> ActionOutcome:
    referee.add_follow_up([follow_up])
    return ActionOutcome(message, message.replace("You", f"Player {follow_up.player_id}", 1))


# Trade


@progress_effect(ProgressCard.COMMERCIAL_HARBOR)
def _commercial_harbor(referee, player):
    # Only whole cards change hands, so fractional holdings never qualify
    partners = [o for o in referee.expansion_players() if o.id != player.id and o.hand.units(COMMODITIES)]
    if not partners or not player.hand.units(RESOURCES):
        raise ActionRejected("Nobody can trade a commodity for one of your resources")
    swaps = {}
    for opponent in partners:
        if not player.hand.units(RESOURCES):
            break
        got = steal_random_cards(referee.rng, player, opponent, 1, COMMODITIES)
        gave = steal_random_cards(referee.rng, opponent, player, 1, RESOURCES)
        swaps[opponent.id] = {"received": got[0].value, "gave": gave[0].value}
    return ActionOutcome(
        f"Swapped resources for commodities with players {sorted(swaps)}",
        f"Player {player.id} used a commercial harbor",
        data={"swaps": swaps},
    )


@progress_effect(ProgressCard.MASTER_MERCHANT)
def _master_merchant(referee, player):
    mine = referee.public_points(player.id)
    if not any(referee.public_points(o.id) > mine for o in referee.opponents(player.id)):
        raise ActionRejected("No player has more victory points than you")
    return _queue(referee, ChooseOpponentCards(player.id), "You may take 2 cards from a leading player")


@progress_effect(ProgressCard.MERCHANT)
def _merchant(referee, player):
    board = referee.board
    if not any(t.resource is not None for ic, _ in board.buildings_of(player.id) for t in board.tiles_touching(ic)):
        raise ActionRejected("You have no building next to a producing hex")
    return _queue(referee, PlaceMerchant(player.id), "You may place the merchant")


@progress_effect(ProgressCard.MERCHANT_FLEET)
def _merchant_fleet(referee, player):
    return _queue(referee, ChooseFleetResource(player.id), "You may choose a kind to trade 2:1")


@progress_effect(ProgressCard.RESOURCE_MONOPOLY)
def _resource_monopoly(referee, player):
    return _queue(referee, ChooseResource(player.id), "You may name a resource")


@progress_effect(ProgressCard.TRADE_MONOPOLY)
def _trade_monopoly(referee, player):
    return _queue(referee, ChooseCommodity(player.id), "You may name a commodity")


# Politics


@progress_effect(ProgressCard.BISHOP)
def _bishop(referee, player):
    return _queue(referee, MoveRobber(player.id, bishop=True), "You may move the robber as the bishop")


@progress_effect(ProgressCard.CONSTITUTION)
@progress_effect(ProgressCard.PRINTER)
def _victory_point(referee, player):
    player.progress_points += 1
    return ActionOutcome("You gained a victory point", f"Player {player.id} revealed a victory point card")


@progress_effect(ProgressCard.DESERTER)
def _deserter(referee, player):
    if not any(o.knights for o in referee.expansion_players() if o.id != player.id):
        raise ActionRejected("No opponent has a knight")
    return _queue(referee, DeserterTarget(player.id), "You may choose a knight to desert")


@progress_effect(ProgressCard.DIPLOMAT)
def _diplomat(referee, player):
    if not any(referee.board.is_open_road(p) for p in referee.board.roads):
        raise ActionRejected("There is no open road to remove")
    return _queue(referee, RemoveRoad(player.id), "You may remove an open road")


@progress_effect(ProgressCard.INTRIGUE)
def _intrigue(referee, player):
    targets = [
        k for o in referee.expansion_players() if o.id != player.id
        for k in o.knights if referee.board.touches_own_road(k.position, player.id)
    ]
    if not targets:
        raise ActionRejected("No opponent knight stands next to your roads")
    return _queue(referee, DisplaceKnight(player.id), "You may displace a knight")


@progress_effect(ProgressCard.SABOTEUR)
def _saboteur(referee, player):
    mine = referee.public_points(player.id)
    discarded = {}
    for opponent in referee.opponents(player.id):
        if referee.public_points(opponent.id) < mine:
            continue
        count = opponent.card_count()
        amount = count / 2 if referee.settings.is_decimal else int(count // 2)
        picked = threshold_amounts(opponent.hand, amount, CARD_KINDS)
        opponent.hand.pay(picked)
        referee.bank.collect(picked)
        if picked:
            discarded[opponent.id] = sum(picked.values())
    return ActionOutcome(
        f"Players {sorted(discarded)} discarded half their hands",
        f"Player {player.id} played the saboteur",
        data={"discarded": discarded},
        public_data={"discarded": discarded},
    )


@progress_effect(ProgressCard.SPY)
def _spy(referee, player):
    if not any(o.progress_cards for o in referee.expansion_players() if o.id != player.id):
        raise ActionRejected("No opponent holds a progress card")
    return _queue(referee, StealProgressCard(player.id), "You may spy on a player")


@progress_effect(ProgressCard.WARLORD)
def _warlord(referee, player):
    for knight in player.knights:
        knight.activate()
    return ActionOutcome(
        f"All your knights are active; strength {player.active_strength}",
        f"Player {player.id} activated all their knights",
        data={"activeStrength": player.active_strength},
    )


@progress_effect(ProgressCard.WEDDING)
def _wedding(referee, player):
    mine = referee.public_points(player.id)
    donors = [o for o in referee.opponents(player.id) if referee.public_points(o.id) > mine]
    given = threshold_transfer(player, donors, WEDDING_GIFT)
    summary = {pid: {k.value: v for k, v in cards.items()} for pid, cards in given.items()}
    return ActionOutcome(
        f"Wedding gifts received from players {sorted(given)}",
        f"Player {player.id} held a wedding",
        data={"gifts": summary},
    )


# Science


@progress_effect(ProgressCard.ALCHEMIST)
def _alchemist(referee, player):
    if not referee.has_pending_roll(player.id):
        raise ActionRejected("The alchemist must be played before rolling")
    referee.add_urgent_follow_up([ChooseDice(player.id)])
    return ActionOutcome("Choose the dice values", f"Player {player.id} played the alchemist")


@progress_effect(ProgressCard.CRANE)
def _crane(referee, player):
    if player.crane_pending:
        raise ActionRejected("A crane discount is already waiting")
    player.crane_pending = True
    return ActionOutcome("Your next improvement costs 1 commodity less", f"Player {player.id} played the crane")


@progress_effect(ProgressCard.ENGINEER)
def _engineer(referee, player):
    for city in referee.board.cities_of(player.id):
        try:
            check_wall_site(referee, player, city)
        except ActionRejected:
            continue
        raise_wall(referee, player, city)
        return ActionOutcome(
            "Free city wall built", f"Player {player.id} built a city wall",
            data={"cityWalls": player.city_walls},
        )
    raise ActionRejected("You have no city that can take another wall")


@progress_effect(ProgressCard.INVENTOR)
def _inventor(referee, player):
    return _queue(referee, SwapHexNumbers(player.id), "You may swap two number tokens")


def _production_card(referee, player, tile_type: TileType, resource: ResourceType):
    board = referee.board
    tiles = {
        t.coordinate for ic, _ in board.buildings_of(player.id)
        for t in board.tiles_touching(ic) if t.tile_type is tile_type
    }
    amount = min(PRODUCTION_CARD_YIELD * len(tiles), referee.bank[resource])
    if amount:
        referee.bank.take(resource, amount)
        player.hand.add(resource, amount)
    return ActionOutcome(
        f"You took {amount} {resource.value}",
        f"Player {player.id} took {amount} {resource.value}",
        data={"resource": resource.value, "amount": amount},
        public_data={"resource": resource.value, "amount": amount},
    )


@progress_effect(ProgressCard.IRRIGATION)
def _irrigation(referee, player):
    return _production_card(referee, player, TileType.FIELDS, ResourceType.WHEAT)


@progress_effect(ProgressCard.MINING)
def _mining(referee, player):
    return _production_card(referee, player, TileType.MOUNTAINS, ResourceType.ORE)


@progress_effect(ProgressCard.MEDICINE)
def _medicine(referee, player):
    if player.medicine_pending:
        raise ActionRejected("A medicine discount is already waiting")
    if player.cities_left <= 0 or not referee.board.settlements_of(player.id):
        raise ActionRejected("You have no settlement to upgrade")
    if not player.hand.can_afford(MEDICINE_CITY_COST):
        raise ActionRejected("Medicine needs 1 ore and 1 wheat")
    player.medicine_pending = True
    return ActionOutcome("Your next city costs 1 ore and 1 wheat", f"Player {player.id} played medicine")


@progress_effect(ProgressCard.ROAD_BUILDING)
def _road_building(referee, player):
    if player.roads_left < FREE_ROADS or not referee.board.legal_road_paths(player.id):
        raise ActionRejected("You have nowhere to build two roads")
    for _ in range(FREE_ROADS):
        referee.add_follow_up([PlaceRoad(player.id)])
    return ActionOutcome("Place two free roads", f"Player {player.id} played road building")


@progress_effect(ProgressCard.SMITH)
def _smith(referee, player):
    promoted = []
    for knight in sorted(player.knights, key=lambda k: (k.level.value, k.position)):
        if len(promoted) >= SMITH_PROMOTIONS:
            break
        try:
            promotion_cost(player, knight)
        except ActionRejected:
            continue
        knight.promote()
        promoted.append(knight.level.strength)
    if not promoted:
        raise ActionRejected("None of your knights can be promoted")
    return ActionOutcome(
        f"Promoted {len(promoted)} knights",
        f"Player {player.id} promoted {len(promoted)} knights",
        data={"levels": promoted},
    )


@ActionRegistry.register
class PlayProgressCard(Action):
    """Play a progress card from hand. Only the alchemist is played before rolling."""
    kind = "playProgressCard"
    params_model = ProgressCardParams
    requires_expansion = True

    def can_run_before_roll(self) -> bool:
        return self.params.card is ProgressCard.ALCHEMIST

    def apply(self, referee: "Referee") -> ActionOutcome:
        player = referee.expansion_player(self.player_id)
        card = self.params.card
        if card not in player.progress_cards:
            raise ActionRejected(f"You do not hold {card.info.name}")
        index = player.progress_cards.index(card)
        player.progress_cards.pop(index)
        try:
            outcome = PROGRESS_EFFECTS[card](referee, player)
        except ActionRejected:
            player.progress_cards.insert(index, card)
            raise
        outcome.data = {**(outcome.data or {}), "card": card.value}
        outcome.public_data = {**(outcome.public_data or {}), "card": card.value}
        outcome.public_message = f"{outcome.public_message} ({card.info.name})"
        return outcome
