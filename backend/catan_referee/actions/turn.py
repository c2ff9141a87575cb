"""
Turn flow: setup placement, dice, discards, the robber and ending the turn.
"""
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from ..board import PathCoordinate
from ..errors import ActionRejected
from ..improvements import Track
from ..ledger import RESOURCES, Amount
from ..params import CoordinateParams, DropCardsParams, MoveRobberParams, PathParams
from ..progress import ProgressCard
from ..serialization import encode_hex
from ..transfers import steal_random_cards
from .base import Action, ActionOutcome, ActionResponse, FollowUpAction
from .registry import ActionRegistry

if TYPE_CHECKING:
    from ..referee import Referee

# Event die faces that open a progress-card gate; the others advance the ship
EVENT_GATES = {4: Track.TRADE, 5: Track.POLITICS, 6: Track.SCIENCE}


@ActionRegistry.register
class SetupSettlement(FollowUpAction):
    """Free settlement during initial placement."""
    kind = "setupSettlement"
    prompt = "place a starting settlement"
    params_model = CoordinateParams

    def apply(self, referee: "Referee") -> ActionOutcome:
        player = referee.player(self.player_id)
        coordinate = self.params.intersection
        if not referee.board.has_intersection(coordinate):
            raise ActionRejected("That intersection is not on the board")
        if referee.is_occupied(coordinate) or not referee.board.satisfies_distance_rule(coordinate):
            raise ActionRejected("Settlements must be at least two paths away from other buildings")

        referee.board.place_settlement(coordinate, player.id)
        player.settlements_left -= 1
        gained: Dict[str, int] = {}
        if referee.is_second_setup_round():
            for tile in referee.board.tiles_touching(coordinate):
                resource = tile.resource
                if resource is not None and referee.bank.can_supply(resource, 1):
                    referee.bank.take(resource, 1)
                    player.hand.add(resource, 1)
                    gained[resource.value] = gained.get(resource.value, 0) + 1
        self.placed = coordinate
        return ActionOutcome(
            "Settlement placed" + (f"; received {gained}" if gained else ""),
            f"Player {player.id} placed a starting settlement",
            data={"resources": gained},
        )

    def after_resolved(self, referee: "Referee"):
        referee.add_urgent_follow_up([SetupRoad(self.player_id, self.placed)])


@ActionRegistry.register
class SetupRoad(FollowUpAction):
    """Free road attached to the settlement just placed. Ends the setup turn."""
    kind = "setupRoad"
    prompt = "place a starting road next to your new settlement"
    params_model = PathParams

    def __init__(self, player_id: int, anchor=None):
        super().__init__(player_id)
        self.anchor = anchor

    def apply(self, referee: "Referee") -> ActionOutcome:
        player = referee.player(self.player_id)
        path: PathCoordinate = self.params.path
        if not referee.board.has_path(path) or path in referee.board.roads:
            raise ActionRejected("That path is not available")
        if self.anchor is not None and self.anchor not in path.ends:
            raise ActionRejected("The road must touch the settlement you just placed")
        referee.board.place_road(path, player.id)
        player.roads_left -= 1
        return ActionOutcome("Road placed", f"Player {player.id} placed a starting road")

    def after_resolved(self, referee: "Referee"):
        referee.start_next_turn()


def _draw_progress_cards(referee: "Referee", track: Track, red_die: int) -> Dict[int, ProgressCard]:
    """Every player whose level on the gate's track reaches the red die draws one card."""
    expansion = referee.require_expansion()
    start = referee.turn_order.index(referee.current_player_id)
    order = referee.turn_order[start:] + referee.turn_order[:start]
    drawn: Dict[int, ProgressCard] = {}
    for pid in order:
        player = referee.expansion_player(pid)
        if player.improvement_level(track) < red_die or not player.can_hold_progress_card:
            continue
        card = expansion.decks.draw(track)
        if card is None:
            break
        if card.is_victory_point:
            player.progress_points += 1  # revealed at once
        else:
            player.progress_cards.append(card)
        drawn[pid] = card
    return drawn


def queue_discards_and_robber(referee: "Referee", roller_id: int) -> Dict[int, Amount]:
    """After a 7: one batch of discards for everyone over their limit, then the robber."""
    drops: List[DropCards] = []
    owed: Dict[int, Amount] = {}
    for player in referee.players_in_order():
        count = player.card_count()
        if count > player.hand_limit:
            amount = count / 2 if referee.settings.is_decimal else int(count // 2)
            drops.append(DropCards(player.id, amount))
            owed[player.id] = amount
    referee.add_follow_up(drops)
    referee.add_follow_up([MoveRobber(roller_id)])
    return owed


@ActionRegistry.register
class RollDice(FollowUpAction):
    """The roll owed at the start of every turn."""
    kind = "rollDice"
    prompt = "roll the dice"
    is_dice_roll = True

    def apply(self, referee: "Referee") -> ActionOutcome:
        from ..referee import RollResult

        dice = referee.take_overridden_dice()
        red, white = dice if dice is not None else (referee.roll_die(), referee.roll_die())
        roll = RollResult(red, white)
        data: Dict[str, Any] = {"redDie": red, "whiteDie": white, "total": roll.total}
        drawn: Dict[int, ProgressCard] = {}

        if referee.is_expansion:
            expansion = referee.require_expansion()
            roll.event = referee.roll_die()
            data["eventDie"] = roll.event
            gate = EVENT_GATES.get(roll.event)
            if gate is not None:
                data["gate"] = gate.value
                drawn = _draw_progress_cards(referee, gate, red)
                data["progressDraws"] = sorted(drawn)
                data["revealedPoints"] = sorted(pid for pid, card in drawn.items() if card.is_victory_point)
            elif expansion.barbarians.advance():
                data["barbarianAttack"] = referee.resolve_barbarians().to_dict()
            data["barbarianPosition"] = expansion.barbarians.position
        referee.last_roll = roll

        if roll.total == 7:
            data["discards"] = queue_discards_and_robber(referee, self.player_id)
        else:
            data["production"] = referee.produce_resources(roll.total)

        message = f"You rolled {roll.total}"
        public_message = f"Player {self.player_id} rolled {roll.total}"
        outcome = ActionOutcome(message, public_message, data=data, public_data=data)
        for pid, card in drawn.items():
            base = message if pid == self.player_id else public_message
            outcome.private[pid] = ActionResponse(
                True, f"{base}. You drew {card.info.name}", {**data, "drawnCard": card.value}
            )
        return outcome


@ActionRegistry.register
class DropCards(FollowUpAction):
    """Discard half a hand after a 7."""
    kind = "dropCards"
    prompt = "discard cards"
    params_model = DropCardsParams

    def __init__(self, player_id: int, amount: Amount):
        super().__init__(player_id)
        self.amount = amount

    def describe(self) -> Dict[str, Any]:
        return {"actionName": self.kind, "actionData": {"prompt": self.prompt, "numCards": self.amount}}

    def apply(self, referee: "Referee") -> ActionOutcome:
        player = referee.player(self.player_id)
        cards = self.params.cards
        if not referee.settings.is_decimal and any(amount != int(amount) for amount in cards.values()):
            raise ActionRejected("Only whole cards can be discarded")
        for kind in cards:
            if kind not in player.hand.counts:
                raise ActionRejected(f"You cannot hold {kind.value}")
        total = sum(cards.values())
        if abs(total - self.amount) > 1e-9:
            raise ActionRejected(f"You must discard exactly {self.amount} cards, not {total}")
        if not player.hand.can_afford(cards):
            raise ActionRejected("You do not hold those cards")
        player.hand.pay(cards)
        referee.bank.collect(cards)
        return ActionOutcome(
            f"Discarded {self.amount} cards",
            f"Player {player.id} discarded {self.amount} cards",
            data={"cards": {k.value: v for k, v in cards.items()}},
        )


@ActionRegistry.register
class MoveRobber(FollowUpAction):
    """Move the robber and rob one player, or (as the bishop) everyone on the hex."""
    kind = "moveRobber"
    prompt = "move the robber"
    params_model = MoveRobberParams

    def __init__(self, player_id: int, bishop: bool = False):
        super().__init__(player_id)
        self.bishop = bishop

    def describe(self) -> Dict[str, Any]:
        return {"actionName": self.kind, "actionData": {"prompt": self.prompt, "bishop": self.bishop}}

    def apply(self, referee: "Referee") -> ActionOutcome:
        board = referee.board
        actor = referee.player(self.player_id)
        target = self.params.hex.to_coordinate()
        if not board.is_land(target):
            raise ActionRejected("The robber must be placed on a land hex")
        if target == board.robber:
            raise ActionRejected("The robber must move to a different hex")
        victims = [pid for pid in board.owners_on_hex(target) if pid != actor.id]

        if self.bishop:
            board.move_robber(target)
            taken = {}
            for pid in victims:
                stolen = steal_random_cards(referee.rng, actor, referee.player(pid), 1, RESOURCES)
                if stolen:
                    taken[pid] = stolen[0]
            outcome = ActionOutcome(
                f"Robber moved; took {len(taken)} resources",
                f"Player {actor.id} moved the robber and took a resource from players {sorted(taken)}",
                data={"hex": encode_hex(target), "stolen": {pid: k.value for pid, k in taken.items()}},
                public_data={"hex": encode_hex(target)},
            )
            for pid, kind in taken.items():
                outcome.private[pid] = ActionResponse(
                    True, f"Player {actor.id} took one {kind.value} from you", {"hex": encode_hex(target)}
                )
            return outcome

        victim_id: Optional[int] = self.params.victim
        robbable = [pid for pid in victims if referee.player(pid).card_count() >= 1]
        if victim_id is None and robbable:
            raise ActionRejected(f"Choose a player to steal from: {robbable}")
        if victim_id is not None and victim_id not in victims:
            raise ActionRejected(f"Player {victim_id} has no building on that hex")

        board.move_robber(target)
        stolen = []
        if victim_id is not None:
            stolen = steal_random_cards(referee.rng, actor, referee.player(victim_id), 1)
        data = {"hex": encode_hex(target), "victim": victim_id}
        outcome = ActionOutcome(
            "Robber moved" + (f"; stole {stolen[0].value}" if stolen else ""),
            f"Player {actor.id} moved the robber" + (f" and stole from player {victim_id}" if stolen else ""),
            data={**data, "stolen": stolen[0].value if stolen else None},
            public_data=data,
        )
        if stolen:
            outcome.private[victim_id] = ActionResponse(
                True, f"Player {actor.id} stole one {stolen[0].value} from you", data
            )
        return outcome


@ActionRegistry.register
class EndTurn(Action):
    kind = "endTurn"

    def apply(self, referee: "Referee") -> ActionOutcome:
        referee.start_next_turn()
        next_player = referee.current_player_id
        return ActionOutcome(
            "Turn ended",
            f"Player {self.player_id} ended their turn; player {next_player} is up",
            data={"nextPlayer": next_player},
            public_data={"nextPlayer": next_player},
        )
