"""
The referee: owner of one session's mutable state and the only way actions
reach it.
"""
import random
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from .actions.base import ActionOutcome, ActionResponse, FollowUpAction, Responses
from .board import Board, HexCoordinate, IntersectionCoordinate
from .constants import (
    AWARD_POINTS,
    DEFAULT_TRADE_RATE,
    DEVELOPMENT_CARD_COUNTS,
    GENERIC_PORT_RATE,
    LARGEST_ARMY_MIN,
    LONGEST_ROAD_MIN,
    MERCHANT_FLEET_RATE,
    MERCHANT_RATE,
    PLAYER_COLORS,
    SPECIFIC_PORT_RATE,
    TRADING_HOUSE_LEVEL,
    TRADING_HOUSE_RATE,
)
from .errors import ActionRejected, ExpansionNotEnabledError, InvalidGameStateError, UnknownPlayerError
from .improvements import MetropolisContest, MetropolisRegistry, Track, assign_metropolis_cities
from .knights import AttackOutcome, BarbarianTrack, KnightPiece, resolve_barbarian_attack
from .ledger import COMMODITIES, Bank, CardKind, Commodity, ResourceType
from .logging_config import GameEventLogger
from .player import ExpansionPlayer, Player
from .progress import ProgressDecks
from .settings import GameSettings


class GameStatus(Enum):
    """Session lifecycle."""
    WAITING = "waiting"
    SETUP = "setup"
    PROGRESS = "progress"
    FINISHED = "finished"


@dataclass
class ExpansionState:
    """Session-wide Cities & Knights state."""
    barbarians: BarbarianTrack
    metropolis: MetropolisRegistry
    decks: ProgressDecks


@dataclass
class RollResult:
    red: int
    white: int
    event: Optional[int] = None

    @property
    def total(self) -> int:
        return self.red + self.white


class Referee:
    """State machine for one game session.

    Randomness comes from the injected ``rng`` so tests can script it. The
    follow-up queue is a list of batches; only the head batch is pending at
    any time, and within it each player sees their own entry.
    """

    def __init__(
        self,
        settings: Optional[GameSettings] = None,
        board: Optional[Board] = None,
        rng: Optional[random.Random] = None,
        game_id: Optional[str] = None,
    ):
        self.settings = settings or GameSettings()
        self.board = board or Board.standard()
        self.rng = rng or random.Random()
        self.game_id = game_id or str(uuid.uuid4())
        self.events = GameEventLogger(self.game_id)

        self.status = GameStatus.WAITING
        self.players: Dict[int, Player] = {}
        self.turn_order: List[int] = []
        self.current_index: int = -1
        self.turn_number: int = 0
        self.setup_sequence: List[int] = []
        self.setup_index: int = -1
        self.winner: Optional[int] = None

        self.bank = Bank(with_commodities=self.settings.is_cities_and_knights)
        self.development_deck: List[str] = []
        if not self.settings.is_cities_and_knights:
            for card, count in DEVELOPMENT_CARD_COUNTS.items():
                self.development_deck.extend([card] * count)
            self.rng.shuffle(self.development_deck)

        self.longest_road_holder: Optional[int] = None
        self.largest_army_holder: Optional[int] = None
        self.merchant_owner: Optional[int] = None
        self.merchant_hex: Optional[HexCoordinate] = None
        self.last_roll: Optional[RollResult] = None

        self._follow_ups: List[List[FollowUpAction]] = []
        self._overridden_dice: Optional[Tuple[int, int]] = None

        self.expansion: Optional[ExpansionState] = None
        if self.settings.is_cities_and_knights:
            self.expansion = ExpansionState(
                barbarians=BarbarianTrack(),
                metropolis=MetropolisRegistry(),
                decks=ProgressDecks(self.rng),
            )

    # Players

    @property
    def is_expansion(self) -> bool:
        return self.expansion is not None

    @property
    def is_finished(self) -> bool:
        return self.status is GameStatus.FINISHED

    def add_player(self, name: str, color: Optional[str] = None) -> Player:
        """Seat a new player. Only possible while waiting for players."""
        if self.status is not GameStatus.WAITING:
            raise InvalidGameStateError("Players can only join before the game starts")
        if len(self.players) >= self.settings.num_players:
            raise InvalidGameStateError(f"The session is full ({self.settings.num_players} players)")
        player_id = len(self.players)
        player_cls = ExpansionPlayer if self.is_expansion else Player
        player = player_cls(id=player_id, name=name, color=color or PLAYER_COLORS[player_id % len(PLAYER_COLORS)])
        self.players[player_id] = player
        self.turn_order.append(player_id)
        self.events.log_event("player_joined", player_id=player_id, name=name)
        return player

    def player(self, player_id: int) -> Player:
        try:
            return self.players[player_id]
        except (KeyError, TypeError):
            raise UnknownPlayerError(player_id)

    def expansion_player(self, player_id: int) -> ExpansionPlayer:
        """The Cities & Knights view of a player; fatal on a base-game session."""
        player = self.player(player_id)
        if not isinstance(player, ExpansionPlayer):
            raise ExpansionNotEnabledError("Cities & Knights is not enabled for this session")
        return player

    def require_expansion(self) -> ExpansionState:
        if self.expansion is None:
            raise ExpansionNotEnabledError("Cities & Knights is not enabled for this session")
        return self.expansion

    def players_in_order(self) -> List[Player]:
        return [self.players[pid] for pid in self.turn_order]

    def expansion_players(self) -> List[ExpansionPlayer]:
        self.require_expansion()
        return [self.expansion_player(pid) for pid in self.turn_order]

    def opponents(self, player_id: int) -> List[Player]:
        """Everyone else, in session order."""
        return [p for p in self.players_in_order() if p.id != player_id]

    @property
    def current_player_id(self) -> Optional[int]:
        if self.status is GameStatus.SETUP:
            return self.setup_sequence[self.setup_index]
        if self.current_index < 0:
            return None
        return self.turn_order[self.current_index]

    def is_second_setup_round(self) -> bool:
        return self.status is GameStatus.SETUP and self.setup_index >= len(self.turn_order)

    # Turns

    def _set_status(self, status: GameStatus):
        self.events.log_event("status_changed", previous=self.status.value, status=status.value)
        self.status = status

    def start_next_turn(self):
        """Advance the session: start the game, the next setup placement or the next turn."""
        from .actions.turn import RollDice, SetupSettlement

        if self.status is GameStatus.FINISHED:
            raise InvalidGameStateError("The game is over")
        if self.status is GameStatus.WAITING:
            if len(self.players) < self.settings.num_players:
                raise InvalidGameStateError(
                    f"Waiting for players: {len(self.players)} of {self.settings.num_players} joined"
                )
            if self.settings.initial_placement:
                self.setup_sequence = self.turn_order + self.turn_order[::-1]
                self._set_status(GameStatus.SETUP)
            else:
                self._set_status(GameStatus.PROGRESS)

        if self.status is GameStatus.SETUP:
            self.setup_index += 1
            if self.setup_index < len(self.setup_sequence):
                player_id = self.setup_sequence[self.setup_index]
                self.add_follow_up([SetupSettlement(player_id)])
                self.events.log_event("setup_turn", player_id=player_id, placement=self.setup_index)
                return
            self._set_status(GameStatus.PROGRESS)

        if self.current_index >= 0:
            self.players[self.turn_order[self.current_index]].end_turn()
        self.current_index = (self.current_index + 1) % len(self.turn_order)
        self.turn_number += 1
        player = self.players[self.turn_order[self.current_index]]
        if isinstance(player, ExpansionPlayer):
            player.start_turn()
        self.add_follow_up([RollDice(player.id)])
        self.events.log_event("turn_started", player_id=player.id, turn=self.turn_number)

    def check_ordinary_action(self, player_id: int, before_roll: bool = False):
        """Reject an ordinary action that is not allowed right now."""
        if self.status is GameStatus.FINISHED:
            raise ActionRejected("The game is over")
        if self.status is not GameStatus.PROGRESS:
            raise ActionRejected("The game has not started yet")
        if self.current_player_id != player_id:
            raise ActionRejected("It is not your turn")
        roll_pending = self.has_pending_roll(player_id)
        blocking = [f for f in self.pending_follow_ups() if not (f.is_dice_roll and f.player_id == player_id)]
        if blocking:
            waiting = blocking[0]
            raise ActionRejected(f"Waiting for player {waiting.player_id} to {waiting.prompt}")
        if roll_pending and not before_roll:
            raise ActionRejected("You must roll the dice first")
        if before_roll and not roll_pending:
            raise ActionRejected("That can only be done before rolling the dice")

    # Follow-up queue

    def add_follow_up(self, batch: Sequence[FollowUpAction]):
        """Queue a batch; batches resolve in order, entries within one in any order."""
        batch = list(batch)
        if batch:
            self._follow_ups.append(batch)
            self.events.log_debug("follow_up_queued", follow_ups=[(f.kind, f.player_id) for f in batch])

    def add_urgent_follow_up(self, batch: Sequence[FollowUpAction]):
        """Queue a batch ahead of everything already pending."""
        batch = list(batch)
        if batch:
            self._follow_ups.insert(0, batch)
            self.events.log_debug("follow_up_queued", follow_ups=[(f.kind, f.player_id) for f in batch], urgent=True)

    def remove_follow_up(self, follow_up: FollowUpAction):
        for batch in self._follow_ups:
            if any(f is follow_up for f in batch):
                batch[:] = [f for f in batch if f is not follow_up]
                break
        else:
            raise ValueError(f"{follow_up!r} is not queued")
        self._follow_ups = [batch for batch in self._follow_ups if batch]
        self.events.log_debug("follow_up_resolved", follow_up=follow_up.kind, player_id=follow_up.player_id)

    def pending_follow_ups(self) -> List[FollowUpAction]:
        """Entries of the head batch, the only ones that can be resolved now."""
        return list(self._follow_ups[0]) if self._follow_ups else []

    def queued_follow_ups(self) -> List[List[FollowUpAction]]:
        return [list(batch) for batch in self._follow_ups]

    def next_follow_up(self, player_id: int) -> Optional[FollowUpAction]:
        """The decision this player owes right now, if any."""
        return next((f for f in self.pending_follow_ups() if f.player_id == player_id), None)

    def is_follow_up_pending(self, follow_up: FollowUpAction) -> bool:
        return any(f is follow_up for f in self.pending_follow_ups())

    def has_pending_roll(self, player_id: int) -> bool:
        return any(f.is_dice_roll and f.player_id == player_id for f in self.pending_follow_ups())

    # Dice

    def set_overridden_dice(self, red: int, white: int):
        """Fix the next roll. Consumed by the very next roll only."""
        self._overridden_dice = (red, white)

    def take_overridden_dice(self) -> Optional[Tuple[int, int]]:
        """Read and clear the override in one step."""
        dice, self._overridden_dice = self._overridden_dice, None
        return dice

    def roll_die(self) -> int:
        return self.rng.randint(1, 6)

    # Responses

    def reject(self, player_id: int, kind: str, message: str) -> Responses:
        """A refusal is only reported to the player who asked."""
        self.events.log_action(player_id, kind, False, message)
        return {player_id: ActionResponse(False, message)}

    def complete(self, player_id: int, kind: str, outcome: ActionOutcome) -> Responses:
        """Recompute derived state after a successful effect and fan the result out."""
        self.update_awards()
        self.check_winner()
        self.events.log_action(player_id, kind, True, outcome.message, outcome.data)
        responses: Responses = {}
        for pid in self.turn_order:
            if pid in outcome.private:
                responses[pid] = outcome.private[pid]
            elif pid == player_id:
                responses[pid] = ActionResponse(True, outcome.message, outcome.data)
            else:
                responses[pid] = ActionResponse(True, outcome.public_message, outcome.public_data)
        return responses

    # Victory points and awards

    def public_points(self, player_id: int) -> int:
        player = self.player(player_id)
        points = len(self.board.settlements_of(player_id)) + 2 * len(self.board.cities_of(player_id))
        if self.longest_road_holder == player_id:
            points += AWARD_POINTS
        if self.largest_army_holder == player_id:
            points += AWARD_POINTS
        if self.merchant_owner == player_id:
            points += 1
        if isinstance(player, ExpansionPlayer):
            points += self.expansion.metropolis.points(player_id)
            points += player.defender_points + player.progress_points
        return points

    def hidden_points(self, player_id: int) -> int:
        return self.player(player_id).hidden_points

    def total_points(self, player_id: int) -> int:
        return self.public_points(player_id) + self.hidden_points(player_id)

    def _award_holder(self, scores: Dict[int, int], holder: Optional[int], minimum: int) -> Optional[int]:
        best = max(scores.values(), default=0)
        if holder is not None and scores[holder] >= minimum and scores[holder] >= best:
            return holder
        leaders = [pid for pid in self.turn_order if scores[pid] == best]
        if best >= minimum and len(leaders) == 1:
            return leaders[0]
        return None

    def update_awards(self):
        """Recompute longest road and largest army holders."""
        roads = {pid: self.board.longest_road(pid) for pid in self.turn_order}
        armies = {pid: self.players[pid].knights_played for pid in self.turn_order}
        longest = self._award_holder(roads, self.longest_road_holder, LONGEST_ROAD_MIN)
        largest = self._award_holder(armies, self.largest_army_holder, LARGEST_ARMY_MIN)
        if longest != self.longest_road_holder:
            self.events.log_event("longest_road_changed", previous=self.longest_road_holder, holder=longest)
        if largest != self.largest_army_holder:
            self.events.log_event("largest_army_changed", previous=self.largest_army_holder, holder=largest)
        self.longest_road_holder = longest
        self.largest_army_holder = largest

    def check_winner(self) -> Optional[int]:
        """Finish the game the first time someone reaches the threshold."""
        if self.winner is not None or self.status is not GameStatus.PROGRESS:
            return self.winner
        start = max(self.current_index, 0)
        order = self.turn_order[start:] + self.turn_order[:start]
        for pid in order:
            if self.total_points(pid) >= self.settings.victory_points:
                self.winner = pid
                self._set_status(GameStatus.FINISHED)
                self._follow_ups = []  # nothing is owed once the game is decided
                self.events.log_event("game_won", player_id=pid, points=self.total_points(pid))
                break
        return self.winner

    # Bank trade rates

    def trade_rates(self, player_id: int) -> Dict[CardKind, int]:
        """Current bank rates, always computed from the present state."""
        player = self.player(player_id)
        rates = {kind: DEFAULT_TRADE_RATE for kind in player.hand.kinds()}
        ports = self.board.ports_of(player_id)
        if ResourceType.WILDCARD in ports:
            rates = {kind: min(rate, GENERIC_PORT_RATE) for kind, rate in rates.items()}
        for port in ports:
            if port in rates:
                rates[port] = min(rates[port], SPECIFIC_PORT_RATE)
        if self.merchant_owner == player_id and self.merchant_hex is not None:
            resource = self.board.tile_at(self.merchant_hex).resource
            if resource in rates:
                rates[resource] = min(rates[resource], MERCHANT_RATE)
        if isinstance(player, ExpansionPlayer) and player.improvement_level(Track.TRADE) >= TRADING_HOUSE_LEVEL:
            for commodity in COMMODITIES:
                rates[commodity] = min(rates[commodity], TRADING_HOUSE_RATE)
        if player.fleet_kind is not None and player.fleet_kind in rates:
            rates[player.fleet_kind] = min(rates[player.fleet_kind], MERCHANT_FLEET_RATE)
        return rates

    # Merchant

    def set_merchant(self, player_id: int, hex_coordinate: HexCoordinate):
        self.player(player_id)
        self.merchant_owner = player_id
        self.merchant_hex = hex_coordinate

    # Production

    def produce_resources(self, roll: int) -> Dict[int, Dict[str, int]]:
        """Hand out production for a roll.

        If the bank cannot cover everyone's share of a kind, nobody gets it.
        """
        demand: Dict[int, Dict[CardKind, int]] = {}
        for tile in self.board.tiles.values():
            if tile.number != roll or tile.resource is None or tile.coordinate == self.board.robber:
                continue
            for corner in tile.coordinate.corners():
                building = self.board.building_at(corner)
                if building is None:
                    continue
                gains = demand.setdefault(building.owner, {})
                if building.is_city:
                    commodity = Commodity.from_resource(tile.resource) if self.is_expansion else None
                    if commodity is not None:
                        gains[tile.resource] = gains.get(tile.resource, 0) + 1
                        gains[commodity] = gains.get(commodity, 0) + 1
                    else:
                        gains[tile.resource] = gains.get(tile.resource, 0) + 2
                else:
                    gains[tile.resource] = gains.get(tile.resource, 0) + 1

        totals: Dict[CardKind, int] = {}
        for gains in demand.values():
            for kind, amount in gains.items():
                totals[kind] = totals.get(kind, 0) + amount
        short = {kind for kind, amount in totals.items() if not self.bank.can_supply(kind, amount)}
        if short:
            self.events.log_event("bank_shortage", kinds=[k.value for k in short], roll=roll)

        produced: Dict[int, Dict[str, int]] = {}
        for pid in self.turn_order:
            for kind, amount in demand.get(pid, {}).items():
                if kind in short:
                    continue
                self.bank.take(kind, amount)
                self.players[pid].hand.add(kind, amount)
                produced.setdefault(pid, {})[kind.value] = amount
        return produced

    # Knights

    def knight_at(self, position: IntersectionCoordinate) -> Optional[KnightPiece]:
        if not self.is_expansion:
            return None
        for player in self.expansion_players():
            knight = player.knight_at(position)
            if knight is not None:
                return knight
        return None

    def is_occupied(self, position: IntersectionCoordinate) -> bool:
        return self.board.building_at(position) is not None or self.knight_at(position) is not None

    def resolve_barbarians(self) -> AttackOutcome:
        """Resolve an attack; metropolis cities cannot be pillaged."""
        protected = set(self.metropolis_cities())
        outcome = resolve_barbarian_attack(self.expansion_players(), self.board, protected)
        self.events.log_event("barbarian_attack", **outcome.to_dict())
        return outcome

    # Metropolis

    def contest_metropolis(self, track: Track, player_id: int) -> MetropolisContest:
        """Challenge for a track's metropolis; needs a city not already hosting one."""
        expansion = self.require_expansion()
        player = self.expansion_player(player_id)
        held = expansion.metropolis.held_by(player_id)
        if track not in held and len(held) >= player.built_cities:
            current = expansion.metropolis.owner(track)
            return MetropolisContest(track, player_id, False, current, current)
        levels = {p.id: p.improvement_level(track) for p in self.expansion_players()}
        contest = expansion.metropolis.contest(track, player_id, levels)
        if contest.transferred:
            self.events.log_event(
                "metropolis_transferred", track=track.value, previous=contest.previous_owner, owner=player_id
            )
        return contest

    def metropolis_cities(self) -> Dict[IntersectionCoordinate, Track]:
        if not self.is_expansion:
            return {}
        return assign_metropolis_cities(self.board, self.expansion.metropolis)

    # Development cards

    def draw_development_card(self) -> Optional[str]:
        return self.development_deck.pop() if self.development_deck else None
