"""
Knights, the barbarian track, and barbarian attack resolution.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Collection, List, Optional, Sequence

from .board import Board, IntersectionCoordinate
from .constants import INITIAL_CITIES, TRACK_LENGTH

if TYPE_CHECKING:
    from .player import ExpansionPlayer


class KnightLevel(Enum):
    """Knight levels in promotion order."""
    BASIC = 1
    STRONG = 2
    MIGHTY = 3

    @property
    def strength(self) -> int:
        return self.value

    @property
    def next_level(self) -> Optional["KnightLevel"]:
        if self is KnightLevel.MIGHTY:
            return None
        return KnightLevel(self.value + 1)


@dataclass
class KnightPiece:
    """A knight on the board. New knights are basic and inactive."""
    owner: int
    position: IntersectionCoordinate
    level: KnightLevel = KnightLevel.BASIC
    active: bool = False
    used: bool = False  # moved or acted this turn

    @property
    def strength(self) -> int:
        return self.level.strength

    def activate(self):
        self.active = True

    def deactivate(self):
        self.active = False

    def promote(self):
        """Raise the level by one. Mighty knights cannot be promoted."""
        if self.level.next_level is None:
            raise ValueError("A mighty knight cannot be promoted further")
        self.level = self.level.next_level

    def move_to(self, position: IntersectionCoordinate):
        """Relocate; moving spends the knight for this turn."""
        self.position = position
        self.deactivate()
        self.mark_used()

    def mark_used(self):
        self.used = True

    def reset_turn_usage(self):
        self.used = False


def active_strength(knights: Sequence[KnightPiece]) -> int:
    """Sum of levels over active knights only."""
    return sum(k.strength for k in knights if k.active)


@dataclass
class BarbarianTrack:
    """Shared clock; reaching the end triggers an attack and resets to 0."""
    position: int = 0
    attack_count: int = 0
    track_length: int = TRACK_LENGTH

    def advance(self) -> bool:
        """Move the ship one step. Returns True when this step triggers an attack."""
        self.position += 1
        if self.position >= self.track_length:
            self.position = 0
            self.attack_count += 1
            return True
        return False

    @property
    def distance_to_attack(self) -> int:
        return self.track_length - self.position

    def to_dict(self):
        return {
            "position": self.position,
            "trackLength": self.track_length,
            "attackCount": self.attack_count,
        }


@dataclass
class AttackOutcome:
    """Result of one barbarian attack."""
    defenders_won: bool
    total_strength: int
    total_cities: int
    defenders: List[int] = field(default_factory=list)  # players awarded a defender point
    pillaged: List[int] = field(default_factory=list)  # players who lost a city
    demoted: List[IntersectionCoordinate] = field(default_factory=list)
    destroyed: List[IntersectionCoordinate] = field(default_factory=list)  # subset of demoted

    def to_dict(self):
        return {
            "defendersWon": self.defenders_won,
            "totalStrength": self.total_strength,
            "totalCities": self.total_cities,
            "defenders": list(self.defenders),
            "pillaged": list(self.pillaged),
            "citiesDestroyed": len(self.destroyed),
        }


def _built_cities(player: "ExpansionPlayer") -> int:
    return INITIAL_CITIES - player.cities_left


def resolve_barbarian_attack(
    players: Sequence["ExpansionPlayer"],
    board: Board,
    protected: Collection[IntersectionCoordinate] = (),
) -> AttackOutcome:
    """Resolve an attack against the current state of the board.

    Cities in ``protected`` (those hosting a metropolis) are never pillaged.
    Every knight is deactivated afterwards, whatever the outcome.
    """
    strengths = {p.id: p.active_strength for p in players}
    total_strength = sum(strengths.values())
    total_cities = sum(_built_cities(p) for p in players)
    outcome = AttackOutcome(
        defenders_won=total_strength >= total_cities,
        total_strength=total_strength,
        total_cities=total_cities,
    )

    if outcome.defenders_won:
        best = max(strengths.values(), default=0)
        # Nobody defended if nobody had an active knight
        if best > 0:
            outcome.defenders = [p.id for p in players if strengths[p.id] == best]
            for player in players:
                if player.id in outcome.defenders:
                    player.defender_points += 1
    else:
        exposed = [p for p in players if _built_cities(p) > 0]
        weakest = min(strengths[p.id] for p in exposed)
        for player in exposed:
            if strengths[player.id] != weakest:
                continue
            target = _pillage_target(board, player.id, protected)
            if target is None:
                continue
            had_wall = board.buildings[target].walled
            player.cities_left += 1
            if player.settlements_left > 0:
                board.demote_city(target)
                player.settlements_left -= 1
            else:
                # No settlement piece to put back, so the city is lost outright
                board.remove_building(target)
                outcome.destroyed.append(target)
            if player.city_walls > 0:
                player.city_walls -= 1
                if not had_wall:
                    _knock_down_wall(board, player.id)
            outcome.pillaged.append(player.id)
            outcome.demoted.append(target)

    for player in players:
        for knight in player.knights:
            knight.deactivate()
    return outcome


def _pillage_target(board: Board, owner: int, protected: Collection[IntersectionCoordinate]) -> Optional[IntersectionCoordinate]:
    candidates = [c for c in board.cities_of(owner) if c not in protected]
    if not candidates:
        return None
    walled = [c for c in candidates if board.buildings[c].walled]
    return walled[0] if walled else candidates[0]


def _knock_down_wall(board: Board, owner: int):
    for city in board.cities_of(owner):
        if board.buildings[city].walled:
            board.buildings[city].walled = False
            return
