"""
Player state: the base-economy capability and the Cities & Knights capability.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from .board import IntersectionCoordinate
from .constants import (
    CITY_WALL_HAND_BONUS,
    DROP_CARDS_THRESHOLD,
    INITIAL_CITIES,
    INITIAL_ROADS,
    INITIAL_SETTLEMENTS,
    MAX_PROGRESS_CARDS,
)
from .improvements import CityImprovement, Track
from .knights import KnightPiece, active_strength
from .ledger import CARD_KINDS, RESOURCES, Amount, CardKind, Ledger
from .progress import ProgressCard


@dataclass
class Player:
    """A seat in the session with its hand, pieces and development cards."""
    id: int
    name: str
    color: str = "#BF2720"
    hand: Ledger = field(default_factory=lambda: Ledger(RESOURCES))
    roads_left: int = INITIAL_ROADS
    settlements_left: int = INITIAL_SETTLEMENTS
    cities_left: int = INITIAL_CITIES
    development_cards: List[str] = field(default_factory=list)  # playable
    new_development_cards: List[str] = field(default_factory=list)  # bought this turn
    played_development_card: bool = False  # this turn
    knights_played: int = 0
    fleet_kind: Optional[CardKind] = None  # Merchant Fleet 2:1 kind this turn

    @property
    def is_expansion(self) -> bool:
        return False

    @property
    def built_cities(self) -> int:
        return INITIAL_CITIES - self.cities_left

    @property
    def hidden_points(self) -> int:
        return (self.development_cards + self.new_development_cards).count("victory_point")

    def card_count(self) -> Amount:
        """Cards that count against the hand limit."""
        return self.hand.total()

    @property
    def hand_limit(self) -> int:
        return DROP_CARDS_THRESHOLD

    def end_turn(self):
        """Clear per-turn flags."""
        self.development_cards.extend(self.new_development_cards)
        self.new_development_cards = []
        self.played_development_card = False
        self.fleet_kind = None


@dataclass
class ExpansionPlayer(Player):
    """A player in a Cities & Knights session."""
    hand: Ledger = field(default_factory=lambda: Ledger(CARD_KINDS))
    knights: List[KnightPiece] = field(default_factory=list)
    improvements: CityImprovement = field(default_factory=CityImprovement)
    progress_cards: List[ProgressCard] = field(default_factory=list)
    city_walls: int = 0
    defender_points: int = 0
    progress_points: int = 0  # revealed Constitution / Printer
    medicine_pending: bool = False
    crane_pending: bool = False

    @property
    def is_expansion(self) -> bool:
        return True

    @property
    def active_strength(self) -> int:
        return active_strength(self.knights)

    @property
    def hand_limit(self) -> int:
        return DROP_CARDS_THRESHOLD + CITY_WALL_HAND_BONUS * self.city_walls

    @property
    def can_hold_progress_card(self) -> bool:
        return len(self.progress_cards) < MAX_PROGRESS_CARDS

    def knight_at(self, position: IntersectionCoordinate) -> Optional[KnightPiece]:
        return next((k for k in self.knights if k.position == position), None)

    def improvement_level(self, track: Track) -> int:
        return self.improvements.level(track)

    def start_turn(self):
        for knight in self.knights:
            knight.reset_turn_usage()

    def end_turn(self):
        super().end_turn()
        self.medicine_pending = False
        self.crane_pending = False
