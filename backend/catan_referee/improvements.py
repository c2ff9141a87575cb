"""
City improvement tracks and metropolis ownership.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Mapping, Optional

from .board import Board, IntersectionCoordinate
from .constants import IMPROVEMENT_COSTS, MAX_IMPROVEMENT_LEVEL, METROPOLIS_POINTS, METROPOLIS_THRESHOLD
from .ledger import Commodity


class Track(Enum):
    """Improvement tracks. Also the categories of progress cards."""
    TRADE = "trade"
    POLITICS = "politics"
    SCIENCE = "science"

    @classmethod
    def parse(cls, name: str) -> "Track":
        try:
            return cls(str(name).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown improvement track: {name}")

    @property
    def commodity(self) -> Commodity:
        return _TRACK_COMMODITIES[self]


_TRACK_COMMODITIES = {
    Track.TRADE: Commodity.PAPER,
    Track.POLITICS: Commodity.COIN,
    Track.SCIENCE: Commodity.CLOTH,
}


@dataclass
class CityImprovement:
    """One player's levels on the three tracks, each in [0, 5]."""
    levels: Dict[Track, int] = field(default_factory=lambda: {track: 0 for track in Track})

    def level(self, track: Track) -> int:
        return self.levels[track]

    def can_advance(self, track: Track) -> bool:
        return self.levels[track] < MAX_IMPROVEMENT_LEVEL

    def cost(self, track: Track) -> int:
        """Commodities needed to reach the next level."""
        if not self.can_advance(track):
            raise ValueError(f"{track.value} is already at the maximum level")
        return IMPROVEMENT_COSTS[self.levels[track]]

    def advance(self, track: Track) -> int:
        if not self.can_advance(track):
            raise ValueError(f"{track.value} is already at the maximum level")
        self.levels[track] += 1
        return self.levels[track]

    def metropolis_eligible(self, track: Track) -> bool:
        return self.levels[track] >= METROPOLIS_THRESHOLD

    def to_dict(self) -> Dict[str, int]:
        return {track.value: level for track, level in self.levels.items()}


@dataclass
class MetropolisContest:
    """Outcome of one contest call."""
    track: Track
    challenger: int
    transferred: bool
    previous_owner: Optional[int]
    owner: Optional[int]


class MetropolisRegistry:
    """Session-wide metropolis ownership, one owner (or none) per track."""

    def __init__(self):
        self.owners: Dict[Track, Optional[int]] = {track: None for track in Track}

    def owner(self, track: Track) -> Optional[int]:
        return self.owners[track]

    def held_by(self, player_id: int) -> List[Track]:
        return [track for track in Track if self.owners[track] == player_id]

    def points(self, player_id: int) -> int:
        return METROPOLIS_POINTS * len(self.held_by(player_id))

    def contest(self, track: Track, challenger: int, levels: Mapping[int, int]) -> MetropolisContest:
        """Compare challenger against the current holder on one track.

        ``levels`` maps player id to level on this track. An absent owner
        counts as level 0. Ownership moves only on a strictly higher level,
        and only if the challenger is eligible.
        """
        current = self.owners[track]
        if current == challenger:
            return MetropolisContest(track, challenger, False, current, current)
        challenger_level = levels.get(challenger, 0)
        holder_level = levels.get(current, 0) if current is not None else 0
        if challenger_level >= METROPOLIS_THRESHOLD and challenger_level > holder_level:
            self.owners[track] = challenger
            return MetropolisContest(track, challenger, True, current, challenger)
        return MetropolisContest(track, challenger, False, current, current)

    def to_dict(self) -> Dict[str, Optional[int]]:
        return {track.value: owner for track, owner in self.owners.items()}


def assign_metropolis_cities(board: Board, registry: MetropolisRegistry) -> Dict[IntersectionCoordinate, Track]:
    """Flag which physical city hosts each owned metropolis.

    Each owner's cities are taken in coordinate order and handed out to
    their metropolises in track order, one city per metropolis.
    """
    assignment: Dict[IntersectionCoordinate, Track] = {}
    owners = {owner for owner in registry.owners.values() if owner is not None}
    for owner in sorted(owners):
        cities = board.cities_of(owner)
        for city, track in zip(cities, registry.held_by(owner)):
            assignment[city] = track
    return assignment
