"""
Progress card catalog and the three per-category decks.
"""
import random
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from .improvements import Track


@dataclass(frozen=True)
class CardInfo:
    """Immutable catalog entry for a progress card."""
    name: str
    category: Track
    description: str
    count: int
    is_victory_point: bool = False


class ProgressCard(Enum):
    """Every progress card, identified by its client-facing id."""
    # Trade
    COMMERCIAL_HARBOR = "commercialHarbor"
    MASTER_MERCHANT = "masterMerchant"
    MERCHANT = "merchant"
    MERCHANT_FLEET = "merchantFleet"
    RESOURCE_MONOPOLY = "resourceMonopoly"
    TRADE_MONOPOLY = "tradeMonopoly"
    # Politics
    BISHOP = "bishop"
    CONSTITUTION = "constitution"
    DESERTER = "deserter"
    DIPLOMAT = "diplomat"
    INTRIGUE = "intrigue"
    SABOTEUR = "saboteur"
    SPY = "spy"
    WARLORD = "warlord"
    WEDDING = "wedding"
    # Science
    ALCHEMIST = "alchemist"
    CRANE = "crane"
    ENGINEER = "engineer"
    INVENTOR = "inventor"
    IRRIGATION = "irrigation"
    MEDICINE = "medicine"
    MINING = "mining"
    PRINTER = "printer"
    ROAD_BUILDING = "roadBuilding"
    SMITH = "smith"

    @classmethod
    def parse(cls, name: str) -> "ProgressCard":
        key = str(name).strip().replace(" ", "").replace("_", "").lower()
        for card in cls:
            if card.value.lower() == key:
                return card
        raise ValueError(f"Unknown progress card: {name}")

    @property
    def info(self) -> CardInfo:
        return CATALOG[self]

    @property
    def category(self) -> Track:
        return CATALOG[self].category

    @property
    def is_victory_point(self) -> bool:
        return CATALOG[self].is_victory_point


CATALOG: Dict[ProgressCard, CardInfo] = {
    ProgressCard.COMMERCIAL_HARBOR: CardInfo(
        "Commercial Harbor", Track.TRADE,
        "Each opponent holding a commodity swaps one of them for one of your resources.", 2),
    ProgressCard.MASTER_MERCHANT: CardInfo(
        "Master Merchant", Track.TRADE,
        "Take 2 random resource or commodity cards from a player with more victory points.", 2),
    ProgressCard.MERCHANT: CardInfo(
        "Merchant", Track.TRADE,
        "Place the merchant next to your building: trade that resource 2:1 and hold 1 victory point.", 6),
    ProgressCard.MERCHANT_FLEET: CardInfo(
        "Merchant Fleet", Track.TRADE,
        "Trade one resource or commodity of your choice 2:1 for the rest of the turn.", 2),
    ProgressCard.RESOURCE_MONOPOLY: CardInfo(
        "Resource Monopoly", Track.TRADE,
        "Name a resource. Each opponent gives you up to 2 of it.", 4),
    ProgressCard.TRADE_MONOPOLY: CardInfo(
        "Trade Monopoly", Track.TRADE,
        "Name a commodity. Each opponent gives you 1 of it if they can.", 2),
    ProgressCard.BISHOP: CardInfo(
        "Bishop", Track.POLITICS,
        "Move the robber and take 1 random card from each player with a building on that hex.", 2),
    ProgressCard.CONSTITUTION: CardInfo(
        "Constitution", Track.POLITICS, "1 victory point.", 1, is_victory_point=True),
    ProgressCard.DESERTER: CardInfo(
        "Deserter", Track.POLITICS, "Remove one of an opponent's knights.", 2),
    ProgressCard.DIPLOMAT: CardInfo(
        "Diplomat", Track.POLITICS, "Remove any open road.", 2),
    ProgressCard.INTRIGUE: CardInfo(
        "Intrigue", Track.POLITICS, "Displace an opponent's knight that touches one of your roads.", 2),
    ProgressCard.SABOTEUR: CardInfo(
        "Saboteur", Track.POLITICS,
        "Each player with at least as many victory points as you discards half their hand.", 2),
    ProgressCard.SPY: CardInfo(
        "Spy", Track.POLITICS, "Steal a random progress card from an opponent.", 3),
    ProgressCard.WARLORD: CardInfo(
        "Warlord", Track.POLITICS, "Activate all of your knights for free.", 2),
    ProgressCard.WEDDING: CardInfo(
        "Wedding", Track.POLITICS, "Each player with more victory points gives you 2 cards.", 2),
    ProgressCard.ALCHEMIST: CardInfo(
        "Alchemist", Track.SCIENCE, "Play before rolling: choose the values of both production dice.", 2),
    ProgressCard.CRANE: CardInfo(
        "Crane", Track.SCIENCE, "Your next city improvement costs 1 commodity less.", 2),
    ProgressCard.ENGINEER: CardInfo(
        "Engineer", Track.SCIENCE, "Build a city wall for free.", 1),
    ProgressCard.INVENTOR: CardInfo(
        "Inventor", Track.SCIENCE, "Swap two number tokens other than 2, 6, 8 and 12.", 1),
    ProgressCard.IRRIGATION: CardInfo(
        "Irrigation", Track.SCIENCE, "Take 2 wheat for each fields hex touching your buildings.", 2),
    ProgressCard.MEDICINE: CardInfo(
        "Medicine", Track.SCIENCE, "Your next city costs only 1 ore and 1 wheat.", 2),
    ProgressCard.MINING: CardInfo(
        "Mining", Track.SCIENCE, "Take 2 ore for each mountains hex touching your buildings.", 2),
    ProgressCard.PRINTER: CardInfo(
        "Printer", Track.SCIENCE, "1 victory point.", 1, is_victory_point=True),
    ProgressCard.ROAD_BUILDING: CardInfo(
        "Road Building", Track.SCIENCE, "Build 2 roads for free.", 2),
    ProgressCard.SMITH: CardInfo(
        "Smith", Track.SCIENCE, "Promote up to 2 of your knights for free.", 2),
}


class ProgressDecks:
    """Three shuffled decks consumed without replacement."""

    def __init__(self, rng: random.Random):
        self.decks: Dict[Track, List[ProgressCard]] = {track: [] for track in Track}
        for card, info in CATALOG.items():
            self.decks[info.category].extend([card] * info.count)
        for deck in self.decks.values():
            rng.shuffle(deck)

    def draw(self, category: Track) -> Optional[ProgressCard]:
        """Top card of a deck, or None once it is exhausted."""
        deck = self.decks[category]
        if not deck:
            return None
        return deck.pop()

    def remaining(self, category: Track) -> int:
        return len(self.decks[category])

    def stack(self, category: Track, cards: List[ProgressCard]):
        """Put cards on top of a deck so they are drawn next, first card first."""
        self.decks[category].extend(reversed(cards))
