"""
Resource and commodity counters, build costs, and the bank supply.
"""
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional, Union

from .constants import BANK_COMMODITY_SUPPLY, BANK_RESOURCE_SUPPLY


class ResourceType(Enum):
    """Resource types in the game."""
    WOOD = "wood"
    BRICK = "brick"
    WHEAT = "wheat"
    SHEEP = "sheep"
    ORE = "ore"
    WILDCARD = "wildcard"  # Generic 3:1 ports only, never held in a hand

    @classmethod
    def parse(cls, name: str) -> "ResourceType":
        """Parse a resource name, rejecting the wildcard."""
        try:
            resource = cls(str(name).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown resource: {name}")
        if resource is cls.WILDCARD:
            raise ValueError("The wildcard is not a resource")
        return resource


class Commodity(Enum):
    """Commodities produced by cities in Cities & Knights."""
    PAPER = "paper"
    CLOTH = "cloth"
    COIN = "coin"

    @classmethod
    def parse(cls, name: str) -> "Commodity":
        try:
            return cls(str(name).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown commodity: {name}")

    @classmethod
    def from_resource(cls, resource: ResourceType) -> Optional["Commodity"]:
        """The commodity a city on this resource's tile produces, if any."""
        return _COMMODITY_BY_RESOURCE.get(resource)


_COMMODITY_BY_RESOURCE = {
    ResourceType.WOOD: Commodity.PAPER,
    ResourceType.SHEEP: Commodity.CLOTH,
    ResourceType.ORE: Commodity.COIN,
}

CardKind = Union[ResourceType, Commodity]
Amount = Union[int, float]  # fractional counts only appear in decimal mode

# Kinds a hand can hold, in their fixed enumeration order
RESOURCES: List[ResourceType] = [r for r in ResourceType if r is not ResourceType.WILDCARD]
COMMODITIES: List[Commodity] = list(Commodity)
CARD_KINDS: List[CardKind] = RESOURCES + COMMODITIES


def parse_card_kind(name: str) -> CardKind:
    """Parse either a resource or a commodity name."""
    try:
        return ResourceType.parse(name)
    except ValueError:
        pass
    try:
        return Commodity.parse(name)
    except ValueError:
        raise ValueError(f"Unknown resource or commodity: {name}")


# Build costs
ROAD_COST = {ResourceType.WOOD: 1, ResourceType.BRICK: 1}
SETTLEMENT_COST = {ResourceType.WOOD: 1, ResourceType.BRICK: 1, ResourceType.WHEAT: 1, ResourceType.SHEEP: 1}
CITY_COST = {ResourceType.WHEAT: 2, ResourceType.ORE: 3}
MEDICINE_CITY_COST = {ResourceType.WHEAT: 1, ResourceType.ORE: 1}
DEVELOPMENT_CARD_COST = {ResourceType.SHEEP: 1, ResourceType.WHEAT: 1, ResourceType.ORE: 1}
KNIGHT_COST = {ResourceType.SHEEP: 1, ResourceType.ORE: 1}
KNIGHT_ACTIVATION_COST = {ResourceType.WHEAT: 1}
STRONG_PROMOTION_COST = {ResourceType.SHEEP: 1, ResourceType.ORE: 1}
MIGHTY_PROMOTION_COST = {ResourceType.SHEEP: 2, ResourceType.ORE: 2}
CITY_WALL_COST = {ResourceType.BRICK: 2}


def describe_cost(cost: Mapping[CardKind, Amount]) -> str:
    return ", ".join(f"{amount} {kind.value}" for kind, amount in cost.items())


class Ledger:
    """Counter of card kinds. Counts never go negative."""

    def __init__(self, kinds: Iterable[CardKind] = CARD_KINDS, initial: Optional[Mapping[CardKind, Amount]] = None):
        self.counts: Dict[CardKind, Amount] = {kind: 0 for kind in kinds}
        if initial:
            for kind, amount in initial.items():
                self.add(kind, amount)

    def __getitem__(self, kind: CardKind) -> Amount:
        return self.counts.get(kind, 0)

    def __repr__(self) -> str:
        held = {k.value: v for k, v in self.counts.items() if v}
        return f"Ledger({held})"

    def kinds(self) -> List[CardKind]:
        return list(self.counts)

    def add(self, kind: CardKind, amount: Amount = 1):
        if kind not in self.counts:
            raise ValueError(f"{kind.value} cannot be held here")
        if amount < 0:
            raise ValueError("Cannot add a negative amount")
        self.counts[kind] += amount

    def remove(self, kind: CardKind, amount: Amount = 1):
        if amount < 0:
            raise ValueError("Cannot remove a negative amount")
        if self[kind] < amount:
            raise ValueError(f"Insufficient {kind.value}: have {self[kind]}, need {amount}")
        self.counts[kind] -= amount

    def can_afford(self, cost: Mapping[CardKind, Amount]) -> bool:
        return all(self[kind] >= amount for kind, amount in cost.items())

    def pay(self, cost: Mapping[CardKind, Amount]):
        """Deduct a whole cost, or nothing at all."""
        if not self.can_afford(cost):
            raise ValueError(f"Insufficient resources: need {describe_cost(cost)}")
        for kind, amount in cost.items():
            self.counts[kind] -= amount

    def receive(self, gain: Mapping[CardKind, Amount]):
        for kind, amount in gain.items():
            self.add(kind, amount)

    def total(self, kinds: Optional[Iterable[CardKind]] = None) -> Amount:
        if kinds is None:
            return sum(self.counts.values())
        return sum(self[kind] for kind in kinds)

    def units(self, kinds: Optional[Iterable[CardKind]] = None) -> List[CardKind]:
        """Expand the whole-card holdings into one entry per card."""
        selected = self.counts if kinds is None else kinds
        units = []
        for kind in selected:
            units.extend([kind] * int(self[kind]))
        return units

    def as_dict(self) -> Dict[str, Amount]:
        return {kind.value: amount for kind, amount in self.counts.items()}


class Bank:
    """Finite supply of resource and commodity cards."""

    def __init__(self, with_commodities: bool = False):
        supply = {resource: BANK_RESOURCE_SUPPLY for resource in RESOURCES}
        if with_commodities:
            supply.update({commodity: BANK_COMMODITY_SUPPLY for commodity in COMMODITIES})
        self.supply = Ledger(supply.keys(), supply)

    def __getitem__(self, kind: CardKind) -> Amount:
        return self.supply[kind]

    def can_supply(self, kind: CardKind, amount: Amount) -> bool:
        return kind in self.supply.counts and self.supply[kind] >= amount

    def take(self, kind: CardKind, amount: Amount = 1):
        self.supply.remove(kind, amount)

    def give_back(self, kind: CardKind, amount: Amount = 1):
        self.supply.add(kind, amount)

    def collect(self, payment: Mapping[CardKind, Amount]):
        """Return paid cards to the supply."""
        for kind, amount in payment.items():
            self.give_back(kind, amount)
