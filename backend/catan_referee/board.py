"""
In-memory hex board: tiles, intersections, paths, robber and ports.

Hexes use cube coordinates (x + y + z == 0). An intersection is identified by
the three mutually adjacent hexes that meet at it, a path by its two end
intersections. The board only answers geometric queries and applies
primitive placements; every rule check lives in the actions.
"""
from collections import defaultdict
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Set, Tuple

from .ledger import ResourceType


@dataclass(frozen=True, order=True)
class HexCoordinate:
    """Cube coordinate of a hex."""
    x: int
    y: int
    z: int

    def __post_init__(self):
        if self.x + self.y + self.z != 0:
            raise ValueError(f"Hex coordinate must satisfy x + y + z == 0, got ({self.x}, {self.y}, {self.z})")

    def __add__(self, other: "HexCoordinate") -> "HexCoordinate":
        return HexCoordinate(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "HexCoordinate") -> "HexCoordinate":
        return HexCoordinate(self.x - other.x, self.y - other.y, self.z - other.z)

    def is_adjacent(self, other: "HexCoordinate") -> bool:
        return (self - other) in DIRECTIONS

    def corners(self) -> List["IntersectionCoordinate"]:
        """The six intersections around this hex, in clockwise order."""
        return [
            IntersectionCoordinate.of(self, self + DIRECTIONS[i], self + DIRECTIONS[(i + 1) % 6])
            for i in range(6)
        ]


# Neighbour offsets, listed so that consecutive entries are adjacent to each other
DIRECTIONS = [
    HexCoordinate(1, -1, 0),
    HexCoordinate(1, 0, -1),
    HexCoordinate(0, 1, -1),
    HexCoordinate(-1, 1, 0),
    HexCoordinate(-1, 0, 1),
    HexCoordinate(0, -1, 1),
]


@dataclass(frozen=True, order=True)
class IntersectionCoordinate:
    """Three hexes meeting at a vertex, kept in canonical (sorted) order."""
    coord1: HexCoordinate
    coord2: HexCoordinate
    coord3: HexCoordinate

    def __post_init__(self):
        hexes = (self.coord1, self.coord2, self.coord3)
        if list(hexes) != sorted(hexes):
            raise ValueError("Intersection hexes must be in canonical order; use IntersectionCoordinate.of()")
        if not (self.coord1.is_adjacent(self.coord2) and self.coord1.is_adjacent(self.coord3)
                and self.coord2.is_adjacent(self.coord3)):
            raise ValueError("Intersection hexes must be mutually adjacent")

    @classmethod
    def of(cls, a: HexCoordinate, b: HexCoordinate, c: HexCoordinate) -> "IntersectionCoordinate":
        first, second, third = sorted((a, b, c))
        return cls(first, second, third)

    @property
    def hexes(self) -> Tuple[HexCoordinate, HexCoordinate, HexCoordinate]:
        return (self.coord1, self.coord2, self.coord3)

    def neighbours(self) -> List["IntersectionCoordinate"]:
        """The three intersections one path away."""
        a, b, c = self.hexes
        return [
            IntersectionCoordinate.of(a, b, a + b - c),
            IntersectionCoordinate.of(a, c, a + c - b),
            IntersectionCoordinate.of(b, c, b + c - a),
        ]


@dataclass(frozen=True)
class PathCoordinate:
    """A path between two adjacent intersections, ends in canonical order."""
    start: IntersectionCoordinate
    end: IntersectionCoordinate

    def __post_init__(self):
        if not self.start < self.end:
            raise ValueError("Path ends must be in canonical order; use PathCoordinate.between()")
        if self.end not in self.start.neighbours():
            raise ValueError("Path ends must be adjacent intersections")

    @classmethod
    def between(cls, a: IntersectionCoordinate, b: IntersectionCoordinate) -> "PathCoordinate":
        first, second = sorted((a, b))
        return cls(first, second)

    @property
    def ends(self) -> Tuple[IntersectionCoordinate, IntersectionCoordinate]:
        return (self.start, self.end)

    def other_end(self, end: IntersectionCoordinate) -> IntersectionCoordinate:
        return self.end if end == self.start else self.start

    def bordering_hexes(self) -> Set[HexCoordinate]:
        return set(self.start.hexes) & set(self.end.hexes)


class TileType(Enum):
    """Terrain of a hex and the resource it yields."""
    FOREST = "forest"
    HILLS = "hills"
    FIELDS = "fields"
    PASTURE = "pasture"
    MOUNTAINS = "mountains"
    DESERT = "desert"
    SEA = "sea"

    @property
    def resource(self) -> Optional[ResourceType]:
        return _TILE_RESOURCES.get(self)

    @property
    def is_land(self) -> bool:
        return self is not TileType.SEA


_TILE_RESOURCES = {
    TileType.FOREST: ResourceType.WOOD,
    TileType.HILLS: ResourceType.BRICK,
    TileType.FIELDS: ResourceType.WHEAT,
    TileType.PASTURE: ResourceType.SHEEP,
    TileType.MOUNTAINS: ResourceType.ORE,
}


@dataclass
class Tile:
    """A hex tile and its roll number (None for desert and sea)."""
    coordinate: HexCoordinate
    tile_type: TileType
    number: Optional[int] = None

    @property
    def resource(self) -> Optional[ResourceType]:
        return self.tile_type.resource


class BuildingType(Enum):
    SETTLEMENT = "settlement"
    CITY = "city"


@dataclass
class Building:
    """A settlement or city standing on an intersection."""
    owner: int
    kind: BuildingType = BuildingType.SETTLEMENT
    walled: bool = False

    @property
    def is_city(self) -> bool:
        return self.kind is BuildingType.CITY


# Fixed beginner layout, in the order Board.standard() enumerates hexes
STANDARD_LAYOUT = [
    (TileType.MOUNTAINS, 10), (TileType.PASTURE, 2), (TileType.FOREST, 9),
    (TileType.FIELDS, 12), (TileType.HILLS, 6), (TileType.PASTURE, 4), (TileType.HILLS, 10),
    (TileType.FIELDS, 9), (TileType.FOREST, 11), (TileType.DESERT, None), (TileType.FOREST, 3), (TileType.MOUNTAINS, 8),
    (TileType.FOREST, 8), (TileType.MOUNTAINS, 3), (TileType.FIELDS, 4), (TileType.PASTURE, 5),
    (TileType.HILLS, 5), (TileType.FIELDS, 6), (TileType.PASTURE, 11),
]

# Numbers the inventor may not move
PROTECTED_NUMBERS = {2, 6, 8, 12}


class Board:
    """Queryable hex graph with primitive mutation operations."""

    def __init__(self, tiles: Iterable[Tile], ports: Optional[Dict[IntersectionCoordinate, ResourceType]] = None):
        self.tiles: Dict[HexCoordinate, Tile] = {tile.coordinate: tile for tile in tiles}
        self.ports: Dict[IntersectionCoordinate, ResourceType] = dict(ports or {})
        self.buildings: Dict[IntersectionCoordinate, Building] = {}
        self.roads: Dict[PathCoordinate, int] = {}
        self.robber: Optional[HexCoordinate] = next(
            (t.coordinate for t in self.tiles.values() if t.tile_type is TileType.DESERT), None
        )

    @classmethod
    def standard(cls) -> "Board":
        """The fixed 19-hex beginner board, robber on the desert."""
        coordinates = []
        for x in range(-2, 3):
            for y in range(max(-2, -x - 2), min(2, -x + 2) + 1):
                coordinates.append(HexCoordinate(x, y, -x - y))
        tiles = [
            Tile(coordinate, tile_type, number)
            for coordinate, (tile_type, number) in zip(coordinates, STANDARD_LAYOUT)
        ]
        return cls(tiles)

    # Geometry queries

    def is_land(self, hex_coordinate: HexCoordinate) -> bool:
        tile = self.tiles.get(hex_coordinate)
        return tile is not None and tile.tile_type.is_land

    def tile_at(self, hex_coordinate: HexCoordinate) -> Optional[Tile]:
        return self.tiles.get(hex_coordinate)

    def has_intersection(self, intersection: IntersectionCoordinate) -> bool:
        return any(self.is_land(h) for h in intersection.hexes)

    def has_path(self, path: PathCoordinate) -> bool:
        return any(self.is_land(h) for h in path.bordering_hexes())

    def intersections(self) -> List[IntersectionCoordinate]:
        """Every intersection touching land, in canonical order."""
        found = set()
        for coordinate in self.tiles:
            if self.is_land(coordinate):
                found.update(coordinate.corners())
        return sorted(found)

    def adjacent_intersections(self, intersection: IntersectionCoordinate) -> List[IntersectionCoordinate]:
        return [n for n in intersection.neighbours() if self.has_path(PathCoordinate.between(intersection, n))]

    def paths_touching(self, intersection: IntersectionCoordinate) -> List[PathCoordinate]:
        return [PathCoordinate.between(intersection, n) for n in self.adjacent_intersections(intersection)]

    def tiles_touching(self, intersection: IntersectionCoordinate) -> List[Tile]:
        return [self.tiles[h] for h in intersection.hexes if self.is_land(h)]

    def intersections_of(self, hex_coordinate: HexCoordinate) -> List[IntersectionCoordinate]:
        return hex_coordinate.corners()

    # Occupancy queries

    def building_at(self, intersection: IntersectionCoordinate) -> Optional[Building]:
        return self.buildings.get(intersection)

    def road_owner(self, path: PathCoordinate) -> Optional[int]:
        return self.roads.get(path)

    def buildings_of(self, owner: int) -> List[Tuple[IntersectionCoordinate, Building]]:
        return [(ic, self.buildings[ic]) for ic in sorted(self.buildings) if self.buildings[ic].owner == owner]

    def cities_of(self, owner: int) -> List[IntersectionCoordinate]:
        """Owner's cities in stable coordinate order."""
        return [ic for ic, b in self.buildings_of(owner) if b.is_city]

    def settlements_of(self, owner: int) -> List[IntersectionCoordinate]:
        return [ic for ic, b in self.buildings_of(owner) if not b.is_city]

    def roads_of(self, owner: int) -> List[PathCoordinate]:
        return sorted((p for p, o in self.roads.items() if o == owner), key=lambda p: (p.start, p.end))

    def owners_on_hex(self, hex_coordinate: HexCoordinate) -> List[int]:
        """Distinct owners of buildings around a hex, in first-seen corner order."""
        owners = []
        for corner in hex_coordinate.corners():
            building = self.buildings.get(corner)
            if building and building.owner not in owners:
                owners.append(building.owner)
        return owners

    def touches_own_road(self, intersection: IntersectionCoordinate, owner: int) -> bool:
        return any(self.roads.get(p) == owner for p in self.paths_touching(intersection))

    def ports_of(self, owner: int) -> Set[ResourceType]:
        return {self.ports[ic] for ic, _ in self.buildings_of(owner) if ic in self.ports}

    # Placement legality

    def satisfies_distance_rule(self, intersection: IntersectionCoordinate) -> bool:
        """No building on this intersection or any adjacent one."""
        if intersection in self.buildings:
            return False
        return all(n not in self.buildings for n in self.adjacent_intersections(intersection))

    def can_extend_road(self, path: PathCoordinate, owner: int) -> bool:
        """Whether owner may build on this empty path given their network."""
        if not self.has_path(path) or path in self.roads:
            return False
        for end in path.ends:
            building = self.buildings.get(end)
            if building is not None:
                if building.owner == owner:
                    return True
                continue  # an opponent's building blocks continuation through this end
            if any(self.roads.get(p) == owner for p in self.paths_touching(end) if p != path):
                return True
        return False

    def legal_road_paths(self, owner: int) -> List[PathCoordinate]:
        candidates = set()
        for ic, _ in self.buildings_of(owner):
            candidates.update(self.paths_touching(ic))
        for road in self.roads_of(owner):
            for end in road.ends:
                candidates.update(self.paths_touching(end))
        return sorted((p for p in candidates if self.can_extend_road(p, owner)), key=lambda p: (p.start, p.end))

    def is_open_road(self, path: PathCoordinate) -> bool:
        """A road with at least one end not continuing into its owner's network."""
        owner = self.roads.get(path)
        if owner is None:
            return False
        for end in path.ends:
            building = self.buildings.get(end)
            if building is not None and building.owner == owner:
                continue
            if not any(self.roads.get(p) == owner for p in self.paths_touching(end) if p != path):
                return True
        return False

    # Primitive mutations

    def place_road(self, path: PathCoordinate, owner: int):
        if not self.has_path(path):
            raise ValueError("No such path on the board")
        if path in self.roads:
            raise ValueError("Path already has a road")
        self.roads[path] = owner

    def remove_road(self, path: PathCoordinate) -> int:
        if path not in self.roads:
            raise ValueError("No road on that path")
        return self.roads.pop(path)

    def place_settlement(self, intersection: IntersectionCoordinate, owner: int):
        if not self.has_intersection(intersection):
            raise ValueError("No such intersection on the board")
        if intersection in self.buildings:
            raise ValueError("Intersection already occupied")
        self.buildings[intersection] = Building(owner)

    def upgrade_to_city(self, intersection: IntersectionCoordinate):
        building = self.buildings.get(intersection)
        if building is None or building.is_city:
            raise ValueError("Only a settlement can be upgraded")
        building.kind = BuildingType.CITY

    def demote_city(self, intersection: IntersectionCoordinate):
        building = self.buildings.get(intersection)
        if building is None or not building.is_city:
            raise ValueError("Only a city can be demoted")
        building.kind = BuildingType.SETTLEMENT
        building.walled = False

    def remove_building(self, intersection: IntersectionCoordinate) -> Building:
        building = self.buildings.pop(intersection, None)
        if building is None:
            raise ValueError("No building there")
        return building

    def move_robber(self, hex_coordinate: HexCoordinate):
        if not self.is_land(hex_coordinate):
            raise ValueError("The robber must stay on land")
        self.robber = hex_coordinate

    def swap_roll_numbers(self, first: HexCoordinate, second: HexCoordinate):
        """Swap the roll numbers of two hexes; 2, 6, 8 and 12 may not move."""
        tile_a, tile_b = self.tiles.get(first), self.tiles.get(second)
        if tile_a is None or tile_b is None or tile_a.number is None or tile_b.number is None:
            raise ValueError("Both hexes must carry a roll number")
        if first == second:
            raise ValueError("Choose two different hexes")
        if tile_a.number in PROTECTED_NUMBERS or tile_b.number in PROTECTED_NUMBERS:
            raise ValueError("Numbers 2, 6, 8 and 12 cannot be swapped")
        tile_a.number, tile_b.number = tile_b.number, tile_a.number

    # Longest road

    def longest_road(self, owner: int) -> int:
        """Length of owner's longest simple trail, broken by opponents' buildings."""
        roads = self.roads_of(owner)
        if not roads:
            return 0
        touching: Dict[IntersectionCoordinate, List[PathCoordinate]] = defaultdict(list)
        for road in roads:
            for end in road.ends:
                touching[end].append(road)

        def blocked(node: IntersectionCoordinate) -> bool:
            building = self.buildings.get(node)
            return building is not None and building.owner != owner

        def walk(node: IntersectionCoordinate, used: Set[PathCoordinate]) -> int:
            best = 0
            for road in touching[node]:
                if road in used:
                    continue
                used.add(road)
                nxt = road.other_end(node)
                best = max(best, 1 + (0 if blocked(nxt) else walk(nxt, used)))
                used.remove(road)
            return best

        return max(walk(node, set()) for node in touching)
