"""
Parameter models for commands. Each action kind validates its structured
parameters through one of these before any rule is checked.
"""
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .board import HexCoordinate, IntersectionCoordinate, PathCoordinate
from .errors import InvalidParameters
from .improvements import Track
from .ledger import Amount, CardKind, Commodity, ResourceType, parse_card_kind
from .progress import ProgressCard


class ParamsModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


class NoParams(ParamsModel):
    pass


class HexParam(ParamsModel):
    """A hex as {x, y, z}."""
    x: int
    y: int
    z: int

    @model_validator(mode="after")
    def on_grid(self) -> "HexParam":
        if self.x + self.y + self.z != 0:
            raise ValueError("hex coordinates must satisfy x + y + z == 0")
        return self

    def to_coordinate(self) -> HexCoordinate:
        return HexCoordinate(self.x, self.y, self.z)


class IntersectionParam(ParamsModel):
    """An intersection as {coord1, coord2, coord3}, three mutually adjacent hexes."""
    coord1: HexParam
    coord2: HexParam
    coord3: HexParam

    @model_validator(mode="after")
    def adjacent(self) -> "IntersectionParam":
        a, b, c = (self.coord1.to_coordinate(), self.coord2.to_coordinate(), self.coord3.to_coordinate())
        if not (a.is_adjacent(b) and a.is_adjacent(c) and b.is_adjacent(c)):
            raise ValueError("intersection hexes must be mutually adjacent")
        return self

    def to_coordinate(self) -> IntersectionCoordinate:
        return IntersectionCoordinate.of(
            self.coord1.to_coordinate(), self.coord2.to_coordinate(), self.coord3.to_coordinate()
        )


class CoordinateParams(ParamsModel):
    coordinate: IntersectionParam

    @property
    def intersection(self) -> IntersectionCoordinate:
        return self.coordinate.to_coordinate()


class PathParams(ParamsModel):
    start: IntersectionParam
    end: IntersectionParam

    @model_validator(mode="after")
    def ends_adjacent(self) -> "PathParams":
        if self.end.to_coordinate() not in self.start.to_coordinate().neighbours():
            raise ValueError("path ends must be adjacent intersections")
        return self

    @property
    def path(self) -> PathCoordinate:
        return PathCoordinate.between(self.start.to_coordinate(), self.end.to_coordinate())


class MoveKnightParams(ParamsModel):
    coordinate: IntersectionParam
    destination: IntersectionParam


class HexParams(ParamsModel):
    hex: HexParam


class MoveRobberParams(ParamsModel):
    hex: HexParam
    victim: Optional[int] = Field(default=None, alias="targetPlayer")


class SwapHexParams(ParamsModel):
    hex1: HexParam
    hex2: HexParam


class TargetPlayerParams(ParamsModel):
    target_player: int = Field(alias="targetPlayer")


class DeserterParams(ParamsModel):
    target_player: int = Field(alias="targetPlayer")
    coordinate: IntersectionParam


class DiceParams(ParamsModel):
    red_die: int = Field(alias="redDie", ge=1, le=6)
    white_die: int = Field(alias="whiteDie", ge=1, le=6)


class ResourceParams(ParamsModel):
    resource: ResourceType

    @field_validator("resource", mode="before")
    @classmethod
    def parse_resource(cls, value):
        if isinstance(value, ResourceType) and value is not ResourceType.WILDCARD:
            return value
        return ResourceType.parse(value)


class CommodityParams(ParamsModel):
    resource: Commodity

    @field_validator("resource", mode="before")
    @classmethod
    def parse_commodity(cls, value):
        if isinstance(value, Commodity):
            return value
        return Commodity.parse(value)


def _parse_kind_map(value) -> Dict[CardKind, Amount]:
    if not isinstance(value, dict):
        raise ValueError("expected a mapping of card kind to count")
    parsed: Dict[CardKind, Amount] = {}
    for name, count in value.items():
        kind = name if isinstance(name, (ResourceType, Commodity)) else parse_card_kind(name)
        if isinstance(count, bool) or not isinstance(count, (int, float)) or count < 0:
            raise ValueError(f"invalid count for {name}: {count}")
        if count:
            parsed[kind] = parsed.get(kind, 0) + count
    return parsed


class CardKindParams(ParamsModel):
    """Merchant Fleet: any resource or commodity."""
    resource: CardKind

    @field_validator("resource", mode="before")
    @classmethod
    def parse_kind(cls, value):
        if isinstance(value, (ResourceType, Commodity)):
            return value
        return parse_card_kind(value)


class DropCardsParams(ParamsModel):
    cards: Dict[CardKind, Amount]

    @field_validator("cards", mode="before")
    @classmethod
    def parse_cards(cls, value):
        return _parse_kind_map(value)


class BankTradeParams(ParamsModel):
    offer: Dict[CardKind, Amount]
    request: Dict[CardKind, Amount]

    @field_validator("offer", "request", mode="before")
    @classmethod
    def parse_cards(cls, value):
        return _parse_kind_map(value)

    @model_validator(mode="after")
    def non_empty(self) -> "BankTradeParams":
        if not self.offer or not self.request:
            raise ValueError("a trade needs both an offer and a request")
        return self


class TrackParams(ParamsModel):
    track: Track

    @field_validator("track", mode="before")
    @classmethod
    def parse_track(cls, value):
        if isinstance(value, Track):
            return value
        return Track.parse(value)


class ProgressCardParams(ParamsModel):
    card: ProgressCard

    @field_validator("card", mode="before")
    @classmethod
    def parse_card(cls, value):
        if isinstance(value, ProgressCard):
            return value
        return ProgressCard.parse(value)


class DevelopmentCardParams(ParamsModel):
    card: str
    resource: Optional[ResourceType] = None  # monopoly
    resources: List[ResourceType] = Field(default_factory=list)  # year of plenty

    @field_validator("card", mode="before")
    @classmethod
    def normalize_card(cls, value):
        card = str(value).strip().lower()
        if card not in {"knight", "road_building", "year_of_plenty", "monopoly", "victory_point"}:
            raise ValueError(f"unknown development card: {value}")
        return card

    @field_validator("resource", mode="before")
    @classmethod
    def parse_resource(cls, value):
        if value is None or isinstance(value, ResourceType):
            return value
        return ResourceType.parse(value)

    @field_validator("resources", mode="before")
    @classmethod
    def parse_resources(cls, value):
        if not isinstance(value, list):
            raise ValueError("resources must be a list")
        return [v if isinstance(v, ResourceType) else ResourceType.parse(v) for v in value]


def parse_params(model, params: Optional[dict]):
    """Validate raw parameters, converting failures into a rejection."""
    try:
        return model.model_validate(params or {})
    except ValidationError as exc:
        details = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'parameters'}: {err['msg']}" for err in exc.errors()
        )
        raise InvalidParameters(f"Invalid parameters: {details}") from exc
