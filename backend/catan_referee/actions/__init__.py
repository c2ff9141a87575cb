"""
Actions and follow-up decisions. Importing this package registers every kind.
"""
from .base import Action, ActionOutcome, ActionResponse, FollowUpAction, Responses
from .registry import ActionRegistry
from .turn import DropCards, EndTurn, MoveRobber, RollDice, SetupRoad, SetupSettlement
from .building import BuildCity, BuildRoad, BuildSettlement, PlaceRoad
from .trade import TradeWithBank
from .development import BuyDevelopmentCard, PlayDevelopmentCard
from .knights import ActivateKnight, MoveKnight, PlaceKnight, PromoteKnight
from .city import BuildCityWall, ImproveCityTrack
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
from .cards import PROGRESS_EFFECTS, PlayProgressCard, progress_effect

__all__ = [
    "Action",
    "ActionOutcome",
    "ActionRegistry",
    "ActionResponse",
    "FollowUpAction",
    "Responses",
    "ActivateKnight",
    "BuildCity",
    "BuildCityWall",
    "BuildRoad",
    "BuildSettlement",
    "BuyDevelopmentCard",
    "ChooseCommodity",
    "ChooseDice",
    "ChooseFleetResource",
    "ChooseOpponentCards",
    "ChooseResource",
    "DeserterTarget",
    "DisplaceKnight",
    "DropCards",
    "EndTurn",
    "ImproveCityTrack",
    "MoveKnight",
    "MoveRobber",
    "PlaceKnight",
    "PlaceMerchant",
    "PlaceRoad",
    "PlayDevelopmentCard",
    "PlayProgressCard",
    "PromoteKnight",
    "PROGRESS_EFFECTS",
    "RemoveRoad",
    "RollDice",
    "SetupRoad",
    "SetupSettlement",
    "StealProgressCard",
    "SwapHexNumbers",
    "TradeWithBank",
    "progress_effect",
]
