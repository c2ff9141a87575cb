"""
Rules referee for Catan with the Cities & Knights expansion.
"""
from .actions import ActionResponse, ActionRegistry
from .board import Board, HexCoordinate, IntersectionCoordinate, PathCoordinate, Tile, TileType
from .commands import handle_command
from .errors import (
    ActionRejected,
    ExpansionNotEnabledError,
    FollowUpNotReadyError,
    InvalidGameStateError,
    InvalidParameters,
    UnknownPlayerError,
)
from .improvements import CityImprovement, MetropolisRegistry, Track
from .knights import BarbarianTrack, KnightLevel, KnightPiece, resolve_barbarian_attack
from .ledger import Bank, Commodity, Ledger, ResourceType
from .logging_config import configure_logging, get_logger
from .player import ExpansionPlayer, Player
from .progress import ProgressCard, ProgressDecks
from .referee import GameStatus, Referee
from .serialization import serialize_game_state, serialize_responses
from .settings import GameSettings

__all__ = [
    "ActionRegistry",
    "ActionRejected",
    "ActionResponse",
    "Bank",
    "BarbarianTrack",
    "Board",
    "CityImprovement",
    "Commodity",
    "ExpansionNotEnabledError",
    "ExpansionPlayer",
    "FollowUpNotReadyError",
    "GameSettings",
    "GameStatus",
    "HexCoordinate",
    "IntersectionCoordinate",
    "InvalidGameStateError",
    "InvalidParameters",
    "KnightLevel",
    "KnightPiece",
    "Ledger",
    "MetropolisRegistry",
    "PathCoordinate",
    "Player",
    "ProgressCard",
    "ProgressDecks",
    "Referee",
    "ResourceType",
    "Tile",
    "TileType",
    "Track",
    "UnknownPlayerError",
    "configure_logging",
    "get_logger",
    "handle_command",
    "resolve_barbarian_attack",
    "serialize_game_state",
    "serialize_responses",
]
