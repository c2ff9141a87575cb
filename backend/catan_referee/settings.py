"""
Session settings.
"""
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .constants import (
    DEFAULT_VICTORY_POINTS,
    EXPANSION_VICTORY_POINTS,
    MAX_PLAYERS,
    MIN_PLAYERS,
)


class GameSettings(BaseModel):
    """Settings chosen when a session is created.

    Accepts both the camelCase keys clients send (``numPlayers``,
    ``isCitiesAndKnights``...) and the snake_case field names.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    num_players: int = Field(default=MAX_PLAYERS, ge=MIN_PLAYERS, le=MAX_PLAYERS, alias="numPlayers")
    victory_points: int = Field(default=DEFAULT_VICTORY_POINTS, ge=3, le=30, alias="victoryPoints")
    is_decimal: bool = Field(default=False, alias="isDecimal")
    is_cities_and_knights: bool = Field(default=False, alias="isCitiesAndKnights")
    # When False the session skips initial placement and starts in the main turn loop
    initial_placement: bool = Field(default=True, alias="initialPlacement")

    @model_validator(mode="before")
    @classmethod
    def default_expansion_points(cls, data: Any) -> Any:
        """Cities & Knights plays to 13 unless a threshold was given explicitly."""
        if not isinstance(data, dict):
            return data
        expansion = data.get("isCitiesAndKnights", data.get("is_cities_and_knights", False))
        has_points = "victoryPoints" in data or "victory_points" in data
        if expansion and not has_points:
            data = dict(data)
            data["victoryPoints"] = EXPANSION_VICTORY_POINTS
        return data

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with the client-facing keys."""
        return self.model_dump(by_alias=True)
