"""Requests and Response models"""

from typing import Optional

from pydantic import BaseModel, field_validator, model_validator

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import MatchStatusName
from src.tafl.coordinate import BOARD_DIMENSIONS, Coordinate

PlayerId = str


class TilePosition(BaseModel):
    """Coordinates as sent by a client. The engine does not range-check, so it happens here."""

    x: int
    y: int

    @field_validator("x", "y")
    @classmethod
    def validate_in_range(cls, value: int) -> int:
        if not 0 <= value < BOARD_DIMENSIONS[0]:
            raise InvalidRequestError(
                f"Coordinate {value} outside of the board (0-{BOARD_DIMENSIONS[0] - 1})."
            )
        return value

    @classmethod
    def from_coordinate(cls, coordinate: Coordinate) -> "TilePosition":
        return cls(x=coordinate.x, y=coordinate.y)

    def to_coordinate(self) -> Coordinate:
        return Coordinate(self.x, self.y)


# --- REQUEST MODELS ---
class MatchRequest(BaseModel):
    """Every request addresses a match by its participants."""

    attacker: PlayerId
    defender: PlayerId


class StartMatchRequest(MatchRequest):
    starting_position: Optional[str] = None

    @model_validator(mode="after")
    def validate_distinct_players(self) -> "StartMatchRequest":
        if self.attacker == self.defender:
            raise InvalidRequestError(
                f"A player cannot play against themselves: {self.attacker!r}."
            )
        return self

    @field_validator("starting_position")
    @classmethod
    def validate_starting_position(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value

        rows = value.strip().split("/")
        if len(rows) != BOARD_DIMENSIONS[1]:
            raise InvalidRequestError(
                f"Position must contain {BOARD_DIMENSIONS[1]} '/'-separated rows."
            )
        return value.strip()


class GetMatchRequest(MatchRequest):
    pass


class EndMatchRequest(MatchRequest):
    pass


class AvailableMovesRequest(MatchRequest):
    tile: TilePosition


class MoveRequest(MatchRequest):
    player_id: PlayerId
    from_tile: TilePosition
    to_tile: TilePosition


# --- RESPONSE MODELS ---
class MatchResponse(BaseModel):
    attacker: PlayerId
    defender: PlayerId
    position: str
    status: MatchStatusName
    current_player: Optional[PlayerId]


class AvailableMovesResponse(BaseModel):
    attacker: PlayerId
    defender: PlayerId
    tile: TilePosition
    moves: list[TilePosition]


class MoveResponse(BaseModel):
    match: MatchResponse
    captured: list[TilePosition]
