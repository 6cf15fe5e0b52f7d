"""A single cell of the board: fixed type + (at most) one occupying piece"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable, Optional

from src.tafl.coordinate import BOARD_DIMENSIONS, Coordinate
from src.tafl.pieces import Piece


class TileType(Enum):
    NORMAL = auto()
    THRONE = auto()
    GOAL = auto()


THRONE = Coordinate(BOARD_DIMENSIONS[0] // 2, BOARD_DIMENSIONS[1] // 2)

GOALS: frozenset[Coordinate] = frozenset(
    {
        Coordinate(0, 0),
        Coordinate(0, BOARD_DIMENSIONS[1] - 1),
        Coordinate(BOARD_DIMENSIONS[0] - 1, 0),
        Coordinate(BOARD_DIMENSIONS[0] - 1, BOARD_DIMENSIONS[1] - 1),
    }
)

PassabilityRule = Callable[[TileType, bool], bool]


def can_occupy(tile_type: TileType, piece_is_king: bool) -> bool:
    """
    Can a piece slide onto / through a tile of this type?

    NOTE: The throne is closed for everyone, the king included: once he steps off it he can never return.
    Variants that let the king back on should pass a different rule to Match instead of editing the scan.
    """
    return tile_type != TileType.THRONE


def tile_type_at(coordinate: Coordinate) -> TileType:
    if coordinate == THRONE:
        return TileType.THRONE
    if coordinate in GOALS:
        return TileType.GOAL
    return TileType.NORMAL


@dataclass(eq=False)
class Tile:
    """
    Compared by identity: every board owns its own tiles, and the occupant changes during the match.
    (`type` is fixed at construction)
    """

    coordinate: Coordinate
    type: TileType
    piece: Optional[Piece] = field(default=None)

    @property
    def x(self) -> int:
        return self.coordinate.x

    @property
    def y(self) -> int:
        return self.coordinate.y

    def has_piece(self) -> bool:
        return self.piece is not None

    def set_piece(self, piece: Piece) -> None:
        self.piece = piece

    def remove_piece(self) -> Optional[Piece]:
        removed, self.piece = self.piece, None
        return removed

    def __repr__(self) -> str:
        occupant = self.piece.to_notation() if self.piece else "-"
        return f"Tile({self.coordinate.to_label()}, {self.type.name}, {occupant})"
