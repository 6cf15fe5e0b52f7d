"""
Capturing rules
-----

Two distinct rules:

* custodian capture: an ordinary piece is taken when the mover sandwiches it against an allied piece
  on the far side (the king never counts as that far-side ally).
* king capture: the king is only taken when all four of his neighbours are hostile
  (an enemy piece, or the throne).

Board edges are handled the same way in both: a side that does not exist is never a capturing /
hostile side. So a piece on the edge cannot be sandwiched against the edge, and a king on the edge
cannot be captured at all.
"""

from typing import Protocol

from src.tafl.coordinate import Coordinate, Direction
from src.tafl.pieces import Piece
from src.tafl.tile import Tile, TileType


class Board(Protocol):
    """Just the parts the capture rules need"""

    def tile_at(self, coordinate: Coordinate) -> Tile | None: ...


def flanker_must_not_be_king(flanker: Piece) -> bool:
    """The king does not take part in ordinary captures as the far-side flanking piece."""
    return not flanker.is_king


def is_custodian_capture(board: Board, landing: Tile, direction: Direction) -> bool:
    """
    Does the piece that just landed sandwich the neighbour in `direction`?

    N1 = neighbour (the one that would be captured), N2 = tile beyond it (the flanking ally)
    """
    mover = landing.piece
    neighbour = board.tile_at(landing.coordinate.step(direction, 1))
    beyond = board.tile_at(landing.coordinate.step(direction, 2))

    # direction only counts when two tiles away is still on the board
    if mover is None or neighbour is None or beyond is None:
        return False
    if neighbour.piece is None or not neighbour.piece.is_enemy_of(mover):
        return False
    if beyond.piece is None or not beyond.piece.is_ally_of(mover):
        return False
    return flanker_must_not_be_king(beyond.piece)


def is_hostile_to_king(board: Board, king_tile: Tile, direction: Direction) -> bool:
    """The throne or an enemy piece next to the king. Off the board is never hostile."""
    king = king_tile.piece
    neighbour = board.tile_at(king_tile.coordinate.step(direction))
    if king is None or neighbour is None:
        return False
    if neighbour.type == TileType.THRONE:
        return True
    return neighbour.piece is not None and neighbour.piece.is_enemy_of(king)


def is_king_surrounded(board: Board, king_tile: Tile) -> bool:
    """All four sides must be hostile. Three hostile sides + an open one is not enough."""
    return all(is_hostile_to_king(board, king_tile, direction) for direction in Direction)
