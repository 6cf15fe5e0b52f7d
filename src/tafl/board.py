"""The Board owns the tiles (and through them the pieces) plus the starting formation"""

from dataclasses import dataclass
from typing import Iterator, Optional, Self

from src.tafl.coordinate import BOARD_DIMENSIONS, Coordinate, all_coordinates
from src.tafl.notation import STARTING_POSITION, parse_position, row_to_notation
from src.tafl.pieces import Color, Piece, PlayerId
from src.tafl.tile import Tile, tile_type_at


@dataclass
class Board:
    tiles: dict[Coordinate, Tile]

    @classmethod
    def empty(cls) -> Self:
        """Every tile gets its fixed type here: a single throne in the center, goals in the corners, the rest normal."""
        return cls(
            {
                coordinate: Tile(coordinate, tile_type_at(coordinate))
                for coordinate in all_coordinates()
            }
        )

    @classmethod
    def initialize(cls, attacker: PlayerId, defender: PlayerId) -> Self:
        """Fresh board in the starting formation. Each side's pieces are owned by the given player."""
        return cls.from_notation(STARTING_POSITION, attacker, defender)

    @classmethod
    def from_notation(cls, notation: str, attacker: PlayerId, defender: PlayerId) -> Self:
        """Construct a board from a position string (see src/tafl/notation.py)"""
        board = cls.empty()
        for coordinate, character in parse_position(notation).items():
            board.place_piece(
                Piece.from_notation(character, attacker, defender), coordinate
            )
        return board

    def to_notation(self) -> str:
        return "/".join(self._row_to_notation(y) for y in range(BOARD_DIMENSIONS[1]))

    def _row_to_notation(self, y: int) -> str:
        characters = [
            piece.to_notation() if (piece := self.tile(x, y).piece) else None
            for x in range(BOARD_DIMENSIONS[0])
        ]
        return row_to_notation(characters)

    def tile(self, x: int, y: int) -> Tile:
        return self.tiles[Coordinate(x, y)]

    def tile_at(self, coordinate: Coordinate) -> Optional[Tile]:
        """None when the coordinate falls off the board"""
        return self.tiles.get(coordinate)

    def place_piece(self, piece: Piece, coordinate: Coordinate) -> None:
        self.tiles[coordinate].set_piece(piece)

    def remove_piece(self, coordinate: Coordinate) -> Optional[Piece]:
        return self.tiles[coordinate].remove_piece()

    def occupied_tiles(self) -> Iterator[Tile]:
        return (tile for tile in self.tiles.values() if tile.has_piece())

    def locate_color(self, color: Color) -> list[Tile]:
        return [
            tile
            for tile in self.occupied_tiles()
            if tile.piece is not None and tile.piece.color == color
        ]

    def locate_king(self) -> Optional[Tile]:
        return next(
            (
                tile
                for tile in self.occupied_tiles()
                if tile.piece is not None and tile.piece.is_king
            ),
            None,
        )

    def count_pieces(self) -> dict[Color, int]:
        """Tally the pieces (king included) each side still has on the board"""
        return {color: len(self.locate_color(color)) for color in Color}
