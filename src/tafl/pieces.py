"""Defines the pieces of both armies"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Self

PlayerId = str


class Color(Enum):
    """BLACK attacks, WHITE defends (and owns the king)."""

    BLACK = auto()
    WHITE = auto()


NOTATION_TO_PIECE: dict[str, tuple[Color, bool]] = {
    "a": (Color.BLACK, False),
    "d": (Color.WHITE, False),
    "k": (Color.WHITE, True),
}

PIECE_TO_NOTATION: dict[tuple[Color, bool], str] = {
    value: key for key, value in NOTATION_TO_PIECE.items()
}


@dataclass(frozen=True)
class Piece:
    # frozen: a piece never changes faction (or ownership) during its lifetime, only the tile it stands on changes
    color: Color
    owner: PlayerId
    is_king: bool = False

    @classmethod
    def attacker(cls, owner: PlayerId) -> Self:
        return cls(Color.BLACK, owner)

    @classmethod
    def defender(cls, owner: PlayerId) -> Self:
        return cls(Color.WHITE, owner)

    @classmethod
    def king(cls, owner: PlayerId) -> Self:
        return cls(Color.WHITE, owner, is_king=True)

    @classmethod
    def from_notation(cls, character: str, attacker: PlayerId, defender: PlayerId) -> Self:
        color, is_king = NOTATION_TO_PIECE[character]
        owner = attacker if color == Color.BLACK else defender
        return cls(color, owner, is_king)

    def to_notation(self) -> str:
        return PIECE_TO_NOTATION[(self.color, self.is_king)]

    def is_enemy_of(self, other: "Piece") -> bool:
        return self.color != other.color

    def is_ally_of(self, other: "Piece") -> bool:
        return self.color == other.color
