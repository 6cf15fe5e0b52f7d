"""
A coordinate on the board + the four directions pieces can slide in

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# Hnefatafl is played on 11x11. Kept adjustable like any other board constant, but the starting formation assumes 11x11
BOARD_DIMENSIONS = (11, 11)

Vector = tuple[int, int]


class Direction(Enum):
    """Cardinal directions. Declaration order is the order moves are scanned in."""

    LEFT = (-1, 0)
    RIGHT = (1, 0)
    UP = (0, -1)
    DOWN = (0, 1)

    @property
    def vector(self) -> Vector:
        return self.value


@dataclass(frozen=True)
class Coordinate:
    x: int
    y: int

    def to_label(self) -> str:
        return f"{chr(self.x + ord('a'))}{self.y + 1}"

    def is_within_bounds(self) -> bool:
        return (0 <= self.x < BOARD_DIMENSIONS[0]) and (0 <= self.y < BOARD_DIMENSIONS[1])

    def step(self, direction: Direction, distance: int = 1) -> Coordinate:
        dx, dy = direction.vector
        return Coordinate(self.x + dx * distance, self.y + dy * distance)


def all_coordinates() -> list[Coordinate]:
    return [
        Coordinate(x, y)
        for y in range(BOARD_DIMENSIONS[1])
        for x in range(BOARD_DIMENSIONS[0])
    ]
