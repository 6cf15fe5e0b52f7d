"""
Compact text notation for a Tafl position (modelled after the board part of a FEN string)

* rows are separated by '/', starting with y = 0 (top edge) down to y = 10
* inside a row, characters run from x = 0 to x = 10
* 'a' = attacker, 'd' = defender, 'k' = king
* a number denotes that many consecutive empty tiles (so it can take two digits: '11' is an empty row)
"""

from src.core.exceptions import NotationError
from src.tafl.coordinate import BOARD_DIMENSIONS, Coordinate
from src.tafl.pieces import NOTATION_TO_PIECE

# Standard 11x11 formation: four T-shaped attacker groups on the edges, defender diamond around the king on the throne
STARTING_POSITION = "/".join(
    [
        "3aaaaa3",
        "5a5",
        "11",
        "a4d4a",
        "a3ddd3a",
        "aa1ddkdd1aa",
        "a3ddd3a",
        "a4d4a",
        "11",
        "5a5",
        "3aaaaa3",
    ]
)

EMPTY_POSITION = "/".join([str(BOARD_DIMENSIONS[0])] * BOARD_DIMENSIONS[1])


def parse_position(notation: str) -> dict[Coordinate, str]:
    """Map every occupied coordinate to its piece character. Empty tiles are left out."""
    rows = notation.strip().split("/")
    if len(rows) != BOARD_DIMENSIONS[1]:
        raise NotationError(
            f"Expected {BOARD_DIMENSIONS[1]} rows, got {len(rows)}: {notation!r}"
        )

    occupied: dict[Coordinate, str] = {}
    for y, row in enumerate(rows):
        occupied.update(_parse_row(row, y))

    kings = [character for character in occupied.values() if character == "k"]
    if len(kings) > 1:
        raise NotationError(f"At most one king allowed, found {len(kings)}")
    return occupied


def _parse_row(row: str, y: int) -> dict[Coordinate, str]:
    occupied: dict[Coordinate, str] = {}
    x = 0
    run_length = ""
    for character in row:
        if character.isdigit():
            run_length += character
            continue

        # a letter closes the pending run of empty tiles
        if run_length:
            x += int(run_length)
            run_length = ""
        if character not in NOTATION_TO_PIECE:
            raise NotationError(f"Unknown piece character {character!r} in row {y}")
        occupied[Coordinate(x, y)] = character
        x += 1

    if run_length:
        x += int(run_length)
    if x != BOARD_DIMENSIONS[0]:
        raise NotationError(
            f"Row {y} ({row!r}) covers {x} tiles, expected {BOARD_DIMENSIONS[0]}"
        )
    return occupied


def row_to_notation(characters: list[str | None]) -> str:
    """Inverse of _parse_row: None marks an empty tile"""
    parts: list[str] = []
    empty_count = 0
    for character in characters:
        if character is None:
            empty_count += 1
            continue
        if empty_count > 0:
            parts.append(str(empty_count))
            empty_count = 0
        parts.append(character)

    # if the entire row is empty, then we still place this number in the string
    if empty_count > 0:
        parts.append(str(empty_count))
    return "".join(parts)
