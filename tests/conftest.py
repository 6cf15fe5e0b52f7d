"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Callable

import pytest

from src.tafl.board import Board
from src.tafl.coordinate import Coordinate
from src.tafl.match import Match
from src.tafl.pieces import Piece
from src.tafl.status import MatchStatus

ATTACKER = "attacker_player"
DEFENDER = "defender_player"

# (x, y) -> 'a' (attacker), 'd' (defender), or 'k' (king)
PieceLayout = dict[tuple[int, int], str]


@pytest.fixture
def board_with_pieces() -> Callable[[PieceLayout], Board]:
    """Call the inner function with the pieces to place on an otherwise empty board"""

    def _create_board(pieces: PieceLayout) -> Board:
        board = Board.empty()
        for (x, y), character in pieces.items():
            board.place_piece(
                Piece.from_notation(character, ATTACKER, DEFENDER), Coordinate(x, y)
            )
        return board

    return _create_board


@pytest.fixture
def match_with_pieces(
    board_with_pieces: Callable[[PieceLayout], Board],
) -> Callable[..., Match]:
    """Call the inner function with the pieces (and optionally whose turn it is)"""

    def _create_match(
        pieces: PieceLayout, status: MatchStatus = MatchStatus.ATTACKER_TURN
    ) -> Match:
        return Match(ATTACKER, DEFENDER, board_with_pieces(pieces), status)

    return _create_match


@pytest.fixture
def position_with_pieces(
    board_with_pieces: Callable[[PieceLayout], Board],
) -> Callable[[PieceLayout], str]:
    """Same as board_with_pieces, but returns the position notation (what a client would send)"""

    def _create_position(pieces: PieceLayout) -> str:
        return board_with_pieces(pieces).to_notation()

    return _create_position
