"""
The Match class is the entrypoint into the domain layer for the service layer.
It owns the board and the turn/outcome status, and answers the two questions the session layer asks every turn:
is this move legal? --> what happened after making it (which tiles lost their piece)?
"""

import logging
from dataclasses import dataclass, field
from typing import NamedTuple, Self

from src.core.models import MatchModel
from src.tafl.board import Board
from src.tafl.capture import is_custodian_capture, is_king_surrounded
from src.tafl.coordinate import Direction
from src.tafl.pieces import PlayerId
from src.tafl.status import MatchStatus
from src.tafl.tile import PassabilityRule, Tile, TileType, can_occupy

logger = logging.getLogger(__name__)


class MatchKey(NamedTuple):
    """Identity of a match: who attacks and who defends (order matters)."""

    attacker: PlayerId
    defender: PlayerId


@dataclass(eq=False)
class Match:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    attacker: PlayerId
    defender: PlayerId
    board: Board
    status: MatchStatus = MatchStatus.ATTACKER_TURN
    passability: PassabilityRule = field(default=can_occupy, repr=False)

    @classmethod
    def new_match(cls, attacker: PlayerId, defender: PlayerId) -> Self:
        """Fresh board in the starting formation, attacker moves first."""
        logger.info("New match: %s attacks, %s defends", attacker, defender)
        return cls(attacker, defender, Board.initialize(attacker, defender))

    @classmethod
    def from_model(cls, model: MatchModel) -> Self:
        """Define how to construct a Match from the information the Service layer actually has

        NOTE the passability rule is not part of the snapshot: the rebuilt match uses the default `can_occupy`.
        Reassign `passability` afterwards when playing a variant.
        """
        status = MatchStatus.from_name(model.status)
        board = Board.from_notation(model.position, model.attacker, model.defender)
        return cls(model.attacker, model.defender, board, status)

    def to_model(self) -> MatchModel:
        """Encode back into a format the Service layer uses"""
        return MatchModel(
            attacker=self.attacker,
            defender=self.defender,
            position=self.board.to_notation(),
            status=self.status.to_name(),
        )

    @property
    def key(self) -> MatchKey:
        return MatchKey(self.attacker, self.defender)

    def __eq__(self, other: object) -> bool:
        """NOTE only the participants count: board and status are ignored. Use `key` to index active matches."""
        if not isinstance(other, Match):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    # --- TURN / OUTCOME ---
    def is_over(self) -> bool:
        return self.status.is_over

    def current_player(self) -> PlayerId:
        """Player in control of this turn. (After the match is decided this falls back to the defender)"""
        if self.status == MatchStatus.ATTACKER_TURN:
            return self.attacker
        return self.defender

    def swap_turn(self) -> None:
        """Called by the session layer once a move has been made (and did not end the match)."""
        self.status = self.status.swapped()

    # --- MOVES ---
    def available_moves(self, tile: Tile) -> list[Tile]:
        """
        Sliding movement, like a rook: scan outward in each direction, one tile at a time, and stop at the first tile
        that is occupied or that the piece may not enter (the throne).

        Order: left (near to far), right, up, down.
        """
        piece = tile.piece
        if piece is None:
            return []

        moves: list[Tile] = []
        for direction in Direction:
            distance = 1
            while True:
                target = self.board.tile_at(tile.coordinate.step(direction, distance))
                if target is None:
                    break
                if target.has_piece() or not self.passability(target.type, piece.is_king):
                    break
                moves.append(target)
                distance += 1

        logger.debug("%d moves available from %r", len(moves), tile)
        return moves

    def is_valid_move(self, from_tile: Tile, to_tile: Tile) -> bool:
        """
        1. The match must still be running
        2. You can only move pieces of the faction whose turn it is (king moves on the defender's turn)
        3. The destination must be reachable by sliding
        """
        piece = from_tile.piece
        if piece is None or self.is_over():
            return False

        if piece.color != self.status.faction_to_move:
            return False

        return to_tile in self.available_moves(from_tile)

    def make_move(self, from_tile: Tile, to_tile: Tile) -> set[Tile]:
        """
        Move the piece on `from_tile` to `to_tile` and resolve the consequences.
        Returns the tiles whose pieces got captured by this move.

        PRECONDITION: is_valid_move(from_tile, to_tile) returned True. Not checked again here.

        NOTE the king never captures by moving: only ordinary pieces trigger capture resolution.
        """
        piece = from_tile.remove_piece()
        assert piece is not None  # guaranteed by the precondition
        to_tile.set_piece(piece)
        logger.debug("Moved %s from %r to %r", piece.to_notation(), from_tile.coordinate, to_tile.coordinate)

        if piece.is_king and to_tile.type == TileType.GOAL:
            self.status = self.status.king_escaped()
            logger.info("King escaped to %s: %s wins", to_tile.coordinate.to_label(), self.defender)
            return set()

        if piece.is_king:
            return set()

        return self._capture(to_tile)

    # -- PRIVATE HELPERS ---
    def _capture(self, capturer_tile: Tile) -> set[Tile]:
        """Every direction is evaluated independently: a single move can take up to four pieces."""
        captured: set[Tile] = set()
        for direction in Direction:
            if not is_custodian_capture(self.board, capturer_tile, direction):
                continue

            victim_tile = self.board.tiles[capturer_tile.coordinate.step(direction)]
            assert victim_tile.piece is not None  # checked by is_custodian_capture
            if victim_tile.piece.is_king:
                if self._capture_king(victim_tile):
                    captured.add(victim_tile)
            else:
                victim_tile.remove_piece()
                captured.add(victim_tile)

        if captured:
            logger.info(
                "Captured on %s",
                ", ".join(sorted(tile.coordinate.to_label() for tile in captured)),
            )
        return captured

    def _capture_king(self, king_tile: Tile) -> bool:
        """The king is only taken when surrounded on all four sides."""
        if not is_king_surrounded(self.board, king_tile):
            return False
        king_tile.remove_piece()
        self.status = self.status.king_captured()
        logger.info("King captured on %s: %s wins", king_tile.coordinate.to_label(), self.attacker)
        return True


def new_match(attacker: PlayerId, defender: PlayerId) -> Match:
    """Convenience entrypoint: same as Match.new_match"""
    return Match.new_match(attacker, defender)
