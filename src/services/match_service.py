"""Orchestration of communication from the session/transport layer to the rules engine (and the reverse direction)."""

import logging
import threading
from contextlib import contextmanager
from typing import Iterator

from src.api.models import (
    AvailableMovesRequest,
    AvailableMovesResponse,
    EndMatchRequest,
    GetMatchRequest,
    MatchRequest,
    MatchResponse,
    MoveRequest,
    MoveResponse,
    StartMatchRequest,
    TilePosition,
)
from src.core.exceptions import (
    GameStateError,
    IllegalMoveError,
    MatchAlreadyExistsError,
    MatchNotFoundError,
    NotYourTurnError,
)
from src.core.shared_types import MatchStatusName
from src.tafl.board import Board
from src.tafl.match import Match, MatchKey

logger = logging.getLogger(__name__)


class MatchRegistry:
    """
    The single authoritative place to find the active match between two players.

    Matches are looked up by MatchKey (attacker, defender), never by comparing Match objects.
    Each match gets its own lock: the engine assumes a single writer, so every mutation of a match
    has to happen while holding it. Different matches never share a lock.
    """

    def __init__(self) -> None:
        self._matches: dict[MatchKey, Match] = {}
        self._locks: dict[MatchKey, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def register(self, match: Match) -> Match:
        with self._registry_lock:
            if match.key in self._matches:
                raise MatchAlreadyExistsError(
                    f"Match already active between {match.attacker!r} and {match.defender!r}."
                )
            self._matches[match.key] = match
            self._locks[match.key] = threading.Lock()
        return match

    def get(self, key: MatchKey) -> Match:
        with self._registry_lock:
            match = self._matches.get(key)
        if match is None:
            raise MatchNotFoundError(f"No active match for {key.attacker!r} vs {key.defender!r}.")
        return match

    def remove(self, key: MatchKey) -> Match:
        with self._registry_lock:
            match = self._matches.pop(key, None)
            self._locks.pop(key, None)
        if match is None:
            raise MatchNotFoundError(f"No active match for {key.attacker!r} vs {key.defender!r}.")
        return match

    @contextmanager
    def lock_for(self, key: MatchKey) -> Iterator[Match]:
        """Hold the match's lock for the duration of the block, yielding the match."""
        with self._registry_lock:
            lock = self._locks.get(key)
        if lock is None:
            raise MatchNotFoundError(f"No active match for {key.attacker!r} vs {key.defender!r}.")
        with lock:
            yield self.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._matches

    def __len__(self) -> int:
        return len(self._matches)


class MatchService:
    """Orchestration of layers for a tafl match."""

    def __init__(self, registry: MatchRegistry) -> None:
        self.registry = registry

    # -- session layer logic ---
    def start_match(self, request: StartMatchRequest) -> MatchResponse:
        """Two players got paired: set up the board and register the match."""
        if request.starting_position is None:
            match = Match.new_match(request.attacker, request.defender)
        else:
            board = Board.from_notation(
                request.starting_position, request.attacker, request.defender
            )
            match = Match(request.attacker, request.defender, board)
        self.registry.register(match)
        return self._create_match_response(match)

    def get_match(self, request: GetMatchRequest) -> MatchResponse:
        """Retrieve the current state of a match (e.g. to resync a client)."""
        with self.registry.lock_for(self._key(request)) as match:
            return self._create_match_response(match)

    def available_moves(self, request: AvailableMovesRequest) -> AvailableMovesResponse:
        """Tiles the piece on the requested tile could slide to (to highlight them in a client)."""
        with self.registry.lock_for(self._key(request)) as match:
            coordinate = request.tile.to_coordinate()
            moves = match.available_moves(match.board.tiles[coordinate])
        return AvailableMovesResponse(
            attacker=request.attacker,
            defender=request.defender,
            tile=request.tile,
            moves=[TilePosition.from_coordinate(tile.coordinate) for tile in moves],
        )

    def make_move(self, request: MoveRequest) -> MoveResponse:
        """
        Make a move attempt.
        -----

        1. match must still be running
        2. it must be the requesting player's turn
        3. the source tile must hold a piece
        4. the move must be legal
        5. make the move, then hand the turn over (unless the match just ended)
        """
        with self.registry.lock_for(self._key(request)) as match:
            if match.is_over():
                raise GameStateError(f"Match is over. status: {match.status.name}")

            if request.player_id != match.current_player():
                raise NotYourTurnError(
                    f"It is not your turn. Waiting for player {match.current_player()} to make a move first."
                )

            from_tile = match.board.tiles[request.from_tile.to_coordinate()]
            to_tile = match.board.tiles[request.to_tile.to_coordinate()]
            if not from_tile.has_piece():
                raise IllegalMoveError(
                    f"No piece to move on {from_tile.coordinate.to_label()}."
                )
            if not match.is_valid_move(from_tile, to_tile):
                logger.warning(
                    "Rejected move %s -> %s by %s",
                    from_tile.coordinate.to_label(),
                    to_tile.coordinate.to_label(),
                    request.player_id,
                )
                raise IllegalMoveError(
                    f"Move not allowed: {from_tile.coordinate.to_label()} -> {to_tile.coordinate.to_label()}"
                )

            captured = match.make_move(from_tile, to_tile)
            if not match.is_over():
                match.swap_turn()

            return MoveResponse(
                match=self._create_match_response(match),
                captured=[
                    TilePosition.from_coordinate(tile.coordinate)
                    for tile in sorted(captured, key=lambda t: (t.y, t.x))
                ],
            )

    def end_match(self, request: EndMatchRequest) -> None:
        """Drop the match from the registry (finished / abandoned). Persisting it is someone else's job."""
        # wait for a move in flight to finish before dropping the match
        with self.registry.lock_for(self._key(request)):
            match = self.registry.remove(self._key(request))
        logger.info("Match %s vs %s removed (status: %s)", match.attacker, match.defender, match.status.name)

    # -- Internal helpers --
    def _key(self, request: MatchRequest) -> MatchKey:
        return MatchKey(request.attacker, request.defender)

    def _create_match_response(self, match: Match) -> MatchResponse:
        """Convert info in the Match's model to a MatchResponse."""
        model = match.to_model()
        return MatchResponse(
            attacker=model.attacker,
            defender=model.defender,
            position=model.position,
            status=MatchStatusName(model.status),
            current_player=None if match.is_over() else match.current_player(),
        )
