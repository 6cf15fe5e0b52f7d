"""Unit tests for src/services/match_service.py"""

import threading
from typing import Callable

import pytest

from src.core.exceptions import (
    GameError,
    GameStateError,
    IllegalMoveError,
    MatchAlreadyExistsError,
    MatchNotFoundError,
    NotYourTurnError,
)
from src.core.shared_types import MatchStatusName
from src.services.match_service import (
    AvailableMovesRequest,
    EndMatchRequest,
    GetMatchRequest,
    MatchRegistry,
    MatchResponse,
    MatchService,
    MoveRequest,
    MoveResponse,
    StartMatchRequest,
    TilePosition,
)
from src.tafl.match import MatchKey, new_match
from src.tafl.notation import STARTING_POSITION

ATTACKER = "attacker_player"
DEFENDER = "defender_player"

PositionFactory = Callable[[dict[tuple[int, int], str]], str]


@pytest.fixture
def service() -> MatchService:
    return MatchService(MatchRegistry())


def start(service: MatchService, position: str | None = None) -> MatchResponse:
    return service.start_match(
        StartMatchRequest(attacker=ATTACKER, defender=DEFENDER, starting_position=position)
    )


def move(
    service: MatchService, player: str, from_xy: tuple[int, int], to_xy: tuple[int, int]
) -> MoveResponse:
    return service.make_move(
        MoveRequest(
            attacker=ATTACKER,
            defender=DEFENDER,
            player_id=player,
            from_tile=TilePosition(x=from_xy[0], y=from_xy[1]),
            to_tile=TilePosition(x=to_xy[0], y=to_xy[1]),
        )
    )


# --- REGISTRY ----
def test_registry_lookup_by_key() -> None:
    registry = MatchRegistry()
    match = registry.register(new_match(ATTACKER, DEFENDER))
    key = MatchKey(ATTACKER, DEFENDER)
    assert key in registry
    assert len(registry) == 1
    assert registry.get(key) is match
    assert MatchKey(DEFENDER, ATTACKER) not in registry


def test_registry_rejects_duplicate() -> None:
    registry = MatchRegistry()
    registry.register(new_match(ATTACKER, DEFENDER))
    with pytest.raises(MatchAlreadyExistsError):
        registry.register(new_match(ATTACKER, DEFENDER))


def test_registry_unknown_match() -> None:
    registry = MatchRegistry()
    key = MatchKey(ATTACKER, DEFENDER)
    with pytest.raises(MatchNotFoundError):
        registry.get(key)
    with pytest.raises(MatchNotFoundError):
        registry.remove(key)
    with pytest.raises(MatchNotFoundError):
        with registry.lock_for(key):
            pass


def test_registry_lock_is_held_inside_block() -> None:
    registry = MatchRegistry()
    match = registry.register(new_match(ATTACKER, DEFENDER))
    other = registry.register(new_match(DEFENDER, ATTACKER))
    with registry.lock_for(match.key) as locked_match:
        assert locked_match is match
        assert registry._locks[match.key].locked()
        # matches do not share locks
        assert not registry._locks[other.key].locked()
    assert not registry._locks[match.key].locked()


# --- SERIALIZED ACCESS ----
def test_get_match_waits_for_move_in_flight(service: MatchService) -> None:
    """A resync never sees a move whose turn hand-over has not happened yet"""
    start(service)
    key = MatchKey(ATTACKER, DEFENDER)
    responses: list[MatchResponse] = []
    reader = threading.Thread(
        target=lambda: responses.append(
            service.get_match(GetMatchRequest(attacker=ATTACKER, defender=DEFENDER))
        )
    )

    with service.registry.lock_for(key) as match:
        match.make_move(match.board.tile(3, 0), match.board.tile(3, 3))
        reader.start()
        reader.join(timeout=0.2)
        assert reader.is_alive()
        match.swap_turn()

    reader.join(timeout=5)
    assert not reader.is_alive()
    assert responses[0].status == MatchStatusName.DEFENDER_TURN
    assert responses[0].current_player == DEFENDER


def test_end_match_waits_for_move_in_flight(service: MatchService) -> None:
    start(service)
    key = MatchKey(ATTACKER, DEFENDER)
    closer = threading.Thread(
        target=service.end_match,
        args=(EndMatchRequest(attacker=ATTACKER, defender=DEFENDER),),
    )

    with service.registry.lock_for(key) as match:
        closer.start()
        closer.join(timeout=0.2)
        assert closer.is_alive()
        assert key in service.registry
        match.make_move(match.board.tile(3, 0), match.board.tile(3, 3))
        match.swap_turn()

    closer.join(timeout=5)
    assert not closer.is_alive()
    assert key not in service.registry


# --- START / GET / END ----
def test_start_a_new_match(service: MatchService) -> None:
    response = start(service)
    assert response.position == STARTING_POSITION
    assert response.status == MatchStatusName.ATTACKER_TURN
    assert response.current_player == ATTACKER
    assert MatchKey(ATTACKER, DEFENDER) in service.registry


def test_start_twice(service: MatchService) -> None:
    start(service)
    with pytest.raises(MatchAlreadyExistsError):
        start(service)


def test_start_from_position(service: MatchService, position_with_pieces: PositionFactory) -> None:
    position = position_with_pieces({(0, 3): "k", (9, 9): "a"})
    response = start(service, position)
    assert response.position == position


def test_get_match(service: MatchService) -> None:
    start(service)
    response = service.get_match(GetMatchRequest(attacker=ATTACKER, defender=DEFENDER))
    assert response.position == STARTING_POSITION


def test_get_unknown_match(service: MatchService) -> None:
    with pytest.raises(MatchNotFoundError):
        service.get_match(GetMatchRequest(attacker=ATTACKER, defender=DEFENDER))


def test_end_match(service: MatchService) -> None:
    start(service)
    service.end_match(EndMatchRequest(attacker=ATTACKER, defender=DEFENDER))
    assert len(service.registry) == 0
    # the pair can start a fresh match afterwards
    assert start(service).position == STARTING_POSITION


# --- AVAILABLE MOVES ----
def test_available_moves(service: MatchService) -> None:
    start(service)
    response = service.available_moves(
        AvailableMovesRequest(attacker=ATTACKER, defender=DEFENDER, tile=TilePosition(x=3, y=0))
    )
    assert [(tile.x, tile.y) for tile in response.moves] == [
        (2, 0),
        (1, 0),
        (0, 0),
        (3, 1),
        (3, 2),
        (3, 3),
        (3, 4),
    ]


# --- MAKE MOVE ----
def test_move_hands_over_the_turn(service: MatchService) -> None:
    start(service)
    response = move(service, ATTACKER, (3, 0), (3, 3))
    assert response.captured == []
    assert response.match.status == MatchStatusName.DEFENDER_TURN
    assert response.match.current_player == DEFENDER


def test_not_your_turn(service: MatchService) -> None:
    start(service)
    with pytest.raises(NotYourTurnError):
        move(service, DEFENDER, (5, 3), (2, 3))


def test_move_from_empty_tile(service: MatchService) -> None:
    start(service)
    with pytest.raises(IllegalMoveError):
        move(service, ATTACKER, (2, 2), (2, 3))


def test_illegal_move_leaves_the_board_alone(service: MatchService) -> None:
    start(service)
    with pytest.raises(IllegalMoveError):
        move(service, ATTACKER, (3, 0), (3, 6))
    after = service.get_match(GetMatchRequest(attacker=ATTACKER, defender=DEFENDER))
    assert after.position == STARTING_POSITION
    assert after.status == MatchStatusName.ATTACKER_TURN


def test_moving_an_enemy_piece(service: MatchService) -> None:
    """It is the attacker's turn, and the attacker tries to push a defender"""
    start(service)
    with pytest.raises(IllegalMoveError):
        move(service, ATTACKER, (5, 3), (2, 3))


def test_capture_is_reported(service: MatchService, position_with_pieces: PositionFactory) -> None:
    start(service, position_with_pieces({(5, 3): "d", (5, 2): "a", (7, 4): "a"}))
    response = move(service, ATTACKER, (7, 4), (5, 4))
    assert response.captured == [TilePosition(x=5, y=3)]
    assert response.match.status == MatchStatusName.DEFENDER_TURN


def test_king_escape_ends_the_match(service: MatchService, position_with_pieces: PositionFactory) -> None:
    start(service, position_with_pieces({(0, 3): "k", (9, 9): "a"}))
    move(service, ATTACKER, (9, 9), (9, 8))
    response = move(service, DEFENDER, (0, 3), (0, 0))

    assert response.match.status == MatchStatusName.DEFENDER_WIN
    assert response.match.current_player is None

    # no turn hand-over after the end: any further move is refused
    with pytest.raises(GameStateError):
        move(service, ATTACKER, (9, 8), (9, 9))


def test_king_capture_ends_the_match(service: MatchService, position_with_pieces: PositionFactory) -> None:
    start(service, position_with_pieces({(5, 6): "k", (6, 6): "a", (5, 7): "a", (0, 6): "a"}))
    response = move(service, ATTACKER, (0, 6), (4, 6))
    assert response.captured == [TilePosition(x=5, y=6)]
    assert response.match.status == MatchStatusName.ATTACKER_WIN
    assert response.match.current_player is None


def test_errors_share_a_root(service: MatchService) -> None:
    """The session layer can catch everything the service raises with a single except"""
    with pytest.raises(GameError):
        service.get_match(GetMatchRequest(attacker=ATTACKER, defender=DEFENDER))
    start(service)
    with pytest.raises(GameError):
        move(service, DEFENDER, (5, 3), (2, 3))
