"""
Turn / outcome state machine of a match.

Each transition is a function on the current status that returns the next one: the Match only ever
assigns what these return, so it cannot end up in a state that has no edge leading to it.

    ATTACKER_TURN <--swapped--> DEFENDER_TURN
          |                           |
          +-- king_escaped  --> DEFENDER_WIN
          +-- king_captured --> ATTACKER_WIN
"""

from enum import Enum, auto

from src.core.exceptions import GameStateError
from src.core.shared_types import MatchStatusName
from src.tafl.pieces import Color


class MatchStatus(Enum):
    ATTACKER_TURN = auto()
    DEFENDER_TURN = auto()
    ATTACKER_WIN = auto()
    DEFENDER_WIN = auto()

    @property
    def is_over(self) -> bool:
        return self not in (MatchStatus.ATTACKER_TURN, MatchStatus.DEFENDER_TURN)

    @property
    def faction_to_move(self) -> Color | None:
        """Color whose pieces may move now. None once the match is decided."""
        return {
            MatchStatus.ATTACKER_TURN: Color.BLACK,
            MatchStatus.DEFENDER_TURN: Color.WHITE,
        }.get(self)

    def swapped(self) -> "MatchStatus":
        # no edge leaves a decided match: a finished status stays as it is
        if self.is_over:
            return self
        if self == MatchStatus.ATTACKER_TURN:
            return MatchStatus.DEFENDER_TURN
        return MatchStatus.ATTACKER_TURN

    def king_escaped(self) -> "MatchStatus":
        self._assert_in_progress("king escape")
        return MatchStatus.DEFENDER_WIN

    def king_captured(self) -> "MatchStatus":
        self._assert_in_progress("king capture")
        return MatchStatus.ATTACKER_WIN

    def to_name(self) -> str:
        return MatchStatusName[self.name].value

    @classmethod
    def from_name(cls, name: str) -> "MatchStatus":
        normalized = name.strip().replace(" ", "_").upper()
        if normalized not in cls.__members__:
            raise GameStateError(
                f"Invalid status: {name!r}. \nPick one from {','.join([status.to_name() for status in cls])}"
            )
        return cls[normalized]

    def _assert_in_progress(self, event: str) -> None:
        if self.is_over:
            raise GameStateError(f"Cannot register a {event}: match already ended ({self.name})")
