"""
Type definitions used across layers
"""

from enum import StrEnum


class MatchStatusName(StrEnum):
    ATTACKER_TURN = "attacker_turn"
    DEFENDER_TURN = "defender_turn"
    ATTACKER_WIN = "attacker_win"
    DEFENDER_WIN = "defender_win"

