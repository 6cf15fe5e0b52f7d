"""
Exceptions raised by the layers around the rules engine.

The engine itself reports an illegal move with a False / empty result. These are raised by
construction helpers (notation, snapshots) and by the service layer that guards the engine.
"""


class GameError(Exception):
    """Top-level exception: catch this one if you don't care which layer complained."""


class GameStateError(GameError):
    """The match is not in a state that allows the requested action."""


class IllegalMoveError(GameError):
    """The requested move breaks the movement rules."""


class NotYourTurnError(GameError):
    """The requesting player is not the one in control of this turn."""


class InvalidRequestError(GameError):
    """Externally supplied data could not be interpreted."""


class NotationError(GameError):
    """A position string could not be parsed into a board."""


class RegistryError(GameError):
    """Problems looking up / registering active matches."""


class MatchNotFoundError(RegistryError):
    pass


class MatchAlreadyExistsError(RegistryError):
    pass
