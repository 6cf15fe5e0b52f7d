"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
The API layer (higher) and the domain layer (lower) both convert to/from the model defined here
(decouples the in-memory Match with its mutable tiles from what gets sent across boundaries)
"""

from dataclasses import dataclass

# Type aliases to make MatchModel easier to read
PlayerId = str
PositionNotation = str


@dataclass
class MatchModel:
    """Transport-safe representation of a match used between API, Service, and Match layers."""

    attacker: PlayerId
    defender: PlayerId
    position: PositionNotation
    status: str
