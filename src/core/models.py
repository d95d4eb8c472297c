"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the API layer (higher) and domain/db layers (lower) will use model(s) defined here to send to/receive from the Service
(Decouples the data model specific to the DB layer, API layer, or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass, field

# Type aliases to make GameModel easier to read
TagName = str
TagValue = str


@dataclass
class GameModel:
    """
    Transport-safe representation of a chess game used between API, Service and DB layers.

    Replaying `moves_algebraic` from `starting_fen` yields `current_fen`.
    """

    starting_fen: str
    current_fen: str
    history_fen: list[str] = field(default_factory=list)
    moves_algebraic: list[str] = field(default_factory=list)
    comments: list[str | None] = field(default_factory=list)
    tags: dict[TagName, TagValue] = field(default_factory=dict)
    result: str = "*"
