"""
Custom exceptions.

Expected problems with a requested move (not your turn, illegal move, ambiguous notation) are NOT raised in the domain layer:
they are returned as data (see src/chess/calculator.py and src/chess/algebraic.py) and only the service layer turns them into exceptions.
Everything below is either a broken contract (programming error) or input that cannot be interpreted at all.
"""

from typing import Optional


class GameError(Exception):
    """Top level exception. Every other exception in this project derives from it."""


# --- DOMAIN: contract violations ---
class NoPieceAtSquareError(GameError):
    """Asked to move from an empty square."""


class MoveDoesNotMatchBoardError(GameError):
    """A Move is applied to a position it was not computed for."""


class AlreadyComputedError(GameError):
    """The legal moves of a position were already filled in."""


# --- DOMAIN: malformed input ---
class InvalidFENError(GameError):
    """Cannot interpret the string as FEN."""


class PGNParseError(GameError):
    """Malformed PGN. Carries the location (line:column) and the raw text that triggered it."""

    def __init__(
        self,
        message: str,
        line: int,
        column: int,
        context: str,
        cause: Optional[object] = None,
    ) -> None:
        self.line = line
        self.column = column
        self.context = context
        self.cause = cause
        super().__init__(f"{message} at {line}:{column} {context!r}")


# --- SERVICE ---
class IllegalMoveError(GameError):
    """The requested move cannot be played."""


class NotYourTurnError(GameError):
    """Pieces of the side not to move were asked to move."""


class GameStateError(GameError):
    """Operation does not fit the current state of the game."""


class RepositoryError(GameError):
    """Persistence layer could not find / store a record."""


# --- API ---
class InvalidRequestError(GameError):
    """Request data does not pass validation."""
