"""
Type definitions used across layers

NOTE: the chess domain has its own Color and PieceType (src/chess/pieces.py). These are the string versions for the outer layers;
the imports show which versions are used in what part of the code.
"""

from enum import StrEnum


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"


class PieceType(StrEnum):
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"


class GameResult(StrEnum):
    """PGN game termination markers"""

    WHITE_WINS = "1-0"
    BLACK_WINS = "0-1"
    DRAW = "1/2-1/2"
    UNDECIDED = "*"
