"""
Representation of a single position in the game: everything a FEN string encodes, plus the moves that led here
and the legal moves from here.
"""

from dataclasses import dataclass, field
from typing import Optional

from src.chess.board import Board
from src.chess.castling import CastlingRights
from src.chess.moves import Move
from src.chess.pieces import Color, Piece
from src.chess.square import Square


@dataclass(frozen=True)
class Position:
    """
    Aggregate board state.
    ----

    * board: placement of the pieces (never modified once it belongs to a Position)
    * color_to_move: whose turn it is
    * castling_rights: which castling options are still available
    * en_passant_square: the square a pawn passed over with a double step in the previous move (if any)
    * half_move_clock: half moves made since the last pawn move or capture
    * full_move_number: starts at 1 and increments after every move black makes
    * moves: the moves that led to this position (in order)
    * legal_moves: per origin square, the squares the piece standing there may legally move to.

    NOTE: `legal_moves` is filled exactly once (see src/chess/legality.py) and then left alone.
    It is not an init field, so `dataclasses.replace()` always hands out a Position with an empty mapping.
    """

    board: Board
    color_to_move: Color = Color.WHITE
    castling_rights: CastlingRights = field(default_factory=CastlingRights)
    en_passant_square: Optional[Square] = None
    half_move_clock: int = 0
    full_move_number: int = 1
    moves: tuple[Move, ...] = ()
    legal_moves: dict[Square, list[Square]] = field(
        default_factory=dict, init=False, compare=False, repr=False
    )

    def piece(self, square: Square) -> Optional[Piece]:
        return self.board.piece(square)

    def legal_destinations(self, square: Square) -> list[Square]:
        return self.legal_moves.get(square, [])

    @property
    def legal_move_count(self) -> int:
        return sum(len(destinations) for destinations in self.legal_moves.values())
