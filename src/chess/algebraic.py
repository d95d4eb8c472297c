"""
Standard Algebraic Notation (SAN): decode "Nf3", "exd5", "e8=Q", "O-O" into a Move of the given position.

examples:
* e4: pawn to e4 (from e3, or e2 when it takes a double step)
* Nbd7: the knight on the b-file goes to d7
* R1e2: the rook on the first rank goes to e2
* exd5: pawn on the e-file takes on d5
* e8=Q+: pawn promotes to a queen (giving check: the suffix is accepted and ignored)
* O-O / O-O-O: king side / queen side castling
"""

import re
from dataclasses import dataclass
from typing import Optional

from src.chess.calculator import (
    InvalidPieceMove,
    MoveError,
    calculate_move,
    pawn_starting_rank,
)
from src.chess.castling import CastlingSide, castling_squares
from src.chess.moves import (
    KING_SIDE_CASTLING,
    QUEEN_SIDE_CASTLING,
    Move,
    locate_origins,
    move_to_algebraic,
    piece_letter_to_type,
)
from src.chess.pieces import Piece, PieceType, pawn_direction
from src.chess.position import Position
from src.chess.square import FILE_NAMES, Square

__all__ = [
    "AlgebraicMoveError",
    "AmbiguousAlgebraicNotation",
    "InvalidAlgebraicNotation",
    "calculate_move_from_algebraic",
    "move_to_algebraic",
]

CHECK_SUFFIXES = ("+", "#")

PIECE_MOVE_PATTERN = re.compile(
    r"^(?P<piece>[NBRQK])(?P<file>[a-h])?(?P<rank>[1-8])?(?P<capture>x)?(?P<to>[a-h][1-8])$"
)
PAWN_MOVE_PATTERN = re.compile(
    r"^(?:(?P<file>[a-h])(?P<capture>x))?(?P<to>[a-h][1-8])(?:=(?P<promotion>[NBRQ]))?$"
)
CASTLING_NOTATION: dict[str, CastlingSide] = {
    KING_SIDE_CASTLING: CastlingSide.KING_SIDE,
    QUEEN_SIDE_CASTLING: CastlingSide.QUEEN_SIDE,
}


@dataclass(frozen=True)
class InvalidAlgebraicNotation:
    algebraic: str

    @property
    def message(self) -> str:
        return f"Cannot interpret {self.algebraic!r} as a move."


@dataclass(frozen=True)
class AmbiguousAlgebraicNotation:
    algebraic: str
    piece: Piece

    @property
    def message(self) -> str:
        return f"More than one piece {self.piece.to_fen()!r} fits {self.algebraic!r}."


AlgebraicMoveError = MoveError | InvalidAlgebraicNotation | AmbiguousAlgebraicNotation


def calculate_move_from_algebraic(
    position: Position, algebraic: str
) -> Move | AlgebraicMoveError:
    """
    Find the move of the side to move that matches the algebraic notation.
    ----

    Tried in order: castling, piece moves (N, B, R, Q, K), pawn moves.
    The candidate is always checked against the legal moves of the position.
    """
    notation = _strip_check_suffix(algebraic)

    if notation in CASTLING_NOTATION:
        return _castling_move(position, CASTLING_NOTATION[notation])

    piece_match = PIECE_MOVE_PATTERN.match(notation)
    if piece_match is not None:
        return _piece_move(position, algebraic, piece_match)

    pawn_match = PAWN_MOVE_PATTERN.match(notation)
    if pawn_match is not None:
        return _pawn_move(position, algebraic, pawn_match)

    return InvalidAlgebraicNotation(algebraic)


def _strip_check_suffix(algebraic: str) -> str:
    """A single + or # at the end is allowed. We do not verify it."""
    if algebraic.endswith(CHECK_SUFFIXES):
        return algebraic[:-1]
    return algebraic


def _castling_move(position: Position, side: CastlingSide) -> Move | AlgebraicMoveError:
    color = position.color_to_move
    king = Piece(PieceType.KING, color)
    squares = castling_squares(color, side)
    if position.piece(squares.king_from) != king:
        return InvalidPieceMove(king)
    # an occupied g1 is not "capturing your own piece" here: you simply cannot castle
    if squares.king_to not in position.legal_destinations(squares.king_from):
        return InvalidPieceMove(king)
    return calculate_move(position, squares.king_from, squares.king_to)


def _piece_move(
    position: Position, algebraic: str, match: re.Match[str]
) -> Move | AlgebraicMoveError:
    piece = Piece(piece_letter_to_type(match["piece"]), position.color_to_move)
    # NOTE: Kings never need disambiguation: there is only one of them
    if piece.type == PieceType.KING and match["file"] and match["rank"]:
        return InvalidAlgebraicNotation(algebraic)

    to_square = Square.from_algebraic(match["to"])
    origins = locate_origins(
        position.board,
        piece,
        to_square,
        file=FILE_NAMES.index(match["file"]) + 1 if match["file"] else None,
        rank=int(match["rank"]) if match["rank"] else None,
    )
    if len(origins) > 1:
        # a pinned piece can see the square, but cannot go there
        legal_origins = [
            square
            for square in origins
            if to_square in position.legal_destinations(square)
        ]
        if len(legal_origins) > 1:
            return AmbiguousAlgebraicNotation(algebraic, piece)
        origins = legal_origins
    if not origins:
        return InvalidPieceMove(piece)

    move = calculate_move(position, origins[0], to_square)
    if isinstance(move, Move) and match["capture"] and not move.is_capture:
        return InvalidAlgebraicNotation(algebraic)
    return move


def _pawn_move(
    position: Position, algebraic: str, match: re.Match[str]
) -> Move | AlgebraicMoveError:
    color = position.color_to_move
    pawn = Piece(PieceType.PAWN, color)
    to_square = Square.from_algebraic(match["to"])

    from_square = _pawn_origin(position, to_square, match["file"])
    if from_square is None or position.piece(from_square) != pawn:
        return InvalidPieceMove(pawn)

    promotion: Optional[PieceType] = (
        piece_letter_to_type(match["promotion"]) if match["promotion"] else None
    )
    move = calculate_move(position, from_square, to_square, promotion=promotion)
    if not isinstance(move, Move):
        return move
    if match["capture"] and not move.is_capture:
        return InvalidAlgebraicNotation(algebraic)
    if promotion is not None and move.promotion is None:
        return InvalidAlgebraicNotation(algebraic)
    return move


def _pawn_origin(
    position: Position, to_square: Square, capture_file: Optional[str]
) -> Optional[Square]:
    """
    Walk one square back (against the pawn direction) from the target.

    NOTE: A non-capturing pawn that lands on its double step rank may come from its starting rank,
    as long as the square in between is empty.
    """
    color = position.color_to_move
    direction = pawn_direction(color)
    df = 0
    if capture_file is not None:
        df = FILE_NAMES.index(capture_file) + 1 - to_square.file

    one_back = to_square.offset(df, -direction)
    if one_back is None or capture_file is not None:
        return one_back

    double_step_rank = pawn_starting_rank(color) + 2 * direction
    if to_square.rank == double_step_rank and position.board.is_empty(one_back):
        return to_square.offset(0, -2 * direction)
    return one_back

