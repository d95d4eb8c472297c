"""
Move calculator: given a position and a pair of squares, build the fully described Move (or tell why it is not possible).

Key idea: Use strategy pattern to define the movement shape for each piece type.

Whether the move leaves your own king attacked is NOT decided here: that is the job of the legal move filter
(src/chess/legality.py), whose result is consulted through `position.legal_moves`.
"""

from dataclasses import dataclass, replace
from typing import Callable, Optional

from src.chess.castling import CastlingSide, castling_direction, castling_squares
from src.chess.moves import (
    Move,
    disambiguation,
    is_path_clear,
    move_to_algebraic,
    squares_between,
)
from src.chess.pieces import (
    PROMOTION_OPTIONS,
    Color,
    Piece,
    PieceType,
    pawn_direction,
)
from src.chess.position import Position
from src.chess.square import BOARD_DIMENSIONS, Square
from src.core.exceptions import NoPieceAtSquareError


# --- MOVE ERRORS: returned, never raised ---
@dataclass(frozen=True)
class NotYourTurn:
    @property
    def message(self) -> str:
        return "It is not your turn."


@dataclass(frozen=True)
class CaptureOwnPiece:
    @property
    def message(self) -> str:
        return "You cannot capture your own piece."


@dataclass(frozen=True)
class InvalidPieceMove:
    piece: Piece

    @property
    def message(self) -> str:
        return f"Piece {self.piece.to_fen()!r} cannot move like that."


MoveError = NotYourTurn | CaptureOwnPiece | InvalidPieceMove


def calculate_move(
    position: Position,
    from_square: Square,
    to_square: Square,
    promotion: Optional[PieceType] = None,
    ignore_legality_filter: bool = False,
) -> Move | MoveError:
    """
    Build the Move for the piece on `from_square` going to `to_square`.
    ----

    1. It must be the turn of the moving piece's color
    2. You cannot capture your own piece
    3. Unless `ignore_legality_filter` is set: the target must be one of the precomputed legal destinations
    4. The move must follow the movement rule of the piece

    Pawns reaching the final rank are promoted to a queen, unless `promotion` picks another piece type.

    ----
    NOTE `ignore_legality_filter` is meant for the legal move filter itself. Such callers may get castling moves that
    pass through check: only the filter removes those.
    """
    piece = position.piece(from_square)
    if piece is None:
        raise NoPieceAtSquareError(f"No piece at square {from_square}")

    if piece.color != position.color_to_move:
        return NotYourTurn()

    target_piece = position.piece(to_square)
    if target_piece is not None and target_piece.color == piece.color:
        return CaptureOwnPiece()

    if not ignore_legality_filter and to_square not in position.legal_destinations(
        from_square
    ):
        return InvalidPieceMove(piece)

    castling: Optional[CastlingSide] = None
    if piece.type == PieceType.KING and not is_valid_king_step(
        from_square, to_square, piece.color, position
    ):
        castling = castling_side(from_square, to_square, piece.color, position)
        is_valid = castling is not None
    else:
        movement_rule = MOVEMENT_RULES[piece.type]
        is_valid = movement_rule(from_square, to_square, piece.color, position)

    if not is_valid:
        return InvalidPieceMove(piece)

    is_en_passant = (
        piece.type == PieceType.PAWN
        and from_square.file != to_square.file
        and to_square == position.en_passant_square
    )

    move = Move(
        from_square=from_square,
        to_square=to_square,
        piece=piece,
        color=piece.color,
        is_capture=target_piece is not None or is_en_passant,
        castling=castling,
        is_en_passant=is_en_passant,
        promotion=_promotion_piece(piece, to_square, promotion),
        disambiguation=disambiguation(position.board, piece, from_square, to_square),
    )
    return replace(move, algebraic=move_to_algebraic(move))


def _promotion_piece(
    piece: Piece, to_square: Square, choice: Optional[PieceType]
) -> Optional[Piece]:
    """Auto-promote to a queen, unless another piece type is chosen"""
    if piece.type != PieceType.PAWN or to_square.rank != promotion_rank(piece.color):
        return None
    if choice is None:
        return Piece(PieceType.QUEEN, piece.color)
    if choice not in PROMOTION_OPTIONS:
        raise ValueError(
            f"Cannot promote to {choice.name.lower()}. Pick one from {','.join(t.name.lower() for t in PROMOTION_OPTIONS)}"
        )
    return Piece(choice, piece.color)


# --- RANKS THAT MATTER FOR PAWNS ---
def promotion_rank(color: Color) -> int:
    return BOARD_DIMENSIONS[1] if color == Color.WHITE else 1


def pawn_starting_rank(color: Color) -> int:
    return 2 if color == Color.WHITE else BOARD_DIMENSIONS[1] - 1


# --- MOVEMENT RULES ---
def is_valid_pawn_move(
    from_square: Square, to_square: Square, color: Color, position: Position
) -> bool:
    """
    A pawn:
    - moves by a single square forward (onto an empty square).
    - It can move by two in their first move (so when on their starting rank), if both squares are empty
    - takes diagonally (an occupied square, or the en passant square)
    """
    direction = pawn_direction(color)
    df = to_square.file - from_square.file
    dr = to_square.rank - from_square.rank

    if df == 0:
        if dr == direction:
            return position.board.is_empty(to_square)
        if dr == 2 * direction and from_square.rank == pawn_starting_rank(color):
            return position.board.is_empty(to_square) and is_path_clear(
                position.board, from_square, to_square
            )
        return False

    if abs(df) == 1 and dr == direction:
        return (
            not position.board.is_empty(to_square)
            or to_square == position.en_passant_square
        )
    return False


def is_valid_knight_move(
    from_square: Square, to_square: Square, color: Color, position: Position
) -> bool:
    """Knights always move such that |delta_rank| + |delta_file| = 3 (and never in a straight line)"""
    df = abs(to_square.file - from_square.file)
    dr = abs(to_square.rank - from_square.rank)
    return {df, dr} == {1, 2}


def is_valid_bishop_move(
    from_square: Square, to_square: Square, color: Color, position: Position
) -> bool:
    """Bishops move diagonally: |delta_rank| = |delta_file|, without jumping over pieces"""
    df = abs(to_square.file - from_square.file)
    dr = abs(to_square.rank - from_square.rank)
    return df == dr and df > 0 and is_path_clear(position.board, from_square, to_square)


def is_valid_rook_move(
    from_square: Square, to_square: Square, color: Color, position: Position
) -> bool:
    """Rooks move either horizontally or vertically, without jumping over pieces"""
    stays_on_line = (from_square.file == to_square.file) != (
        from_square.rank == to_square.rank
    )
    return stays_on_line and is_path_clear(position.board, from_square, to_square)


def is_valid_queen_move(
    from_square: Square, to_square: Square, color: Color, position: Position
) -> bool:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return is_valid_bishop_move(
        from_square, to_square, color, position
    ) or is_valid_rook_move(from_square, to_square, color, position)


def is_valid_king_step(
    from_square: Square, to_square: Square, color: Color, position: Position
) -> bool:
    """
    The king can move by a single square at the time.

    Castling is modelled as a special king move (see `castling_side()`).
    """
    df = abs(to_square.file - from_square.file)
    dr = abs(to_square.rank - from_square.rank)
    return max(df, dr) == 1


def castling_side(
    from_square: Square, to_square: Square, color: Color, position: Position
) -> Optional[CastlingSide]:
    """
    Is the king move a castling attempt? Return the side if so.
    ---

    **shape of a castling move**

    * The king stands on its starting square (e1 / e8) and goes to the g-file (king side) or c-file (queen side)
    * Castling rights for that side are not yet revoked
    * The rook still stands on its corner
    * Every square between the king and the rook is empty

    NOTE: Not being in check / not passing through an attacked square is checked by the legal move filter.
    """
    for side in CastlingSide:
        squares = castling_squares(color, side)
        if (from_square, to_square) != (squares.king_from, squares.king_to):
            continue
        if not position.castling_rights.allows(castling_direction(color, side)):
            return None
        if position.piece(squares.rook_from) != Piece(PieceType.ROOK, color):
            return None
        path = squares_between(squares.king_from, squares.rook_from)
        if any(not position.board.is_empty(square) for square in path):
            return None
        return side
    return None


# -- STRATEGY PATTERN: MOVEMENT RULES ---
MovementRuleFn = Callable[[Square, Square, Color, Position], bool]
MOVEMENT_RULES: dict[PieceType, MovementRuleFn] = {
    PieceType.PAWN: is_valid_pawn_move,
    PieceType.KNIGHT: is_valid_knight_move,
    PieceType.BISHOP: is_valid_bishop_move,
    PieceType.ROOK: is_valid_rook_move,
    PieceType.QUEEN: is_valid_queen_move,
    PieceType.KING: is_valid_king_step,
}
