"""
Applying a move: Position in, new Position out.

Responsible for all the bookkeeping of a turn: the board, castling rights, the en passant square, move counters,
the move history, and finally the legal moves of the new position.
"""

import logging
from typing import Iterable, Optional

from src.chess.castling import (
    CASTLING_RULES,
    CastlingRights,
    rook_corner_direction,
)
from src.chess.legality import fill_allowed_moves
from src.chess.moves import Move
from src.chess.pieces import Color, PieceType, opponent, pawn_direction
from src.chess.position import Position
from src.chess.square import Square
from src.core.exceptions import MoveDoesNotMatchBoardError

logger = logging.getLogger(__name__)


def apply_move(position: Position, move: Move) -> Position:
    """
    Play an (already validated) move
    -----

    1. update the board (NOTE: if castling, move the king and the rook)
    2. flip the color to move
    3. update the move counters
    4. revoke castling rights if needed
    5. set / clear the en passant square
    6. update the (history of) moves
    7. fill in the legal moves of the new position

    The original position is left untouched.
    """
    if position.piece(move.from_square) != move.piece:
        raise MoveDoesNotMatchBoardError(
            f"Piece at {move.from_square} ({position.piece(move.from_square)}) does not match the move: {move.piece}"
        )

    board = position.board.copy()
    board.play(move)

    new_position = Position(
        board=board,
        color_to_move=opponent(position.color_to_move),
        castling_rights=_revoke_castling_rights_if_needed(position.castling_rights, move),
        en_passant_square=_determine_en_passant_square(move),
        half_move_clock=_next_half_move_clock(position.half_move_clock, move),
        full_move_number=(
            position.full_move_number + 1
            if move.color == Color.BLACK
            else position.full_move_number
        ),
        moves=position.moves + (move,),
    )
    fill_allowed_moves(new_position)
    logger.debug("Played %s, %d legal moves for the opponent", move, new_position.legal_move_count)
    return new_position


def apply_moves(position: Position, moves: Iterable[Move]) -> Position:
    """convenience method to apply multiple moves in a row"""
    for move in moves:
        position = apply_move(position, move)
    return position


# --- HALF MOVE CLOCK HELPERS ---
def _next_half_move_clock(half_move_clock: int, move: Move) -> int:
    """Counts up, unless a pawn moved or a piece got captured"""
    if _is_pawn_move(move) or move.is_capture:
        return 0
    return half_move_clock + 1


def _is_pawn_move(move: Move) -> bool:
    return move.piece.type == PieceType.PAWN


# --- CASTLING RULE HELPERS ---
def _revoke_castling_rights_if_needed(rights: CastlingRights, move: Move) -> CastlingRights:
    """
    Checks which rights should get revoked
    ----

    1. If you are castling this move --> revoke both
    2. If you are moving your king --> revoke both
    3. If you are moving your rook from its corner --> revoke the right on that side
    4. If you are taking your opponent's rook on its corner --> revoke your opponent's right on that side
    """
    # 1 + 2: castling is a king move as well
    if move.piece.type == PieceType.KING:
        rights = rights.revoke_all(move.color)

    # 3
    if move.piece.type == PieceType.ROOK:
        direction = rook_corner_direction(move.from_square)
        if direction is not None and CASTLING_RULES[direction].rook_from.rank == _back_rank(move.color):
            rights = rights.revoke(direction)

    # 4
    if move.is_capture:
        direction = rook_corner_direction(move.to_square)
        if direction is not None and CASTLING_RULES[direction].rook_from.rank == _back_rank(opponent(move.color)):
            rights = rights.revoke(direction)

    return rights


def _back_rank(color: Color) -> int:
    return 1 if color == Color.WHITE else 8


# --- EN PASSANT RULE HELPERS ----
def _determine_en_passant_square(move: Move) -> Optional[Square]:
    """The possible en passant square for the next turn: the square a pawn skipped with its double step."""
    ranks_moved = abs(move.from_square.rank - move.to_square.rank)
    if not (_is_pawn_move(move) and ranks_moved == 2):
        return None
    return Square(
        file=move.from_square.file,
        rank=move.from_square.rank + pawn_direction(move.color),
    )
