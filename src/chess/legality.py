"""
Legal move filter: out of the moves with a valid shape, keep those that do not leave (or put) your own king in check.

plan (per candidate move):
1. Copy the board
2. make the candidate move on the copy
3. ask every opponent piece if it could now move onto your king's square

---
This is quadratic in squares per piece, with a scan over the opponent's pieces per candidate.
Fine for a fixed 8x8 board: it runs once per half move, not in a search loop.
"""

from dataclasses import replace

from src.chess.board import Board
from src.chess.calculator import calculate_move
from src.chess.castling import CastlingRights, castling_squares
from src.chess.moves import Move
from src.chess.pieces import Color, opponent
from src.chess.position import Position
from src.chess.square import ALL_SQUARES, Square
from src.core.exceptions import AlreadyComputedError


def fill_allowed_moves(position: Position) -> None:
    """
    Compute the legal destinations of every piece of the side to move and store them in `position.legal_moves`.

    Origins without any legal destination get no entry at all.
    Can only be done once per position.
    """
    if position.legal_moves:
        raise AlreadyComputedError("Legal moves of this position were already computed.")

    color = position.color_to_move
    for from_square in position.board.locate_color(color):
        destinations = [
            to_square
            for to_square in ALL_SQUARES
            if to_square != from_square
            and _is_legal_destination(position, from_square, to_square)
        ]
        if destinations:
            position.legal_moves[from_square] = destinations


def _is_legal_destination(
    position: Position, from_square: Square, to_square: Square
) -> bool:
    move = calculate_move(position, from_square, to_square, ignore_legality_filter=True)
    if not isinstance(move, Move):
        return False
    return not leaves_king_attacked(position, move)


def leaves_king_attacked(position: Position, move: Move) -> bool:
    """
    Return True if the move puts (or leaves) you in check.

    Castling is stricter: you cannot castle out of check, nor through a square that is under attack.
    """
    if move.castling is not None:
        squares = castling_squares(move.color, move.castling)
        for square in (squares.king_from, squares.king_passes):
            board = position.board.copy()
            if square != squares.king_from:
                board.move_piece(squares.king_from, square)
            if _is_king_attacked(position, board, move.color):
                return True

    board = position.board.copy()
    board.play(move)
    return _is_king_attacked(position, board, move.color)


def is_in_check(position: Position, color: Color) -> bool:
    """Is the king of the given color currently attacked?"""
    return _is_king_attacked(position, position.board, color)


def _is_king_attacked(position: Position, board: Board, color: Color) -> bool:
    """
    Ask every opponent piece whether it could move onto the king's square.

    NOTE: Without a king on the board there is nothing to attack, so any move is safe.
    """
    king_square = board.locate_king(color)
    if king_square is None:
        return False

    # The opponent is to move on this probe. No castling / en passant: neither can ever capture a king.
    probe = replace(
        position,
        board=board,
        color_to_move=opponent(color),
        castling_rights=CastlingRights.none(),
        en_passant_square=None,
    )
    return any(
        isinstance(
            calculate_move(probe, attacker, king_square, ignore_legality_filter=True),
            Move,
        )
        for attacker in board.locate_color(opponent(color))
    )
