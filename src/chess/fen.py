"""
FEN, or Forsyth-Edwards Notation, is a standard notation for describing a particular board position of a chess game.
The purpose of FEN is to provide all the necessary information to restart a game from a particular position.

<board position string> <active color> <castling rights> <en passant square> <# half move clock> <number turns played>

* The string to describe the board position is described in the Board class
* The active color is either "w" or "b"
* Castling rights are denoted as "k" for king-side or "q" for queen-side. Capital letters for the white pieces, small letters for the black pieces.
    In the starting position: KQkq (all rights available). When all rights have been revoked a "-" is used.
* The en passant square indicates the square a pawn can take on. If not available a "-" is used.
* The half move clock counts the number of moves made since the last pawn move or capture.
* The number of turns starts at 1 and increments after every move black makes.

ex) The standard starting position has a FEN
rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1
"""

from src.chess.board import EMPTY_RUN_DIGITS, Board
from src.chess.castling import CastlingRights
from src.chess.legality import fill_allowed_moves
from src.chess.pieces import FEN_TO_PIECE, Color
from src.chess.position import Position
from src.chess.square import BOARD_DIMENSIONS, Square, is_square_name
from src.core.exceptions import InvalidFENError

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"
NUM_FEN_FIELDS = 6
# Missing trailing fields (everything after the placement) are filled in with these
DEFAULT_FEN_FIELDS = ("w", "-", "-", "0", "1")
VALID_CASTLING_ENCODINGS = [
    "-",
    "K",
    "Q",
    "k",
    "q",
    "KQ",
    "Kk",
    "Kq",
    "Qk",
    "Qq",
    "kq",
    "KQk",
    "KQq",
    "Kkq",
    "Qkq",
    "KQkq",
]
COLOR_CODES: dict[str, Color] = {"w": Color.WHITE, "b": Color.BLACK}


def parse_fen(fen: str) -> Position:
    """
    Parse the FEN into a Position, with its legal moves filled in.

    Only the board placement is mandatory: missing trailing fields default to `w - - 0 1`.
    """
    parts = fen.split()
    if not parts:
        raise InvalidFENError("Cannot interpret an empty string as FEN.")
    if len(parts) > NUM_FEN_FIELDS:
        raise InvalidFENError(
            f"FEN has at most {NUM_FEN_FIELDS} fields, found {len(parts)}: {fen!r}"
        )

    # extract the different components, falling back on the defaults
    parts += DEFAULT_FEN_FIELDS[len(parts) - 1 :]
    (
        placement,
        active_color,
        castling_str,
        en_passant_algebraic,
        half_move_clock,
        full_move_number,
    ) = parts

    # raises InvalidFENError itself
    board = Board.from_fen(placement)

    if not is_valid_color_code(active_color):
        raise InvalidFENError(f"Active color must be 'w' or 'b', found {active_color!r}")
    if not is_valid_castling_rights(castling_str):
        raise InvalidFENError(f"Cannot interpret castling rights {castling_str!r}")
    if not is_valid_en_passant(en_passant_algebraic):
        raise InvalidFENError(f"Cannot interpret en passant square {en_passant_algebraic!r}")
    if not is_valid_move_counter(half_move_clock):
        raise InvalidFENError(f"Half move clock must be a non-negative number, found {half_move_clock!r}")
    if not is_valid_move_counter(full_move_number) or int(full_move_number) < 1:
        raise InvalidFENError(f"Full move number must be a positive number, found {full_move_number!r}")

    position = Position(
        board=board,
        color_to_move=COLOR_CODES[active_color],
        castling_rights=CastlingRights.from_fen(castling_str),
        en_passant_square=(
            Square.from_algebraic(en_passant_algebraic)
            if en_passant_algebraic != "-"
            else None
        ),
        half_move_clock=int(half_move_clock),
        full_move_number=int(full_move_number),
    )
    fill_allowed_moves(position)
    return position


def board_to_fen(position: Position) -> str:
    """reverse operation: write a FEN from the given position"""
    active_color = "w" if position.color_to_move == Color.WHITE else "b"
    en_passant_algebraic = (
        position.en_passant_square.to_algebraic()
        if position.en_passant_square is not None
        else "-"
    )
    return " ".join(
        [
            position.board.to_fen(),
            active_color,
            position.castling_rights.to_fen(),
            en_passant_algebraic,
            str(position.half_move_clock),
            str(position.full_move_number),
        ]
    )


def starting_position() -> Position:
    return parse_fen(STARTING_FEN)


# --- VALIDATION: never raises ---
def is_valid_fen(fen: str) -> bool:
    """
    Check if given string follows proper FEN notation (all six fields present).
    """
    parts = fen.split(" ")
    if len(parts) != NUM_FEN_FIELDS:
        return False

    placement, color, castling, en_passant, half_move_clock, full_move_number = parts
    return (
        is_valid_placement(placement)
        and is_valid_color_code(color)
        and is_valid_castling_rights(castling)
        and is_valid_en_passant(en_passant)
        and is_valid_move_counter(half_move_clock)
        and is_valid_move_counter(full_move_number)
        and int(full_move_number) >= 1
    )


def is_valid_placement(placement: str) -> bool:
    """Only check the part of the FEN encoding for the board position."""
    num_files, num_ranks = BOARD_DIMENSIONS
    rank_fens = placement.split("/")
    if len(rank_fens) != num_ranks:
        return False

    for rank_fen in rank_fens:
        file_count = 0
        for character in rank_fen:
            if character in EMPTY_RUN_DIGITS:
                file_count += int(character)
            elif character.lower() in FEN_TO_PIECE:
                file_count += 1
            else:
                return False
            # no overflowing a rank halfway through, e.g. '9' or 'RNBQKBNRR'
            if file_count > num_files:
                return False

        if file_count != num_files:
            return False
    return True


def is_valid_color_code(color: str) -> bool:
    return color in COLOR_CODES


def is_valid_castling_rights(castling: str) -> bool:
    """A valid castling encoding has either KQkq, KQk, etc. or a '-' if all rights have been revoked."""
    return castling in VALID_CASTLING_ENCODINGS


def is_valid_en_passant(en_passant: str) -> bool:
    """Valid en passant square encoding should be a square that exists on the board or a '-'"""
    return (en_passant == "-") or is_square_name(en_passant)


def is_valid_move_counter(counter: str) -> bool:
    """Plain ASCII digits only: int() must be able to read it."""
    return counter.isascii() and counter.isdecimal()
