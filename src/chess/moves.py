"""
The Move record + geometry of piece movement.

Key idea: raycasting. Sliding pieces (bishop, rook, queen) walk along a direction until they hit another piece or the edge
of the board; knights, kings and pawns take a single step along a fixed set of deltas.

Which moves are actually allowed in a position is decided by the calculator (src/chess/calculator.py)
and the legal move filter (src/chess/legality.py).
"""

from dataclasses import dataclass, replace
from typing import Callable, Optional, Protocol, Self

from src.chess.castling import CastlingSide
from src.chess.pieces import FEN_TO_PIECE, PIECE_TO_FEN, Color, Piece, PieceType
from src.chess.square import Square

Vector = tuple[int, int]

KNIGHT_DELTAS: list[Vector] = [
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
]
KING_DELTAS: list[Vector] = [
    (0, 1),
    (0, -1),
    (1, 0),
    (-1, 0),
    (1, 1),
    (1, -1),
    (-1, 1),
    (-1, -1),
]
DIAGONALS: list[Vector] = [(1, 1), (-1, 1), (1, -1), (-1, -1)]
STRAIGHTS: list[Vector] = [(1, 0), (-1, 0), (0, 1), (0, -1)]

KING_SIDE_CASTLING = "O-O"
QUEEN_SIDE_CASTLING = "O-O-O"
CAPTURE_CHAR = "x"
PROMOTION_CHAR = "="


class Board(Protocol):
    """Just the parts the geometry helpers need"""

    def piece(self, square: Square) -> Optional[Piece]: ...


@dataclass(frozen=True)
class Move:
    """
    A record of what happened (or would happen) on the board.

    Produced once by the calculator. The only amendments (attaching a PGN comment, choosing a promotion piece)
    are made by creating a copy: see `with_comment()`.
    """

    from_square: Square
    to_square: Square
    piece: Piece
    color: Color
    algebraic: str = ""
    is_capture: bool = False
    castling: Optional[CastlingSide] = None
    is_en_passant: bool = False
    promotion: Optional[Piece] = None
    comment: Optional[str] = None
    # origin file/rank characters needed to tell this move apart from a same-type piece reaching the same square
    disambiguation: str = ""

    def with_comment(self, comment: Optional[str]) -> Self:
        return replace(self, comment=comment)

    def to_uci(self) -> str:
        """
        Universal Chess Interface:
        ---
        examples:
        * "e2e4": move the piece that was on e2 to e4
        * "e7e8q" : (pawn) moves from e7 to e8 and promotes to a queen (the q)
        """
        piece_char = PIECE_TO_FEN[self.promotion.type] if self.promotion else ""
        return f"{self.from_square.to_algebraic()}{self.to_square.to_algebraic()}{piece_char}"

    def __str__(self) -> str:
        return self.algebraic or move_to_algebraic(self)


def move_to_algebraic(move: Move) -> str:
    """
    Standard algebraic notation of a move.

    Castling is O-O / O-O-O. Otherwise: piece letter (none for pawns), disambiguation, origin file (pawn captures only),
    'x' for captures, the target square and '=<PIECE>' for promotions.
    NOTE: no check (+) or mate (#) suffixes. The engine does not detect check for annotation.
    """
    if move.castling == CastlingSide.KING_SIDE:
        return KING_SIDE_CASTLING
    if move.castling == CastlingSide.QUEEN_SIDE:
        return QUEEN_SIDE_CASTLING

    is_pawn = move.piece.type == PieceType.PAWN
    notation: list[str] = []
    if not is_pawn:
        notation.append(PIECE_TO_FEN[move.piece.type].upper())
        notation.append(move.disambiguation)
    if is_pawn and move.is_capture:
        notation.append(move.from_square.file_name)
    if move.is_capture:
        notation.append(CAPTURE_CHAR)
    notation.append(move.to_square.to_algebraic())
    if move.promotion is not None:
        notation.append(f"{PROMOTION_CHAR}{PIECE_TO_FEN[move.promotion.type].upper()}")
    return "".join(notation)


def piece_letter_to_type(letter: str) -> PieceType:
    return FEN_TO_PIECE[letter.lower()]


# --- GEOMETRY ---
def squares_between(from_square: Square, to_square: Square) -> list[Square]:
    """
    The squares strictly in between two squares on the same rank, file or diagonal.

    Empty list when the squares are adjacent, or not on a common line at all.
    """
    df = to_square.file - from_square.file
    dr = to_square.rank - from_square.rank
    on_line = df == 0 or dr == 0 or abs(df) == abs(dr)
    if not on_line:
        return []

    step = (_sign(df), _sign(dr))
    squares_found: list[Square] = []
    square = from_square.offset(*step)
    while square is not None and square != to_square:
        squares_found.append(square)
        square = square.offset(*step)
    return squares_found


def is_path_clear(board: Board, from_square: Square, to_square: Square) -> bool:
    return all(board.piece(square) is None for square in squares_between(from_square, to_square))


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


# --- ORIGIN SEARCH ---
def raycasting_origins(
    square: Square, piece: Piece, board: Board, directions: list[Vector]
) -> list[Square]:
    """
    Raycasting algorithm, walking backwards from the target square.
    -----

    ---
    Answers: _"Which of the specified pieces have the given square in their line-of-sight?"_

    Walk along each direction until we hit another piece or the edge of the board.
    Only the first occupied square found can be a match: anything behind it is blocked.
    """
    origins: list[Square] = []
    for df, dr in directions:
        target_square = square.offset(df, dr)
        while target_square is not None:
            piece_found = board.piece(target_square)
            if piece_found is not None:
                if piece_found == piece:
                    origins.append(target_square)
                break
            target_square = target_square.offset(df, dr)
    return origins


def single_step_origins(
    square: Square, piece: Piece, board: Board, deltas: list[Vector]
) -> list[Square]:
    """Raycasting is for sliding pieces. This is the equivalent for kings and knights that just take a single step"""
    origins: list[Square] = []
    for df, dr in deltas:
        target_square = square.offset(df, dr)
        if target_square is None:
            continue
        if board.piece(target_square) == piece:
            origins.append(target_square)
    return origins


def knight_origins(square: Square, piece: Piece, board: Board) -> list[Square]:
    """Knights always move such that |delta_rank| + |delta_file| = 3"""
    return single_step_origins(square, piece, board, KNIGHT_DELTAS)


def bishop_origins(square: Square, piece: Piece, board: Board) -> list[Square]:
    """Bishops move diagonally: |delta_rank| = |delta_file|"""
    return raycasting_origins(square, piece, board, DIAGONALS)


def rook_origins(square: Square, piece: Piece, board: Board) -> list[Square]:
    """Rooks move either horizontally or vertically"""
    return raycasting_origins(square, piece, board, STRAIGHTS)


def queen_origins(square: Square, piece: Piece, board: Board) -> list[Square]:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return raycasting_origins(square, piece, board, STRAIGHTS + DIAGONALS)


def king_origins(square: Square, piece: Piece, board: Board) -> list[Square]:
    return single_step_origins(square, piece, board, KING_DELTAS)


# -- STRATEGY PATTERN: ORIGIN SEARCH ---
OriginsFn = Callable[[Square, Piece, Board], list[Square]]
ORIGIN_RULES: dict[PieceType, OriginsFn] = {
    PieceType.KNIGHT: knight_origins,
    PieceType.BISHOP: bishop_origins,
    PieceType.ROOK: rook_origins,
    PieceType.QUEEN: queen_origins,
    PieceType.KING: king_origins,
}


def locate_origins(
    board: Board,
    piece: Piece,
    to_square: Square,
    file: Optional[int] = None,
    rank: Optional[int] = None,
) -> list[Square]:
    """
    Squares from which `piece` could reach `to_square`, optionally restricted to a file and/or rank.

    Only for the pieces written with a letter in algebraic notation (pawns are located differently).
    """
    origins = ORIGIN_RULES[piece.type](to_square, piece, board)
    return [
        square
        for square in origins
        if (file is None or square.file == file) and (rank is None or square.rank == rank)
    ]


def disambiguation(board: Board, piece: Piece, from_square: Square, to_square: Square) -> str:
    """
    Origin characters needed to single out the moving piece.

    Prefer the file, fall back to the rank, and use both when neither alone is enough.
    """
    if piece.type in (PieceType.PAWN, PieceType.KING):
        return ""
    rivals = [
        square
        for square in locate_origins(board, piece, to_square)
        if square != from_square
    ]
    if not rivals:
        return ""
    if all(square.file != from_square.file for square in rivals):
        return from_square.file_name
    if all(square.rank != from_square.rank for square in rivals):
        return str(from_square.rank)
    return from_square.to_algebraic()
