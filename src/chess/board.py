"""The Board holds the placement of the pieces: the first field of a FEN string"""

from dataclasses import dataclass, field
from typing import Optional, Self

from src.chess.castling import castling_squares
from src.chess.moves import Move
from src.chess.pieces import FEN_TO_PIECE, Color, Piece, PieceType
from src.chess.square import BOARD_DIMENSIONS, Square
from src.core.exceptions import InvalidFENError

# A run of empty squares in the FEN placement is a single digit 1-8
EMPTY_RUN_DIGITS = "12345678"


@dataclass
class Board:
    """
    Sparse mapping of squares to pieces. Empty squares have no entry.

    ---
    Ownership rule: a Board that belongs to a Position is never modified.
    Every (trial) move is played on a `copy()`, which is cheap (a shallow copy of the dict: squares and pieces are immutable).
    """

    position: dict[Square, Piece] = field(default_factory=dict)

    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """Construct a board using a given FEN string.

        That is, we supply the first part of the FEN string that denotes the board position
        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on the 8th rank, starting with rook on a8, knight on b8, etc.
        * pawns cover 7th rank entirely
        * ranks 6 through 3 have 8 consecutive empty squares
        * rank 2 are the white pawns (capital letters)
        * 1st rank are the white pieces. Again, left-to-right reads a1-h1.
        """
        num_files, num_ranks = BOARD_DIMENSIONS
        fen_by_ranks = fen_str.split("/")
        if len(fen_by_ranks) != num_ranks:
            raise InvalidFENError(
                f"Board position must have {num_ranks} ranks, found {len(fen_by_ranks)}: {fen_str!r}"
            )

        position: dict[Square, Piece] = {}
        for rank_idx, fen_one_rank in enumerate(fen_by_ranks):
            # FEN string is read from top rank (8th) to bottom rank (1st)
            rank = num_ranks - rank_idx
            # ... but the first character is the a-file, so reads in normal direction
            file = 1
            for character in fen_one_rank:
                if character in EMPTY_RUN_DIGITS:
                    # A number denotes the amount of empty squares after each other
                    file += int(character)
                    continue
                if character.lower() not in FEN_TO_PIECE:
                    raise InvalidFENError(
                        f"Unknown piece {character!r} in rank {rank}: {fen_one_rank!r}"
                    )
                if file > num_files:
                    raise InvalidFENError(
                        f"Rank {rank} describes more than {num_files} files: {fen_one_rank!r}"
                    )
                position[Square(file, rank)] = Piece.from_fen(character)
                file += 1

            # make sure you are creating a correctly sized board
            if file - 1 != num_files:
                raise InvalidFENError(
                    f"Rank {rank} must describe exactly {num_files} files: {fen_one_rank!r}"
                )
        return cls(position)

    def to_fen(self) -> str:
        """Ranks are separated by slashes in FEN string."""
        return "/".join(
            self._rank_to_fen(rank) for rank in range(BOARD_DIMENSIONS[1], 0, -1)
        )

    def _rank_to_fen(self, rank: int) -> str:
        """FEN string of a single rank"""
        fen_characters: list[str] = []
        empty_count = 0
        for file in range(1, BOARD_DIMENSIONS[0] + 1):
            piece = self.piece(Square(file, rank))

            if piece is not None:
                if empty_count > 0:
                    fen_characters.append(str(empty_count))
                    empty_count = 0
                fen_characters.append(piece.to_fen())
            else:
                empty_count += 1

        # if the entire rank is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    def copy(self) -> Self:
        return type(self)(dict(self.position))

    def piece(self, square: Square) -> Optional[Piece]:
        return self.position.get(square)

    def is_empty(self, square: Square) -> bool:
        return square not in self.position

    def locate_piece(self, piece: Piece) -> list[Square]:
        return [square for square, found in self.position.items() if found == piece]

    def locate_king(self, color: Color) -> Optional[Square]:
        kings = self.locate_piece(Piece(PieceType.KING, color))
        return kings[0] if kings else None

    def locate_color(self, color: Color) -> list[Square]:
        return [
            square for square, piece in self.position.items() if piece.color == color
        ]

    # --- MUTATIONS: only ever called on a copy ---
    def place_piece(self, piece: Piece, square: Square) -> None:
        self.position[square] = piece

    def remove_piece(self, square: Square) -> None:
        self.position.pop(square, None)

    def move_piece(self, from_square: Square, to_square: Square) -> None:
        """Update the position on the board. Whatever stood on the target square is captured."""
        piece_that_moved = self.position.pop(from_square)
        self.position[to_square] = piece_that_moved

    def play(self, move: Move) -> None:
        """
        Relocate every piece involved in the move
        ---

        * castling moves the king AND the rook
        * en passant removes the captured pawn, which stands next to the moving pawn (same rank as the pawn started from)
        * promotion replaces the pawn with the promoted piece on the target square
        """
        if move.castling is not None:
            squares = castling_squares(move.color, move.castling)
            self.move_piece(squares.king_from, squares.king_to)
            self.move_piece(squares.rook_from, squares.rook_to)
            return

        self.move_piece(move.from_square, move.to_square)

        if move.is_en_passant:
            take_square = Square(file=move.to_square.file, rank=move.from_square.rank)
            self.remove_piece(take_square)

        if move.promotion is not None:
            self.place_piece(move.promotion, move.to_square)
