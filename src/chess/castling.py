"""Helpers for implementing Castling rules. Need to be imported by multiple sources"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Self

from src.chess.pieces import Color
from src.chess.square import Square


class CastlingSide(Enum):
    KING_SIDE = "king-side"
    QUEEN_SIDE = "queen-side"


class CastlingDirection(Enum):
    """The four castling directions. Values represent their encodings in FEN string."""

    WHITE_KING_SIDE = "K"
    WHITE_QUEEN_SIDE = "Q"
    BLACK_KING_SIDE = "k"
    BLACK_QUEEN_SIDE = "q"


# Order in which the rights are written in a FEN string
CASTLING_ORDER: tuple[CastlingDirection, ...] = (
    CastlingDirection.WHITE_KING_SIDE,
    CastlingDirection.WHITE_QUEEN_SIDE,
    CastlingDirection.BLACK_KING_SIDE,
    CastlingDirection.BLACK_QUEEN_SIDE,
)


def castling_direction(color: Color, side: CastlingSide) -> CastlingDirection:
    if color == Color.WHITE:
        return (
            CastlingDirection.WHITE_KING_SIDE
            if side == CastlingSide.KING_SIDE
            else CastlingDirection.WHITE_QUEEN_SIDE
        )
    return (
        CastlingDirection.BLACK_KING_SIDE
        if side == CastlingSide.KING_SIDE
        else CastlingDirection.BLACK_QUEEN_SIDE
    )


@dataclass(frozen=True)
class CastlingSquares:
    """
    Store the squares where king/rook start from/end up in by castling.
    NOTE: If castling rights have not been revoked, we already know the king / rook are still at their starting squares.
    """

    king_from: Square
    king_to: Square
    rook_from: Square
    rook_to: Square

    @classmethod
    def from_algebraic(cls, k_from: str, k_to: str, r_from: str, r_to: str) -> Self:
        """Convenience method: to make mapping shown below (from CastlingDirection) more readable"""
        king_from = Square.from_algebraic(k_from)
        king_to = Square.from_algebraic(k_to)
        rook_from = Square.from_algebraic(r_from)
        rook_to = Square.from_algebraic(r_to)
        return cls(king_from, king_to, rook_from, rook_to)

    @property
    def king_passes(self) -> Square:
        """The square the king crosses on its way (f1, d1, f8 or d8)"""
        step = 1 if self.king_to.file > self.king_from.file else -1
        return Square(self.king_from.file + step, self.king_from.rank)


# The moves (in classical chess) made when castling
CASTLING_RULES: dict[CastlingDirection, CastlingSquares] = {
    CastlingDirection.WHITE_KING_SIDE: CastlingSquares.from_algebraic(
        "e1", "g1", "h1", "f1"
    ),
    CastlingDirection.WHITE_QUEEN_SIDE: CastlingSquares.from_algebraic(
        "e1", "c1", "a1", "d1"
    ),
    CastlingDirection.BLACK_KING_SIDE: CastlingSquares.from_algebraic(
        "e8", "g8", "h8", "f8"
    ),
    CastlingDirection.BLACK_QUEEN_SIDE: CastlingSquares.from_algebraic(
        "e8", "c8", "a8", "d8"
    ),
}


def castling_squares(color: Color, side: CastlingSide) -> CastlingSquares:
    return CASTLING_RULES[castling_direction(color, side)]


def rook_corner_direction(square: Square) -> Optional[CastlingDirection]:
    """Which castling right belongs to a rook standing on this (corner) square, if any"""
    for direction, squares in CASTLING_RULES.items():
        if squares.rook_from == square:
            return direction
    return None


@dataclass(frozen=True)
class CastlingRights:
    """
    Rights only ever get revoked during a game, never granted again.

    Immutable: revoking returns a new value.
    """

    white_king_side: bool = True
    white_queen_side: bool = True
    black_king_side: bool = True
    black_queen_side: bool = True

    @classmethod
    def none(cls) -> Self:
        return cls(False, False, False, False)

    @classmethod
    def from_fen(cls, castle_fen: str) -> Self:
        """parse the part of the FEN string that encodes castling rights"""
        return cls(
            white_king_side=CastlingDirection.WHITE_KING_SIDE.value in castle_fen,
            white_queen_side=CastlingDirection.WHITE_QUEEN_SIDE.value in castle_fen,
            black_king_side=CastlingDirection.BLACK_KING_SIDE.value in castle_fen,
            black_queen_side=CastlingDirection.BLACK_QUEEN_SIDE.value in castle_fen,
        )

    def to_fen(self) -> str:
        """create the part of the FEN string that encodes castling rights"""
        castling_chars = "".join(
            [direction.value for direction in CASTLING_ORDER if self.allows(direction)]
        )
        return castling_chars or "-"

    def allows(self, direction: CastlingDirection) -> bool:
        return getattr(self, _FIELD_NAMES[direction])

    def can_castle(self, color: Color) -> bool:
        """Does the player have any right left?"""
        return any(
            self.allows(castling_direction(color, side)) for side in CastlingSide
        )

    def revoke(self, direction: CastlingDirection) -> Self:
        return replace(self, **{_FIELD_NAMES[direction]: False})

    def revoke_all(self, color: Color) -> Self:
        rights = self
        for side in CastlingSide:
            rights = rights.revoke(castling_direction(color, side))
        return rights


_FIELD_NAMES: dict[CastlingDirection, str] = {
    CastlingDirection.WHITE_KING_SIDE: "white_king_side",
    CastlingDirection.WHITE_QUEEN_SIDE: "white_queen_side",
    CastlingDirection.BLACK_KING_SIDE: "black_king_side",
    CastlingDirection.BLACK_QUEEN_SIDE: "black_queen_side",
}
