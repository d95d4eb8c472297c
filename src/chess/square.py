"""
A square on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

# Chess board is always 8x8.
BOARD_DIMENSIONS = (8, 8)
FILE_NAMES = "abcdefgh"
RANK_NAMES = "12345678"


@dataclass(frozen=True)
class Square:
    """
    Files and ranks both count from 1, so a1 = Square(1, 1) and h8 = Square(8, 8).

    Off-board squares cannot be constructed. Use `offset()` to walk the board: it returns None when leaving it.
    """

    file: int
    rank: int

    def __post_init__(self) -> None:
        if not is_within_bounds(self.file, self.rank):
            raise ValueError(
                f"Square ({self.file}, {self.rank}) lies outside of the board."
            )

    @classmethod
    def from_algebraic(cls, sq: str) -> Square:
        """Algebraic notation: 'a1' - 'h8' get converted to (1,1) - (8,8)"""
        if not is_square_name(sq):
            raise ValueError(f"Cannot interpret {sq!r} as a square name.")
        file = FILE_NAMES.index(sq[0]) + 1
        rank = int(sq[1])
        return cls(file, rank)

    def to_algebraic(self) -> str:
        return f"{self.file_name}{self.rank}"

    @property
    def file_name(self) -> str:
        return FILE_NAMES[self.file - 1]

    def offset(self, df: int, dr: int) -> Optional[Square]:
        """The square reached by stepping (df, dr) from here, or None if that falls off the board."""
        file = self.file + df
        rank = self.rank + dr
        if not is_within_bounds(file, rank):
            return None
        return Square(file, rank)

    def __str__(self) -> str:
        return self.to_algebraic()


def is_within_bounds(file: int, rank: int) -> bool:
    return (1 <= file <= BOARD_DIMENSIONS[0]) and (1 <= rank <= BOARD_DIMENSIONS[1])


def is_square_name(sq: str) -> bool:
    """Valid square should be a letter for the file + a number for the rank"""
    return len(sq) == 2 and sq[0] in FILE_NAMES and sq[1] in RANK_NAMES


# Every square on the board, walking file by file (a1, a2, ..., h8)
ALL_SQUARES: tuple[Square, ...] = tuple(
    Square(file, rank)
    for file in range(1, BOARD_DIMENSIONS[0] + 1)
    for rank in range(1, BOARD_DIMENSIONS[1] + 1)
)
