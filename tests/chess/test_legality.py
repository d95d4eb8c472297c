"""Unit tests for /src/chess/legality.py"""

import pytest

from src.chess.calculator import calculate_move
from src.chess.fen import STARTING_FEN, parse_fen
from src.chess.legality import fill_allowed_moves, is_in_check, leaves_king_attacked
from src.chess.moves import Move
from src.chess.pieces import Color
from src.chess.position import Position
from src.chess.square import Square
from src.core.exceptions import AlreadyComputedError


def sq(name: str) -> Square:
    return Square.from_algebraic(name)


def destinations(position: Position, square: str) -> set[str]:
    return {str(to_square) for to_square in position.legal_destinations(sq(square))}


def test_twenty_moves_in_starting_position() -> None:
    """16 pawn moves + 4 knight moves"""
    position = parse_fen(STARTING_FEN)
    assert position.legal_move_count == 20
    assert destinations(position, "g1") == {"f3", "h3"}
    assert destinations(position, "e2") == {"e3", "e4"}
    # origins without any legal move have no entry
    assert sq("a1") not in position.legal_moves
    assert sq("e1") not in position.legal_moves


def test_only_side_to_move_has_moves() -> None:
    position = parse_fen(STARTING_FEN)
    assert all(position.piece(square).color == Color.WHITE for square in position.legal_moves)  # type: ignore[union-attr]


def test_fill_only_once() -> None:
    position = parse_fen(STARTING_FEN)
    with pytest.raises(AlreadyComputedError):
        fill_allowed_moves(position)


@pytest.mark.parametrize(
    "fen",
    [
        STARTING_FEN,
        "r1bqkbnr/pppp1ppp/2n5/4p3/4P3/5N2/PPPP1PPP/RNBQKB1R w KQkq - 2 3",
        "4r1k1/8/8/8/8/8/4N3/4K3 w - - 0 1",
        "r3k2r/8/8/8/8/8/8/R3K2R b KQkq - 0 1",
        "4k3/8/8/K2pP2r/8/8/8/8 w - d6 0 1",
    ],
)
def test_legal_moves_never_expose_the_king(fen: str) -> None:
    """Every legal destination is check safe"""
    position = parse_fen(fen)
    for from_square, to_squares in position.legal_moves.items():
        for to_square in to_squares:
            move = calculate_move(position, from_square, to_square)
            assert isinstance(move, Move)
            assert not leaves_king_attacked(position, move)


def test_pinned_piece_cannot_move() -> None:
    position = parse_fen("4r1k1/8/8/8/8/8/4N3/4K3 w - - 0 1")
    assert sq("e2") not in position.legal_moves


def test_king_cannot_step_into_check() -> None:
    position = parse_fen("3r2k1/8/8/8/8/8/8/4K3 w - - 0 1")
    assert destinations(position, "e1") == {"e2", "f1", "f2"}


def test_must_answer_check() -> None:
    """Only moves that get the king out of check are allowed"""
    position = parse_fen("4r1k1/8/8/8/8/8/3B4/4K3 w - - 0 1")
    assert is_in_check(position, Color.WHITE)
    assert not is_in_check(position, Color.BLACK)
    assert destinations(position, "d2") == {"e3"}
    assert destinations(position, "e1") == {"d1", "f1", "f2"}


def test_en_passant_exposing_the_king() -> None:
    """Both pawns leave the rank: the rook on h5 would see the king"""
    position = parse_fen("4k3/8/8/K2pP2r/8/8/8/8 w - d6 0 1")
    assert destinations(position, "e5") == {"e6"}


@pytest.mark.parametrize(
    "fen",
    [
        "4r1k1/8/8/8/8/8/8/4K2R w K - 0 1",  # king is in check
        "5rk1/8/8/8/8/8/8/4K2R w K - 0 1",  # f1 is attacked: the king passes through
        "k5r1/8/8/8/8/8/8/4K2R w K - 0 1",  # g1 is attacked: the king would land in check
    ],
)
def test_castling_with_attacked_squares(fen: str) -> None:
    position = parse_fen(fen)
    assert "g1" not in destinations(position, "e1")


def test_castling_when_safe() -> None:
    position = parse_fen("4k3/8/8/8/8/8/8/R3K2R w KQ - 0 1")
    assert {"g1", "c1"} <= destinations(position, "e1")


def test_queen_side_castling_with_attacked_b1() -> None:
    """Only the squares the king crosses matter, not the b-file the rook crosses"""
    position = parse_fen("1r2k3/8/8/8/8/8/8/R3K3 w Q - 0 1")
    assert "c1" in destinations(position, "e1")


def test_without_king_every_valid_move_is_legal() -> None:
    position = parse_fen("4k3/8/8/8/8/8/8/R7 w - - 0 1")
    assert len(destinations(position, "a1")) == 14
