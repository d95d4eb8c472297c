"""Unit tests for src/chess/fen.py"""

import pytest

from src.chess.castling import CastlingRights
from src.chess.fen import (
    STARTING_FEN,
    VALID_CASTLING_ENCODINGS,
    board_to_fen,
    is_valid_castling_rights,
    is_valid_color_code,
    is_valid_en_passant,
    is_valid_fen,
    is_valid_placement,
    parse_fen,
    starting_position,
)
from src.chess.pieces import Color
from src.chess.square import Square
from src.core.exceptions import InvalidFENError


@pytest.mark.parametrize(
    "fen",
    [
        STARTING_FEN,
        "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1",
        "r1bqkbnr/pppp1ppp/2n5/4p3/4P3/5N2/PPPP1PPP/RNBQKB1R w KQkq - 2 3",
        "4k3/8/8/8/8/8/8/4K3 b - - 49 120",
        "r3k2r/8/8/8/8/8/8/R3K2R w Kq - 0 1",
    ],
)
def test_fen_round_trip(fen: str) -> None:
    """Parsing and writing back gives the same string"""
    assert board_to_fen(parse_fen(fen)) == fen


def test_parse_starting_position() -> None:
    position = starting_position()
    assert position.color_to_move == Color.WHITE
    assert position.castling_rights == CastlingRights()
    assert position.en_passant_square is None
    assert position.half_move_clock == 0
    assert position.full_move_number == 1
    assert position.moves == ()
    assert position.legal_move_count == 20


def test_parse_fields() -> None:
    position = parse_fen("rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b Kq e3 7 12")
    assert position.color_to_move == Color.BLACK
    assert position.castling_rights.to_fen() == "Kq"
    assert position.en_passant_square == Square.from_algebraic("e3")
    assert position.half_move_clock == 7
    assert position.full_move_number == 12


@pytest.mark.parametrize(
    "fen, expected",
    [
        ("4k3/8/8/8/8/8/8/4K3", "4k3/8/8/8/8/8/8/4K3 w - - 0 1"),
        ("4k3/8/8/8/8/8/8/4K3 b", "4k3/8/8/8/8/8/8/4K3 b - - 0 1"),
        ("4k3/8/8/8/8/8/8/4K3 w - - 3", "4k3/8/8/8/8/8/8/4K3 w - - 3 1"),
    ],
)
def test_missing_fields_get_defaults(fen: str, expected: str) -> None:
    assert board_to_fen(parse_fen(fen)) == expected


@pytest.mark.parametrize(
    "fen",
    [
        "",
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1 extra",  # 7 fields
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP w KQkq - 0 1",  # 7 ranks
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBN w KQkq - 0 1",  # rank sums to 7
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNX w KQkq - 0 1",  # unknown piece
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR x KQkq - 0 1",  # bad color
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQxq - 0 1",  # bad castling
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w qK - 0 1",  # castling out of order
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq e9 0 1",  # bad en passant square
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - -1 1",  # negative clock
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - a 1",  # non numeric clock
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 0",  # full move starts at 1
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 ²",  # superscript digit
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - ² 1",  # superscript digit
        "rnbqkbnr/pppppppp/08/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1",  # no runs of zero squares
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - １ 1",  # full-width digit
    ],
)
def test_invalid_fen(fen: str) -> None:
    with pytest.raises(InvalidFENError):
        _ = parse_fen(fen)
    assert not is_valid_fen(fen)


def test_valid_fen() -> None:
    assert is_valid_fen(STARTING_FEN)
    # parse_fen accepts missing fields, the strict validator does not
    assert not is_valid_fen("4k3/8/8/8/8/8/8/4K3")


@pytest.mark.parametrize(
    "placement, is_valid",
    [
        ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR", True),
        ("8/8/8/8/8/8/8/8", True),
        ("8/8/8/8/8/8/8", False),
        ("9/8/8/8/8/8/8/8", False),
        ("44/8/8/8/8/8/8/8", True),
        ("rnbqkbnrr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR", False),
    ],
)
def test_is_valid_placement(placement: str, is_valid: bool) -> None:
    assert is_valid_placement(placement) == is_valid


def test_field_validators() -> None:
    assert is_valid_color_code("w") and is_valid_color_code("b")
    assert not is_valid_color_code("white")
    assert all(is_valid_castling_rights(rights) for rights in VALID_CASTLING_ENCODINGS)
    assert not is_valid_castling_rights("")
    assert is_valid_en_passant("-") and is_valid_en_passant("d6")
    assert not is_valid_en_passant("d")
