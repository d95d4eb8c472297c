"""Unit tests for src/chess/pgn.py"""

import pytest

from src.chess.fen import board_to_fen
from src.chess.pgn import moves_to_pgn, parse_pgn, parse_pgn_moves
from src.chess.pieces import Color
from src.core.exceptions import PGNParseError

ITALIAN_GAME = """[Event "Casual game"]
[Site "Kitchen table"]
[White "Alice"]
[Black "Bob \\"the rook\\" Smith"]
[Result "1-0"]

1. e4 e5 {the classical reply} 2. Nf3 (2. f4 exf4 (2... d5) 3. Nf3) Nc6
; the Italian
3. Bc4 $1 Bc5!? 1-0
"""


def algebraic(pgn: str) -> list[str]:
    return [move.algebraic for move in parse_pgn_moves(pgn)]


def test_four_moves() -> None:
    moves = parse_pgn_moves("1. e4 e5 2. Nf3 Nc6")
    assert len(moves) == 4
    game = parse_pgn("1. e4 e5 2. Nf3 Nc6")
    assert (
        game.position.board.to_fen()
        == "r1bqkbnr/pppp1ppp/2n5/4p3/4P3/5N2/PPPP1PPP/RNBQKB1R"
    )
    assert game.result == "*"
    assert game.tags == {}


def test_full_game_with_tags_comments_and_variations() -> None:
    game = parse_pgn(ITALIAN_GAME)
    assert game.tags["White"] == "Alice"
    assert game.tags["Black"] == 'Bob "the rook" Smith'
    assert game.result == "1-0"
    assert [move.algebraic for move in game.moves] == ["e4", "e5", "Nf3", "Nc6", "Bc4", "Bc5"]
    assert game.moves[1].comment == "the classical reply"
    assert all(move.comment is None for idx, move in enumerate(game.moves) if idx != 1)
    assert game.position.color_to_move == Color.WHITE
    assert game.position.full_move_number == 4


@pytest.mark.parametrize(
    "pgn",
    [
        "1.e4 e5 2.Nf3",
        "1. e4\ne5\r\n2. Nf3",
        "1. e4 1... e5 2. Nf3",
        "1. e4+ e5 2. Nf3!",
        "1. e4 {best by test} e5 ; comment\n2. Nf3 *",
    ],
)
def test_formatting_variants(pgn: str) -> None:
    assert algebraic(pgn) == ["e4", "e5", "Nf3"]


def test_comment_attaches_to_black_move() -> None:
    moves = parse_pgn_moves("1. e4 e5 {symmetric} 2. Nf3 {developing}")
    assert moves[1].comment == "symmetric"
    assert moves[2].comment == "developing"


def test_start_from_fen_tag() -> None:
    pgn = """[SetUp "1"]
[FEN "4k3/8/8/8/8/8/8/R3K3 b Q - 0 10"]

10... Kd7 11. O-O-O+ Ke6"""
    game = parse_pgn(pgn)
    assert [move.algebraic for move in game.moves] == ["Kd7", "O-O-O", "Ke6"]
    assert board_to_fen(game.position) == "8/8/4k3/8/8/8/8/2KR4 w - - 3 12"


def test_empty_movetext() -> None:
    game = parse_pgn('[Event "Nothing happened"]\n\n*')
    assert game.moves == []
    assert game.result == "*"


@pytest.mark.parametrize(
    "pgn, message",
    [
        ("1. e4 e5 )", "Unmatched closing parenthesis"),
        ("1. e4 } e5", "Unmatched closing bracket"),
        ("1. e4 (1. d4 d5", "Unterminated variation"),
        ("1. e4 {forever", "Unterminated comment"),
        ("1. e4 ( {inside } ", "Unterminated variation"),
        ("1x. e4", "Invalid move number"),
        ("1. e5", "Failed to parse white move"),
        ("1. e4 e6e5", "Failed to parse black move"),
        ("1. e4 e5 Nf3", "Expected a move number"),
        ("1. e4 e5 2.", "Expected a move after the move number"),
        ("1. e4 e5 1-0 2. Nf3", "Unexpected text after the game result"),
        ('[Event "unterminated]\n1. e4', "Malformed tag pair"),
        ('[FEN "not a fen"]\n1. e4', "Invalid FEN tag"),
    ],
)
def test_errors(pgn: str, message: str) -> None:
    with pytest.raises(PGNParseError, match=message):
        _ = parse_pgn(pgn)


@pytest.mark.parametrize(
    "fen",
    [
        "not a fen",
        "8/8/8/4k3/8/8/8/4K3 w - - ² 1",
        "8/8/08/4k3/8/8/8/4K3 w - - 0 1",
    ],
)
def test_invalid_fen_tag_location(fen: str) -> None:
    """The error points at the FEN tag itself"""
    with pytest.raises(PGNParseError, match="Invalid FEN tag") as exc_info:
        _ = parse_pgn(f'[Event "Casual game"]\n[FEN "{fen}"]\n\n*')
    assert exc_info.value.line == 2
    assert exc_info.value.column == 1
    assert exc_info.value.context.startswith('[FEN "')


def test_error_location() -> None:
    with pytest.raises(PGNParseError) as exc_info:
        _ = parse_pgn("1. e4 e5\n2. Nf3 Nf5")
    assert exc_info.value.line == 2
    assert exc_info.value.column == 8
    assert exc_info.value.context == "Nf5"


def test_write_and_read_back() -> None:
    game = parse_pgn(ITALIAN_GAME)
    pgn = moves_to_pgn(game.moves, tags=game.tags)
    assert pgn.startswith('[Event "Casual game"]\n')
    assert '[Black "Bob \\"the rook\\" Smith"]' in pgn
    assert "1. e4 e5 {the classical reply} 2. Nf3 Nc6 3. Bc4 Bc5 1-0" in pgn

    again = parse_pgn(pgn)
    assert again.tags == game.tags
    assert [move.algebraic for move in again.moves] == [move.algebraic for move in game.moves]
    assert again.moves[1].comment == "the classical reply"


def test_write_starting_with_black() -> None:
    game = parse_pgn('[FEN "4k3/8/8/8/8/8/8/R3K3 b Q - 0 10"]\n10... Kd7 11. Ra7+')
    pgn = moves_to_pgn(game.moves, first_move_number=10)
    assert pgn == "10... Kd7 11. Ra7 *\n"
