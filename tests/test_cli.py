"""Unit tests for src/cli.py"""

import json
from pathlib import Path

import pytest

from src.cli import main

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"


def test_legal_moves(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["legal-moves", STARTING_FEN]) == 0

    report = json.loads(capsys.readouterr().out)
    assert report["count"] == 20
    assert report["fen"] == STARTING_FEN
    assert report["legal_moves"]["e2"] == ["e3", "e4"]
    assert report["legal_moves"]["g1"] == ["f3", "h3"]


def test_play(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["play", STARTING_FEN, "e4", "e5", "Nf3"]) == 0

    report = json.loads(capsys.readouterr().out)
    assert report["moves"] == ["e4", "e5", "Nf3"]
    assert report["fen"] == "rnbqkbnr/pppp1ppp/8/4p3/4P3/5N2/PPPP1PPP/RNBQKB1R b KQkq - 1 2"


def test_replay(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    pgn_file = tmp_path / "game.pgn"
    pgn_file.write_text(
        '[White "Anderssen"]\n\n1. e4 e5 {open game} 2. Nf3 1-0\n', encoding="utf-8"
    )
    assert main(["replay", str(pgn_file)]) == 0

    report = json.loads(capsys.readouterr().out)
    assert report["tags"] == {"White": "Anderssen"}
    assert report["moves"] == ["e4", "e5", "Nf3"]
    assert report["comments"] == {"1": "open game"}
    assert report["result"] == "1-0"


@pytest.mark.parametrize(
    "argv",
    [
        ["legal-moves", "not a fen"],
        ["legal-moves", "8/8/8/4k3/8/8/8/4K3 w - - ² 1"],
        ["play", STARTING_FEN, "e4", "e4"],
        ["replay", "does/not/exist.pgn"],
    ],
)
def test_errors_go_to_stderr(argv: list[str], capsys: pytest.CaptureFixture[str]) -> None:
    assert main(argv) == 1

    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.startswith("error: ")
