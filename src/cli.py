"""CLI utility for inspecting positions and games.

Usage:
    python -m src.cli legal-moves "<fen>"
    python -m src.cli play "<fen>" e4 e5 Nf3 ...
    python -m src.cli replay game.pgn

Prints JSON to stdout. Problems are reported on stderr with exit code 1.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from src.chess.algebraic import calculate_move_from_algebraic
from src.chess.fen import board_to_fen, parse_fen
from src.chess.game import apply_move
from src.chess.moves import Move
from src.chess.pgn import parse_pgn
from src.chess.position import Position
from src.core.config import configure_logging
from src.core.exceptions import GameError

logger = logging.getLogger(__name__)


def legal_moves_report(position: Position) -> dict[str, Any]:
    """Legal destinations per origin square, in algebraic square names"""
    return {
        "fen": board_to_fen(position),
        "legal_moves": {
            str(from_square): sorted(str(to_square) for to_square in destinations)
            for from_square, destinations in sorted(
                position.legal_moves.items(), key=lambda item: str(item[0])
            )
        },
        "count": position.legal_move_count,
    }


def _legal_moves(args: argparse.Namespace) -> dict[str, Any]:
    return legal_moves_report(parse_fen(args.fen))


def _play(args: argparse.Namespace) -> dict[str, Any]:
    position = parse_fen(args.fen)
    for algebraic in args.moves:
        move = calculate_move_from_algebraic(position, algebraic)
        if not isinstance(move, Move):
            raise GameError(f"{algebraic}: {move.message}")
        position = apply_move(position, move)
    return {
        "fen": board_to_fen(position),
        "moves": [move.algebraic for move in position.moves],
    }


def _replay(args: argparse.Namespace) -> dict[str, Any]:
    game = parse_pgn(Path(args.pgn_file).read_text(encoding="utf-8"))
    return {
        "tags": game.tags,
        "moves": [move.algebraic for move in game.moves],
        "comments": {
            idx: move.comment for idx, move in enumerate(game.moves) if move.comment
        },
        "result": game.result,
        "fen": board_to_fen(game.position),
    }


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m src.cli",
        description="Chess rules: legal moves, playing moves, replaying PGN",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    legal = subparsers.add_parser("legal-moves", help="List the legal moves of a position")
    legal.add_argument("fen", help="Position FEN (quote the full string)")
    legal.set_defaults(handler=_legal_moves)

    play = subparsers.add_parser("play", help="Play moves in algebraic notation from a position")
    play.add_argument("fen", help="Position FEN (quote the full string)")
    play.add_argument("moves", nargs="*", help="Moves in algebraic notation, e.g. e4 e5 Nf3")
    play.set_defaults(handler=_play)

    replay = subparsers.add_parser("replay", help="Replay a game stored as PGN")
    replay.add_argument("pgn_file", help="Path to the PGN file")
    replay.set_defaults(handler=_replay)
    return parser


def main(argv: list[str] | None = None) -> int:
    configure_logging()
    args = build_parser().parse_args(argv)
    try:
        result = args.handler(args)
    except (GameError, OSError) as err:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"error: {err}", file=sys.stderr)
        return 1
    json.dump(result, sys.stdout, indent=2)
    print()
    return 0


if __name__ == "__main__":
    sys.exit(main())
