"""
PGN, or Portable Game Notation: a game as tag pairs followed by the moves in algebraic notation.

[Event "Casual game"]
[White "Alice"]
[Black "Bob"]

1. e4 e5 {classical} 2. Nf3 (2. f4 exf4) Nc6 ; the rest of the line is a comment
3. Bb5 1-0

Reading happens in two layers:
1. Scanner + tokenizer: a small state machine over single characters with one transition table.
   It skips comments / variations and hands out the words of the main line (plus block comments that can be attached to moves).
2. Parser: walks the words (move numbers, moves, results), and plays the moves on a Position.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional

from src.chess.algebraic import calculate_move_from_algebraic
from src.chess.fen import STARTING_FEN, parse_fen
from src.chess.game import apply_move
from src.chess.moves import Move
from src.chess.pieces import Color
from src.chess.position import Position
from src.core.exceptions import InvalidFENError, PGNParseError

logger = logging.getLogger(__name__)

GAME_RESULTS = ("1-0", "0-1", "1/2-1/2", "*")
UNKNOWN_RESULT = "*"
FEN_TAG = "FEN"
RESULT_TAG = "Result"
# Glyphs like "e4!?" or "Nf3??" comment on the move. They are skipped.
ANNOTATION_CHARACTERS = "!?"
NAG_PREFIX = "$"
CONTEXT_LENGTH = 10

TAG_PATTERN = re.compile(r'\[\s*(?P<name>\w+)\s+"(?P<value>(?:[^"\\]|\\.)*)"\s*\]')


class Mode(Enum):
    NORMAL = auto()
    LINE_COMMENT = auto()
    BLOCK_COMMENT = auto()
    VARIATION = auto()


# Which character moves the scanner into another mode. None means: back to the enclosing mode.
TRANSITIONS: dict[Mode, dict[str, Optional[Mode]]] = {
    Mode.NORMAL: {
        "{": Mode.BLOCK_COMMENT,
        ";": Mode.LINE_COMMENT,
        "(": Mode.VARIATION,
    },
    Mode.LINE_COMMENT: {"\n": None},
    Mode.BLOCK_COMMENT: {"}": None},
    Mode.VARIATION: {
        "{": Mode.BLOCK_COMMENT,
        ";": Mode.LINE_COMMENT,
        "(": Mode.VARIATION,
        ")": None,
    },
}
# Closing characters without a matching opening one
UNMATCHED: dict[str, str] = {
    ")": "Unmatched closing parenthesis",
    "}": "Unmatched closing bracket",
}
WORD_SEPARATORS = ".{};()"


@dataclass(frozen=True)
class Location:
    offset: int
    line: int
    column: int


class TokenKind(Enum):
    WORD = auto()
    COMMENT = auto()


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    location: Location


@dataclass
class PGNGame:
    """A parsed game: tag pairs, the moves of the main line, and the position they lead to."""

    tags: dict[str, str]
    moves: list[Move]
    position: Position
    starting_fen: str = STARTING_FEN
    result: str = UNKNOWN_RESULT


class Scanner:
    """Walk the text character by character, keeping track of the line and column (both counting from 1)."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.offset = 0
        self.line = 1
        self.column = 1

    @property
    def location(self) -> Location:
        return Location(self.offset, self.line, self.column)

    def at_end(self) -> bool:
        return self.offset >= len(self.text)

    def peek(self) -> Optional[str]:
        if self.at_end():
            return None
        return self.text[self.offset]

    def advance(self, count: int = 1) -> None:
        for _ in range(count):
            if self.text[self.offset] == "\n":
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.offset += 1

    def skip_whitespace(self) -> None:
        while not self.at_end() and self.text[self.offset].isspace():
            self.advance()

    def error(
        self,
        message: str,
        location: Optional[Location] = None,
        cause: Optional[object] = None,
    ) -> PGNParseError:
        location = location or self.location
        context = self.text[location.offset : location.offset + CONTEXT_LENGTH]
        return PGNParseError(message, location.line, location.column, context, cause)


# --- PUBLIC INTERFACE ---
def parse_pgn(pgn: str) -> PGNGame:
    """
    Parse the full PGN (tags + moves).
    ----

    Raises PGNParseError on the first problem found: no partial results.
    """
    scanner = Scanner(pgn)
    tags, tag_locations = _parse_tags(scanner)

    starting_fen = tags.get(FEN_TAG, STARTING_FEN)
    try:
        position = parse_fen(starting_fen)
    except InvalidFENError as err:
        raise scanner.error(
            f"Invalid FEN tag: {err}", tag_locations[FEN_TAG], cause=err
        ) from err

    position, result = _parse_movetext(scanner, position)
    moves = list(position.moves)
    logger.debug("Parsed %d moves from PGN (result %s)", len(moves), result)
    return PGNGame(
        tags=tags,
        moves=moves,
        position=position,
        starting_fen=starting_fen,
        result=result,
    )


def parse_pgn_moves(pgn: str) -> list[Move]:
    """Only the moves of the main line"""
    return parse_pgn(pgn).moves


def moves_to_pgn(
    moves: list[Move],
    tags: Optional[dict[str, str]] = None,
    first_move_number: int = 1,
) -> str:
    """
    Write the moves (and tags) as PGN. The result is taken from the Result tag, if present.

    NOTE: comments containing a '}' cannot be written back, as PGN has no escape for it. It gets dropped from the comment.
    """
    tags = tags or {}
    lines = [f'[{name} "{_escape_tag_value(value)}"]' for name, value in tags.items()]
    if lines:
        lines.append("")

    movetext: list[str] = []
    move_number = first_move_number
    for idx, move in enumerate(moves):
        if move.color == Color.WHITE:
            movetext.append(f"{move_number}.")
        elif idx == 0:
            movetext.append(f"{move_number}...")
        movetext.append(move.algebraic or str(move))
        if move.comment:
            movetext.append("{" + move.comment.replace("}", "") + "}")
        if move.color == Color.BLACK:
            move_number += 1
    movetext.append(tags.get(RESULT_TAG, UNKNOWN_RESULT))
    lines.append(" ".join(movetext))
    return "\n".join(lines) + "\n"


# --- TAG PAIRS ---
def _parse_tags(scanner: Scanner) -> tuple[dict[str, str], dict[str, Location]]:
    """[Name "Value"] pairs at the start of the text. Quotes and backslashes in the value are escaped by a backslash."""
    tags: dict[str, str] = {}
    locations: dict[str, Location] = {}
    scanner.skip_whitespace()
    while scanner.peek() == "[":
        match = TAG_PATTERN.match(scanner.text, scanner.offset)
        if match is None:
            raise scanner.error("Malformed tag pair")
        tags[match["name"]] = _unescape_tag_value(match["value"])
        locations[match["name"]] = scanner.location
        scanner.advance(len(match.group(0)))
        scanner.skip_whitespace()
    return tags, locations


def _unescape_tag_value(value: str) -> str:
    return re.sub(r"\\(.)", r"\1", value)


def _escape_tag_value(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


# --- TOKENIZER: the state machine ---
def _tokenize(scanner: Scanner) -> Iterator[Token]:
    """
    Hand out the words of the main line, and the block comments in between them.
    ----

    The modes form a stack: a comment inside a variation returns to that variation once closed.
    Line comments, variations and everything inside them never make it out of here.
    """
    modes: list[tuple[Mode, Location]] = [(Mode.NORMAL, scanner.location)]
    word = ""
    word_location = scanner.location
    comment = ""

    while (char := scanner.peek()) is not None:
        mode = modes[-1][0]

        if mode == Mode.NORMAL and word and (char.isspace() or char in WORD_SEPARATORS):
            yield Token(TokenKind.WORD, word, word_location)
            word = ""

        if char in TRANSITIONS[mode]:
            target = TRANSITIONS[mode][char]
            if target is None:
                left, opened_at = modes.pop()
                if left == Mode.BLOCK_COMMENT and modes[-1][0] == Mode.NORMAL:
                    yield Token(TokenKind.COMMENT, comment.strip(), opened_at)
            else:
                modes.append((target, scanner.location))
                comment = ""
            scanner.advance()
            continue

        if char in UNMATCHED and mode in (Mode.NORMAL, Mode.VARIATION):
            raise scanner.error(UNMATCHED[char])

        if mode == Mode.BLOCK_COMMENT:
            comment += char
        elif mode == Mode.NORMAL and not (char.isspace() or char == "."):
            if not word:
                word_location = scanner.location
            word += char
        scanner.advance()

    if word:
        yield Token(TokenKind.WORD, word, word_location)

    # NOTE: an open line comment simply ends with the text
    for mode, opened_at in reversed(modes):
        if mode == Mode.BLOCK_COMMENT:
            raise scanner.error("Unterminated comment", opened_at)
        if mode == Mode.VARIATION:
            raise scanner.error("Unterminated variation", opened_at)


# --- PARSER: move numbers and moves ---
class Expect(Enum):
    MOVE_NUMBER = auto()
    MOVE = auto()
    BLACK_MOVE_OR_MOVE_NUMBER = auto()
    END = auto()


def _parse_movetext(scanner: Scanner, position: Position) -> tuple[Position, str]:
    """
    Play the moves of the main line on the position.
    ----

    * A move number precedes a move of the side to move
    * when that was a white move, a black move may follow without a new number
    * A comment right after a move gets attached to it (hence a move is only played once the next word shows up)
    * A game result ends the moves.
    """
    expect = Expect.MOVE_NUMBER
    pending: Optional[Move] = None
    result = UNKNOWN_RESULT

    for token in _tokenize(scanner):
        if token.kind == TokenKind.COMMENT:
            if pending is not None and pending.comment is None:
                pending = pending.with_comment(token.text)
            continue

        word = token.text
        if word.startswith(NAG_PREFIX) or not word.strip(ANNOTATION_CHARACTERS):
            continue

        if pending is not None:
            position = apply_move(position, pending)
            pending = None

        if expect == Expect.END:
            raise scanner.error("Unexpected text after the game result", token.location)

        if word in GAME_RESULTS:
            if expect == Expect.MOVE:
                raise scanner.error("Expected a move after the move number", token.location)
            result = word
            expect = Expect.END
            continue

        if word[0].isdigit():
            if not word.isdigit():
                raise scanner.error("Invalid move number", token.location)
            if expect == Expect.MOVE:
                raise scanner.error("Expected a move after the move number", token.location)
            expect = Expect.MOVE
            continue

        if expect == Expect.MOVE_NUMBER:
            raise scanner.error("Expected a move number", token.location)

        pending = _decode_move(scanner, position, token)
        expect = (
            Expect.BLACK_MOVE_OR_MOVE_NUMBER
            if pending.color == Color.WHITE
            else Expect.MOVE_NUMBER
        )

    if pending is not None:
        position = apply_move(position, pending)
    if expect == Expect.MOVE:
        raise scanner.error("Expected a move after the move number")
    return position, result


def _decode_move(scanner: Scanner, position: Position, token: Token) -> Move:
    """Decode the word as a move of the side to move. Annotation glyphs (!, ?) are dropped first."""
    algebraic = token.text.rstrip(ANNOTATION_CHARACTERS)
    move = calculate_move_from_algebraic(position, algebraic)
    if isinstance(move, Move):
        return move

    side = "white" if position.color_to_move == Color.WHITE else "black"
    raise scanner.error(
        f"Failed to parse {side} move: {move.message}", token.location, cause=move
    )
