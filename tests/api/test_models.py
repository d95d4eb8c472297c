from uuid import UUID, uuid4

import pytest

from src.api.models import (
    AlgebraicMoveRequest,
    CreateGameRequest,
    ImportPGNRequest,
    MoveRequest,
)
from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, PieceType


@pytest.fixture
def mock_id() -> UUID:
    return uuid4()


# -- Validation - CreateGameRequest --
def test_valid_fen() -> None:
    """Test that CreateGameRequest accepts a valid FEN string."""

    valid_fen = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"
    request = CreateGameRequest(starting_fen=valid_fen)
    assert request.starting_fen == valid_fen


def test_starting_fen_is_optional() -> None:
    """Should be able to not supply a starting FEN, and validator just returns None."""
    request = CreateGameRequest()
    assert request.starting_fen is None
    assert request.tags == {}


@pytest.mark.parametrize(
    "invalid_fen",
    [
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0",  # only 5 space-separated values
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1 extra",  # too many space-separated values
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBN w KQkq - 0 1",  # rank too short
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR g KQkq - 0 1",  # not a color
    ],
)
def test_invalid_fen(invalid_fen: str) -> None:
    with pytest.raises(InvalidRequestError):
        _ = CreateGameRequest(starting_fen=invalid_fen)


# -- Validation - ImportPGNRequest --
@pytest.mark.parametrize("pgn", ["", "   ", "\n\n"])
def test_empty_pgn(pgn: str) -> None:
    with pytest.raises(InvalidRequestError):
        _ = ImportPGNRequest(pgn=pgn)


# -- Validation - MoveRequest --
def test_valid_square_names(mock_id: UUID) -> None:
    """Test that MoveRequest accepts correctly written squares in algebraic notation."""
    request = MoveRequest(
        game_id=mock_id, color=Color.WHITE, from_square="e2", to_square="e4"
    )
    assert request.from_square == "e2"
    assert request.to_square == "e4"
    assert request.promote_to is None


@pytest.mark.parametrize(
    "square",
    [
        "nonsense",  # anything more than two characters.
        "11",  # First character is not a letter
        "aa",  # second character is not a number
        "i1",  # off the board
        "a9",  # off the board
    ],
)
def test_invalid_squares(mock_id: UUID, square: str) -> None:
    """Test that an exception is raised when using invalid square name."""
    with pytest.raises(InvalidRequestError):
        _ = MoveRequest(
            game_id=mock_id, color=Color.WHITE, from_square=square, to_square="e2"
        )
    with pytest.raises(InvalidRequestError):
        _ = MoveRequest(
            game_id=mock_id, color=Color.WHITE, from_square="e2", to_square=square
        )


@pytest.mark.parametrize("piece_type", [PieceType.PAWN, PieceType.KING])
def test_invalid_promotion(mock_id: UUID, piece_type: PieceType) -> None:
    with pytest.raises(InvalidRequestError):
        _ = MoveRequest(
            game_id=mock_id,
            color=Color.WHITE,
            from_square="e7",
            to_square="e8",
            promote_to=piece_type,
        )


# -- Validation - AlgebraicMoveRequest --
def test_algebraic_is_stripped(mock_id: UUID) -> None:
    request = AlgebraicMoveRequest(game_id=mock_id, color=Color.BLACK, algebraic=" Nf6 ")
    assert request.algebraic == "Nf6"


def test_empty_algebraic(mock_id: UUID) -> None:
    with pytest.raises(InvalidRequestError):
        _ = AlgebraicMoveRequest(game_id=mock_id, color=Color.BLACK, algebraic="  ")
