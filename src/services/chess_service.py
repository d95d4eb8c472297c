"""Orchestration of communication from API router to business logic and persistence layers (and the reverse direction)."""

import logging
from typing import NoReturn, Optional
from uuid import UUID

from src.api.models import (
    AlgebraicMoveRequest,
    CreateGameRequest,
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    ImportPGNRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
    PGNResponse,
)
from src.chess.algebraic import AlgebraicMoveError, calculate_move_from_algebraic
from src.chess.calculator import MoveError, NotYourTurn, calculate_move
from src.chess.fen import STARTING_FEN, board_to_fen, parse_fen
from src.chess.game import apply_move
from src.chess.moves import Move
from src.chess.pgn import moves_to_pgn, parse_pgn
from src.chess.pieces import Color as ChessColor
from src.chess.pieces import PieceType as ChessPieceType
from src.chess.position import Position
from src.chess.square import Square
from src.core.exceptions import (
    GameStateError,
    IllegalMoveError,
    NotYourTurnError,
    RepositoryError,
)
from src.core.models import GameModel
from src.core.shared_types import Color, GameResult
from src.db.repository import GameRepository

logger = logging.getLogger(__name__)

RESULT_TAG = "Result"


class ChessService:
    """Orchestration of layers for chess game."""

    def __init__(self, repository: GameRepository) -> None:
        self.repo = repository

    # -- API routes logic ---
    def create_new_game(self, request: CreateGameRequest) -> GameResponse:
        """Start a game from the standard starting position, or from the supplied FEN."""
        starting_fen = request.starting_fen or STARTING_FEN

        # Normalise the FEN (and reject positions that cannot be set up)
        position = parse_fen(starting_fen)
        fen = board_to_fen(position)
        new_game = GameModel(starting_fen=fen, current_fen=fen, tags=dict(request.tags))

        stored_game, game_id = self.repo.create_game(new_game)
        logger.info("Created game %s from %r", game_id, fen)
        return self._create_game_response(game_id, stored_game)

    def import_pgn(self, request: ImportPGNRequest) -> GameResponse:
        """Store a game written in PGN. Raises PGNParseError if the text cannot be read."""
        game = parse_pgn(request.pgn)
        start = parse_fen(game.starting_fen)
        model = GameModel(
            starting_fen=board_to_fen(start),
            current_fen=board_to_fen(game.position),
            tags=game.tags,
            result=game.result,
        )
        _record_moves(model, start, game.moves)

        stored_game, game_id = self.repo.create_game(model)
        logger.info("Imported game %s with %d moves", game_id, len(game.moves))
        return self._create_game_response(game_id, stored_game)

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """
        Retrieve current game state.
        ----
        Used in "polling" loop by frontend to check when it is the player's turn for instance.
        """
        game_model = self._fetch_game(request.game_id)
        return self._create_game_response(request.game_id, game_model)

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """All legal moves of the side to move, in UCI notation (e.g. e2e4, e7e8q)"""
        game_model = self._fetch_game(request.game_id)
        position = _load_position(game_model)

        legal_moves: list[str] = []
        for from_square, destinations in position.legal_moves.items():
            for to_square in destinations:
                move = calculate_move(position, from_square, to_square)
                if isinstance(move, Move):
                    legal_moves.append(move.to_uci())

        return LegalMovesResponse(
            game_id=request.game_id,
            color=_to_shared_color(position.color_to_move),
            legal_moves=sorted(legal_moves),
        )

    def make_move(self, request: MoveRequest) -> GameResponse:
        """Make a move attempt given by its squares (from e2 to e4)."""
        game_model = self._fetch_game(request.game_id)
        position = self._playable_position(game_model, request.color)

        from_square = Square.from_algebraic(request.from_square)
        to_square = Square.from_algebraic(request.to_square)
        if position.piece(from_square) is None:
            raise IllegalMoveError(f"No piece at square {from_square}")

        promotion: Optional[ChessPieceType] = (
            ChessPieceType[request.promote_to.name]
            if request.promote_to is not None
            else None
        )
        move = calculate_move(position, from_square, to_square, promotion=promotion)
        if not isinstance(move, Move):
            _raise_for_move_error(move)

        return self._commit_move(request.game_id, game_model, position, move)

    def make_algebraic_move(self, request: AlgebraicMoveRequest) -> GameResponse:
        """Make a move attempt given in algebraic notation (Nf3, exd5, O-O, ...)."""
        game_model = self._fetch_game(request.game_id)
        position = self._playable_position(game_model, request.color)

        move = calculate_move_from_algebraic(position, request.algebraic)
        if not isinstance(move, Move):
            _raise_for_move_error(move)

        return self._commit_move(request.game_id, game_model, position, move)

    def export_pgn(self, request: GetGameRequest) -> PGNResponse:
        """Write the stored game as PGN"""
        game_model = self._fetch_game(request.game_id)
        position = _load_position(game_model)

        tags = dict(game_model.tags)
        tags[RESULT_TAG] = game_model.result
        if game_model.starting_fen != STARTING_FEN:
            tags["SetUp"] = "1"
            tags["FEN"] = game_model.starting_fen

        first_move_number = parse_fen(game_model.starting_fen).full_move_number
        pgn = moves_to_pgn(
            list(position.moves), tags=tags, first_move_number=first_move_number
        )
        return PGNResponse(game_id=request.game_id, pgn=pgn)

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        deleted = self.repo.delete_game(request.game_id)
        if deleted is None:
            raise RepositoryError(f"Game with game_id={request.game_id} not found.")
        logger.info("Deleted game %s", request.game_id)

    # -- Internal helpers --
    def _playable_position(self, game_model: GameModel, color: Color) -> Position:
        """Load the position, making sure the game is not over and it is the requesting side's turn."""
        if game_model.result != GameResult.UNDECIDED:
            raise GameStateError(f"Game has already finished: {game_model.result}")

        position = _load_position(game_model)
        if _to_shared_color(position.color_to_move) != color:
            raise NotYourTurnError(f"It is not {color}'s turn.")
        return position

    def _commit_move(
        self, game_id: UUID, game_model: GameModel, position: Position, move: Move
    ) -> GameResponse:
        """Play the move, store the updated game and respond with it."""
        after_move = apply_move(position, move)

        game_model.history_fen.append(board_to_fen(position))
        game_model.moves_algebraic.append(move.algebraic)
        game_model.comments.append(move.comment)
        game_model.current_fen = board_to_fen(after_move)

        if self.repo.update_game(game_id, game_model) is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        logger.info("Game %s: played %s", game_id, move.algebraic)
        return self._create_game_response(game_id, game_model)

    def _create_game_response(self, game_id: UUID, model: GameModel) -> GameResponse:
        """Convert info in GameModel to a GameResponse (for game with given ID.)"""
        color_code = model.current_fen.split(" ")[1]
        return GameResponse(
            game_id=game_id,
            tags=model.tags,
            fen_state=model.current_fen,
            starting_state=model.starting_fen,
            color_to_move=Color.WHITE if color_code == "w" else Color.BLACK,
            move_history=model.moves_algebraic,
            result=GameResult(model.result),
        )

    def _fetch_game(self, game_id: UUID) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return game_model


def _load_position(game_model: GameModel) -> Position:
    """Replay the stored moves from the starting position. The Position carries the full move history that way."""
    position = parse_fen(game_model.starting_fen)
    comments = game_model.comments or [None] * len(game_model.moves_algebraic)
    for algebraic, comment in zip(game_model.moves_algebraic, comments):
        move = calculate_move_from_algebraic(position, algebraic)
        if not isinstance(move, Move):
            raise GameStateError(f"Stored move {algebraic!r} cannot be replayed: {move.message}")
        position = apply_move(position, move.with_comment(comment))
    return position


def _record_moves(model: GameModel, position: Position, moves: list[Move]) -> None:
    """Fill the history of the model with the moves played from the given position."""
    for move in moves:
        model.history_fen.append(board_to_fen(position))
        model.moves_algebraic.append(move.algebraic)
        model.comments.append(move.comment)
        position = apply_move(position, move)


def _raise_for_move_error(error: MoveError | AlgebraicMoveError) -> NoReturn:
    if isinstance(error, NotYourTurn):
        raise NotYourTurnError(error.message)
    raise IllegalMoveError(error.message)


def _to_shared_color(color: ChessColor) -> Color:
    return Color[color.name]
