"""Requests and Response models"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.chess.fen import is_valid_fen
from src.chess.square import is_square_name
from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, GameResult, PieceType

TagName = str
TagValue = str


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    starting_fen: Optional[str] = None
    tags: dict[TagName, TagValue] = {}

    @field_validator("starting_fen")
    @classmethod
    def validate_starting_fen(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value

        value = value.strip()
        if not is_valid_fen(value):
            raise InvalidRequestError(f"Cannot interpret {value!r} as a FEN string.")
        return value


class ImportPGNRequest(BaseModel):
    pgn: str

    @field_validator("pgn")
    @classmethod
    def validate_pgn(cls, value: str) -> str:
        if not value.strip():
            raise InvalidRequestError("PGN text is empty.")
        return value


class LegalMovesRequest(BaseModel):
    game_id: UUID


class MoveRequest(BaseModel):
    game_id: UUID
    color: Color
    from_square: str
    to_square: str
    promote_to: Optional[PieceType] = None

    @field_validator(*["from_square", "to_square"])
    @classmethod
    def validate_square(cls, value: str) -> str:
        if not is_square_name(value):
            raise InvalidRequestError(
                f"Cannot interpret {value!r} as a valid square name."
            )
        return value

    @field_validator("promote_to")
    @classmethod
    def validate_promotion(cls, value: Optional[PieceType]) -> Optional[PieceType]:
        if value in (PieceType.PAWN, PieceType.KING):
            raise InvalidRequestError(f"Cannot promote to a {value}.")
        return value


class AlgebraicMoveRequest(BaseModel):
    game_id: UUID
    color: Color
    algebraic: str

    @field_validator("algebraic")
    @classmethod
    def validate_algebraic(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise InvalidRequestError("Move notation is empty.")
        return value


class GetGameRequest(BaseModel):
    game_id: UUID


class DeleteGameRequest(BaseModel):
    game_id: UUID


# --- RESPONSE MODELS ---
class GameResponse(BaseModel):
    game_id: UUID
    tags: dict[TagName, TagValue]
    fen_state: str
    starting_state: str
    color_to_move: Color
    move_history: list[str]
    result: GameResult


class LegalMovesResponse(BaseModel):
    game_id: UUID
    color: Color
    legal_moves: list[str]


class PGNResponse(BaseModel):
    game_id: UUID
    pgn: str
