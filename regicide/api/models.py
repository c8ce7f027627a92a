"""Requests and Response models"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from regicide.chess.board import is_valid_placement
from regicide.chess.square import is_valid_square
from regicide.core.exceptions import InvalidRequestError
from regicide.core.models import MoveRecordData, PieceColor, PieceLetter
from regicide.core.shared_types import Color, Status


def _validate_square_name(value: str) -> str:
    if not is_valid_square(value):
        raise InvalidRequestError(
            f"Cannot interpret {value!r} as a valid square name."
        )
    return value


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    """Start a new game. Optionally from a custom position (piece placement part of a FEN string)."""

    board_fen: Optional[str] = None
    current_player: Color = Color.WHITE

    @field_validator("board_fen")
    @classmethod
    def validate_board_fen(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value

        value = value.strip()
        if not is_valid_placement(value):
            raise InvalidRequestError(
                "Board must be given as 8 slash-separated rows of FEN piece placement."
            )
        return value


class GetGameRequest(BaseModel):
    game_id: UUID


class SelectSquareRequest(BaseModel):
    game_id: UUID
    square: str

    @field_validator("square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        return _validate_square_name(value)


class ClickSquareRequest(SelectSquareRequest):
    """Same data as a selection, but a second click on a target square tries to move the selected piece there."""


class MoveRequest(BaseModel):
    game_id: UUID
    from_square: str
    to_square: str

    @field_validator(*["from_square", "to_square"])
    @classmethod
    def validate_square(cls, value: str) -> str:
        return _validate_square_name(value)


class ResetGameRequest(BaseModel):
    game_id: UUID


class DeleteGameRequest(BaseModel):
    game_id: UUID


# --- RESPONSE MODELS ---
class GameResponse(BaseModel):
    """Everything a frontend needs to draw the game."""

    game_id: UUID
    board_fen: str
    current_player: Color
    status: Status
    winner: Optional[Color] = None
    captured_pieces: dict[PieceColor, list[PieceLetter]]
    selected_square: Optional[str] = None
    quiet_destinations: list[str] = []
    capture_destinations: list[str] = []
    move_history: list[MoveRecordData] = []
