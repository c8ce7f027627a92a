"""Unit tests for /regicide/api/models.py"""

from uuid import UUID, uuid4

import pytest

from regicide.api.models import (
    ClickSquareRequest,
    CreateGameRequest,
    GameResponse,
    MoveRequest,
    SelectSquareRequest,
)
from regicide.core.exceptions import InvalidRequestError
from regicide.core.shared_types import Color, Status


@pytest.fixture
def mock_id() -> UUID:
    return uuid4()


# -- Validation - CreateGameRequest --
def test_valid_board_fen() -> None:
    """Test that CreateGameRequest accepts the piece placement part of a FEN string."""

    valid_fen = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"
    request = CreateGameRequest(board_fen=valid_fen, current_player=Color.BLACK)
    assert request.board_fen == valid_fen
    assert request.current_player == Color.BLACK


def test_board_fen_is_stripped() -> None:
    request = CreateGameRequest(board_fen="  k7/8/8/8/8/8/8/7K\n")
    assert request.board_fen == "k7/8/8/8/8/8/8/7K"


def test_defaults() -> None:
    """Should be able to not supply anything: standard position, white to move."""
    request = CreateGameRequest()
    assert request.board_fen is None
    assert request.current_player == Color.WHITE


def test_player_from_plain_string() -> None:
    assert CreateGameRequest(current_player="black").current_player == Color.BLACK


@pytest.mark.parametrize(
    "invalid_fen",
    [
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP",  # only 7 rows
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1",  # full FEN, only placement is accepted
        "rnbqkbnr/pppppppp/9/8/8/8/PPPPPPPP/RNBQKBNR",  # row with 9 squares
        "rnbqkbnr/ppppxppp/8/8/8/8/PPPPPPPP/RNBQKBNR",  # unknown piece letter
        "",
    ],
)
def test_invalid_board_fen(invalid_fen: str) -> None:
    with pytest.raises(InvalidRequestError):
        _ = CreateGameRequest(board_fen=invalid_fen)


# -- Validation - squares --
def test_valid_square_names(mock_id: UUID) -> None:
    """Test that MoveRequest accepts correctly written squares in algebraic notation."""
    request = MoveRequest(game_id=mock_id, from_square="e2", to_square="e4")
    assert request.from_square == "e2"
    assert request.to_square == "e4"


INVALID_SQUARES = [
    "nonsense",  # anything more than two characters.
    "11",  # First character is not a letter
    "aa",  # second character is not a number
    "i1",  # file beyond h
    "a9",  # rank beyond 8
    "a0",
    "",
]


@pytest.mark.parametrize("square", INVALID_SQUARES)
def test_invalid_from_square(mock_id: UUID, square: str) -> None:
    with pytest.raises(InvalidRequestError):
        _ = MoveRequest(game_id=mock_id, from_square=square, to_square="e2")


@pytest.mark.parametrize("square", INVALID_SQUARES)
def test_invalid_to_square(mock_id: UUID, square: str) -> None:
    with pytest.raises(InvalidRequestError):
        _ = MoveRequest(game_id=mock_id, from_square="e2", to_square=square)


@pytest.mark.parametrize("request_type", [SelectSquareRequest, ClickSquareRequest])
def test_selection_requests_validate_square(
    mock_id: UUID, request_type: type[SelectSquareRequest]
) -> None:
    assert request_type(game_id=mock_id, square="h8").square == "h8"
    with pytest.raises(InvalidRequestError):
        _ = request_type(game_id=mock_id, square="z0")


# -- GameResponse --
def test_response_defaults(mock_id: UUID) -> None:
    response = GameResponse(
        game_id=mock_id,
        board_fen="8/8/8/8/8/8/8/8",
        current_player=Color.WHITE,
        status=Status.PLAYING,
        captured_pieces={"white": [], "black": []},
    )
    assert response.winner is None
    assert response.selected_square is None
    assert response.quiet_destinations == []
    assert response.capture_destinations == []
    assert response.move_history == []
