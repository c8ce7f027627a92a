"""Unit tests for /regicide/db/sql_repository.py"""

from uuid import uuid4

import pytest
from sqlalchemy.orm import Session

from regicide.db.schema import DBGame
from regicide.db.sql_repository import GameModel, SQLGameRepository

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"
AFTER_E4_FEN = "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR"


@pytest.fixture
def new_game_model() -> GameModel:
    return GameModel(
        board_fen=STARTING_FEN,
        current_player="white",
        status="playing",
    )


@pytest.fixture
def mid_game_model() -> GameModel:
    return GameModel(
        board_fen="rnbqkbnr/ppp1pppp/8/3P4/8/8/PPPP1PPP/RNBQKBNR",
        current_player="black",
        status="playing",
        selected_square="d8",
        captured_pieces={"white": [], "black": ["p"]},
        move_history=[
            {"from": "e2", "to": "e4", "piece": "P", "captured": None},
            {"from": "d7", "to": "d5", "piece": "p", "captured": None},
            {"from": "e4", "to": "d5", "piece": "P", "captured": "p"},
        ],
    )


def test_create_game(db_session_repo: Session, mid_game_model: GameModel) -> None:
    """Conversion from a GameModel to DBGame for a new entry to the database."""
    repo = SQLGameRepository(db_session_repo)
    record_in_db, game_id = repo.create_game(mid_game_model)
    assert isinstance(record_in_db, GameModel)
    assert record_in_db == mid_game_model

    game_db = db_session_repo.get(DBGame, game_id)
    assert game_db is not None
    assert game_db.created_at is not None


def test_get_game_by_id(db_session_repo: Session, mid_game_model: GameModel) -> None:
    """Create a game, then fetch it from db."""
    repo = SQLGameRepository(db_session_repo)
    expected_game, game_id = repo.create_game(mid_game_model)
    game_found = repo.get_game(game_id)
    assert isinstance(game_found, GameModel)
    assert game_found == expected_game


def test_get_unknown_game(db_session_repo: Session, new_game_model: GameModel) -> None:
    """
    Should return None if ID does not match anything in database.

    NOTE with an empty database, any id is a valid test case.
    """
    repo = SQLGameRepository(db_session_repo)
    assert repo.get_game(uuid4()) is None

    # Now do it with creating a game, but retrieving from the wrong ID
    repo.create_game(new_game_model)
    assert repo.get_game(uuid4()) is None


def test_returned_model_is_a_copy(
    db_session_repo: Session, mid_game_model: GameModel
) -> None:
    """Mutating a returned model must not leak into the stored record."""
    repo = SQLGameRepository(db_session_repo)
    _, game_id = repo.create_game(mid_game_model)

    found = repo.get_game(game_id)
    assert found is not None
    found.captured_pieces["white"].append("Q")
    found.move_history.clear()

    assert repo.get_game(game_id) == mid_game_model


def test_update_game(
    db_session_repo: Session, new_game_model: GameModel, mid_game_model: GameModel
) -> None:
    """Update an earlier created record."""
    repo = SQLGameRepository(db_session_repo)
    _, game_id = repo.create_game(new_game_model)

    updated_game = repo.update_game(game_id, mid_game_model)
    assert updated_game is not None
    assert updated_game == mid_game_model
    assert repo.get_game(game_id) == mid_game_model


def test_consecutive_game_updates(
    db_session_repo: Session, new_game_model: GameModel
) -> None:
    """Tests that we can successfully make multiple updates to the same game."""
    repo = SQLGameRepository(db_session_repo)
    _, game_id = repo.create_game(new_game_model)

    # make some updates "loosely simulate real scenario"
    first_update = GameModel(
        board_fen=STARTING_FEN,
        current_player="white",
        status="playing",
        selected_square="e2",
    )
    second_update = GameModel(
        board_fen=AFTER_E4_FEN,
        current_player="black",
        status="playing",
        move_history=[{"from": "e2", "to": "e4", "piece": "P", "captured": None}],
    )
    third_update = GameModel(
        board_fen="rnbqkbnr/pppp1ppp/8/4p3/4P3/8/PPPP1PPP/RNBQKBNR",
        current_player="white",
        status="playing",
        move_history=[
            {"from": "e2", "to": "e4", "piece": "P", "captured": None},
            {"from": "e7", "to": "e5", "piece": "p", "captured": None},
        ],
    )

    repo.update_game(game_id, first_update)
    repo.update_game(game_id, second_update)
    repo.update_game(game_id, third_update)

    after_all_updates = repo.get_game(game_id)
    assert after_all_updates is not None
    assert after_all_updates == third_update
    assert after_all_updates.selected_square is None


def test_attempt_updating_unknown_game(
    db_session_repo: Session, mid_game_model: GameModel
) -> None:
    """The update_game() method should break early and return None"""
    repo = SQLGameRepository(db_session_repo)
    assert repo.update_game(uuid4(), mid_game_model) is None


def test_delete_game(db_session_repo: Session, mid_game_model: GameModel) -> None:
    """Record of the game should no longer exist after deletion"""
    repo = SQLGameRepository(db_session_repo)
    created_game, game_id = repo.create_game(mid_game_model)
    deleted_game = repo.delete_game(game_id)

    # the correct game should be deleted
    assert deleted_game == created_game

    # The game should no longer be available in db
    assert repo.get_game(game_id) is None


def test_attempt_deleting_unknown_game(db_session_repo: Session) -> None:
    """
    The delete_game() method should break early and return None

    NOTE here simply attempt to delete a game from an empty DB. Already confirmed with the above that this is equivalent to fetching from the wrong ID.
    """
    repo = SQLGameRepository(db_session_repo)
    assert repo.delete_game(uuid4()) is None
