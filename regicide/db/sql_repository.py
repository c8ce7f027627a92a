"""Implementation of (Game)Repository using SQLAlchemy"""

import logging
from copy import deepcopy
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from regicide.core.models import GameModel
from regicide.db.schema import DBGame

logger = logging.getLogger(__name__)


class SQLGameRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        game_db = self._fetch_game(game_id)
        if game_db:
            return self._to_model(game_db)
        return None

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""

        new_id = uuid4()
        game_db = DBGame(id=new_id)
        self._copy_into(game, game_db)
        self.db.add(game_db)
        self.db.commit()
        self.db.refresh(game_db)
        logger.debug("Stored new game %s", new_id)
        return self._to_model(game_db), new_id

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Add new info to existing record."""
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        self._copy_into(game, game_db)
        self.db.commit()
        self.db.refresh(game_db)
        return self._to_model(game_db)

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record."""
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        game_model = self._to_model(game_db)
        self.db.delete(game_db)
        self.db.commit()
        logger.debug("Deleted game %s", game_id)
        return game_model

    def _fetch_game(self, game_id: UUID) -> DBGame | None:
        query = select(DBGame).where(DBGame.id == game_id)
        return self.db.scalar(query)

    def _copy_into(self, game: GameModel, game_db: DBGame) -> None:
        """
        Write the GameModel's data onto the SQLAlchemy model.

        NOTE: JSON columns only get flagged as changed when they are assigned a NEW object, hence the copies.
        """
        game_db.board_fen = game.board_fen
        game_db.current_player = game.current_player
        game_db.status = game.status
        game_db.selected_square = game.selected_square
        game_db.captured_pieces = deepcopy(game.captured_pieces)
        game_db.move_history = deepcopy(game.move_history)

    def _to_model(self, game_db: DBGame) -> GameModel:
        """Convert SQLAlchemy model to data transfer model."""
        return GameModel(
            board_fen=game_db.board_fen,
            current_player=game_db.current_player,
            status=game_db.status,
            selected_square=game_db.selected_square,
            captured_pieces=deepcopy(game_db.captured_pieces),
            move_history=deepcopy(game_db.move_history),
        )
