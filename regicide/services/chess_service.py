"""Orchestration of communication from API router to business logic and persistence layers (and the reverse direction)."""

import logging
from typing import Callable
from uuid import UUID

from regicide.api.models import (
    ClickSquareRequest,
    CreateGameRequest,
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    MoveRequest,
    ResetGameRequest,
    SelectSquareRequest,
)
from regicide.chess import game as chess_game
from regicide.chess.board import Board
from regicide.chess.game import GameState
from regicide.chess.square import Square
from regicide.core.exceptions import MoveRejectedError, RepositoryError
from regicide.core.models import GameModel
from regicide.db.repository import GameRepository

logger = logging.getLogger(__name__)


class ChessService:
    """Orchestration of layers for chess game. Each game id owns exactly one stored game state."""

    def __init__(self, repository: GameRepository) -> None:
        self.repo = repository

    # -- API routes logic ---
    def create_new_game(self, request: CreateGameRequest) -> GameResponse:
        """Set up a new game, either from the standard position or from the requested board."""

        board = Board.from_fen(request.board_fen) if request.board_fen else None
        new_game = chess_game.new_game(board, request.current_player)

        stored_game, game_id = self.repo.create_game(new_game.to_model())
        logger.info("Created game %s", game_id)
        return self._create_game_response(game_id, stored_game)

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """
        Retrieve current game state.
        ----
        Used in "polling" loop by frontend to redraw the board for instance.
        """
        game_model = self._fetch_game(request.game_id)
        return self._create_game_response(request.game_id, game_model)

    def select_square(self, request: SelectSquareRequest) -> GameResponse:
        """Select / deselect a square. The response lists where the selected piece can go."""
        square = Square.from_algebraic(request.square)
        return self._update(
            request.game_id, lambda state: chess_game.select_square(state, square)
        )

    def click_square(self, request: ClickSquareRequest) -> GameResponse:
        """Click-driven play: select a piece, then click its destination. Never raises for an illegal target."""
        square = Square.from_algebraic(request.square)
        return self._update(
            request.game_id, lambda state: chess_game.click_square(state, square)
        )

    def make_move(self, request: MoveRequest) -> GameResponse:
        """Make a move attempt. A rejected move is propagated to the caller and nothing gets stored."""
        from_square = Square.from_algebraic(request.from_square)
        to_square = Square.from_algebraic(request.to_square)

        def _move(state: GameState) -> GameState:
            try:
                return chess_game.attempt_move(state, from_square, to_square)
            except MoveRejectedError as e:
                logger.info("Game %s: %s", request.game_id, e)
                raise

        return self._update(request.game_id, _move)

    def reset_game(self, request: ResetGameRequest) -> GameResponse:
        """Start over: the stored game gets replaced by a fresh one under the same id."""
        return self._update(request.game_id, lambda _: chess_game.reset_game())

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        if self.repo.delete_game(request.game_id) is None:
            raise RepositoryError(f"Game with {request.game_id=} not found.")

    # -- Internal helpers --
    def _update(
        self, game_id: UUID, action: Callable[[GameState], GameState]
    ) -> GameResponse:
        """
        1. fetch the stored game
        2. rebuild the GameState
        3. let the action produce the next state (an exception means: nothing changes)
        4. store and respond
        """
        stored_model = self._fetch_game(game_id)
        state = GameState.from_model(stored_model)

        new_state = action(state)

        after = new_state.to_model()
        self.repo.update_game(game_id, after)
        logger.debug(
            "Game %s: %s to move, status %s",
            game_id,
            after.current_player,
            after.status,
        )
        return self._create_game_response(game_id, after)

    def _create_game_response(self, game_id: UUID, model: GameModel) -> GameResponse:
        """Convert info in GameModel to a GameResponse (for game with given ID.)"""
        state = GameState.from_model(model)
        destinations = state.destinations
        return GameResponse(
            game_id=game_id,
            board_fen=model.board_fen,
            current_player=state.current_player,
            status=state.status,
            winner=state.winner,
            captured_pieces=model.captured_pieces,
            selected_square=model.selected_square,
            quiet_destinations=sorted(sq.to_algebraic() for sq in destinations.quiet),
            capture_destinations=sorted(
                sq.to_algebraic() for sq in destinations.captures
            ),
            move_history=model.move_history,
        )

    def _fetch_game(self, game_id: UUID) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return game_model
