"""
The game state machine is the entrypoint into the domain layer for the service layer (and any other host, like a UI).

A GameState is an immutable value. Every operation takes a state and hands back a new one, so the caller that holds
the current state is its single owner and a rejected move can never leave a half-updated game behind.

Status transitions (re-evaluated after every turn):
* playing <-> check
* playing | check -> checkmate | stalemate | king-captured (terminal, no more moves accepted)
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Optional, Self

from regicide.chess.board import Board
from regicide.chess.moves import MoveRecord, check_move, describe, is_legal_move
from regicide.chess.pieces import Piece
from regicide.chess.square import BLACK_HOME_ROW, WHITE_HOME_ROW, Square, all_squares
from regicide.core.exceptions import (
    EmptySourceError,
    GameAlreadyOverError,
    GameStateError,
    MoveRejectedError,
)
from regicide.core.models import GameModel
from regicide.core.shared_types import TERMINAL_STATUSES, Color, PieceType, Status

logger = logging.getLogger(__name__)

# A pawn reaching either edge row gets promoted, regardless of its color
PROMOTION_ROWS = (BLACK_HOME_ROW, WHITE_HOME_ROW)
PROMOTION_PIECE_TYPE = PieceType.QUEEN


def _no_captures() -> dict[Color, tuple[Piece, ...]]:
    return {Color.WHITE: (), Color.BLACK: ()}


@dataclass(frozen=True)
class Destinations:
    """Where the selected piece can go. Split up so a UI can highlight captures differently."""

    quiet: frozenset[Square] = frozenset()
    captures: frozenset[Square] = frozenset()

    def __contains__(self, square: object) -> bool:
        return square in self.quiet or square in self.captures


@dataclass(frozen=True)
class GameState:
    board: Board = field(default_factory=Board.initial)
    current_player: Color = Color.WHITE
    status: Status = Status.PLAYING
    selected_square: Optional[Square] = None
    # keyed by the color of the piece that got captured, in order of capture
    captured_pieces: dict[Color, tuple[Piece, ...]] = field(
        default_factory=_no_captures
    )
    move_history: tuple[MoveRecord, ...] = ()

    @property
    def is_over(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def winner(self) -> Optional[Color]:
        """
        * checkmate: the player to move got mated, so the opponent wins.
        * king captured: the turn does not pass after the capture, so the player to move is the one who took the king.
        * otherwise: no winner (yet), stalemate is a draw.
        """
        if self.status == Status.CHECKMATE:
            return self.current_player.opponent
        if self.status == Status.KING_CAPTURED:
            return self.current_player
        return None

    @property
    def destinations(self) -> Destinations:
        """Legal destinations of the selected square (nothing selected: no destinations)."""
        if self.selected_square is None:
            return Destinations()
        return legal_destinations(self.board, self.selected_square)

    # --- CONVERSION TO/FROM THE TRANSPORT MODEL ---
    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """Define how to construct a GameState from the information the Service layer actually has"""
        try:
            status = Status(model.status)
            current_player = Color(model.current_player)
        except ValueError as e:
            raise GameStateError(
                f"Invalid status / player: {model.status!r}, {model.current_player!r}. "
                f"Pick a status from {','.join(Status)} and a player from {','.join(Color)}."
            ) from e

        board = Board.from_fen(model.board_fen)

        try:
            selected_square = (
                Square.from_algebraic(model.selected_square)
                if model.selected_square
                else None
            )
            captured_pieces = _no_captures()
            for color_name, letters in model.captured_pieces.items():
                captured_pieces[Color(color_name)] = tuple(
                    Piece.from_fen(letter) for letter in letters
                )
            move_history = tuple(
                MoveRecord.from_dict(record) for record in model.move_history
            )
        except (KeyError, TypeError, ValueError, IndexError) as e:
            raise GameStateError(f"Cannot restore game from stored data: {e}") from e

        if selected_square is not None and not selected_square.is_within_bounds():
            raise GameStateError(
                f"Selected square {model.selected_square!r} is not on the board."
            )

        return cls(
            board=board,
            current_player=current_player,
            status=status,
            selected_square=selected_square,
            captured_pieces=captured_pieces,
            move_history=move_history,
        )

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""
        return GameModel(
            board_fen=self.board.to_fen(),
            current_player=str(self.current_player),
            status=str(self.status),
            selected_square=(
                self.selected_square.to_algebraic() if self.selected_square else None
            ),
            captured_pieces={
                str(color): [piece.to_fen() for piece in pieces]
                for color, pieces in self.captured_pieces.items()
            },
            move_history=[record.to_dict() for record in self.move_history],
        )


# --- LIFECYCLE ---
def new_game(
    board: Optional[Board] = None, current_player: Color = Color.WHITE
) -> GameState:
    """
    Start a game from the standard position, or from a custom board.
    NOTE: a custom board might already be in check / mate, so the status is evaluated right away.
    """
    state = GameState(
        board=board if board is not None else Board.initial(),
        current_player=current_player,
    )
    return replace(state, status=evaluate_status(state))


def reset_game() -> GameState:
    """Throw the old game away and start over. There is nothing to tear down: the old state simply gets dropped."""
    return new_game()


# --- PLAYER ACTIONS ---
def select_square(state: GameState, square: Square) -> GameState:
    """
    Select (or deselect) a square.
    ----

    * game over: nothing happens.
    * clicking the selected square again: deselect it.
    * a square holding one of your own pieces: select it (also when another piece was selected before).
    * anything else: nothing happens.
    """
    if state.is_over:
        return state

    if state.selected_square == square:
        return replace(state, selected_square=None)

    piece = state.board.piece_at(square)
    if piece is not None and piece.color == state.current_player:
        return replace(state, selected_square=square)
    return state


def click_square(state: GameState, square: Square) -> GameState:
    """
    Click-driven flow: first click selects a piece, second click tries to move it there.
    ----

    A second click that does not make a legal move is not an error for the player. The selection is cleared
    (or moved over, if the click landed on another one of your own pieces) and the game carries on.
    """
    selected = state.selected_square
    if state.is_over or selected is None or selected == square:
        return select_square(state, square)

    try:
        return attempt_move(state, selected, square)
    except MoveRejectedError as e:
        logger.debug("Click on %s did not make a move: %s", describe(square), e)

    return select_square(replace(state, selected_square=None), square)


def attempt_move(
    state: GameState, from_square: Square, to_square: Square
) -> GameState:
    """
    Attempt to make a move
    -----

    1. the game must still be going (playing / check)
    2. the move must be legal for the player to move
    3. apply the move (the selection is cleared)

    Raises a MoveRejectedError otherwise. The state passed in is never changed.
    """
    if state.is_over:
        raise GameAlreadyOverError(
            f"Game is over. status: {state.status}", from_square, to_square
        )

    check_move(state.board, from_square, to_square, state.current_player)
    return apply_move(replace(state, selected_square=None), from_square, to_square)


def apply_move(
    state: GameState, from_square: Square, to_square: Square
) -> GameState:
    """
    Apply a move that has already been validated.
    -----

    1. read the moving piece and whatever stands on the target square
    2. a capture gets added to the captured pieces (of the captured piece's color)
    3. capturing the king ends the game on the spot: the piece moves, the history is updated, but the turn does NOT pass
    4. otherwise: move the piece (a pawn reaching the first or last row becomes a queen), record the move,
       switch player and re-evaluate the status
    """
    piece = state.board.piece_at(from_square)
    if piece is None:
        raise EmptySourceError(
            f"No piece to move on {describe(from_square)}.", from_square, to_square
        )

    captured_piece = state.board.piece_at(to_square)
    captured_pieces = dict(state.captured_pieces)
    if captured_piece is not None:
        captured_pieces[captured_piece.color] += (captured_piece,)

    move_history = state.move_history + (
        MoveRecord(from_square, to_square, piece, captured_piece),
    )

    if captured_piece is not None and captured_piece.type == PieceType.KING:
        logger.info(
            "%s captured the %s king on %s. Game over.",
            state.current_player,
            captured_piece.color,
            describe(to_square),
        )
        return replace(
            state,
            board=state.board.with_move(from_square, to_square, piece),
            status=Status.KING_CAPTURED,
            captured_pieces=captured_pieces,
            move_history=move_history,
        )

    resulting_piece = (
        piece.promoted_to(PROMOTION_PIECE_TYPE)
        if _is_promotion(piece, to_square)
        else piece
    )
    next_state = replace(
        state,
        board=state.board.with_move(from_square, to_square, resulting_piece),
        current_player=state.current_player.opponent,
        captured_pieces=captured_pieces,
        move_history=move_history,
    )
    status = evaluate_status(next_state)
    logger.debug(
        "%s moved %s %s -> %s. status: %s",
        state.current_player,
        piece.type,
        describe(from_square),
        describe(to_square),
        status,
    )
    return replace(next_state, status=status)


def _is_promotion(piece: Piece, to_square: Square) -> bool:
    return piece.type == PieceType.PAWN and to_square.row in PROMOTION_ROWS


# --- PRESENTATION HELPERS ---
def legal_destinations(board: Board, square: Square) -> Destinations:
    """All squares the piece on `square` can move to, split up into quiet moves and captures."""
    piece = board.piece_at(square)
    if piece is None:
        return Destinations()

    targets = [
        target
        for target in all_squares()
        if is_legal_move(board, square, target, piece.color)
    ]
    return Destinations(
        quiet=frozenset(t for t in targets if board.piece_at(t) is None),
        captures=frozenset(t for t in targets if board.piece_at(t) is not None),
    )


# --- CHECKS FOR ENDING THE GAME ---
def evaluate_status(state: GameState) -> Status:
    """
    Status for the player to move:

    | in check | any move | status    |
    |----------|----------|-----------|
    | yes      | no       | checkmate |
    | no       | no       | stalemate |
    | yes      | yes      | check     |
    | no       | yes      | playing   |
    """
    king_in_check = is_king_in_check(state.board, state.current_player)
    any_moves = has_any_legal_move(state.board, state.current_player)

    if king_in_check and not any_moves:
        return Status.CHECKMATE
    if not any_moves:
        return Status.STALEMATE
    if king_in_check:
        return Status.CHECK
    return Status.PLAYING


def is_king_in_check(board: Board, color: Color) -> bool:
    """
    Is any opposing piece able to move onto the king's square?

    NOTE: without a king of that color on the board (custom positions), the answer is simply "not in check".
    """
    king_square = board.locate_king(color)
    if king_square is None:
        logger.debug("No %s king on the board, so it cannot be in check.", color)
        return False

    opponent = color.opponent
    return any(
        is_legal_move(board, square, king_square, opponent)
        for square in board.locate_color(opponent)
    )


def has_any_legal_move(board: Board, color: Color) -> bool:
    """
    Does the player have at least one move that can actually be played? Stops at the first one found.
    ----

    A move counts if it is pseudo-legal AND it does not leave your own king attacked (taking the opponent's king
    always counts, as that ends the game on the spot).

    NOTE: Making a move never gets rejected for leaving your king in check (`is_legal_move` does not care).
    Only the end-of-game detection looks at king safety. Otherwise a king could always step somewhere and
    checkmate / stalemate would never happen.
    """
    return any(
        is_legal_move(board, from_square, to_square, color)
        and leaves_king_safe(board, from_square, to_square, color)
        for from_square in board.locate_color(color)
        for to_square in all_squares()
    )


def leaves_king_safe(
    board: Board, from_square: Square, to_square: Square, color: Color
) -> bool:
    """
    Return True if the king of `color` is not attacked after the move

    plan:
    1. make the move on a hypothetical board
    2. determine if the king is in check on the new board
    """
    target_piece = board.piece_at(to_square)
    if target_piece is not None and target_piece.type == PieceType.KING:
        return True

    piece = board.piece_at(from_square)
    if piece is None:
        return False
    return not is_king_in_check(board.with_move(from_square, to_square, piece), color)
