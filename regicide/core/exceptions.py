"""
Custom exceptions raised by the domain, service and persistence layers.

Everything derives from GameError, so a host only has to catch a single type to report a failed request.
"""

from typing import Any


class GameError(Exception):
    """Top level exception for anything that goes wrong while playing a game."""


# --- REJECTED MOVES ---
class MoveRejectedError(GameError):
    """A move attempt that the rules do not allow. The game state is left untouched."""

    def __init__(
        self, message: str, from_square: Any = None, to_square: Any = None
    ) -> None:
        super().__init__(message)
        self.from_square = from_square
        self.to_square = to_square


class OutOfBoundsError(MoveRejectedError):
    """Target square lies outside the 8x8 board."""


class EmptySourceError(MoveRejectedError):
    """There is no piece on the square the move starts from."""


class NotYourPieceError(MoveRejectedError):
    """The piece on the starting square belongs to the other player."""


class FriendlyFireError(MoveRejectedError):
    """Target square is occupied by a piece of the mover's own color."""


class PieceRuleViolationError(MoveRejectedError):
    """The piece cannot reach the target square (movement pattern or obstruction)."""


class GameAlreadyOverError(MoveRejectedError):
    """The game reached a terminal status. No more moves are accepted."""


# --- STATE / REQUESTS / PERSISTENCE ---
class GameStateError(GameError):
    """Stored or transported game data cannot be turned into a valid game state."""


class InvalidRequestError(GameError):
    """
    Request data failed validation.

    NOTE: not a ValueError. Raised from a pydantic validator it propagates as is (pydantic only wraps ValueError/AssertionError).
    """


class RepositoryError(GameError):
    """Persistence layer could not find / store the requested game."""
