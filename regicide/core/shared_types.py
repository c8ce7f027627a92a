"""
Type definitions used across layers
"""

from enum import StrEnum


class Status(StrEnum):
    PLAYING = "playing"
    CHECK = "check"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"
    KING_CAPTURED = "king-captured"


# Statuses after which no further moves are accepted
TERMINAL_STATUSES: frozenset[Status] = frozenset(
    {Status.CHECKMATE, Status.STALEMATE, Status.KING_CAPTURED}
)


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self == Color.WHITE else Color.WHITE


class PieceType(StrEnum):
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"
