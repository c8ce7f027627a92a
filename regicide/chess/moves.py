"""
Geometry/Base movement and capturing rules

Key idea: Use strategy pattern to define the movement rule for each piece type.

"Legal" in this module means pseudo-legal: a move that fits the movement pattern of the piece and the occupancy
of the board. Whether the move leaves your own king in check is NOT considered.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Self

from regicide.chess.pieces import Piece
from regicide.chess.square import BLACK_HOME_ROW, WHITE_HOME_ROW, Square
from regicide.core.exceptions import (
    EmptySourceError,
    FriendlyFireError,
    MoveRejectedError,
    NotYourPieceError,
    OutOfBoundsError,
    PieceRuleViolationError,
)
from regicide.core.shared_types import Color, PieceType


class Board(Protocol):
    """Just the parts the movement rules need"""

    def piece_at(self, square: Square) -> Optional[Piece]: ...


@dataclass(frozen=True)
class MoveRecord:
    """
    One entry of the move history. Append-only.

    `piece` is the piece as it was BEFORE the move (so a promoting pawn is recorded as a pawn).
    """

    from_square: Square
    to_square: Square
    piece: Piece
    captured_piece: Optional[Piece] = None

    @classmethod
    def from_dict(cls, data: dict[str, Optional[str]]) -> Self:
        """Inverse of `to_dict`. Raises KeyError / TypeError on malformed data."""
        captured = data.get("captured")
        return cls(
            from_square=Square.from_algebraic(data["from"]),
            to_square=Square.from_algebraic(data["to"]),
            piece=Piece.from_fen(data["piece"]),
            captured_piece=Piece.from_fen(captured) if captured else None,
        )

    def to_dict(self) -> dict[str, Optional[str]]:
        """ex. {"from": "e2", "to": "e4", "piece": "P", "captured": None}"""
        return {
            "from": self.from_square.to_algebraic(),
            "to": self.to_square.to_algebraic(),
            "piece": self.piece.to_fen(),
            "captured": self.captured_piece.to_fen() if self.captured_piece else None,
        }


# --- PATHS ---
def _step(start: int, end: int) -> int:
    """Unit step (-1, 0 or 1) to walk from start towards end"""
    return (end > start) - (end < start)


def is_path_clear(board: Board, from_square: Square, to_square: Square) -> bool:
    """
    Walk the squares strictly in between `from_square` and `to_square` (both excluded).
    ---

    Returns False as soon as one of them is occupied. Adjacent squares have nothing in between, so are always clear.

    NOTE: Only meaningful for straight lines and diagonals (the sliding pieces). Knights never ask.
    """
    row_step = _step(from_square.row, to_square.row)
    col_step = _step(from_square.col, to_square.col)

    row = from_square.row + row_step
    col = from_square.col + col_step
    while (row, col) != (to_square.row, to_square.col):
        if board.piece_at(Square(row, col)) is not None:
            return False
        row += row_step
        col += col_step
    return True


# --- MOVEMENT RULES ---
def is_valid_pawn_move(
    board: Board, from_square: Square, to_square: Square, color: Color
) -> bool:
    """
    A pawn:
    - moves by a single square forward onto an empty square.
    - can move by two from its home row. NOTE: only the landing square has to be empty, the square it passes over is not checked.
    - takes diagonally: one column sideways, one row forward, onto an opponent's piece.

    White moves UP the board (towards row 0), Black moves DOWN (towards row 7).
    """
    direction = -1 if color == Color.WHITE else 1
    start_row = WHITE_HOME_ROW - 1 if color == Color.WHITE else BLACK_HOME_ROW + 1
    target_piece = board.piece_at(to_square)

    # Forward moves
    if from_square.col == to_square.col and target_piece is None:
        if to_square.row == from_square.row + direction:
            return True
        if (
            from_square.row == start_row
            and to_square.row == from_square.row + 2 * direction
        ):
            return True

    # Diagonal capture
    return (
        abs(from_square.col - to_square.col) == 1
        and to_square.row == from_square.row + direction
        and target_piece is not None
        and target_piece.color != color
    )


def is_valid_rook_move(
    board: Board, from_square: Square, to_square: Square, color: Color
) -> bool:
    """Rooks move either horizontally or vertically"""
    if from_square.row != to_square.row and from_square.col != to_square.col:
        return False
    return is_path_clear(board, from_square, to_square)


def is_valid_knight_move(
    board: Board, from_square: Square, to_square: Square, color: Color
) -> bool:
    """Knights jump: |delta_row|, |delta_col| is (2, 1) or (1, 2). Nothing in between matters."""
    row_diff = abs(from_square.row - to_square.row)
    col_diff = abs(from_square.col - to_square.col)
    return (row_diff, col_diff) in {(2, 1), (1, 2)}


def is_valid_bishop_move(
    board: Board, from_square: Square, to_square: Square, color: Color
) -> bool:
    """Bishops move diagonally: |delta_row| = |delta_col|"""
    if abs(from_square.row - to_square.row) != abs(from_square.col - to_square.col):
        return False
    return is_path_clear(board, from_square, to_square)


def is_valid_queen_move(
    board: Board, from_square: Square, to_square: Square, color: Color
) -> bool:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return is_valid_rook_move(
        board, from_square, to_square, color
    ) or is_valid_bishop_move(board, from_square, to_square, color)


def is_valid_king_move(
    board: Board, from_square: Square, to_square: Square, color: Color
) -> bool:
    """
    The king can move by a single square at the time.

    NOTE: from == to also satisfies this rule. The king's own square is rejected earlier as friendly fire.
    """
    row_diff = abs(from_square.row - to_square.row)
    col_diff = abs(from_square.col - to_square.col)
    return row_diff <= 1 and col_diff <= 1


# -- STRATEGY PATTERN: MOVEMENT RULES ---
MoveRuleFn = Callable[[Board, Square, Square, Color], bool]
MOVEMENT_RULES: dict[PieceType, MoveRuleFn] = {
    PieceType.PAWN: is_valid_pawn_move,
    PieceType.KNIGHT: is_valid_knight_move,
    PieceType.BISHOP: is_valid_bishop_move,
    PieceType.ROOK: is_valid_rook_move,
    PieceType.QUEEN: is_valid_queen_move,
    PieceType.KING: is_valid_king_move,
}


# --- LEGALITY ---
REJECTION_REASONS: dict[type[MoveRejectedError], str] = {
    EmptySourceError: "there is no piece on the starting square",
    NotYourPieceError: "the piece belongs to the other player",
    OutOfBoundsError: "the target square lies outside of the board",
    FriendlyFireError: "the target square holds one of your own pieces",
    PieceRuleViolationError: "the piece cannot move like that",
}


def find_violation(
    board: Board, from_square: Square, to_square: Square, player: Color
) -> Optional[type[MoveRejectedError]]:
    """
    Find the first rule a move breaks (None if the move is (pseudo-)legal).
    ----

    Checks, in order (the first failure wins):
    1. there is a piece on `from_square`
    2. that piece belongs to `player`
    3. `to_square` is on the board
    4. `to_square` is not occupied by one of your own pieces
    5. the movement rule of the piece allows it
    """
    piece = board.piece_at(from_square)
    if piece is None:
        return EmptySourceError

    if piece.color != player:
        return NotYourPieceError

    if not to_square.is_within_bounds():
        return OutOfBoundsError

    target_piece = board.piece_at(to_square)
    if target_piece is not None and target_piece.color == piece.color:
        return FriendlyFireError

    movement_rule = MOVEMENT_RULES[piece.type]
    if not movement_rule(board, from_square, to_square, piece.color):
        return PieceRuleViolationError
    return None


def is_legal_move(
    board: Board, from_square: Square, to_square: Square, player: Color
) -> bool:
    return find_violation(board, from_square, to_square, player) is None


def check_move(
    board: Board, from_square: Square, to_square: Square, player: Color
) -> None:
    """Same checks as `is_legal_move`, but raise the matching MoveRejectedError instead of returning False."""
    violation = find_violation(board, from_square, to_square, player)
    if violation is not None:
        raise violation(
            f"Move {describe(from_square)} -> {describe(to_square)} rejected: {REJECTION_REASONS[violation]}.",
            from_square,
            to_square,
        )


def describe(square: Square) -> str:
    """Algebraic name for squares on the board, the raw coordinates otherwise."""
    if square.is_within_bounds():
        return square.to_algebraic()
    return f"({square.row}, {square.col})"
