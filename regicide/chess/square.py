"""
A square on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass

# Chess board is always 8x8 (rows, columns).
BOARD_DIMENSIONS = (8, 8)

# Row 0 is Black's home rank (the 8th rank), row 7 is White's home rank (the 1st rank).
WHITE_HOME_ROW = BOARD_DIMENSIONS[0] - 1
BLACK_HOME_ROW = 0


@dataclass(frozen=True)
class Square:
    row: int
    col: int

    @classmethod
    def from_algebraic(cls, sq: str) -> Square:
        """Algebraic notation: 'a8' - 'h1' get converted to (0,0) - (7,7)"""
        col = ord(sq[0].lower()) - ord("a")
        row = BOARD_DIMENSIONS[0] - int(sq[1:])
        return cls(row, col)

    def to_algebraic(self) -> str:
        return f"{chr(self.col + ord('a'))}{BOARD_DIMENSIONS[0] - self.row}"

    def is_within_bounds(self) -> bool:
        return (0 <= self.row < BOARD_DIMENSIONS[0]) and (
            0 <= self.col < BOARD_DIMENSIONS[1]
        )


def all_squares() -> list[Square]:
    """Every square on the board, row by row starting at Black's home rank."""
    return [
        Square(row, col)
        for row in range(BOARD_DIMENSIONS[0])
        for col in range(BOARD_DIMENSIONS[1])
    ]


def is_valid_square(square: str) -> bool:
    """Valid square should be a letter for the file + a number for the rank, ex. 'e4'"""
    num_rows, num_cols = BOARD_DIMENSIONS
    if len(square) != 2:
        return False

    file_char, rank_char = square[0], square[1]
    allowed_file_names = "abcdefgh"[:num_cols]
    if file_char not in allowed_file_names:
        return False
    return rank_char.isdigit() and 1 <= int(rank_char) <= num_rows
