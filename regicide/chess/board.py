"""The Board holds the position: which piece stands on which square. Pure data, every update returns a new Board."""

from dataclasses import dataclass, field
from typing import Optional, Self

from regicide.chess.pieces import BACK_RANK_ORDER, FEN_TO_PIECE, Piece
from regicide.chess.square import (
    BLACK_HOME_ROW,
    BOARD_DIMENSIONS,
    WHITE_HOME_ROW,
    Square,
)
from regicide.core.exceptions import GameStateError
from regicide.core.shared_types import Color, PieceType

STARTING_POSITION_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"
EMPTY_FEN = "/".join(["8"] * BOARD_DIMENSIONS[0])


def is_valid_placement(placement: str) -> bool:
    """Only check the part of the FEN encoding for the board position."""
    num_rows, num_cols = BOARD_DIMENSIONS
    row_fens = placement.split("/")
    if len(row_fens) != num_rows:
        return False

    for row_fen in row_fens:
        col_count = 0
        for character in row_fen:
            # make sure every character is valid
            if character.isdigit():
                col_count += int(character)
            elif character.lower() in FEN_TO_PIECE:
                col_count += 1
            else:
                return False

        # make sure you are creating a correctly sized board
        if col_count != num_cols:
            return False
    return True


@dataclass(frozen=True)
class Board:
    """
    Only occupied squares are stored. An empty square is simply missing from `position`.

    NOTE: Nothing mutates a Board. Moves produce a new one (see `with_move`), which is also what
    makes "what-if" evaluation on a hypothetical board free of side effects.
    """

    position: dict[Square, Piece] = field(default_factory=dict)

    @classmethod
    def empty(cls) -> Self:
        return cls({})

    @classmethod
    def initial(cls) -> Self:
        """
        Standard starting position
        ---
        * row 0: black back rank (rook, knight, bishop, queen, king, bishop, knight, rook)
        * row 1: black pawns
        * row 6: white pawns
        * row 7: white back rank, same order as black
        """
        position: dict[Square, Piece] = {}
        for color, home_row, pawn_row in [
            (Color.BLACK, BLACK_HOME_ROW, BLACK_HOME_ROW + 1),
            (Color.WHITE, WHITE_HOME_ROW, WHITE_HOME_ROW - 1),
        ]:
            for col, piece_type in enumerate(BACK_RANK_ORDER):
                position[Square(home_row, col)] = Piece(piece_type, color)
                position[Square(pawn_row, col)] = Piece(PieceType.PAWN, color)
        return cls(position)

    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """Construct a board using the piece placement part of a FEN string.

        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on the 8th rank (row 0), starting with rook on a8, knight on b8, etc.
        * pawns cover 7th rank (row 1) entirely
        * ranks 6 through 3 have 8 consecutive empty squares
        * rank 2 (row 6) are the white pawns (capital letters)
        * 1st rank (row 7) are the white pieces.
        """
        if not is_valid_placement(fen_str):
            raise GameStateError(f"Invalid board placement: {fen_str!r}")

        position: dict[Square, Piece] = {}
        # FEN string is read from the top rank (row 0) down to the bottom rank (row 7)
        for row, fen_one_row in enumerate(fen_str.split("/")):
            col = 0
            for character in fen_one_row:
                if character.isalpha():
                    # simple case: a letter directly denotes the piece that should be created
                    position[Square(row, col)] = Piece.from_fen(character)
                    col += 1
                else:
                    # A number denotes the amount of empty squares after each other
                    col += int(character)
        return cls(position)

    def to_fen(self) -> str:
        """Rows are separated by slashes in FEN string."""
        return "/".join(self._row_to_fen(row) for row in range(BOARD_DIMENSIONS[0]))

    def _row_to_fen(self, row: int) -> str:
        """FEN string of a single row"""
        fen_characters: list[str] = []
        empty_count = 0
        for col in range(BOARD_DIMENSIONS[1]):
            piece = self.piece_at(Square(row, col))

            if piece is not None:
                if empty_count > 0:
                    fen_characters.append(str(empty_count))
                    empty_count = 0
                fen_characters.append(piece.to_fen())
            else:
                empty_count += 1

        # if the entire row is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    def piece_at(self, square: Square) -> Optional[Piece]:
        return self.position.get(square)

    def with_move(self, from_square: Square, to_square: Square, piece: Piece) -> Self:
        """New board with `from_square` cleared and `piece` standing on `to_square`."""
        position = dict(self.position)
        position.pop(from_square, None)
        position[to_square] = piece
        return type(self)(position)

    def with_piece(self, square: Square, piece: Optional[Piece]) -> Self:
        """New board with the piece placed on (or, for None, removed from) the square. Handy for custom positions."""
        position = dict(self.position)
        if piece is None:
            position.pop(square, None)
        else:
            position[square] = piece
        return type(self)(position)

    def locate_color(self, color: Color) -> list[Square]:
        return [
            square for square, piece in self.position.items() if piece.color == color
        ]

    def locate_king(self, color: Color) -> Optional[Square]:
        """Square of the king of the given color, or None if that king is not on the board."""
        king = Piece(PieceType.KING, color)
        return next(
            (square for square, piece in self.position.items() if piece == king),
            None,
        )
