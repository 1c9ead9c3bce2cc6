from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List


class Color(Enum):
    NONE = 0
    BLACK = 1
    WHITE = 2

    def opposite(self) -> "Color":
        if self is Color.WHITE:
            return Color.BLACK
        if self is Color.BLACK:
            return Color.WHITE
        if self is Color.NONE:
            return Color.NONE
        raise ValueError(f"unknown color: {self!r}")

    @property
    def direction(self) -> int:
        """Pawn advance direction in ranks: +1 for white, -1 for black."""
        if self is Color.WHITE:
            return 1
        if self is Color.BLACK:
            return -1
        if self is Color.NONE:
            return 0
        raise ValueError(f"unknown color: {self!r}")


class PieceType(Enum):
    NONE = 0
    KING = 1
    PAWN = 2
    KNIGHT = 3
    BISHOP = 4
    ROOK = 5
    QUEEN = 6

    @property
    def points(self) -> int:
        return PIECE_POINTS[self]


PIECE_POINTS: Dict[PieceType, int] = {
    PieceType.NONE: 0,
    PieceType.KING: 200,
    PieceType.PAWN: 1,
    PieceType.KNIGHT: 3,
    PieceType.BISHOP: 3,
    PieceType.ROOK: 5,
    PieceType.QUEEN: 9,
}

PIECE_TO_CHAR: Dict[PieceType, str] = {
    PieceType.KING: "k",
    PieceType.PAWN: "p",
    PieceType.KNIGHT: "n",
    PieceType.BISHOP: "b",
    PieceType.ROOK: "r",
    PieceType.QUEEN: "q",
}
CHAR_TO_PIECE: Dict[str, PieceType] = {v: k for k, v in PIECE_TO_CHAR.items()}

KING_OFFSETS = (-1, 7, 8, 9, 1, -7, -8, -9)
KNIGHT_OFFSETS = (6, 15, 17, 10, -6, -15, -17, -10)
BISHOP_DIRECTIONS = (9, 7, -9, -7)
ROOK_DIRECTIONS = (8, 1, -8, -1)


def lands_on_board(index: int, offset: int, max_file_shift: int) -> bool:
    """Return True if ``index + offset`` is a square at most ``max_file_shift`` files away.

    Flat indices wrap from the h-file onto the a-file of the next rank, so an
    offset is only geometric when the file distance it covers is bounded.
    """
    target = index + offset
    if target < 0 or target > 63:
        return False
    return abs(target % 8 - index % 8) <= max_file_shift


def _ray(step: int, distance: int) -> List[int]:
    return [step * k for k in range(1, distance + 1)]


def rook_offsets(index: int) -> List[int]:
    row = index // 8 + 1
    col = index % 8 + 1
    return _ray(1, 8 - col) + _ray(-1, col - 1) + _ray(8, 8 - row) + _ray(-8, row - 1)


def bishop_offsets(index: int) -> List[int]:
    row = index // 8 + 1
    col = index % 8 + 1
    return (
        _ray(9, min(8 - col, 8 - row))
        + _ray(7, min(col - 1, 8 - row))
        + _ray(-7, min(8 - col, row - 1))
        + _ray(-9, min(col - 1, row - 1))
    )


@dataclass(frozen=True)
class Piece:
    """Content of a single square.

    A ``PieceType.NONE`` piece is the empty square; there is no other "empty"
    value on the board.

    Attributes:
        kind (PieceType): Piece kind.
        color (Color): Owner, ``Color.NONE`` only for the empty square.
        has_moved (bool): Whether the piece has left its initial square. Governs
            pawn double steps and castling.
    """

    kind: PieceType = PieceType.NONE
    color: Color = Color.NONE
    has_moved: bool = False

    @classmethod
    def from_char(cls, ch: str) -> "Piece":
        """Create an unmoved piece from a FEN letter (uppercase is white)."""
        kind = CHAR_TO_PIECE.get(ch.lower())
        if kind is None:
            raise ValueError(f"invalid piece character: {ch!r}")
        return cls(kind, Color.BLACK if ch.islower() else Color.WHITE)

    def is_none(self) -> bool:
        return self.kind is PieceType.NONE

    def is_sliding(self) -> bool:
        return self.kind in (PieceType.BISHOP, PieceType.ROOK, PieceType.QUEEN)

    def visualize(self) -> str:
        if self.is_none() or self.color is Color.NONE:
            return "x"
        ch = PIECE_TO_CHAR[self.kind]
        return ch if self.color is Color.BLACK else ch.upper()

    def pawn_capture_offsets(self, index: int) -> List[int]:
        """Diagonal offsets a pawn on ``index`` attacks, without crossing a board edge."""
        direction = self.color.direction
        return [m for m in (7 * direction, 9 * direction) if lands_on_board(index, m, 1)]

    def get_moves(self, index: int) -> List[int]:
        """Pseudo-legal displacements from ``index``, ignoring board contents.

        Args:
            index (int): Square the piece stands on (0 = a1, 63 = h8).

        Returns:
            List[int]: Offsets ``to - from`` the piece's geometry allows.
        """
        kind = self.kind
        if kind is PieceType.NONE:
            return []
        if kind is PieceType.KING:
            moves = [m for m in KING_OFFSETS if lands_on_board(index, m, 1)]
            if not self.has_moved:
                # castling candidates, validated by the castling rule
                moves.extend(m for m in (2, -2) if lands_on_board(index, m, 2))
            return moves
        if kind is PieceType.PAWN:
            direction = self.color.direction
            moves = [m for m in (8 * direction,) if lands_on_board(index, m, 0)]
            moves.extend(self.pawn_capture_offsets(index))
            if not self.has_moved and lands_on_board(index, 16 * direction, 0):
                moves.append(16 * direction)
            return moves
        if kind is PieceType.KNIGHT:
            return [m for m in KNIGHT_OFFSETS if lands_on_board(index, m, 2)]
        if kind is PieceType.BISHOP:
            return bishop_offsets(index)
        if kind is PieceType.ROOK:
            return rook_offsets(index)
        if kind is PieceType.QUEEN:
            return rook_offsets(index) + bishop_offsets(index)
        raise ValueError(f"unknown piece kind: {kind!r}")

    def get_sliding_moves(self) -> List[int]:
        """Unit ray steps used to walk a sliding piece's path one square at a time."""
        kind = self.kind
        if kind is PieceType.BISHOP:
            return list(BISHOP_DIRECTIONS)
        if kind is PieceType.ROOK:
            return list(ROOK_DIRECTIONS)
        if kind is PieceType.QUEEN:
            return list(BISHOP_DIRECTIONS + ROOK_DIRECTIONS)
        if kind in (PieceType.NONE, PieceType.KING, PieceType.PAWN, PieceType.KNIGHT):
            return []
        raise ValueError(f"unknown piece kind: {kind!r}")


EMPTY = Piece()
