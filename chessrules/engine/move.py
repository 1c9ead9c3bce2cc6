from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from .errors import IllegalMoveError, MoveError
from .piece import PieceType


# Index used for an absent endpoint: (sq, OUT) removes a piece, (OUT, OUT) is no-op.
OUT_OF_BOARD = 64

PROMOTION_PIECES: Dict[str, PieceType] = {
    "q": PieceType.QUEEN,
    "r": PieceType.ROOK,
    "b": PieceType.BISHOP,
    "n": PieceType.KNIGHT,
}


@dataclass(frozen=True)
class Transition:
    """Atomic board change.

    Attributes:
        from_sq (int): Origin square index (0-based) or ``OUT_OF_BOARD``.
        to_sq (int): Destination square index or ``OUT_OF_BOARD`` for a removal.
        promotion (PieceType): Kind the moving pawn turns into, ``NONE`` otherwise.
    """

    from_sq: int = OUT_OF_BOARD
    to_sq: int = OUT_OF_BOARD
    promotion: PieceType = PieceType.NONE

    def is_none(self) -> bool:
        return self.from_sq == OUT_OF_BOARD and self.to_sq == OUT_OF_BOARD

    def is_removal(self) -> bool:
        return self.from_sq != OUT_OF_BOARD and self.to_sq == OUT_OF_BOARD

    def to_coordinate(self) -> str:
        """Serialize into coordinate notation such as ``"e2e4"`` or ``"e7e8q"``.

        Removals render as the origin square only.
        """
        if self.is_none():
            return ""
        if self.is_removal():
            return square_to_str(self.from_sq)
        promo = ""
        if self.promotion is not PieceType.NONE:
            promo = next(ch for ch, kind in PROMOTION_PIECES.items() if kind is self.promotion)
        return square_to_str(self.from_sq) + square_to_str(self.to_sq) + promo


NO_TRANSITION = Transition()


def parse_coordinate(text: str) -> Transition:
    """Parse coordinate notation (origin square + destination square).

    Args:
        text (str): Move such as ``"e2e4"``, optionally followed by a
            promotion letter (``"e7e8q"``).

    Returns:
        Transition: Parsed transition.

    Raises:
        IllegalMoveError: With ``MoveError.INVALID_NOTATION`` if the length,
            squares, or promotion piece are invalid.
    """
    text = text.strip()
    if len(text) not in (4, 5):
        raise IllegalMoveError(MoveError.INVALID_NOTATION, text)
    try:
        from_sq = str_to_square(text[0:2])
        to_sq = str_to_square(text[2:4])
    except ValueError:
        raise IllegalMoveError(MoveError.INVALID_NOTATION, text) from None
    promotion = PieceType.NONE
    if len(text) == 5:
        kind = PROMOTION_PIECES.get(text[4].lower())
        if kind is None:
            raise IllegalMoveError(MoveError.INVALID_NOTATION, text)
        promotion = kind
    return Transition(from_sq, to_sq, promotion)


def str_to_square(s: str) -> int:
    """Convert a square name such as ``"e4"`` into a 0-based index.

    Raises:
        ValueError: If ``s`` is not a valid square.
    """
    if len(s) != 2 or s[0] < "a" or s[0] > "h" or s[1] < "1" or s[1] > "8":
        raise ValueError(f"invalid square: {s!r}")
    file = ord(s[0]) - ord("a")
    rank = int(s[1]) - 1
    return rank * 8 + file


def square_to_str(idx: int) -> str:
    """Convert a 0-based square index into its name.

    Raises:
        ValueError: If ``idx`` is outside 0..63.
    """
    if idx < 0 or idx > 63:
        raise ValueError(f"invalid square index: {idx}")
    return chr(ord("a") + idx % 8) + str(idx // 8 + 1)
