from __future__ import annotations

from enum import Enum
from typing import Optional


class MoveError(str, Enum):
    """Closed set of reasons a move can be refused."""

    INVALID_PIECE = "invalid piece"
    INVALID_MOVE = "invalid move"
    INVALID_CASTLE = "invalid castle"
    INVALID_NOTATION = "invalid notation"
    PRECONDITION = (
        "piece is none, position_to is occupied by the same color piece or it is not your move"
    )
    IMPOSSIBLE_MOVE = "that piece cannot make moves like that!"
    PAWN_BLOCKED = "pawn cannot move to occupied place"
    PAWN_DIAGONAL_EMPTY = "pawn can capture only diagonally onto a piece"
    INVALID_EN_PASSANT = "invalid en passant"
    BLOCKED = "your move is blocked"
    CHECK = "there will be check after a move"


class IllegalMoveError(ValueError):
    """A move was refused by the rules engine.

    Attributes:
        reason (MoveError): Failure kind; match on this rather than the message.
        move (Optional[str]): Notation the caller supplied, when there was one.
    """

    def __init__(self, reason: MoveError, move: Optional[str] = None) -> None:
        message = reason.value if move is None else f"{move}: {reason.value}"
        super().__init__(message)
        self.reason = reason
        self.move = move


class ReplayError(IllegalMoveError):
    """Game replay stopped at ``token`` (1-based half-move ``ply``)."""

    def __init__(self, reason: MoveError, token: str, ply: int) -> None:
        super().__init__(reason, token)
        self.token = token
        self.ply = ply

    def __str__(self) -> str:
        return f"ply {self.ply} ({self.token}): {self.reason.value}"
