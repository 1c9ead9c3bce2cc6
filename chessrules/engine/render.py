from __future__ import annotations

from typing import List

from .board import Board


def render(board: Board) -> str:
    """Draw the board as text, rank 8 at the top, ``x`` for empty squares.

    Example (start position)::

        8|rnbqkbnr
        7|pppppppp
        ...
        1|RNBQKBNR
          --------
          abcdefgh
    """
    lines: List[str] = []
    for rank in range(7, -1, -1):
        row = "".join(board.piece_at(rank * 8 + file).visualize() for file in range(8))
        lines.append(f"{rank + 1}|{row}")
    lines.append("  --------")
    lines.append("  abcdefgh")
    return "\n".join(lines)
