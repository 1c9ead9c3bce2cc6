from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional

from chessrules.eval import simple_eval

from .board import Board, STARTPOS_FEN
from .errors import IllegalMoveError, ReplayError
from .piece import Color
from .render import render


logger = logging.getLogger(__name__)


RESULT_TOKENS = frozenset({"1-0", "0-1", "1/2-1/2", "*"})

_MOVE_NUMBER = re.compile(r"\d+\.(?:\.\.)?")
_COMMENT = re.compile(r"\{[^}]*\}|;[^\n]*")


def tokenize_movetext(movetext: str) -> List[str]:
    """Split PGN-like movetext into move tokens.

    Move numbers (``1.``, ``1...``, ``14.Rxh5#``), brace/semicolon comments,
    line breaks and game result markers are dropped.
    """
    text = _COMMENT.sub(" ", movetext)
    text = _MOVE_NUMBER.sub(" ", text)
    return [tok for tok in text.split() if tok not in RESULT_TOKENS]


@dataclass
class Game:
    """Game wrapper around a board with helper operations.

    Responsibility: track board state and applied moves, replay movetext.
    """

    board: Board
    move_history: List[str] = field(default_factory=list)

    @classmethod
    def new(cls) -> "Game":
        return cls(board=Board.default())

    @classmethod
    def from_fen(cls, fen: str) -> "Game":
        return cls(board=Board(fen))

    def copy(self) -> "Game":
        return Game(board=self.board.copy(), move_history=list(self.move_history))

    def to_fen(self) -> str:
        return self.board.to_fen()

    @property
    def side_to_move(self) -> Color:
        return self.board.color_to_move

    @property
    def last_move(self) -> Optional[str]:
        return self.move_history[-1] if self.move_history else None

    def in_check(self) -> bool:
        return self.board.is_check(self.board.color_to_move)

    def apply_san(self, token: str) -> None:
        self.board.make_pgn_move(token)
        self.move_history.append(token)

    def apply_coordinate(self, move: str) -> None:
        self.board.make_coordinate_move(move)
        self.move_history.append(move.strip())

    def replay(self, movetext: str, visualize: bool = False) -> int:
        """Apply every move of ``movetext`` in order.

        Args:
            movetext (str): Moves such as ``"1.e4 e5 2.Nf3 f6"``.
            visualize (bool): Log each ply with the material balance and the
                rendered board at DEBUG level.

        Returns:
            int: Number of half-moves applied.

        Raises:
            ReplayError: At the first move that cannot be played. Moves before
                it stay applied.
        """
        tokens = tokenize_movetext(movetext)
        logger.info("replaying %d half-moves", len(tokens))
        for ply, token in enumerate(tokens, start=1):
            try:
                self.apply_san(token)
            except IllegalMoveError as e:
                logger.warning("replay stopped at ply %d (%s): %s", ply, token, e.reason.value)
                raise ReplayError(e.reason, token=token, ply=ply) from e
            if visualize:
                logger.debug(
                    "making %s move, eval: %s\n%s",
                    token,
                    simple_eval(self.board.squares),
                    render(self.board),
                )
        return len(tokens)


def replay(movetext: str, fen: str = STARTPOS_FEN, visualize: bool = False) -> Game:
    """Replay ``movetext`` from ``fen`` (white to move) and return the game."""
    game = Game.from_fen(fen)
    game.replay(movetext, visualize=visualize)
    return game
