"""Position evaluators.

Scores are positive when white is better. Evaluators only read the board and
reuse ``Board.validate_move`` on scratch copies; they never change the board
they are given.
"""

from __future__ import annotations

from typing import Dict, Final, Protocol, Sequence, Tuple

from chessrules.engine.board import Board
from chessrules.engine.errors import IllegalMoveError
from chessrules.engine.piece import Color, Piece, PieceType


PAWN_EVAL_MODIFIER: Final = 0.5
MOBILITY_EVAL_MODIFIER: Final = 0.1


def simple_eval(squares: Sequence[Piece]) -> float:
    """Material balance: sum of piece points, white positive."""
    total = 0
    for p in squares:
        if p.is_none():
            continue
        total += p.kind.points if p.color is Color.WHITE else -p.kind.points
    return float(total)


def pawns_per_file(squares: Sequence[Piece]) -> Dict[Color, Dict[int, int]]:
    """Map each color to ``{file: pawn count}`` (files 0..7)."""
    files: Dict[Color, Dict[int, int]] = {Color.WHITE: {}, Color.BLACK: {}}
    for idx, p in enumerate(squares):
        if p.kind is PieceType.PAWN and p.color in files:
            counts = files[p.color]
            counts[idx % 8] = counts.get(idx % 8, 0) + 1
    return files


def count_doubled_pawns(squares: Sequence[Piece]) -> Tuple[int, int]:
    """Pawns sharing a file with another pawn of their color, as (white, black).

    e.g. 3 pawns on b, 1 on c, 1 on d, 2 on e -> 5
    """
    files = pawns_per_file(squares)
    return (
        sum(n for n in files[Color.WHITE].values() if n > 1),
        sum(n for n in files[Color.BLACK].values() if n > 1),
    )


def count_isolated_pawns(squares: Sequence[Piece]) -> Tuple[int, int]:
    """Pawns with no friendly pawn on an adjacent file, as (white, black)."""

    def per_color(counts: Dict[int, int]) -> int:
        isolated = 0
        for file, n in counts.items():
            if n and not counts.get(file - 1) and not counts.get(file + 1):
                isolated += n
        return isolated

    files = pawns_per_file(squares)
    return per_color(files[Color.WHITE]), per_color(files[Color.BLACK])


def count_blocked_pawns(squares: Sequence[Piece]) -> Tuple[int, int]:
    """Pawns whose square ahead is occupied, as (white, black)."""
    white = black = 0
    for idx, p in enumerate(squares):
        if p.kind is not PieceType.PAWN:
            continue
        ahead = idx + 8 * p.color.direction
        if not 0 <= ahead < 64 or squares[ahead].is_none():
            continue
        if p.color is Color.WHITE:
            white += 1
        elif p.color is Color.BLACK:
            black += 1
    return white, black


def count_mobility(board: Board, color: Color) -> int:
    """Number of legal (origin, destination) pairs for ``color``'s pieces."""
    scratch = board.copy()
    scratch.color_to_move = color
    moves = 0
    for idx, p in enumerate(scratch.squares):
        if p.is_none() or p.color is not color:
            continue
        for offset in p.get_moves(idx):
            try:
                scratch.validate_move(idx, idx + offset)
            except IllegalMoveError:
                continue
            moves += 1
    return moves


class Evaluator(Protocol):
    def evaluate(self, board: Board) -> float: ...


class SimpleEvaluator:
    """Material only."""

    def evaluate(self, board: Board) -> float:
        return simple_eval(board.squares)


class MaterialMobilityEvaluator:
    """Material, pawn structure and mobility.

    f(p) = 200(K-K') + 9(Q-Q') + 5(R-R') + 3(B-B' + N-N') + 1(P-P')
           - 0.5(D-D' + S-S' + I-I')
           + 0.1(M-M')

    D, S, I are doubled, blocked and isolated pawns, M is the number of legal
    moves.
    """

    def evaluate(self, board: Board) -> float:
        squares = board.squares
        return simple_eval(squares) - self.eval_bad_pawns(squares) + self.eval_mobility(board)

    def eval_bad_pawns(self, squares: Sequence[Piece]) -> float:
        d = count_doubled_pawns(squares)
        s = count_blocked_pawns(squares)
        i = count_isolated_pawns(squares)
        return ((d[0] + s[0] + i[0]) - (d[1] + s[1] + i[1])) * PAWN_EVAL_MODIFIER

    def eval_mobility(self, board: Board) -> float:
        white = count_mobility(board, Color.WHITE)
        black = count_mobility(board, Color.BLACK)
        return (white - black) * MOBILITY_EVAL_MODIFIER


def evaluate(board: Board) -> float:
    """Material + mobility score of ``board``."""
    return MaterialMobilityEvaluator().evaluate(board)
