from __future__ import annotations

from typing import Dict, List

import pytest

from chessrules.assets.games import SCANDINAVIAN
from chessrules.engine.board import Board
from chessrules.engine.game import replay
from chessrules.engine.piece import EMPTY, Color, Piece, PieceType
from chessrules.eval import (
    MaterialMobilityEvaluator,
    SimpleEvaluator,
    count_blocked_pawns,
    count_doubled_pawns,
    count_isolated_pawns,
    count_mobility,
    evaluate,
    simple_eval,
)


def _pawns(placement: Dict[int, Color]) -> List[Piece]:
    squares = [EMPTY] * 64
    for sq, color in placement.items():
        squares[sq] = Piece(PieceType.PAWN, color)
    return squares


def test_isolated_pawns() -> None:
    w = Color.WHITE
    assert count_isolated_pawns(_pawns({1: w, 13: w, 5: w, 6: w})) == (1, 0)
    assert count_isolated_pawns(_pawns({1: w, 17: w, 14: w, 6: w, 3: w, 4: w})) == (4, 0)


def test_isolated_pawns_on_edge_files() -> None:
    squares = _pawns({8: Color.WHITE, 15: Color.WHITE, 48: Color.BLACK, 49: Color.BLACK})
    assert count_isolated_pawns(squares) == (2, 0)


def test_doubled_pawns() -> None:
    w = Color.WHITE
    assert count_doubled_pawns(_pawns({1: w, 17: w, 14: w, 6: w, 3: w, 4: w})) == (4, 0)


def test_blocked_pawns() -> None:
    squares = _pawns({1: Color.WHITE, 17: Color.WHITE, 9: Color.BLACK, 25: Color.BLACK})
    assert count_blocked_pawns(squares) == (2, 2)


def test_blocked_pawns_on_last_rank_do_not_overflow() -> None:
    squares = _pawns({60: Color.WHITE, 3: Color.BLACK})
    assert count_blocked_pawns(squares) == (0, 0)


def test_simple_eval() -> None:
    assert simple_eval(Board.default().squares) == 0.0
    assert simple_eval(Board("4k3/8/8/8/8/8/8/Q3K3").squares) == 9.0
    assert simple_eval(Board("4k3/rr6/8/8/8/8/8/4K3").squares) == -10.0


def test_mobility_counts_legal_moves() -> None:
    b = Board.default()
    assert count_mobility(b, Color.WHITE) == 20
    assert count_mobility(b, Color.BLACK) == 20

    b.read_fen("4k3/8/8/8/8/8/8/R3K3")
    assert count_mobility(b, Color.WHITE) == 15
    assert count_mobility(b, Color.BLACK) == 5


def test_start_position_is_balanced() -> None:
    assert evaluate(Board.default()) == pytest.approx(0.0)
    assert SimpleEvaluator().evaluate(Board.default()) == 0.0


def test_material_and_mobility() -> None:
    b = Board("4k3/8/8/8/8/8/8/R3K3")
    assert MaterialMobilityEvaluator().evaluate(b) == pytest.approx(6.0)


def test_bad_pawns_penalise_the_side_that_has_them() -> None:
    b = Board("4k3/8/8/8/8/P7/P7/4K3")
    m = MaterialMobilityEvaluator()
    # two doubled and two isolated white pawns, one of them blocked
    assert m.eval_bad_pawns(b.squares) == pytest.approx(2.5)
    b.read_fen("4k3/p7/p7/8/8/8/8/4K3")
    assert m.eval_bad_pawns(b.squares) == pytest.approx(-2.5)


def test_evaluation_does_not_touch_the_board() -> None:
    game = replay(SCANDINAVIAN)
    before = game.board.to_fen()
    score = evaluate(game.board)
    assert isinstance(score, float)
    assert game.board.to_fen() == before
    assert game.side_to_move is Color.BLACK
