from __future__ import annotations

import pytest

from chessrules.engine.board import Board
from chessrules.engine.errors import IllegalMoveError, MoveError
from chessrules.engine.move import str_to_square
from chessrules.engine.piece import Color, PieceType


def test_capture_promotion_to_queen() -> None:
    b = Board("6n1/7P/8/8/8/8/8/K6k")
    b.make_pgn_move("hxg8=Q")
    g8 = b.piece_at(str_to_square("g8"))
    assert g8.kind is PieceType.QUEEN
    assert g8.color is Color.WHITE
    assert b.piece_at(str_to_square("h7")).is_none()


@pytest.mark.parametrize(
    "token, kind",
    [
        ("a8=Q", PieceType.QUEEN),
        ("a8=R", PieceType.ROOK),
        ("a8=B", PieceType.BISHOP),
        ("a8=N", PieceType.KNIGHT),
        ("a8", PieceType.QUEEN),
    ],
)
def test_san_promotion_piece(token: str, kind: PieceType) -> None:
    b = Board("7k/P7/8/8/8/8/8/K7")
    b.make_pgn_move(token)
    assert b.piece_at(str_to_square("a8")).kind is kind


@pytest.mark.parametrize(
    "move, kind",
    [
        ("a7a8q", PieceType.QUEEN),
        ("a7a8r", PieceType.ROOK),
        ("a7a8n", PieceType.KNIGHT),
        ("a7a8", PieceType.QUEEN),
    ],
)
def test_coordinate_promotion_piece(move: str, kind: PieceType) -> None:
    b = Board("7k/P7/8/8/8/8/8/K7")
    b.make_coordinate_move(move)
    assert b.piece_at(str_to_square("a8")).kind is kind


def test_black_promotes_on_first_rank() -> None:
    b = Board("k7/8/8/8/8/8/7p/K7", Color.BLACK)
    b.make_pgn_move("h1=N")
    h1 = b.piece_at(str_to_square("h1"))
    assert h1.kind is PieceType.KNIGHT
    assert h1.color is Color.BLACK
    assert h1.has_moved


def test_promotion_letter_on_ordinary_move() -> None:
    b = Board.default()
    with pytest.raises(IllegalMoveError) as exc:
        b.make_coordinate_move("e2e4q")
    assert exc.value.reason is MoveError.IMPOSSIBLE_MOVE

    # SAN reports the candidate search as a whole
    with pytest.raises(IllegalMoveError) as exc:
        b.make_pgn_move("e4=Q")
    assert exc.value.reason is MoveError.INVALID_MOVE
    assert b.piece_at(str_to_square("e2")).kind is PieceType.PAWN
