from __future__ import annotations

import pytest

from chessrules.engine.board import Board, castle_side
from chessrules.engine.errors import IllegalMoveError, MoveError
from chessrules.engine.move import Transition, str_to_square
from chessrules.engine.piece import Color, PieceType


def _sq(name: str) -> int:
    return str_to_square(name)


def test_pawn_push_has_single_candidate() -> None:
    b = Board.default()
    assert b.translate_move("e4") == [Transition(_sq("e2"), _sq("e4"))]


def test_knight_move_lists_every_knight() -> None:
    b = Board.default()
    assert b.translate_move("Nf3") == [
        Transition(_sq("b1"), _sq("f3")),
        Transition(_sq("g1"), _sq("f3")),
    ]


def test_check_and_capture_markers_are_ignored() -> None:
    b = Board.default()
    assert b.translate_move("Nxf3+") == b.translate_move("Nf3")
    assert b.translate_move("Nf3#") == b.translate_move("Nf3")
    assert b.translate_move("Nf3!?") == b.translate_move("Nf3")


def test_pawn_capture_uses_origin_file() -> None:
    b = Board.default()
    assert b.translate_move("exd3") == [Transition(_sq("e2"), _sq("d3"))]


def test_castling_tokens_for_side_to_move() -> None:
    b = Board.default()
    assert b.translate_move("O-O") == [Transition(4, 6), Transition(7, 5)]
    assert b.translate_move("0-0-0") == [Transition(4, 2), Transition(0, 3)]
    b.swap_color_to_move()
    assert b.translate_move("O-O") == [Transition(60, 62), Transition(63, 61)]
    assert b.translate_move("O-O-O+") == [Transition(60, 58), Transition(56, 59)]


def test_castle_side() -> None:
    assert castle_side("O-O") == "O-O"
    assert castle_side("O-O-O#") == "O-O-O"
    assert castle_side("Ke2") is None


def test_disambiguation_hints() -> None:
    b = Board("4k3/8/8/8/8/8/8/R3K2R")
    assert b.translate_move("Rad1") == [Transition(_sq("a1"), _sq("d1"))]
    assert b.translate_move("Rhf1") == [Transition(_sq("h1"), _sq("f1"))]
    b.read_fen("4k3/8/8/8/R7/8/8/R3K3")
    assert b.translate_move("R1a3") == [Transition(_sq("a1"), _sq("a3"))]
    assert b.translate_move("R4a3") == [Transition(_sq("a4"), _sq("a3"))]
    assert b.translate_move("Ra1a2") == [Transition(_sq("a1"), _sq("a2"))]


def test_find_piece_places() -> None:
    b = Board.default()
    assert b.find_piece_places(PieceType.ROOK, Color.BLACK) == [_sq("a8"), _sq("h8")]
    assert b.find_piece_places(PieceType.KNIGHT, Color.WHITE, "g") == [_sq("g1")]
    assert b.find_piece_places(PieceType.QUEEN, Color.WHITE, "8") == []


def test_find_pawn_places_only_for_side_to_move() -> None:
    b = Board("4k3/4p3/8/8/8/4P3/4P3/4K3")
    assert b.find_pawn_places("e") == [_sq("e2"), _sq("e3")]
    b.swap_color_to_move()
    assert b.find_pawn_places("e") == [_sq("e7")]
    assert b.find_pawn_places("a") == []


def test_promotion_suffix() -> None:
    b = Board("7k/P7/8/8/8/8/8/K7")
    assert b.translate_move("a8=N") == [Transition(_sq("a7"), _sq("a8"), PieceType.KNIGHT)]
    assert b.translate_move("a8") == [Transition(_sq("a7"), _sq("a8"))]


@pytest.mark.parametrize(
    "token, reason",
    [
        ("Zf3", MoveError.INVALID_PIECE),
        ("a8=X", MoveError.INVALID_PIECE),
        ("e9", MoveError.INVALID_MOVE),
        ("Nz3", MoveError.INVALID_MOVE),
        ("K", MoveError.INVALID_MOVE),
        ("", MoveError.INVALID_MOVE),
        ("Na9c3", MoveError.INVALID_MOVE),
    ],
)
def test_untranslatable_tokens(token: str, reason: MoveError) -> None:
    b = Board.default()
    with pytest.raises(IllegalMoveError) as exc:
        b.translate_move(token)
    assert exc.value.reason is reason
    assert exc.value.move == token


def test_pgn_move_picks_first_legal_candidate() -> None:
    b = Board.default()
    b.make_pgn_move("Nf3")
    assert b.piece_at(_sq("f3")).kind is PieceType.KNIGHT
    assert b.piece_at(_sq("g1")).is_none()
    assert b.piece_at(_sq("b1")).kind is PieceType.KNIGHT
    assert b.color_to_move is Color.BLACK


def test_pgn_move_without_legal_candidate() -> None:
    b = Board.default()
    with pytest.raises(IllegalMoveError) as exc:
        b.make_pgn_move("Nd4")
    assert exc.value.reason is MoveError.INVALID_MOVE
    assert b.to_fen() == Board.default().to_fen()


def test_coordinate_notation_errors() -> None:
    b = Board.default()
    for text in ("e2", "e2e9", "i2e4", "e7e8k", "e2e4e5"):
        with pytest.raises(IllegalMoveError) as exc:
            b.make_coordinate_move(text)
        assert exc.value.reason is MoveError.INVALID_NOTATION
