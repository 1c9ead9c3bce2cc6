from __future__ import annotations

from pathlib import Path

import pytest

from chessrules.cli.main import build_parser, main


def test_parser_requires_a_command() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_parser_replay_sources_are_exclusive() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args(["replay", "--pgn", "1.e4", "--file", "x.pgn"])


def test_replay_prints_board_and_eval(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["replay", "--pgn", "1.e4 d5 2.exd5"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[0] == "8|rnbqkbnr"
    assert out[3] == "5|xxxPxxxx"
    assert out[-1].startswith("plies=3 eval=")


def test_replay_from_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    pgn = tmp_path / "game.pgn"
    pgn.write_text("1. e4 e5 2. Nf3 Nc6 *\n", encoding="utf-8")
    assert main(["replay", "--file", str(pgn)]) == 0
    assert "plies=4" in capsys.readouterr().out


def test_replay_failure_exits_non_zero(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["replay", "--pgn", "1.e4 e5 2.Ke3"]) == 1
    captured = capsys.readouterr()
    assert "ply 3 (Ke3): invalid move" in captured.err
    assert captured.out.splitlines()[0] == "8|rnbqkbnr"


def test_replay_from_custom_layout(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["replay", "--fen", "7k/P7/8/8/8/8/8/K7", "--pgn", "1.a8=N"]) == 0
    assert capsys.readouterr().out.splitlines()[0] == "8|Nxxxxxxk"
