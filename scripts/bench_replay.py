#!/usr/bin/env python3
# ruff: noqa: E402
from __future__ import annotations

import argparse
import os
import sys
import time

# Allow running this script directly via `python scripts/bench_replay.py`
# by adding the repo root (which contains `chessrules/`) to sys.path.
REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from chessrules.assets.games import GAMES
from chessrules.engine.game import replay
from chessrules.eval import MaterialMobilityEvaluator


def main() -> None:
    parser = argparse.ArgumentParser(description="Time game replays and evaluation")
    parser.add_argument(
        "--game", choices=sorted(GAMES), default="scandinavian", help="Reference game"
    )
    parser.add_argument("--repeat", type=int, default=20, help="Replays to time (default: 20)")
    parser.add_argument(
        "--evals", type=int, default=100, help="Evaluations of the final position (default: 100)"
    )
    args = parser.parse_args()

    movetext = GAMES[args.game]
    start = time.perf_counter()
    for _ in range(max(args.repeat, 1)):
        game = replay(movetext)
    replay_dt = time.perf_counter() - start

    evaluator = MaterialMobilityEvaluator()
    score = 0.0
    start = time.perf_counter()
    for _ in range(args.evals):
        score = evaluator.evaluate(game.board)
    eval_dt = time.perf_counter() - start

    plies = len(game.move_history)
    print(
        f"game={args.game} plies={plies} "
        f"replay_ms={int(replay_dt * 1000 / max(args.repeat, 1))} "
        f"eval_us={int(eval_dt * 1e6 / max(args.evals, 1))} score={score:.1f}"
    )


if __name__ == "__main__":
    main()
