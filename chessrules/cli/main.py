from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

import uvicorn

from ..engine.board import STARTPOS_FEN
from ..engine.errors import ReplayError
from ..engine.game import Game
from ..engine.render import render
from ..eval import MaterialMobilityEvaluator


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="chessrules", description="Chess rules engine")
    parser.add_argument(
        "--log-level", default="INFO", help="Logging level name (default: INFO)"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="0.0.0.0", help="Bind address (default: 0.0.0.0)")
    serve.add_argument("--port", type=int, default=8000, help="Port (default: 8000)")

    replay = sub.add_parser("replay", help="Replay a game and print the final board")
    source = replay.add_mutually_exclusive_group(required=True)
    source.add_argument("--pgn", help="Movetext, e.g. '1.e4 e5 2.Nf3'")
    source.add_argument("--file", help="Path to a file holding the movetext")
    replay.add_argument(
        "--fen", default=STARTPOS_FEN, help="Starting layout (default: standard position)"
    )
    replay.add_argument(
        "--visualize", action="store_true", help="Log every ply with the board (DEBUG)"
    )
    return parser


def run_replay(args: argparse.Namespace) -> int:
    if args.file:
        with open(args.file, "r", encoding="utf-8") as f:
            movetext = f.read()
    else:
        movetext = args.pgn
    game = Game.from_fen(args.fen)
    try:
        plies = game.replay(movetext, visualize=args.visualize)
    except ReplayError as e:
        print(render(game.board))
        print(f"error: {e}", file=sys.stderr)
        return 1
    print(render(game.board))
    print(f"plies={plies} eval={MaterialMobilityEvaluator().evaluate(game.board):.1f}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    level = logging.DEBUG if getattr(args, "visualize", False) else args.log_level.upper()
    logging.basicConfig(level=level)

    if args.command == "serve":
        uvicorn.run(
            "chessrules.protocol.http.app:create_app",
            factory=True,
            host=args.host,
            port=args.port,
            log_level=args.log_level.lower(),
        )
        return 0
    return run_replay(args)


if __name__ == "__main__":
    sys.exit(main())
