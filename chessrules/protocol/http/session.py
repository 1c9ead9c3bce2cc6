from __future__ import annotations

import threading
import uuid
from typing import Dict, List, Optional

from ...engine.game import Game


class InMemorySessionStore:
    """Thread-safe in-memory store of games keyed by ``game_id``.

    Games are replaced wholesale (``set``) rather than edited in place by
    callers that need all-or-nothing updates, e.g. a replay that may fail
    halfway through.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._games: Dict[str, Game] = {}

    def create(self, game: Optional[Game] = None) -> str:
        """Store ``game`` (a new game by default) and return its ``game_id``."""
        gid = uuid.uuid4().hex
        with self._lock:
            self._games[gid] = game if game is not None else Game.new()
        return gid

    def get(self, game_id: str) -> Optional[Game]:
        with self._lock:
            return self._games.get(game_id)

    def set(self, game_id: str, game: Game) -> None:
        with self._lock:
            if game_id not in self._games:
                raise KeyError(game_id)
            self._games[game_id] = game

    def delete(self, game_id: str) -> bool:
        """Remove a game; returns False if it did not exist."""
        with self._lock:
            return self._games.pop(game_id, None) is not None

    def ids(self) -> List[str]:
        with self._lock:
            return list(self._games)

    def __len__(self) -> int:
        with self._lock:
            return len(self._games)
