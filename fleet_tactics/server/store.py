"""Game persistence port.

Request handlers read a game, apply one move and write it back. The store
assigns a version to every write and rejects a write made against a stale
version, so two racing requests cannot silently overwrite each other.
"""

import logging
from dataclasses import dataclass
from typing import Protocol

from ..models.game import GameState

logger = logging.getLogger(__name__)


class StaleStateError(Exception):
    """Raised when a write is based on a version that is no longer current."""

    def __init__(self, game_id: str, expected: int, actual: int):
        super().__init__(f"Game {game_id} is at version {actual}, write expected {expected}")
        self.game_id = game_id
        self.expected = expected
        self.actual = actual


@dataclass(frozen=True)
class StoredGame:
    """A game snapshot together with the version it was stored under."""

    state: GameState
    version: int


class GameStore(Protocol):
    """get-by-id / put-by-id with optimistic concurrency."""

    def get(self, game_id: str) -> StoredGame | None: ...

    def put(self, game_id: str, state: GameState, expected_version: int) -> int:
        """Store a snapshot.

        Args:
            game_id: Game identifier
            state: Snapshot to store
            expected_version: Version the write is based on (0 for a new game)

        Returns:
            The new version

        Raises:
            StaleStateError: If the stored version differs from expected_version
        """
        ...

    def delete(self, game_id: str) -> bool: ...

    def __len__(self) -> int: ...


class InMemoryGameStore:
    """Dict-backed GameStore for a single server process.

    Snapshots are never mutated by the engine, so they are stored as-is.
    """

    def __init__(self):
        self._games: dict[str, StoredGame] = {}

    def get(self, game_id: str) -> StoredGame | None:
        return self._games.get(game_id)

    def put(self, game_id: str, state: GameState, expected_version: int) -> int:
        current = self._games.get(game_id)
        actual = current.version if current else 0
        if actual != expected_version:
            logger.warning(f"Rejected stale write to {game_id}: expected v{expected_version}, at v{actual}")
            raise StaleStateError(game_id, expected_version, actual)
        version = actual + 1
        self._games[game_id] = StoredGame(state=state, version=version)
        return version

    def delete(self, game_id: str) -> bool:
        if game_id in self._games:
            del self._games[game_id]
            return True
        return False

    def clear(self) -> None:
        self._games.clear()

    def __len__(self) -> int:
        return len(self._games)
