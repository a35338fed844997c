"""Game session management for networked play.

Each request is a read-modify-write against the GameStore: load the
current snapshot and its version, apply one move through the engine, and
write back against that version. Session tokens tie a request to a seat.
"""

import logging
import uuid
from dataclasses import dataclass, field

from fastapi import WebSocket

from ..agent.turn_driver import execute_ai_turn
from ..engine import actions, setup
from ..engine.abilities import SkillOptions
from ..engine.board import Placement
from ..engine.core import advance_turn, apply_skill, process_shot
from ..engine.errors import IllegalMoveError, SkillError
from ..engine.turns import continue_turn
from ..models.cell import Coord
from ..models.game import GameMode, GamePhase, GameState, MapType, OpponentType
from ..models.ship import ShipType
from ..utils.rng import GameRNG
from ..utils.serialization import player_view
from .schemas.requests import MoveRequest
from .store import GameStore, InMemoryGameStore, StoredGame

logger = logging.getLogger(__name__)


class GameNotFoundError(Exception):
    """No game with the requested id."""


class UnauthorizedError(Exception):
    """The session token does not match the seat."""


@dataclass
class GameSession:
    """Connection and authorization data for one game.

    The game state itself lives in the store; a session only knows who may
    act for which seat and which WebSockets are listening.
    """

    id: str
    tokens: dict[str, str] = field(default_factory=dict)  # Player ID -> session token
    connections: list[tuple[WebSocket, str]] = field(default_factory=list)  # (socket, viewer ID)

    async def broadcast(self, message: dict):
        """Send message to all connected WebSocket clients.

        Args:
            message: Dictionary to send as JSON
        """
        disconnected = []
        for ws, viewer in self.connections:
            try:
                await ws.send_json(message)
            except Exception as e:
                logger.warning(f"Failed to send to WebSocket: {e}")
                disconnected.append((ws, viewer))

        for conn in disconnected:
            self.connections.remove(conn)

    async def broadcast_state(self, state: GameState, version: int):
        """Send each connected client the game as seen from its own seat."""
        disconnected = []
        for ws, viewer in self.connections:
            try:
                await ws.send_json(
                    {"type": "GAME_STATE", "version": version, "state": player_view(state, viewer)}
                )
            except Exception as e:
                logger.warning(f"Failed to send to WebSocket: {e}")
                disconnected.append((ws, viewer))

        for conn in disconnected:
            self.connections.remove(conn)

    def add_connection(self, websocket: WebSocket, viewer_id: str):
        """Add a WebSocket connection to this session."""
        self.connections.append((websocket, viewer_id))
        logger.info(f"WebSocket connected to game {self.id}, total: {len(self.connections)}")

    def remove_connection(self, websocket: WebSocket):
        """Remove a WebSocket connection from this session."""
        self.connections = [(ws, v) for ws, v in self.connections if ws is not websocket]
        logger.info(f"WebSocket disconnected from game {self.id}, remaining: {len(self.connections)}")


class GameSessionManager:
    """Manages all active games on top of a GameStore."""

    def __init__(self, store: GameStore | None = None, ai_delay: float = 0.0, seed: int | None = None):
        self.store = store if store is not None else InMemoryGameStore()
        self.sessions: dict[str, GameSession] = {}
        self.ai_delay = ai_delay
        self.rng = GameRNG(seed)

    # ============================================
    # LIFECYCLE
    # ============================================

    def create_game(
        self,
        mode: GameMode,
        map_type: MapType,
        opponent_type: OpponentType,
        player_name: str,
        opponent_name: str | None = None,
        seed: int | None = None,
    ) -> tuple[StoredGame, str, str]:
        """Create a game and seat its creator.

        Hot-seat games share one device, so the creator's token is valid for
        both seats.

        Returns:
            Tuple of (stored game, creator's player ID, session token)
        """
        rng = GameRNG(seed) if seed is not None else self.rng
        state = setup.create_game(mode, map_type, opponent_type, player_name, opponent_name, rng=rng)
        version = self.store.put(state.game_id, state, 0)

        token = uuid.uuid4().hex
        session = GameSession(id=state.game_id)
        host_id = state.players[0].id
        session.tokens[host_id] = token
        if state.opponent_type == OpponentType.HUMAN:
            session.tokens[state.players[1].id] = token
        self.sessions[state.game_id] = session

        logger.info(f"Created game {state.game_id} for {player_name} ({opponent_type.value})")
        return StoredGame(state=state, version=version), host_id, token

    def join_game(self, game_id: str, player_name: str) -> tuple[StoredGame, str, str]:
        """Seat a second player in an online game.

        Raises:
            GameNotFoundError: If the game does not exist
            IllegalMoveError: If the game is not accepting players
        """
        stored = self.get(game_id)
        state, player_id = setup.join_game(stored.state, player_name)
        version = self.store.put(game_id, state, stored.version)

        token = uuid.uuid4().hex
        self.sessions[game_id].tokens[player_id] = token
        return StoredGame(state=state, version=version), player_id, token

    def get(self, game_id: str) -> StoredGame:
        stored = self.store.get(game_id)
        if stored is None or game_id not in self.sessions:
            raise GameNotFoundError(game_id)
        return stored

    def authorize(self, game_id: str, player_id: str, token: str) -> GameSession:
        """Check a seat's session token.

        Raises:
            GameNotFoundError: If the game does not exist
            UnauthorizedError: If the token does not match
        """
        session = self.sessions.get(game_id)
        if session is None:
            raise GameNotFoundError(game_id)
        if session.tokens.get(player_id) != token:
            raise UnauthorizedError(f"Invalid session for {player_id} in {game_id}")
        return session

    def view(self, game_id: str, player_id: str, token: str) -> tuple[StoredGame, dict]:
        self.authorize(game_id, player_id, token)
        stored = self.get(game_id)
        return stored, player_view(stored.state, player_id)

    def delete(self, game_id: str) -> bool:
        """Delete a game and its session.

        Returns:
            True if deleted, False if not found
        """
        self.sessions.pop(game_id, None)
        if self.store.delete(game_id):
            logger.info(f"Deleted game {game_id}")
            return True
        return False

    async def cleanup_all(self):
        """Clean up all sessions (called on shutdown)."""
        logger.info(f"Cleaning up {len(self.sessions)} game sessions")
        for game_id in list(self.sessions):
            self.delete(game_id)

    # ============================================
    # MOVES
    # ============================================

    async def apply_move(self, game_id: str, move: MoveRequest) -> tuple[StoredGame, bool]:
        """Apply one typed move for an authorized seat.

        Ending a turn against the AI plays out the AI's reply before
        returning.

        Returns:
            Tuple of (latest stored game, whether the move changed the game)

        Raises:
            GameNotFoundError: If the game does not exist
            UnauthorizedError: If the token does not match the seat
            IllegalMoveError: If the engine rejects the move
            StaleStateError: If another request updated the game first
        """
        session = self.authorize(game_id, move.playerId, move.token)
        stored = self.get(game_id)

        new_state = self._dispatch(stored.state, move)
        if new_state is stored.state:
            return stored, False

        version = self.store.put(game_id, new_state, stored.version)
        stored = StoredGame(state=new_state, version=version)
        await session.broadcast_state(new_state, version)
        logger.info(f"Game {game_id}: {move.playerId} {move.type} -> {new_state.phase.value}")

        if self._ai_to_move(new_state):
            stored = await self.run_ai_turn(game_id)
        return stored, True

    def _ai_to_move(self, state: GameState) -> bool:
        current = state.current_player
        return state.phase == GamePhase.PLAYING and current is not None and current.is_ai

    def _dispatch(self, state: GameState, move: MoveRequest) -> GameState:
        player_id = move.playerId
        kind = move.type

        if kind == "fleetReady":
            return setup.submit_fleet(state, player_id, [ShipType(t) for t in move.shipTypes or []], self.rng)
        if kind == "acknowledgeAiFleet":
            return setup.acknowledge_ai_fleet(state)
        if kind == "setupReady":
            placements = {
                p.shipName: Placement(p.x, p.y, p.horizontal) for p in move.placements or []
            }
            return setup.submit_placement(state, player_id, placements, self.rng)
        if kind == "transitionContinue":
            self._require_current(state, player_id)
            return continue_turn(state)

        if state.phase != GamePhase.PLAYING:
            raise IllegalMoveError(f"Game is in {state.phase.value}, not PLAYING.")
        self._require_current(state, player_id)

        if kind == "fireShot":
            opponent = state.opponent_of(player_id)
            return process_shot(state, opponent.id, self._x(move), self._y(move))
        if kind == "useSkill":
            result = apply_skill(state, player_id, self._ship_type(move), self._skill_options(move))
            return self._unwrap(result)
        if kind == "beginAction":
            ship_type = ShipType(move.shipType) if move.shipType else None
            return self._unwrap(actions.begin_action(state, player_id, ship_type))
        if kind == "selectTarget":
            coord = Coord(self._x(move), self._y(move))
            return self._unwrap(actions.select_target(state, coord, player_id))
        if kind == "selectShip":
            return self._unwrap(actions.select_ship(state, move.shipName or "", player_id))
        if kind == "rotatePlacement":
            return actions.rotate_placement(state)
        if kind == "cancelAction":
            return actions.cancel_action(state)
        if kind == "endTurn":
            return advance_turn(state)
        raise IllegalMoveError(f"Unknown move type: {kind}")

    @staticmethod
    def _require_current(state: GameState, player_id: str) -> None:
        if state.current_player_id != player_id:
            raise IllegalMoveError("It's not your turn.")

    @staticmethod
    def _unwrap(result: GameState | SkillError) -> GameState:
        if isinstance(result, SkillError):
            raise IllegalMoveError(result.error)
        return result

    @staticmethod
    def _x(move: MoveRequest) -> int:
        if move.x is None or move.y is None:
            raise IllegalMoveError("This move needs x and y.")
        return move.x

    @staticmethod
    def _y(move: MoveRequest) -> int:
        if move.x is None or move.y is None:
            raise IllegalMoveError("This move needs x and y.")
        return move.y

    @staticmethod
    def _ship_type(move: MoveRequest) -> ShipType:
        if not move.shipType:
            raise IllegalMoveError("This move needs a shipType.")
        return ShipType(move.shipType)

    @staticmethod
    def _skill_options(move: MoveRequest) -> SkillOptions:
        coord = Coord(move.x, move.y) if move.x is not None and move.y is not None else None
        return SkillOptions(
            coord=coord,
            targets=tuple(Coord(t.x, t.y) for t in move.targets or []),
            horizontal=move.horizontal,
            ship_name=move.shipName,
        )

    # ============================================
    # AI
    # ============================================

    async def run_ai_turn(self, game_id: str) -> StoredGame:
        """Play out the AI's turn, storing and broadcasting every action.

        Unless the game ended, the turn is then handed back to the human.
        """
        session = self.sessions[game_id]
        stored = self.get(game_id)
        version = stored.version

        await session.broadcast({"type": "AI_THINKING"})

        async def on_action(snapshot: GameState):
            nonlocal version
            version = self.store.put(game_id, snapshot, version)
            await session.broadcast_state(snapshot, version)

        final = await execute_ai_turn(stored.state, on_action, delay=self.ai_delay, rng=self.rng)
        if final.phase == GamePhase.PLAYING:
            final = advance_turn(final)
            version = self.store.put(game_id, final, version)
            await session.broadcast_state(final, version)

        logger.info(f"Game {game_id}: AI turn complete, phase {final.phase.value}")
        return StoredGame(state=final, version=version)
