"""Game lifecycle from lobby to the first shot.

Phases before play:
1. LOBBY (online games, until the second player joins)
2. FLEET_SELECTION (Tactical only): each player drafts a roster under the budget
3. AI_FLEET_SELECTION (vs AI): the AI's draft is shown before setup
4. SETUP: each player deploys their roster
5. PLAYING once every player is ready

How control passes between players during setup depends on the opponent:
HumanOpponent hands over through TURN_TRANSITION, AIOpponent answers
immediately on the AI's behalf.
"""

import logging
import uuid
from abc import ABC, abstractmethod

from ..models.catalog import game_config_for, spec_for_type
from ..models.cell import copy_grid, create_empty_grid
from ..models.game import GameMode, GamePhase, GameState, MapType, OpponentType
from ..models.player import Player
from ..models.ship import Ship, ShipType
from ..utils.constants import ASTEROID_COUNT
from ..utils.rng import GameRNG
from .board import Placement, place_fleet_strategically, place_ship, scatter_asteroids
from .errors import IllegalMoveError
from .rules import rules_for

logger = logging.getLogger(__name__)

PLAYER_IDS = ("p1", "p2")


# ============================================
# OPPONENT FLOW
# ============================================


class OpponentLogic(ABC):
    """How the game reacts when a player finishes drafting or deploying.

    Both hooks receive a state copy that already holds the submitting
    player's changes and may mutate it further.
    """

    @abstractmethod
    def handle_fleet_ready(self, state: GameState, player_id: str, rng: GameRNG) -> GameState:
        pass

    @abstractmethod
    def handle_setup_ready(self, state: GameState, player_id: str, rng: GameRNG) -> GameState:
        pass


class HumanOpponent(OpponentLogic):
    """Hot-seat and online play: control alternates between two humans."""

    def handle_fleet_ready(self, state, player_id, rng):
        return _hand_over(state, player_id)

    def handle_setup_ready(self, state, player_id, rng):
        return _hand_over(state, player_id)


def _hand_over(state: GameState, player_id: str) -> GameState:
    """Pass control to the other player; the first player moves once setup ends."""
    index = next(i for i, p in enumerate(state.players) if p.id == player_id)
    if index == 0:
        state.current_player_id = state.players[1].id
    else:
        state.current_player_id = state.players[0].id
    state.phase = GamePhase.TURN_TRANSITION
    return state


class AIOpponent(OpponentLogic):
    """The AI drafts right after the human and deploys when the human is ready."""

    def handle_fleet_ready(self, state, player_id, rng):
        from ..agent.fleet_selection import select_ai_fleet

        for ai in (p for p in state.players if p.is_ai and p.id != player_id):
            ai.ships = select_ai_fleet(state.ships_config, state.fleet_budget, rng)
        state.phase = GamePhase.AI_FLEET_SELECTION
        return state

    def handle_setup_ready(self, state, player_id, rng):
        for ai in (p for p in state.players if p.is_ai and not p.is_ready):
            ai.grid, ai.ships = place_fleet_strategically(ai.ships, ai.grid, state.dimensions, rng)
            ai.is_ready = True
        state.phase = GamePhase.PLAYING
        state.current_player_id = player_id  # The human always moves first
        logger.info(f"Game {state.game_id}: all fleets deployed, {player_id} to move")
        return state


_OPPONENTS: dict[OpponentType, OpponentLogic] = {
    OpponentType.AI: AIOpponent(),
    OpponentType.HUMAN: HumanOpponent(),
    OpponentType.ONLINE: HumanOpponent(),
}


def opponent_for(opponent_type: OpponentType) -> OpponentLogic:
    return _OPPONENTS[OpponentType(opponent_type)]


# ============================================
# LIFECYCLE
# ============================================


def create_game(
    mode: GameMode = GameMode.TACTICAL,
    map_type: MapType = MapType.STANDARD,
    opponent_type: OpponentType = OpponentType.AI,
    player_name: str = "Player 1",
    opponent_name: str | None = None,
    rng: GameRNG | None = None,
    game_id: str | None = None,
    player_is_ai: bool = False,
) -> GameState:
    """Create a new game.

    Both players start from the same map. Online games wait in LOBBY for
    the second player; other games go straight to fleet selection
    (Tactical) or setup (Classic, where the roster is fixed).

    Args:
        mode: CLASSIC or TACTICAL
        map_type: STANDARD or ASTEROID_FIELD
        opponent_type: AI, HUMAN (hot-seat) or ONLINE
        player_name: Display name of the first player
        opponent_name: Display name of the second player
        rng: Random source for the asteroid field
        game_id: Identifier to use instead of a generated one
        player_is_ai: Seat the AI as the first player too (AI-vs-AI matches)

    Returns:
        New GameState with rules and opponent logic attached
    """
    mode = GameMode(mode)
    map_type = MapType(map_type)
    opponent_type = OpponentType(opponent_type)
    rng = rng or GameRNG()
    rules = rules_for(mode)
    config = game_config_for(mode)
    dims = config.dimensions

    grid = create_empty_grid(dims.rows, dims.cols)
    if map_type == MapType.ASTEROID_FIELD:
        grid = scatter_asteroids(grid, ASTEROID_COUNT, rng)

    players = [rules.initialize_player(PLAYER_IDS[0], player_name, player_is_ai, copy_grid(grid))]
    if opponent_type != OpponentType.ONLINE:
        is_ai = opponent_type == OpponentType.AI
        default_name = "Computer" if is_ai else "Player 2"
        players.append(
            rules.initialize_player(PLAYER_IDS[1], opponent_name or default_name, is_ai, copy_grid(grid))
        )

    if opponent_type == OpponentType.ONLINE:
        phase = GamePhase.LOBBY
    else:
        phase = _drafting_phase(mode)

    state = GameState(
        game_id=game_id or f"game-{uuid.uuid4().hex[:8]}",
        phase=phase,
        players=players,
        current_player_id=players[0].id,
        game_mode=mode,
        map_type=map_type,
        opponent_type=opponent_type,
        dimensions=dims,
        ships_config=config.ships,
        fleet_budget=config.fleet_budget,
        rules=rules,
        opponent_logic=opponent_for(opponent_type),
    )
    _prepare_players(state)

    logger.info(
        f"Created game {state.game_id}: mode={mode.value}, map={map_type.value}, "
        f"opponent={opponent_type.value}, phase={phase.value}"
    )
    return state


def _drafting_phase(mode: GameMode) -> GamePhase:
    return GamePhase.FLEET_SELECTION if mode == GameMode.TACTICAL else GamePhase.SETUP


def _prepare_players(state: GameState) -> None:
    """Give Classic players the fixed roster and everyone a shot grid per opponent."""
    dims = state.dimensions
    for player in state.players:
        if state.game_mode == GameMode.CLASSIC and not player.ships:
            player.ships = [spec.build() for spec in state.ships_config]
        for other in state.players:
            if other.id != player.id and other.id not in player.shots:
                player.shots[other.id] = create_empty_grid(dims.rows, dims.cols)


def join_game(state: GameState, player_name: str) -> tuple[GameState, str]:
    """Seat the second player in an online lobby.

    Returns:
        Tuple of (new state, the joining player's id)

    Raises:
        IllegalMoveError: If the game is not waiting for a player
    """
    if state.phase != GamePhase.LOBBY or len(state.players) >= state.max_players:
        raise IllegalMoveError("This game is full or has already started.")

    host = state.players[0]
    # Nobody has deployed in the lobby, so the host's board is still the bare map
    player = state.rules.initialize_player(PLAYER_IDS[1], player_name, False, copy_grid(host.grid))
    new_state = state.copy()
    new_state.players.append(player)
    new_state.phase = _drafting_phase(new_state.game_mode)
    _prepare_players(new_state)

    logger.info(f"{player.name} joined game {state.game_id}")
    return new_state, player.id


def validate_fleet(state: GameState, ship_types: list[ShipType]) -> list[Ship]:
    """Check a drafted roster and build its unplaced ships.

    Raises:
        IllegalMoveError: If the roster lacks exactly one Mothership, repeats
            a type, uses a type outside the catalog or exceeds the budget
    """
    types = [ShipType(t) for t in ship_types]
    if types.count(ShipType.MOTHERSHIP) != 1:
        raise IllegalMoveError("Your fleet must include exactly one Mothership.")
    if len(set(types)) != len(types):
        raise IllegalMoveError("Each ship type can only be drafted once.")

    specs = []
    for ship_type in types:
        spec = spec_for_type(ship_type, state.ships_config)
        if spec is None:
            raise IllegalMoveError(f"{ship_type.value} is not available in this game.")
        specs.append(spec)

    cost = sum(spec.point_cost for spec in specs)
    if cost > state.fleet_budget:
        raise IllegalMoveError(f"Fleet costs {cost} points but the budget is {state.fleet_budget}.")
    return [spec.build() for spec in specs]


def _require_turn(state: GameState, player_id: str, phase: GamePhase) -> Player:
    if state.phase != phase:
        raise IllegalMoveError(f"Expected phase {phase.value}, game is in {state.phase.value}.")
    if state.current_player_id != player_id:
        raise IllegalMoveError("It's not your turn.")
    player = state.player(player_id)
    if player is None:
        raise IllegalMoveError(f"Unknown player: {player_id}")
    return player


def submit_fleet(
    state: GameState, player_id: str, ship_types: list[ShipType], rng: GameRNG | None = None
) -> GameState:
    """Record a player's drafted roster and hand control onward.

    Raises:
        IllegalMoveError: If it is not this player's draft or the roster is invalid
    """
    _require_turn(state, player_id, GamePhase.FLEET_SELECTION)
    ships = validate_fleet(state, ship_types)

    new_state = state.copy()
    new_state.player(player_id).ships = ships
    logger.info(f"Game {state.game_id}: {player_id} drafted {', '.join(s.name for s in ships)}")
    return new_state.opponent_logic.handle_fleet_ready(new_state, player_id, rng or GameRNG())


def acknowledge_ai_fleet(state: GameState) -> GameState:
    """Leave the AI fleet reveal and start deployment."""
    if state.phase != GamePhase.AI_FLEET_SELECTION:
        return state
    return state.with_changes(phase=GamePhase.SETUP)


def submit_placement(
    state: GameState,
    player_id: str,
    placements: dict[str, Placement],
    rng: GameRNG | None = None,
) -> GameState:
    """Deploy a player's whole roster and mark them ready.

    Args:
        state: Current game state (not modified)
        player_id: Deploying player
        placements: Ship name -> placement, one entry per ship in the roster
        rng: Random source for the AI's deployment, if it follows

    Raises:
        IllegalMoveError: If a ship is missing a placement or cannot be placed
    """
    player = _require_turn(state, player_id, GamePhase.SETUP)
    if player.is_ready:
        raise IllegalMoveError("Your fleet is already deployed.")
    missing = [s.name for s in player.ships if s.name not in placements]
    if missing:
        raise IllegalMoveError(f"Place every ship before confirming: {', '.join(missing)}")

    grid = copy_grid(player.grid)
    placed = []
    for ship in player.ships:
        p = placements[ship.name]
        try:
            grid, ship = place_ship(grid, ship, p.x, p.y, p.horizontal)
        except IllegalMoveError:
            raise IllegalMoveError(f"Cannot place {ship.name} there.") from None
        placed.append(ship)

    new_state = state.copy()
    deployed = new_state.player(player_id)
    deployed.grid = grid
    deployed.ships = placed
    deployed.is_ready = True
    logger.info(f"Game {state.game_id}: {player_id} deployed {len(placed)} ships")
    return new_state.opponent_logic.handle_setup_ready(new_state, player_id, rng or GameRNG())


def auto_place_fleet(state: GameState, player_id: str, rng: GameRNG | None = None) -> dict[str, Placement]:
    """Suggest a full deployment for a player using the AI's placement heuristic."""
    player = state.player(player_id)
    _, ships = place_fleet_strategically(player.ships, player.grid, state.dimensions, rng)
    placements = {}
    for ship in ships:
        first, last = ship.positions[0], ship.positions[-1]
        placements[ship.name] = Placement(first.x, first.y, horizontal=first.y == last.y)
    return placements
