"""Shared fixtures: games already past setup with known fleet layouts."""

import pytest

from fleet_tactics.engine.board import place_ship
from fleet_tactics.engine.setup import create_game
from fleet_tactics.models.catalog import CLASSIC_SHIPS, TACTICAL_SHIP_POOL, spec_for_type
from fleet_tactics.models.cell import create_empty_grid
from fleet_tactics.models.game import GameMode, GamePhase, GameState, OpponentType
from fleet_tactics.models.ship import ShipType
from fleet_tactics.utils import RNG_SEED_DEFAULT, GameRNG

# Ship type -> (x, y, horizontal); every ship sits in its own row band
TACTICAL_LAYOUT = {
    ShipType.MOTHERSHIP: (0, 0, True),  # A1-B1
    ShipType.REPAIRSHIP: (0, 2, True),
    ShipType.RADARSHIP: (0, 4, True),
    ShipType.JAMSHIP: (0, 6, True),
    ShipType.DECOYSHIP: (0, 8, True),
    ShipType.CAMOSHIP: (0, 10, True),
    ShipType.SCOUTSHIP: (6, 0, True),
    ShipType.SHIELDSHIP: (6, 2, True),
    ShipType.COMMANDSHIP: (6, 4, True),
    ShipType.SUPPORTSHIP: (6, 6, True),
}

CLASSIC_LAYOUT = {
    ShipType.CARRIER: (0, 0, True),
    ShipType.BATTLESHIP: (0, 2, True),
    ShipType.CRUISER: (0, 4, True),
    ShipType.SUBMARINE: (0, 6, True),
    ShipType.DESTROYER: (0, 8, True),
}


def deploy_fleet(state: GameState, player_id: str, layout: dict) -> None:
    """Place the given ships for a player on an otherwise empty board (mutates state)."""
    catalog = CLASSIC_SHIPS if state.game_mode == GameMode.CLASSIC else TACTICAL_SHIP_POOL
    player = state.player(player_id)
    grid = create_empty_grid(state.dimensions.rows, state.dimensions.cols)
    ships = []
    for ship_type, (x, y, horizontal) in layout.items():
        grid, ship = place_ship(grid, spec_for_type(ship_type, catalog).build(), x, y, horizontal)
        ships.append(ship)
    player.grid = grid
    player.ships = ships
    player.is_ready = True


def start_battle(p1_layout: dict, p2_layout: dict, mode: GameMode = GameMode.TACTICAL) -> GameState:
    """Alice (human, p1) against Bob (AI, p2), Alice to move."""
    state = create_game(
        mode=mode,
        opponent_type=OpponentType.AI,
        player_name="Alice",
        opponent_name="Bob",
        rng=GameRNG(RNG_SEED_DEFAULT),
        game_id="game-test",
    )
    deploy_fleet(state, "p1", p1_layout)
    deploy_fleet(state, "p2", p2_layout)
    state.phase = GamePhase.PLAYING
    state.current_player_id = "p1"
    return state


@pytest.fixture
def battle() -> GameState:
    """Tactical game with both full fleets deployed in TACTICAL_LAYOUT."""
    return start_battle(TACTICAL_LAYOUT, TACTICAL_LAYOUT)


@pytest.fixture
def classic_battle() -> GameState:
    """Classic game with both rosters deployed in CLASSIC_LAYOUT."""
    return start_battle(CLASSIC_LAYOUT, CLASSIC_LAYOUT, GameMode.CLASSIC)


@pytest.fixture
def make_battle():
    """Factory for games with custom fleets: make_battle(p1_layout, p2_layout, mode)."""
    return start_battle
