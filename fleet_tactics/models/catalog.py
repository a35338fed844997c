"""Ship catalogs and per-mode game configuration."""

from dataclasses import dataclass

from ..utils.constants import (
    CLASSIC_FLEET_BUDGET,
    GRID_COLS,
    GRID_ROWS,
    TACTICAL_FLEET_BUDGET,
)
from .cell import GridDimensions
from .game import GameMode
from .ship import ShipSpec, ShipType

CLASSIC_SHIPS: tuple[ShipSpec, ...] = (
    ShipSpec("Carrier", ShipType.CARRIER, 5),
    ShipSpec("Battleship", ShipType.BATTLESHIP, 4),
    ShipSpec("Cruiser", ShipType.CRUISER, 3),
    ShipSpec("Submarine", ShipType.SUBMARINE, 3),
    ShipSpec("Destroyer", ShipType.DESTROYER, 2),
)

TACTICAL_SHIP_POOL: tuple[ShipSpec, ...] = (
    ShipSpec("Mothership", ShipType.MOTHERSHIP, 2, 0),
    ShipSpec("Camoship", ShipType.CAMOSHIP, 4, 7),
    ShipSpec("Commandship", ShipType.COMMANDSHIP, 5, 7),
    ShipSpec("Scoutship", ShipType.SCOUTSHIP, 3, 6),
    ShipSpec("Radarship", ShipType.RADARSHIP, 3, 4),
    ShipSpec("Shieldship", ShipType.SHIELDSHIP, 3, 5),
    ShipSpec("Repairship", ShipType.REPAIRSHIP, 3, 4),
    ShipSpec("Jamship", ShipType.JAMSHIP, 3, 4),
    ShipSpec("Decoyship", ShipType.DECOYSHIP, 4, 3),
    ShipSpec("Supportship", ShipType.SUPPORTSHIP, 3, 3),
)


@dataclass(frozen=True)
class GameConfig:
    """Board size, ship catalog and drafting budget for one game mode."""

    dimensions: GridDimensions
    ships: tuple[ShipSpec, ...]
    fleet_budget: int


def game_config_for(mode: GameMode) -> GameConfig:
    """Return the configuration for a game mode.

    Args:
        mode: CLASSIC or TACTICAL

    Returns:
        GameConfig for that mode
    """
    dims = GridDimensions(rows=GRID_ROWS, cols=GRID_COLS)
    if mode == GameMode.TACTICAL:
        return GameConfig(dimensions=dims, ships=TACTICAL_SHIP_POOL, fleet_budget=TACTICAL_FLEET_BUDGET)
    return GameConfig(dimensions=dims, ships=CLASSIC_SHIPS, fleet_budget=CLASSIC_FLEET_BUDGET)


def spec_for_type(ship_type: ShipType, catalog: tuple[ShipSpec, ...]) -> ShipSpec | None:
    """Find the catalog entry for a ship type."""
    for spec in catalog:
        if spec.ship_type == ship_type:
            return spec
    return None
