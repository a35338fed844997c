"""Board model: grid creation, asteroid fields and ship placement.

This module handles:
1. Empty grids and best-effort asteroid scattering
2. Placement legality and ship placement
3. Strategic fleet placement for AI players
4. The grid a relocating ship must fit into
"""

import logging
from dataclasses import dataclass

from ..models.cell import (
    TACTICAL_RESHOOTABLE,
    CellState,
    Coord,
    Grid,
    GridDimensions,
    copy_grid,
    create_empty_grid,
)
from ..models.game import GameState
from ..models.player import Player
from ..models.ship import Ship, ShipType
from ..utils.constants import ASTEROID_PLACEMENT_ATTEMPTS, RANDOM_PLACEMENT_ATTEMPTS
from ..utils.coords import in_bounds, neighbors4
from ..utils.rng import GameRNG
from .errors import IllegalMoveError

logger = logging.getLogger(__name__)

__all__ = [
    "Placement",
    "can_place_ship",
    "create_empty_grid",
    "place_fleet_strategically",
    "place_ship",
    "relocation_grid",
    "scatter_asteroids",
    "ship_run",
]


@dataclass(frozen=True)
class Placement:
    """Top-left cell and orientation for a ship."""

    x: int
    y: int
    horizontal: bool = True


def ship_run(length: int, x: int, y: int, horizontal: bool) -> list[Coord]:
    """Cells covered by a ship of the given length starting at (x, y)."""
    if horizontal:
        return [Coord(x + i, y) for i in range(length)]
    return [Coord(x, y + i) for i in range(length)]


def scatter_asteroids(
    grid: Grid,
    count: int,
    rng: GameRNG | None = None,
    max_attempts: int = ASTEROID_PLACEMENT_ATTEMPTS,
) -> Grid:
    """Place up to `count` asteroids on distinct empty cells.

    Best effort: gives up after max_attempts random probes, so a dense board
    ends up with fewer asteroids than requested.

    Args:
        grid: Source grid (not modified)
        count: Number of asteroids wanted
        rng: Random source
        max_attempts: Probe budget

    Returns:
        New grid with asteroids added
    """
    rng = rng or GameRNG()
    new_grid = copy_grid(grid)
    rows, cols = len(new_grid), len(new_grid[0])
    placed = 0
    attempts = 0
    while placed < count and attempts < max_attempts:
        x = rng.randrange(cols)
        y = rng.randrange(rows)
        if new_grid[y][x] == CellState.EMPTY:
            new_grid[y][x] = CellState.ASTEROID
            placed += 1
        attempts += 1

    if placed < count:
        logger.warning(f"Placed {placed} of {count} asteroids after {attempts} attempts")
    return new_grid


def can_place_ship(
    grid: Grid, length: int, x: int, y: int, horizontal: bool, dims: GridDimensions
) -> bool:
    """True iff every cell of the run is in bounds and currently EMPTY."""
    for cell in ship_run(length, x, y, horizontal):
        if not in_bounds(cell.x, cell.y, dims) or grid[cell.y][cell.x] != CellState.EMPTY:
            return False
    return True


def place_ship(grid: Grid, ship: Ship, x: int, y: int, horizontal: bool) -> tuple[Grid, Ship]:
    """Mark a ship's run on a copy of the grid.

    Args:
        grid: Source grid (not modified)
        ship: Ship to place (not modified)
        x: Column of the first cell
        y: Row of the first cell
        horizontal: Orientation

    Returns:
        Tuple of (new grid, copy of the ship with positions assigned)

    Raises:
        IllegalMoveError: If the run is out of bounds or overlaps a non-empty cell
    """
    dims = GridDimensions(rows=len(grid), cols=len(grid[0]))
    if not can_place_ship(grid, ship.length, x, y, horizontal, dims):
        raise IllegalMoveError(f"Cannot place {ship.name} at ({x}, {y})")

    new_grid = copy_grid(grid)
    positions = ship_run(ship.length, x, y, horizontal)
    for pos in positions:
        new_grid[pos.y][pos.x] = CellState.SHIP
    placed = ship.copy()
    placed.positions = positions
    return new_grid, placed


def _placement_score(
    grid: Grid, length: int, x: int, y: int, horizontal: bool, dims: GridDimensions, rng: GameRNG
) -> float:
    """Score a candidate AI placement: avoid edges, hug asteroids for cover."""
    score = 0.0
    touches_asteroid = False
    for cell in ship_run(length, x, y, horizontal):
        if cell.x in (0, dims.cols - 1) or cell.y in (0, dims.rows - 1):
            score -= 5 - length
        for n in neighbors4(cell, dims):
            if grid[n.y][n.x] == CellState.ASTEROID:
                touches_asteroid = True
    if touches_asteroid:
        score += 15
    return score + rng.random()


def place_fleet_strategically(
    ships: list[Ship], grid: Grid, dims: GridDimensions, rng: GameRNG | None = None
) -> tuple[Grid, list[Ship]]:
    """Place a whole fleet the way the AI deploys.

    The Mothership goes first, then ships from longest to shortest. Each ship
    takes a random pick among the best-scoring runs. If no run fits, a
    bounded random search is tried; a ship that still cannot be placed is
    logged and left out. The returned roster keeps the input order.

    Args:
        ships: Fleet to place (positions are ignored)
        grid: Starting grid, usually empty water plus asteroids
        dims: Board dimensions
        rng: Random source

    Returns:
        Tuple of (new grid, placed ships)
    """
    rng = rng or GameRNG()
    new_grid = copy_grid(grid)
    placed: list[Ship] = []
    ordered = sorted(
        ships, key=lambda s: (s.ship_type != ShipType.MOTHERSHIP, -s.length)
    )

    for ship in ordered:
        best_score = float("-inf")
        candidates: list[Placement] = []
        for y in range(dims.rows):
            for x in range(dims.cols):
                for horizontal in (True, False):
                    if not can_place_ship(new_grid, ship.length, x, y, horizontal, dims):
                        continue
                    score = _placement_score(grid, ship.length, x, y, horizontal, dims, rng)
                    if score > best_score:
                        best_score = score
                        candidates = [Placement(x, y, horizontal)]
                    elif score == best_score:
                        candidates.append(Placement(x, y, horizontal))

        choice = rng.choice(candidates) if candidates else None
        if choice is None:
            choice = _random_placement(new_grid, ship.length, dims, rng)
        if choice is None:
            logger.warning(f"Failed to place ship: {ship.name}")
            continue

        new_grid, placed_ship = place_ship(new_grid, ship, choice.x, choice.y, choice.horizontal)
        placed.append(placed_ship)

    order = [s.name for s in ships]
    placed.sort(key=lambda s: order.index(s.name))
    return new_grid, placed


def _random_placement(
    grid: Grid, length: int, dims: GridDimensions, rng: GameRNG
) -> Placement | None:
    for _ in range(RANDOM_PLACEMENT_ATTEMPTS):
        horizontal = rng.random() < 0.5
        x = rng.randrange(dims.cols)
        y = rng.randrange(dims.rows)
        if can_place_ship(grid, length, x, y, horizontal, dims):
            return Placement(x, y, horizontal)
    return None


def relocation_grid(state: GameState, player: Player, ship: Ship) -> Grid:
    """Build the grid a relocating ship must fit into.

    Starts from the owner's board with the moving ship lifted off. Cells that
    would hide the ship from the opponent are marked as blocked: decoys,
    shields on other cells, and any cell an opponent has already resolved
    (the opponent could never fire there again).

    Args:
        state: Current game state
        player: Owner of the ship
        ship: Ship being moved

    Returns:
        Grid where only EMPTY cells are legal destinations
    """
    grid = copy_grid(player.grid)
    for pos in ship.positions:
        grid[pos.y][pos.x] = CellState.EMPTY
    for pos in player.decoy_positions:
        grid[pos.y][pos.x] = CellState.DECOY
    for pos in player.shielded_positions:
        if pos not in ship.positions:
            grid[pos.y][pos.x] = CellState.MISS

    for other in state.players:
        if other.id == player.id:
            continue
        shots = other.shots.get(player.id)
        if shots is None:
            continue
        for y, row in enumerate(shots):
            for x, cell in enumerate(row):
                if cell not in TACTICAL_RESHOOTABLE and not ship.occupies(Coord(x, y)):
                    if grid[y][x] == CellState.EMPTY:
                        grid[y][x] = CellState.MISS
    return grid
