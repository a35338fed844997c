"""Probability heatmap over an enemy board.

The heatmap answers "where is a ship most likely to be?" using only what
the shooter has observed on their shot grid plus the lengths of the ships
still afloat. Every run of a ship length that avoids known misses adds
weight to the cells it covers; weights are then boosted around known hits
and broken shields.

The same map built from the opponent's shot grid against the AI's own
board doubles as a threat map for defensive decisions.
"""

import logging
import math

from ..models.cell import CellState, Coord, Grid, GridDimensions
from ..models.player import Player
from ..models.ship import Ship, ShipType
from ..utils.constants import (
    CAMO_MOTHERSHIP_BONUS,
    CAMO_SIZE,
    HIT_ADJACENT_MULTIPLIER,
    MULTI_TARGET_COUNT,
    SHIELD_ADJACENT_MULTIPLIER,
)
from ..utils.coords import in_bounds, neighbors4
from ..utils.rng import GameRNG

logger = logging.getLogger(__name__)

HeatMap = list[list[float]]

# Weight for enemy ships already identified by a hit. Higher = hunt first.
TARGET_PRIORITY: dict[ShipType, float] = {
    ShipType.REPAIRSHIP: 1.5,
    ShipType.JAMSHIP: 1.4,
    ShipType.SCOUTSHIP: 1.4,
    ShipType.SHIELDSHIP: 1.3,
    ShipType.SUPPORTSHIP: 1.2,
    ShipType.CAMOSHIP: 1.2,
    ShipType.COMMANDSHIP: 1.1,
}

# Shot-grid states the AI may still fire at
OPEN_STATES = frozenset({CellState.EMPTY, CellState.RADAR_CONTACT})


def _run(length: int, x: int, y: int, horizontal: bool) -> list[Coord]:
    if horizontal:
        return [Coord(x + i, y) for i in range(length)]
    return [Coord(x, y + i) for i in range(length)]


def _run_is_open(shots: Grid, cells: list[Coord], dims: GridDimensions) -> bool:
    """A run is possible if it stays on the board and crosses no known MISS."""
    for c in cells:
        if not in_bounds(c.x, c.y, dims) or shots[c.y][c.x] == CellState.MISS:
            return False
    return True


def _accounts_for_hits(shots: Grid, cells: list[Coord], hits: set[Coord], horizontal: bool) -> bool:
    """Every known HIT in the run's row/column span must be covered by the run."""
    start, end = cells[0], cells[-1]
    if horizontal:
        span = {h for h in hits if h.y == start.y and start.x <= h.x <= end.x}
    else:
        span = {h for h in hits if h.x == start.x and start.y <= h.y <= end.y}
    covered = {c for c in cells if shots[c.y][c.x] == CellState.HIT}
    return covered == span


def _is_identified(ship: Ship, shots: Grid) -> bool:
    return any(shots[p.y][p.x] == CellState.HIT for p in ship.positions)


def build_probability_map(target: Player, shots: Grid, dims: GridDimensions) -> HeatMap:
    """Score every cell of the target's board by how many ship placements cover it.

    Args:
        target: Player whose ships are being searched for (only unsunk
            ships and their lengths matter, plus which ones are already
            identified by a hit on the shot grid)
        shots: What the shooter has observed on the target's board
        dims: Board dimensions

    Returns:
        rows x cols grid of non-negative weights
    """
    heat: HeatMap = [[0.0 for _ in range(dims.cols)] for _ in range(dims.rows)]
    hits = {
        Coord(x, y)
        for y in range(dims.rows)
        for x in range(dims.cols)
        if shots[y][x] == CellState.HIT
    }

    for ship in target.ships:
        if ship.is_sunk:
            continue
        weight = TARGET_PRIORITY.get(ship.ship_type, 1.0) if _is_identified(ship, shots) else 1.0
        for y in range(dims.rows):
            for x in range(dims.cols):
                for horizontal in (True, False):
                    cells = _run(ship.length, x, y, horizontal)
                    if not _run_is_open(shots, cells, dims):
                        continue
                    if not _accounts_for_hits(shots, cells, hits, horizontal):
                        continue
                    for c in cells:
                        heat[c.y][c.x] += weight

    # Finish the kill: each adjacent hit boosts an unexplored cell again
    for hit in hits:
        for n in neighbors4(hit, dims):
            if shots[n.y][n.x] == CellState.EMPTY:
                heat[n.y][n.x] *= HIT_ADJACENT_MULTIPLIER

    # A broken shield usually sits on or next to something worth protecting
    for y in range(dims.rows):
        for x in range(dims.cols):
            if shots[y][x] == CellState.SHIELD_HIT:
                center = Coord(x, y)
                for c in [center] + neighbors4(center, dims):
                    heat[c.y][c.x] *= SHIELD_ADJACENT_MULTIPLIER

    return heat


def find_best_targets(heat: HeatMap, shots: Grid) -> list[Coord]:
    """All open cells sharing the maximum heat."""
    best_score = -1.0
    best: list[Coord] = []
    for y, row in enumerate(heat):
        for x, score in enumerate(row):
            if shots[y][x] not in OPEN_STATES:
                continue
            if score > best_score:
                best_score = score
                best = [Coord(x, y)]
            elif score == best_score:
                best.append(Coord(x, y))
    return best


def find_best_radar_targets(heat: HeatMap, shots: Grid, dims: GridDimensions) -> list[Coord]:
    """Up to four hot open cells, spread out so no two touch (diagonals included).

    If the board is too crowded to keep them apart, the hottest remaining
    cells fill the gaps.
    """
    open_cells = [
        Coord(x, y)
        for y in range(dims.rows)
        for x in range(dims.cols)
        if shots[y][x] in OPEN_STATES
    ]
    # Stable sort keeps row-major order among equal scores
    open_cells.sort(key=lambda c: heat[c.y][c.x], reverse=True)

    targets: list[Coord] = []
    for cell in open_cells:
        if len(targets) >= MULTI_TARGET_COUNT:
            break
        if not any(abs(t.x - cell.x) <= 1 and abs(t.y - cell.y) <= 1 for t in targets):
            targets.append(cell)

    for cell in open_cells:
        if len(targets) >= MULTI_TARGET_COUNT:
            break
        if cell not in targets:
            targets.append(cell)
    return targets


def find_best_target_lock_targets(heat: HeatMap, shots: Grid, dims: GridDimensions) -> list[Coord]:
    return find_best_radar_targets(heat, shots, dims)


def find_jam_targets(shots: Grid, dims: GridDimensions) -> list[Coord]:
    """Four cells around the centroid of the known hits, or [] with no hits."""
    hits = [
        Coord(x, y)
        for y in range(dims.rows)
        for x in range(dims.cols)
        if shots[y][x] == CellState.HIT
    ]
    if not hits:
        return []

    # Halves round up
    cx = math.floor(sum(h.x for h in hits) / len(hits) + 0.5)
    cy = math.floor(sum(h.y for h in hits) / len(hits) + 0.5)
    center = Coord(max(0, min(dims.cols - 1, cx)), max(0, min(dims.rows - 1, cy)))

    targets = [center]
    offsets = [(-1, 0), (1, 0), (0, -1), (0, 1), (-1, -1), (1, -1), (-1, 1), (1, 1)]
    for dx, dy in offsets:
        if len(targets) >= MULTI_TARGET_COUNT:
            break
        cand = Coord(center.x + dx, center.y + dy)
        if in_bounds(cand.x, cand.y, dims) and cand not in targets:
            targets.append(cand)
    return targets


def find_best_decoy_spot(
    threat: HeatMap, owner: Player, dims: GridDimensions, rng: GameRNG | None = None
) -> Coord | None:
    """Pick empty water at the top-left of the least-threatened 2x2 block on the owner's board.

    Args:
        threat: Opponent's heatmap over the owner's board
        owner: Player placing the decoy
        dims: Board dimensions
        rng: Tie-break source
    """
    rng = rng or GameRNG()
    best_density = float("inf")
    spots: list[Coord] = []
    for y in range(dims.rows - 1):
        for x in range(dims.cols - 1):
            coord = Coord(x, y)
            if owner.grid[y][x] != CellState.EMPTY:
                continue
            if coord in owner.decoy_positions or owner.is_shielded(coord):
                continue
            density = threat[y][x] + threat[y + 1][x] + threat[y][x + 1] + threat[y + 1][x + 1]
            if density < best_density:
                best_density = density
                spots = [coord]
            elif density == best_density:
                spots.append(coord)
    return rng.choice(spots) if spots else None


def find_best_camo_spot(owner: Player, dims: GridDimensions) -> Coord | None:
    """Top-left of the 4x4 field covering the most ship cells, Mothership cells weighted up."""
    mothership = owner.ship_of_type(ShipType.MOTHERSHIP)
    best: Coord | None = None
    best_score = -1
    for y in range(dims.rows - CAMO_SIZE + 1):
        for x in range(dims.cols - CAMO_SIZE + 1):
            score = 0
            for j in range(CAMO_SIZE):
                for i in range(CAMO_SIZE):
                    cell = Coord(x + i, y + j)
                    if owner.grid[cell.y][cell.x] in (CellState.SHIP, CellState.HIT):
                        score += 1
                        if mothership is not None and mothership.occupies(cell):
                            score += CAMO_MOTHERSHIP_BONUS
            if score > best_score:
                best_score = score
                best = Coord(x, y)
    return best
